"""
Temporal Layer
==============

Pure time-domain computations: axis, projection, stacking, countdown, clock.
No I/O, no shared state.
"""

from .clock import LogicalClock, ClockExhausted
from .axis import (
    compute_axis, project_record, project_records, partition_records, build_ticks,
)
from .stacking import resolve_stacking, stack_records, placement_order, count_saturated
from .countdown import Countdown, compute_countdown

__all__ = [
    'LogicalClock',
    'ClockExhausted',
    'compute_axis',
    'project_record',
    'project_records',
    'partition_records',
    'build_ticks',
    'resolve_stacking',
    'stack_records',
    'placement_order',
    'count_saturated',
    'Countdown',
    'compute_countdown',
]
