"""
Incident Timeline Layout Engine

Maps timestamped incident records onto (axis position, stack level) pairs for a
timeline and density dashboard.

LAYERS:
=======
- contracts:    immutable records, layout values, errors
- temporal:     axis calculator, stacking resolver, countdown, clock
- engine:       orchestrated, memoized layout passes
- dashboard:    category totals and density histogram
- presentation: view models for the rendering layer
- ingestion:    record payload validation
"""

from .config import LayoutConfig
from .contracts import (
    ErrorCode, Error, LayoutError, InvalidConfiguration, MalformedRecord,
    IncidentCategory, IncidentRecord, Attachment,
    Axis, AxisTick, ProjectedRecord, StackedRecord, TimelineLayout,
)
from .temporal import (
    LogicalClock, compute_axis, project_records, build_ticks,
    resolve_stacking, stack_records, compute_countdown,
)
from .engine import TimelineLayoutEngine
from .dashboard import build_dashboard

__version__ = "0.1.0"

__all__ = [
    'LayoutConfig',
    'ErrorCode',
    'Error',
    'LayoutError',
    'InvalidConfiguration',
    'MalformedRecord',
    'IncidentCategory',
    'IncidentRecord',
    'Attachment',
    'Axis',
    'AxisTick',
    'ProjectedRecord',
    'StackedRecord',
    'TimelineLayout',
    'LogicalClock',
    'compute_axis',
    'project_records',
    'build_ticks',
    'resolve_stacking',
    'stack_records',
    'compute_countdown',
    'TimelineLayoutEngine',
    'build_dashboard',
]
