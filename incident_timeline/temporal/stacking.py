"""
Stacking Resolver
=================

Assigns each projected record a vertical stack level so that records whose
positions are closer than the proximity threshold never share a level.

ALGORITHM (greedy, order-sensitive):
====================================
1. Sort by ascending position; ties keep input order
2. For each record, the collision set is every already-placed record with
   |pos - placed_pos| < threshold (all prior placements, not just the last)
3. Take the lowest level unused by the collision set
4. If every level in [0, max_level] is taken, saturate at max_level

GUARANTEES:
- Re-running with identical input reproduces identical levels
- Levels always lie in [0, max_level]
- No two colliding records below the cap share a level
- Invalid threshold / max_level raise before any placement

The result is valid but not necessarily a globally minimal packing.
"""

from __future__ import annotations
from typing import Dict, List, Sequence, Set, Tuple
import logging

from ..config import validate_max_level, validate_threshold
from ..contracts.layout import ProjectedRecord, StackedRecord

logger = logging.getLogger(__name__)


def placement_order(projected: Sequence[ProjectedRecord]) -> List[int]:
    """Indices of `projected` in placement order (position, then input index)."""
    return sorted(range(len(projected)), key=lambda i: (projected[i].position, i))


def stack_records(
    projected: Sequence[ProjectedRecord],
    threshold: float,
    max_level: int
) -> Tuple[StackedRecord, ...]:
    """
    Resolve stack levels and return StackedRecords in placement order.

    O(n^2) in the number of visible records.
    """
    validate_threshold(threshold)
    validate_max_level(max_level)

    placed: List[Tuple[float, int]] = []
    stacked: List[StackedRecord] = []
    saturated = 0

    for index in placement_order(projected):
        item = projected[index]
        used: Set[int] = {
            level for position, level in placed
            if abs(item.position - position) < threshold
        }

        level = 0
        while level in used and level < max_level:
            level += 1
        if level in used:
            saturated += 1

        placed.append((item.position, level))
        stacked.append(StackedRecord(
            record=item.record,
            position=item.position,
            stack_level=level,
        ))

    if saturated:
        logger.debug("%d record(s) saturated at stack level %d", saturated, max_level)

    return tuple(stacked)


def resolve_stacking(
    projected: Sequence[ProjectedRecord],
    threshold: float,
    max_level: int
) -> Dict[str, int]:
    """Map record id -> stack level (empty input gives an empty mapping)."""
    return {
        s.record_id: s.stack_level
        for s in stack_records(projected, threshold, max_level)
    }


def count_saturated(
    stacked: Sequence[StackedRecord],
    threshold: float,
    max_level: int
) -> int:
    """
    Number of saturated placements in `stacked` (placement order expected):
    records at max_level that collide with an earlier record at max_level.
    """
    count = 0
    earlier_top: List[float] = []
    for s in stacked:
        if s.stack_level != max_level:
            continue
        if any(abs(s.position - p) < threshold for p in earlier_top):
            count += 1
        earlier_top.append(s.position)
    return count
