"""
Axis Calculator
===============

Derives the visible date window from the record set and the current moment,
and projects records onto it.

GUARANTEES:
- Deterministic for identical records, now and config
- Monotonic: an earlier record can only move `start` earlier
- Never raises for empty input (fallback window is used), unless now precedes
  the fallback month start (InvalidConfiguration NOW_BEFORE_AXIS_START)
- total_days >= 1, so downstream division is always safe

EXCLUSION POLICY:
=================
Records outside [start, end] are EXCLUDED from the projection. Clamping a
genuinely out-of-range date onto the boundary would misrepresent it; only
in-range positions are clamped, and only for floating-point safety.
"""

from __future__ import annotations
from datetime import datetime, timedelta
from typing import List, Optional, Sequence, Tuple
import logging

from ..config import LayoutConfig
from ..contracts.base import (
    ErrorCode, InvalidConfiguration,
    ensure_utc, start_of_day, end_of_day, whole_days_between,
)
from ..contracts.layout import Axis, AxisTick, ProjectedRecord
from ..contracts.records import IncidentRecord

logger = logging.getLogger(__name__)


def compute_axis(
    records: Sequence[IncidentRecord],
    now: datetime,
    config: Optional[LayoutConfig] = None
) -> Axis:
    """
    Compute the visible axis.

    Args:
        records: Incident records (may be empty)
        now: Current moment (naive values are treated as UTC)
        config: Layout options; defaults used when omitted

    Returns:
        Axis with start at midnight and end at end-of-day

    Raises:
        InvalidConfiguration: if `now` is earlier than the computed start
    """
    config = config or LayoutConfig()
    now = ensure_utc(now)

    if not records:
        start = start_of_day(config.fallback_month_start)
        end = end_of_day(now)
        is_fallback = True
    else:
        earliest = min(r.event_day for r in records)
        start = start_of_day(earliest - timedelta(days=config.lead_padding_days))
        end = end_of_day(now + timedelta(days=config.trail_padding_days))
        is_fallback = False

    if now < start:
        raise InvalidConfiguration.create(
            ErrorCode.NOW_BEFORE_AXIS_START,
            f"now ({now.isoformat()}) is earlier than axis start ({start.isoformat()})",
            now=now.isoformat(),
            start=start.isoformat(),
        )

    total_days = max(1, whole_days_between(start, end))

    return Axis(start=start, end=end, total_days=total_days, is_fallback=is_fallback)


def project_record(record: IncidentRecord, axis: Axis) -> Optional[ProjectedRecord]:
    """Project one record, or None if it falls outside the axis."""
    days_from_start = (record.event_day - axis.start.date()).days
    if days_from_start < 0 or days_from_start > axis.total_days:
        return None

    position = days_from_start / axis.total_days * 100
    position = max(0.0, min(100.0, position))

    return ProjectedRecord(
        record=record,
        days_from_start=days_from_start,
        position=position,
    )


def partition_records(
    records: Sequence[IncidentRecord],
    axis: Axis
) -> Tuple[Tuple[ProjectedRecord, ...], Tuple[IncidentRecord, ...]]:
    """Split records into (visible projections, excluded records), input order kept."""
    projected: List[ProjectedRecord] = []
    excluded: List[IncidentRecord] = []

    for record in records:
        p = project_record(record, axis)
        if p is None:
            excluded.append(record)
        else:
            projected.append(p)

    if excluded:
        logger.debug(
            "Excluded %d record(s) outside axis %s..%s",
            len(excluded), axis.start.date(), axis.end.date()
        )

    return tuple(projected), tuple(excluded)


def project_records(
    records: Sequence[IncidentRecord],
    axis: Axis
) -> Tuple[ProjectedRecord, ...]:
    """Visible projections in input order."""
    projected, _ = partition_records(records, axis)
    return projected


def build_ticks(axis: Axis, interval_days: int = 7) -> Tuple[AxisTick, ...]:
    """Tick markers every `interval_days` from day 0 to total_days inclusive."""
    if interval_days < 1:
        raise InvalidConfiguration.create(
            ErrorCode.INVALID_TICK_INTERVAL,
            f"interval_days must be >= 1, got {interval_days}",
        )

    first = axis.start.date()
    ticks = []
    for day in range(0, axis.total_days + 1, interval_days):
        tick_date = first + timedelta(days=day)
        ticks.append(AxisTick(
            position=day / axis.total_days * 100,
            date=tick_date,
            label=f"{tick_date:%b} {tick_date.day}",
        ))
    return tuple(ticks)
