"""
Density Dashboard
=================

Aggregates over the visible records of a layout pass: per-category totals and
a fixed-width density histogram across the axis.

Only records that survived projection are counted; excluded records never
contribute to any bucket.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Optional, Sequence, Tuple

import numpy as np

from .config import LayoutConfig
from .contracts.base import ErrorCode, InvalidConfiguration
from .contracts.layout import Axis, AxisTick, ProjectedRecord, TimelineLayout
from .contracts.records import IncidentCategory


@dataclass(frozen=True)
class DensityBucket:
    """Visible records whose date falls in [start, end] (inclusive)."""
    start: date
    end: date
    count: int


@dataclass(frozen=True)
class DashboardSummary:
    total: int
    category_counts: Tuple[Tuple[IncidentCategory, int], ...]
    buckets: Tuple[DensityBucket, ...]
    ticks: Tuple[AxisTick, ...]
    peak_bucket: Optional[DensityBucket]

    def count_for(self, category: IncidentCategory) -> int:
        return dict(self.category_counts)[category]

    def to_dict(self) -> dict:
        return {
            'total': self.total,
            'categories': {c.value: n for c, n in self.category_counts},
            'buckets': [
                {'start': b.start.isoformat(), 'end': b.end.isoformat(), 'count': b.count}
                for b in self.buckets
            ],
            'peak_bucket': None if self.peak_bucket is None else self.peak_bucket.start.isoformat(),
        }


def category_counts(projected: Sequence[ProjectedRecord]) -> Dict[IncidentCategory, int]:
    """Visible records per category; every category present, zero-filled."""
    counts = {category: 0 for category in IncidentCategory}
    for p in projected:
        counts[p.record.category_kind] += 1
    return counts


def density_histogram(
    projected: Sequence[ProjectedRecord],
    axis: Axis,
    bucket_days: int = 7
) -> Tuple[DensityBucket, ...]:
    """Counts per `bucket_days`-wide bucket covering day 0..total_days."""
    if bucket_days < 1:
        raise InvalidConfiguration.create(
            ErrorCode.INVALID_TICK_INTERVAL,
            f"bucket_days must be >= 1, got {bucket_days}",
        )

    n_buckets = axis.total_days // bucket_days + 1
    offsets = np.fromiter((p.days_from_start for p in projected), dtype=np.int64)
    counts = np.bincount(offsets // bucket_days, minlength=n_buckets)

    first = axis.start.date()
    last = axis.end.date()
    buckets = []
    for i in range(n_buckets):
        start = first + timedelta(days=i * bucket_days)
        end = min(start + timedelta(days=bucket_days - 1), last)
        buckets.append(DensityBucket(start=start, end=end, count=int(counts[i])))
    return tuple(buckets)


def build_dashboard(layout: TimelineLayout, config: Optional[LayoutConfig] = None) -> DashboardSummary:
    config = config or LayoutConfig()
    counts = category_counts(layout.projected)
    buckets = density_histogram(layout.projected, layout.axis, config.tick_interval_days)

    peak = None
    if layout.projected:
        # argmax returns the earliest bucket on ties
        peak = buckets[int(np.argmax([b.count for b in buckets]))]

    return DashboardSummary(
        total=len(layout.projected),
        category_counts=tuple(counts.items()),
        buckets=buckets,
        ticks=layout.ticks,
        peak_bucket=peak,
    )
