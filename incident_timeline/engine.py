"""
Timeline Layout Engine
======================

Orchestrates a full layout pass:

    records -> compute_axis -> partition_records -> stack_records -> TimelineLayout

LAYER FLOW:
===========
1. Clock: supplies "now" (injectable, replayable)
2. Temporal: axis, projection, stacking (pure functions)
3. Cache: identical inputs return the identical layout object
4. Observability: records every pass, exclusion and saturation

Each pass is synchronous and keeps no mutable state besides the cache.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional, Sequence
import hashlib
import logging
import time

from .config import LayoutConfig
from .contracts.base import ensure_utc
from .contracts.layout import TimelineLayout
from .contracts.records import IncidentRecord
from .observability import AuditEventType, LayoutObservability
from .temporal.axis import build_ticks, compute_axis, partition_records
from .temporal.clock import LogicalClock
from .temporal.stacking import count_saturated, stack_records

logger = logging.getLogger(__name__)


# =============================================================================
# LAYOUT CACHE
# =============================================================================

@dataclass(frozen=True)
class CacheStats:
    total_entries: int
    hit_count: int
    miss_count: int
    eviction_count: int
    hit_rate: float


class LayoutCache:
    """Bounded memo of layout passes keyed by input hash."""

    def __init__(self, max_entries: int = 128):
        self._max_entries = max_entries
        self._cache: Dict[str, TimelineLayout] = {}
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def get(self, key: str) -> Optional[TimelineLayout]:
        layout = self._cache.get(key)
        if layout is None:
            self._misses += 1
            return None
        self._hits += 1
        return layout

    def put(self, key: str, layout: TimelineLayout):
        if self._max_entries == 0:
            return
        if key not in self._cache and len(self._cache) >= self._max_entries:
            self._evict_oldest()
        self._cache[key] = layout

    def _evict_oldest(self):
        # dicts keep insertion order
        oldest_key = next(iter(self._cache))
        del self._cache[oldest_key]
        self._evictions += 1

    def clear(self):
        self._cache.clear()

    def get_stats(self) -> CacheStats:
        total = self._hits + self._misses
        return CacheStats(
            total_entries=len(self._cache),
            hit_count=self._hits,
            miss_count=self._misses,
            eviction_count=self._evictions,
            hit_rate=self._hits / total if total > 0 else 0.0,
        )


def compute_layout_hash(
    records: Sequence[IncidentRecord],
    now: datetime,
    config: LayoutConfig
) -> str:
    """
    Hash of everything a layout pass returns.

    Every record field is hashed, payload included, since the layout
    carries the record objects themselves.
    """
    hasher = hashlib.sha256()
    hasher.update(ensure_utc(now).isoformat().encode('utf-8'))
    hasher.update(b"\x00")
    hasher.update(config.fingerprint().encode('utf-8'))
    for record in records:
        hasher.update(b"\x00")
        hasher.update(repr(record).encode('utf-8'))
    return hasher.hexdigest()


# =============================================================================
# ENGINE
# =============================================================================

class TimelineLayoutEngine:
    """
    Computes TimelineLayouts.

    DETERMINISTIC:
    ==============
    Same records + same now + same config = the same layout (cached or not).
    """

    def __init__(
        self,
        config: Optional[LayoutConfig] = None,
        clock: Optional[LogicalClock] = None,
        observability: Optional[LayoutObservability] = None
    ):
        self._config = config or LayoutConfig()
        self._clock = clock or LogicalClock.live(record_ticks=False)
        self._observability = observability or LayoutObservability()
        self._cache = LayoutCache(self._config.cache_max_entries)

    @property
    def config(self) -> LayoutConfig:
        return self._config

    @property
    def observability(self) -> LayoutObservability:
        return self._observability

    def cache_stats(self) -> CacheStats:
        return self._cache.get_stats()

    def layout(
        self,
        records: Sequence[IncidentRecord],
        now: Optional[datetime] = None
    ) -> TimelineLayout:
        """
        Run (or recall) a layout pass.

        Args:
            records: Incident records in source order
            now: Current moment; read from the clock when omitted

        Raises:
            InvalidConfiguration: if `now` precedes the computed axis start
        """
        now = ensure_utc(now) if now is not None else self._clock.now()
        records = tuple(records)
        key = compute_layout_hash(records, now, self._config)

        audit = self._observability.audit
        metrics = self._observability.metrics

        cached = self._cache.get(key)
        if cached is not None:
            audit.collect(AuditEventType.CACHE_HIT, now, "layout recalled", entity_id=key[:16])
            metrics.record("layout_cache_hits_total", 1)
            return cached

        started = time.perf_counter()
        layout = self._compute(records, now, key)
        elapsed_ms = (time.perf_counter() - started) * 1000

        self._cache.put(key, layout)
        self._report(layout, elapsed_ms)
        return layout

    def _compute(self, records: Sequence[IncidentRecord], now: datetime, key: str) -> TimelineLayout:
        config = self._config
        axis = compute_axis(records, now, config)
        projected, excluded = partition_records(records, axis)
        stacked = stack_records(projected, config.proximity_threshold, config.max_stack_level)

        return TimelineLayout(
            axis=axis,
            projected=projected,
            stacked=stacked,
            excluded_ids=tuple(r.record_id for r in excluded),
            ticks=build_ticks(axis, config.tick_interval_days),
            now=now,
            layout_hash=key,
        )

    def _report(self, layout: TimelineLayout, elapsed_ms: float):
        audit = self._observability.audit
        metrics = self._observability.metrics
        now = layout.now

        if layout.axis.is_fallback:
            audit.collect(
                AuditEventType.FALLBACK_AXIS, now, "no records, fallback window used",
                start=layout.axis.start.date().isoformat(),
            )

        for record_id in layout.excluded_ids:
            audit.collect(
                AuditEventType.RECORD_EXCLUDED, now, "record outside axis window",
                entity_id=record_id,
            )

        saturated = count_saturated(
            layout.stacked, self._config.proximity_threshold, self._config.max_stack_level
        )
        if saturated:
            audit.collect(
                AuditEventType.STACK_SATURATED, now, "stack levels saturated",
                count=saturated, max_level=self._config.max_stack_level,
            )
            logger.info(
                "%d record(s) share the top stack level %d",
                saturated, self._config.max_stack_level
            )

        audit.collect(
            AuditEventType.LAYOUT_PASS, now, "layout computed",
            entity_id=layout.layout_hash[:16],
            visible=layout.visible_count,
            excluded=len(layout.excluded_ids),
            total_days=layout.axis.total_days,
        )

        metrics.record("layout_passes_total", 1)
        metrics.record("records_excluded_total", len(layout.excluded_ids))
        metrics.record("stack_saturations_total", saturated)
        metrics.record("visible_records", layout.visible_count)
        metrics.record("layout_duration_ms", elapsed_ms)
