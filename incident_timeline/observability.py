"""
Observability & Audit Layer

RESPONSIBILITY: Audit log and metrics for layout passes
ALLOWED INPUTS: Facts reported by the engine after a pass
OUTPUTS: AuditLogEntry list, MetricPoint series

WHAT THIS LAYER MUST NOT DO:
============================
- Modify layout results
- Make decisions based on logged data
- Raise into the layout path
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple
from enum import Enum
import logging

logger = logging.getLogger(__name__)


# =============================================================================
# AUDIT ENTRIES
# =============================================================================

class AuditEventType(Enum):
    LAYOUT_PASS = "layout_pass"
    CACHE_HIT = "cache_hit"
    RECORD_EXCLUDED = "record_excluded"
    STACK_SATURATED = "stack_saturated"
    FALLBACK_AXIS = "fallback_axis"
    RECORD_MALFORMED = "record_malformed"


@dataclass(frozen=True)
class AuditLogEntry:
    """Immutable audit log entry."""
    sequence: int
    event_type: AuditEventType
    timestamp: datetime
    action: str
    entity_id: Optional[str] = None
    metadata: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            'sequence': self.sequence,
            'event_type': self.event_type.value,
            'timestamp': self.timestamp.isoformat(),
            'action': self.action,
            'entity_id': self.entity_id,
            'metadata': dict(self.metadata),
        }


class LogCollector:
    """
    Append-only audit log.

    Entries are never modified or removed; readers get copies.
    """

    def __init__(self, layer_name: str = "layout"):
        self._layer_name = layer_name
        self._entries: List[AuditLogEntry] = []

    def collect(
        self,
        event_type: AuditEventType,
        timestamp: datetime,
        action: str,
        entity_id: Optional[str] = None,
        **metadata
    ) -> AuditLogEntry:
        entry = AuditLogEntry(
            sequence=len(self._entries),
            event_type=event_type,
            timestamp=timestamp,
            action=action,
            entity_id=entity_id,
            metadata=tuple(sorted((k, str(v)) for k, v in metadata.items())),
        )
        self._entries.append(entry)
        logger.debug("[%s] %s %s", self._layer_name, event_type.value, action)
        return entry

    def get_entries(self, event_type: Optional[AuditEventType] = None) -> List[AuditLogEntry]:
        if event_type is None:
            return list(self._entries)
        return [e for e in self._entries if e.event_type == event_type]

    @property
    def layer_name(self) -> str:
        return self._layer_name

    @property
    def entry_count(self) -> int:
        return len(self._entries)


# =============================================================================
# METRICS COLLECTOR
# =============================================================================

class MetricType(Enum):
    COUNTER = "counter"
    GAUGE = "gauge"
    TIMING = "timing"


@dataclass(frozen=True)
class MetricDefinition:
    name: str
    metric_type: MetricType
    description: str


@dataclass(frozen=True)
class MetricPoint:
    metric_name: str
    value: float
    labels: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)


DEFAULT_METRICS = (
    MetricDefinition("layout_passes_total", MetricType.COUNTER, "Layout passes computed"),
    MetricDefinition("layout_cache_hits_total", MetricType.COUNTER, "Layout passes served from cache"),
    MetricDefinition("records_excluded_total", MetricType.COUNTER, "Records outside the axis window"),
    MetricDefinition("stack_saturations_total", MetricType.COUNTER, "Placements capped at max level"),
    MetricDefinition("visible_records", MetricType.GAUGE, "Records visible in the latest pass"),
    MetricDefinition("layout_duration_ms", MetricType.TIMING, "Layout computation time"),
)


class MetricsCollector:
    """Append-only metric series with registered definitions."""

    def __init__(self):
        self._metrics: Dict[str, List[MetricPoint]] = {}
        self._definitions: Dict[str, MetricDefinition] = {}
        for definition in DEFAULT_METRICS:
            self.register_metric(definition)

    def register_metric(self, definition: MetricDefinition):
        self._definitions[definition.name] = definition
        self._metrics.setdefault(definition.name, [])

    def record(self, metric_name: str, value: float, labels: Optional[Dict[str, str]] = None):
        label_tuple = tuple(sorted(labels.items())) if labels else ()
        self._metrics.setdefault(metric_name, []).append(
            MetricPoint(metric_name=metric_name, value=float(value), labels=label_tuple)
        )

    def get_metric(self, metric_name: str) -> List[MetricPoint]:
        return list(self._metrics.get(metric_name, []))

    def get_latest(self, metric_name: str) -> Optional[MetricPoint]:
        points = self._metrics.get(metric_name, [])
        return points[-1] if points else None

    def total(self, metric_name: str) -> float:
        """Sum of all points (meaningful for counters)."""
        return sum(p.value for p in self._metrics.get(metric_name, []))

    def definition(self, metric_name: str) -> Optional[MetricDefinition]:
        return self._definitions.get(metric_name)


class LayoutObservability:
    """Audit log + metrics for one engine instance."""

    def __init__(self):
        self.audit = LogCollector("layout")
        self.metrics = MetricsCollector()
