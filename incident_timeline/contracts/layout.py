"""
Timeline Layout Contracts

Responsibility:
Deterministic transformation of incident records into renderable layout values.
Input: IncidentRecord list + now -> Output: TimelineLayout

DETERMINISTIC:
Same records + same now + same config = identical layout.
No layout logic allowed in the rendering layer - all pre-calculated here.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Tuple

from .records import IncidentRecord


@dataclass(frozen=True)
class Axis:
    """The visible date window and its span in whole days."""
    start: datetime
    end: datetime
    total_days: int
    is_fallback: bool = False

    def __post_init__(self):
        if self.total_days < 1:
            raise ValueError("Axis total_days must be >= 1")

    def contains(self, value: date) -> bool:
        return self.start.date() <= value <= self.end.date()

    def to_dict(self) -> dict:
        return {
            'start': self.start.isoformat(),
            'end': self.end.isoformat(),
            'total_days': self.total_days,
            'is_fallback': self.is_fallback,
        }


@dataclass(frozen=True)
class AxisTick:
    """A labelled marker along the axis (position in percent)."""
    position: float
    date: date
    label: str


@dataclass(frozen=True)
class ProjectedRecord:
    """A record mapped onto the axis."""
    record: IncidentRecord
    days_from_start: int
    position: float

    @property
    def record_id(self) -> str:
        return self.record.record_id


@dataclass(frozen=True)
class StackedRecord:
    """A projected record with its vertical slot."""
    record: IncidentRecord
    position: float
    stack_level: int

    @property
    def record_id(self) -> str:
        return self.record.record_id

    def to_dict(self) -> dict:
        return {
            'id': self.record.record_id,
            'event_date': self.record.event_day.isoformat(),
            'category': self.record.category_kind.value,
            'position': self.position,
            'stack_level': self.stack_level,
        }


@dataclass(frozen=True)
class TimelineLayout:
    """
    Fully calculated layout pass.

    `stacked` is in placement order (ascending position, stable on ties);
    `projected` keeps input order.
    """
    axis: Axis
    projected: Tuple[ProjectedRecord, ...]
    stacked: Tuple[StackedRecord, ...]
    excluded_ids: Tuple[str, ...]
    ticks: Tuple[AxisTick, ...]
    now: datetime
    layout_hash: str

    @property
    def levels(self) -> Dict[str, int]:
        return {s.record_id: s.stack_level for s in self.stacked}

    @property
    def visible_count(self) -> int:
        return len(self.stacked)

    def to_dict(self) -> dict:
        return {
            'layout_hash': self.layout_hash,
            'now': self.now.isoformat(),
            'axis': self.axis.to_dict(),
            'ticks': [
                {'position': t.position, 'date': t.date.isoformat(), 'label': t.label}
                for t in self.ticks
            ],
            'records': [s.to_dict() for s in self.stacked],
            'excluded_ids': list(self.excluded_ids),
        }
