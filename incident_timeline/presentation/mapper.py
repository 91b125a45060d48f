"""
Layout to ViewModel Mapper

Converts TimelineLayouts into read-only view models.

MAPPING BOUNDARY:
=================
This is the ONLY place where layout values become view models.

MAPPING RULES:
==============
1. Never recompute positions or levels
2. Unknown categories use the OTHER style
3. Chronological list is ascending by event date, stable on ties
"""

from __future__ import annotations
from datetime import date
from typing import Optional, Sequence, Tuple

from ..config import LayoutConfig
from ..contracts.layout import StackedRecord, TimelineLayout
from ..contracts.records import IncidentRecord, style_for
from .viewmodels import (
    DashboardViewModel, MarkerViewModel, TickViewModel, TimelineEntryViewModel,
)


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


class PresentationMapper:
    """Maps layout results to view models."""

    def __init__(self, config: Optional[LayoutConfig] = None):
        self._config = config or LayoutConfig()

    # =========================================================================
    # MARKERS
    # =========================================================================

    def stack_height(self, stack_level: int) -> int:
        return self._config.base_stack_height_px + stack_level * self._config.stack_step_px

    def map_marker(self, stacked: StackedRecord) -> MarkerViewModel:
        record = stacked.record
        style = style_for(record.category_kind)
        return MarkerViewModel(
            record_id=record.record_id,
            title=record.title,
            position=stacked.position,
            stack_level=stacked.stack_level,
            stack_height_px=self.stack_height(stacked.stack_level),
            icon=style.icon,
            fill_token=style.fill_token,
            border_token=style.border_token,
            category_label=style.label,
            date_label=format_day(record.event_day),
        )

    def map_dashboard(self, layout: TimelineLayout) -> DashboardViewModel:
        start = layout.axis.start.date()
        return DashboardViewModel(
            heading=f"Timeline from {start:%B} {start.day}, {start.year} to Present",
            markers=tuple(self.map_marker(s) for s in layout.stacked),
            ticks=tuple(TickViewModel(position=t.position, label=t.label) for t in layout.ticks),
            event_count_label=_plural(layout.visible_count, "documented event"),
            is_empty=layout.visible_count == 0,
        )

    # =========================================================================
    # CHRONOLOGICAL LIST
    # =========================================================================

    def map_timeline(self, records: Sequence[IncidentRecord]) -> Tuple[TimelineEntryViewModel, ...]:
        ordered = sorted(records, key=lambda r: r.event_day)
        entries = []
        for index, record in enumerate(ordered, start=1):
            style = style_for(record.category_kind)
            entries.append(TimelineEntryViewModel(
                index=index,
                record_id=record.record_id,
                title=record.title,
                icon=style.icon,
                fill_token=style.fill_token,
                category_label=style.label,
                date_label=format_day(record.event_day),
                posted_label=(
                    f"{record.created_at:%b %d, %Y %H:%M}" if record.created_at else None
                ),
                attachment_count=len(record.attachments),
            ))
        return tuple(entries)


def format_day(value: date) -> str:
    return f"{value:%b %d, %Y}"
