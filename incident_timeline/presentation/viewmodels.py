"""
Presentation Contracts

Responsibility:
ViewModel contracts for pure UI components.
No layout math here - every number is copied from a TimelineLayout.
Selection / hover state belongs to the UI and is not modelled.
"""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class MarkerViewModel:
    """A dashboard marker at (position, stack level)."""
    record_id: str
    title: str
    position: float          # percent of axis width
    stack_level: int
    stack_height_px: int
    icon: str
    fill_token: str          # e.g. "red-500"
    border_token: str
    category_label: str
    date_label: str          # e.g. "Oct 08, 2025"


@dataclass(frozen=True)
class TimelineEntryViewModel:
    """One row of the chronological incident list."""
    index: int               # 1-based
    record_id: str
    title: str
    icon: str
    fill_token: str
    category_label: str
    date_label: str
    posted_label: Optional[str]
    attachment_count: int


@dataclass(frozen=True)
class TickViewModel:
    position: float
    label: str


@dataclass(frozen=True)
class DashboardViewModel:
    """Everything the dashboard component needs, pre-calculated."""
    heading: str
    markers: Tuple[MarkerViewModel, ...]
    ticks: Tuple[TickViewModel, ...]
    event_count_label: str   # e.g. "3 documented events"
    is_empty: bool
