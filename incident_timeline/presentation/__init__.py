"""
Presentation Layer

Read-only view models built from layout results. No layout logic.
"""

from .viewmodels import (
    MarkerViewModel, TimelineEntryViewModel, TickViewModel, DashboardViewModel,
)
from .mapper import PresentationMapper, format_day

__all__ = [
    'MarkerViewModel',
    'TimelineEntryViewModel',
    'TickViewModel',
    'DashboardViewModel',
    'PresentationMapper',
    'format_day',
]
