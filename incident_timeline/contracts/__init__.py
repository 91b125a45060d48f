"""
Contracts Package

Immutable types shared by every layer. Layers communicate only through these.
"""

from .base import (
    ErrorCode, Error, LayoutError, InvalidConfiguration, MalformedRecord,
)
from .records import (
    IncidentCategory, CategoryStyle, CATEGORY_STYLES, style_for,
    Attachment, IncidentRecord,
)
from .layout import (
    Axis, AxisTick, ProjectedRecord, StackedRecord, TimelineLayout,
)

__all__ = [
    # Errors
    'ErrorCode',
    'Error',
    'LayoutError',
    'InvalidConfiguration',
    'MalformedRecord',
    # Records
    'IncidentCategory',
    'CategoryStyle',
    'CATEGORY_STYLES',
    'style_for',
    'Attachment',
    'IncidentRecord',
    # Layout
    'Axis',
    'AxisTick',
    'ProjectedRecord',
    'StackedRecord',
    'TimelineLayout',
]
