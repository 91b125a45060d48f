"""
Incident Record Contracts

Immutable records supplied by the record source. The layout core reads only
`record_id`, `event_date` and (for presentation) `category`; every other field
is opaque payload carried through untouched.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, Optional, Tuple

from .base import DateLike, ErrorCode, MalformedRecord, as_date


# =============================================================================
# CATEGORIES (Closed enumeration with explicit fallback)
# =============================================================================

class IncidentCategory(Enum):
    """Incident tags. Unrecognized tags map to OTHER, never to an error."""
    MAINTENANCE = "maintenance"
    COMPLAINT = "complaint"
    VIOLATION = "violation"
    NOTICE = "notice"
    OTHER = "other"

    @classmethod
    def from_tag(cls, tag: Optional[str]) -> IncidentCategory:
        if not tag:
            return cls.OTHER
        try:
            return cls(tag.strip().lower())
        except ValueError:
            return cls.OTHER


@dataclass(frozen=True)
class CategoryStyle:
    """Presentation attributes for a category."""
    icon: str
    fill_token: str
    border_token: str
    label: str


CATEGORY_STYLES: Dict[IncidentCategory, CategoryStyle] = {
    IncidentCategory.MAINTENANCE: CategoryStyle("🔧", "red-500", "red-500", "MAINTENANCE"),
    IncidentCategory.COMPLAINT: CategoryStyle("📢", "yellow-400", "yellow-400", "COMPLAINT"),
    IncidentCategory.VIOLATION: CategoryStyle("⚠️", "red-600", "red-600", "VIOLATION"),
    IncidentCategory.NOTICE: CategoryStyle("📋", "gray-500", "gray-500", "NOTICE"),
    IncidentCategory.OTHER: CategoryStyle("📍", "white", "white", "OTHER"),
}


def style_for(category: IncidentCategory) -> CategoryStyle:
    return CATEGORY_STYLES[category]


# =============================================================================
# RECORDS
# =============================================================================

@dataclass(frozen=True)
class Attachment:
    """Evidence file attached to a record (opaque to layout)."""
    attachment_id: str
    file_name: str
    file_url: str
    file_type: str
    is_pii_redacted: bool = False

    @property
    def is_image(self) -> bool:
        return self.file_type == "image"


@dataclass(frozen=True)
class IncidentRecord:
    """
    A single documented incident.

    `event_date` may be a date or a datetime; layout uses the calendar date only.
    """
    record_id: str
    event_date: DateLike
    category: str = IncidentCategory.OTHER.value
    title: str = ""
    description: str = ""
    created_at: Optional[datetime] = None
    attachments: Tuple[Attachment, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not self.record_id or not isinstance(self.record_id, str):
            raise MalformedRecord.create(
                ErrorCode.MALFORMED_RECORD,
                "record_id must be a non-empty string",
                record_id=repr(self.record_id),
            )
        if not isinstance(self.event_date, date):
            raise MalformedRecord.create(
                ErrorCode.MALFORMED_RECORD,
                "event_date must be a date or datetime",
                record_id=self.record_id,
            )

    @property
    def event_day(self) -> date:
        return as_date(self.event_date)

    @property
    def category_kind(self) -> IncidentCategory:
        return IncidentCategory.from_tag(self.category)
