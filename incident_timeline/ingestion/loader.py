"""
Record Loader
=============

Converts record payloads (parsed JSON from the record source) into
IncidentRecords.

GUARANTEES:
- Every input item is either loaded, marked duplicate, or marked malformed
- A non-array payload yields an empty report with an explicit error
- Nothing is retried and nothing is inferred
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any, List, Optional, Union
import json
import logging

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..contracts.base import Error, ErrorCode, LayoutError, ensure_utc, parse_datetime
from ..contracts.records import Attachment, IncidentRecord

logger = logging.getLogger(__name__)


# =============================================================================
# WIRE MODELS
# =============================================================================

class AttachmentPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    id: str = Field(min_length=1)
    file_name: str = Field(alias='fileName')
    file_url: str = Field(alias='fileUrl')
    file_type: str = Field(default='', alias='fileType')
    is_pii_redacted: bool = Field(default=False, alias='isPiiRedacted')


class RecordPayload(BaseModel):
    """One record as delivered by the record source."""
    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    id: str = Field(min_length=1)
    event_date: Union[datetime, date] = Field(alias='eventDate')
    category: str = 'other'
    title: str = ''
    description: str = ''
    created_at: Optional[datetime] = Field(default=None, alias='createdAt')
    attachments: List[AttachmentPayload] = Field(default_factory=list)

    @field_validator('event_date', mode='before')
    @classmethod
    def _parse_event_date(cls, value: Any) -> Any:
        if isinstance(value, str):
            text = value.strip()
            if len(text) == 10:
                return date.fromisoformat(text)
            return parse_datetime(text)
        return value

    def to_record(self) -> IncidentRecord:
        return IncidentRecord(
            record_id=self.id,
            event_date=self.event_date,
            category=self.category,
            title=self.title,
            description=self.description,
            created_at=ensure_utc(self.created_at) if self.created_at else None,
            attachments=tuple(
                Attachment(
                    attachment_id=a.id,
                    file_name=a.file_name,
                    file_url=a.file_url,
                    file_type=a.file_type,
                    is_pii_redacted=a.is_pii_redacted,
                )
                for a in self.attachments
            ),
        )


# =============================================================================
# REPORT
# =============================================================================

@dataclass(frozen=True)
class MalformedItem:
    """Record of an item that failed validation."""
    index: int
    item_id: str
    error: str
    raw_content_sample: str  # First 200 chars for debugging

    def to_dict(self) -> dict:
        return {
            'index': self.index,
            'item_id': self.item_id,
            'error': self.error,
            'raw_content_sample': self.raw_content_sample,
        }


@dataclass(frozen=True)
class DuplicateItem:
    index: int
    item_id: str


@dataclass
class LoadReport:
    """
    Complete report of a load.

    TRACEABLE:
    Every input item ends up in exactly one of `records`, `duplicate_items`
    or `malformed_items`.
    """
    processed_count: int = 0
    records: List[IncidentRecord] = field(default_factory=list)
    duplicate_items: List[DuplicateItem] = field(default_factory=list)
    malformed_items: List[MalformedItem] = field(default_factory=list)
    errors: List[Error] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return len(self.records)

    @property
    def is_clean(self) -> bool:
        return not (self.duplicate_items or self.malformed_items or self.errors)

    def to_dict(self) -> dict:
        return {
            'processed_count': self.processed_count,
            'success_count': self.success_count,
            'duplicate_count': len(self.duplicate_items),
            'malformed_count': len(self.malformed_items),
            'malformed_items': [m.to_dict() for m in self.malformed_items],
            'errors': [e.to_dict() for e in self.errors],
        }


# =============================================================================
# LOADING
# =============================================================================

def load_records(payload: Any) -> LoadReport:
    """Validate a parsed JSON payload (expected: a list of record objects)."""
    report = LoadReport()

    if not isinstance(payload, list):
        logger.warning("Record source returned non-array data: %s", type(payload).__name__)
        report.errors.append(Error(
            code=ErrorCode.NON_ARRAY_PAYLOAD,
            message=f"Expected a JSON array of records, got {type(payload).__name__}",
        ))
        return report

    report.processed_count = len(payload)
    seen_ids = set()

    for index, item in enumerate(payload):
        item_id = str(item.get('id', 'unknown')) if isinstance(item, dict) else 'unknown'
        try:
            record = RecordPayload.model_validate(item).to_record()
        except (ValidationError, ValueError) as e:
            report.malformed_items.append(MalformedItem(
                index=index,
                item_id=item_id,
                error=str(e),
                raw_content_sample=str(item)[:200],
            ))
            continue

        if record.record_id in seen_ids:
            report.duplicate_items.append(DuplicateItem(index=index, item_id=record.record_id))
            continue

        seen_ids.add(record.record_id)
        report.records.append(record)

    if not report.is_clean:
        logger.warning(
            "Loaded %d/%d records (%d duplicate, %d malformed)",
            report.success_count, report.processed_count,
            len(report.duplicate_items), len(report.malformed_items)
        )

    return report


def load_records_file(path: Union[str, Path]) -> LoadReport:
    """Read a JSON file and load its records."""
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise LayoutError(Error(
            code=ErrorCode.UNREADABLE_SOURCE,
            message=f"Cannot read records from {path}: {e}",
        ).with_context('path', str(path))) from e

    return load_records(payload)
