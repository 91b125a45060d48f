"""
Ingestion Layer

Validates record payloads from the record source into IncidentRecords.
Transport is out of scope: callers pass parsed JSON or a file path.
"""

from .loader import (
    RecordPayload, AttachmentPayload, LoadReport, MalformedItem, DuplicateItem,
    load_records, load_records_file,
)

__all__ = [
    'RecordPayload',
    'AttachmentPayload',
    'LoadReport',
    'MalformedItem',
    'DuplicateItem',
    'load_records',
    'load_records_file',
]
