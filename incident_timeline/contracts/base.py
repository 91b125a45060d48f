"""
Base Contracts and Shared Types

Foundational error types and time helpers used across all layers.
All value types here are IMMUTABLE and represent pure data.

BOUNDARY ENFORCEMENT:
=====================
- Layers may import types but MUST NOT modify this module
- Errors are raised at the boundary of the offending call, never deferred
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from typing import Tuple, Union
from enum import Enum, auto


# =============================================================================
# ERROR STATES (Explicit, never silent)
# =============================================================================

class ErrorCode(Enum):
    """
    Explicit error codes for deterministic error handling.
    No silent coercion - every error state is enumerated.
    """
    # Configuration errors
    INVALID_THRESHOLD = auto()
    INVALID_STACK_LEVEL = auto()
    INVALID_PADDING = auto()
    INVALID_FALLBACK_MONTH = auto()
    INVALID_TICK_INTERVAL = auto()
    INVALID_CACHE_SIZE = auto()
    INVALID_ENV_VALUE = auto()

    # Axis errors
    NOW_BEFORE_AXIS_START = auto()

    # Ingestion errors
    NON_ARRAY_PAYLOAD = auto()
    MALFORMED_RECORD = auto()
    UNREADABLE_SOURCE = auto()


@dataclass(frozen=True)
class Error:
    """
    Immutable error representation with full context.
    Errors are data - they can be stored in reports and raised via LayoutError.
    """
    code: ErrorCode
    message: str
    context: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    def with_context(self, key: str, value: str) -> Error:
        """Return new Error with additional context (immutable)."""
        return Error(
            code=self.code,
            message=self.message,
            context=self.context + ((key, value),)
        )

    def to_dict(self) -> dict:
        return {
            'code': self.code.name,
            'message': self.message,
            'context': dict(self.context),
        }


class LayoutError(Exception):
    """Base exception carrying an immutable Error value."""

    def __init__(self, error: Error):
        super().__init__(error.message)
        self.error = error

    @property
    def code(self) -> ErrorCode:
        return self.error.code

    @classmethod
    def create(cls, code: ErrorCode, message: str, **context) -> LayoutError:
        error = Error(code=code, message=message)
        for key, value in sorted(context.items()):
            error = error.with_context(key, str(value))
        return cls(error)


class InvalidConfiguration(LayoutError, ValueError):
    """Raised when a caller violates the configuration contract."""


class MalformedRecord(LayoutError, ValueError):
    """Raised when an incident record is built without an id or event date."""


# =============================================================================
# TEMPORAL HELPERS (All times are UTC, never local time)
# =============================================================================

DateLike = Union[date, datetime]


def ensure_utc(value: datetime) -> datetime:
    """Interpret naive datetimes as UTC; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def as_date(value: DateLike) -> date:
    """Calendar date of a date or datetime (time-of-day dropped)."""
    if isinstance(value, datetime):
        return ensure_utc(value).date()
    return value


def start_of_day(value: DateLike) -> datetime:
    return datetime.combine(as_date(value), time.min, tzinfo=timezone.utc)


def end_of_day(value: DateLike) -> datetime:
    return datetime.combine(as_date(value), time.max, tzinfo=timezone.utc)


def whole_days_between(start: datetime, end: datetime) -> int:
    """Whole days from start to end, truncated toward zero."""
    seconds = (ensure_utc(end) - ensure_utc(start)).total_seconds()
    return int(seconds / 86400)


def parse_datetime(value: str) -> datetime:
    """Parse an ISO-8601 string (trailing Z accepted) into a UTC datetime."""
    return ensure_utc(datetime.fromisoformat(value.strip().replace('Z', '+00:00')))
