"""
Layout Configuration
====================

Single validated configuration object for every layout pass.

VALIDATION:
- All checks run at construction time (`__post_init__`)
- Violations raise InvalidConfiguration, never silently corrected
- Environment overrides go through the same validation
"""

from __future__ import annotations
from dataclasses import dataclass, replace as dc_replace, fields
from datetime import date, datetime, timezone
from typing import Callable, Dict, Mapping, Optional
import math
import os

from .contracts.base import ErrorCode, InvalidConfiguration, parse_datetime


ENV_PREFIX = "TIMELINE_"


@dataclass(frozen=True)
class LayoutConfig:
    """Recognized layout options."""
    lead_padding_days: int = 7
    trail_padding_days: int = 7
    proximity_threshold: float = 2.5
    max_stack_level: int = 5
    fallback_month_start: date = date(2025, 10, 1)
    tick_interval_days: int = 7
    countdown_target: datetime = datetime(2025, 11, 1, tzinfo=timezone.utc)
    cache_max_entries: int = 128
    base_stack_height_px: int = 40
    stack_step_px: int = 25

    def __post_init__(self):
        validate_threshold(self.proximity_threshold)
        validate_max_level(self.max_stack_level)

        for name in ('lead_padding_days', 'trail_padding_days'):
            value = getattr(self, name)
            if value < 0:
                raise InvalidConfiguration.create(
                    ErrorCode.INVALID_PADDING,
                    f"{name} must be >= 0, got {value}",
                    option=name,
                )

        if isinstance(self.fallback_month_start, datetime) or self.fallback_month_start.day != 1:
            raise InvalidConfiguration.create(
                ErrorCode.INVALID_FALLBACK_MONTH,
                "fallback_month_start must be the first day of a month",
                value=self.fallback_month_start,
            )

        if self.tick_interval_days < 1:
            raise InvalidConfiguration.create(
                ErrorCode.INVALID_TICK_INTERVAL,
                f"tick_interval_days must be >= 1, got {self.tick_interval_days}",
            )

        if self.cache_max_entries < 0:
            raise InvalidConfiguration.create(
                ErrorCode.INVALID_CACHE_SIZE,
                f"cache_max_entries must be >= 0, got {self.cache_max_entries}",
            )

        if self.countdown_target.tzinfo is None:
            object.__setattr__(
                self, 'countdown_target', self.countdown_target.replace(tzinfo=timezone.utc)
            )

    def replace(self, **overrides) -> LayoutConfig:
        """Return a validated copy with overrides applied."""
        return dc_replace(self, **overrides)

    def fingerprint(self) -> str:
        """Stable string of every option, used in cache keys."""
        parts = []
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, (date, datetime)):
                value = value.isoformat()
            parts.append(f"{f.name}={value!r}")
        return "|".join(parts)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> LayoutConfig:
        """
        Build a config from TIMELINE_* environment variables.

        Unset variables keep their defaults.
        """
        environ = os.environ if environ is None else environ
        overrides = {}

        for option, parser in _ENV_PARSERS.items():
            key = ENV_PREFIX + option.upper()
            raw = environ.get(key)
            if raw is None or raw.strip() == "":
                continue
            try:
                overrides[option] = parser(raw)
            except ValueError as e:
                raise InvalidConfiguration.create(
                    ErrorCode.INVALID_ENV_VALUE,
                    f"Cannot parse {key}={raw!r}: {e}",
                    variable=key,
                ) from e

        return cls(**overrides)


# =============================================================================
# BOUNDARY VALIDATORS (shared with direct resolver calls)
# =============================================================================

def validate_threshold(threshold: float) -> None:
    if isinstance(threshold, bool) or not isinstance(threshold, (int, float)) or not math.isfinite(threshold) or threshold <= 0:
        raise InvalidConfiguration.create(
            ErrorCode.INVALID_THRESHOLD,
            f"proximity_threshold must be a positive finite number, got {threshold!r}",
        )


def validate_max_level(max_level: int) -> None:
    if isinstance(max_level, bool) or not isinstance(max_level, int) or max_level < 0:
        raise InvalidConfiguration.create(
            ErrorCode.INVALID_STACK_LEVEL,
            f"max_stack_level must be a non-negative integer, got {max_level!r}",
        )


_ENV_PARSERS: Dict[str, Callable[[str], object]] = {
    'lead_padding_days': int,
    'trail_padding_days': int,
    'proximity_threshold': float,
    'max_stack_level': int,
    'fallback_month_start': date.fromisoformat,
    'tick_interval_days': int,
    'countdown_target': parse_datetime,
    'cache_max_entries': int,
}
