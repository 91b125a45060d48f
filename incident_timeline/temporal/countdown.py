"""Countdown to a fixed target instant, advanced by clock ticks."""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime

from ..contracts.base import ensure_utc


@dataclass(frozen=True)
class Countdown:
    days: int
    hours: int
    minutes: int
    seconds: int
    total_seconds: int
    expired: bool

    def format(self) -> str:
        return f"{self.days:02d}:{self.hours:02d}:{self.minutes:02d}:{self.seconds:02d}"

    def to_dict(self) -> dict:
        return {
            'days': self.days,
            'hours': self.hours,
            'minutes': self.minutes,
            'seconds': self.seconds,
            'total_seconds': self.total_seconds,
            'expired': self.expired,
        }


def compute_countdown(target: datetime, now: datetime) -> Countdown:
    """Time left until `target`; all zero once it has passed."""
    remaining = int((ensure_utc(target) - ensure_utc(now)).total_seconds())
    if remaining <= 0:
        return Countdown(0, 0, 0, 0, 0, expired=True)

    days, rest = divmod(remaining, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, seconds = divmod(rest, 60)
    return Countdown(days, hours, minutes, seconds, remaining, expired=False)
