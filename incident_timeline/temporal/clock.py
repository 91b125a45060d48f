"""
Logical Clock for Deterministic Layout
======================================

Injectable clock source for "now". Every layout pass reads time through this.

GUARANTEES:
- Same records + same clock sequence = identical layouts
- Never reads system time implicitly outside LIVE mode
- All ticks are logged so a session can be replayed
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional
from pathlib import Path
import json

from ..contracts.base import ensure_utc


class ClockExhausted(Exception):
    """Raised when replay clock runs out of ticks."""
    pass


@dataclass
class LogicalClock:
    """
    Injectable clock for deterministic layout passes.

    MODES:
    ======
    1. LIVE mode: Uses real system time, logs ticks when recording
    2. REPLAY mode: Uses pre-recorded tick sequence
    3. FIXED mode: Always returns the same instant (tests, snapshots)

    Only a recording LIVE clock grows its tick log; the other modes
    just count reads.
    """
    _ticks: List[datetime] = field(default_factory=list)
    _current_index: int = 0
    _is_live: bool = True
    _fixed: Optional[datetime] = None
    _record_ticks: bool = True

    def now(self) -> datetime:
        """
        Get current logical time.

        In LIVE mode: reads system time (logged if recording)
        In REPLAY mode: returns next tick from recorded sequence
        In FIXED mode: returns the pinned instant (not logged)
        """
        if self._fixed is not None:
            self._current_index += 1
            return self._fixed

        if self._is_live:
            current = datetime.now(timezone.utc)
            if self._record_ticks:
                self._ticks.append(current)
                self._current_index = len(self._ticks)
            else:
                self._current_index += 1
            return current

        if self._current_index >= len(self._ticks):
            raise ClockExhausted(
                f"Replay clock exhausted at index {self._current_index}. "
                f"Original session had {len(self._ticks)} ticks."
            )
        tick = self._ticks[self._current_index]
        self._current_index += 1
        return tick

    def tick_count(self) -> int:
        """Number of ticks recorded/consumed."""
        return self._current_index

    def logged_tick_count(self) -> int:
        """Number of ticks held in the replay log."""
        return len(self._ticks)

    def is_live(self) -> bool:
        return self._is_live and self._fixed is None

    @classmethod
    def live(cls, record_ticks: bool = True) -> LogicalClock:
        """
        Create clock in LIVE mode (uses system time).

        With record_ticks=False reads are counted but not logged, so a
        long-running process does not accumulate ticks.
        """
        return cls(_is_live=True, _record_ticks=record_ticks)

    @classmethod
    def fixed(cls, instant: datetime) -> LogicalClock:
        """Create clock pinned to a single instant."""
        return cls(_is_live=False, _fixed=ensure_utc(instant))

    @classmethod
    def from_ticks(cls, ticks: List[datetime]) -> LogicalClock:
        """Create clock in REPLAY mode from an in-memory sequence."""
        return cls(_ticks=[ensure_utc(t) for t in ticks], _current_index=0, _is_live=False)

    @classmethod
    def from_log(cls, tick_log_path: Path) -> LogicalClock:
        """Create clock in REPLAY mode from a JSON tick log."""
        with open(tick_log_path, 'r') as f:
            data = json.load(f)
        return cls.from_ticks([datetime.fromisoformat(t) for t in data['ticks']])

    def save_log(self, tick_log_path: Path) -> None:
        """Save tick log for future replay."""
        tick_log_path = Path(tick_log_path)
        tick_log_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            'version': '1.0',
            'mode': 'live' if self.is_live() else 'replay',
            'tick_count': len(self._ticks),
            'ticks': [t.isoformat() for t in self._ticks]
        }

        with open(tick_log_path, 'w') as f:
            json.dump(data, f, indent=2)

    def __repr__(self) -> str:
        if self._fixed is not None:
            mode = "FIXED"
        else:
            mode = "LIVE" if self._is_live else "REPLAY"
        return f"LogicalClock({mode}, ticks={len(self._ticks)}, index={self._current_index})"
