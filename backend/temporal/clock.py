"""
Logical Clock for Reproducible Renders
======================================

Injectable clock that supplies the single "now" snapshot each render uses.

GUARANTEES:
- The layout engine never reads system time itself
- Same records + same tick = identical timeline view
- All live ticks are logged so a session can be replayed
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Tuple
from pathlib import Path
import json

from ..contracts.base import ensure_aware


class ClockExhausted(Exception):
    """Raised when replay clock runs out of ticks."""
    pass


@dataclass
class LogicalClock:
    """
    Injectable clock for timeline sessions.

    MODES:
    ======
    1. LIVE mode: Uses real system time, logs ticks unless record=False
    2. REPLAY mode: Uses pre-recorded tick sequence
    3. FIXED mode: Returns the same instant forever (tests, CLI --now)
    """
    _ticks: List[datetime] = field(default_factory=list)
    _current_index: int = 0
    _is_live: bool = True
    _fixed: Optional[datetime] = None
    _record: bool = True

    def now(self) -> datetime:
        """
        Get current logical time.

        In LIVE mode: reads system time and logs it
        In REPLAY mode: returns next tick from recorded sequence
        In FIXED mode: returns the pinned instant
        """
        if self._fixed is not None:
            self._current_index += 1
            return self._fixed

        if self._is_live:
            current = datetime.now(timezone.utc)
            if self._record:
                self._ticks.append(current)
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

    def is_live(self) -> bool:
        return self._is_live and self._fixed is None

    @property
    def recorded_ticks(self) -> Tuple[datetime, ...]:
        """Ticks available for save_log (live) or replay."""
        return tuple(self._ticks)

    @classmethod
    def live(cls, record: bool = True) -> 'LogicalClock':
        """
        Create clock in LIVE mode (uses system time).

        With record=False ticks are counted but not kept, for servers
        whose ticks are never replayed.
        """
        return cls(_is_live=True, _record=record)

    @classmethod
    def fixed(cls, instant: datetime) -> 'LogicalClock':
        """Create clock pinned to one instant. Naive instants mean UTC."""
        return cls(_is_live=False, _fixed=ensure_aware(instant))

    @classmethod
    def from_ticks(cls, ticks: List[datetime]) -> 'LogicalClock':
        """Create clock in REPLAY mode from in-memory ticks."""
        return cls(
            _ticks=[ensure_aware(t) for t in ticks],
            _current_index=0,
            _is_live=False
        )

    @classmethod
    def from_log(cls, tick_log_path: Path) -> 'LogicalClock':
        """
        Create clock in REPLAY mode from recorded log.

        Args:
            tick_log_path: Path to JSON file containing tick sequence

        Returns:
            LogicalClock configured for replay
        """
        with open(tick_log_path, 'r') as f:
            data = json.load(f)

        return cls.from_ticks([
            datetime.fromisoformat(t) for t in data['ticks']
        ])

    def save_log(self, tick_log_path: Path) -> None:
        """
        Save tick log for future replay.

        Args:
            tick_log_path: Path to write JSON tick sequence
        """
        tick_log_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            'version': '1.0',
            'mode': 'live' if self._is_live else 'replay',
            'tick_count': len(self._ticks),
            'ticks': [t.isoformat() for t in self._ticks]
        }

        with open(tick_log_path, 'w') as f:
            json.dump(data, f, indent=2)

    def __repr__(self) -> str:
        if self._fixed is not None:
            return f"LogicalClock(FIXED, at={self._fixed.isoformat()})"
        mode = "LIVE" if self._is_live else "REPLAY"
        return f"LogicalClock({mode}, ticks={len(self._ticks)}, index={self._current_index})"

