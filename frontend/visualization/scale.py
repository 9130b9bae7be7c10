"""
Time Scale

Affine mapping from instants to vertical pixel coordinates.

ORIENTATION:
============
The window start maps to `range_start` (top of the band) and the window
end maps to `range_end` (bottom), so later events sit lower on screen.
Instants outside the window extrapolate linearly; nothing is clamped.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Tuple

from backend.contracts.base import to_epoch_ms
from backend.temporal.window import TimeWindow


@dataclass(frozen=True)
class TimeScale:
    domain_start: datetime
    domain_end: datetime
    range_start: float
    range_end: float

    def __post_init__(self):
        if to_epoch_ms(self.domain_end) == to_epoch_ms(self.domain_start):
            raise ValueError("TimeScale domain must not be empty")

    @classmethod
    def for_window(cls, window: TimeWindow, band_top: float, band_bottom: float) -> TimeScale:
        return cls(
            domain_start=window.start,
            domain_end=window.end,
            range_start=band_top,
            range_end=band_bottom
        )

    def project(self, instant: datetime) -> float:
        low = to_epoch_ms(self.domain_start)
        t = (to_epoch_ms(instant) - low) / (to_epoch_ms(self.domain_end) - low)
        return self.range_start + t * (self.range_end - self.range_start)

    def ticks(self, window: TimeWindow) -> Tuple[Tuple[float, str], ...]:
        """One tick per local day start, labelled with the weekday ("Mon")."""
        return tuple(
            (self.project(day), day.strftime('%a'))
            for day in window.day_starts()
        )
