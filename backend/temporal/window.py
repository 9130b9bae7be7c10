"""
Week Window Resolution

The timeline always shows one calendar week, Monday 00:00 through the
following Monday minus one millisecond, in the timezone of the supplied
"now".
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Tuple

from ..contracts.base import ONE_MS, ensure_aware, to_epoch_ms

WEEK = timedelta(days=7)
WEEK_MS = 7 * 86400000


@dataclass(frozen=True)
class TimeWindow:
    """
    Bounding week of a render.

    INVARIANTS:
    ===========
    - start is a Monday at local day-start
    - end - start == 7 days - 1 ms on the local calendar

    In a week with a DST change the absolute span (`span_ms`) is an hour
    longer or shorter than the calendar span.
    """
    start: datetime
    end: datetime

    @property
    def span_ms(self) -> float:
        """Absolute milliseconds from start to end."""
        return to_epoch_ms(self.end) - to_epoch_ms(self.start)

    def contains(self, instant: datetime) -> bool:
        ms = to_epoch_ms(instant)
        return to_epoch_ms(self.start) <= ms <= to_epoch_ms(self.end)

    def day_starts(self) -> Tuple[datetime, ...]:
        """Local midnight of each of the seven days, Monday first."""
        return tuple(self.start + timedelta(days=i) for i in range(7))


def resolve_week_window(now: datetime) -> TimeWindow:
    """
    Compute the Monday-anchored week containing `now`.

    `now` is an explicit argument so that the window and the now-marker of
    one render are derived from the same instant.
    """
    now = ensure_aware(now)
    day_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    # aware + timedelta is wall-clock arithmetic: both bounds land on the
    # local calendar even across a DST change
    start = day_start - timedelta(days=now.weekday())
    return TimeWindow(start=start, end=start + WEEK - ONE_MS)
