"""
Temporal Layer
==============

Time sources and calendar windows for the timeline.

INVARIANTS:
- Every render reads exactly one instant from its clock
- The week window is a pure function of that instant

Modules:
- clock: Injectable live / replay / fixed clock
- window: Monday-anchored 7-day window resolution
"""

from .clock import LogicalClock, ClockExhausted
from .window import TimeWindow, resolve_week_window, WEEK, WEEK_MS

__all__ = [
    'LogicalClock',
    'ClockExhausted',
    'TimeWindow',
    'resolve_week_window',
    'WEEK',
    'WEEK_MS',
]
