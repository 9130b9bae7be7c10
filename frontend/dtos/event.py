"""
Positioned Event DTOs

Read-only results of the layout engine, one per event plus the now-marker.

PROHIBITED OPERATIONS:
======================
- Renderers MUST NOT re-sort events
- Renderers MUST NOT recompute positions
- Hidden dots are already off-canvas; draw them as given or skip them
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime

from ingestion.contracts import ScheduledEvent


@dataclass(frozen=True)
class PositionedEventDTO:
    """
    An event placed on the vertical axis.

    INVARIANTS:
    ===========
    - dot_y == raw_y when dot_visible, otherwise an off-canvas sentinel
    - label_y is final; it may sit below raw_y when labels are stacked
    """
    event: ScheduledEvent
    raw_y: float
    dot_y: float
    label_y: float
    dot_visible: bool
    within_window: bool

    @property
    def href(self) -> str:
        return self.event.href


@dataclass(frozen=True)
class NowMarkerDTO:
    """The current instant on the same axis. Never collision-resolved."""
    instant: datetime
    y: float
    within_window: bool
