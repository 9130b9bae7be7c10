"""
Collision Avoidance Layout

Two independent passes over events already sorted by instant:

1. Dot thinning: a dot closer than `dot_threshold` to the previous event's
   raw position is hidden (moved off-canvas). Greedy, never revisited.
2. Label stacking: a label closer than `label_threshold` to the previous
   label's final position is pushed `label_increment` below it. Labels are
   never hidden.

Both passes are left-to-right folds that build new DTOs; inputs are never
mutated. Running them on unsorted input gives meaningless results.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple

from ..dtos.event import PositionedEventDTO


@dataclass(frozen=True)
class CollisionAvoidanceLayout:
    dot_threshold: float = 20.0
    label_threshold: float = 20.0
    label_increment: float = 16.0
    marker_radius: float = 9.0

    @property
    def hidden_dot_y(self) -> float:
        """Sentinel for hidden dots: one radius above the canvas."""
        return -self.marker_radius

    @property
    def label_offset(self) -> float:
        """Centres label text against its dot."""
        return self.marker_radius / 2.0

    def apply(self, events: Sequence[PositionedEventDTO]) -> Tuple[PositionedEventDTO, ...]:
        return self.stack_labels(self.thin_dots(events))

    def thin_dots(self, events: Sequence[PositionedEventDTO]) -> Tuple[PositionedEventDTO, ...]:
        placed: List[PositionedEventDTO] = []
        previous_raw: Optional[float] = None

        for event in events:
            # compared against the previous raw position, visible or not
            visible = previous_raw is None or event.raw_y - previous_raw > self.dot_threshold
            placed.append(replace(
                event,
                dot_visible=visible,
                dot_y=event.raw_y if visible else self.hidden_dot_y
            ))
            previous_raw = event.raw_y

        return tuple(placed)

    def stack_labels(self, events: Sequence[PositionedEventDTO]) -> Tuple[PositionedEventDTO, ...]:
        placed: List[PositionedEventDTO] = []
        previous_base: Optional[float] = None

        for event in events:
            if previous_base is None or event.raw_y - previous_base > self.label_threshold:
                base = event.raw_y
            else:
                base = previous_base + self.label_increment
            placed.append(replace(event, label_y=base + self.label_offset))
            previous_base = base

        return tuple(placed)
