"""
Timeline Visualization

Responsibility:
Deterministic transformation of raw event records into a renderable weekly
timeline view.
Input: RawEventRecords + one "now" instant -> Output: TimelineView
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence, Tuple
import hashlib

from backend.contracts.base import ensure_aware
from backend.temporal.window import TimeWindow, resolve_week_window
from ingestion.contracts import RawEventRecord
from ingestion.parser import MalformedRecord

from ..dtos.core import DTOVersion
from ..dtos.event import NowMarkerDTO, PositionedEventDTO
from .collision import CollisionAvoidanceLayout
from .projector import EventProjector
from .scale import TimeScale


@dataclass(frozen=True)
class LayoutConfig:
    """Geometry of the timeline, in pixels."""
    height: float = 500.0
    top_margin: float = 10.0
    bottom_margin: float = 20.0
    dot_x: float = 100.0
    marker_radius: float = 9.0
    marker_stroke_width: float = 2.0
    axis_width: float = 5.0
    label_dx: float = 15.0
    dot_threshold: float = 20.0
    label_threshold: float = 20.0
    label_increment: float = 16.0

    def __post_init__(self):
        if self.band_bottom <= self.band_top:
            raise ValueError(
                f"Timeline band is empty: top={self.band_top}, bottom={self.band_bottom}"
            )

    @property
    def band_top(self) -> float:
        return self.top_margin

    @property
    def band_bottom(self) -> float:
        return self.height - self.bottom_margin

    @property
    def axis_x(self) -> float:
        return self.dot_x - 1

    @property
    def label_x(self) -> float:
        return self.dot_x + self.label_dx

    @property
    def now_marker_x(self) -> float:
        return self.dot_x - 0.5

    @property
    def now_marker_radius(self) -> float:
        return self.axis_width / 2


@dataclass(frozen=True)
class TimeAxis:
    """The rendered time axis."""
    start_time: datetime
    end_time: datetime
    ticks: Tuple[Tuple[float, str], ...]  # (position, label)


@dataclass(frozen=True)
class TimelineView:
    """
    Fully calculated timeline visualization.

    DETERMINISTIC:
    Same records + same now + same config = identical view.
    No layout logic allowed in the renderer - all pre-calculated here.
    """
    view_id: str
    dto_version: DTOVersion
    window: TimeWindow
    axis: TimeAxis
    events: Tuple[PositionedEventDTO, ...]
    now_marker: NowMarkerDTO
    malformed: Tuple[MalformedRecord, ...]
    config: LayoutConfig
    generated_at: datetime

    @property
    def visible_dots(self) -> Tuple[PositionedEventDTO, ...]:
        return tuple(e for e in self.events if e.dot_visible)


def now_marker(now: datetime, window: TimeWindow, scale: TimeScale) -> NowMarkerDTO:
    """Position of `now` on the axis, independent of the event list."""
    return NowMarkerDTO(
        instant=now,
        y=scale.project(now),
        within_window=window.contains(now)
    )


class TimelineLayoutEngine:
    """
    Runs the whole layout pipeline for one render.

    PIPELINE:
    =========
    1. Resolve the week window from `now`
    2. Build the scale for the configured pixel band
    3. Parse, sort and position records
    4. Thin dots and stack labels
    5. Place the now-marker and axis ticks

    Holds configuration only; every call is a pure function of its inputs.
    """

    def __init__(
        self,
        config: Optional[LayoutConfig] = None,
        projector: Optional[EventProjector] = None
    ):
        self._config = config or LayoutConfig()
        self._projector = projector or EventProjector()
        self._collisions = CollisionAvoidanceLayout(
            dot_threshold=self._config.dot_threshold,
            label_threshold=self._config.label_threshold,
            label_increment=self._config.label_increment,
            marker_radius=self._config.marker_radius
        )

    @property
    def config(self) -> LayoutConfig:
        return self._config

    def layout(self, records: Sequence[RawEventRecord], now: datetime) -> TimelineView:
        now = ensure_aware(now)
        window = resolve_week_window(now)
        scale = TimeScale.for_window(window, self._config.band_top, self._config.band_bottom)

        projection = self._projector.project(records, window, scale, parsed_at=now)
        events = self._collisions.apply(projection.events)

        return TimelineView(
            view_id=self._view_id(window, events, now),
            dto_version=DTOVersion.current(),
            window=window,
            axis=TimeAxis(
                start_time=window.start,
                end_time=window.end,
                ticks=scale.ticks(window)
            ),
            events=events,
            now_marker=now_marker(now, window, scale),
            malformed=projection.malformed,
            config=self._config,
            generated_at=now
        )

    def _view_id(
        self,
        window: TimeWindow,
        events: Sequence[PositionedEventDTO],
        now: datetime
    ) -> str:
        parts = [window.start.isoformat(), now.isoformat()]
        parts.extend(
            f"{e.event.event_id}@{e.event.instant.isoformat()}:{e.dot_y:.3f}:{e.label_y:.3f}"
            for e in events
        )
        return f"view_{hashlib.sha256('|'.join(parts).encode('utf-8')).hexdigest()[:16]}"
