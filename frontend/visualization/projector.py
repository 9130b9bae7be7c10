"""
Event Projector

Raw records -> validated events -> sorted, initially positioned events.
Positions produced here are pre-collision: every dot is visible and every
label sits on its own raw coordinate.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence, Tuple

from backend.contracts.base import to_epoch_ms
from backend.temporal.window import TimeWindow
from ingestion.contracts import RawEventRecord, ScheduledEvent
from ingestion.parser import MalformedRecord, RecordParser

from ..dtos.event import PositionedEventDTO
from .scale import TimeScale


@dataclass(frozen=True)
class ProjectionResult:
    events: Tuple[PositionedEventDTO, ...]
    malformed: Tuple[MalformedRecord, ...]
    processed_count: int


class EventProjector:

    def __init__(self, parser: Optional[RecordParser] = None):
        self._parser = parser or RecordParser()

    def project(
        self,
        records: Sequence[RawEventRecord],
        window: TimeWindow,
        scale: TimeScale,
        parsed_at: Optional[datetime] = None
    ) -> ProjectionResult:
        """
        Parse, sort and position records.

        Malformed records are split off into `malformed`. Equal instants keep
        their input order (sorted() is stable).
        """
        report = self._parser.parse_batch(records, parsed_at)
        ordered = sorted(report.events, key=lambda e: to_epoch_ms(e.instant))

        return ProjectionResult(
            events=tuple(self._position(event, window, scale) for event in ordered),
            malformed=tuple(report.malformed_items),
            processed_count=report.processed_count
        )

    def _position(
        self,
        event: ScheduledEvent,
        window: TimeWindow,
        scale: TimeScale
    ) -> PositionedEventDTO:
        y = scale.project(event.instant)
        return PositionedEventDTO(
            event=event,
            raw_y=y,
            dot_y=y,
            label_y=y,
            dot_visible=True,
            within_window=window.contains(event.instant)
        )
