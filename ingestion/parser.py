"""
Event Record Parser
===================

Turns raw wire records into ScheduledEvents with explicit reporting.

GUARANTEES:
- Every record is either parsed or reported as malformed
- A malformed record never aborts the batch
- Parsed events keep input order (sorting happens in the projector)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Union
import logging
import re

from backend.contracts.base import Error, ErrorCode, from_epoch_ms

from .contracts import RawEventRecord, ScheduledEvent

logger = logging.getLogger(__name__)

# "%Q": whole milliseconds since the Unix epoch
_EPOCH_MS_PATTERN = re.compile(r'^\s*(\d+)\s*$')


def parse_call_time(raw: object) -> datetime:
    """
    Parse a `%Q` call time into a UTC datetime.

    Accepts a JSON integer or a string of digits. Raises ValueError for
    anything else, including values outside the datetime range.
    """
    if isinstance(raw, bool):
        raise ValueError(f"Boolean is not a timestamp: {raw!r}")
    if isinstance(raw, int):
        ms = raw
    elif isinstance(raw, str):
        match = _EPOCH_MS_PATTERN.match(raw)
        if not match:
            raise ValueError(f"Not a millisecond timestamp: {raw!r}")
        ms = int(match.group(1))
    else:
        raise ValueError(f"Unsupported timestamp type: {type(raw).__name__}")

    if ms < 0:
        raise ValueError(f"Negative timestamp: {ms}")
    try:
        return from_epoch_ms(ms)
    except OverflowError as e:
        raise ValueError(f"Timestamp out of range: {ms}") from e


@dataclass(frozen=True)
class MalformedRecord:
    """Record of an event that was dropped before layout."""
    record: RawEventRecord
    error: Error

    @property
    def event_id(self) -> Optional[Union[str, int]]:
        return self.record.event_id

    def to_dict(self) -> dict:
        return {
            'record': self.record.to_wire(),
            'code': self.error.code.name,
            'error': self.error.message,
            'timestamp': self.error.timestamp.isoformat()
        }


@dataclass
class ParseReport:
    """
    Complete report of one parse pass.

    TRACEABLE:
    Every input record results in exactly one of:
    - An event in `events`
    - An entry in `malformed_items`
    """
    processed_count: int = 0
    events: List[ScheduledEvent] = field(default_factory=list)
    malformed_items: List[MalformedRecord] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return len(self.events)

    @property
    def malformed_count(self) -> int:
        return len(self.malformed_items)


class RecordParser:
    """Validates raw records. Stateless; one instance can serve every render."""

    def parse_batch(
        self,
        records: Sequence[RawEventRecord],
        parsed_at: Optional[datetime] = None
    ) -> ParseReport:
        parsed_at = parsed_at or datetime.now(timezone.utc)
        report = ParseReport(processed_count=len(records))

        for record in records:
            result = self.parse_record(record, parsed_at)
            if isinstance(result, ScheduledEvent):
                report.events.append(result)
            else:
                logger.warning(
                    "Dropping event %r: %s", record.event_id, result.error.message
                )
                report.malformed_items.append(result)

        logger.debug(
            "Parsed %d of %d records (%d malformed)",
            report.success_count, report.processed_count, report.malformed_count
        )
        return report

    def parse_record(
        self,
        record: RawEventRecord,
        parsed_at: datetime
    ) -> Union[ScheduledEvent, MalformedRecord]:
        if record.event_id is None:
            return self._malformed(
                record, ErrorCode.MISSING_FIELD, "Missing required field: id", parsed_at
            )
        if record.call_time is None:
            return self._malformed(
                record, ErrorCode.MISSING_FIELD, "Missing required field: callTime", parsed_at
            )

        try:
            instant = parse_call_time(record.call_time)
        except ValueError as e:
            return self._malformed(record, ErrorCode.INVALID_TIMESTAMP, str(e), parsed_at)

        name = record.name if isinstance(record.name, str) else ('' if record.name is None else str(record.name))
        return ScheduledEvent(event_id=record.event_id, name=name, instant=instant)

    def _malformed(
        self,
        record: RawEventRecord,
        code: ErrorCode,
        message: str,
        parsed_at: datetime
    ) -> MalformedRecord:
        error = Error(code=code, message=message, timestamp=parsed_at)
        if record.event_id is not None:
            error = error.with_context('event_id', str(record.event_id))
        return MalformedRecord(record=record, error=error)
