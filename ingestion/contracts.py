"""
Event Feed Ingestion Contracts

Immutable data structures for the weekly event feed.

BOUNDARY: Ingestion Layer
All event data enters through these contracts.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union
from datetime import datetime
from enum import Enum
import hashlib

from backend.contracts.base import Error, ErrorCode


DEFAULT_ENDPOINT = "https://gleeclub.gatech.edu/cgi-bin/api/week_of_events"


# =============================================================================
# ENUMS
# =============================================================================

class FetchStatus(Enum):
    """Status of a fetch attempt."""
    SUCCESS = "success"
    TIMEOUT = "timeout"
    HTTP_ERROR = "http_error"
    PARSE_ERROR = "parse_error"
    NETWORK_ERROR = "network_error"


_STATUS_CODES = {
    FetchStatus.TIMEOUT: ErrorCode.FETCH_TIMEOUT,
    FetchStatus.HTTP_ERROR: ErrorCode.FETCH_HTTP_STATUS,
    FetchStatus.PARSE_ERROR: ErrorCode.MALFORMED_PAYLOAD,
    FetchStatus.NETWORK_ERROR: ErrorCode.FETCH_NETWORK,
}


# =============================================================================
# SOURCE CONFIGURATION
# =============================================================================

@dataclass(frozen=True)
class EventSource:
    """Where the week of events is fetched from."""
    url: str = DEFAULT_ENDPOINT
    timeout: float = 30.0
    user_agent: str = "WeeklyTimeline/1.0"
    source_id: str = "week_of_events"


# =============================================================================
# RAW RECORDS
# =============================================================================

@dataclass(frozen=True)
class RawEventRecord:
    """
    One event exactly as received on the wire.

    `call_time` is left untouched; it may be malformed. A field that was
    absent from the wire object is None.
    """
    event_id: Optional[Union[str, int]]
    name: Optional[str]
    call_time: Any

    @staticmethod
    def from_wire(item: Any) -> RawEventRecord:
        """Build from one element of the JSON array ({id, name, callTime})."""
        if not isinstance(item, Mapping):
            return RawEventRecord(event_id=None, name=None, call_time=item)
        return RawEventRecord(
            event_id=item.get('id'),
            name=item.get('name'),
            call_time=item.get('callTime')
        )

    def to_wire(self) -> dict:
        return {'id': self.event_id, 'name': self.name, 'callTime': self.call_time}


# =============================================================================
# FETCH RESULTS
# =============================================================================

@dataclass(frozen=True)
class FetchResult:
    """
    Result of a fetch attempt (success or failure).

    Failed fetches are FIRST-CLASS outputs, not exceptions.
    """
    result_id: str
    source_id: str
    url: str
    attempted_at: datetime
    completed_at: datetime
    status: FetchStatus

    # On success
    records_count: int = 0

    # On failure
    error_message: Optional[str] = None
    http_status: Optional[int] = None

    @property
    def success(self) -> bool:
        return self.status == FetchStatus.SUCCESS

    @property
    def duration_ms(self) -> float:
        return (self.completed_at - self.attempted_at).total_seconds() * 1000

    def to_error(self) -> Optional[Error]:
        """Error value for a failed fetch, None on success."""
        if self.success:
            return None
        error = Error(
            code=_STATUS_CODES[self.status],
            message=self.error_message or self.status.value,
            timestamp=self.completed_at
        ).with_context('url', self.url)
        if self.http_status is not None:
            error = error.with_context('http_status', str(self.http_status))
        return error

    @staticmethod
    def generate_id(source: EventSource, attempted_at: datetime) -> str:
        seed = f"{source.source_id}|{source.url}|{attempted_at.isoformat()}"
        return f"fetch_{hashlib.sha256(seed.encode('utf-8')).hexdigest()[:16]}"


# =============================================================================
# VALIDATED EVENTS
# =============================================================================

@dataclass(frozen=True)
class ScheduledEvent:
    """
    An event whose call time parsed to a real instant.

    INVARIANT: `instant` is a timezone-aware datetime.
    """
    event_id: Union[str, int]
    name: str
    instant: datetime

    @property
    def href(self) -> str:
        """Navigation target of the event page."""
        return f"#/events/{self.event_id}"
