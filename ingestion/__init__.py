"""
Ingestion Layer

Fetches the weekly event feed and validates its records.

MUST NOT: position, sort for display, or render anything.
"""

from .contracts import (
    DEFAULT_ENDPOINT, EventSource, FetchStatus, FetchResult,
    RawEventRecord, ScheduledEvent,
)
from .fetcher import EventFetcher
from .parser import RecordParser, ParseReport, MalformedRecord, parse_call_time

__all__ = [
    'DEFAULT_ENDPOINT', 'EventSource', 'FetchStatus', 'FetchResult',
    'RawEventRecord', 'ScheduledEvent',
    'EventFetcher',
    'RecordParser', 'ParseReport', 'MalformedRecord', 'parse_call_time',
]
