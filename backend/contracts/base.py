"""
Base Contracts and Shared Types

Foundational types used across the ingestion, layout and API layers.
All types here are IMMUTABLE and represent pure data.

BOUNDARY ENFORCEMENT:
=====================
- This module is READ-ONLY from all layers
- Errors are values: layers return them, they do not raise them
- The only exception type is FetchError, raised on explicit request
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
from enum import Enum, auto


# =============================================================================
# ERROR STATES (Explicit, never silent)
# =============================================================================

class ErrorCode(Enum):
    """
    Explicit error codes for deterministic error handling.
    No silent fallbacks - every error state is enumerated.
    """
    # Fetch errors (terminal for one render cycle)
    FETCH_TIMEOUT = auto()
    FETCH_NETWORK = auto()
    FETCH_HTTP_STATUS = auto()
    MALFORMED_PAYLOAD = auto()

    # Record errors (the record is dropped, the render continues)
    INVALID_TIMESTAMP = auto()
    MISSING_FIELD = auto()

    # Host surface errors (no-op)
    TARGET_MISSING = auto()


@dataclass(frozen=True)
class Error:
    """
    Immutable error representation with full context.
    Errors are data, not exceptions - they can be stored and queried.
    """
    code: ErrorCode
    message: str
    timestamp: datetime
    context: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    def with_context(self, key: str, value: str) -> Error:
        """Return new Error with additional context (immutable)."""
        return Error(
            code=self.code,
            message=self.message,
            timestamp=self.timestamp,
            context=self.context + ((key, value),)
        )

    def context_value(self, key: str) -> Optional[str]:
        for k, v in self.context:
            if k == key:
                return v
        return None


class FetchError(Exception):
    """Raised when a caller asks a failed render cycle to surface its fetch error."""

    def __init__(self, error: Error):
        super().__init__(f"{error.code.name}: {error.message}")
        self.error = error


# =============================================================================
# INSTANTS (Absolute time, explicit timezone)
# =============================================================================

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
ONE_MS = timedelta(milliseconds=1)


def ensure_aware(value: datetime) -> datetime:
    """Naive datetimes are interpreted as UTC, never as local time."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_epoch_ms(value: datetime) -> float:
    """
    Absolute milliseconds since the Unix epoch.

    Subtracting against a UTC constant forces an absolute difference even
    when the operand carries a zoneinfo timezone.
    """
    return (ensure_aware(value) - EPOCH) / ONE_MS


def from_epoch_ms(ms: int, tz=timezone.utc) -> datetime:
    """Inverse of to_epoch_ms for whole milliseconds."""
    return (EPOCH + timedelta(milliseconds=ms)).astimezone(tz)
