"""
Observability & Audit Layer

RESPONSIBILITY: Record what each render cycle did
ALLOWED INPUTS: Fetch results, dropped records, render outcomes
OUTPUTS: Append-only AuditLogEntry sequence, mirrored to stdlib logging

WHAT THIS LAYER MUST NOT DO:
============================
- Modify system behavior
- Filter or interpret events (only record them)
- Block a render because an entry could not be written
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, List, Optional, Tuple
from enum import Enum
from datetime import datetime, timezone
import hashlib
import logging

logger = logging.getLogger(__name__)


class AuditEventType(Enum):
    """Explicit audit event types."""
    FETCH_COMPLETED = "fetch_completed"
    FETCH_FAILED = "fetch_failed"
    RECORD_DROPPED = "record_dropped"
    TARGET_MISSING = "target_missing"
    VIEW_RENDERED = "view_rendered"


# Severity each entry is mirrored to the module logger with
_LOG_LEVELS: Dict[AuditEventType, int] = {
    AuditEventType.FETCH_COMPLETED: logging.DEBUG,
    AuditEventType.FETCH_FAILED: logging.WARNING,
    AuditEventType.RECORD_DROPPED: logging.WARNING,
    AuditEventType.TARGET_MISSING: logging.INFO,
    AuditEventType.VIEW_RENDERED: logging.DEBUG,
}


@dataclass(frozen=True)
class AuditLogEntry:
    """Immutable audit log entry."""
    entry_id: str
    event_type: AuditEventType
    timestamp: datetime
    layer: str
    action: str
    entity_id: Optional[str] = None
    metadata: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)


class LogCollector:
    """
    Append-only audit collector.

    One collector per session. Entries are never modified; readers get
    copies. With max_entries set only the newest entries are retained.
    """

    def __init__(self, layer_name: str, max_entries: Optional[int] = None):
        self._layer_name = layer_name
        self._entries: Deque[AuditLogEntry] = deque(maxlen=max_entries)
        self._sequence: int = 0

    def record(
        self,
        event_type: AuditEventType,
        action: str,
        entity_id: Optional[str] = None,
        metadata: Optional[Dict[str, str]] = None,
        timestamp: Optional[datetime] = None
    ) -> AuditLogEntry:
        """Create, store and log an entry."""
        timestamp = timestamp or datetime.now(timezone.utc)
        entry_seed = f"{self._layer_name}|{self._sequence}|{event_type.value}|{entity_id}"
        entry = AuditLogEntry(
            entry_id=f"audit_{hashlib.sha256(entry_seed.encode('utf-8')).hexdigest()[:12]}",
            event_type=event_type,
            timestamp=timestamp,
            layer=self._layer_name,
            action=action,
            entity_id=entity_id,
            metadata=tuple(sorted((metadata or {}).items()))
        )
        self.collect(entry)
        logger.log(
            _LOG_LEVELS[event_type], "[%s] %s%s",
            self._layer_name, action,
            f" ({entity_id})" if entity_id is not None else ""
        )
        return entry

    def collect(self, entry: AuditLogEntry):
        """Collect an audit entry (append-only, oldest evicted when full)."""
        self._entries.append(entry)
        self._sequence += 1

    def get_entries(
        self,
        event_type: Optional[AuditEventType] = None
    ) -> List[AuditLogEntry]:
        """Get entries, optionally filtered by type."""
        entries = self._entries
        if event_type:
            entries = [e for e in entries if e.event_type == event_type]
        return list(entries)

    def count(self, event_type: AuditEventType) -> int:
        return sum(1 for e in self._entries if e.event_type == event_type)

    @property
    def entry_count(self) -> int:
        return len(self._entries)
