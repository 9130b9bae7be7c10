"""
Timeline Render Session

Drives one render cycle: fetch -> take one "now" -> check the target ->
lay out -> draw.

GUARANTEES:
===========
1. The fetch is the only suspension point; layout runs synchronously after it
2. Window and now-marker of a render share one clock tick
3. A target that disappeared while the fetch was in flight is a silent no-op
4. A failed fetch leaves the previous view in place; nothing is retried
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, tzinfo
from enum import Enum
from typing import Dict, List, Optional, Protocol

from backend.contracts.base import Error, ErrorCode, FetchError, ensure_aware
from backend.observability import AuditEventType, LogCollector
from backend.temporal.clock import LogicalClock
from ingestion.contracts import FetchResult, RawEventRecord
from ingestion.fetcher import EventFetcher

from .visualization.timeline import TimelineLayoutEngine, TimelineView


class TimelineTarget(Protocol):
    """A host surface that can draw a finished view."""

    def draw(self, view: TimelineView) -> None:
        ...


class TargetRegistry:
    """Host surfaces by element id. Surfaces come and go independently of renders."""

    def __init__(self):
        self._targets: Dict[str, TimelineTarget] = {}

    def attach(self, target_id: str, target: TimelineTarget) -> None:
        self._targets[target_id] = target

    def detach(self, target_id: str) -> Optional[TimelineTarget]:
        return self._targets.pop(target_id, None)

    def get(self, target_id: str) -> Optional[TimelineTarget]:
        return self._targets.get(target_id)


class RenderStatus(Enum):
    RENDERED = "rendered"
    FETCH_FAILED = "fetch_failed"
    TARGET_MISSING = "target_missing"


@dataclass(frozen=True)
class RenderOutcome:
    status: RenderStatus
    fetch_result: Optional[FetchResult] = None
    view: Optional[TimelineView] = None
    error: Optional[Error] = None

    @property
    def rendered(self) -> bool:
        return self.status == RenderStatus.RENDERED

    def raise_for_error(self) -> None:
        """Raise FetchError for a failed fetch. A missing target is not an error."""
        if self.status == RenderStatus.FETCH_FAILED and self.error is not None:
            raise FetchError(self.error)


class TimelineSession:
    """
    One timeline mounted in one host application.

    Keeps only the last successfully rendered view; every render builds a
    fresh view from its own fetched snapshot.
    """

    def __init__(
        self,
        fetcher: EventFetcher,
        engine: Optional[TimelineLayoutEngine] = None,
        clock: Optional[LogicalClock] = None,
        targets: Optional[TargetRegistry] = None,
        tz: Optional[tzinfo] = None,
        audit: Optional[LogCollector] = None
    ):
        self._fetcher = fetcher
        self._engine = engine or TimelineLayoutEngine()
        self._clock = clock or LogicalClock.live()
        self._targets = targets or TargetRegistry()
        self._tz = tz
        self._audit = audit or LogCollector("timeline")
        self._last_view: Optional[TimelineView] = None

    @property
    def targets(self) -> TargetRegistry:
        return self._targets

    @property
    def clock(self) -> LogicalClock:
        return self._clock

    @property
    def audit(self) -> LogCollector:
        return self._audit

    @property
    def last_view(self) -> Optional[TimelineView]:
        return self._last_view

    # =========================================================================
    # RENDERING
    # =========================================================================

    async def render(self, target_id: str) -> RenderOutcome:
        fetch_result, records = await self._fetcher.fetch()
        return self._complete(target_id, fetch_result, records)

    def render_sync(self, target_id: str) -> RenderOutcome:
        fetch_result, records = self._fetcher.fetch_sync()
        return self._complete(target_id, fetch_result, records)

    async def load(self) -> RenderOutcome:
        """Fetch and lay out without drawing anywhere."""
        fetch_result, records = await self._fetcher.fetch()
        return self._complete(None, fetch_result, records)

    def load_sync(self) -> RenderOutcome:
        fetch_result, records = self._fetcher.fetch_sync()
        return self._complete(None, fetch_result, records)

    def layout(
        self,
        records: List[RawEventRecord],
        now: Optional[datetime] = None
    ) -> TimelineView:
        """Lay out already-fetched records; `now` defaults to one clock tick."""
        now = self._now() if now is None else self._localize(now)
        view = self._engine.layout(records, now)
        self._audit_view(view)
        return view

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _complete(
        self,
        target_id: Optional[str],
        fetch_result: FetchResult,
        records: List[RawEventRecord]
    ) -> RenderOutcome:
        if not fetch_result.success:
            error = fetch_result.to_error()
            self._audit.record(
                AuditEventType.FETCH_FAILED,
                f"Fetch failed: {fetch_result.error_message}",
                entity_id=fetch_result.result_id,
                metadata={'status': fetch_result.status.value, 'url': fetch_result.url},
                timestamp=fetch_result.completed_at
            )
            return RenderOutcome(
                status=RenderStatus.FETCH_FAILED,
                fetch_result=fetch_result,
                error=error
            )

        self._audit.record(
            AuditEventType.FETCH_COMPLETED,
            f"Fetched {fetch_result.records_count} records",
            entity_id=fetch_result.result_id,
            metadata={'duration_ms': f"{fetch_result.duration_ms:.0f}"},
            timestamp=fetch_result.completed_at
        )

        target = None
        if target_id is not None:
            target = self._targets.get(target_id)
            if target is None:
                self._audit.record(
                    AuditEventType.TARGET_MISSING,
                    "Render target gone before fetch completed",
                    entity_id=target_id
                )
                return RenderOutcome(
                    status=RenderStatus.TARGET_MISSING,
                    fetch_result=fetch_result,
                    error=Error(
                        code=ErrorCode.TARGET_MISSING,
                        message=f"No render target '{target_id}'",
                        timestamp=fetch_result.completed_at
                    )
                )

        view = self.layout(records)
        if target is not None:
            target.draw(view)
        self._last_view = view
        return RenderOutcome(status=RenderStatus.RENDERED, fetch_result=fetch_result, view=view)

    def _now(self) -> datetime:
        return self._localize(self._clock.now())

    def _localize(self, now: datetime) -> datetime:
        now = ensure_aware(now)
        return now.astimezone(self._tz) if self._tz is not None else now

    def _audit_view(self, view: TimelineView) -> None:
        for item in view.malformed:
            self._audit.record(
                AuditEventType.RECORD_DROPPED,
                item.error.message,
                entity_id=None if item.event_id is None else str(item.event_id),
                metadata={'code': item.error.code.name},
                timestamp=item.error.timestamp
            )
        self._audit.record(
            AuditEventType.VIEW_RENDERED,
            f"Laid out {len(view.events)} events ({len(view.visible_dots)} dots visible)",
            entity_id=view.view_id,
            timestamp=view.generated_at
        )
