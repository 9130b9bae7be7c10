"""
Weekly Timeline: Layout API Server
==================================

Read-only API serving computed timeline layouts to renderers.

Endpoints:
- GET  /health                    -> Liveness
- GET  /api/v1/timeline           -> Fetch the feed and lay out this week
- POST /api/v1/timeline/layout    -> Lay out records supplied by the caller

Usage:
    uvicorn backend.api.server:app --reload
"""
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Callable, List, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from backend.observability import LogCollector
from backend.temporal.clock import LogicalClock
from frontend.session import RenderStatus, TimelineSession
from frontend.visualization.timeline import TimelineLayoutEngine
from ingestion.contracts import RawEventRecord
from ingestion.fetcher import EventFetcher

from ..config import TimelineConfig
from .mapper import map_view_to_dto


class LayoutRequest(BaseModel):
    """Body of POST /api/v1/timeline/layout."""
    records: List[Any]
    now: Optional[datetime] = None


# Audit entries retained by a server session
AUDIT_LIMIT = 1000


def build_session(config: TimelineConfig, audit_limit: int = AUDIT_LIMIT) -> TimelineSession:
    """
    Session for a long-running server: live clock without a tick log and
    an audit log capped at `audit_limit` entries.
    """
    return TimelineSession(
        fetcher=EventFetcher(config.source),
        engine=TimelineLayoutEngine(config.layout),
        clock=LogicalClock.live(record=False),
        tz=config.tzinfo(),
        audit=LogCollector("timeline", max_entries=audit_limit)
    )


def create_app(session_factory: Optional[Callable[[], TimelineSession]] = None) -> FastAPI:
    """
    Build the API app.

    The session is created on startup; by default from TimelineConfig.from_env().
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if session_factory is not None:
            app.state.session = session_factory()
        else:
            config = TimelineConfig.from_env()
            print(f"[*] Timeline feed: {config.source.url} (tz={config.timezone})")
            app.state.session = build_session(config)
        yield
        app.state.session = None

    app = FastAPI(
        title="Weekly Timeline API",
        version="0.1.0",
        description="Precomputed weekly timeline layouts",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    def _session(request: Request) -> TimelineSession:
        session = getattr(request.app.state, "session", None)
        if session is None:
            raise HTTPException(status_code=503, detail="Timeline session not initialized")
        return session

    @app.get("/health")
    async def health_check(request: Request):
        _session(request)
        return {"status": "online"}

    @app.get("/api/v1/timeline")
    async def get_timeline(request: Request):
        """
        Fetch the upstream feed and return this week's layout.
        A failed fetch is terminal for the request (502), never retried.
        """
        outcome = await _session(request).load()
        if outcome.status == RenderStatus.FETCH_FAILED:
            raise HTTPException(
                status_code=502,
                detail={"code": outcome.error.code.name, "message": outcome.error.message}
            )
        return map_view_to_dto(outcome.view)

    @app.post("/api/v1/timeline/layout")
    async def post_layout(request: Request, body: LayoutRequest):
        records = [RawEventRecord.from_wire(item) for item in body.records]
        view = _session(request).layout(records, now=body.now)
        return map_view_to_dto(view)

    return app


app = create_app()
