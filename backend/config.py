"""
Timeline Configuration

Unified configuration for fetch, layout and display timezone, with
environment overrides for deployment.

ENVIRONMENT:
============
TIMELINE_ENDPOINT  event feed URL
TIMELINE_TIMEOUT   fetch timeout in seconds
TIMELINE_TZ        IANA timezone the week is resolved in (default UTC)
TIMELINE_HEIGHT    timeline height in pixels
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from datetime import tzinfo
from typing import Mapping, Optional
from zoneinfo import ZoneInfo
import os

from frontend.visualization.timeline import LayoutConfig
from ingestion.contracts import EventSource


@dataclass
class TimelineConfig:
    """Unified configuration for a timeline session."""
    source: EventSource = None
    layout: LayoutConfig = None
    timezone: str = "UTC"

    def __post_init__(self):
        self.source = self.source or EventSource()
        self.layout = self.layout or LayoutConfig()
        # fail at startup, not on the first render
        self.tzinfo()

    def tzinfo(self) -> tzinfo:
        return ZoneInfo(self.timezone)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'TimelineConfig':
        env = os.environ if environ is None else environ
        source = EventSource()
        layout = LayoutConfig()

        if env.get("TIMELINE_ENDPOINT"):
            source = replace(source, url=env["TIMELINE_ENDPOINT"])
        if env.get("TIMELINE_TIMEOUT"):
            source = replace(source, timeout=float(env["TIMELINE_TIMEOUT"]))
        if env.get("TIMELINE_HEIGHT"):
            layout = replace(layout, height=float(env["TIMELINE_HEIGHT"]))

        return cls(
            source=source,
            layout=layout,
            timezone=env.get("TIMELINE_TZ") or "UTC"
        )
