#!/usr/bin/env python3
"""
Weekly Timeline - Layout Trace
==============================

Fetches the week of events (or reads them from a file), runs the layout
engine once and prints where every dot and label ends up.

RUN:
    python render_timeline.py
    python render_timeline.py --input events.json --now 2026-10-14T12:00:00Z
    python render_timeline.py --tz America/New_York --json
    python render_timeline.py --save-clock ./clock.json
    python render_timeline.py --replay ./clock.json
"""

from __future__ import annotations
import sys
import os
import json
import argparse
import logging
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import List, Optional

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from backend.api.mapper import map_view_to_dto
from backend.config import TimelineConfig
from backend.temporal.clock import ClockExhausted, LogicalClock
from frontend.session import TimelineSession
from frontend.visualization.timeline import TimelineLayoutEngine, TimelineView
from ingestion.contracts import RawEventRecord
from ingestion.fetcher import EventFetcher


def print_view(view: TimelineView) -> None:
    window = view.window
    print(f"[*] Window: {window.start.isoformat()} -> {window.end.isoformat()}")
    print(f"[*] Now: {view.now_marker.instant.isoformat()} at y={view.now_marker.y:.1f}")
    print()
    print("| When | Event | Dot y | Label y |")
    print("| :--- | :--- | ---: | ---: |")
    for e in view.events:
        dot = f"{e.dot_y:.1f}" if e.dot_visible else "hidden"
        when = e.event.instant.astimezone(window.start.tzinfo).strftime('%a %H:%M')
        print(f"| {when} | {e.event.name} | {dot} | {e.label_y:.1f} |")

    if view.malformed:
        print(f"\n[!] Dropped {len(view.malformed)} malformed records")
        for m in view.malformed:
            print(f"  - {m.event_id!r}: {m.error.message}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Weekly Timeline - Layout Trace",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('--endpoint', '-e', default=None, help='Event feed URL')
    parser.add_argument('--input', '-i', default=None, help='Read records from a JSON file instead of fetching')
    parser.add_argument('--now', '-n', default=None, help='ISO instant to render at (default: system time)')
    parser.add_argument('--tz', default=None, help='IANA timezone the week is resolved in')
    parser.add_argument('--replay', '-r', default=None, help='Replay the clock from a saved tick log')
    parser.add_argument('--save-clock', default=None, help='Save the live clock ticks to this path')
    parser.add_argument('--json', action='store_true', help='Print the view as JSON')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    config = TimelineConfig.from_env()
    if args.endpoint:
        config.source = replace(config.source, url=args.endpoint)
    if args.tz:
        config.timezone = args.tz

    if args.now:
        clock = LogicalClock.fixed(datetime.fromisoformat(args.now.replace('Z', '+00:00')))
    elif args.replay:
        clock_path = Path(args.replay)
        if not clock_path.exists():
            print(f"Error: Clock log not found at {clock_path}")
            return 1
        clock = LogicalClock.from_log(clock_path)
        print(f"REPLAY MODE: Using clock from {clock_path}")
    else:
        clock = LogicalClock.live()

    session = TimelineSession(
        fetcher=EventFetcher(config.source),
        engine=TimelineLayoutEngine(config.layout),
        clock=clock,
        tz=config.tzinfo()
    )

    if args.input:
        with open(args.input, 'r') as f:
            payload = json.load(f)
        if not isinstance(payload, list):
            print(f"Error: {args.input} must contain a JSON array")
            return 1

    try:
        if args.input:
            view = session.layout([RawEventRecord.from_wire(item) for item in payload])
        else:
            outcome = session.load_sync()
            if not outcome.rendered:
                print(f"[!] {outcome.error.code.name}: {outcome.error.message}")
                return 1
            view = outcome.view
    except ClockExhausted as e:
        print(f"[!] {e}")
        return 1

    if args.save_clock and clock.is_live():
        clock.save_log(Path(args.save_clock))

    if args.json:
        print(json.dumps(map_view_to_dto(view), indent=2))
    else:
        print_view(view)
    return 0


if __name__ == "__main__":
    sys.exit(main())
