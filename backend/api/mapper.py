"""
API Mapper
==========

Transforms a TimelineView into JSON-safe dicts for renderers that live
outside the Python process. Positions are passed through untouched.
"""
from typing import Any, Dict
from datetime import datetime

from frontend.dtos.event import NowMarkerDTO, PositionedEventDTO
from frontend.visualization.timeline import TimelineView


def _iso(value: datetime) -> str:
    return value.isoformat().replace('+00:00', 'Z')


def map_view_to_dto(view: TimelineView) -> Dict[str, Any]:
    """
    Map TimelineView to the TimelineDTO wire shape.

    Event order is the layout order (ascending instant); renderers must not
    re-sort.
    """
    config = view.config
    return {
        "dto_version": view.dto_version.value,
        "view_id": view.view_id,
        "generated_at": _iso(view.generated_at),
        "window": {
            "start": _iso(view.window.start),
            "end": _iso(view.window.end),
        },
        "axis": {
            "x": config.axis_x,
            "ticks": [{"y": y, "label": label} for y, label in view.axis.ticks],
        },
        "geometry": {
            "height": config.height,
            "dot_x": config.dot_x,
            "label_x": config.label_x,
            "marker_radius": config.marker_radius,
            "marker_stroke_width": config.marker_stroke_width,
        },
        "events": [_map_event(e) for e in view.events],
        "now": _map_now(view.now_marker, config.now_marker_x, config.now_marker_radius),
        "malformed": [m.to_dict() for m in view.malformed],
    }


def _map_event(event: PositionedEventDTO) -> Dict[str, Any]:
    return {
        "id": event.event.event_id,
        "name": event.event.name,
        "call_time": _iso(event.event.instant),
        "href": event.href,
        "raw_y": event.raw_y,
        "dot_y": event.dot_y,
        "label_y": event.label_y,
        "dot_visible": event.dot_visible,
        "within_window": event.within_window,
    }


def _map_now(marker: NowMarkerDTO, x: float, radius: float) -> Dict[str, Any]:
    return {
        "instant": _iso(marker.instant),
        "x": x,
        "y": marker.y,
        "r": radius,
        "within_window": marker.within_window,
    }
