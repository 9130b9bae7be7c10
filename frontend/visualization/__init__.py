"""
Timeline Visualization Package

scale -> projector -> collision -> timeline, leaf first.
"""

from .scale import TimeScale
from .projector import EventProjector, ProjectionResult
from .collision import CollisionAvoidanceLayout
from .timeline import (
    LayoutConfig, TimeAxis, TimelineView, TimelineLayoutEngine, now_marker
)

__all__ = [
    'TimeScale',
    'EventProjector', 'ProjectionResult',
    'CollisionAvoidanceLayout',
    'LayoutConfig', 'TimeAxis', 'TimelineView', 'TimelineLayoutEngine', 'now_marker',
]
