"""
Frontend DTO Package

Read-only, immutable Data Transfer Objects handed to timeline renderers.

BOUNDARY ENFORCEMENT:
=====================
1. All DTOs are frozen (immutable)
2. Serialized views are versioned
3. Renderers receive ONLY these types and the TimelineView that holds them
"""

from .core import DTOVersion
from .event import PositionedEventDTO, NowMarkerDTO

__all__ = [
    'DTOVersion',
    'PositionedEventDTO',
    'NowMarkerDTO',
]
