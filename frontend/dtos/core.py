"""
Core DTO Types

Version types shared by every timeline DTO.

VERSIONING REQUIREMENT:
=======================
Every serialized view carries a version field.
Renderers MUST fail fast on unknown versions.
"""

from __future__ import annotations
from enum import Enum


class DTOVersion(Enum):
    """
    DTO schema versions.

    Renderers MUST reject unknown versions.
    """
    V1 = "v1"

    @classmethod
    def current(cls) -> 'DTOVersion':
        return cls.V1

