"""
Contracts Module

Explicit, immutable types shared by every layer.

DESIGN PRINCIPLES:
==================
1. All contract types are immutable (frozen dataclasses)
2. All contracts include explicit error states
3. All instants are timezone-aware; naive values mean UTC
"""

from .base import (
    ErrorCode, Error, FetchError,
    EPOCH, ONE_MS, ensure_aware, to_epoch_ms, from_epoch_ms,
)

__all__ = [
    'ErrorCode', 'Error', 'FetchError',
    'EPOCH', 'ONE_MS', 'ensure_aware', 'to_epoch_ms', 'from_epoch_ms',
]
