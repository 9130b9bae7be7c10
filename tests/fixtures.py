"""
Timeline Test Fixtures

Fixed instants and record builders for deterministic layout tests.
All fixtures are explicit - no random generation.
"""

from datetime import datetime, timezone
from typing import Union

from backend.contracts.base import to_epoch_ms


# =============================================================================
# FIXED TIMESTAMPS (deterministic)
# =============================================================================

# Week of Monday 2026-10-12
MONDAY = datetime(2026, 10, 12, 0, 0, 0, tzinfo=timezone.utc)
MON_0900 = datetime(2026, 10, 12, 9, 0, 0, tzinfo=timezone.utc)
MON_0905 = datetime(2026, 10, 12, 9, 5, 0, tzinfo=timezone.utc)
WED_1200 = datetime(2026, 10, 14, 12, 0, 0, tzinfo=timezone.utc)
WED_1400 = datetime(2026, 10, 14, 14, 0, 0, tzinfo=timezone.utc)
SUN_2359 = datetime(2026, 10, 18, 23, 59, 0, tzinfo=timezone.utc)
NEXT_MONDAY = datetime(2026, 10, 19, 0, 0, 0, tzinfo=timezone.utc)


def epoch_ms(value: datetime) -> int:
    return int(to_epoch_ms(value))


def wire_record(event_id: Union[str, int], name: str, when: datetime) -> dict:
    """One element of the feed's JSON array, callTime in %Q encoding."""
    return {'id': event_id, 'name': name, 'callTime': str(epoch_ms(when))}


def scenario_a_payload() -> list:
    """Two colliding Monday events and one well separated Wednesday event."""
    return [
        wire_record(1, "Rehearsal", MON_0900),
        wire_record(2, "Warmup", MON_0905),
        wire_record(3, "Concert", WED_1400),
    ]
