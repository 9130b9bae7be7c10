"""
Weekly Timeline Backend

Layered support code for the weekly timeline layout engine. Each layer
communicates only through explicit contracts, never through shared
mutable state.

LAYER STRUCTURE:
================

1. CONTRACTS (contracts/)
   - Error codes, instant arithmetic
   - MUST NOT: import from any other layer

2. TEMPORAL (temporal/)
   - Injectable clock, week window resolution
   - MUST NOT: read the system clock outside LogicalClock

3. OBSERVABILITY (observability/)
   - Append-only audit log of fetches, dropped records and renders
   - MUST NOT: modify or filter the events it records

4. API (api/)
   - Read-only HTTP surface over the layout engine
"""
