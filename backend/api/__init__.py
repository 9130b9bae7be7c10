"""Read-only HTTP surface over the timeline layout engine."""
