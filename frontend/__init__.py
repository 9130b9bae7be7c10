"""
Timeline Frontend Layer

Layout engine and render session for the weekly timeline. Produces
immutable views; drawing them is the renderer's job.
"""
