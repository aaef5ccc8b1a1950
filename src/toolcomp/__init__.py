"""Toolcomp - Tool-radius compensated offset paths for CNC machining.

Toolcomp takes a polyline (open or closed, with optional per-point Z) and an
offset width and produces the path a cutter centre must follow to trace the
original at that distance on the chosen side. Convex corners get arcs,
concave corners get bisector moves, and corners too tight for the tool are
reduced before tracing.

Example:
    $ toolcomp outline.json --width 3 --closed --right -o outline.ngc

This will write outline.ngc with the compensated toolpath as G-code.
"""

__version__ = "0.1.0"
__author__ = "Dimosthenis Kaponis"

__all__ = ["__author__", "__version__"]
