"""Bouncing ball inside a rotating hexagon."""

__version__ = "0.1.0"
