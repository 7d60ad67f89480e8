"""
Physics module.

Provides the vector type, hexagon geometry, configuration and the
ball-in-rotating-hexagon engine.
"""

from .vector import Vector2D
from .hexagon import (
    Hexagon,
    HexagonEdge,
    CollisionResult,
    create_hexagon,
    rotate_hexagon,
    is_point_inside_hexagon,
    distance_to_edge,
    circle_hexagon_collision,
    get_hexagon_bounds,
)
from .config import PhysicsConfig, PARAMETER_RANGES, clamp_to_range, get_preset, list_presets
from .engine import BallState, PhysicsEngine

__all__ = [
    'Vector2D',
    'Hexagon',
    'HexagonEdge',
    'CollisionResult',
    'create_hexagon',
    'rotate_hexagon',
    'is_point_inside_hexagon',
    'distance_to_edge',
    'circle_hexagon_collision',
    'get_hexagon_bounds',
    'PhysicsConfig',
    'PARAMETER_RANGES',
    'clamp_to_range',
    'get_preset',
    'list_presets',
    'BallState',
    'PhysicsEngine',
]
