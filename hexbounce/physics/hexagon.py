"""
Regular hexagon geometry and circle-vs-hexagon collision queries.

A Hexagon is an immutable value. Rotating one builds a fresh hexagon from
(center, radius, rotation) instead of transforming the previous vertices,
so repeated rotation never accumulates drift.

Vertices are generated at rotation + k*60 degrees, in order of increasing
angle (clockwise on screen, where y grows downward). With that winding the
perpendicular (-dy, dx) of each edge direction points into the hexagon.

The center is copied on construction. Vertices and normals are fresh
vectors owned by the hexagon; callers must not set() them.
"""

import math
from dataclasses import dataclass
from typing import NamedTuple, Optional, Tuple

from .vector import Vector2D


NUM_SIDES = 6
SIDE_ANGLE = math.pi / 3  # 60 degrees


@dataclass(frozen=True)
class HexagonEdge:
    """Directed segment start -> end with a unit inward normal."""

    start: Vector2D
    end: Vector2D
    normal: Vector2D


@dataclass(frozen=True)
class Hexagon:
    """A regular hexagon at one point in time."""

    center: Vector2D
    radius: float
    vertices: Tuple[Vector2D, ...]
    edges: Tuple[HexagonEdge, ...]
    rotation: float = 0.0


class EdgeDistance(NamedTuple):
    distance: float
    closest_point: Vector2D
    is_on_segment: bool


class HexagonBounds(NamedTuple):
    min_x: float
    max_x: float
    min_y: float
    max_y: float


@dataclass(frozen=True)
class CollisionResult:
    """
    Outcome of a circle-vs-hexagon query.

    Attributes:
        is_colliding: True if the circle touches or crosses the nearest edge
        edge: The nearest edge (None when not colliding)
        point: Closest point on that edge (None when not colliding)
        penetration_depth: radius - distance to the edge (0 when not colliding)
    """

    is_colliding: bool
    edge: Optional[HexagonEdge] = None
    point: Optional[Vector2D] = None
    penetration_depth: float = 0.0


NO_COLLISION = CollisionResult(is_colliding=False)


def create_hexagon(center: Vector2D, radius: float, rotation: float = 0.0) -> Hexagon:
    """
    Build a regular hexagon.

    Args:
        center: Hexagon center
        radius: Circumradius (center to vertex)
        rotation: Angle of the first vertex in radians

    Returns:
        Hexagon with 6 vertices and 6 edges, edges[i] running from
        vertices[i] to vertices[(i + 1) % 6]
    """
    vertices = []
    for i in range(NUM_SIDES):
        angle = i * SIDE_ANGLE + rotation
        vertices.append(Vector2D(
            center.x + radius * math.cos(angle),
            center.y + radius * math.sin(angle),
        ))

    edges = []
    for i in range(NUM_SIDES):
        start = vertices[i]
        end = vertices[(i + 1) % NUM_SIDES]
        edge_vector = end.subtract(start)
        normal = Vector2D(-edge_vector.y, edge_vector.x).normalize()
        edges.append(HexagonEdge(start=start, end=end, normal=normal))

    return Hexagon(
        center=center.clone(),
        radius=radius,
        vertices=tuple(vertices),
        edges=tuple(edges),
        rotation=rotation,
    )


def rotate_hexagon(hexagon: Hexagon, delta_rotation: float) -> Hexagon:
    """Return a new hexagon turned by `delta_rotation` radians."""
    return create_hexagon(hexagon.center, hexagon.radius, hexagon.rotation + delta_rotation)


def is_point_inside_hexagon(point: Vector2D, hexagon: Hexagon) -> bool:
    """
    Even-odd test with a horizontal ray cast to the right of `point`.

    A ray passing exactly through a vertex is not special-cased.
    """
    intersections = 0
    for edge in hexagon.edges:
        if _ray_intersects_edge(point, edge.start, edge.end):
            intersections += 1
    return intersections % 2 == 1


def _ray_intersects_edge(point: Vector2D, edge_start: Vector2D, edge_end: Vector2D) -> bool:
    # Both endpoints on the same side of the ray
    if (edge_start.y > point.y) == (edge_end.y > point.y):
        return False

    intersection_x = edge_start.x + (
        (point.y - edge_start.y) * (edge_end.x - edge_start.x) / (edge_end.y - edge_start.y)
    )
    return intersection_x > point.x


def distance_to_edge(point: Vector2D, edge_start: Vector2D, edge_end: Vector2D) -> EdgeDistance:
    """
    Closest point on the segment edge_start -> edge_end.

    Args:
        point: Query point
        edge_start: Segment start
        edge_end: Segment end

    Returns:
        EdgeDistance with the distance, the closest point on the segment,
        and whether the unclamped projection landed within the segment
    """
    edge_vector = edge_end.subtract(edge_start)
    point_vector = point.subtract(edge_start)

    edge_length_squared = edge_vector.magnitude_squared()
    if edge_length_squared == 0:
        # Segment collapsed to a point
        return EdgeDistance(point.distance(edge_start), edge_start, True)

    t = point_vector.dot(edge_vector) / edge_length_squared
    clamped = max(0.0, min(1.0, t))

    closest_point = edge_start.add(edge_vector.multiply(clamped))
    return EdgeDistance(
        point.distance(closest_point),
        closest_point,
        0.0 <= t <= 1.0,
    )


def circle_hexagon_collision(
    circle_center: Vector2D,
    radius: float,
    hexagon: Hexagon,
) -> CollisionResult:
    """
    Test a circle against the hexagon boundary.

    All six edges are scanned and only the nearest one is reported, even
    when the circle overlaps two edges near a corner. Ties keep the first
    edge in vertex order.

    Args:
        circle_center: Circle center
        radius: Circle radius
        hexagon: Boundary to test against

    Returns:
        CollisionResult for the nearest edge, or NO_COLLISION if that
        edge is farther than `radius`
    """
    closest_edge = None
    closest_point = None
    closest_distance = math.inf

    for edge in hexagon.edges:
        result = distance_to_edge(circle_center, edge.start, edge.end)
        if result.distance < closest_distance:
            closest_distance = result.distance
            closest_edge = edge
            closest_point = result.closest_point

    if closest_edge is not None and closest_distance <= radius:
        return CollisionResult(
            is_colliding=True,
            edge=closest_edge,
            point=closest_point,
            penetration_depth=radius - closest_distance,
        )

    return NO_COLLISION


def get_hexagon_bounds(hexagon: Hexagon) -> HexagonBounds:
    """Axis-aligned bounding box over the six vertices."""
    xs = [v.x for v in hexagon.vertices]
    ys = [v.y for v in hexagon.vertices]
    return HexagonBounds(min(xs), max(xs), min(ys), max(ys))
