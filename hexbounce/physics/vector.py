"""
2D vector type for positions, velocities, accelerations and normals.

All arithmetic returns a new Vector2D; set() is the only in-place mutator.
Division by zero follows IEEE float semantics and is not guarded.
"""

import math
from typing import Iterator, Tuple


class Vector2D:
    """An (x, y) pair of floats."""

    __slots__ = ("x", "y")

    def __init__(self, x: float = 0.0, y: float = 0.0):
        self.x = x
        self.y = y

    def add(self, other: "Vector2D") -> "Vector2D":
        return Vector2D(self.x + other.x, self.y + other.y)

    def subtract(self, other: "Vector2D") -> "Vector2D":
        return Vector2D(self.x - other.x, self.y - other.y)

    def multiply(self, scalar: float) -> "Vector2D":
        return Vector2D(self.x * scalar, self.y * scalar)

    def divide(self, scalar: float) -> "Vector2D":
        # Plain float division raises on zero; keep IEEE inf/nan instead
        if scalar == 0:
            return Vector2D(_ieee_div(self.x, scalar), _ieee_div(self.y, scalar))
        return Vector2D(self.x / scalar, self.y / scalar)

    def dot(self, other: "Vector2D") -> float:
        return self.x * other.x + self.y * other.y

    def magnitude(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y)

    def magnitude_squared(self) -> float:
        """Squared length, for comparisons that don't need the sqrt."""
        return self.x * self.x + self.y * self.y

    def normalize(self) -> "Vector2D":
        """
        Unit vector in the same direction.

        Returns:
            A new unit-length Vector2D, or the zero vector when this
            vector has zero length.
        """
        mag = self.magnitude()
        if mag == 0:
            return Vector2D(0.0, 0.0)
        return self.divide(mag)

    def clone(self) -> "Vector2D":
        return Vector2D(self.x, self.y)

    def set(self, x: float, y: float) -> "Vector2D":
        """Overwrite both components in place and return self."""
        self.x = x
        self.y = y
        return self

    def distance(self, other: "Vector2D") -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        return math.sqrt(dx * dx + dy * dy)

    def rotate(self, angle: float) -> "Vector2D":
        """Rotate by `angle` radians about the origin, from +x toward +y."""
        cos = math.cos(angle)
        sin = math.sin(angle)
        return Vector2D(
            self.x * cos - self.y * sin,
            self.x * sin + self.y * cos,
        )

    def reflect(self, normal: "Vector2D") -> "Vector2D":
        """
        Reflect across a unit normal: v' = v - 2(v.n)n.

        Args:
            normal: Unit-length surface normal

        Returns:
            The reflected vector
        """
        dot_product = self.dot(normal)
        return Vector2D(
            self.x - 2 * dot_product * normal.x,
            self.y - 2 * dot_product * normal.y,
        )

    def to_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __repr__(self) -> str:
        return f"Vector2D({self.x:.2f}, {self.y:.2f})"


def _ieee_div(numerator: float, zero: float) -> float:
    if numerator == 0 or math.isnan(numerator):
        return math.nan
    return math.copysign(math.inf, numerator) * math.copysign(1.0, zero)
