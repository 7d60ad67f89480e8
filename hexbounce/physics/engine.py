"""
Ball-in-rotating-hexagon physics engine.

One explicit Euler step per update:
1. gravity into acceleration
2. drag applied straight to velocity
3. acceleration into velocity, then acceleration cleared
4. speed cap
5. velocity into position
6. collision against the current hexagon
7. hexagon rotation (so collisions see last frame's orientation)

The engine is the single writer of ball and hexagon state. Readers get
copies of both, and the hexagon passed in is copied on construction.
"""

import random
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from .config import MAX_TIMESTEP, PhysicsConfig
from .hexagon import (
    Hexagon,
    HexagonEdge,
    circle_hexagon_collision,
    create_hexagon,
    rotate_hexagon,
)
from .vector import Vector2D


# Initial/reset velocity is drawn from [-INITIAL_SPEED_SPREAD/2, INITIAL_SPEED_SPREAD/2]
INITIAL_SPEED_SPREAD = 200.0

# Below this speed on both axes a bounce gets a random kick of up to
# +/- STALL_KICK_SPREAD/2 per axis
STALL_SPEED = 10.0
STALL_KICK_SPREAD = 50.0


@dataclass
class BallState:
    """Kinematic state of the ball. Acceleration is cleared every step."""

    position: Vector2D = field(default_factory=Vector2D)
    velocity: Vector2D = field(default_factory=Vector2D)
    acceleration: Vector2D = field(default_factory=Vector2D)

    def copy(self) -> "BallState":
        return BallState(
            position=self.position.clone(),
            velocity=self.velocity.clone(),
            acceleration=self.acceleration.clone(),
        )


class PhysicsEngine:
    """
    Simulates one ball bouncing inside a rotating hexagon.

    The engine starts stopped; update() does nothing until start() is called.
    """

    def __init__(
        self,
        config: PhysicsConfig,
        hexagon: Hexagon,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the engine with the ball at the hexagon center.

        Args:
            config: Physics parameters (copied)
            hexagon: Initial boundary
            rng: Random source for initial velocity and anti-stall kicks.
                 A fresh unseeded random.Random when omitted.
        """
        self._config = config.merged()
        self._hexagon = _copy_hexagon(hexagon)
        self._rng = rng if rng is not None else random.Random()
        self._is_running = False
        self._collided = False

        self._ball = BallState(
            position=self._hexagon.center.clone(),
            velocity=self._random_velocity(),
            acceleration=Vector2D(0.0, 0.0),
        )

    @property
    def is_running(self) -> bool:
        return self._is_running

    def start(self) -> None:
        self._is_running = True

    def stop(self) -> None:
        self._is_running = False

    def update(self, delta_time: float) -> None:
        """
        Advance the simulation by one step.

        Args:
            delta_time: Seconds since the last frame. Clamped to MAX_TIMESTEP.
        """
        if not self._is_running:
            return

        delta_time = min(delta_time, MAX_TIMESTEP)
        self._collided = False

        self._apply_gravity()
        self._apply_friction(delta_time)
        self._update_velocity(delta_time)
        self._limit_velocity()
        self._update_position(delta_time)
        self._handle_collisions()
        self._update_hexagon_rotation(delta_time)

    def _apply_gravity(self) -> None:
        self._ball.acceleration.y += self._config.gravity

    def _apply_friction(self, delta_time: float) -> None:
        damping = 1 - self._config.friction * delta_time
        self._ball.velocity.x *= damping
        self._ball.velocity.y *= damping

    def _update_velocity(self, delta_time: float) -> None:
        ball = self._ball
        ball.velocity.x += ball.acceleration.x * delta_time
        ball.velocity.y += ball.acceleration.y * delta_time
        ball.acceleration.set(0.0, 0.0)

    def _limit_velocity(self) -> None:
        speed = self._ball.velocity.magnitude()
        if speed > self._config.max_velocity:
            scale = self._config.max_velocity / speed
            self._ball.velocity.x *= scale
            self._ball.velocity.y *= scale

    def _update_position(self, delta_time: float) -> None:
        ball = self._ball
        ball.position.x += ball.velocity.x * delta_time
        ball.position.y += ball.velocity.y * delta_time

    def _handle_collisions(self) -> None:
        collision = circle_hexagon_collision(
            self._ball.position,
            self._config.ball_radius,
            self._hexagon,
        )
        if collision.is_colliding and collision.edge is not None:
            self._resolve_collision(collision.edge, collision.penetration_depth)

    def _resolve_collision(self, edge: HexagonEdge, penetration_depth: float) -> None:
        normal = edge.normal

        # Single-pass push out along the inward normal
        self._ball.position = self._ball.position.add(normal.multiply(penetration_depth))

        # Only the normal-reversal term is scaled by restitution
        incident = self._ball.velocity
        dot_product = incident.dot(normal)
        restitution = self._config.restitution
        self._ball.velocity = Vector2D(
            incident.x - 2 * dot_product * normal.x * restitution,
            incident.y - 2 * dot_product * normal.y * restitution,
        )

        velocity = self._ball.velocity
        if abs(velocity.x) < STALL_SPEED and abs(velocity.y) < STALL_SPEED:
            velocity.x += (self._rng.random() - 0.5) * STALL_KICK_SPREAD
            velocity.y += (self._rng.random() - 0.5) * STALL_KICK_SPREAD

        self._collided = True

    def _update_hexagon_rotation(self, delta_time: float) -> None:
        self._hexagon = rotate_hexagon(self._hexagon, self._config.rotation_speed * delta_time)

    def _random_velocity(self) -> Vector2D:
        return Vector2D(
            (self._rng.random() - 0.5) * INITIAL_SPEED_SPREAD,
            (self._rng.random() - 0.5) * INITIAL_SPEED_SPREAD,
        )

    def reset(self) -> None:
        """Put the ball back at the center with a new random velocity.

        Config, hexagon rotation and run state are left alone.
        """
        center = self._hexagon.center
        self._ball.position.set(center.x, center.y)
        velocity = self._random_velocity()
        self._ball.velocity.set(velocity.x, velocity.y)
        self._ball.acceleration.set(0.0, 0.0)
        self._collided = False

    def get_state(self) -> BallState:
        """Copy of the ball state; mutating it does not affect the engine."""
        return self._ball.copy()

    def get_hexagon(self) -> Hexagon:
        """Snapshot of the current hexagon; changing it does not affect the engine."""
        return _copy_hexagon(self._hexagon)

    def get_config(self) -> PhysicsConfig:
        return self._config.merged()

    def update_config(
        self,
        partial: Union[PhysicsConfig, Dict[str, Any], None] = None,
        **overrides: float,
    ) -> None:
        """
        Merge new values into the config. Takes effect on the next update.

        Args:
            partial: A full PhysicsConfig or a dict of field -> value
            **overrides: Individual fields, applied after `partial`

        Raises:
            ValueError: If a key is not a PhysicsConfig field
        """
        if isinstance(partial, PhysicsConfig):
            partial = partial.to_dict()
        values = dict(partial or {})
        values.update(overrides)
        self._config = self._config.merged(**values)

    def set_ball_position(self, position: Vector2D) -> None:
        self._ball.position = position.clone()

    def set_ball_velocity(self, velocity: Vector2D) -> None:
        self._ball.velocity = velocity.clone()

    def has_collision_this_frame(self) -> bool:
        """True if the last effective update resolved a collision."""
        return self._collided

    def get_kinetic_energy(self) -> float:
        """0.5 * |v|^2 with unit mass."""
        return 0.5 * self._ball.velocity.magnitude_squared()

    def get_velocity(self) -> float:
        """Current speed."""
        return self._ball.velocity.magnitude()


def _copy_hexagon(hexagon: Hexagon) -> Hexagon:
    return create_hexagon(hexagon.center, hexagon.radius, hexagon.rotation)
