"""
Record formats for exported hexagon simulations.

Each record pairs a short human-readable description with the
structured numbers behind it.
"""

from typing import TYPE_CHECKING

from hexbounce.physics.vector import Vector2D

if TYPE_CHECKING:
    from hexbounce.physics.engine import PhysicsEngine


# Speeds below this read as "at rest" in frame descriptions
REST_SPEED = 1.0


def _point(v: Vector2D) -> dict:
    return {"x": round(v.x, 4), "y": round(v.y, 4)}


def generate_scene_description(engine: "PhysicsEngine") -> str:
    """
    Describe the scene in one sentence.

    Returns:
        e.g. "A ball of radius 12 in a hexagon of radius 200 spinning
        clockwise on screen at 1.0 rad/s under gravity 500."
    """
    config = engine.get_config()
    hexagon = engine.get_hexagon()

    if config.rotation_speed > 0:
        spin_desc = f"spinning clockwise on screen at {config.rotation_speed:.1f} rad/s"
    elif config.rotation_speed < 0:
        spin_desc = f"spinning counter-clockwise on screen at {abs(config.rotation_speed):.1f} rad/s"
    else:
        spin_desc = "standing still"

    if config.gravity == 0:
        gravity_desc = "in zero gravity"
    else:
        gravity_desc = f"under gravity {config.gravity:g}"

    return (
        f"A ball of radius {config.ball_radius:g} in a hexagon of radius "
        f"{hexagon.radius:g} {spin_desc} {gravity_desc}."
    )


def format_scene_header(engine: "PhysicsEngine", seed: int, dt: float) -> dict:
    """
    Format the scene header (first line of JSONL output).

    Args:
        engine: The physics engine, before any frames are simulated
        seed: The random seed the engine was built with
        dt: Timestep passed to every update

    Returns:
        dict with config, hexagon geometry and the initial ball state
    """
    hexagon = engine.get_hexagon()
    state = engine.get_state()

    return {
        "type": "scene_header",
        "seed": seed,
        "description": generate_scene_description(engine),
        "timestep": dt,
        "config": engine.get_config().to_dict(),
        "hexagon": {
            "center": _point(hexagon.center),
            "radius": hexagon.radius,
            "rotation": round(hexagon.rotation, 6),
        },
        "ball": {
            "position": _point(state.position),
            "velocity": _point(state.velocity),
        },
    }


def format_frame(engine: "PhysicsEngine", frame_num: int) -> dict:
    """
    Format the engine's current state as one frame record.

    Args:
        engine: The physics engine, right after an update
        frame_num: The frame number

    Returns:
        dict with frame number, description, ball state and scalars
    """
    state = engine.get_state()
    speed = engine.get_velocity()
    collided = engine.has_collision_this_frame()

    if collided:
        motion_desc = "ball bounced off the wall"
    elif speed < REST_SPEED:
        motion_desc = "ball at rest"
    else:
        motion_desc = "ball in flight"

    return {
        "frame": frame_num,
        "description": f"Frame {frame_num}: {motion_desc}.",
        "ball": {
            "position": _point(state.position),
            "velocity": _point(state.velocity),
        },
        "speed": round(speed, 4),
        "kinetic_energy": round(engine.get_kinetic_energy(), 4),
        "hexagon_rotation": round(engine.get_hexagon().rotation, 6),
        "collision": collided,
    }
