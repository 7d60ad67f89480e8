"""
Physics configuration, the interactive parameter surface, and named presets.

Values are applied by the engine exactly as given. Only user-facing entry
points (the CLI) clamp to PARAMETER_RANGES.
"""

from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, List, Tuple


# Scene layout (in pixels)
SCENE_WIDTH = 800
SCENE_HEIGHT = 600
HEXAGON_RADIUS = 200

# Largest step the engine will integrate in one update
MAX_TIMESTEP = 0.016
DEFAULT_DT = 1 / 60.0


@dataclass
class PhysicsConfig:
    """Tunable physics parameters.

    Attributes:
        gravity: Downward acceleration (screen y grows downward)
        friction: Velocity drag coefficient per second
        restitution: Fraction of normal velocity kept on a bounce
        rotation_speed: Hexagon angular velocity in rad/s (signed)
        ball_radius: Ball radius
        max_velocity: Speed cap
    """

    gravity: float = 500.0
    friction: float = 0.02
    restitution: float = 0.8
    rotation_speed: float = 1.0
    ball_radius: float = 12.0
    max_velocity: float = 800.0

    def merged(self, **overrides: float) -> "PhysicsConfig":
        """
        Return a copy with the given fields replaced.

        Raises:
            ValueError: If an override names an unknown field
        """
        unknown = set(overrides) - set(config_field_names())
        if unknown:
            raise ValueError(
                f"Unknown config keys: {sorted(unknown)}. Available: {config_field_names()}"
            )
        return replace(self, **overrides)

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PhysicsConfig":
        return cls().merged(**data)


def config_field_names() -> List[str]:
    return [f.name for f in fields(PhysicsConfig)]


# (min, max, step) of each user-adjustable parameter
PARAMETER_RANGES: Dict[str, Tuple[float, float, float]] = {
    "gravity": (0.0, 1000.0, 1.0),
    "friction": (0.0, 0.1, 0.001),
    "restitution": (0.1, 1.0, 0.1),
    "rotation_speed": (-5.0, 5.0, 0.1),
}


def clamp_to_range(name: str, value: float) -> float:
    """Clamp a value to its parameter range; unranged parameters pass through."""
    if name not in PARAMETER_RANGES:
        return value
    low, high, _ = PARAMETER_RANGES[name]
    return max(low, min(high, value))


_PRESETS: Dict[str, Dict[str, Any]] = {
    "default": {
        "description": "Starting parameters of the interactive demo.",
        "overrides": {},
    },
    "zero_gravity": {
        "description": "No gravity; the ball drifts and ricochets.",
        "overrides": {"gravity": 0.0},
    },
    "elastic": {
        "description": "Perfectly elastic bounces with no drag.",
        "overrides": {"restitution": 1.0, "friction": 0.0},
    },
    "sticky": {
        "description": "Soft walls and heavy drag.",
        "overrides": {"restitution": 0.3, "friction": 0.1},
    },
    "spin": {
        "description": "Fast counter-clockwise spin on screen.",
        "overrides": {"rotation_speed": -5.0},
    },
    "drop_test": {
        "description": "Straight drop onto a still, lossless floor.",
        "overrides": {
            "gravity": 500.0,
            "friction": 0.0,
            "restitution": 1.0,
            "rotation_speed": 0.0,
            "ball_radius": 10.0,
            "max_velocity": 10000.0,
        },
    },
}


def get_preset(name: str) -> PhysicsConfig:
    """Look up a named preset."""
    if name not in _PRESETS:
        raise ValueError(f"Unknown preset: {name}. Available: {list_presets()}")
    return PhysicsConfig().merged(**_PRESETS[name]["overrides"])


def describe_preset(name: str) -> str:
    if name not in _PRESETS:
        raise ValueError(f"Unknown preset: {name}. Available: {list_presets()}")
    return _PRESETS[name]["description"]


def list_presets() -> List[str]:
    return sorted(_PRESETS.keys())
