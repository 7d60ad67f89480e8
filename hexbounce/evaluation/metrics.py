"""
Trajectory statistics for hexagon simulations.

Measures energy over time, how often the ball bounces, and whether the
ball center stayed inside the rotating boundary.

All computations use numpy arrays.
"""

from typing import TYPE_CHECKING, Dict, Union

import numpy as np

from hexbounce.physics.hexagon import create_hexagon, is_point_inside_hexagon
from hexbounce.physics.vector import Vector2D

if TYPE_CHECKING:
    from hexbounce.simulation.loop import TrajectoryRecorder


class TrajectoryMetrics:
    """
    Compute statistics over a recorded trajectory.

    Provides methods for:
    - Per-frame kinetic energy and energy summaries
    - Bounce counting from per-frame collision flags
    - Containment of the ball inside the hexagon
    """

    def kinetic_energy(self, velocities: np.ndarray) -> np.ndarray:
        """
        Kinetic energy per frame, unit mass.

        Args:
            velocities: Ball velocities, shape (num_frames, 2)

        Returns:
            Array of shape (num_frames,)
        """
        velocities = np.asarray(velocities, dtype=float)
        if velocities.ndim != 2 or velocities.shape[1] != 2:
            raise ValueError(f"Expected shape (num_frames, 2), got {velocities.shape}")
        return 0.5 * np.sum(velocities ** 2, axis=-1)

    def energy_summary(self, velocities: np.ndarray) -> Dict[str, float]:
        """
        Summarize kinetic energy over a trajectory.

        Returns:
            Dictionary with initial_ke, final_ke, max_ke, mean_ke
        """
        ke = self.kinetic_energy(velocities)
        if ke.size == 0:
            return {"initial_ke": 0.0, "final_ke": 0.0, "max_ke": 0.0, "mean_ke": 0.0}
        return {
            "initial_ke": float(ke[0]),
            "final_ke": float(ke[-1]),
            "max_ke": float(np.max(ke)),
            "mean_ke": float(np.mean(ke)),
        }

    def bounce_count(self, collisions: np.ndarray) -> int:
        """Number of bounces, counting each run of consecutive collision frames once."""
        flags = np.asarray(collisions, dtype=bool)
        if flags.size == 0:
            return 0
        rising = flags[1:] & ~flags[:-1]
        return int(flags[0]) + int(np.sum(rising))

    def containment_ratio(
        self,
        positions: np.ndarray,
        rotations: np.ndarray,
        center: Vector2D,
        hex_radius: float,
    ) -> float:
        """
        Fraction of frames with the ball center inside the hexagon.

        Args:
            positions: Ball positions, shape (num_frames, 2)
            rotations: Hexagon rotation per frame, shape (num_frames,)
            center: Hexagon center
            hex_radius: Hexagon circumradius

        Returns:
            Ratio in [0, 1] (1.0 for an empty trajectory)
        """
        positions = np.asarray(positions, dtype=float)
        rotations = np.asarray(rotations, dtype=float)
        if positions.ndim != 2 or positions.shape[1] != 2:
            raise ValueError(f"Expected shape (num_frames, 2), got {positions.shape}")
        if positions.shape[0] != rotations.shape[0]:
            raise ValueError(
                f"Length mismatch: {positions.shape[0]} positions vs {rotations.shape[0]} rotations"
            )
        if positions.shape[0] == 0:
            return 1.0

        inside = 0
        for (x, y), rotation in zip(positions, rotations):
            hexagon = create_hexagon(center, hex_radius, float(rotation))
            if is_point_inside_hexagon(Vector2D(float(x), float(y)), hexagon):
                inside += 1
        return inside / positions.shape[0]

    def summarize(
        self,
        recorder: "TrajectoryRecorder",
        center: Vector2D,
        hex_radius: float,
    ) -> Dict[str, Union[int, float]]:
        """All metrics for a recorded trajectory as one dict."""
        velocities = recorder.velocities()
        summary: Dict[str, Union[int, float]] = {"num_frames": len(recorder)}
        summary.update(self.energy_summary(velocities))
        summary["bounces"] = self.bounce_count(recorder.collisions())
        summary["containment_ratio"] = self.containment_ratio(
            recorder.positions(), recorder.rotations(), center, hex_radius
        )
        speeds = np.sqrt(np.sum(velocities ** 2, axis=-1))
        summary["max_speed"] = float(np.max(speeds)) if speeds.size else 0.0
        return summary
