"""
Fixed-timestep driver for the physics engine.

The loop is the only caller of engine.update(). Subscribers run after each
tick completes and read copies of engine state, so nothing observes a
half-finished step.
"""

import random
import time
from typing import Any, Callable, Dict, List, Optional

import numpy as np
from tqdm import tqdm

from hexbounce.physics.config import DEFAULT_DT, HEXAGON_RADIUS, SCENE_HEIGHT, SCENE_WIDTH, PhysicsConfig
from hexbounce.physics.engine import PhysicsEngine
from hexbounce.physics.hexagon import create_hexagon
from hexbounce.physics.vector import Vector2D


FrameCallback = Callable[[int, PhysicsEngine], None]


def build_engine(
    config: Optional[PhysicsConfig] = None,
    seed: Optional[int] = None,
    hex_radius: float = HEXAGON_RADIUS,
    center: Optional[Vector2D] = None,
) -> PhysicsEngine:
    """
    Create an engine with a hexagon centered in the scene.

    Args:
        config: Physics parameters (defaults if omitted)
        seed: Seed for the engine's random source; None for an unseeded one
        hex_radius: Hexagon circumradius
        center: Hexagon center (scene center if omitted)

    Returns:
        A stopped PhysicsEngine
    """
    if center is None:
        center = Vector2D(SCENE_WIDTH / 2, SCENE_HEIGHT / 2)
    hexagon = create_hexagon(center, hex_radius)
    return PhysicsEngine(config or PhysicsConfig(), hexagon, rng=random.Random(seed))


class SimulationLoop:
    """
    Ticks an engine at a fixed timestep.

    Runs as fast as possible by default; with realtime=True each tick is
    paced to `dt` of wall-clock time.
    """

    def __init__(self, engine: PhysicsEngine, dt: float = DEFAULT_DT, realtime: bool = False):
        self.engine = engine
        self.dt = dt
        self.realtime = realtime
        self.frame = 0
        self._subscribers: List[FrameCallback] = []
        self._stop_requested = False

    def subscribe(self, callback: FrameCallback) -> None:
        """Register callback(frame_index, engine), called after every tick."""
        self._subscribers.append(callback)

    def unsubscribe(self, callback: FrameCallback) -> None:
        self._subscribers.remove(callback)

    def step(self) -> None:
        """Advance one frame and notify subscribers."""
        self.engine.update(self.dt)
        self.frame += 1
        for callback in list(self._subscribers):
            callback(self.frame, self.engine)

    def run(self, num_frames: int, progress: bool = False) -> int:
        """
        Tick `num_frames` times, or until stop() is called.

        Starts the engine if it is not already running.

        Args:
            num_frames: Number of frames to simulate
            progress: Show a tqdm progress bar

        Returns:
            The loop's frame count after running
        """
        self._stop_requested = False
        if not self.engine.is_running:
            self.engine.start()

        frames = range(num_frames)
        if progress:
            frames = tqdm(frames, desc="Simulating", unit="frame")

        for _ in frames:
            if self._stop_requested:
                break
            tick_start = time.perf_counter()
            self.step()
            if self.realtime:
                remaining = self.dt - (time.perf_counter() - tick_start)
                if remaining > 0:
                    time.sleep(remaining)

        return self.frame

    def stop(self) -> None:
        """Stop before the next tick and stop the engine."""
        self._stop_requested = True
        self.engine.stop()


class TrajectoryRecorder:
    """
    Subscriber that records one entry per frame.

    Attach with loop.subscribe(recorder). Call record_initial() before
    running to also capture the starting state as frame 0.
    """

    def __init__(self):
        self.frames: List[Dict[str, Any]] = []

    def __call__(self, frame_index: int, engine: PhysicsEngine) -> None:
        state = engine.get_state()
        self.frames.append({
            "frame": frame_index,
            "position": (state.position.x, state.position.y),
            "velocity": (state.velocity.x, state.velocity.y),
            "speed": engine.get_velocity(),
            "kinetic_energy": engine.get_kinetic_energy(),
            "rotation": engine.get_hexagon().rotation,
            "collision": engine.has_collision_this_frame(),
        })

    def record_initial(self, engine: PhysicsEngine) -> None:
        self(0, engine)

    def positions(self) -> np.ndarray:
        """Ball positions, shape (num_frames, 2)."""
        return np.array([f["position"] for f in self.frames], dtype=float).reshape(-1, 2)

    def velocities(self) -> np.ndarray:
        """Ball velocities, shape (num_frames, 2)."""
        return np.array([f["velocity"] for f in self.frames], dtype=float).reshape(-1, 2)

    def rotations(self) -> np.ndarray:
        return np.array([f["rotation"] for f in self.frames], dtype=float)

    def collisions(self) -> np.ndarray:
        return np.array([f["collision"] for f in self.frames], dtype=bool)

    def __len__(self) -> int:
        return len(self.frames)
