"""
Simulation driving module.

Provides a fixed-timestep loop that ticks the physics engine and a
recorder that captures per-frame state.
"""

from .loop import SimulationLoop, TrajectoryRecorder, build_engine

__all__ = [
    'SimulationLoop',
    'TrajectoryRecorder',
    'build_engine',
]
