"""
Evaluation module for hexagon simulations.

Key components:
- TrajectoryMetrics: energy, bounce and containment statistics
- Visualization: animated GIF of a recorded trajectory
"""

from hexbounce.evaluation.metrics import TrajectoryMetrics

__all__ = [
    "TrajectoryMetrics",
]

# Lazy import for visualization (requires matplotlib)
try:
    from hexbounce.evaluation.visualization import create_simulation_gif
    __all__.append("create_simulation_gif")
except ImportError:
    pass
