"""
Visualization tools for hexagon simulations.

Renders a recorded trajectory as a GIF: the rotating hexagon outline,
the ball, and a fading trail of recent positions.
"""

from typing import Optional, Tuple

import numpy as np

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend for server
import matplotlib.pyplot as plt
import matplotlib.animation as animation
import matplotlib.patches as patches

from hexbounce.physics.hexagon import create_hexagon
from hexbounce.physics.vector import Vector2D


BACKGROUND_COLOR = "#0f0f1e"
HEXAGON_COLOR = "#4a90e2"
BALL_COLOR = "#ff6b6b"
TRAIL_COLOR = (0.55, 0.75, 1.0)


def create_simulation_gif(
    positions: np.ndarray,
    rotations: np.ndarray,
    center: Vector2D,
    hex_radius: float,
    ball_radius: float,
    output_path: str,
    fps: int = 30,
    trail_length: int = 50,
    scene_bounds: Optional[Tuple[float, float, float, float]] = None,
    title: str = "",
) -> str:
    """
    Create a GIF of the ball bouncing inside the rotating hexagon.

    Args:
        positions: Ball positions, shape (num_frames, 2)
        rotations: Hexagon rotation per frame, shape (num_frames,)
        center: Hexagon center
        hex_radius: Hexagon circumradius
        ball_radius: Ball radius
        output_path: Path to save the output GIF
        fps: Frames per second for the GIF (default 30)
        trail_length: Number of past positions drawn as a trail (0 disables)
        scene_bounds: (x_min, x_max, y_min, y_max); defaults to a margin
                      around the hexagon
        title: Optional title prefix

    Returns:
        output_path on success

    Raises:
        ValueError: If array shapes don't match or are invalid
    """
    positions = np.asarray(positions, dtype=float)
    rotations = np.asarray(rotations, dtype=float)

    if positions.ndim != 2 or positions.shape[1] != 2:
        raise ValueError(f"Expected shape (num_frames, 2), got {positions.shape}")
    if positions.shape[0] != rotations.shape[0]:
        raise ValueError(
            f"Shape mismatch: positions {positions.shape} vs rotations {rotations.shape}"
        )
    if positions.shape[0] == 0:
        raise ValueError("Cannot render an empty trajectory")

    num_frames = positions.shape[0]
    if scene_bounds is None:
        margin = hex_radius * 1.15
        scene_bounds = (center.x - margin, center.x + margin, center.y - margin, center.y + margin)
    x_min, x_max, y_min, y_max = scene_bounds

    fig, ax = plt.subplots(figsize=(6, 6))
    fig.patch.set_facecolor(BACKGROUND_COLOR)
    ax.set_facecolor(BACKGROUND_COLOR)
    ax.set_xlim(x_min, x_max)
    # Screen coordinates: y grows downward
    ax.set_ylim(y_max, y_min)
    ax.set_aspect("equal")
    ax.axis("off")

    hexagon_patch = patches.Polygon(
        _hexagon_outline(center, hex_radius, rotations[0]),
        closed=True,
        fill=True,
        facecolor=HEXAGON_COLOR,
        alpha=0.15,
        edgecolor=HEXAGON_COLOR,
        linewidth=3,
    )
    ax.add_patch(hexagon_patch)

    ball_patch = patches.Circle(tuple(positions[0]), ball_radius, color=BALL_COLOR, zorder=3)
    ax.add_patch(ball_patch)

    trail_scatter = ax.scatter([], [], s=[], zorder=2)

    title_prefix = f"{title} - " if title else ""
    fig_title = ax.set_title(f"{title_prefix}Frame 0/{num_frames}", color="white")

    def update(frame_idx: int):
        """Update animation for each frame."""
        hexagon_patch.set_xy(_hexagon_outline(center, hex_radius, rotations[frame_idx]))
        ball_patch.center = tuple(positions[frame_idx])

        if trail_length > 0:
            start = max(0, frame_idx - trail_length)
            trail = positions[start:frame_idx]
            if len(trail):
                fade = np.linspace(0.05, 0.6, len(trail))
                colors = np.zeros((len(trail), 4))
                colors[:, :3] = TRAIL_COLOR
                colors[:, 3] = fade
                trail_scatter.set_offsets(trail)
                trail_scatter.set_facecolor(colors)
                trail_scatter.set_edgecolor("none")
                trail_scatter.set_sizes(fade * ball_radius * 4)
            else:
                trail_scatter.set_offsets(np.empty((0, 2)))

        fig_title.set_text(f"{title_prefix}Frame {frame_idx + 1}/{num_frames}")
        return hexagon_patch, ball_patch, trail_scatter, fig_title

    anim = animation.FuncAnimation(
        fig,
        update,
        frames=num_frames,
        blit=False,
        interval=1000 // fps,  # milliseconds between frames
    )

    # Save as GIF using PillowWriter
    try:
        writer = animation.PillowWriter(fps=fps)
        anim.save(output_path, writer=writer)
    finally:
        # Always close figure to prevent memory leaks
        plt.close(fig)

    return output_path


def _hexagon_outline(center: Vector2D, radius: float, rotation: float) -> np.ndarray:
    hexagon = create_hexagon(center, radius, float(rotation))
    return np.array([v.to_tuple() for v in hexagon.vertices])
