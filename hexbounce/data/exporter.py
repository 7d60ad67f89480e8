"""
Data export functions for hexagon simulations.

Exports simulation data to JSONL format with:
- First line: scene header (config, hexagon, initial ball state)
- Following lines: one frame per line
"""

import json
from typing import TYPE_CHECKING, List, Tuple

from hexbounce.physics.config import DEFAULT_DT
from .formats import format_scene_header, format_frame

if TYPE_CHECKING:
    from hexbounce.physics.engine import PhysicsEngine


def export_simulation(
    engine: "PhysicsEngine",
    num_frames: int,
    output_path: str,
    dt: float = DEFAULT_DT,
    seed: int = 0,
) -> None:
    """
    Simulate and export to a JSONL file.

    Starts the engine if it is stopped.

    Args:
        engine: The physics engine to step
        num_frames: Number of frames to simulate and export
        output_path: Path to the output JSONL file
        dt: Timestep for each update
        seed: The random seed used (for metadata)
    """
    if not engine.is_running:
        engine.start()

    with open(output_path, 'w') as f:
        # Header reflects the state before any update
        header = format_scene_header(engine, seed, dt)
        f.write(json.dumps(header) + '\n')

        for frame_num in range(num_frames):
            engine.update(dt)
            frame_data = format_frame(engine, frame_num + 1)  # 1-indexed frames
            f.write(json.dumps(frame_data) + '\n')


def export_to_dict(
    engine: "PhysicsEngine",
    num_frames: int,
    dt: float = DEFAULT_DT,
    seed: int = 0,
) -> list:
    """
    Simulate and export to a list of dicts (for testing).

    Returns:
        List of dicts, first is header, rest are frames
    """
    if not engine.is_running:
        engine.start()

    result = [format_scene_header(engine, seed, dt)]
    for frame_num in range(num_frames):
        engine.update(dt)
        result.append(format_frame(engine, frame_num + 1))

    return result


def load_trajectory(path: str) -> Tuple[dict, List[dict]]:
    """
    Read an exported JSONL file.

    Args:
        path: Path to a file written by export_simulation

    Returns:
        Tuple of (header, frames)

    Raises:
        ValueError: If the file is empty or its first line is not a scene header
    """
    with open(path) as f:
        lines = [line for line in f if line.strip()]

    if not lines:
        raise ValueError(f"Empty trajectory file: {path}")

    header = json.loads(lines[0])
    if header.get("type") != "scene_header":
        raise ValueError(f"First line of {path} is not a scene header")

    frames = [json.loads(line) for line in lines[1:]]
    return header, frames
