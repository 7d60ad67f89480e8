"""
Data export module for hexagon simulations.

Provides functions to export trajectories in JSONL format
(text descriptions + structured numerical data) and read them back.
"""

from .exporter import export_simulation, export_to_dict, load_trajectory
from .formats import format_frame, format_scene_header, generate_scene_description

__all__ = [
    'export_simulation',
    'export_to_dict',
    'load_trajectory',
    'format_frame',
    'format_scene_header',
    'generate_scene_description',
]
