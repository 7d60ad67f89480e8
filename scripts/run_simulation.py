#!/usr/bin/env python3
"""
Run the bouncing-ball-in-a-hexagon simulation from the command line.

Usage:
    python scripts/run_simulation.py --frames 600 --output data/run.jsonl
    python scripts/run_simulation.py --preset elastic --gif renders/elastic.gif

Examples:
    # Default parameters, summary only
    python scripts/run_simulation.py

    # Reproducible run with custom parameters, exported to JSONL
    python scripts/run_simulation.py --seed 42 --gravity 800 --rotation-speed -2 \\
        --output data/seed42.jsonl

    # Render a GIF of the first 5 seconds
    python scripts/run_simulation.py --frames 300 --gif renders/demo.gif

    # Watch it tick at display rate
    python scripts/run_simulation.py --realtime --frames 120
"""

import argparse
import random
import sys
import time
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from hexbounce.data.exporter import export_simulation
from hexbounce.evaluation.metrics import TrajectoryMetrics
from hexbounce.physics.config import (
    DEFAULT_DT,
    HEXAGON_RADIUS,
    PARAMETER_RANGES,
    clamp_to_range,
    config_field_names,
    describe_preset,
    get_preset,
    list_presets,
)
from hexbounce.simulation.loop import SimulationLoop, TrajectoryRecorder, build_engine


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Simulate a ball bouncing inside a rotating hexagon",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    # Physics parameters
    parser.add_argument(
        "--preset",
        type=str,
        default="default",
        choices=list_presets(),
        help="Named parameter preset to start from",
    )
    parser.add_argument("--gravity", type=float, help="Downward acceleration")
    parser.add_argument("--friction", type=float, help="Velocity drag per second")
    parser.add_argument("--restitution", type=float, help="Bounce energy retention")
    parser.add_argument(
        "--rotation-speed",
        type=float,
        dest="rotation_speed",
        help="Hexagon angular velocity in rad/s",
    )
    parser.add_argument("--ball-radius", type=float, dest="ball_radius", help="Ball radius")
    parser.add_argument("--max-velocity", type=float, dest="max_velocity", help="Speed cap")

    # Run parameters
    parser.add_argument("--frames", type=int, default=600, help="Frames to simulate")
    parser.add_argument("--dt", type=float, default=DEFAULT_DT, help="Timestep per frame")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--hex-radius",
        type=float,
        default=HEXAGON_RADIUS,
        help="Hexagon circumradius",
    )
    parser.add_argument(
        "--realtime",
        action="store_true",
        help="Pace frames to wall-clock time",
    )

    # Outputs
    parser.add_argument("--output", type=str, help="Write trajectory as JSONL")
    parser.add_argument("--gif", type=str, help="Render trajectory as GIF")

    args = parser.parse_args(argv)
    if args.dt <= 0:
        parser.error(f"--dt must be positive, got {args.dt}")
    return args


def collect_overrides(args: argparse.Namespace) -> dict:
    """Gather per-field overrides, clamping ranged ones with a warning."""
    overrides = {}
    for field_name in config_field_names():
        value = getattr(args, field_name)
        if value is None:
            continue
        clamped = clamp_to_range(field_name, value)
        if clamped != value:
            low, high, _ = PARAMETER_RANGES[field_name]
            print(f"Warning: {field_name}={value} outside [{low}, {high}], using {clamped}")
        overrides[field_name] = clamped
    return overrides


def main(argv=None):
    args = parse_args(argv)

    if args.seed is None:
        args.seed = random.randint(10000000, 99999999)

    config = get_preset(args.preset).merged(**collect_overrides(args))
    print(f"Preset: {args.preset} ({describe_preset(args.preset)})")
    print(f"Config: {config.to_dict()}")
    print(f"Seed: {args.seed}")

    if args.output:
        Path(args.output).parent.mkdir(parents=True, exist_ok=True)
        engine = build_engine(config, seed=args.seed, hex_radius=args.hex_radius)
        export_simulation(engine, args.frames, args.output, dt=args.dt, seed=args.seed)
        print(f"Trajectory written to {args.output}")

    # Fresh engine with the same seed replays the exported trajectory
    engine = build_engine(config, seed=args.seed, hex_radius=args.hex_radius)
    loop = SimulationLoop(engine, dt=args.dt, realtime=args.realtime)
    recorder = TrajectoryRecorder()
    recorder.record_initial(engine)
    loop.subscribe(recorder)

    start_time = time.time()
    try:
        loop.run(args.frames, progress=not args.realtime)
    except KeyboardInterrupt:
        loop.stop()
        print("\nInterrupted")
    elapsed = time.time() - start_time

    center = engine.get_hexagon().center
    summary = TrajectoryMetrics().summarize(recorder, center, args.hex_radius)

    print(f"\nSimulated {loop.frame} frames in {elapsed:.2f}s")
    print(f"  Bounces: {summary['bounces']}")
    print(f"  Containment: {summary['containment_ratio']:.1%}")
    print(f"  Max speed: {summary['max_speed']:.1f}")
    print(f"  Kinetic energy: initial {summary['initial_ke']:.1f}, "
          f"final {summary['final_ke']:.1f}, mean {summary['mean_ke']:.1f}")

    if args.gif:
        from hexbounce.evaluation.visualization import create_simulation_gif

        Path(args.gif).parent.mkdir(parents=True, exist_ok=True)
        create_simulation_gif(
            recorder.positions(),
            recorder.rotations(),
            center,
            args.hex_radius,
            config.ball_radius,
            args.gif,
            fps=max(1, round(1 / args.dt)),
            title=args.preset,
        )
        print(f"GIF written to {args.gif}")


if __name__ == "__main__":
    main()
