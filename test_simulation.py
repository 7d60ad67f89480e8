"""
Simulation Pipeline Tests

Covers configuration presets, the fixed-timestep loop, trajectory
recording, JSONL export, trajectory metrics, GIF rendering and the CLI.
"""

import json
import random
import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).parent))

from hexbounce.data.exporter import export_simulation, export_to_dict, load_trajectory
from hexbounce.evaluation.metrics import TrajectoryMetrics
from hexbounce.physics.config import (
    PhysicsConfig,
    clamp_to_range,
    describe_preset,
    get_preset,
    list_presets,
)
from hexbounce.physics.vector import Vector2D
from hexbounce.simulation.loop import SimulationLoop, TrajectoryRecorder, build_engine


# ==============================================================================
# Configuration
# ==============================================================================

def test_default_config_matches_demo_start():
    config = PhysicsConfig()
    assert config.to_dict() == {
        "gravity": 500.0,
        "friction": 0.02,
        "restitution": 0.8,
        "rotation_speed": 1.0,
        "ball_radius": 12.0,
        "max_velocity": 800.0,
    }


def test_config_round_trips_through_dict():
    config = PhysicsConfig(gravity=12.0, rotation_speed=-3.0)
    assert PhysicsConfig.from_dict(config.to_dict()) == config


def test_merged_rejects_unknown_field():
    with pytest.raises(ValueError, match="Unknown config keys"):
        PhysicsConfig().merged(bounciness=0.5)


def test_presets():
    assert "default" in list_presets()
    assert get_preset("default") == PhysicsConfig()
    assert get_preset("zero_gravity").gravity == 0.0
    assert get_preset("elastic").restitution == 1.0
    assert describe_preset("spin")
    with pytest.raises(ValueError, match="Unknown preset"):
        get_preset("moon")


def test_clamp_to_range():
    assert clamp_to_range("gravity", 5000.0) == 1000.0
    assert clamp_to_range("restitution", 0.0) == 0.1
    assert clamp_to_range("rotation_speed", -2.0) == -2.0
    assert clamp_to_range("ball_radius", 500.0) == 500.0


# ==============================================================================
# Loop & recorder
# ==============================================================================

def test_build_engine_centers_hexagon_in_scene():
    engine = build_engine(seed=1)
    hexagon = engine.get_hexagon()
    assert hexagon.center.to_tuple() == (400.0, 300.0)
    assert hexagon.radius == 200.0
    assert engine.get_state().position.to_tuple() == (400.0, 300.0)
    assert not engine.is_running


def test_run_starts_engine_and_notifies_subscribers():
    engine = build_engine(seed=1)
    loop = SimulationLoop(engine)
    seen = []
    loop.subscribe(lambda frame, eng: seen.append(frame))

    assert loop.run(10) == 10
    assert engine.is_running
    assert seen == list(range(1, 11))


def test_unsubscribe():
    loop = SimulationLoop(build_engine(seed=1))
    seen = []
    callback = lambda frame, eng: seen.append(frame)
    loop.subscribe(callback)
    loop.step()
    loop.unsubscribe(callback)
    loop.step()
    assert seen == [1]


def test_stop_from_subscriber_halts_loop():
    engine = build_engine(seed=1)
    loop = SimulationLoop(engine)

    def stop_at_five(frame, eng):
        if frame == 5:
            loop.stop()

    loop.subscribe(stop_at_five)
    assert loop.run(100) == 5
    assert not engine.is_running


def test_recorder_arrays():
    engine = build_engine(seed=2)
    loop = SimulationLoop(engine)
    recorder = TrajectoryRecorder()
    recorder.record_initial(engine)
    loop.subscribe(recorder)
    loop.run(20)

    assert len(recorder) == 21
    assert recorder.positions().shape == (21, 2)
    assert recorder.velocities().shape == (21, 2)
    assert recorder.rotations().shape == (21,)
    assert recorder.collisions().dtype == bool
    assert recorder.frames[0]["frame"] == 0
    assert recorder.frames[-1]["position"] == engine.get_state().position.to_tuple()


def test_same_seed_same_trajectory():
    runs = []
    for _ in range(2):
        engine = build_engine(seed=99)
        recorder = TrajectoryRecorder()
        loop = SimulationLoop(engine)
        loop.subscribe(recorder)
        loop.run(300)
        runs.append(recorder.positions())
    np.testing.assert_array_equal(runs[0], runs[1])


def test_ball_stays_inside_hexagon():
    engine = build_engine(PhysicsConfig(gravity=300.0, rotation_speed=0.5), seed=5)
    recorder = TrajectoryRecorder()
    loop = SimulationLoop(engine)
    loop.subscribe(recorder)
    loop.run(600)

    ratio = TrajectoryMetrics().containment_ratio(
        recorder.positions(), recorder.rotations(), engine.get_hexagon().center, 200.0
    )
    assert ratio == 1.0


# ==============================================================================
# Export
# ==============================================================================

def test_export_to_dict_structure():
    engine = build_engine(seed=4)
    records = export_to_dict(engine, num_frames=30, seed=4)

    header = records[0]
    assert header["type"] == "scene_header"
    assert header["seed"] == 4
    assert header["config"] == PhysicsConfig().to_dict()
    assert header["hexagon"]["center"] == {"x": 400.0, "y": 300.0}
    assert header["ball"]["position"] == {"x": 400.0, "y": 300.0}
    assert "hexagon of radius 200" in header["description"]

    frames = records[1:]
    assert len(frames) == 30
    assert [f["frame"] for f in frames] == list(range(1, 31))
    for frame in frames:
        assert set(frame) == {
            "frame", "description", "ball", "speed",
            "kinetic_energy", "hexagon_rotation", "collision",
        }
        assert frame["description"].startswith(f"Frame {frame['frame']}: ")


def test_description_names_screen_spin_direction():
    # y grows downward, so positive rotation_speed turns clockwise on screen
    header = export_to_dict(build_engine(seed=1), num_frames=0)[0]
    assert "spinning clockwise on screen at 1.0 rad/s" in header["description"]

    engine = build_engine(PhysicsConfig(rotation_speed=-2.0), seed=1)
    header = export_to_dict(engine, num_frames=0)[0]
    assert "spinning counter-clockwise on screen at 2.0 rad/s" in header["description"]

    engine = build_engine(PhysicsConfig(rotation_speed=1.0), seed=1)
    before = engine.get_hexagon().vertices[0]
    engine.start()
    engine.update(0.01)
    after = engine.get_hexagon().vertices[0]
    # The rightmost vertex moves down the screen
    assert after.y > before.y

    assert get_preset("spin").rotation_speed < 0
    assert "counter-clockwise" in describe_preset("spin")


def test_export_marks_bounces():
    engine = build_engine(get_preset("drop_test"), seed=0)
    engine.set_ball_velocity(Vector2D(0.0, 0.0))
    frames = export_to_dict(engine, num_frames=90)[1:]

    bounced = [f for f in frames if f["collision"]]
    assert bounced
    assert bounced[0]["description"].endswith("ball bounced off the wall.")


def test_export_and_load_round_trip(tmp_path):
    path = tmp_path / "run.jsonl"
    export_simulation(build_engine(seed=8), 15, str(path), seed=8)

    with open(path) as f:
        assert len(f.readlines()) == 16

    header, frames = load_trajectory(str(path))
    assert header["seed"] == 8
    assert len(frames) == 15
    assert frames[-1]["frame"] == 15


def test_load_rejects_missing_header(tmp_path):
    path = tmp_path / "bad.jsonl"
    path.write_text(json.dumps({"frame": 1}) + "\n")
    with pytest.raises(ValueError, match="not a scene header"):
        load_trajectory(str(path))

    empty = tmp_path / "empty.jsonl"
    empty.write_text("")
    with pytest.raises(ValueError, match="Empty"):
        load_trajectory(str(empty))


# ==============================================================================
# Metrics
# ==============================================================================

def test_kinetic_energy_per_frame():
    ke = TrajectoryMetrics().kinetic_energy(np.array([[3.0, 4.0], [0.0, 0.0], [1.0, 1.0]]))
    np.testing.assert_allclose(ke, [12.5, 0.0, 1.0])


def test_kinetic_energy_rejects_bad_shape():
    with pytest.raises(ValueError):
        TrajectoryMetrics().kinetic_energy(np.zeros((4, 3)))


def test_bounce_count_counts_runs():
    metrics = TrajectoryMetrics()
    assert metrics.bounce_count([False, True, True, False, True]) == 2
    assert metrics.bounce_count([True, False]) == 1
    assert metrics.bounce_count([]) == 0


def test_containment_ratio_counts_outside_frames():
    center = Vector2D(0.0, 0.0)
    positions = np.array([[0.0, 0.0], [500.0, 0.0], [10.0, 10.0], [0.0, -400.0]])
    ratio = TrajectoryMetrics().containment_ratio(positions, np.zeros(4), center, 200.0)
    assert ratio == 0.5


def test_containment_ratio_length_mismatch():
    with pytest.raises(ValueError, match="Length mismatch"):
        TrajectoryMetrics().containment_ratio(
            np.zeros((3, 2)), np.zeros(2), Vector2D(0.0, 0.0), 200.0
        )


def test_summarize():
    engine = build_engine(seed=6)
    recorder = TrajectoryRecorder()
    recorder.record_initial(engine)
    loop = SimulationLoop(engine)
    loop.subscribe(recorder)
    loop.run(240)

    summary = TrajectoryMetrics().summarize(recorder, engine.get_hexagon().center, 200.0)
    assert summary["num_frames"] == 241
    assert summary["bounces"] >= 1
    assert summary["containment_ratio"] == 1.0
    assert summary["max_ke"] >= summary["mean_ke"]
    assert summary["max_speed"] <= PhysicsConfig().max_velocity + 1e-6


# ==============================================================================
# Visualization & CLI
# ==============================================================================

def test_create_simulation_gif(tmp_path):
    pytest.importorskip("matplotlib")
    from hexbounce.evaluation.visualization import create_simulation_gif

    positions = np.array([[400.0, 300.0], [405.0, 310.0], [410.0, 322.0]])
    output = tmp_path / "run.gif"
    result = create_simulation_gif(
        positions, np.array([0.0, 0.1, 0.2]), Vector2D(400.0, 300.0), 200.0, 12.0,
        str(output), fps=10, trail_length=2,
    )
    assert result == str(output)
    assert output.exists()


def test_create_simulation_gif_rejects_mismatch(tmp_path):
    pytest.importorskip("matplotlib")
    from hexbounce.evaluation.visualization import create_simulation_gif

    with pytest.raises(ValueError, match="Shape mismatch"):
        create_simulation_gif(
            np.zeros((3, 2)), np.zeros(4), Vector2D(0.0, 0.0), 200.0, 12.0,
            str(tmp_path / "bad.gif"),
        )


def test_cli_writes_trajectory(tmp_path, capsys):
    sys.path.insert(0, str(Path(__file__).parent / "scripts"))
    import run_simulation

    output = tmp_path / "out" / "run.jsonl"
    run_simulation.main([
        "--frames", "20", "--seed", "3", "--gravity", "5000", "--output", str(output),
    ])

    printed = capsys.readouterr().out
    assert "Warning: gravity=5000.0 outside" in printed
    assert "Simulated 20 frames" in printed

    header, frames = load_trajectory(str(output))
    assert header["config"]["gravity"] == 1000.0
    assert header["seed"] == 3
    assert len(frames) == 20


@pytest.mark.parametrize("dt", ["0", "-0.01"])
def test_cli_rejects_non_positive_dt(dt, capsys):
    sys.path.insert(0, str(Path(__file__).parent / "scripts"))
    import run_simulation

    with pytest.raises(SystemExit):
        run_simulation.parse_args(["--dt", dt])
    assert "--dt must be positive" in capsys.readouterr().err
