"""Tests for the emgcoach CLI.

Results are read back from the ``--output`` file so assertions do not depend
on console rendering.
"""

import json
import sys
from pathlib import Path
from typing import Any

import pytest
from loguru import logger
from typer.testing import CliRunner

from cli.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def restore_logger():
    """Drop sinks the CLI bound to the runner's captured streams."""
    yield
    logger.remove()
    logger.add(sys.stderr)


def _write(tmp_path: Path, name: str, payload: Any) -> Path:
    path = tmp_path / name
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def _invoke(tmp_path: Path, args: list[str]) -> tuple[int, Any]:
    output = tmp_path / "result.json"
    result = runner.invoke(app, [*args, "--raw", "--output", str(output)])
    data = json.loads(output.read_text(encoding="utf-8")) if output.exists() else None
    return result.exit_code, data


def test_readiness_command(tmp_path: Path):
    """Test readiness on the reference back squat set."""
    input_file = _write(
        tmp_path,
        "set.json",
        {
            "rep_peaks_rms": [0.88, 0.92, 0.95, 0.91, 0.87, 0.83],
            "prev_readiness": 78,
            "exercise_id": "back_squat",
            "weight_kg": 120,
            "est_1rm_kg": 160,
        },
    )

    exit_code, data = _invoke(tmp_path, ["readiness", str(input_file)])

    assert exit_code == 0
    assert data["zone"] == "green"
    assert data["set_zone_score"] == 82
    assert data["load_pct_used"] == pytest.approx(0.75)


def test_readiness_command_full_impact(tmp_path: Path):
    """Test that --set-impact reaches the readiness config."""
    input_file = _write(tmp_path, "set.json", {"rep_peaks_rms": [1.0, 1.0, 1.0], "prev_readiness": 60})

    exit_code, data = _invoke(tmp_path, ["readiness", str(input_file), "--set-impact", "1.0"])

    assert exit_code == 0
    assert data["readiness_after"] == pytest.approx(82.0)


def test_readiness_command_missing_peaks(tmp_path: Path):
    """Test that missing peaks exit with an error and no result file."""
    input_file = _write(tmp_path, "set.json", {"prev_readiness": 70})

    exit_code, data = _invoke(tmp_path, ["readiness", str(input_file)])

    assert exit_code == 1
    assert data is None


def test_compliance_command(tmp_path: Path):
    """Test compliance with a followed weight ask."""
    input_file = _write(
        tmp_path,
        "compliance.json",
        {
            "asks": [{"kind": "weight", "delta_pct": 2.5}],
            "before": {"load_kg": 100, "reps": 6, "rir": 2},
            "after": {"load_kg": 102.5, "reps": 5, "rir": 1},
        },
    )

    exit_code, data = _invoke(tmp_path, ["compliance", str(input_file)])

    assert exit_code == 0
    assert data["listened"] is True
    assert data["score"] == 100
    assert data["facets"] == {"weight": 100, "target": 100, "emg": -1, "rest": -1}


def test_compliance_command_missing_after(tmp_path: Path):
    """Test that a file without an after snapshot is rejected."""
    input_file = _write(tmp_path, "compliance.json", {"asks": [], "before": {"load_kg": 100, "reps": 6}})

    exit_code, _ = _invoke(tmp_path, ["compliance", str(input_file)])

    assert exit_code == 1


def test_zones_command(tmp_path: Path):
    """Test zone classification from a list of reps."""
    values = [1.0, 1.04, 1.08, 1.12, 1.15, 1.18, 1.22, 1.26, 1.31]
    reps = [{"idx": i + 1, "rms_norm": value, "signal_confidence": 1.0} for i, value in enumerate(values)]
    input_file = _write(tmp_path, "reps.json", {"reps": reps})

    exit_code, data = _invoke(tmp_path, ["zones", str(input_file)])

    assert exit_code == 0
    assert data == {"zone": "in_zone", "fatigue_rep": 7, "reps": 9}


def test_stream_command(tmp_path: Path):
    """Test replaying a stream that only rises."""
    samples = [{"at_seconds": t, "rms_norm": 0.2 * t} for t in range(12)]
    input_file = _write(tmp_path, "stream.json", samples)

    exit_code, data = _invoke(tmp_path, ["stream", str(input_file), "--ewma-alpha", "1.0", "--no-require-mdf"])

    assert exit_code == 0
    assert data["final_state"] == "rise"
    assert [event["state"] for event in data["transitions"]] == ["rise"]
    assert data["transitions"][0]["previous_state"] == "baseline"


def test_simulate_command_is_seeded(tmp_path: Path):
    """Test that the same seed gives the same simulated set."""
    args = ["simulate", "--scenario", "early_heavy", "--reps", "8", "--seed", "42"]

    first_code, first = _invoke(tmp_path, args)
    second_code, second = _invoke(tmp_path, args)

    assert first_code == second_code == 0
    assert first == second
    assert first["scenario"] == "early_heavy"
    assert len(first["reps"]) == 8


def test_plan_cost_command(tmp_path: Path):
    """Test readiness projection for a two-block plan."""
    input_file = _write(
        tmp_path,
        "plan.json",
        {
            "blocks": [
                {"exercise_id": "back_squat", "load_strategy": "heavy", "sets": 3, "reps": 5},
                {
                    "exercise_id": "split_squat",
                    "load_strategy": "moderate",
                    "sets": 3,
                    "reps": "8-10",
                    "rms_drop_band": [20, 30],
                },
            ]
        },
    )

    exit_code, data = _invoke(tmp_path, ["plan-cost", str(input_file), "--readiness-before", "60"])

    assert exit_code == 0
    assert data["cost"] == pytest.approx(13.7)
    assert data["readiness_after"] == pytest.approx(46.3)
