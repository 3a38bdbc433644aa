from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

import pytest

from stepwise.cli.main import build_parser, main, run_list, run_workout


def test_parser_defaults() -> None:
    args = build_parser().parse_args([])
    assert args.run is None
    assert args.workouts is None
    assert args.web_port == 8090
    assert args.silent is False
    assert args.autostart is False


def test_run_list_prints_workouts(tmp_path: Path, capsys) -> None:
    path = tmp_path / "workouts.json"
    path.write_text(
        json.dumps(
            {
                "workouts": [
                    {
                        "id": "abs",
                        "name": "Abs",
                        "steps": [
                            {"type": "exercise", "name": "Crunch", "duration": 45},
                            {"type": "rest", "duration": 30},
                        ],
                    }
                ]
            }
        ),
        encoding="utf-8",
    )

    assert run_list(path) == 0

    out = capsys.readouterr().out
    assert "abs" in out
    assert "Abs" in out
    assert "1:15" in out


def test_parser_accepts_autostart() -> None:
    args = build_parser().parse_args(["--run", "core-10", "--autostart"])
    assert args.autostart is True
    assert args.run == "core-10"


def test_main_lists_with_autostart_flag(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys
) -> None:
    path = tmp_path / "workouts.json"
    path.write_text(
        json.dumps({"workouts": [{"id": "abs", "name": "Abs", "steps": []}]}),
        encoding="utf-8",
    )
    monkeypatch.setattr(sys, "argv", ["stepwise", "--autostart", "--list", "--workouts", str(path)])

    assert main() == 0
    assert "abs" in capsys.readouterr().out


def test_run_workout_with_autostart_needs_no_input(tmp_path: Path, capsys) -> None:
    path = tmp_path / "workouts.json"
    path.write_text(
        json.dumps({"workouts": [{"id": "empty", "name": "Empty", "steps": []}]}),
        encoding="utf-8",
    )

    assert asyncio.run(run_workout("empty", path, silent=True, autostart=True)) == 0
    assert "Workout complete!" in capsys.readouterr().out


def test_main_reports_unreadable_workout_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys
) -> None:
    missing = tmp_path / "missing.json"
    monkeypatch.setattr(sys, "argv", ["stepwise", "--list", "--workouts", str(missing)])

    assert main() == 2
    assert "Invalid workout file: Unable to read" in capsys.readouterr().out
