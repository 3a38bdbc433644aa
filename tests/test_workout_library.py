from __future__ import annotations

import json
from pathlib import Path

import pytest

from stepwise.workout import library
from stepwise.workout.flatten import flatten
from stepwise.workout.library import builtin_workouts, resolve_workouts


def test_builtin_workouts_have_unique_ids_and_steps() -> None:
    workouts = builtin_workouts()
    ids = [workout.id for workout in workouts]
    assert len(ids) == len(set(ids))
    assert all(flatten(workout) for workout in workouts)


def test_full_body_uses_sections() -> None:
    workout = next(item for item in builtin_workouts() if item.id == "full-body-30")
    labels = {item.section for item in flatten(workout)}
    assert labels == {"Warm-up", "Strength", "Finisher", "Cool-down"}


def test_resolve_workouts_prefers_explicit_path(tmp_path: Path) -> None:
    path = tmp_path / "mine.json"
    path.write_text(
        json.dumps({"workouts": [{"id": "mine", "name": "Mine", "steps": []}]}),
        encoding="utf-8",
    )

    workouts = resolve_workouts(path)

    assert [workout.id for workout in workouts] == ["mine"]


def test_resolve_workouts_falls_back_to_builtins(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(library, "_default_workouts_path", lambda: tmp_path / "absent.json")
    assert resolve_workouts() == builtin_workouts()
