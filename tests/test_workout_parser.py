from __future__ import annotations

import json
from pathlib import Path

import pytest

from stepwise.workout.flatten import flatten
from stepwise.workout.model import ExerciseStep, RepetitionStep, RestStep
from stepwise.workout.parser import (
    WorkoutParseError,
    find_workout,
    load_workouts,
    parse_workout_data,
)


def test_load_workouts_json(tmp_path: Path) -> None:
    workout_file = tmp_path / "workouts.json"
    workout_file.write_text(
        json.dumps(
            {
                "workouts": [
                    {
                        "id": "hiit",
                        "name": "HIIT",
                        "steps": [
                            {"type": "exercise", "name": "Burpees", "duration": 30},
                            {
                                "type": "repetition",
                                "count": 2,
                                "restBetweenReps": 10,
                                "steps": [
                                    {"type": "exercise", "name": "Sprint", "duration": 20,
                                     "description": "All out"},
                                    {"type": "rest", "duration": 15},
                                ],
                            },
                        ],
                    }
                ]
            }
        ),
        encoding="utf-8",
    )

    workouts = load_workouts(workout_file)

    assert len(workouts) == 1
    workout = workouts[0]
    assert workout.id == "hiit"
    assert workout.steps is not None
    assert workout.steps[0] == ExerciseStep("Burpees", 30)
    repetition = workout.steps[1]
    assert isinstance(repetition, RepetitionStep)
    assert repetition.rest_between_reps_sec == 10
    assert repetition.steps == (ExerciseStep("Sprint", 20, "All out"), RestStep(15))
    assert workout.total_duration_sec == 30 + 2 * 35 + 10


def test_sections_are_parsed_and_take_precedence() -> None:
    workouts = parse_workout_data(
        {
            "workouts": [
                {
                    "id": "full",
                    "name": "Full",
                    "steps": [{"type": "rest", "duration": 99}],
                    "sections": [
                        {"name": "Warm-up", "steps": [{"type": "exercise", "name": "March", "duration": 60}]},
                        {"name": "Cool-down", "steps": [{"type": "rest", "duration": 30}]},
                    ],
                }
            ]
        }
    )

    workout = workouts[0]
    assert workout.steps is None
    assert workout.sections is not None
    assert [section.name for section in workout.sections] == ["Warm-up", "Cool-down"]
    assert [item.section for item in flatten(workout)] == ["Warm-up", "Cool-down"]


def test_workout_without_steps_is_accepted_as_empty() -> None:
    workouts = parse_workout_data({"workouts": [{"id": "x", "name": "Nothing"}]})

    assert flatten(workouts[0]) == ()
    assert find_workout(workouts, "x") is workouts[0]
    assert find_workout(workouts, "y") is None


def test_repetition_without_children_is_kept() -> None:
    workouts = parse_workout_data(
        {"workouts": [{"id": "x", "name": "Odd", "steps": [{"type": "repetition", "count": 3}]}]}
    )

    assert workouts[0].steps == (RepetitionStep(count=3, steps=()),)
    assert flatten(workouts[0]) == ()


def test_load_workouts_invalid_extension(tmp_path: Path) -> None:
    workout_file = tmp_path / "workouts.csv"
    workout_file.write_text("hello", encoding="utf-8")

    with pytest.raises(WorkoutParseError):
        load_workouts(workout_file)


def test_load_workouts_invalid_json(tmp_path: Path) -> None:
    workout_file = tmp_path / "workouts.json"
    workout_file.write_text("{not json", encoding="utf-8")

    with pytest.raises(WorkoutParseError):
        load_workouts(workout_file)


@pytest.mark.parametrize(
    "step",
    [
        {"type": "exercise", "duration": 30},
        {"type": "exercise", "name": "Plank", "duration": -1},
        {"type": "rest", "duration": "soon"},
        {"type": "rest", "duration": 1.5},
        {"type": "repetition", "count": -2, "steps": []},
        {"type": "repetition", "count": 2, "steps": {}},
        {"type": "stretch", "duration": 10},
    ],
)
def test_invalid_steps_are_rejected(step: dict) -> None:
    with pytest.raises(WorkoutParseError, match="step 1"):
        parse_workout_data({"workouts": [{"id": "x", "name": "Bad", "steps": [step]}]})


def test_document_shape_is_validated() -> None:
    with pytest.raises(WorkoutParseError):
        parse_workout_data([])
    with pytest.raises(WorkoutParseError):
        parse_workout_data({"workouts": {}})
    with pytest.raises(WorkoutParseError):
        parse_workout_data({"workouts": [{"id": "x"}]})


def test_missing_or_null_ids_fall_back_to_position() -> None:
    workouts = parse_workout_data(
        {
            "workouts": [
                {"id": None, "name": "First"},
                {"name": "Second"},
                {"id": "  ", "name": "Third"},
                {"id": 0, "name": "Fourth"},
            ]
        }
    )

    assert [w.id for w in workouts] == ["1", "2", "3", "0"]


def test_load_workouts_missing_file(tmp_path: Path) -> None:
    with pytest.raises(WorkoutParseError, match="Unable to read"):
        load_workouts(tmp_path / "nowhere.json")


def test_load_workouts_invalid_utf8(tmp_path: Path) -> None:
    workout_file = tmp_path / "workouts.json"
    workout_file.write_bytes(b'{"workouts": [{"name": "\xff\xfe"}]}')

    with pytest.raises(WorkoutParseError, match="Unable to read"):
        load_workouts(workout_file)
