"""Workout catalogue parser (JSON)."""

from __future__ import annotations

import json
from pathlib import Path

from stepwise.workout.model import (
    ExerciseStep,
    RepetitionStep,
    RestStep,
    Section,
    Workout,
    WorkoutStep,
)


class WorkoutParseError(ValueError):
    """Raised when a workout file is invalid."""


def load_workouts(path: str | Path) -> tuple[Workout, ...]:
    file_path = Path(path)
    if file_path.suffix.lower() != ".json":
        raise WorkoutParseError(
            f"Unsupported workout format '{file_path.suffix}'. Use .json"
        )
    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise WorkoutParseError(f"Unable to read {file_path}: {exc}") from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise WorkoutParseError(f"Invalid JSON: {exc}") from exc
    return parse_workout_data(data)


def parse_workout_data(data: object) -> tuple[Workout, ...]:
    if not isinstance(data, dict):
        raise WorkoutParseError("Workout JSON must be an object")

    workouts_obj = data.get("workouts")
    if not isinstance(workouts_obj, list):
        raise WorkoutParseError("Field 'workouts' must be an array")

    workouts: list[Workout] = []
    for i, raw in enumerate(workouts_obj):
        if not isinstance(raw, dict):
            raise WorkoutParseError(f"Workout {i + 1}: must be an object")
        workouts.append(_build_workout(raw, index=i))
    return tuple(workouts)


def find_workout(workouts: tuple[Workout, ...], workout_id: str) -> Workout | None:
    return next((item for item in workouts if item.id == workout_id), None)


def _build_workout(raw: dict[str, object], *, index: int) -> Workout:
    name_obj = raw.get("name")
    if not isinstance(name_obj, str) or not name_obj.strip():
        raise WorkoutParseError(f"Workout {index + 1}: field 'name' must be a string")
    id_obj = raw.get("id")
    workout_id = "" if id_obj is None else str(id_obj).strip()
    workout_id = workout_id or str(index + 1)
    where = f"Workout '{workout_id}'"

    sections_obj = raw.get("sections")
    steps_obj = raw.get("steps")

    # A workout with neither form is accepted and runs as an empty sequence.
    sections: tuple[Section, ...] | None = None
    steps: tuple[WorkoutStep, ...] | None = None
    if sections_obj is not None:
        if not isinstance(sections_obj, list):
            raise WorkoutParseError(f"{where}: field 'sections' must be an array")
        sections = tuple(
            _build_section(item, where=f"{where} section {i + 1}")
            for i, item in enumerate(sections_obj)
        )
    elif steps_obj is not None:
        steps = _build_steps(steps_obj, where=where)

    return Workout(id=workout_id, name=name_obj.strip(), steps=steps, sections=sections)


def _build_section(raw: object, *, where: str) -> Section:
    if not isinstance(raw, dict):
        raise WorkoutParseError(f"{where}: must be an object")
    name_obj = raw.get("name", "")
    if not isinstance(name_obj, str):
        raise WorkoutParseError(f"{where}: field 'name' must be a string")
    return Section(name=name_obj.strip(), steps=_build_steps(raw.get("steps", []), where=where))


def _build_steps(raw: object, *, where: str) -> tuple[WorkoutStep, ...]:
    if not isinstance(raw, list):
        raise WorkoutParseError(f"{where}: field 'steps' must be an array")
    return tuple(
        _build_step(item, where=f"{where} step {i + 1}") for i, item in enumerate(raw)
    )


def _build_step(raw: object, *, where: str) -> WorkoutStep:
    if not isinstance(raw, dict):
        raise WorkoutParseError(f"{where}: must be an object")

    kind = raw.get("type")
    if kind == "exercise":
        name_obj = raw.get("name")
        if not isinstance(name_obj, str) or not name_obj.strip():
            raise WorkoutParseError(f"{where}: exercise needs a 'name'")
        description_obj = raw.get("description")
        description: str | None
        if description_obj is None:
            description = None
        else:
            description = str(description_obj).strip() or None
        return ExerciseStep(
            name=name_obj.strip(),
            duration_sec=_parse_duration(raw.get("duration"), field_name="duration", where=where),
            description=description,
        )

    if kind == "rest":
        return RestStep(
            duration_sec=_parse_duration(raw.get("duration"), field_name="duration", where=where)
        )

    if kind == "repetition":
        count = _parse_int_field(raw=raw.get("count"), field_name="count", where=where)
        if count < 0:
            raise WorkoutParseError(f"{where}: count must be >= 0")
        gap_obj = raw.get("restBetweenReps")
        gap = (
            None
            if gap_obj is None
            else _parse_duration(gap_obj, field_name="restBetweenReps", where=where)
        )
        return RepetitionStep(
            count=count,
            steps=_build_steps(raw.get("steps", []), where=where),
            rest_between_reps_sec=gap,
        )

    raise WorkoutParseError(f"{where}: unknown step type {kind!r}")


def _parse_duration(raw: object, *, field_name: str, where: str) -> int:
    value = _parse_int_field(raw=raw, field_name=field_name, where=where)
    if value < 0:
        raise WorkoutParseError(f"{where}: {field_name} must be >= 0")
    return value


def _parse_int_field(*, raw: object, field_name: str, where: str) -> int:
    if raw is None or isinstance(raw, bool):
        raise WorkoutParseError(f"{where}: invalid {field_name}")
    if isinstance(raw, float):
        if not raw.is_integer():
            raise WorkoutParseError(f"{where}: {field_name} must be a whole number")
        return int(raw)
    try:
        return int(str(raw).strip())
    except ValueError as exc:
        raise WorkoutParseError(f"{where}: invalid {field_name}") from exc
