"""Expansion of nested workout step trees into a linear run sequence."""

from __future__ import annotations

from collections import OrderedDict
from typing import Iterable, Sequence

from stepwise.workout.model import (
    ExerciseStep,
    FlattenedStep,
    RepetitionStep,
    RestStep,
    Section,
    Workout,
    WorkoutStep,
)


def flatten(workout: Workout) -> tuple[FlattenedStep, ...]:
    """Return the atomic steps of ``workout`` in execution order.

    Repetitions are unrolled depth-first, with the optional rest gap inserted
    between repeats but never after the last one. Each step keeps the name of
    the section it came from. Malformed nodes (no children, non-positive
    count) contribute nothing instead of failing the whole workout.
    """
    out: list[FlattenedStep] = []
    if workout.sections is not None:
        for section in workout.sections:
            _flatten_into(out, section.steps, section.name)
    elif workout.steps is not None:
        _flatten_into(out, workout.steps, None)
    return tuple(out)


_PLAN_CACHE_SIZE = 8
_plan_cache: OrderedDict[int, tuple[Workout, tuple[FlattenedStep, ...]]] = OrderedDict()


def flatten_cached(workout: Workout) -> tuple[FlattenedStep, ...]:
    """Like ``flatten``, but reuses the sequence of a recently run workout object.

    Entries are keyed by identity and hold a reference to the workout, so an
    id cannot be recycled while its entry is cached.
    """
    key = id(workout)
    entry = _plan_cache.get(key)
    if entry is not None and entry[0] is workout:
        _plan_cache.move_to_end(key)
        return entry[1]
    steps = flatten(workout)
    _plan_cache[key] = (workout, steps)
    _plan_cache.move_to_end(key)
    while len(_plan_cache) > _PLAN_CACHE_SIZE:
        _plan_cache.popitem(last=False)
    return steps


def _flatten_into(
    out: list[FlattenedStep],
    steps: Iterable[WorkoutStep],
    label: str | None,
) -> None:
    for step in steps:
        if isinstance(step, (ExerciseStep, RestStep)):
            out.append(FlattenedStep(step=step, section=label))
        elif isinstance(step, RepetitionStep):
            if not step.steps:
                continue
            gap = step.rest_between_reps_sec or 0
            for rep in range(step.count):
                _flatten_into(out, step.steps, label)
                if gap > 0 and rep < step.count - 1:
                    out.append(FlattenedStep(step=RestStep(duration_sec=gap), section=label))
        else:
            raise TypeError(f"Unsupported workout step: {step!r}")


def total_duration(steps: Sequence[FlattenedStep]) -> int:
    return sum(item.duration_sec for item in steps)


def steps_duration(steps: Iterable[WorkoutStep]) -> int:
    """Duration of a step tree, computed without expanding it."""
    total = 0
    for step in steps:
        if isinstance(step, RepetitionStep):
            reps = max(0, step.count)
            gap = step.rest_between_reps_sec or 0
            total += steps_duration(step.steps) * reps
            if step.steps and reps > 1:
                total += gap * (reps - 1)
        else:
            total += step.duration_sec
    return total


def section_duration(section: Section) -> int:
    return steps_duration(section.steps)


def workout_duration(workout: Workout) -> int:
    if workout.sections is not None:
        return sum(section_duration(section) for section in workout.sections)
    if workout.steps is not None:
        return steps_duration(workout.steps)
    return 0


def format_duration(total_seconds: int) -> str:
    minutes, seconds = divmod(max(0, total_seconds), 60)
    return f"{minutes:d}:{seconds:02d}"
