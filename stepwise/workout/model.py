"""Workout domain models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class ExerciseStep:
    name: str
    duration_sec: int
    description: str | None = None


@dataclass(frozen=True)
class RestStep:
    duration_sec: int


@dataclass(frozen=True)
class RepetitionStep:
    count: int
    steps: tuple[WorkoutStep, ...]
    rest_between_reps_sec: int | None = None


AtomicStep = Union[ExerciseStep, RestStep]
WorkoutStep = Union[ExerciseStep, RestStep, RepetitionStep]


@dataclass(frozen=True)
class Section:
    name: str
    steps: tuple[WorkoutStep, ...]


@dataclass(frozen=True)
class Workout:
    """A named workout, either a flat step list or a list of named sections.

    When both forms are populated, ``sections`` takes precedence.
    """

    id: str
    name: str
    steps: tuple[WorkoutStep, ...] | None = None
    sections: tuple[Section, ...] | None = None

    @property
    def total_duration_sec(self) -> int:
        from stepwise.workout.flatten import workout_duration

        return workout_duration(self)


@dataclass(frozen=True)
class FlattenedStep:
    step: AtomicStep
    section: str | None = None

    @property
    def duration_sec(self) -> int:
        return self.step.duration_sec

    @property
    def is_rest(self) -> bool:
        return isinstance(self.step, RestStep)

    @property
    def title(self) -> str:
        if isinstance(self.step, ExerciseStep):
            return self.step.name
        return "Rest"

    @property
    def description(self) -> str | None:
        if isinstance(self.step, ExerciseStep):
            return self.step.description
        return None
