"""Built-in workout catalogue and workout source resolution."""

from __future__ import annotations

from pathlib import Path

from stepwise.workout.model import (
    ExerciseStep,
    RepetitionStep,
    RestStep,
    Section,
    Workout,
)
from stepwise.workout.parser import load_workouts


def _default_workouts_path() -> Path:
    return Path.home() / ".stepwise" / "workouts.json"


BUILTIN_WORKOUTS: tuple[Workout, ...] = (
    Workout(
        id="quick-hiit",
        name="Quick HIIT",
        steps=(
            ExerciseStep("Jumping Jacks", 60, "Light and springy, arms fully overhead."),
            RepetitionStep(
                count=4,
                steps=(
                    ExerciseStep("Burpees", 30, "Chest to floor, jump at the top."),
                    RestStep(15),
                    ExerciseStep("Mountain Climbers", 30),
                ),
                rest_between_reps_sec=30,
            ),
            ExerciseStep("Walk It Out", 60),
        ),
    ),
    Workout(
        id="full-body-30",
        name="Full Body 30",
        sections=(
            Section(
                name="Warm-up",
                steps=(
                    ExerciseStep("Arm Circles", 45),
                    ExerciseStep("Leg Swings", 45, "Hold a wall for balance."),
                    ExerciseStep("Inchworms", 60),
                ),
            ),
            Section(
                name="Strength",
                steps=(
                    RepetitionStep(
                        count=3,
                        steps=(
                            ExerciseStep("Squats", 45, "Hips back, knees track over toes."),
                            ExerciseStep("Push-ups", 45),
                            ExerciseStep("Reverse Lunges", 45),
                            ExerciseStep("Plank", 45, "Squeeze glutes, neutral neck."),
                        ),
                        rest_between_reps_sec=60,
                    ),
                ),
            ),
            Section(
                name="Finisher",
                steps=(
                    RepetitionStep(
                        count=2,
                        steps=(
                            RepetitionStep(
                                count=3,
                                steps=(ExerciseStep("Skater Hops", 20), RestStep(10)),
                            ),
                            ExerciseStep("High Knees", 30),
                        ),
                        rest_between_reps_sec=45,
                    ),
                ),
            ),
            Section(
                name="Cool-down",
                steps=(
                    ExerciseStep("Hamstring Stretch", 60),
                    ExerciseStep("Child's Pose", 60),
                ),
            ),
        ),
    ),
    Workout(
        id="core-10",
        name="Core 10",
        steps=(
            RepetitionStep(
                count=2,
                steps=(
                    ExerciseStep("Dead Bug", 45),
                    ExerciseStep("Side Plank Left", 30),
                    ExerciseStep("Side Plank Right", 30),
                    ExerciseStep("Hollow Hold", 30),
                    ExerciseStep("Bird Dog", 45),
                ),
                rest_between_reps_sec=60,
            ),
            RestStep(30),
            ExerciseStep("Plank", 90, "Last effort, hold as long as you can."),
        ),
    ),
)


def builtin_workouts() -> tuple[Workout, ...]:
    return BUILTIN_WORKOUTS


def resolve_workouts(path: Path | None = None) -> tuple[Workout, ...]:
    """Load workouts from ``path``, the user catalogue, or the built-ins."""
    if path is not None:
        return load_workouts(path)
    default = _default_workouts_path()
    if default.exists():
        return load_workouts(default)
    return BUILTIN_WORKOUTS
