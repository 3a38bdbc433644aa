"""Screen flow controller shared by the web UI."""

from __future__ import annotations

from typing import Callable, Literal

from stepwise.core.ticker import AsyncioTicker, Ticker
from stepwise.device.feedback import FeedbackSink
from stepwise.device.wake_lock import WakeLock
from stepwise.workout.model import Workout
from stepwise.workout.parser import find_workout
from stepwise.workout.runner import RunController, RunSnapshot


Screen = Literal["select", "overview", "run", "finished"]
Action = Literal["previous", "next", "toggle", "end"]

KEY_ACTIONS: dict[str, Action] = {
    "ArrowLeft": "previous",
    "ArrowRight": "next",
    " ": "toggle",
    "Spacebar": "toggle",
    "Escape": "end",
}


class UIController:
    def __init__(
        self,
        workouts: tuple[Workout, ...],
        *,
        feedback: FeedbackSink,
        wake_lock: WakeLock,
        ticker_factory: Callable[[], Ticker] = AsyncioTicker,
        autostart: bool = False,
    ) -> None:
        self._workouts = workouts
        self._feedback = feedback
        self._wake_lock = wake_lock
        self._ticker_factory = ticker_factory
        self._autostart = autostart
        self._run: RunController | None = None
        self.screen: Screen = "select"
        self.selected: Workout | None = None
        self.snapshot: RunSnapshot | None = None
        self.confirming_end = False
        self.status = "Select a workout"

    @property
    def workouts(self) -> tuple[Workout, ...]:
        return self._workouts

    @property
    def run(self) -> RunController | None:
        return self._run

    def select(self, workout_id: str) -> None:
        workout = find_workout(self._workouts, workout_id)
        if workout is None:
            raise ValueError(f"Unknown workout '{workout_id}'")
        self.selected = workout
        self.screen = "overview"
        self.status = f"Loaded workout: {workout.name}"

    def back_to_selection(self) -> None:
        self._teardown_run()
        self.selected = None
        self.snapshot = None
        self.screen = "select"
        self.status = "Select a workout"

    def start_workout(self) -> None:
        if self.selected is None:
            return
        self._teardown_run()
        self._run = RunController(
            self.selected,
            ticker=self._ticker_factory(),
            feedback=self._feedback,
            wake_lock=self._wake_lock,
            on_finish=self._on_finish,
            on_end=self._on_end,
            on_change=self._on_change,
        )
        self.snapshot = self._run.snapshot()
        self.confirming_end = False
        self.screen = "run"
        self.status = "Ready - press play"
        if self._autostart:
            self._run.start()

    def handle_key(self, key: str) -> bool:
        action = KEY_ACTIONS.get(key)
        if action is None or self.screen != "run":
            return False
        self.handle_action(action)
        return True

    def handle_action(self, action: Action) -> None:
        run = self._run
        if run is None or self.screen != "run":
            return
        if action == "end":
            self.request_end()
        elif self.confirming_end:
            # Navigation is blocked while the abort dialog is open.
            return
        elif action == "previous":
            run.previous()
        elif action == "next":
            run.next()
        else:
            run.toggle()

    def request_end(self) -> None:
        if self._run is None or self._run.phase == "complete":
            return
        self._run.pause()
        self.confirming_end = True

    def cancel_end(self) -> None:
        self.confirming_end = False

    def confirm_end(self) -> None:
        if not self.confirming_end or self._run is None:
            return
        self.confirming_end = False
        self._run.end()

    def visibility_restored(self) -> None:
        if self._run is not None:
            self._run.visibility_restored()

    def teardown(self) -> None:
        self._teardown_run()

    def _teardown_run(self) -> None:
        if self._run is not None:
            self._run.close()
            self._run = None
        self.confirming_end = False

    def _on_change(self, snapshot: RunSnapshot) -> None:
        self.snapshot = snapshot
        if snapshot.phase == "running":
            self.status = "Running"
        elif snapshot.phase == "paused":
            self.status = "Paused"

    def _on_finish(self) -> None:
        if self._run is not None:
            self.snapshot = self._run.snapshot()
        self.screen = "finished"
        self.status = "Workout complete!"

    def _on_end(self) -> None:
        self._run = None
        self.snapshot = None
        self.screen = "overview" if self.selected is not None else "select"
        self.status = "Workout ended"
