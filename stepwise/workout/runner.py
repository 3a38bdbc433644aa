"""Countdown and navigation state machine for one workout run."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import accumulate
from typing import Callable, Literal, Optional

from stepwise.core.state import RunState
from stepwise.core.ticker import Ticker
from stepwise.device.feedback import FeedbackSink
from stepwise.device.wake_lock import NullWakeLock, WakeLock
from stepwise.workout.flatten import flatten_cached, total_duration
from stepwise.workout.model import FlattenedStep, Workout


RunPhase = Literal["idle", "running", "paused", "complete"]


@dataclass(frozen=True)
class RunSnapshot:
    phase: RunPhase
    step_index: int
    step_total: int
    current: FlattenedStep | None
    next_step: FlattenedStep | None
    countdown_sec: int
    elapsed_total_sec: int
    total_duration_sec: int
    total_remaining_sec: int
    progress_pct: float


ChangeCallback = Callable[[RunSnapshot], None]
HostCallback = Callable[[], None]


class RunController:
    """Walks the flattened steps of ``workout`` with a one-second countdown.

    The run starts paused. While running, ``ticker`` delivers one ``tick``
    per second; the ticker is stopped on every exit from the running phase
    and started fresh on every entry. Each step boundary crossed signals
    ``feedback`` exactly once. ``on_finish`` fires once when the sequence is
    exhausted (or ``next`` is pressed on the last step); ``on_end`` fires
    when the host aborts the run through ``end``.
    """

    def __init__(
        self,
        workout: Workout,
        *,
        ticker: Ticker,
        feedback: FeedbackSink,
        on_finish: HostCallback,
        on_end: HostCallback,
        wake_lock: WakeLock | None = None,
        on_change: Optional[ChangeCallback] = None,
    ) -> None:
        self._workout = workout
        self._steps = flatten_cached(workout)
        self._total_duration_sec = total_duration(self._steps)
        # _offsets[i] is the duration of every step before index i.
        self._offsets = (0, *accumulate(step.duration_sec for step in self._steps))
        self._ticker = ticker
        self._feedback = feedback
        self._wake_lock = wake_lock or NullWakeLock()
        self._on_finish = on_finish
        self._on_end = on_end
        self._on_change = on_change
        self._started = False
        self.state = RunState(
            index=0,
            countdown_sec=self._steps[0].duration_sec if self._steps else 0,
        )

    @property
    def workout(self) -> Workout:
        return self._workout

    @property
    def steps(self) -> tuple[FlattenedStep, ...]:
        return self._steps

    @property
    def total_duration_sec(self) -> int:
        return self._total_duration_sec

    @property
    def phase(self) -> RunPhase:
        if self.state.finished or self.state.index >= len(self._steps):
            return "complete"
        if not self.state.paused:
            return "running"
        return "paused" if self._started else "idle"

    @property
    def closed(self) -> bool:
        return self.state.closed

    def snapshot(self) -> RunSnapshot:
        index = self.state.index
        count = len(self._steps)
        elapsed = self._offsets[min(index, count)]
        total = self._total_duration_sec
        return RunSnapshot(
            phase=self.phase,
            step_index=index,
            step_total=count,
            current=self._steps[index] if index < count else None,
            next_step=self._steps[index + 1] if index + 1 < count else None,
            countdown_sec=self.state.countdown_sec,
            elapsed_total_sec=elapsed,
            total_duration_sec=total,
            total_remaining_sec=total - elapsed,
            progress_pct=(elapsed / total * 100.0) if total > 0 else 0.0,
        )

    def start(self) -> None:
        if self.state.closed:
            return
        if self.phase == "complete":
            # Empty workouts are complete from the outset; starting one finishes it.
            self._finish()
            self._publish()
            return
        if self.phase == "running":
            return

        self._started = True
        self.state.paused = False
        self._acquire_wake_lock()
        self._cross_due_boundaries()
        if self.phase == "running" and not self.state.closed:
            self._ticker.start(self.tick)
        self._publish()

    resume = start

    def pause(self) -> None:
        if self.state.closed or self.phase != "running":
            return
        self.state.paused = True
        self._halt()
        self._publish()

    def toggle(self) -> None:
        if self.phase == "running":
            self.pause()
        else:
            self.start()

    def tick(self) -> None:
        if self.state.closed or self.phase != "running":
            return
        self.state.countdown_sec = max(0, self.state.countdown_sec - 1)
        self._cross_due_boundaries()
        self._publish()

    def next(self) -> None:
        if self.state.closed or self.phase == "complete":
            return
        if self.state.index >= len(self._steps) - 1:
            self._finish()
            self._publish()
            return
        self._move_to(self.state.index + 1)

    def previous(self) -> None:
        if self.state.closed or self.phase == "complete":
            return
        if self.state.index == 0:
            return
        self._move_to(self.state.index - 1)

    def end(self) -> None:
        """Abort the run. Callers are expected to have confirmed with the user."""
        if self.state.closed or self.phase == "complete":
            return
        self.state.paused = True
        self.state.closed = True
        self._halt()
        position = f"{self.state.index + 1}/{len(self._steps)}"
        print(f"[RUN] {self._workout.name}: ended at step {position}")
        self._on_end()

    def close(self) -> None:
        """Tear the run down without notifying the host."""
        if self.state.closed:
            return
        self.state.paused = True
        self.state.closed = True
        self._halt()

    def visibility_restored(self) -> None:
        if not self.state.closed and self.phase == "running":
            self._acquire_wake_lock()

    def _move_to(self, index: int) -> None:
        self._halt()
        self._started = True
        self.state.index = index
        self.state.countdown_sec = self._steps[index].duration_sec
        self.state.paused = True
        self._publish()

    def _cross_due_boundaries(self) -> None:
        # Zero-length steps are crossed immediately, one cue each.
        while (
            not self.state.closed
            and self.phase == "running"
            and self.state.countdown_sec == 0
        ):
            self._signal_feedback()
            if self.state.index < len(self._steps) - 1:
                self.state.index += 1
                self.state.countdown_sec = self._steps[self.state.index].duration_sec
            else:
                self.state.index = len(self._steps)
                self._finish()

    def _finish(self) -> None:
        if self.state.finished:
            return
        self.state.finished = True
        self.state.paused = True
        self._halt()
        print(f"[RUN] {self._workout.name}: finished")
        self._on_finish()

    def _halt(self) -> None:
        self._ticker.stop()
        try:
            self._wake_lock.release()
        except Exception as exc:
            print(f"[WAKE-LOCK] release failed: {exc}")

    def _acquire_wake_lock(self) -> None:
        try:
            self._wake_lock.acquire()
        except Exception as exc:
            print(f"[WAKE-LOCK] unavailable, continuing without it: {exc}")

    def _signal_feedback(self) -> None:
        try:
            self._feedback.signal_transition()
        except Exception as exc:
            print(f"[CUE] feedback failed: {exc}")

    def _publish(self) -> None:
        if self._on_change is not None and not self.state.closed:
            self._on_change(self.snapshot())
