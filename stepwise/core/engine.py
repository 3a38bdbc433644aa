"""Async terminal runner for a single workout."""

from __future__ import annotations

import asyncio

from stepwise.core.ticker import AsyncioTicker, Ticker
from stepwise.device.feedback import FeedbackSink, TerminalFeedback
from stepwise.workout.flatten import format_duration
from stepwise.workout.model import Workout
from stepwise.workout.runner import RunController, RunSnapshot


class StepwiseEngine:
    def __init__(
        self,
        workout: Workout,
        feedback: FeedbackSink | None = None,
        ticker: Ticker | None = None,
        autostart: bool = True,
    ) -> None:
        self._workout = workout
        self._feedback = feedback or TerminalFeedback()
        self._ticker = ticker or AsyncioTicker()
        self._autostart = autostart
        self._done_event = asyncio.Event()
        self._completed = False
        self._last_index: int | None = None
        self._controller: RunController | None = None

    async def run(self) -> bool:
        """Run the workout to the end; return False when it was aborted.

        Without ``autostart`` the run waits idle until ``begin`` is called.
        """
        self._done_event = asyncio.Event()
        self._completed = False
        controller = RunController(
            self._workout,
            ticker=self._ticker,
            feedback=self._feedback,
            on_finish=self._on_finish,
            on_end=self._on_end,
            on_change=self._print_status_line,
        )
        self._controller = controller
        total = format_duration(controller.total_duration_sec)
        print(f"Starting {self._workout.name} ({len(controller.steps)} steps, {total})")
        try:
            if self._autostart:
                controller.start()
            await self._done_event.wait()
        finally:
            controller.close()
            self._controller = None
        return self._completed

    def begin(self) -> None:
        if self._controller is not None:
            self._controller.start()

    def stop(self) -> None:
        if self._controller is not None:
            self._controller.end()

    def _on_finish(self) -> None:
        self._completed = True
        print("Workout complete!")
        self._done_event.set()

    def _on_end(self) -> None:
        print("Workout ended")
        self._done_event.set()

    def _print_status_line(self, snapshot: RunSnapshot) -> None:
        if snapshot.current is None:
            return
        if snapshot.step_index != self._last_index:
            self._last_index = snapshot.step_index
            section = f"[{snapshot.current.section}] " if snapshot.current.section else ""
            print(
                f"{section}Step {snapshot.step_index + 1}/{snapshot.step_total}: "
                f"{snapshot.current.title}"
            )
            if snapshot.current.description:
                print(f"  {snapshot.current.description}")
        upcoming = snapshot.next_step.title if snapshot.next_step else "finish"
        print(
            f"  {format_duration(snapshot.countdown_sec)} | next: {upcoming}"
            f" | {snapshot.progress_pct:.0f}%"
            f" | remaining {format_duration(snapshot.total_remaining_sec)}"
        )
