"""NiceGUI web UI for Stepwise."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from nicegui import ui
from nicegui.events import KeyEventArguments

from stepwise.device.constants import default_cue_path
from stepwise.device.feedback import (
    BrowserFeedback,
    FeedbackSink,
    SilentFeedback,
    build_unlock_script,
)
from stepwise.device.wake_lock import BrowserWakeLock
from stepwise.ui.controller import Action, UIController
from stepwise.workout.flatten import format_duration, section_duration, workout_duration
from stepwise.workout.library import resolve_workouts
from stepwise.workout.model import ExerciseStep, RepetitionStep, Workout, WorkoutStep

REFRESH_SEC = 0.2

VISIBILITY_SCRIPT = """
<script>
  document.addEventListener('visibilitychange', () => {
    if (document.visibilityState === 'visible') emitEvent('stepwise_visible');
  });
</script>
"""


@dataclass(frozen=True)
class WorkoutOption:
    key: str
    name: str
    duration_sec: int
    section_count: int


def _workout_options(workouts: tuple[Workout, ...]) -> list[WorkoutOption]:
    return [
        WorkoutOption(
            key=workout.id,
            name=workout.name,
            duration_sec=workout_duration(workout),
            section_count=len(workout.sections or ()),
        )
        for workout in workouts
    ]


def _render_step(step: WorkoutStep) -> None:
    if isinstance(step, RepetitionStep):
        with ui.card().classes("w-full sw-repeat"):
            ui.label(f"Repeat {step.count} times").classes("font-semibold")
            with ui.column().classes("w-full pl-4"):
                for child in step.steps:
                    _render_step(child)
            if step.rest_between_reps_sec:
                ui.label(f"Rest: {format_duration(step.rest_between_reps_sec)}").classes(
                    "sw-muted"
                )
        return

    with ui.row().classes("w-full justify-between items-start sw-step"):
        with ui.column().classes("gap-0"):
            if isinstance(step, ExerciseStep):
                ui.label(step.name)
                if step.description:
                    ui.label(step.description).classes("text-xs sw-muted")
            else:
                ui.label("Rest").classes("sw-rest")
        ui.label(format_duration(step.duration_sec))


def run_web_ui(
    *,
    workouts_path: Path | None = None,
    cue_path: Path | None = None,
    silent: bool = False,
    autostart: bool = False,
    host: str = "127.0.0.1",
    port: int = 8090,
) -> int:
    workouts = resolve_workouts(workouts_path)
    options = _workout_options(workouts)
    if cue_path is None and default_cue_path().exists():
        cue_path = default_cue_path()

    @ui.page("/")
    def index() -> None:
        client = ui.context.client
        feedback: FeedbackSink = (
            SilentFeedback() if silent else BrowserFeedback(client.run_javascript, cue_path)
        )
        controller = UIController(
            workouts,
            feedback=feedback,
            wake_lock=BrowserWakeLock(client.run_javascript),
            autostart=autostart,
        )
        client.on_disconnect(controller.teardown)

        ui.add_head_html(
            """
            <style>
              body { background: #0b1220; color: #e5e7eb; font-family: Arial, sans-serif; }
              .sw-card { background: #132449; border-radius: 14px; color: #e5e7eb; }
              .sw-muted { color: #9caecf; }
              .sw-rest { color: #38bdf8; }
              .sw-countdown { font-size: 6rem; font-weight: 700; line-height: 1; }
              .sw-repeat { background: rgba(56, 189, 248, 0.08); }
            </style>
            """
        )
        ui.add_body_html(VISIBILITY_SCRIPT)
        ui.on("stepwise_visible", lambda _: controller.visibility_restored())

        select_view = ui.column().classes("w-full max-w-xl mx-auto")
        overview_view = ui.column().classes("w-full max-w-xl mx-auto")
        run_view = ui.column().classes("w-full max-w-xl mx-auto items-center")
        finished_view = ui.column().classes("w-full max-w-xl mx-auto items-center")

        with select_view:
            ui.label("Select a Workout").classes("text-2xl font-bold")
            for option in options:
                with ui.card().classes("w-full cursor-pointer sw-card") as card:
                    ui.label(option.name).classes("text-lg font-semibold")
                    detail = format_duration(option.duration_sec)
                    if option.section_count:
                        detail += f" | {option.section_count} sections"
                    ui.label(detail).classes("sw-muted")

                    def on_pick(picked_key: str = option.key) -> None:
                        controller.select(picked_key)
                        build_overview()
                        refresh_ui()

                    card.on("click", on_pick)

        with run_view:
            workout_title = ui.label().classes("text-xl font-bold")
            progress_bar = ui.linear_progress(value=0, show_value=False).classes("w-full")
            section_label = ui.label().classes("sw-muted")
            step_title = ui.label().classes("text-3xl font-semibold")
            countdown_label = ui.label().classes("sw-countdown")
            description_label = ui.label().classes("sw-muted")
            next_label = ui.label().classes("sw-muted")
            totals_label = ui.label().classes("text-sm sw-muted")
            with ui.row():
                prev_btn = ui.button("Previous", on_click=lambda: act("previous"))
                play_btn = ui.button("Start", on_click=lambda: act("toggle"))
                next_btn = ui.button("Next", on_click=lambda: act("next"))
                ui.button("End Workout", color="negative", on_click=lambda: act("end"))

        with finished_view:
            ui.label("Workout Complete!").classes("text-3xl font-bold")
            finished_summary = ui.label().classes("sw-muted")
            ui.button("Back to Workouts", on_click=lambda: go_select())

        with ui.dialog().props("persistent") as confirm_dialog, ui.card():
            ui.label("End this workout?")
            with ui.row():
                ui.button("Keep going", on_click=lambda: cancel_end())
                ui.button("End", color="negative", on_click=lambda: confirm_end())

        def build_overview() -> None:
            workout = controller.selected
            overview_view.clear()
            if workout is None:
                return
            with overview_view:
                ui.label(workout.name).classes("text-2xl font-bold")
                ui.label(f"Total {format_duration(workout_duration(workout))}").classes(
                    "sw-muted"
                )
                with ui.row():
                    ui.button("Back", on_click=lambda: go_select())
                    ui.button("Start Workout", on_click=lambda: start())
                if workout.sections is not None:
                    for section in workout.sections:
                        ui.label(
                            f"{section.name} ({format_duration(section_duration(section))} min)"
                        ).classes("text-lg font-semibold")
                        for step in section.steps:
                            _render_step(step)
                else:
                    for step in workout.steps or ():
                        _render_step(step)

        def go_select() -> None:
            controller.back_to_selection()
            refresh_ui()

        def start() -> None:
            controller.start_workout()
            refresh_ui()

        def act(action: Action) -> None:
            if action == "toggle":
                client.run_javascript(build_unlock_script())
            controller.handle_action(action)
            refresh_ui()

        def cancel_end() -> None:
            controller.cancel_end()
            refresh_ui()

        def confirm_end() -> None:
            controller.confirm_end()
            build_overview()
            refresh_ui()

        def on_key(event: KeyEventArguments) -> None:
            if not event.action.keydown or event.action.repeat:
                return
            if event.key.name == " ":
                client.run_javascript(build_unlock_script())
            if controller.handle_key(event.key.name):
                refresh_ui()

        ui.keyboard(on_key=on_key, ignore=["input", "select", "button", "textarea"])

        def refresh_ui() -> None:
            select_view.set_visibility(controller.screen == "select")
            overview_view.set_visibility(controller.screen == "overview")
            run_view.set_visibility(controller.screen == "run")
            finished_view.set_visibility(controller.screen == "finished")

            if controller.confirming_end:
                confirm_dialog.open()
            else:
                confirm_dialog.close()

            snap = controller.snapshot
            if controller.screen == "finished" and snap is not None:
                finished_summary.text = f"Total time {format_duration(snap.total_duration_sec)}"
            if controller.screen != "run" or snap is None:
                return

            workout_title.text = controller.selected.name if controller.selected else ""
            progress_bar.value = snap.progress_pct / 100.0
            if snap.current is None:
                section_label.text = ""
                step_title.text = "Workout Complete!"
                countdown_label.text = ""
                description_label.text = ""
                next_label.text = ""
            else:
                section_label.text = snap.current.section or ""
                step_title.text = snap.current.title
                countdown_label.text = str(snap.countdown_sec)
                description_label.text = snap.current.description or ""
                next_label.text = (
                    f"Next: {snap.next_step.title} ({format_duration(snap.next_step.duration_sec)})"
                    if snap.next_step
                    else "Next: finish"
                )
            totals_label.text = (
                f"Elapsed {format_duration(snap.elapsed_total_sec)}"
                f" | Remaining {format_duration(snap.total_remaining_sec)}"
                f" | Step {min(snap.step_index + 1, snap.step_total)}/{snap.step_total}"
            )
            play_btn.text = "Pause" if snap.phase == "running" else "Start"
            prev_btn.set_enabled(snap.step_index > 0 and snap.phase != "complete")
            next_btn.set_enabled(snap.phase != "complete")

        refresh_ui()
        ui.timer(REFRESH_SEC, refresh_ui)

    ui.run(host=host, port=port, reload=False, title="Stepwise")
    return 0
