"""Terminal CLI entrypoint for Stepwise."""

from __future__ import annotations

import argparse
import asyncio
import threading
from pathlib import Path

from stepwise.core.engine import StepwiseEngine
from stepwise.device.feedback import FeedbackSink, SilentFeedback, TerminalFeedback
from stepwise.workout.flatten import format_duration
from stepwise.workout.library import resolve_workouts
from stepwise.workout.parser import WorkoutParseError, find_workout


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Stepwise guided workout timer")
    parser.add_argument("--list", action="store_true", help="List available workouts")
    parser.add_argument(
        "--run",
        metavar="WORKOUT_ID",
        default=None,
        help="Run a workout in the terminal",
    )
    parser.add_argument(
        "--ui-web",
        action="store_true",
        help="Launch web UI (NiceGUI)",
    )
    parser.add_argument(
        "--workouts",
        type=Path,
        default=None,
        help="Workout catalogue JSON (default: ~/.stepwise/workouts.json or built-ins)",
    )
    parser.add_argument(
        "--web-host",
        default="127.0.0.1",
        help="Host bind for --ui-web",
    )
    parser.add_argument(
        "--web-port",
        type=int,
        default=8090,
        help="Port for --ui-web",
    )
    parser.add_argument(
        "--cue",
        type=Path,
        default=None,
        help="Audio clip played at step changes in the web UI (default: ~/.stepwise/cue.wav)",
    )
    parser.add_argument(
        "--silent",
        action="store_true",
        help="Disable the step change cue",
    )
    parser.add_argument(
        "--autostart",
        action="store_true",
        help="Start the countdown as soon as a workout is opened instead of waiting for play",
    )
    return parser


def run_list(workouts_path: Path | None) -> int:
    workouts = resolve_workouts(workouts_path)
    if not workouts:
        print("No workouts found")
        return 0
    for workout in workouts:
        duration = format_duration(workout.total_duration_sec)
        print(f"{workout.id:<20} {workout.name:<28} {duration:>7}")
    return 0


def _start_on_enter(loop: asyncio.AbstractEventLoop, engine: StepwiseEngine) -> None:
    try:
        input("Press Enter to start... ")
    except EOFError:
        pass
    try:
        loop.call_soon_threadsafe(engine.begin)
    except RuntimeError:
        # The run already ended and its loop is closed.
        return


async def run_workout(
    workout_id: str,
    workouts_path: Path | None,
    silent: bool,
    autostart: bool = False,
) -> int:
    workouts = resolve_workouts(workouts_path)
    workout = find_workout(workouts, workout_id)
    if workout is None:
        print(f"Unknown workout '{workout_id}'. Use --list to see available ids.")
        return 1

    feedback: FeedbackSink = SilentFeedback() if silent else TerminalFeedback()
    engine = StepwiseEngine(workout, feedback=feedback, autostart=autostart)
    if not autostart:
        # Daemon thread: a pending input() must not keep the process alive.
        threading.Thread(
            target=_start_on_enter,
            args=(asyncio.get_running_loop(), engine),
            daemon=True,
        ).start()
    completed = await engine.run()
    return 0 if completed else 1


def main() -> int:
    parser = build_parser()
    args = parser.parse_args()

    try:
        if args.ui_web:
            from stepwise.ui.web_app import run_web_ui

            return run_web_ui(
                workouts_path=args.workouts,
                cue_path=args.cue,
                silent=args.silent,
                autostart=args.autostart,
                host=args.web_host,
                port=args.web_port,
            )
        if args.list:
            return run_list(args.workouts)
        if args.run:
            return asyncio.run(
                run_workout(args.run, args.workouts, args.silent, args.autostart)
            )
    except WorkoutParseError as exc:
        print(f"Invalid workout file: {exc}")
        return 2
    except KeyboardInterrupt:
        print("Workout ended")
        return 1

    parser.print_help()
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
