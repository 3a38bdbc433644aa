"""Mutable runtime state for a single workout run."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class RunState:
    index: int = 0
    countdown_sec: int = 0
    paused: bool = True
    # Set once the host has been told the run finished; blocks a second notify.
    finished: bool = False
    closed: bool = False
