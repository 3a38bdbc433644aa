from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

import pytest


class ManualTicker:
    """Ticker fake: ticks are delivered only when the test calls ``fire``."""

    def __init__(self) -> None:
        self._callback: Callable[[], None] | None = None
        self.starts = 0
        self.stops = 0

    @property
    def active(self) -> bool:
        return self._callback is not None

    def start(self, callback: Callable[[], None]) -> None:
        self.starts += 1
        self._callback = callback

    def stop(self) -> None:
        self.stops += 1
        self._callback = None

    def fire(self, times: int = 1) -> None:
        for _ in range(times):
            if self._callback is not None:
                self._callback()


class RecordingFeedback:
    def __init__(self) -> None:
        self.signals = 0

    def signal_transition(self) -> None:
        self.signals += 1


class RecordingWakeLock:
    def __init__(self) -> None:
        self.acquired = 0
        self.released = 0

    def acquire(self) -> None:
        self.acquired += 1

    def release(self) -> None:
        self.released += 1


@dataclass
class HostCalls:
    finished: int = 0
    ended: int = 0
    snapshots: list = field(default_factory=list)

    def on_finish(self) -> None:
        self.finished += 1

    def on_end(self) -> None:
        self.ended += 1


@pytest.fixture
def ticker() -> ManualTicker:
    return ManualTicker()


@pytest.fixture
def feedback() -> RecordingFeedback:
    return RecordingFeedback()


@pytest.fixture
def wake_lock() -> RecordingWakeLock:
    return RecordingWakeLock()


@pytest.fixture
def host() -> HostCalls:
    return HostCalls()
