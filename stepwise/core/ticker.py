"""One-second tick sources driving the run countdown."""

from __future__ import annotations

import asyncio
from typing import Callable, Optional, Protocol


TickCallback = Callable[[], None]


class Ticker(Protocol):
    @property
    def active(self) -> bool: ...

    def start(self, callback: TickCallback) -> None: ...

    def stop(self) -> None: ...


class AsyncioTicker:
    """Fires ``callback`` every ``interval_sec`` on the running event loop.

    Deadlines are absolute (start + n * interval) so slow callbacks do not
    accumulate drift. ``stop()`` cancels the pending handle and bumps the
    generation, so a callback already queued by the loop is dropped.
    """

    def __init__(
        self,
        interval_sec: float = 1.0,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._interval_sec = interval_sec
        self._loop = loop
        self._handle: Optional[asyncio.TimerHandle] = None
        self._generation = 0
        self._callback: TickCallback | None = None
        self._next_deadline = 0.0

    @property
    def active(self) -> bool:
        return self._handle is not None

    def start(self, callback: TickCallback) -> None:
        self.stop()
        loop = self._loop or asyncio.get_running_loop()
        self._loop = loop
        self._callback = callback
        self._next_deadline = loop.time() + self._interval_sec
        self._schedule(self._generation)

    def stop(self) -> None:
        self._generation += 1
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._callback = None

    def _schedule(self, generation: int) -> None:
        assert self._loop is not None
        self._handle = self._loop.call_at(self._next_deadline, self._fire, generation)

    def _fire(self, generation: int) -> None:
        if generation != self._generation or self._callback is None:
            return
        self._handle = None
        self._next_deadline += self._interval_sec
        self._callback()
        # The callback may have stopped or restarted the ticker.
        if generation == self._generation and self._handle is None:
            self._schedule(generation)
