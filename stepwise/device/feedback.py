"""Transition cue sinks (audio + vibration)."""

from __future__ import annotations

import asyncio
import base64
import sys
from pathlib import Path
from typing import Any, Callable, Optional, Protocol, TextIO

from stepwise.device.constants import (
    CUE_MIME_TYPES,
    CUE_TONE_GAIN,
    CUE_TONE_HZ,
    CUE_TONE_SEC,
    CUE_VIBRATE_MS,
)


JavaScriptRunner = Callable[[str], Any]


class FeedbackSink(Protocol):
    def signal_transition(self) -> None: ...


class SilentFeedback:
    def signal_transition(self) -> None:
        return None


class TerminalFeedback:
    """Rings the terminal bell on every step change."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def signal_transition(self) -> None:
        stream = self._stream or sys.stdout
        stream.write("\a")
        stream.flush()


def build_tone_script() -> str:
    return f"""
        (() => {{
          const Ctx = window.AudioContext || window.webkitAudioContext;
          if (!Ctx) return;
          window.__stepwiseAudio = window.__stepwiseAudio || new Ctx();
          const ctx = window.__stepwiseAudio;
          if (ctx.state === 'suspended') ctx.resume();
          const osc = ctx.createOscillator();
          const gain = ctx.createGain();
          osc.type = 'sine';
          osc.frequency.setValueAtTime({CUE_TONE_HZ}, ctx.currentTime);
          gain.gain.setValueAtTime({CUE_TONE_GAIN}, ctx.currentTime);
          osc.connect(gain);
          gain.connect(ctx.destination);
          osc.start(ctx.currentTime);
          osc.stop(ctx.currentTime + {CUE_TONE_SEC});
        }})();
    """


def build_unlock_script() -> str:
    """Create/resume the page AudioContext; must run inside a user gesture."""
    return """
        (() => {
          const Ctx = window.AudioContext || window.webkitAudioContext;
          if (!Ctx) return;
          window.__stepwiseAudio = window.__stepwiseAudio || new Ctx();
          if (window.__stepwiseAudio.state === 'suspended') window.__stepwiseAudio.resume();
        })();
    """


def build_cue_script(data_url: str | None) -> str:
    vibrate = (
        f"if ('vibrate' in navigator) {{ navigator.vibrate({CUE_VIBRATE_MS}); }}"
    )
    if data_url is None:
        return build_tone_script() + vibrate
    # Clip playback can still be refused by the browser; fall back to the tone there too.
    return f"""
        (() => {{
          const tone = () => {{ {build_tone_script()} }};
          try {{
            new Audio('{data_url}').play().catch(tone);
          }} catch (err) {{
            tone();
          }}
        }})();
    """ + vibrate


class BrowserFeedback:
    """Plays the cue in the page through a JavaScript bridge.

    The cue clip is read from disk once, on the first transition, and embedded
    as a data URL. A missing or unreadable clip degrades to a synthesized
    oscillator tone. ``signal_transition`` never blocks: the work runs in a
    background task on the current event loop.
    """

    def __init__(self, run_javascript: JavaScriptRunner, cue_path: Path | None = None) -> None:
        self._run_javascript = run_javascript
        self._cue_path = cue_path
        self._cue_data_url: str | None = None
        self._cue_loaded = False
        self._load_lock: Optional[asyncio.Lock] = None
        self._tasks: set[asyncio.Task[None]] = set()

    def signal_transition(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._emit(build_cue_script(self._cue_data_url))
            return
        task = loop.create_task(self._signal())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        """Test hook: wait for cues still being delivered.

        Hosts never need it; cues are fire-and-forget.
        """
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def _signal(self) -> None:
        data_url = await self._load_cue()
        self._emit(build_cue_script(data_url))

    async def _load_cue(self) -> str | None:
        if self._cue_loaded:
            return self._cue_data_url
        if self._load_lock is None:
            self._load_lock = asyncio.Lock()
        async with self._load_lock:
            if self._cue_loaded:
                return self._cue_data_url
            self._cue_data_url = await self._read_cue()
            self._cue_loaded = True
        return self._cue_data_url

    async def _read_cue(self) -> str | None:
        if self._cue_path is None:
            return None
        mime = CUE_MIME_TYPES.get(self._cue_path.suffix.lower())
        if mime is None:
            print(f"[CUE] unsupported cue format '{self._cue_path.suffix}', using tone")
            return None
        try:
            payload = await asyncio.to_thread(self._cue_path.read_bytes)
        except OSError as exc:
            print(f"[CUE] cue clip unavailable ({exc}), using tone")
            return None
        encoded = base64.b64encode(payload).decode("ascii")
        return f"data:{mime};base64,{encoded}"

    def _emit(self, script: str) -> None:
        try:
            self._run_javascript(script)
        except Exception as exc:
            print(f"[CUE] unable to play cue: {exc}")
