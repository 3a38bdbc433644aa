"""Cue and wake-lock constants shared by device ports."""

from __future__ import annotations

from pathlib import Path

CUE_TONE_HZ = 440
CUE_TONE_SEC = 0.15
CUE_TONE_GAIN = 0.5
CUE_VIBRATE_MS = 200

CUE_MIME_TYPES = {
    ".wav": "audio/wav",
    ".mp3": "audio/mpeg",
    ".ogg": "audio/ogg",
}

# Browser-side handle holding the WakeLockSentinel between calls.
WAKE_LOCK_JS_HANDLE = "window.__stepwiseWakeLock"


def default_cue_path() -> Path:
    return Path.home() / ".stepwise" / "cue.wav"
