"""Screen wake-lock side channel held while a run is active."""

from __future__ import annotations

from typing import Protocol

from stepwise.device.constants import WAKE_LOCK_JS_HANDLE
from stepwise.device.feedback import JavaScriptRunner


class WakeLock(Protocol):
    def acquire(self) -> None: ...

    def release(self) -> None: ...


class NullWakeLock:
    def acquire(self) -> None:
        return None

    def release(self) -> None:
        return None


ACQUIRE_SCRIPT = f"""
    (async () => {{
      if (!('wakeLock' in navigator)) {{
        console.warn('[WAKE-LOCK] not supported by this browser');
        return;
      }}
      if ({WAKE_LOCK_JS_HANDLE} && !{WAKE_LOCK_JS_HANDLE}.released) return;
      try {{
        {WAKE_LOCK_JS_HANDLE} = await navigator.wakeLock.request('screen');
      }} catch (err) {{
        console.warn('[WAKE-LOCK] request failed', err);
      }}
    }})();
"""

RELEASE_SCRIPT = f"""
    (() => {{
      const lock = {WAKE_LOCK_JS_HANDLE};
      {WAKE_LOCK_JS_HANDLE} = null;
      if (lock && !lock.released) lock.release().catch(() => {{}});
    }})();
"""


class BrowserWakeLock:
    """Requests the Screen Wake Lock API in the page.

    Failures on either side are logged and ignored; a run never depends on
    the lock being held.
    """

    def __init__(self, run_javascript: JavaScriptRunner) -> None:
        self._run_javascript = run_javascript
        self._held = False

    @property
    def held(self) -> bool:
        return self._held

    def acquire(self) -> None:
        try:
            self._run_javascript(ACQUIRE_SCRIPT)
            self._held = True
        except Exception as exc:
            print(f"[WAKE-LOCK] acquire failed: {exc}")

    def release(self) -> None:
        if not self._held:
            return
        self._held = False
        try:
            self._run_javascript(RELEASE_SCRIPT)
        except Exception as exc:
            print(f"[WAKE-LOCK] release failed: {exc}")
