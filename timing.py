# =========  timing.py  =========
"""
Wall-clock helpers plus the render thread's tiny post/delay executor.

Everything the wallpaper does on the render thread is a callback on a
`Timer`.  Each component owns its own single-slot timer: posting it again
replaces whatever was pending, so there is never more than one firing queued
per component.  The `Looper` is pumped by the pygame main loop.
"""

from __future__ import annotations

import datetime
import logging
import time
from typing import Callable, List, Optional

log = logging.getLogger(__name__)


def wall_ms() -> int:
    """Milliseconds since the Unix epoch."""
    return int(time.time() * 1000)


def ms_until_next_hour(now: datetime.datetime) -> int:
    """
    Milliseconds from *now* until the top of the next hour in *now*'s own
    timezone.  Never less than 1.
    """
    top = now.replace(minute=0, second=0, microsecond=0) + datetime.timedelta(hours=1)
    return max(1, int((top - now).total_seconds() * 1000))


class Timer:
    """
    Single-slot delayed callback.  `post()` cancels before scheduling,
    `cancel()` may be called any number of times.
    """

    def __init__(self, looper: "Looper", callback: Callable[[], None],
                 name: str = "") -> None:
        self._looper   = looper
        self._callback = callback
        self.name      = name or getattr(callback, "__name__", "timer")
        self._due: Optional[float] = None

    @property
    def pending(self) -> bool:
        return self._due is not None

    @property
    def due_ms(self) -> Optional[float]:
        """Looper time at which this fires, or None if nothing is pending."""
        return self._due

    def post(self, delay_ms: float = 0) -> None:
        self.cancel()
        self._due = self._looper.now_ms() + max(0.0, float(delay_ms))

    def cancel(self) -> None:
        self._due = None

    def _fire_if_due(self, now: float) -> bool:
        if self._due is None or self._due > now:
            return False
        # clear first so the callback may re-post itself
        self._due = None
        self._callback()
        return True


class Looper:
    """Runs due timers.  Only ever touched from the render thread."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._timers: List[Timer] = []

    def now_ms(self) -> float:
        return self._clock() * 1000.0

    def timer(self, callback: Callable[[], None], name: str = "") -> Timer:
        t = Timer(self, callback, name)
        self._timers.append(t)
        return t

    def cancel_all(self) -> None:
        for t in self._timers:
            t.cancel()

    def ms_until_next(self) -> Optional[float]:
        """Delay until the earliest pending timer, or None if all are idle."""
        dues = [t.due_ms for t in self._timers if t.due_ms is not None]
        if not dues:
            return None
        return max(0.0, min(dues) - self.now_ms())

    def run_due(self) -> int:
        """Fire every timer whose deadline has passed; return how many ran."""
        now   = self.now_ms()
        fired = 0
        for t in list(self._timers):
            if t._fire_if_due(now):
                fired += 1
        return fired
