"""
omega.py – "is it Omega Shift?" poller

Every OMEGA_INTERVAL_MS (on the render thread's Looper) the poller decides
whether Omega Shift is even possible right now: it has to be November and
the user has to have allowed it.  If so, one HTTP check goes out on its own
thread; the VST's page answers with a single "0" or "1".  Anything else, a
timeout, or any network trouble means "no news this time".

Threading contract
------------------
The poller is the only writer of its `OmegaFlag`; the render thread only
reads it.  The worker thread never touches scheduler state: all it does is
write the flag and call `request_redraw`, which must be thread-safe (the app
passes `EventManager.post`).
"""

from __future__ import annotations

import itertools
import logging
import threading
import time
from typing import Callable, Optional

import requests

import config
from shifts import ShiftClock
from timing import Looper, wall_ms

log = logging.getLogger(__name__)


class OmegaFlag:
    """Cross-thread boolean cell.  Starts False."""

    def __init__(self, value: bool = False) -> None:
        self._lock  = threading.Lock()
        self._value = bool(value)

    def get(self) -> bool:
        with self._lock:
            return self._value

    def set(self, value: bool) -> bool:
        """Store *value*; True if that changed anything."""
        with self._lock:
            changed = self._value != bool(value)
            self._value = bool(value)
            return changed

    def __bool__(self) -> bool:
        return self.get()


def parse_flag(body: bytes) -> Optional[bool]:
    """b"0" → False, b"1" → True, anything else → None."""
    text = body.strip()
    if text == b"0":
        return False
    if text == b"1":
        return True
    return None


def _spawn_thread(target: Callable, *args) -> None:
    threading.Thread(target=target, args=args, name="omega-check",
                     daemon=True).start()


class OmegaPoller:
    def __init__(self,
                 looper: Looper,
                 settings,
                 request_redraw: Callable[[], None],
                 flag: Optional[OmegaFlag] = None,
                 clock: Optional[ShiftClock] = None,
                 *,
                 url: str | None = None,
                 interval_ms: int | None = None,
                 timeout_ms: int | None = None,
                 http=None,
                 now_ms: Callable[[], int] = wall_ms,
                 spawn: Callable = _spawn_thread) -> None:
        self.settings       = settings
        self.request_redraw = request_redraw
        self.flag           = flag or OmegaFlag()
        self.clock          = clock or ShiftClock()
        self.url            = url or config.OMEGA_CHECK_URL
        self.interval_ms    = config.OMEGA_INTERVAL_MS if interval_ms is None else interval_ms
        self.timeout_ms     = config.CONNECTION_TIMEOUT_MS if timeout_ms is None else timeout_ms
        self._http          = http or requests
        self._now_ms        = now_ms
        self._spawn         = spawn

        self.timer          = looper.timer(self.fire, "omega")
        self.last_check_ms  = 0

        # bumping this orphans any check still in flight
        self._attempts      = itertools.count(1)
        self._attempt_lock  = threading.Lock()
        self._attempt       = 0

    # ── scheduling ────────────────────────────────────────────────────────
    def reschedule(self) -> None:
        """
        Fire now if the last check is older than the interval, otherwise
        wait out the remainder.  Replaces any pending firing.
        """
        elapsed = self._now_ms() - self.last_check_ms
        if elapsed > self.interval_ms:
            log.debug("Last Omega check was %d ms ago, checking now", elapsed)
            self.timer.post(0)
        else:
            wait = self.interval_ms - elapsed
            log.debug("Last Omega check was %d ms ago, next one in %d ms",
                      elapsed, wait)
            self.timer.post(wait)

    def cancel(self) -> None:
        self.timer.cancel()

    # ── firing (render thread) ────────────────────────────────────────────
    def eligible(self) -> bool:
        if not self.settings.get_bool(config.PREF_OMEGASHIFT, False):
            return False
        return self.clock.now(self.settings).month == config.OMEGA_MONTH

    def fire(self) -> None:
        if not self.eligible():
            log.debug("Not checking for Omega Shift right now")
            self._new_attempt()
            if self.flag.set(False):
                log.info("Omega Shift is over")
                self.request_redraw()
        else:
            self._spawn(self._check, self._new_attempt())

        self.last_check_ms = self._now_ms()
        self.timer.post(self.interval_ms)

    def _new_attempt(self) -> int:
        with self._attempt_lock:
            self._attempt = next(self._attempts)
            return self._attempt

    # ── network check (worker thread) ─────────────────────────────────────
    def fetch(self) -> Optional[bool]:
        """One GET against the checker.  None when the answer is unusable."""
        resp = self._http.get(self.url, timeout=self.timeout_ms / 1000.0)
        if resp.status_code != 200:
            log.warning("Omega check returned HTTP %s, ignoring",
                        resp.status_code)
            return None
        value = parse_flag(resp.content)
        if value is None:
            log.warning("Omega check returned %r, ignoring", resp.content[:16])
        return value

    def _check(self, attempt: int) -> None:
        log.debug("Doing Omega check now")
        started = time.monotonic()
        try:
            value = self.fetch()
        except requests.RequestException as exc:
            log.warning("Omega check failed, ignoring: %s", exc)
            return

        if (time.monotonic() - started) * 1000 > self.timeout_ms:
            log.warning("Omega check took longer than %d ms, ignoring",
                        self.timeout_ms)
            return
        if value is None:
            return
        log.debug("It's %sOmega Shift", "" if value else "not ")
        with self._attempt_lock:
            if attempt != self._attempt:
                log.debug("Omega check %d was superseded, ignoring", attempt)
                return
            changed = self.flag.set(value)

        if changed:
            log.info("Omega Shift flag is now %s", value)
            self.request_redraw()
