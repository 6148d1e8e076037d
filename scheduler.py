"""
scheduler.py – crossfade state machine

Tracks the last shift fully drawn and the shift being faded toward, and on
every tick says what to draw and how long until the next tick:

* first tick on a surface, or nothing changed → one full-opacity draw, next
  tick at the top of the hour;
* shift changed → old shift underneath, new shift on top at the fade's
  progress, next tick one frame later until the fade deadline passes.
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass, field
from typing import List, Optional

import config
from shifts import Shift
from timing import ms_until_next_hour

log = logging.getLogger(__name__)


@dataclass
class ScheduleState:
    """Per-surface state.  A new surface gets a new one."""
    last_committed: Shift         = Shift.INVALID
    target:         Shift         = Shift.INVALID
    fade_deadline:  Optional[int] = None     # epoch ms; None when not fading

    @property
    def fading(self) -> bool:
        return self.last_committed is not self.target

    @property
    def settled(self) -> bool:
        return self.last_committed is not Shift.INVALID and not self.fading


@dataclass(frozen=True)
class DrawCall:
    shift:   Shift
    opacity: float


@dataclass
class TickResult:
    draws:          List[DrawCall] = field(default_factory=list)
    next_delay_ms:  int            = 0
    colors_changed: bool           = False
    fading:         bool           = False


def fade_opacity(deadline: int, now: int, duration: int) -> float:
    """Fade progress in [0, 1], whatever the clock did in the meantime."""
    if duration <= 0:
        return 1.0
    return min(1.0, max(0.0, (duration - (deadline - now)) / duration))


class CrossfadeScheduler:
    def __init__(self, fade_ms: int | None = None, frame_ms: int | None = None) -> None:
        self.fade_ms  = config.FADE_TIME_MS if fade_ms is None else fade_ms
        self.frame_ms = config.FRAME_TIME_MS if frame_ms is None else frame_ms
        self.state    = ScheduleState()

    def reset(self) -> None:
        """New surface: the next tick is a hard cut, never a fade."""
        self.state = ScheduleState()

    # ---------------------------------------------------------------- tick
    def tick(self, now: datetime.datetime, observed: Shift) -> TickResult:
        st     = self.state
        now_ms = round(now.timestamp() * 1000)
        result = TickResult()

        log.debug("last=%s target=%s observed=%s",
                  st.last_committed.name, st.target.name, observed.name)

        if (st.last_committed is not st.target
                and st.target is not observed
                and st.last_committed is not observed):
            # shift changed again mid-fade; start over from steady state
            log.warning("Shifts are inconsistent (%s → %s, now %s), resetting",
                        st.last_committed.name, st.target.name, observed.name)
            st.last_committed = Shift.INVALID

        if st.last_committed is Shift.INVALID or st.last_committed is observed:
            log.debug("Initial shift or holding on %s", observed.name)
            result.draws.append(DrawCall(observed, 1.0))

            if st.last_committed is Shift.INVALID or st.target is not observed:
                # first draw, or a fade that turned back to where it started
                st.last_committed = st.target = observed
                st.fade_deadline  = None
                result.colors_changed = True

            result.next_delay_ms = ms_until_next_hour(now)
            return result

        # ── crossfade ────────────────────────────────────────────────────
        if st.target is not observed and (st.fade_deadline is None
                                          or st.fade_deadline <= now_ms):
            st.target        = observed
            st.fade_deadline = now_ms + self.fade_ms
            log.debug("New fade to %s, ends at %d", observed.name, st.fade_deadline)

        opacity = fade_opacity(st.fade_deadline, now_ms, self.fade_ms)
        log.debug("Fading %s → %s at %.3f", st.last_committed.name,
                  st.target.name, opacity)
        result.draws.append(DrawCall(st.last_committed, 1.0))
        result.draws.append(DrawCall(st.target, opacity))

        if now_ms >= st.fade_deadline:
            log.debug("Fade to %s complete", st.target.name)
            st.last_committed    = st.target
            st.fade_deadline     = None
            result.colors_changed = True
            result.next_delay_ms = ms_until_next_hour(now)
        else:
            st.target            = observed
            result.fading        = True
            result.next_delay_ms = self.frame_ms
        return result
