"""
shifts.py

Which shift is it?  The shift enumeration, the timezone-aware clock, and the
pure classifier that maps (time, settings, Omega flag) to a shift.
"""

from __future__ import annotations

import datetime
import enum
import logging
import time
from typing import Callable, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import config

log = logging.getLogger(__name__)


class Shift(enum.Enum):
    """The shift on the banner."""

    INVALID     = "invalid"       # unset; never drawn
    ZETASHIFT   = "zetashift"     # 12m-6a
    DAWNGUARD   = "dawnguard"     # 6a-12n
    ALPHAFLIGHT = "alphaflight"   # 12n-6p
    BETAFLIGHT  = "betaflight"    # 12n-6p, Rustproof Bee Shed
    NIGHTWATCH  = "nightwatch"    # 6p-12m
    DUSKGUARD   = "duskguard"     # 6p-12m, Rustproof Bee Shed
    OMEGASHIFT  = "omegashift"    # whenever the VST says it is

    @property
    def title(self) -> str:
        return _TITLES[self]


_TITLES = {
    Shift.INVALID:     "Invalid",
    Shift.ZETASHIFT:   "Zeta Shift",
    Shift.DAWNGUARD:   "Dawn Guard",
    Shift.ALPHAFLIGHT: "Alpha Flight",
    Shift.BETAFLIGHT:  "Beta Flight",
    Shift.NIGHTWATCH:  "Night Watch",
    Shift.DUSKGUARD:   "Dusk Guard",
    Shift.OMEGASHIFT:  "Omega Shift",
}

# Four six-hour buckets starting at midnight: (standard, bee shed)
_BUCKETS = (
    (Shift.ZETASHIFT,   Shift.ZETASHIFT),
    (Shift.DAWNGUARD,   Shift.DAWNGUARD),
    (Shift.ALPHAFLIGHT, Shift.BETAFLIGHT),
    (Shift.NIGHTWATCH,  Shift.DUSKGUARD),
)

DRAWABLE_SHIFTS = tuple(s for s in Shift if s is not Shift.INVALID)


def classify(now: datetime.datetime, settings, omega_active: bool) -> Shift:
    """
    Map a (timezone-resolved) time to its shift.

    Omega Shift wins outright when the flag is up and the user allows it.
    Otherwise the hour picks one of four six-hour buckets, with the afternoon
    and evening buckets reskinned by the Rustproof Bee Shed setting.
    """
    if omega_active and settings.get_bool(config.PREF_OMEGASHIFT, False):
        return Shift.OMEGASHIFT

    standard, bee_shed = _BUCKETS[now.hour // 6]
    return bee_shed if settings.get_bool(config.PREF_BEESHED, False) else standard


# ── clock ──────────────────────────────────────────────────────────────────
class ShiftClock:
    """
    Current wall-clock time, pinned to Moonbase Time unless the user has
    switched the TimeZone setting off, in which case it's local time.
    """

    def __init__(self, tz_name: str | None = None,
                 source: Callable[[], float] = time.time) -> None:
        self._source = source
        self._tz_name = tz_name or config.SHIFT_TIMEZONE
        self._tz: Optional[datetime.tzinfo] = None

    @property
    def shift_tz(self) -> datetime.tzinfo:
        if self._tz is None:
            try:
                self._tz = ZoneInfo(self._tz_name)
            except ZoneInfoNotFoundError:
                log.error("No timezone data for %s, falling back to UTC",
                          self._tz_name)
                self._tz = datetime.timezone.utc
        return self._tz

    def now(self, settings) -> datetime.datetime:
        ts = self._source()
        if settings.get_bool(config.PREF_TIMEZONE, True):
            return datetime.datetime.fromtimestamp(ts, self.shift_tz)
        return datetime.datetime.fromtimestamp(ts).astimezone()
