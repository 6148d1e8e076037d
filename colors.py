"""
colors.py

Three-colour summary of what's on screen, for whoever wants to theme itself
off the wallpaper.  Only settled shifts get one; mid-fade there's no single
answer, so there's no summary.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from palette import Color, ShiftPalette
from scheduler import ScheduleState


@dataclass(frozen=True)
class WallpaperColors:
    primary:   Color
    secondary: Color
    tertiary:  Color

    def hex(self) -> str:
        return " ".join("#%02X%02X%02X" % c for c in (self.primary, self.secondary, self.tertiary))


def summarize(state: ScheduleState, palette: ShiftPalette,
              settings) -> Optional[WallpaperColors]:
    """
    Background of the committed shift as primary, its fixed accent pair as
    secondary/tertiary.  None before the first draw or during a fade.
    """
    if not state.settled:
        return None
    shift = state.last_committed
    secondary, tertiary = palette.accent_colors_for(shift, settings)
    return WallpaperColors(palette.color_for(shift, settings), secondary, tertiary)
