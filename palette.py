"""
palette.py

Per-shift look: background colour, banner image and the two accent colours
reported alongside the background.  The table is checked when the palette is
built, so a shift/setting combination with no look is a startup error rather
than a blank wallpaper at 6 p.m.
"""

from __future__ import annotations

import itertools
import logging
import os
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple

import pygame

import config
from shifts import DRAWABLE_SHIFTS, Shift

log = logging.getLogger(__name__)

Color = Tuple[int, int, int]


@dataclass(frozen=True)
class ShiftLook:
    banner:     str       # image name under ASSETS_PATH, sans ".png"
    background: Color
    secondary:  Color
    tertiary:   Color


WHITE = (255, 255, 255)
MOON  = (0x6F, 0x9B, 0xD8)   # Night Watch's moon

# ── look table ─────────────────────────────────────────────────────────────
LOOKS: Dict[str, ShiftLook] = {
    # top half is the background, the bottom half and the yellow trim accent
    "dawnguard":          ShiftLook("dawnguard",          (0xF8, 0x9E, 0x29), (0xC8, 0x5A, 0x1A), (0xFF, 0xDD, 0x55)),
    # background, pale sinister, white wing
    "alphaflight":        ShiftLook("alphaflight",        (0xD5, 0x2B, 0x1E), (0xF2, 0xB5, 0xA8), WHITE),
    "betaflight":         ShiftLook("betaflight",         (0x2E, 0x8B, 0x3A), (0x7C, 0xC5, 0x5B), (0xD9, 0xF0, 0xB8)),
    "nightwatch":         ShiftLook("nightwatch",         (0x1B, 0x2A, 0x5C), MOON,               (0xC9, 0xD6, 0xEE)),
    # the extra colour bands stand in for the horizontal stripe
    "duskguard":          ShiftLook("duskguard",          (0x5A, 0x2E, 0x6E), (0xE0, 0x7B, 0x39), (0xF4, 0xC4, 0x6A)),
    "zetashift":          ShiftLook("zetashift",          (0x4B, 0x25, 0x7A), (0x9B, 0x7F, 0xC9), WHITE),
    # all four banner colours; go with the moon
    "omegashift":         ShiftLook("omegashift",         (0x22, 0x22, 0x22), MOON,               WHITE),
    "omegashift_vintage": ShiftLook("omegashift_vintage", (0x00, 0x00, 0x00), (0x8A, 0x8A, 0x8A), WHITE),
}


def banner_name(shift: Shift, vintage_omega: bool = False) -> str:
    """Name of the look for *shift*.  Only Omega Shift has a vintage skin."""
    if shift is Shift.INVALID:
        raise KeyError("INVALID has no look")
    if shift is Shift.OMEGASHIFT and vintage_omega:
        return "omegashift_vintage"
    return shift.value


class ShiftPalette:
    """Resource lookups keyed by shift plus the skin settings."""

    def __init__(self, looks: Optional[Mapping[str, ShiftLook]] = None) -> None:
        self.looks: Dict[str, ShiftLook] = dict(LOOKS if looks is None else looks)
        self._validate()

    def _validate(self) -> None:
        # Bee Shed skins are Shift values of their own, so only the
        # vintage Omega setting changes which look a shift resolves to
        missing = []
        for shift, vintage in itertools.product(DRAWABLE_SHIFTS, (False, True)):
            name = banner_name(shift, vintage)
            if name not in self.looks:
                missing.append(f"{shift.name} (vintage={vintage}) -> {name}")
        if missing:
            raise ValueError("No look defined for: " + "; ".join(missing))

    # ------------------------------------------------------------ lookups
    def look_for(self, shift: Shift, settings) -> ShiftLook:
        vintage = settings.get_bool(config.PREF_VINTAGEOMEGASHIFT, False)
        return self.looks[banner_name(shift, vintage)]

    def color_for(self, shift: Shift, settings) -> Color:
        return self.look_for(shift, settings).background

    def banner_for(self, shift: Shift, settings) -> str:
        return self.look_for(shift, settings).banner

    def accent_colors_for(self, shift: Shift, settings) -> Tuple[Color, Color]:
        look = self.look_for(shift, settings)
        return look.secondary, look.tertiary


# ── banner images ──────────────────────────────────────────────────────────
class BannerStore:
    """Loads and caches banner images from ASSETS_PATH."""

    def __init__(self, assets_dir: str | None = None) -> None:
        self.assets_dir = os.path.abspath(assets_dir or config.ASSETS_PATH)
        self._cache: Dict[str, Optional[pygame.Surface]] = {}

    def path_for(self, name: str) -> str:
        return os.path.join(self.assets_dir, f"{name}.png")

    def get(self, name: str) -> Optional[pygame.Surface]:
        """The banner image, or None if it can't be loaded (logged once)."""
        if name in self._cache:
            return self._cache[name]

        path = self.path_for(name)
        try:
            img = pygame.image.load(path)
            if pygame.display.get_init() and pygame.display.get_surface() is not None:
                img = img.convert_alpha()
        except (pygame.error, OSError) as exc:
            log.error("Couldn't load banner %s from %s: %s", name, path, exc)
            img = None

        self._cache[name] = img
        return img

    def clear(self) -> None:
        # converted surfaces are tied to the display they were converted for
        self._cache.clear()
