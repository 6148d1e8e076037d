# config.py
"""
Configuration settings for the shift wallpaper.
"""
import logging
import os

# ── Basic Application Settings ──────────────────────────────────────────────

FPS = 30

# Frame period during a crossfade, in ms (30 fps)
FRAME_TIME_MS = 1000 // FPS

# How long a crossfade between two shifts takes, in ms
FADE_TIME_MS = 1000

# Display settings
FULLSCREEN = False
WINDOWED_SIZE = (800, 600)
WINDOW_TITLE = "DB Shift Wallpaper"

# Longest the main loop sleeps waiting for events, in ms.  Bounds how late a
# redraw requested from the Omega thread gets picked up.
IDLE_WAIT_MS = 100

LOG_LEVEL = logging.INFO

# ── Paths ──────────────────────────────────────────────────────────────────

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# Banner images, one <banner name>.png each (see make_banners.py)
ASSETS_PATH = os.path.join(BASE_DIR, "assets")

# key → value JSON, read-only from the wallpaper's point of view
SETTINGS_PATH = os.path.join(BASE_DIR, "settings.json")

# ── Shift clock ────────────────────────────────────────────────────────────

# Moonbase Time.  Used unless the TimeZone setting is switched off.
SHIFT_TIMEZONE = "America/Los_Angeles"

# ── Omega Shift polling ────────────────────────────────────────────────────

OMEGA_CHECK_URL = "http://vst.ninja/Resources/isitomegashift.html"

# Hard limit on a single check, in ms
CONNECTION_TIMEOUT_MS = 10_000

# At least this long between checks, in ms
OMEGA_INTERVAL_MS = 600_000

# Omega Shift only ever happens during the run, which is in November
OMEGA_MONTH = 11

# ── Settings keys ──────────────────────────────────────────────────────────

PREF_TIMEZONE = "TimeZone"
PREF_OMEGASHIFT = "AllowOmegaShift"
PREF_BEESHED = "RustproofBeeShed"
PREF_VINTAGEOMEGASHIFT = "VintageOmegaShift"

PREF_DEFAULTS = {
    PREF_TIMEZONE:          True,
    PREF_OMEGASHIFT:        False,
    PREF_BEESHED:           False,
    PREF_VINTAGEOMEGASHIFT: False,
}
