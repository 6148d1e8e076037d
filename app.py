#!/usr/bin/env python3
"""
app.py – shift wallpaper engine + pygame window

The engine is the render-thread side of things: it owns the draw timer, the
crossfade scheduler and the Omega poller, and reacts to surface lifecycle
calls.  The app is the pygame main loop that feeds it events and pumps its
Looper.  Input and cross-thread requests are dispatched through events.py.
"""
from __future__ import annotations

import logging
from typing import Callable, List, Optional

import pygame
from pygame.locals import *

import config
from colors           import WallpaperColors, summarize
from events           import EventManager
from omega            import OmegaFlag, OmegaPoller
from palette          import BannerStore, ShiftPalette
from renderer         import draw_shift
from scheduler        import CrossfadeScheduler, DrawCall
from settings         import Settings
from shifts           import ShiftClock, classify
from timing           import Looper

log = logging.getLogger(__name__)


# ── engine ─────────────────────────────────────────────────────────────────
class WallpaperEngine:
    def __init__(self,
                 settings: Optional[Settings] = None,
                 palette: Optional[ShiftPalette] = None,
                 banners: Optional[BannerStore] = None,
                 clock: Optional[ShiftClock] = None,
                 looper: Optional[Looper] = None,
                 flag: Optional[OmegaFlag] = None,
                 poller: Optional[OmegaPoller] = None):
        self.settings  = settings or Settings()
        self.palette   = palette or ShiftPalette()
        self.banners   = banners or BannerStore()
        self.clock     = clock or ShiftClock()
        self.looper    = looper or Looper()
        self.scheduler = CrossfadeScheduler()

        self.draw_timer = self.looper.timer(self.draw, "draw")
        self.poller     = poller or OmegaPoller(
            self.looper, self.settings, EventManager.request_redraw,
            flag=flag, clock=self.clock)

        self.surface: Optional[pygame.Surface] = None
        self.visible = False
        self._color_listeners: List[Callable[[Optional[WallpaperColors]], None]] = []

    # ── surface lifecycle ──────────────────────────────────────────────────
    def surface_created(self, surface: pygame.Surface) -> None:
        # new surface: whatever was drawn before is gone, so hard cut
        self.surface = surface
        self.banners.clear()
        self.scheduler.reset()
        self.draw_timer.post(0)
        self.poller.reschedule()

    def surface_changed(self, surface: pygame.Surface) -> None:
        # probably a resize; size is picked up at draw time
        self.surface = surface
        self.draw_timer.cancel()
        self.poller.cancel()
        self.draw_timer.post(0)
        self.poller.reschedule()

    def surface_destroyed(self) -> None:
        self.visible = False
        self.surface = None
        self.draw_timer.cancel()
        self.poller.cancel()

    def visibility_changed(self, visible: bool) -> None:
        self.visible = visible
        if visible:
            self.draw_timer.post(0)
            self.poller.reschedule()
        else:
            self.draw_timer.cancel()
            self.poller.cancel()

    def request_redraw(self) -> None:
        """Coalesce with whatever tick is pending: cancel, then post now."""
        if self.visible:
            self.draw_timer.post(0)

    # ── colours ────────────────────────────────────────────────────────────
    def add_color_listener(self, fn: Callable[[Optional[WallpaperColors]], None]) -> None:
        self._color_listeners.append(fn)

    def compute_colors(self) -> Optional[WallpaperColors]:
        return summarize(self.scheduler.state, self.palette, self.settings)

    def _notify_colors_changed(self) -> None:
        colors = self.compute_colors()
        for fn in self._color_listeners:
            fn(colors)

    # ── drawing ────────────────────────────────────────────────────────────
    def draw(self) -> None:
        now   = self.clock.now(self.settings)
        shift = classify(now, self.settings, self.poller.flag.get())
        result = self.scheduler.tick(now, shift)

        surface = self.surface
        if surface is not None:
            for call in result.draws:
                self._draw_call(surface, call)
            if pygame.display.get_init() and surface is pygame.display.get_surface():
                pygame.display.flip()
        else:
            log.debug("No surface to draw on, skipping")

        if result.colors_changed:
            self._notify_colors_changed()

        self.draw_timer.cancel()
        if self.visible:
            log.debug("Next draw in %d ms", result.next_delay_ms)
            self.draw_timer.post(result.next_delay_ms)

    def _draw_call(self, surface: pygame.Surface, call: DrawCall) -> None:
        try:
            look = self.palette.look_for(call.shift, self.settings)
        except KeyError:
            log.error("No look for shift %s, skipping draw", call.shift.name)
            return
        draw_shift(surface, look, self.banners.get(look.banner), call.opacity)


# ── pygame application ─────────────────────────────────────────────────────
class WallpaperApp:
    def __init__(self, engine: Optional[WallpaperEngine] = None):
        pygame.init()
        pygame.display.set_caption(config.WINDOW_TITLE)
        self.screen = self._open_display()
        self.engine = engine or WallpaperEngine()
        self.engine.add_color_listener(self._on_colors)

    @staticmethod
    def _open_display() -> pygame.Surface:
        return pygame.display.set_mode(
            (0, 0) if config.FULLSCREEN else config.WINDOWED_SIZE,
            pygame.FULLSCREEN if config.FULLSCREEN else pygame.RESIZABLE,
        )

    def _on_colors(self, colors: Optional[WallpaperColors]) -> None:
        shift = self.engine.scheduler.state.last_committed
        pygame.display.set_caption(f"{config.WINDOW_TITLE} – {shift.title}")
        if colors is not None:
            log.info("Now showing %s (%s)", shift.title, colors.hex())

    def _dispatch(self, act: dict) -> bool:
        """Handle one action; False means quit."""
        t = act["type"]
        if t == "quit":
            return False
        if t == "redraw":
            self.engine.request_redraw()
        elif t == "visibility":
            self.engine.visibility_changed(act["visible"])
        elif t == "surface_changed":
            self.screen = pygame.display.get_surface()
            self.engine.surface_changed(self.screen)
        elif t == "toggle_fullscreen":
            config.FULLSCREEN ^= True
            self.engine.surface_destroyed()
            self.screen = self._open_display()
            self.engine.surface_created(self.screen)
            self.engine.visibility_changed(True)
        return True

    def run(self):
        self.engine.surface_created(self.screen)
        self.engine.visibility_changed(True)

        running = True
        while running:
            wait = self.engine.looper.ms_until_next()
            wait = config.IDLE_WAIT_MS if wait is None else min(wait, config.IDLE_WAIT_MS)
            # a zero timeout would block forever
            first = pygame.event.wait(max(1, int(wait)))
            if first.type != NOEVENT:
                EventManager.handle(first)
            for e in pygame.event.get():
                EventManager.handle(e)

            while running and (act := EventManager.poll()):
                running = self._dispatch(act)

            if running:
                self.engine.looper.run_due()

        self.engine.surface_destroyed()
        pygame.quit()


if __name__ == "__main__":
    WallpaperApp().run()
