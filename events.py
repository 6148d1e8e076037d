#!/usr/bin/env python3
"""
events.py  – central hub

• Translates raw Pygame events to high-level action dicts.
• Exposes a thread-safe queue so *any* thread can inject the same actions;
  the Omega poller's worker uses it to ask for a redraw.
"""

from __future__ import annotations
import queue
from pygame.locals import *

Action = dict      # alias for readability


class EventManager:
    _fifo: "queue.Queue[Action]" = queue.Queue()      # global, thread-safe

    # ── SDL / keyboard path ────────────────────────────────────────────
    @classmethod
    def handle(cls, event) -> None:
        """Translate one Pygame event → action and enqueue it."""
        act = cls._translate_pygame(event)
        if act:
            cls._fifo.put(act)

    # ── external / programmatic path ───────────────────────────────────
    @classmethod
    def post(cls, action: Action) -> None:
        """
        Any thread may call this to inject an already-formed action dict, e.g.:
            EventManager.post({"type": "redraw"})
        """
        cls._fifo.put(action)

    @classmethod
    def request_redraw(cls) -> None:
        cls.post({"type": "redraw"})

    # ── main-loop consumer ─────────────────────────────────────────────
    @classmethod
    def poll(cls) -> Action | None:
        """Return next queued action or None (non-blocking)."""
        try:
            return cls._fifo.get_nowait()
        except queue.Empty:
            return None

    @classmethod
    def clear(cls) -> None:
        while cls.poll() is not None:
            pass

    # ── internal translator ───────────────────────────────────────────
    @staticmethod
    def _translate_pygame(event) -> Action | None:
        if event.type == QUIT:
            return {"type": "quit"}

        if event.type == KEYDOWN:
            if event.key in (K_ESCAPE, K_q):
                return {"type": "quit"}
            if event.key == K_f:
                return {"type": "toggle_fullscreen"}

        if event.type in (WINDOWHIDDEN, WINDOWMINIMIZED):
            return {"type": "visibility", "visible": False}
        if event.type in (WINDOWSHOWN, WINDOWRESTORED):
            return {"type": "visibility", "visible": True}
        if event.type == WINDOWSIZECHANGED:
            return {"type": "surface_changed", "size": (event.x, event.y)}

        return None
