#!/usr/bin/env python3
"""
make_banners.py

Helper to generate placeholder shift banners:
  • One <name>.png per look in palette.LOOKS, so every shift/setting
    combination has an image to draw
  • Swallow-tailed pennant: background field, a secondary stripe down the
    middle, tertiary trim along both edges
  • Prompts for banner height and output folder
"""

import os
import sys

import numpy as np
import pygame

import config
from palette import LOOKS, ShiftLook

ASPECT = 0.5       # width / height
NOTCH  = 0.18      # swallow-tail depth, fraction of height
TRIM   = 0.06      # edge trim width, fraction of width
STRIPE = 0.22      # centre stripe width, fraction of width


def prompt(text, default):
    resp = input(f"{text} [{default}]: ").strip()
    return resp or default


def generate_banner(look: ShiftLook, h: int) -> np.ndarray:
    """RGBA pennant for one look, shape (h, w, 4)."""
    w = max(4, int(h * ASPECT))
    img = np.zeros((h, w, 4), np.uint8)
    img[..., :3] = look.background
    img[..., 3]  = 255

    # 1) centre stripe
    half = int(w * STRIPE / 2)
    img[:, w // 2 - half:w // 2 + half, :3] = look.secondary

    # 2) edge trim
    trim = max(1, int(w * TRIM))
    img[:, :trim, :3]  = look.tertiary
    img[:, -trim:, :3] = look.tertiary

    # 3) swallow-tail cut: deepest in the middle, nothing at the edges
    ys, xs = np.mgrid[0:h, 0:w]
    dist   = np.abs(xs - (w - 1) / 2) / ((w - 1) / 2)
    cut    = ys > (h - 1) - NOTCH * h * (1.0 - dist)
    img[cut, 3] = 0

    return img


def save_banner(img: np.ndarray, path: str) -> None:
    h, w = img.shape[:2]
    surf = pygame.image.frombuffer(np.ascontiguousarray(img).tobytes(), (w, h), "RGBA")
    pygame.image.save(surf, path)


def main():
    print("=== Placeholder Banner Generator ===\n")

    h_str = prompt("Banner height in pixels", "1024")
    try:
        h = int(h_str)
    except ValueError:
        print("Invalid height.")
        sys.exit(1)

    folder = prompt("Target folder (will be created)", config.ASSETS_PATH)
    os.makedirs(folder, exist_ok=True)

    for name, look in LOOKS.items():
        path = os.path.join(folder, f"{name}.png")
        save_banner(generate_banner(look, h), path)
        print(f"  {name:<20} → {path}")

    print(f"\nDone! {len(LOOKS)} banners in {folder}")


if __name__ == "__main__":
    main()
