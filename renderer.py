from typing import Dict, Optional, Tuple

import pygame

# banner name -> (source surface id, scaled banner), all at _scaled_height
_scaled: Dict[str, Tuple[int, pygame.Surface]] = {}
_scaled_height = 0


def alpha_byte(opacity: float) -> int:
    """Clamp *opacity* to [0, 1] and scale it to 0-255."""
    return round(255 * min(1.0, max(0.0, opacity)))


def _scaled_banner(name: str, banner: pygame.Surface, height: int) -> pygame.Surface:
    global _scaled_height
    if height != _scaled_height:
        # resized; everything cached is the wrong size now
        _scaled.clear()
        _scaled_height = height

    hit = _scaled.get(name)
    if hit is not None and hit[0] == id(banner):
        return hit[1]

    bw, bh = banner.get_size()
    width = max(1, round(height * bw / bh))
    surf = pygame.transform.smoothscale(banner, (width, height))
    _scaled[name] = (id(banner), surf)
    return surf


def draw_shift(screen: pygame.Surface, look, banner: Optional[pygame.Surface],
               opacity: float) -> None:
    """
    Flood `screen` with the look's background, then the banner on top,
    stretched top-to-bottom and centred, both at `opacity`.
    """
    a = alpha_byte(opacity)
    sw, sh = screen.get_size()

    bg = pygame.Surface((sw, sh), pygame.SRCALPHA)
    bg.fill((*look.background, a))
    screen.blit(bg, (0, 0))

    if banner is None:
        return
    if banner.get_height() == 0 or sh == 0:
        return

    surf = _scaled_banner(look.banner, banner, sh)
    surf.set_alpha(a)
    x = (sw - surf.get_width()) // 2
    screen.blit(surf, (x, 0))
