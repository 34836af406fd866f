# src/app/theme_skin.py
"""
Board skins — colours and panel chrome (visuals only; no logic)
- Cells: one colour per CellType (soldermask green substrate, copper, black slots)
- Overlays: frontier open/closed tints, glowing creepage path
- Right Panel: frosted glass underlay; the viewer draws text/buttons on top

Pick a skin with CREEPAGE_THEME / --theme=.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Tuple
import pygame

from src.core.types import CellType

RGB = Tuple[int, int, int]
RGBA = Tuple[int, int, int, int]


@dataclass(frozen=True)
class Theme:
    name: str
    cells: Dict[CellType, RGB]
    border: RGB
    path: RGB
    path_glow: RGBA
    open_tint: RGBA
    closed_tint: RGBA
    backdrop_top: RGB
    backdrop_bottom: RGB
    panel_fill: RGBA
    panel_shadow: RGBA
    text: RGB
    accent: RGB
    warn: RGB
    error: RGB
    ok: RGB


SOLDERMASK = Theme(
    name="soldermask",
    cells={
        CellType.INSULATOR: (6, 78, 59),
        CellType.TRACE:     (217, 119, 6),
        CellType.SLOT:      (0, 0, 0),
        CellType.SOURCE:    (59, 130, 246),
        CellType.TARGET:    (239, 68, 68),
        CellType.PATH:      (253, 224, 71),
    },
    border=(6, 95, 70),
    path=(253, 224, 71),
    path_glow=(253, 224, 71, 70),
    open_tint=(0, 150, 255, 90),
    closed_tint=(255, 0, 120, 70),
    backdrop_top=(2, 44, 34),
    backdrop_bottom=(6, 60, 46),
    panel_fill=(2, 44, 34, 200),
    panel_shadow=(0, 0, 0, 140),
    text=(209, 250, 229),
    accent=(52, 211, 153),
    warn=(234, 179, 8),
    error=(248, 113, 113),
    ok=(52, 211, 153),
)

MIDNIGHT = Theme(
    name="midnight",
    cells={
        CellType.INSULATOR: (36, 40, 48),
        CellType.TRACE:     (200, 140, 60),
        CellType.SLOT:      (8, 8, 10),
        CellType.SOURCE:    (70, 130, 180),
        CellType.TARGET:    (220, 50, 47),
        CellType.PATH:      (0, 255, 200),
    },
    border=(0, 0, 0),
    path=(0, 255, 200),
    path_glow=(0, 255, 220, 60),
    open_tint=(0, 150, 255, 110),
    closed_tint=(255, 0, 120, 90),
    backdrop_top=(24, 26, 32),
    backdrop_bottom=(36, 40, 48),
    panel_fill=(18, 20, 28, 190),
    panel_shadow=(0, 0, 0, 140),
    text=(230, 235, 240),
    accent=(255, 210, 0),
    warn=(255, 210, 0),
    error=(220, 50, 47),
    ok=(0, 255, 200),
)

THEMES: Dict[str, Theme] = {t.name: t for t in (SOLDERMASK, MIDNIGHT)}


def get_theme(name: str) -> Theme:
    return THEMES[name]


# ---------- helpers ----------
def rounded_rect(surface: pygame.Surface, rect: pygame.Rect, color, radius=16, width=0):
    pygame.draw.rect(surface, color, rect, width=width, border_radius=radius)


def glass_panel(screen: pygame.Surface, rect: pygame.Rect, theme: Theme):
    if rect.width <= 0 or rect.height <= 0:
        return
    shadow = pygame.Surface((rect.width + 18, rect.height + 18), pygame.SRCALPHA)
    rounded_rect(shadow, pygame.Rect(9, 9, rect.width, rect.height), theme.panel_shadow, radius=20)
    screen.blit(shadow, (rect.x - 9, rect.y - 9))
    card = pygame.Surface(rect.size, pygame.SRCALPHA)
    rounded_rect(card, pygame.Rect(0, 0, rect.width, rect.height), theme.panel_fill, radius=20)
    # subtle top sheen
    hi = pygame.Surface((rect.width, max(18, rect.height // 12)), pygame.SRCALPHA)
    pygame.draw.rect(hi, (255, 255, 255, 18), hi.get_rect(), border_radius=18)
    card.blit(hi, (0, 0))
    screen.blit(card, rect.topleft)


def draw_backdrop(screen: pygame.Surface, theme: Theme):
    """Vertical gradient between the theme's backdrop colours."""
    w, h = screen.get_size()
    top, bot = theme.backdrop_top, theme.backdrop_bottom
    for y in range(h):
        t = y / max(1, h - 1)
        c = (
            int(top[0] + (bot[0] - top[0]) * t),
            int(top[1] + (bot[1] - top[1]) * t),
            int(top[2] + (bot[2] - top[2]) * t),
        )
        pygame.draw.line(screen, c, (0, y), (w, y))
