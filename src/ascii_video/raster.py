"""Draw an ASCII grid onto a pixel canvas, one coloured glyph per cell."""

from __future__ import annotations

import os
from typing import Callable, Dict

import cv2  # type: ignore
import numpy as np

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
import pygame  # noqa: E402

from .config import RenderConfig
from .glyphs import AsciiGrid

Rasterizer = Callable[[AsciiGrid], np.ndarray]

# pygame point size per unit of Hershey font scale; 0.3 lands on ~12px glyphs.
PYGAME_POINTS_PER_SCALE = 40


def blank_canvas(grid: AsciiGrid, cell_width: int, cell_height: int) -> np.ndarray:
    return np.zeros((grid.height * cell_height, grid.width * cell_width, 3), dtype=np.uint8)


def rasterize(
    grid: AsciiGrid,
    cell_width: int,
    cell_height: int,
    font_scale: float,
    vertical_trim: int = 2,
    thickness: int = 1,
) -> np.ndarray:
    canvas = blank_canvas(grid, cell_width, cell_height)
    for x, y, glyph, color in grid.cells():
        if glyph.isspace():
            continue
        origin = (x * cell_width, (y + 1) * cell_height - vertical_trim)
        cv2.putText(
            canvas,
            glyph,
            origin,
            cv2.FONT_HERSHEY_SIMPLEX,
            font_scale,
            color,
            thickness,
            cv2.LINE_AA,
        )
    return canvas


def init_font(name: str | None, size: int) -> pygame.font.Font:
    if not pygame.font.get_init():
        pygame.font.init()
    if name:
        font = pygame.font.SysFont(name, size)
        if font is not None:
            return font
    return pygame.font.Font(None, size)


class CharSurfaceCache:
    """Cache white glyph surfaces so each cell only needs a tint and a blit."""

    def __init__(self, font: pygame.font.Font):
        self.font = font
        self.cache: Dict[str, pygame.Surface] = {}
        self.ascent = font.get_ascent()

    def get(self, char: str) -> pygame.Surface:
        surface = self.cache.get(char)
        if surface is None:
            surface = self.font.render(char, True, (255, 255, 255))
            self.cache[char] = surface
        return surface


class PygameGlyphRasterizer:
    """Font-based alternative to :func:`rasterize`; runs without a display."""

    def __init__(
        self,
        cell_width: int,
        cell_height: int,
        font_scale: float,
        vertical_trim: int = 2,
        font_name: str | None = None,
    ):
        self.cell_width = cell_width
        self.cell_height = cell_height
        self.vertical_trim = vertical_trim
        size = max(1, round(font_scale * PYGAME_POINTS_PER_SCALE))
        self.cache = CharSurfaceCache(init_font(font_name, size))

    def __call__(self, grid: AsciiGrid) -> np.ndarray:
        width = grid.width * self.cell_width
        height = grid.height * self.cell_height
        canvas = pygame.Surface((width, height))
        canvas.fill((0, 0, 0))

        for x, y, glyph, (blue, green, red) in grid.cells():
            if glyph.isspace():
                continue
            tinted = self.cache.get(glyph).copy()
            tinted.fill((red, green, blue, 255), special_flags=pygame.BLEND_RGBA_MULT)
            baseline = (y + 1) * self.cell_height - self.vertical_trim
            canvas.blit(tinted, (x * self.cell_width, baseline - self.cache.ascent))

        # surfarray is (x, y, RGB); frames are (y, x, BGR).
        rgb = pygame.surfarray.array3d(canvas).transpose(1, 0, 2)
        return np.ascontiguousarray(rgb[..., ::-1])


def make_rasterizer(config: RenderConfig) -> Rasterizer:
    if config.renderer == "hershey":
        def draw(grid: AsciiGrid) -> np.ndarray:
            return rasterize(
                grid,
                config.cell_width,
                config.cell_height,
                config.font_scale,
                config.vertical_trim,
                config.thickness,
            )
        return draw
    if config.renderer == "pygame":
        return PygameGlyphRasterizer(
            config.cell_width,
            config.cell_height,
            config.font_scale,
            config.vertical_trim,
        )
    raise ValueError(f"Unknown renderer '{config.renderer}'.")
