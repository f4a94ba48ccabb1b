"""Map pixel colours to luminance and luminance to ramp glyphs."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, List, Sequence, Tuple

import numpy as np

from .config import LUMA_WEIGHTS, CharacterRamp

Color = Tuple[int, int, int]

# Float error in the weighted sum can leave pure white just under 1.0.
QUANTIZE_EPSILON = 1e-9


def clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def luminance(bgr: Sequence[float], weights: Sequence[float] = LUMA_WEIGHTS) -> float:
    """Relative luminance of one pixel given in OpenCV's BGR order.

    The result is nominally in [0, 1] but is not clamped; malformed input
    (negative or >255 channels) can land outside that range.
    """
    blue, green, red = (float(channel) for channel in bgr[:3])
    w_red, w_green, w_blue = weights
    return (w_red * red + w_green * green + w_blue * blue) / 255.0


def glyph_index(brightness: float, ramp_length: int) -> int:
    if ramp_length < 1:
        raise ValueError("Ramp length must be positive.")
    if math.isnan(brightness):
        return 0
    index = math.floor(clamp(brightness) * (ramp_length - 1) + QUANTIZE_EPSILON)
    return max(0, min(ramp_length - 1, index))


def glyph_for(bgr: Sequence[float], ramp: CharacterRamp,
              weights: Sequence[float] = LUMA_WEIGHTS) -> str:
    return ramp[glyph_index(luminance(bgr, weights), len(ramp))]


def describe_ramp(ramp: CharacterRamp) -> List[Tuple[str, float]]:
    """Brightness at which each glyph of ``ramp`` starts being used."""
    last = len(ramp) - 1
    return [(glyph, index / last) for index, glyph in enumerate(ramp.characters)]


@dataclass(frozen=True)
class AsciiGrid:
    """One (glyph, colour) pair per cell of a downsampled frame."""

    ramp: CharacterRamp
    indices: np.ndarray  # (rows, cols) ramp indices
    colors: np.ndarray  # (rows, cols, 3) uint8, BGR
    brightness: np.ndarray  # (rows, cols) clamped luminance

    @property
    def width(self) -> int:
        return int(self.indices.shape[1])

    @property
    def height(self) -> int:
        return int(self.indices.shape[0])

    def glyph_at(self, x: int, y: int) -> str:
        return self.ramp[int(self.indices[y, x])]

    def color_at(self, x: int, y: int) -> Color:
        blue, green, red = (int(c) for c in self.colors[y, x])
        return blue, green, red

    def lines(self) -> List[str]:
        chars = self.ramp.characters
        return ["".join(chars[idx] for idx in row) for row in self.indices]

    def cells(self) -> Iterator[Tuple[int, int, str, Color]]:
        chars = self.ramp.characters
        for y, row in enumerate(self.indices):
            for x, idx in enumerate(row):
                yield x, y, chars[idx], self.color_at(x, y)


def brightness_map(frame: np.ndarray, weights: Sequence[float] = LUMA_WEIGHTS) -> np.ndarray:
    pixels = frame.astype(np.float64)
    w_red, w_green, w_blue = weights
    values = (w_red * pixels[..., 2] + w_green * pixels[..., 1] + w_blue * pixels[..., 0]) / 255.0
    return np.clip(np.nan_to_num(values, nan=0.0), 0.0, 1.0)


def map_frame(
    frame: np.ndarray,
    ramp: CharacterRamp,
    weights: Sequence[float] = LUMA_WEIGHTS,
) -> AsciiGrid:
    """Vectorised :func:`glyph_index` over every pixel of a downsampled frame."""
    if frame.ndim != 3 or frame.shape[2] < 3:
        raise ValueError("Expected a (rows, cols, 3) colour frame.")

    brightness = brightness_map(frame, weights)
    num_chars = len(ramp)
    scaled = np.floor(brightness * (num_chars - 1) + QUANTIZE_EPSILON)
    indices = np.clip(scaled.astype(int), 0, num_chars - 1)
    colors = np.clip(frame[..., :3], 0, 255).astype(np.uint8)
    return AsciiGrid(ramp=ramp, indices=indices, colors=colors, brightness=brightness)
