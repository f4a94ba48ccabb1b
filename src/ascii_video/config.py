"""Ramps and render settings shared by every pipeline stage."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------
MIN_COLUMNS = 20
MAX_COLUMNS = 300
DEFAULT_COLUMNS = 80

# Glyph cells are roughly twice as tall as they are wide.
CELL_ASPECT_CORRECTION = 0.5

# ITU-R BT.601 weights, ordered (R, G, B).
LUMA_WEIGHTS: Tuple[float, float, float] = (0.299, 0.587, 0.114)

# Widely compatible encoders first, stricter H.264 variants later.
DEFAULT_CODECS: Tuple[str, ...] = ("mp4v", "avc1", "H264")

RENDERERS: Tuple[str, ...] = ("hershey", "pygame")


@dataclass(frozen=True)
class CharacterRamp:
    """Glyphs ordered from sparsest (index 0) to densest."""

    name: str
    characters: str

    def __post_init__(self) -> None:
        if len(self.characters) < 2:
            raise ValueError(f"Ramp '{self.name}' needs at least two glyphs.")

    def __len__(self) -> int:
        return len(self.characters)

    def __getitem__(self, index: int) -> str:
        return self.characters[index]

    @classmethod
    def from_string(cls, characters: str, name: str = "Custom") -> CharacterRamp:
        return cls(name, characters)


RAMPS: Sequence[CharacterRamp] = (
    CharacterRamp(
        "Detailed",
        " .'`^\",:;Il!i><~+_-?][}{1)(|\\/tfjrxnuvczXYUJCLQ0OZmwqpdbkhao*#MW&8%B@$",
    ),
    CharacterRamp("Classic", " .:-=+*#%@"),
    CharacterRamp("Serif Whisper", " `.,:;Il!|LCO0QB%8&WM#@"),
    CharacterRamp("Simple", " .'-ox#X"),
)

DEFAULT_RAMP = RAMPS[0]


def find_ramp(name: str) -> CharacterRamp:
    for ramp in RAMPS:
        if ramp.name.lower() == name.lower():
            return ramp
    names = ", ".join(ramp.name for ramp in RAMPS)
    raise KeyError(f"Unknown ramp '{name}' (choose from: {names}).")


@dataclass(frozen=True)
class RenderConfig:
    """Everything the pipeline needs besides the input, output and width."""

    ramp: CharacterRamp = DEFAULT_RAMP
    cell_width: int = 6
    cell_height: int = 12
    font_scale: float = 0.3
    vertical_trim: int = 2
    thickness: int = 1
    luma_weights: Tuple[float, float, float] = LUMA_WEIGHTS
    codecs: Tuple[str, ...] = DEFAULT_CODECS
    progress_interval: int = 30
    renderer: str = "hershey"

    def __post_init__(self) -> None:
        if self.cell_width <= 0 or self.cell_height <= 0:
            raise ValueError("Cell dimensions must be greater than zero.")
        if self.font_scale <= 0:
            raise ValueError("Font scale must be greater than zero.")
        if self.thickness <= 0:
            raise ValueError("Thickness must be greater than zero.")
        if len(self.luma_weights) != 3:
            raise ValueError("Luminance weights need exactly three components (R, G, B).")
        if not self.codecs:
            raise ValueError("At least one codec candidate is required.")
        if any(len(codec) != 4 for codec in self.codecs):
            raise ValueError("Codec identifiers must be four-character codes.")
        if self.progress_interval <= 0:
            raise ValueError("Progress interval must be greater than zero.")
        if self.renderer not in RENDERERS:
            raise ValueError(f"Unknown renderer '{self.renderer}'.")

    def output_size(self, columns: int, rows: int) -> Tuple[int, int]:
        """Pixel (width, height) of a canvas holding ``columns`` x ``rows`` cells."""
        return columns * self.cell_width, rows * self.cell_height


DEFAULT_CONFIG = RenderConfig()
