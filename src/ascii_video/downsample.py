"""Shrink frames down to the character grid."""

from __future__ import annotations

import math
from typing import NamedTuple

import cv2  # type: ignore
import numpy as np

from .config import CELL_ASPECT_CORRECTION


class GridSize(NamedTuple):
    columns: int
    rows: int


def grid_size(width: int, height: int, columns: int) -> GridSize:
    """Character grid for a ``width`` x ``height`` video at ``columns`` wide."""
    if width <= 0 or height <= 0:
        raise ValueError("Frame dimensions must be greater than zero.")
    if columns <= 0:
        raise ValueError("Column count must be greater than zero.")

    rows = math.floor(columns * height / width * CELL_ASPECT_CORRECTION)
    return GridSize(columns, max(1, rows))


def downsample(frame: np.ndarray, target_width: int, target_height: int) -> np.ndarray:
    if target_width <= 0 or target_height <= 0:
        raise ValueError("Target size must be greater than zero.")
    # INTER_AREA averages every source pixel under each output sample.
    return cv2.resize(frame, (target_width, target_height), interpolation=cv2.INTER_AREA)
