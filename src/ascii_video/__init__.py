"""Render videos as colour-preserving ASCII art."""

from __future__ import annotations

from .config import DEFAULT_CONFIG, DEFAULT_RAMP, RAMPS, CharacterRamp, RenderConfig
from .errors import ArgError, AsciiVideoError, EncodeError, OpenError
from .pipeline import PipelineDriver, PipelineState, PipelineStats, convert

__all__ = [
    "ArgError",
    "AsciiVideoError",
    "CharacterRamp",
    "DEFAULT_CONFIG",
    "DEFAULT_RAMP",
    "EncodeError",
    "OpenError",
    "PipelineDriver",
    "PipelineState",
    "PipelineStats",
    "RAMPS",
    "RenderConfig",
    "convert",
]

__version__ = "0.1.0"
