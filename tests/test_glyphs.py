from __future__ import annotations

import math

import numpy as np
import pytest

from ascii_video.config import DEFAULT_RAMP, CharacterRamp
from ascii_video.glyphs import (
    clamp,
    describe_ramp,
    glyph_for,
    glyph_index,
    luminance,
    map_frame,
)


def test_luminance_uses_bt601_weights_on_bgr_pixels():
    assert luminance((0, 0, 255)) == pytest.approx(0.299)
    assert luminance((0, 255, 0)) == pytest.approx(0.587)
    assert luminance((255, 0, 0)) == pytest.approx(0.114)
    assert luminance((255, 255, 255)) == pytest.approx(1.0)
    assert luminance((0, 0, 0)) == 0.0


def test_clamp_limits_out_of_range_values():
    assert clamp(-0.5) == 0.0
    assert clamp(1.7) == 1.0
    assert clamp(0.25) == 0.25


def test_glyph_index_endpoints():
    for length in (2, 10, len(DEFAULT_RAMP)):
        assert glyph_index(0.0, length) == 0
        assert glyph_index(1.0, length) == length - 1


def test_glyph_index_is_monotonic():
    length = len(DEFAULT_RAMP)
    previous = 0
    for step in range(1001):
        index = glyph_index(step / 1000, length)
        assert index >= previous
        assert 0 <= index < length
        previous = index


def test_glyph_index_clamps_malformed_brightness():
    assert glyph_index(-3.0, 10) == 0
    assert glyph_index(42.0, 10) == 9
    assert glyph_index(math.nan, 10) == 0
    assert glyph_index(luminance((-50, -50, -50)), 10) == 0


def test_glyph_for_picks_sparsest_and_densest():
    assert glyph_for((0, 0, 0), DEFAULT_RAMP) == " "
    assert glyph_for((255, 255, 255), DEFAULT_RAMP) == "$"


def test_describe_ramp_spans_zero_to_one():
    levels = describe_ramp(CharacterRamp("Tiny", " .#"))
    assert levels == [(" ", 0.0), (".", 0.5), ("#", 1.0)]


def test_ramp_requires_two_glyphs():
    with pytest.raises(ValueError):
        CharacterRamp("Broken", "#")


def test_map_frame_matches_scalar_mapping():
    rng = np.random.default_rng(7)
    frame = rng.integers(0, 256, size=(9, 13, 3), dtype=np.uint8)
    grid = map_frame(frame, DEFAULT_RAMP)

    assert (grid.width, grid.height) == (13, 9)
    for x, y, glyph, color in grid.cells():
        assert glyph == glyph_for(frame[y, x], DEFAULT_RAMP)
        assert color == tuple(int(c) for c in frame[y, x])


def test_map_frame_does_not_mutate_input():
    frame = np.full((4, 4, 3), 128, dtype=np.uint8)
    before = frame.copy()
    grid = map_frame(frame, DEFAULT_RAMP)
    grid.colors[0, 0] = (1, 2, 3)
    np.testing.assert_array_equal(frame, before)


def test_map_frame_clamps_synthetic_out_of_range_input():
    frame = np.array([[[-100, -100, -100], [400, 400, 400]]], dtype=np.int32)
    grid = map_frame(frame, DEFAULT_RAMP)
    assert grid.brightness.min() >= 0.0
    assert grid.brightness.max() <= 1.0
    assert grid.lines() == [" $"]


def test_map_frame_is_deterministic():
    rng = np.random.default_rng(3)
    frame = rng.integers(0, 256, size=(6, 8, 3), dtype=np.uint8)
    first = map_frame(frame, DEFAULT_RAMP)
    second = map_frame(frame, DEFAULT_RAMP)
    np.testing.assert_array_equal(first.indices, second.indices)
