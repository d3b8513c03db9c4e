"""Tests for color and math helpers."""

from __future__ import annotations

from tendril.utils.color import darken, hsl_to_hex, lerp_color, normalize_hex, rgb_to_hsl
from tendril.utils.math_helpers import apply_easing, clamp


def test_normalize_hex_forms():
    assert normalize_hex("#ABC") == "#aabbcc"
    assert normalize_hex(" #FF0000 ") == "#ff0000"
    assert normalize_hex("red") == "#ffffff"
    assert normalize_hex(None, "#000000") == "#000000"


def test_lerp_color_midpoint():
    assert lerp_color("#000000", "#ffffff", 0.5) == "#808080"
    assert lerp_color("#102030", "#405060", 0.0) == "#102030"


def test_darken():
    assert darken("#ffffff", 0.5) == "#808080"
    assert darken("#ffffff", 1.0) == "#000000"


def test_hsl_round_trip_primary():
    h, s, lum = rgb_to_hsl(255, 0, 0)
    assert round(h) == 0 and round(s) == 100 and round(lum) == 50
    assert hsl_to_hex(h, s, lum) == "#ff0000"


def test_clamp_and_easing():
    assert clamp(5, 0, 1) == 1
    assert clamp(-5, 0, 1) == 0
    assert apply_easing(0.5, "ease-in") == 0.25
    assert apply_easing(0.5, "unknown") == 0.5
    assert apply_easing(1.0, "ease-in-out") == 1.0
