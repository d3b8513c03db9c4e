"""Tests for morph, stitch, bloom, hatchGradient and interiorFill."""

from __future__ import annotations

import math

import pytest

from tests.conftest import LINE, LONG_LINE, make_ctx, square_ctx, stroke


def _pair():
    return make_ctx(
        stroke(LINE, id="a", color="#ff0000", size=2),
        stroke([[0, 100], [10, 100]], id="b", color="#0000ff", size=6),
    )


def _inside_square(s, tol=0.01):
    return all(-tol <= p.x <= 100 + tol and -tol <= p.y <= 100 + tol for p in s.points)


# == morph ==


def test_morph_interpolates_shape_and_style(registry):
    out = registry.run("morph", _pair(), {"source": "a", "target": "b", "steps": 3})
    assert len(out) == 3
    middle = out[1]
    assert {p.y for p in middle.points} == {50.0}
    assert middle.brush.color == "#800080"
    assert middle.brush.size == 4.0
    assert [s.points[0].y for s in out] == [25.0, 50.0, 75.0]


def test_morph_easing(registry):
    linear = registry.run("morph", _pair(), {"from": "a", "to": "b", "steps": 3})
    eased = registry.run("morph", _pair(), {"from": "a", "to": "b", "steps": 3, "easing": "ease-in"})
    assert eased[0].points[0].y < linear[0].points[0].y


def test_morph_from_zero_length_stroke(registry):
    ctx = make_ctx(stroke([[5, 5], [5, 5]], id="dot"), stroke(LINE, id="line"))
    out = registry.run("morph", ctx, {"source": "dot", "target": "line", "steps": 4})
    assert len(out) == 4


def test_morph_needs_both_ends(registry):
    assert registry.run("morph", _pair(), {"source": "a", "target": "nope"}) == []


# == stitch ==


def test_stitch_alternates_across_path(registry):
    ctx = make_ctx(stroke(LONG_LINE, id="l", size=4))
    out = registry.run("stitch", ctx, {"source": "l", "spacing": 20, "length": 10})
    assert len(out) == 11
    first, second = out[0], out[1]
    assert [(p.x, p.y) for p in first.points] == [(0.0, -5.0), (0.0, 5.0)]
    assert (second.points[0].y, second.points[1].y) == (5.0, -5.0)
    assert first.brush.size == pytest.approx(2.4)
    assert first.brush.pressure_style == "flat"


def test_stitch_without_alternation(registry):
    ctx = make_ctx(stroke(LONG_LINE, id="l"))
    out = registry.run("stitch", ctx, {"source": "l", "spacing": 50, "alternating": False})
    assert {s.points[0].y for s in out} == {-7.5}


# == bloom ==


def test_bloom_rays(registry):
    ctx = make_ctx(stroke(LINE), palette=["#123456"])
    out = registry.run("bloom", ctx, {"atX": 50, "atY": 50, "count": 8, "length": 100, "noise": 0})
    assert len(out) == 8
    for s in out:
        assert (s.points[0].x, s.points[0].y) == (50.0, 50.0)
        end = s.points[-1]
        assert math.hypot(end.x - 50, end.y - 50) == pytest.approx(100, abs=0.02)
        assert s.brush.color == "#123456"


def test_bloom_spread_limits_fan(registry):
    out = registry.run(
        "bloom", make_ctx(stroke(LINE)), {"count": 6, "spread": 90, "noise": 0, "color": "#ff0000"}
    )
    for s in out:
        end = s.points[-1]
        assert abs(math.degrees(math.atan2(end.y, end.x))) <= 45.01
        assert s.brush.color == "#ff0000"


# == hatchGradient ==


def test_hatch_gradient_fills_rectangle(registry):
    ctx = make_ctx(stroke([[500, 500], [510, 500]]))
    params = {"x": 0, "y": 0, "w": 100, "h": 100, "angle": 0, "spacingFrom": 10, "spacingTo": 10}
    out = registry.run("hatchGradient", ctx, params)
    assert len(out) == 10
    for s in out:
        assert sorted(p.x for p in s.points) == [0.0, 100.0]
        assert s.brush.opacity == 0.8
        assert s.brush.pressure_style == "flat"


def test_hatch_gradient_avoids_strokes(registry):
    ctx = make_ctx(stroke([[50, -10], [50, 110]], size=4))
    params = {"x": 0, "y": 0, "w": 100, "h": 100, "angle": 0, "spacingFrom": 10, "spacingTo": 10}
    out = registry.run("hatchGradient", ctx, params)
    assert len(out) == 20
    assert not any(40.5 < p.x < 59.5 for s in out for p in s.points)


def test_hatch_gradient_spacing_ramps(registry):
    ctx = make_ctx(stroke([[500, 500], [510, 500]]))
    params = {"x": 0, "y": 0, "w": 100, "h": 100, "angle": 0, "spacingFrom": 3, "spacingTo": 30}
    ys = sorted(s.points[0].y for s in registry.run("hatchGradient", ctx, params))
    gaps = [b - a for a, b in zip(ys, ys[1:])]
    assert gaps[0] < gaps[-1]


# == interiorFill ==


@pytest.mark.parametrize("style", ["hatch", "stipple", "wash"])
def test_interior_fill_stays_inside(registry, style):
    params = {"nearX": 50, "nearY": 50, "radius": 200, "style": style, "seed": 2}
    out = registry.run("interiorFill", square_ctx(), params)
    assert out
    assert all(_inside_square(s, tol=3) for s in out)


def test_interior_fill_hatch_clips_to_region(registry):
    out = registry.run("interiorFill", square_ctx(), {"nearX": 50, "nearY": 50, "radius": 200})
    assert all(_inside_square(s) for s in out)
    assert out[0].brush.pressure_style == "flat"


def test_interior_fill_needs_a_region(registry):
    assert registry.run("interiorFill", make_ctx(stroke(LONG_LINE)), {"nearX": 100}) == []
