"""Tests for the copy behaviors."""

from __future__ import annotations

import pytest

from tests.conftest import LONG_LINE, WAVE, make_ctx, stroke


def _ctx():
    return make_ctx(stroke(WAVE, id="w", color="#336699", size=4, opacity=0.9))


def test_parallel_counts(registry):
    assert len(registry.run("parallel", _ctx(), {"source": "w", "count": 4})) == 8
    assert len(registry.run("parallel", _ctx(), {"source": "w", "count": 4, "bothSides": False})) == 4


def test_parallel_offsets_straight_line(registry):
    ctx = make_ctx(stroke(LONG_LINE, id="l"))
    out = registry.run("parallel", ctx, {"source": "l", "count": 2, "spacing": 5, "bothSides": False})
    assert {p.y for p in out[0].points} == {5.0}
    assert {p.y for p in out[1].points} == {10.0}


def test_mirror_reflects_across_centroid(registry):
    ctx = _ctx()
    src = ctx.find("w")
    cx = src.centroid[0]
    out = registry.run("mirror", ctx, {"source": "w", "offset": 10})
    assert len(out) == 1
    for p, (x, y) in zip(out[0].points, src.points):
        assert p.x == pytest.approx(2 * (cx + 10) - x, abs=0.01)
        assert p.y == pytest.approx(y, abs=0.01)


def test_mirror_horizontal_and_color(registry):
    out = registry.run("mirror", _ctx(), {"source": "w", "axis": "horizontal", "colorShift": "#00ff00"})
    assert out[0].brush.color == "#00ff00"


def test_gradient_interpolates(registry):
    params = {"source": "w", "count": 3, "colorFrom": "#000000", "colorTo": "#ffffff", "sizeFrom": 2, "sizeTo": 6}
    out = registry.run("gradient", _ctx(), params)
    assert [s.brush.color for s in out] == ["#000000", "#808080", "#ffffff"]
    assert [s.brush.size for s in out] == [2.0, 4.0, 6.0]
    assert out[2].points[0].x == pytest.approx(24.0)


def test_gradient_inherits_source_style(registry):
    out = registry.run("gradient", _ctx(), {"source": "w", "count": 2})
    assert {s.brush.color for s in out} == {"#336699"}
    assert {s.brush.size for s in out} == {4.0}


def test_echo_fades_and_grows(registry):
    out = registry.run("echo", _ctx(), {"source": "w", "count": 3, "noise": 0})
    assert len(out) == 3
    opacities = [s.brush.opacity for s in out]
    assert opacities == sorted(opacities, reverse=True)
    spans = [max(p.x for p in s.points) - min(p.x for p in s.points) for s in out]
    assert spans == sorted(spans)


def test_echo_seeded_wobble_repeats(registry):
    params = {"source": "w", "noise": 0.5, "seed": 3}
    a = registry.run("echo", _ctx(), params)
    b = registry.run("echo", _ctx(), params)
    assert [s.model_dump() for s in a] == [s.model_dump() for s in b]


def test_cascade_shrinks_about_anchor(registry):
    ctx = make_ctx(stroke(LONG_LINE, id="l", size=10))
    out = registry.run("cascade", ctx, {"source": "l", "count": 3, "scaleEach": 0.5, "rotateEach": 0})
    assert len(out) == 3
    assert [s.points[0].x for s in out] == [100.0, 150.0, 175.0]
    assert all(s.points[-1].x == 200.0 for s in out)
    assert [s.brush.size for s in out] == [5.0, 3.0, 3.0]


def test_shadow_offsets_and_darkens(registry):
    out = registry.run("shadow", _ctx(), {"source": "w", "offsetX": 3, "offsetY": 4, "darken": 0.5, "blur": 0})
    s = out[0]
    assert (s.points[0].x, s.points[0].y) == (3.0, 4.0)
    assert s.brush.color == "#1a334c"
    assert s.brush.size == 4.0
    assert s.brush.opacity == 0.5


def test_mirror_keeps_centroid(registry):
    ctx = _ctx()
    cx = ctx.find("w").centroid[0]
    out = registry.run("mirror", ctx, {"source": "w"})
    xs = [p.x for p in out[0].points]
    assert sum(xs) / len(xs) == pytest.approx(cx, abs=0.01)
