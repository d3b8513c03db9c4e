"""Tests for extend, branch, connect and coil."""

from __future__ import annotations

import math

import pytest

from tests.conftest import LINE, LONG_LINE, last_point, make_ctx, stroke


def _line_ctx():
    return make_ctx(stroke(LINE, id="a", color="#ff0000", size=4))


# == extend ==


def test_extend_end(registry):
    out = registry.run("extend", _line_ctx(), {"source": "a", "length": 100})
    assert len(out) == 1
    s = out[0]
    assert (s.points[0].x, s.points[0].y) == (10.0, 0.0)
    assert last_point(s) == pytest.approx((110.0, 0.0))
    assert len(s.points) == 34
    assert s.brush.color == "#ff0000"


def test_extend_start_runs_backwards(registry):
    out = registry.run("extend", _line_ctx(), {"from": "a", "endpoint": "start", "length": 50})
    assert last_point(out[0]) == pytest.approx((-50.0, 0.0))


def test_extend_curves_toward_point(registry):
    params = {"source": "a", "length": 100, "curve": 1, "curveTowardX": 60, "curveTowardY": 100}
    s = registry.run("extend", _line_ctx(), params)[0]
    assert last_point(s) == pytest.approx((110.0, 0.0))
    assert max(p.y for p in s.points) > 10


def test_extend_by_coordinate_reference(registry):
    out = registry.run("extend", _line_ctx(), {"source": "9,1", "length": 20})
    assert last_point(out[0]) == pytest.approx((30.0, 0.0))


def test_extend_unknown_source(registry):
    assert registry.run("extend", _line_ctx(), {"source": "zzz"}) == []


# == branch ==


def test_branch_fans_from_endpoint(registry):
    out = registry.run("branch", _line_ctx(), {"source": "a", "count": 3, "angle": 45, "length": 100})
    assert len(out) == 3
    assert all((s.points[0].x, s.points[0].y) == (10.0, 0.0) for s in out)
    assert all(s.brush.size == pytest.approx(3.2) for s in out)
    ys = sorted(last_point(s)[1] for s in out)
    assert ys == pytest.approx([-100 * math.sqrt(0.5), 0.0, 100 * math.sqrt(0.5)], abs=0.02)


def test_branch_count_is_capped(registry):
    out = registry.run("branch", _line_ctx(), {"source": "a", "count": 10})
    assert len(out) == 5


def test_branch_single_fork(registry):
    out = registry.run("branch", _line_ctx(), {"source": "a", "count": 1, "angle": 90, "length": 50, "taper": False})
    assert last_point(out[0]) == pytest.approx((10.0, 50.0), abs=0.02)
    assert out[0].brush.pressure_style == "default"


# == connect ==


def _two_strokes(**kw):
    return make_ctx(
        stroke(LINE, id="a", color="#ff0000", size=4),
        stroke([[30, 0], [40, 0]], id="b", color="#0000ff", size=8),
        **kw,
    )


def test_connect_attach_points_prefers_other_stroke(registry):
    ctx = _two_strokes(
        attach_points=[
            {"x": 0, "y": 0, "strokeId": "a"},
            {"x": 5, "y": 0, "strokeId": "a"},
            {"x": 50, "y": 0, "strokeId": "b"},
        ]
    )
    out = registry.run("connect", ctx, {"nearX": 0, "nearY": 0})
    assert len(out) == 1
    s = out[0]
    assert (s.points[0].x, s.points[0].y) == (0.0, 0.0)
    assert last_point(s) == (50.0, 0.0)
    assert s.brush.color == "#800080"
    assert s.brush.size == 6.0


def test_connect_match_style(registry):
    ctx = _two_strokes(attach_points=[{"x": 0, "y": 0, "strokeId": "a"}, {"x": 50, "y": 0, "strokeId": "b"}])
    s = registry.run("connect", ctx, {"style": "match-b"})[0]
    assert s.brush.color == "#0000ff"
    assert s.brush.size == 8.0


def test_connect_attach_points_outside_radius_are_ignored(registry):
    ctx = _two_strokes(attach_points=[{"x": 900, "y": 0}, {"x": 950, "y": 0}])
    s = registry.run("connect", ctx, {"radius": 100})[0]
    assert (s.points[0].x, s.points[0].y) == (10.0, 0.0)


def test_connect_falls_back_to_stroke_ends(registry):
    s = registry.run("connect", _two_strokes(), {"curve": 0})[0]
    assert (s.points[0].x, s.points[0].y) == (10.0, 0.0)
    assert last_point(s) == (30.0, 0.0)
    assert all(abs(p.y) < 1e-9 for p in s.points)


def test_connect_needs_two_strokes(registry):
    assert registry.run("connect", _line_ctx(), {}) == []


# == coil ==


def test_coil_wraps_the_source(registry):
    ctx = make_ctx(stroke(LONG_LINE, id="l", size=4))
    out = registry.run("coil", ctx, {"source": "l", "loops": 3, "radius": 10, "seed": 1})
    assert len(out) == 1
    s = out[0]
    assert len(s.points) == 156
    assert s.brush.size == pytest.approx(2.48)
    assert s.brush.pressure_style == "taper"
    assert max(abs(p.y) for p in s.points) < 20
    assert max(p.y for p in s.points) > 1


def test_coil_is_deterministic(registry):
    ctx = make_ctx(stroke(LONG_LINE, id="l"))
    params = {"source": "l", "seed": 5}
    a = registry.run("coil", ctx, params)
    b = registry.run("coil", ctx, params)
    assert [s.model_dump() for s in a] == [s.model_dump() for s in b]
