"""Tests for the stroke tangent field."""

from __future__ import annotations

import pytest

from tendril.fields.stroke_field import build_stroke_field
from tests.conftest import LONG_LINE, make_ctx, stroke


def _ctx():
    return make_ctx(stroke(LONG_LINE, id="base", color="#112233", size=6))


def test_influence_near_a_line():
    field = build_stroke_field(_ctx())
    info = field.influence(100, 10, heading=(1, 0))
    assert info is not None
    assert info.dist == pytest.approx(10, abs=2)
    assert info.tangent[0] == pytest.approx(1.0)
    assert info.normal[1] > 0.9
    assert info.nearest.stroke.id == "base"


def test_heading_flips_tangent():
    field = build_stroke_field(_ctx())
    info = field.influence(100, 10, heading=(-1, 0))
    assert info.tangent[0] == pytest.approx(-1.0)


def test_influence_out_of_reach():
    field = build_stroke_field(_ctx())
    assert field.influence(100, 500) is None
    assert field.steer_along_stroke(100, 500, (1, 0)).info is None


def test_steer_pushes_toward_target_distance():
    field = build_stroke_field(_ctx())
    close = field.steer_along_stroke(100, 2, (1, 0), target_dist=20)
    assert close.error > 0
    assert close.y > 0


def test_style_at_uses_nearest_stroke():
    field = build_stroke_field(_ctx())
    style = field.style_at(50, 5, "#ffffff", 1, 1)
    assert (style.color, style.brush_size) == ("#112233", 6)
    far = field.style_at(50, 900, "#ffffff", 1, 1)
    assert (far.color, far.brush_size, far.opacity) == ("#ffffff", 1, 1)


def test_ignored_stroke_and_bounds():
    assert build_stroke_field(_ctx(), ignore_stroke_id="base").sample_count == 0
    assert build_stroke_field(_ctx(), bounds=(500, 500, 600, 600)).sample_count == 0
