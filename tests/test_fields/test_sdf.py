"""Tests for the signed distance field."""

from __future__ import annotations

import math

import numpy as np

from tendril.fields.regions import collect_surface_shapes
from tendril.fields.sdf import DistanceGrid, build_shape_field, build_surface_field
from tests.conftest import SQUARE, square_ctx

BOUNDS = (-50.0, -50.0, 150.0, 150.0)


def _square_field():
    ctx = square_ctx()
    shapes = collect_surface_shapes(ctx)
    return build_surface_field([s.points for s in ctx.strokes], BOUNDS, shapes, 120)


def test_sign_inside_and_outside():
    field = _square_field()
    assert field.signed_distance(50, 50) < -40
    assert field.is_inside(50, 50)
    d = field.signed_distance(120, 50)
    assert 15 < d < 25
    assert not field.is_inside(120, 50)


def test_distance_near_boundary_is_small():
    field = _square_field()
    assert abs(field.signed_distance(100, 50)) < 3


def test_normal_points_outward():
    field = _square_field()
    nx, ny = field.normal(110, 50)
    assert nx > 0.9
    tx, ty = field.tangent(110, 50)
    assert abs(tx * nx + ty * ny) < 1e-9


def test_outside_bounds_adds_distance():
    grid = DistanceGrid([np.array(SQUARE, dtype=float)], BOUNDS, 60)
    assert grid.query(300, 50) > 190


def test_empty_field_is_infinite():
    field = build_surface_field([], BOUNDS)
    assert math.isinf(field.signed_distance(0, 0))
    assert field.normal(0, 0) == (0.0, 0.0)


def test_shape_field_covers_padded_bbox():
    shape = collect_surface_shapes(square_ctx())[0]
    field = build_shape_field(shape, 20)
    assert field.distance.bounds == (-20.0, -20.0, 120.0, 120.0)
    assert field.signed_distance(50, 50) < 0
