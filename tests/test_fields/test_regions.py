"""Tests for closed region extraction."""

from __future__ import annotations

import pytest

from tendril.fields.regions import (
    collect_surface_shapes,
    detect_closed_shapes,
    extract_planar_faces,
    shape_from_ring,
)
from tests.conftest import LINE, OPEN_SQUARE, make_ctx, square_ctx, stroke


def _hash_ctx():
    return make_ctx(
        stroke([[30, 0], [30, 100]], id="v1"),
        stroke([[70, 0], [70, 100]], id="v2"),
        stroke([[0, 30], [100, 30]], id="h1"),
        stroke([[0, 70], [100, 70]], id="h2"),
    )


def test_closed_stroke_is_a_face():
    shapes = collect_surface_shapes(square_ctx())
    assert len(shapes) == 1
    assert shapes[0].area == pytest.approx(10000)
    assert shapes[0].stroke_ids == ["sq"]
    assert shapes[0].centroid == pytest.approx((50, 50))


def test_crossing_strokes_enclose_a_face():
    ctx = _hash_ctx()
    faces = extract_planar_faces(ctx.strokes)
    assert len(faces) == 1
    assert faces[0].area == pytest.approx(1600)
    assert sorted(faces[0].stroke_ids) == ["h1", "h2", "v1", "v2"]


def test_open_stroke_encloses_nothing():
    ctx = make_ctx(stroke(OPEN_SQUARE, id="open"))
    assert collect_surface_shapes(ctx) == []


def test_nearly_closed_stroke_is_closed():
    ring = [[0, 0], [100, 0], [100, 100], [0, 100], [0, 6]]
    shapes = collect_surface_shapes(make_ctx(stroke(ring)))
    assert len(shapes) == 1


def test_topology_closed_strokes():
    ctx = make_ctx(stroke(OPEN_SQUARE, id="open"), topology={"closedStrokes": ["open", "missing"]})
    shapes = detect_closed_shapes(ctx)
    assert len(shapes) == 1
    assert shapes[0].area == pytest.approx(10000)
    assert len(shapes[0].closing_segments) == 1


def test_topology_loops_chain_members():
    ctx = make_ctx(
        stroke([[0, 0], [100, 0], [100, 100]], id="a"),
        stroke([[0, 0], [0, 100], [100, 100]], id="b"),
        topology={"loops": [["a", "b"], ["a", "nope"]]},
    )
    shapes = detect_closed_shapes(ctx)
    assert len(shapes) == 1
    assert shapes[0].area == pytest.approx(10000)
    assert shapes[0].stroke_ids == ["a", "b"]


def test_malformed_topology_is_ignored():
    ctx = make_ctx(stroke(LINE), topology={"closedStrokes": "sq", "loops": 4})
    assert detect_closed_shapes(ctx) == []


def test_min_area_and_limit():
    ctx = make_ctx(
        stroke([[0, 0], [2, 0], [2, 2], [0, 2], [0, 0]]),
        stroke([[10, 10], [60, 10], [60, 60], [10, 60], [10, 10]]),
        stroke([[100, 100], [200, 100], [200, 200], [100, 200], [100, 100]]),
    )
    shapes = collect_surface_shapes(ctx)
    assert [round(s.area) for s in shapes] == [10000, 2500]
    assert len(collect_surface_shapes(ctx, max_shapes=1)) == 1


def test_bounds_filter_faces():
    ctx = make_ctx(stroke([[500, 500], [600, 500], [600, 600], [500, 600], [500, 500]]))
    assert collect_surface_shapes(ctx, bounds=(0, 0, 100, 100)) == []


def test_shape_contains():
    shape = shape_from_ring(OPEN_SQUARE, ["x"])
    assert shape.contains(50, 50)
    assert not shape.contains(150, 50)
    assert shape_from_ring([[0, 0], [1, 1]]) is None
