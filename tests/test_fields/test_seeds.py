"""Tests for endpoint classification and growth seeds."""

from __future__ import annotations

import math

from tendril.fields.regions import collect_surface_shapes
from tendril.fields.sdf import build_surface_field
from tendril.fields.seeds import build_attractors, build_surface_seeds, classify_endpoints
from tests.conftest import LINE, LONG_LINE, make_ctx, square_ctx, stroke


def test_lone_line_endpoints_are_exterior():
    ctx = make_ctx(stroke(LONG_LINE))
    classes = classify_endpoints(ctx.strokes, 60)
    assert len(classes.exterior) == 2
    assert classes.interior == []
    start = min(classes.exterior, key=lambda ep: ep.x)
    assert start.growth_dir[0] < 0


def test_crowded_endpoint_is_interior():
    spokes = [
        stroke([[0, 0], [40 * math.cos(a), 40 * math.sin(a)]])
        for a in [(i + 0.5) * math.pi / 4 for i in range(8)]
    ]
    classes = classify_endpoints(make_ctx(*spokes).strokes, 60)
    assert any(ep.x == 0 and ep.y == 0 for ep in classes.interior)


def test_attractors_ranked_and_capped():
    ctx = make_ctx(stroke(LONG_LINE))
    attrs = build_attractors(ctx.strokes, 1)
    assert len(attrs) == 1
    assert 0 < attrs[0].strength <= 1


def test_surface_seeds_are_spaced_and_styled():
    ctx = square_ctx()
    shapes = collect_surface_shapes(ctx)
    surface = build_surface_field([s.points for s in ctx.strokes], (-100, -100, 200, 200), shapes)
    seeds = build_surface_seeds(ctx, 50, 50, 150, shapes, surface, max_seeds=10)
    assert 0 < len(seeds) <= 10
    min_dist = max(18, min(64, 150 * 0.12))
    for i, a in enumerate(seeds):
        assert a.color == "#aa3300"
        assert math.isclose(math.hypot(*a.dir), 1.0, abs_tol=1e-6)
        for b in seeds[i + 1 :]:
            assert math.hypot(a.x - b.x, a.y - b.y) >= min_dist


def test_seeds_empty_context(empty_ctx):
    surface = build_surface_field([], (0, 0, 10, 10))
    assert build_surface_seeds(empty_ctx, 0, 0, 50, [], surface) == []


def test_seed_overrides():
    ctx = make_ctx(stroke(LINE))
    surface = build_surface_field([s.points for s in ctx.strokes], (-50, -50, 50, 50))
    seeds = build_surface_seeds(ctx, 5, 0, 40, [], surface, color_override="#00ff00", brush_override=3)
    assert seeds
    assert all(s.color == "#00ff00" and s.brush_size == 3 for s in seeds)
