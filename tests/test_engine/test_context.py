"""Tests for snapshot ingestion and stroke lookup."""

from __future__ import annotations

from tendril.engine.context import NearbyContext, id_aliases, normalize_stroke_id
from tests.conftest import LINE, SQUARE, make_ctx, snapshot, stroke


def test_normalize_stroke_id():
    assert normalize_stroke_id("  AbC ") == "abc"
    assert normalize_stroke_id("") is None
    assert normalize_stroke_id(None) is None


def test_id_aliases_cover_historical_formats():
    aliases = id_aliases("Layer:Stroke-7")
    assert aliases[0] == "layer:stroke-7"
    assert "stroke-7" in aliases
    assert "layer" in aliases
    assert "7" in id_aliases("007")
    assert {"12", "co-12", "co_12"} <= set(id_aliases("co12"))


def test_from_snapshot_assigns_canonical_and_synthetic_ids():
    ctx = make_ctx(stroke(LINE, id="A1"), stroke(LINE))
    assert [s.id for s in ctx.strokes] == ["a1", "stroke-1"]
    assert ctx.strokes[0].raw_id == "A1"
    assert not ctx.strokes[0].points.flags.writeable


def test_find_by_raw_alias_and_suffix():
    ctx = make_ctx(stroke(LINE, id="canvas:abc123"), stroke(SQUARE, id="other"))
    assert ctx.find("canvas:abc123").id == "canvas:abc123"
    assert ctx.find("ABC123").id == "canvas:abc123"
    assert ctx.find("c123").id == "canvas:abc123"
    assert ctx.find("missing") is None


def test_short_fuzzy_queries_do_not_match():
    ctx = make_ctx(stroke(LINE, id="abcdef"))
    assert ctx.find("ab") is None


def test_shortest_canonical_id_wins_ties():
    ctx = make_ctx(stroke(LINE, id="x:5"), stroke(LINE, id="5"))
    assert ctx.find("5").id == "5"


def test_legacy_id_fields_become_aliases():
    ctx = make_ctx(stroke(LINE, id="new-id", strokeId="old-id", meta={"id": "meta-id"}))
    assert ctx.find("old-id").id == "new-id"
    assert ctx.find("meta-id").id == "new-id"


def test_find_nearest_and_coordinate_refs():
    ctx = make_ctx(stroke(LINE, id="near"), stroke([[500, 500], [510, 500]], id="far"))
    assert ctx.find_nearest(2, 3).id == "near"
    assert ctx.find((505, 498)).id == "far"
    assert ctx.find({"x": 0, "y": 0}).id == "near"


def test_legacy_stroke_shape_is_accepted():
    data = snapshot({"path": [[0, 0], [5, 5]], "color": "#ff0000", "brushSize": 7, "opacity": 0.5})
    ctx = NearbyContext.from_snapshot(data)
    entry = ctx.strokes[0]
    assert len(entry.points) == 2
    assert entry.color == "#ff0000"
    assert entry.size == 7
    assert entry.opacity == 0.5


def test_non_finite_points_are_dropped():
    data = snapshot({"points": [{"x": 0, "y": 0}, {"x": float("nan"), "y": 1}, {"x": 3, "y": 3}]})
    ctx = NearbyContext.from_snapshot(data)
    assert len(ctx.strokes[0].points) == 2


def test_palette_color_and_empty():
    assert NearbyContext().is_empty
    assert NearbyContext().palette_color() == "#ffffff"
    ctx = make_ctx(stroke(LINE), palette=["#ABCDEF"])
    assert ctx.palette_color() == "#abcdef"
