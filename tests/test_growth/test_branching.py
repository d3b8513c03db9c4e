"""Tests for the fractal branch grower."""

from __future__ import annotations

from tendril.engine.config import BranchConfig
from tendril.engine.noise import ValueNoise
from tendril.engine.strokes import collect
from tendril.growth.branching import run_attractor_branch
from tests.conftest import LONG_LINE, make_ctx, square_ctx, stroke


def _run(ctx=None, seed=1, **kw):
    params = dict(length=40.0, generations=3, color=None, brush_size=None)
    params.update(kw)
    return collect(run_attractor_branch(ctx or square_ctx(), 50, 50, 150, noise=ValueNoise(seed), **params))


def test_empty_context_yields_nothing(empty_ctx):
    assert run_attractor_branch(empty_ctx, 0, 0, 100, 40, 3, None, None, ValueNoise(0)) == []


def test_grows_branches():
    strokes = _run()
    assert strokes
    assert all(len(s.points) >= 3 for s in strokes)


def test_stroke_cap_is_respected():
    strokes = _run(generations=6, config=BranchConfig(max_tree_strokes=5))
    assert 0 < len(strokes) <= 5


def test_more_generations_more_strokes():
    shallow = _run(generations=1)
    deep = _run(generations=4)
    assert len(deep) > len(shallow)


def test_overrides_apply_to_every_stroke():
    strokes = _run(color="#123456", brush_size=2.0, generations=2)
    assert {s.brush.color for s in strokes} == {"#123456"}
    assert max(s.brush.size for s in strokes) <= 2.0 * 1.16 + 1e-6


def test_deterministic():
    ctx = make_ctx(stroke(LONG_LINE, id="l"))
    a = [s.model_dump() for s in _run(ctx, seed=4)]
    b = [s.model_dump() for s in _run(ctx, seed=4)]
    assert a == b
