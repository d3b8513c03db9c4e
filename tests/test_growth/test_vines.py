"""Tests for the vine grower."""

from __future__ import annotations

import math

from tendril.config import settings
from tendril.engine.config import VineConfig
from tendril.engine.noise import ValueNoise
from tendril.engine.strokes import collect
from tendril.growth.vines import VineStats, VineTrailGrid, run_vine_growth
from tests.conftest import LONG_LINE, SQUARE, WAVE, make_ctx, square_ctx, stroke


def _run(mode="grow", seed=6, stats=None, config=None, **kw):
    params = dict(max_branches=20, step_len=6.0, branch_prob=0.1, drift_range=0.3)
    params.update(kw)
    out = run_vine_growth(
        square_ctx(), 50, 50, 150, mode=mode, noise=ValueNoise(seed), config=config, stats=stats, **params
    )
    return collect(out)


def test_empty_context_yields_nothing(empty_ctx):
    assert run_vine_growth(empty_ctx, 0, 0, 100, 10, 6.0, 0.1, "grow", 0.3, ValueNoise(0)) == []


def test_grow_mode_terminates_within_budget():
    stats = VineStats()
    cfg = VineConfig(tip_budget=40)
    strokes = _run(stats=stats, config=cfg)
    assert stats.seeds > 0
    assert stats.iterations <= 40 * (cfg.max_generation + 1)
    assert stats.seeds + stats.branches <= 20
    assert all(len(s.points) <= 41 for s in strokes)
    assert sum(stats.deaths.values()) == stats.seeds + stats.branches


def test_fill_mode_starts_on_the_boundary():
    stats = VineStats()
    strokes = _run(mode="fill", stats=stats, config=VineConfig(tip_budget=10))
    assert stats.seeds > 0
    for s in strokes:
        x, y = s.points[0].x, s.points[0].y
        assert min(abs(x), abs(x - 100), abs(y), abs(y - 100)) < 0.01


def test_deterministic():
    cfg = VineConfig(tip_budget=30)
    assert [s.model_dump() for s in _run(seed=8, config=cfg)] == [
        s.model_dump() for s in _run(seed=8, config=cfg)
    ]


def test_trail_grid_neighborhood():
    grid = VineTrailGrid(10)
    grid.add(0, 0, 1)
    grid.add(15, 0, 2)
    grid.add(200, 200, 3)
    assert len(grid) == 3
    assert sorted(owner for _, _, owner in grid.nearby(1, 1)) == [1, 2]
    assert grid.collides(1, 1, 2, 5)
    assert not grid.collides(1, 1, 1, 5)


def _sampled_trail(s, after):
    return [(p.x, p.y) for k, p in enumerate(s.points) if k > after and k % 3 == 0]


def test_tips_keep_clear_of_each_other():
    cfg = VineConfig()
    step_len = 6.0
    ctx = make_ctx(stroke(SQUARE, id="sq"), stroke(WAVE, id="w"), stroke(LONG_LINE, id="l"))
    out = collect(run_vine_growth(ctx, 100, 50, 200, 40, step_len, 0.12, "grow", 0.3, ValueNoise(11), config=cfg))
    trails = [_sampled_trail(s, cfg.collide_after_steps) for s in out]
    assert any(trails)

    limit = step_len * cfg.collision_factor * math.sqrt(0.65) - 0.02
    for i, a in enumerate(trails):
        for b in trails[i + 1 :]:
            for ax, ay in a:
                for bx, by in b:
                    assert math.hypot(ax - bx, ay - by) > limit


def test_long_trails_are_split(monkeypatch):
    monkeypatch.setattr(settings, "max_points_per_stroke", 10)
    strokes = _run(config=VineConfig(tip_budget=40))
    assert strokes
    assert all(len(s.points) <= 10 for s in strokes)
