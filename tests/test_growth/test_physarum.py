"""Tests for the agent / pheromone simulator."""

from __future__ import annotations

from tendril.engine.config import PhysarumConfig
from tendril.engine.context import square_bounds
from tendril.engine.noise import ValueNoise
from tendril.engine.strokes import collect
from tendril.growth.physarum import PheromoneGrid, run_physarum
from tests.conftest import square_ctx


def _run(seed=3, **kw):
    params = dict(agents=6, steps=20, trail_width=2.0, color=None)
    params.update(kw)
    return collect(run_physarum(square_ctx(), 50, 50, 120, noise=ValueNoise(seed), **params))


def test_empty_context_yields_nothing(empty_ctx):
    assert run_physarum(empty_ctx, 0, 0, 100, 10, 5, 2.0, None, ValueNoise(0)) == []


def test_one_chunk_per_short_trail():
    strokes = _run()
    assert len(strokes) == 6
    assert all(len(s.points) == 21 for s in strokes)
    assert all(s.brush.pressure_style == "taper" for s in strokes)


def test_long_trails_are_chunked():
    strokes = _run(agents=2, steps=50, config=PhysarumConfig(chunk_points=20))
    assert len(strokes) == 2 * 3
    assert all(len(s.points) <= 21 for s in strokes)


def test_color_override():
    assert {s.brush.color for s in _run(color="#00ff00")} == {"#00ff00"}


def test_same_seed_same_output():
    a = [s.model_dump() for s in _run(seed=9)]
    b = [s.model_dump() for s in _run(seed=9)]
    assert a == b


def test_agents_stay_near_the_center():
    limit = 120 * PhysarumConfig().kill_radius + 1
    for s in _run(steps=40):
        for p in s.points:
            assert abs(p.x - 50) <= limit + 20
            assert abs(p.y - 50) <= limit + 20


def test_pheromone_deposit_and_evaporate():
    grid = PheromoneGrid(square_bounds(0, 0, 50), 10)
    grid.deposit(0, 0, 1.0)
    assert grid.sample(0, 0) == 1.0
    assert 0 < grid.sample(10, 0) < 1.0
    assert grid.sample(500, 0) == 0.0
    grid.evaporate(0.5)
    assert grid.sample(0, 0) == 0.5
