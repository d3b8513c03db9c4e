"""Tests for the growth-backed behaviors."""

from __future__ import annotations

import pytest

from tests.conftest import square_ctx

SMALL_RUNS = {
    "physarum": {"nearX": 50, "nearY": 50, "radius": 100, "agents": 5, "steps": 15},
    "attractorBranch": {"nearX": 50, "nearY": 50, "radius": 100, "length": 20, "generations": 2},
    "surfaceTrees": {"nearX": 50, "nearY": 50, "radius": 100, "length": 20, "generations": 2},
    "attractorFlow": {"nearX": 50, "nearY": 50, "radius": 100, "lines": 4, "steps": 15},
    "vineGrowth": {"nearX": 50, "nearY": 50, "radius": 100, "maxBranches": 8, "stepLen": 6},
}


@pytest.mark.parametrize("name", sorted(SMALL_RUNS))
def test_growth_behaviors_produce_strokes(registry, name):
    out = registry.run(name, square_ctx(), SMALL_RUNS[name])
    assert out
    assert all(len(s.points) >= 2 for s in out)


@pytest.mark.parametrize("name", sorted(SMALL_RUNS))
def test_growth_behaviors_use_default_seed(registry, name):
    a = registry.run(name, square_ctx(), SMALL_RUNS[name])
    b = registry.run(name, square_ctx(), SMALL_RUNS[name])
    assert [s.model_dump() for s in a] == [s.model_dump() for s in b]


def test_surface_trees_matches_attractor_branch(registry):
    params = {**SMALL_RUNS["attractorBranch"], "seed": 12}
    a = registry.run("attractorBranch", square_ctx(), params)
    b = registry.run("surfaceTrees", square_ctx(), params)
    assert [s.model_dump() for s in a] == [s.model_dump() for s in b]


def test_color_param_overrides_inherited_color(registry):
    params = {**SMALL_RUNS["attractorFlow"], "color": "#00ff00"}
    out = registry.run("attractorFlow", square_ctx(), params)
    assert {s.brush.color for s in out} == {"#00ff00"}


def test_vine_fill_mode(registry):
    params = {**SMALL_RUNS["vineGrowth"], "mode": "fill"}
    assert registry.run("vineGrowth", square_ctx(), params)
