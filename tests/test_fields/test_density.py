"""Tests for the occupancy grid and the spatial hash."""

from __future__ import annotations

import numpy as np

from tendril.fields.density import build_density_map
from tendril.fields.spatial_hash import SpatialHash
from tests.conftest import LONG_LINE


def test_density_peaks_on_strokes():
    dm = build_density_map([np.array(LONG_LINE, dtype=float)], (0, -100, 200, 100), 20)
    assert dm.grid.max() == 1.0
    assert dm.get(100, 1) > 0
    assert dm.get(100, 80) == 0
    assert dm.get(1000, 0) == 0
    assert dm.get(float("nan"), 0) == 0


def test_density_without_strokes():
    dm = build_density_map([], (0, 0, 100, 100))
    assert dm.get(50, 50) == 0


def test_spatial_hash_within():
    grid: SpatialHash[str] = SpatialHash(10)
    grid.insert(0, 0, "a")
    grid.insert(5, 5, "b")
    grid.insert(100, 100, "c")
    assert len(grid) == 3
    assert sorted(item for _, _, item in grid.within(0, 0, 10)) == ["a", "b"]
    assert grid.any_within(0, 0, 3, exclude="b")
    assert not grid.any_within(0, 0, 3, exclude="a")
    assert list(grid.within(50, 50, 5)) == []
