"""Shared test fixtures and snapshot builders."""

from __future__ import annotations

import math

import pytest

from tendril.engine.context import NearbyContext
from tendril.engine.registry import BehaviorRegistry, get_registry


# Sample geometry

LINE = [[0, 0], [10, 0]]

LONG_LINE = [[x, 0] for x in range(0, 201, 10)]

SQUARE = [[0, 0], [100, 0], [100, 100], [0, 100], [0, 0]]

OPEN_SQUARE = [[0, 0], [100, 0], [100, 100], [0, 100]]

WAVE = [[x, 20 * math.sin(x / 20)] for x in range(0, 201, 5)]

ARC = [[50 + 40 * math.cos(t / 10), 50 + 40 * math.sin(t / 10)] for t in range(0, 32)]

ROW_OF_TICKS = [[[x, 0], [x, 30]] for x in (0, 40, 80, 120)]


def stroke(points, id=None, color="#336699", size=4.0, opacity=0.9, **extra) -> dict:
    """One stroke in the wire shape."""
    data = {
        "points": [{"x": float(x), "y": float(y)} for x, y in points],
        "brush": {"color": color, "size": size, "opacity": opacity},
        **extra,
    }
    if id is not None:
        data["id"] = id
    return data


def snapshot(*strokes, palette=None, attach_points=None, topology=None) -> dict:
    data: dict = {"strokes": list(strokes)}
    if palette is not None:
        data["summary"] = {"palette": palette}
    if attach_points is not None:
        data["attachPoints"] = attach_points
    if topology is not None:
        data["topology"] = topology
    return data


def make_ctx(*strokes, **kwargs) -> NearbyContext:
    return NearbyContext.from_snapshot(snapshot(*strokes, **kwargs))


def square_ctx() -> NearbyContext:
    return make_ctx(stroke(SQUARE, id="sq", color="#aa3300"))


def last_point(s) -> tuple[float, float]:
    return (s.points[-1].x, s.points[-1].y)


@pytest.fixture(scope="session")
def registry() -> BehaviorRegistry:
    """The global registry with every behavior module imported."""
    from tendril.main import register_behaviors

    register_behaviors()
    return get_registry()


@pytest.fixture
def empty_ctx() -> NearbyContext:
    return NearbyContext()
