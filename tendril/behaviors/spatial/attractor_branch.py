"""Attractor branch: fractal trees grown from surface seeds."""

from __future__ import annotations

from tendril.engine.context import NearbyContext
from tendril.engine.noise import Randomness
from tendril.engine.registry import Category, ParamSpec, behavior
from tendril.engine.strokes import collect
from tendril.growth.branching import run_attractor_branch

BRANCH_PARAMS = [
    ParamSpec("nearX", default=0.0),
    ParamSpec("nearY", default=0.0),
    ParamSpec("radius", default=200.0, min=50, max=1000),
    ParamSpec("length", default=30.0, min=5, max=200),
    ParamSpec("generations", kind="integer", default=3, min=1, max=6),
    ParamSpec("color", kind="string", description="Omit to inherit nearby stroke colors"),
    ParamSpec("brushSize", min=1, max=15, description="Omit to inherit nearby brush sizes"),
]


@behavior(
    name="attractorBranch",
    category=Category.SPATIAL,
    description="Recursive branching trees grown outward from exterior endpoints and region edges",
    params=BRANCH_PARAMS,
)
def attractor_branch(
    ctx: NearbyContext,
    near_x: float = 0.0,
    near_y: float = 0.0,
    radius: float = 200.0,
    length: float = 30.0,
    generations: int = 3,
    color: str | None = None,
    brush_size: float | None = None,
    seed: int | None = None,
):
    noise = Randomness(seed).noise
    return collect(
        run_attractor_branch(ctx, near_x, near_y, radius, length, generations, color, brush_size, noise)
    )
