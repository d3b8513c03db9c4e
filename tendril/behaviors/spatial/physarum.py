"""Physarum: slime-mold tube network between exterior edges."""

from __future__ import annotations

from tendril.engine.context import NearbyContext
from tendril.engine.noise import Randomness
from tendril.engine.registry import Category, ParamSpec, behavior
from tendril.engine.strokes import collect
from tendril.growth.physarum import run_physarum


@behavior(
    name="physarum",
    category=Category.SPATIAL,
    description="Agent/pheromone simulation whose trails link exterior edges of nearby geometry",
    params=[
        ParamSpec("nearX", default=0.0),
        ParamSpec("nearY", default=0.0),
        ParamSpec("radius", default=300.0, min=50, max=2000),
        ParamSpec("agents", kind="integer", default=30, min=5, max=100),
        ParamSpec("steps", kind="integer", default=50, min=10, max=200),
        ParamSpec("trailWidth", default=3.0, min=1, max=15),
        ParamSpec("color", kind="string", description="Omit to inherit nearby stroke colors"),
    ],
)
def physarum(
    ctx: NearbyContext,
    near_x: float = 0.0,
    near_y: float = 0.0,
    radius: float = 300.0,
    agents: int = 30,
    steps: int = 50,
    trail_width: float = 3.0,
    color: str | None = None,
    seed: int | None = None,
):
    noise = Randomness(seed).noise
    return collect(run_physarum(ctx, near_x, near_y, radius, agents, steps, trail_width, color, noise))
