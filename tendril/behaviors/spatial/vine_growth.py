"""Vine growth: self-avoiding vines from exterior endpoints or into closed faces."""

from __future__ import annotations

from tendril.engine.context import NearbyContext
from tendril.engine.noise import Randomness
from tendril.engine.registry import Category, ParamSpec, behavior
from tendril.engine.strokes import collect
from tendril.growth.vines import run_vine_growth


@behavior(
    name="vineGrowth",
    category=Category.SPATIAL,
    description="Branching vines that follow edges, avoid each other and drift in color",
    params=[
        ParamSpec("nearX", default=0.0),
        ParamSpec("nearY", default=0.0),
        ParamSpec("radius", default=300.0, min=50, max=2000),
        ParamSpec("maxBranches", kind="integer", default=200, min=5, max=2000),
        ParamSpec("stepLen", default=8.0, min=3, max=30),
        ParamSpec("branchProb", default=0.08, min=0.01, max=0.3),
        ParamSpec("mode", kind="enum", default="grow", options=("grow", "fill")),
        ParamSpec("driftRange", default=0.4, min=0, max=1),
    ],
)
def vine_growth(
    ctx: NearbyContext,
    near_x: float = 0.0,
    near_y: float = 0.0,
    radius: float = 300.0,
    max_branches: int = 200,
    step_len: float = 8.0,
    branch_prob: float = 0.08,
    mode: str = "grow",
    drift_range: float = 0.4,
    seed: int | None = None,
):
    noise = Randomness(seed).noise
    return collect(
        run_vine_growth(
            ctx, near_x, near_y, radius, max_branches, step_len, branch_prob, mode, drift_range, noise
        )
    )
