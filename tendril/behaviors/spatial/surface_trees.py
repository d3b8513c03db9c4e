"""Surface trees: the fractal grower under its surface-seeded name."""

from __future__ import annotations

from tendril.behaviors.spatial.attractor_branch import BRANCH_PARAMS, attractor_branch
from tendril.engine.context import NearbyContext
from tendril.engine.registry import Category, behavior


@behavior(
    name="surfaceTrees",
    category=Category.SPATIAL,
    description="Fractal trees rooted along region surfaces (same as attractorBranch)",
    params=list(BRANCH_PARAMS),
)
def surface_trees(
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
    return attractor_branch(ctx, near_x, near_y, radius, length, generations, color, brush_size, seed)
