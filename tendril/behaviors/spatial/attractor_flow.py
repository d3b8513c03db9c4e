"""Attractor flow: streamlines drawn toward exterior attractors."""

from __future__ import annotations

from tendril.engine.context import NearbyContext
from tendril.engine.noise import Randomness
from tendril.engine.registry import Category, ParamSpec, behavior
from tendril.engine.strokes import collect
from tendril.growth.flow import run_attractor_flow


@behavior(
    name="attractorFlow",
    category=Category.SPATIAL,
    description="Flow lines pulled by attractors, bent along strokes, pushed off dense areas",
    params=[
        ParamSpec("nearX", default=0.0),
        ParamSpec("nearY", default=0.0),
        ParamSpec("radius", default=300.0, min=50, max=2000),
        ParamSpec("lines", kind="integer", default=20, min=3, max=80),
        ParamSpec("steps", kind="integer", default=40, min=10, max=150),
        ParamSpec("color", kind="string", description="Omit to inherit nearby stroke colors"),
        ParamSpec("brushSize", min=1, max=15, description="Omit to inherit nearby brush sizes"),
    ],
)
def attractor_flow(
    ctx: NearbyContext,
    near_x: float = 0.0,
    near_y: float = 0.0,
    radius: float = 300.0,
    lines: int = 20,
    steps: int = 40,
    color: str | None = None,
    brush_size: float | None = None,
    seed: int | None = None,
):
    noise = Randomness(seed).noise
    return collect(
        run_attractor_flow(ctx, near_x, near_y, radius, lines, steps, color, brush_size, noise)
    )
