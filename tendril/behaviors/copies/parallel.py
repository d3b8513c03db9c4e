"""Parallel: copies offset along the path normals."""

from __future__ import annotations

from tendril.behaviors.common import resolve_source
from tendril.engine.context import NearbyContext
from tendril.engine.registry import Category, ParamSpec, behavior
from tendril.engine.strokes import collect, make_stroke
from tendril.utils.geometry import normals


@behavior(
    name="parallel",
    category=Category.COPIES,
    description="Copies offset perpendicular to the path, on one or both sides",
    params=[
        ParamSpec("source", kind="string", required=True, aliases=("from",)),
        ParamSpec("count", kind="integer", default=8, min=1, max=30),
        ParamSpec("spacing", default=6.0, min=1, max=100),
        ParamSpec("colorShift", kind="string", description="Color for the copies"),
        ParamSpec("bothSides", kind="boolean", default=True),
    ],
)
def parallel(
    ctx: NearbyContext,
    source: str | None = None,
    count: int = 8,
    spacing: float = 6.0,
    color_shift: str | None = None,
    both_sides: bool = True,
    seed: int | None = None,
):
    """Emits ``count`` strokes, or ``2 * count`` with ``both_sides``."""
    src = resolve_source(ctx, source)
    if src is None:
        return []

    offsets = []
    for i in range(1, count + 1):
        offsets.append(i)
        if both_sides:
            offsets.append(-i)

    norms = normals(src.points)
    color = color_shift or src.color
    return collect([
        make_stroke(src.points + norms * spacing * k, color, src.size * 0.9, src.opacity * 0.85)
        for k in offsets
    ])
