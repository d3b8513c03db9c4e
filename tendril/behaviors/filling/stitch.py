"""Stitch: short marks across a path at regular spacing."""

from __future__ import annotations

from tendril.behaviors.common import resolve_source
from tendril.engine.context import NearbyContext
from tendril.engine.registry import Category, ParamSpec, behavior
from tendril.engine.strokes import collect, make_stroke
from tendril.utils.geometry import normals, path_length, resample_path


@behavior(
    name="stitch",
    category=Category.FILLING,
    description="Perpendicular stitch marks along a stroke",
    params=[
        ParamSpec("source", kind="string", required=True, aliases=("from",)),
        ParamSpec("spacing", default=8.0, min=3, max=100),
        ParamSpec("length", default=15.0, min=3, max=100),
        ParamSpec("alternating", kind="boolean", default=True),
    ],
)
def stitch(
    ctx: NearbyContext,
    source: str | None = None,
    spacing: float = 8.0,
    length: float = 15.0,
    alternating: bool = True,
    seed: int | None = None,
):
    src = resolve_source(ctx, source)
    if src is None:
        return []

    count = max(1, int(path_length(src.points) // spacing))
    path = resample_path(src.points, count + 1)
    norms = normals(path)
    half = length / 2
    size = src.size * 0.6
    opacity = src.opacity * 0.8

    out = []
    for i, (p, n) in enumerate(zip(path, norms)):
        sign = -1 if alternating and i % 2 == 1 else 1
        offset = n * half * sign
        out.append(make_stroke([p - offset, p + offset], src.color, size, opacity, "flat"))
    return collect(out)
