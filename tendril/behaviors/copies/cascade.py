"""Cascade: repeatedly shrunk and rotated copies fanning from an anchor."""

from __future__ import annotations

import math

from tendril.behaviors.common import resolve_source
from tendril.engine.context import NearbyContext
from tendril.engine.registry import Category, ParamSpec, behavior
from tendril.engine.strokes import collect, make_stroke
from tendril.utils.geometry import rotate_path, scale_path
from tendril.utils.math_helpers import clamp


@behavior(
    name="cascade",
    category=Category.COPIES,
    description="Shrinking rotated copies about the start, end or centroid",
    params=[
        ParamSpec("source", kind="string", required=True, aliases=("from",)),
        ParamSpec("count", kind="integer", default=8, min=2, max=20),
        ParamSpec("scaleEach", default=0.8, min=0.3, max=1),
        ParamSpec("rotateEach", default=20.0, description="Degrees per copy"),
        ParamSpec("anchor", kind="enum", default="end", options=("start", "end", "center")),
    ],
)
def cascade(
    ctx: NearbyContext,
    source: str | None = None,
    count: int = 8,
    scale_each: float = 0.8,
    rotate_each: float = 20.0,
    anchor: str = "end",
    seed: int | None = None,
):
    src = resolve_source(ctx, source)
    if src is None:
        return []

    pts = src.points
    if anchor == "start":
        origin = (float(pts[0, 0]), float(pts[0, 1]))
    elif anchor == "center":
        origin = src.centroid
    else:
        origin = (float(pts[-1, 0]), float(pts[-1, 1]))

    rot = math.radians(rotate_each)
    out = []
    current = pts
    for i in range(1, count + 1):
        current = rotate_path(scale_path(current, scale_each, origin), rot, origin)
        out.append(
            make_stroke(
                current,
                src.color,
                max(3.0, src.size * scale_each**i),
                clamp(src.opacity * 0.9**i, 0.1, 1),
            )
        )
    return collect(out)
