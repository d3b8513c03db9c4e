"""Morph: intermediate strokes blending one stroke into another."""

from __future__ import annotations

from tendril.behaviors.common import resolve_source
from tendril.engine.context import NearbyContext
from tendril.engine.registry import Category, ParamSpec, behavior
from tendril.engine.strokes import collect, make_stroke
from tendril.utils.color import lerp_color
from tendril.utils.geometry import resample_path
from tendril.utils.math_helpers import EASINGS, apply_easing, lerp


@behavior(
    name="morph",
    category=Category.FILLING,
    description="In-between strokes from one stroke to another (endpoints excluded)",
    params=[
        ParamSpec("source", kind="string", required=True, aliases=("from",)),
        ParamSpec("target", kind="string", required=True, aliases=("to",)),
        ParamSpec("steps", kind="integer", default=15, min=2, max=50),
        ParamSpec("easing", kind="enum", default="linear", options=EASINGS),
    ],
)
def morph(
    ctx: NearbyContext,
    source: str | None = None,
    target: str | None = None,
    steps: int = 15,
    easing: str = "linear",
    seed: int | None = None,
):
    a = resolve_source(ctx, source)
    b = resolve_source(ctx, target)
    if a is None or b is None:
        return []

    n = max(len(a.points), len(b.points), 30)
    ra = resample_path(a.points, n)
    rb = resample_path(b.points, n)
    if len(ra) != len(rb):
        # One side has zero length and collapsed to a single point
        ra = ra if len(ra) == n else ra.repeat(n, axis=0)
        rb = rb if len(rb) == n else rb.repeat(n, axis=0)

    out = []
    for s in range(1, steps + 1):
        t = apply_easing(s / (steps + 1), easing)
        out.append(
            make_stroke(
                ra + (rb - ra) * t,
                lerp_color(a.color, b.color, t),
                lerp(a.size, b.size, t),
                lerp(a.opacity, b.opacity, t),
            )
        )
    return collect(out)
