"""Echo: ripple copies scaled about the centroid, fading as they grow."""

from __future__ import annotations

import numpy as np

from tendril.behaviors.common import resolve_source
from tendril.engine.context import NearbyContext
from tendril.engine.noise import Randomness
from tendril.engine.registry import Category, ParamSpec, behavior
from tendril.engine.strokes import collect, make_stroke
from tendril.utils.geometry import scale_path
from tendril.utils.math_helpers import clamp


@behavior(
    name="echo",
    category=Category.COPIES,
    description="Scaled, faded ripple copies with optional wobble",
    params=[
        ParamSpec("source", kind="string", required=True, aliases=("from",)),
        ParamSpec("count", kind="integer", default=6, min=1, max=15),
        ParamSpec("scaleEach", default=1.12, min=0.5, max=2),
        ParamSpec("opacityEach", default=0.75, min=0.1, max=1),
        ParamSpec("noise", default=0.1, min=0, max=1),
    ],
)
def echo(
    ctx: NearbyContext,
    source: str | None = None,
    count: int = 6,
    scale_each: float = 1.12,
    opacity_each: float = 0.75,
    noise: float = 0.1,
    seed: int | None = None,
):
    src = resolve_source(ctx, source)
    if src is None:
        return []

    field = Randomness(seed).noise
    center = src.centroid
    amp = noise * src.size * 5
    idx = np.arange(len(src.points))

    out = []
    for i in range(1, count + 1):
        scaled = scale_path(src.points, scale_each**i, center)
        wobble = np.column_stack([
            [field.signed(j * 0.3, i * 1.7) for j in idx],
            [field.signed(i * 1.7, j * 0.3) for j in idx],
        ])
        opacity = clamp(src.opacity * opacity_each**i, 0.05, 1)
        out.append(make_stroke(scaled + wobble * amp, src.color, src.size, opacity))
    return collect(out)
