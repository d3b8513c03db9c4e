"""Counterpoint: the source shape flipped about its own chord."""

from __future__ import annotations

import numpy as np

from tendril.behaviors.common import resolve_source
from tendril.engine.context import NearbyContext
from tendril.engine.registry import Category, ParamSpec, behavior
from tendril.engine.strokes import collect, make_stroke


@behavior(
    name="counterpoint",
    category=Category.REACTIVE,
    description="Invert a stroke's deviation from its start-to-end chord",
    params=[
        ParamSpec("source", kind="string", required=True, aliases=("from",)),
        ParamSpec("offsetX", default=0.0),
        ParamSpec("offsetY", default=30.0),
        ParamSpec("amplitude", default=1.0, min=0.1, max=5),
        ParamSpec("invertX", kind="boolean", default=False),
    ],
)
def counterpoint(
    ctx: NearbyContext,
    source: str | None = None,
    offset_x: float = 0.0,
    offset_y: float = 30.0,
    amplitude: float = 1.0,
    invert_x: bool = False,
    seed: int | None = None,
):
    src = resolve_source(ctx, source)
    if src is None:
        return []

    pts = src.points
    t = np.linspace(0.0, 1.0, len(pts))[:, None]
    chord = pts[0] + (pts[-1] - pts[0]) * t
    dev = pts - chord
    flip = np.array([-1.0 if invert_x else 1.0, -1.0])
    out = chord + dev * flip * amplitude + np.array([offset_x, offset_y])
    return collect([make_stroke(out, src.color, src.size, src.opacity)])
