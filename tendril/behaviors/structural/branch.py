"""Branch: fork straight strokes from an endpoint at an angle."""

from __future__ import annotations

import math

import numpy as np

from tendril.behaviors.common import ENDPOINTS, endpoint_frame, resolve_source
from tendril.engine.context import NearbyContext
from tendril.engine.registry import Category, ParamSpec, behavior
from tendril.engine.strokes import collect, make_stroke

MAX_FORKS = 5


@behavior(
    name="branch",
    category=Category.STRUCTURAL,
    description="Fork one or more strokes from an endpoint, fanned across +/- angle",
    params=[
        ParamSpec("source", kind="string", required=True, aliases=("from",)),
        ParamSpec("endpoint", kind="enum", default="end", options=ENDPOINTS),
        ParamSpec("angle", default=45.0, description="Degrees off the endpoint tangent"),
        ParamSpec("length", default=150.0, min=10, max=1000),
        ParamSpec("taper", kind="boolean", default=True),
        ParamSpec("count", kind="integer", default=3, min=1, max=10),
    ],
)
def branch(
    ctx: NearbyContext,
    source: str | None = None,
    endpoint: str = "end",
    angle: float = 45.0,
    length: float = 150.0,
    taper: bool = True,
    count: int = 3,
    seed: int | None = None,
):
    src = resolve_source(ctx, source)
    if src is None:
        return []

    count = min(count, MAX_FORKS)
    ex, ey, dx, dy = endpoint_frame(src, endpoint)
    base = math.atan2(dy, dx)
    spread = math.radians(angle)
    if count == 1:
        angles = [base + spread]
    else:
        angles = [base - spread + (2 * spread / (count - 1)) * b for b in range(count)]

    n = max(15, round(length / 4))
    t = np.linspace(0.0, 1.0, n + 1)
    style = "taper" if taper else "default"
    out = []
    for a in angles:
        pts = np.column_stack([ex + math.cos(a) * length * t, ey + math.sin(a) * length * t])
        out.append(make_stroke(pts, src.color, src.size * 0.8, src.opacity, style))
    return collect(out)
