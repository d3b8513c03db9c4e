"""Extend: continue a stroke past one of its endpoints.

The extension leaves along the endpoint tangent. With ``curve`` > 0 and a
toward-point it bends as a quadratic bezier whose control point is pulled
toward that point.
"""

from __future__ import annotations

import numpy as np

from tendril.behaviors.common import ENDPOINTS, endpoint_frame, resolve_source
from tendril.engine.context import NearbyContext
from tendril.engine.registry import Category, ParamSpec, behavior
from tendril.engine.strokes import collect, make_stroke


@behavior(
    name="extend",
    category=Category.STRUCTURAL,
    description="Continue a stroke from its start or end along the endpoint tangent",
    params=[
        ParamSpec("source", kind="string", required=True, aliases=("from",)),
        ParamSpec("endpoint", kind="enum", default="end", options=ENDPOINTS),
        ParamSpec("length", default=200.0, min=10, max=2000),
        ParamSpec("curve", default=0.0, min=0, max=1),
        ParamSpec("curveTowardX"),
        ParamSpec("curveTowardY"),
    ],
)
def extend(
    ctx: NearbyContext,
    source: str | None = None,
    endpoint: str = "end",
    length: float = 200.0,
    curve: float = 0.0,
    curve_toward_x: float | None = None,
    curve_toward_y: float | None = None,
    seed: int | None = None,
):
    src = resolve_source(ctx, source)
    if src is None:
        return []

    ex, ey, dx, dy = endpoint_frame(src, endpoint)
    n = max(20, round(length / 3))
    t = np.linspace(0.0, 1.0, n + 1)
    end = np.array([ex + dx * length, ey + dy * length])
    start = np.array([ex, ey])

    if curve > 0 and curve_toward_x is not None and curve_toward_y is not None:
        ctrl = np.array([
            ex + dx * length * 0.5 + (curve_toward_x - ex) * curve,
            ey + dy * length * 0.5 + (curve_toward_y - ey) * curve,
        ])
        mt = (1 - t)[:, None]
        tt = t[:, None]
        pts = mt * mt * start + 2 * mt * tt * ctrl + tt * tt * end
    else:
        pts = start + (end - start) * t[:, None]

    return collect([make_stroke(pts, src.color, src.size, src.opacity)])
