"""Coil: a spiral that winds around a stroke's path.

The orbit plane leans toward the local stroke-field normal, so the coil hugs
neighbouring geometry instead of cutting through it. The source stroke itself
is excluded from the field unless it is the only stroke present.
"""

from __future__ import annotations

import math

from tendril.behaviors.common import resolve_source
from tendril.engine.context import NearbyContext
from tendril.engine.noise import Randomness
from tendril.engine.registry import Category, ParamSpec, behavior
from tendril.engine.strokes import collect, make_stroke
from tendril.fields.stroke_field import build_stroke_field
from tendril.utils.geometry import normal_at, normalize_vec, path_length, resample_path, tangent_at
from tendril.utils.math_helpers import clamp


@behavior(
    name="coil",
    category=Category.STRUCTURAL,
    description="Spiral around a stroke's path",
    params=[
        ParamSpec("source", kind="string", required=True, aliases=("from",)),
        ParamSpec("loops", default=6.0, min=1, max=30),
        ParamSpec("radius", default=25.0, min=2, max=100),
        ParamSpec("taper", kind="boolean", default=True),
        ParamSpec("direction", kind="enum", default="cw", options=("cw", "ccw")),
    ],
)
def coil(
    ctx: NearbyContext,
    source: str | None = None,
    loops: float = 6.0,
    radius: float = 25.0,
    taper: bool = True,
    direction: str = "cw",
    seed: int | None = None,
):
    src = resolve_source(ctx, source)
    if src is None:
        return []
    pts = src.points
    total = path_length(pts)
    if total < 4:
        return []

    noise = Randomness(seed).noise
    sign = -1 if direction == "ccw" else 1
    margin = radius * 5 + 24
    x0, y0, x1, y1 = src.bbox
    bounds = (x0 - margin, y0 - margin, x1 + margin, y1 + margin)
    spacing = clamp(radius * 0.55, 5, 20)
    field = build_stroke_field(ctx, bounds, spacing, src.id)
    if field.sample_count == 0:
        field = build_stroke_field(ctx, bounds, spacing)

    n = int(clamp(round(max(120, loops * 52, total / 2.2)), 40, 1200))
    path = resample_path(pts, n)
    jitter_amp = min(radius * 0.18, 8)
    out = []
    for i in range(len(path)):
        t = i / (len(path) - 1)
        bx, by = float(path[i, 0]), float(path[i, 1])
        tang = tangent_at(path, i)
        norm = normal_at(path, i)
        phase = t * loops * 2 * math.pi * sign
        r = radius * (1 - t * 0.55) if taper else radius

        steer = field.steer_along_stroke(bx, by, tang, max(3, r * 0.85), max(r * 4, 24), 0.95, 0.8)
        orbit = norm
        along = (0.0, 0.0)
        pull = 0.0
        if steer.info is not None:
            sn = steer.info.normal
            orbit = normalize_vec(norm[0] * 0.42 + sn[0] * 0.58, norm[1] * 0.42 + sn[1] * 0.58, norm)
            tx, ty = steer.info.tangent
            if tx * tang[0] + ty * tang[1] < 0:
                tx, ty = -tx, -ty
            along = (tx, ty)
            pull = steer.error

        radial = math.sin(phase) * r + math.cos(phase * 0.5 + t * 4.2) * r * 0.14 + pull * r * 0.28
        drift = math.cos(phase) * r * 0.24
        jitter = (
            (noise(bx * 0.01 + i * 0.13, by * 0.01 + i * 0.21) - 0.5)
            * jitter_amp
            * (0.35 + (1 - t) * 0.65)
        )
        out.append((
            bx + orbit[0] * radial + along[0] * drift + tang[0] * jitter,
            by + orbit[1] * radial + along[1] * drift + tang[1] * jitter,
        ))

    style = "taper" if taper else "default"
    return collect([make_stroke(out, src.color, max(1.0, src.size * 0.62), src.opacity, style)])
