"""Bloom: strokes radiating from a point, with noisy angle and length."""

from __future__ import annotations

import math

import numpy as np

from tendril.engine.context import NearbyContext
from tendril.engine.noise import Randomness
from tendril.engine.registry import Category, ParamSpec, behavior
from tendril.engine.strokes import collect, make_stroke


@behavior(
    name="bloom",
    category=Category.FILLING,
    description="Radiate strokes outward from a point",
    params=[
        ParamSpec("atX", default=0.0),
        ParamSpec("atY", default=0.0),
        ParamSpec("count", kind="integer", default=24, min=3, max=120),
        ParamSpec("length", default=120.0, min=10, max=1000),
        ParamSpec("spread", default=360.0, min=10, max=360, description="Fan width in degrees"),
        ParamSpec("taper", kind="boolean", default=True),
        ParamSpec("noise", default=0.2, min=0, max=1),
        ParamSpec("color", kind="string"),
        ParamSpec("brushSize", default=4.0, min=0.5),
    ],
)
def bloom(
    ctx: NearbyContext,
    at_x: float = 0.0,
    at_y: float = 0.0,
    count: int = 24,
    length: float = 120.0,
    spread: float = 360.0,
    taper: bool = True,
    noise: float = 0.2,
    color: str | None = None,
    brush_size: float = 4.0,
    seed: int | None = None,
):
    if ctx.is_empty:
        return []
    field = Randomness(seed).noise
    color = color or ctx.palette_color()
    spread_rad = math.radians(spread)
    start = -spread_rad / 2 if spread < 360 else 0.0
    step = spread_rad / count
    style = "taper" if taper else "default"

    out = []
    for i in range(count):
        a = start + step * (i + 0.5) + field.signed(i * 0.7, 0) * noise * 0.5
        ray = length * (1 + field.signed(0, i * 0.7) * noise * 0.3)
        t = np.linspace(0.0, 1.0, max(10, round(ray / 5)) + 1)
        pts = np.column_stack([at_x + math.cos(a) * ray * t, at_y + math.sin(a) * ray * t])
        out.append(make_stroke(pts, color, brush_size, 0.85, style))
    return collect(out)
