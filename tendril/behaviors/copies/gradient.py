"""Gradient: offset copies stepping through a color and size ramp."""

from __future__ import annotations

from tendril.behaviors.common import resolve_source
from tendril.engine.context import NearbyContext
from tendril.engine.registry import Category, ParamSpec, behavior
from tendril.engine.strokes import collect, make_stroke
from tendril.utils.color import lerp_color
from tendril.utils.geometry import offset_path
from tendril.utils.math_helpers import lerp


@behavior(
    name="gradient",
    category=Category.COPIES,
    description="Progressively offset copies with interpolated color and size",
    params=[
        ParamSpec("source", kind="string", required=True, aliases=("from",)),
        ParamSpec("count", kind="integer", default=10, min=2, max=40),
        ParamSpec("offsetX", default=8.0),
        ParamSpec("offsetY", default=0.0),
        ParamSpec("colorFrom", kind="string"),
        ParamSpec("colorTo", kind="string"),
        ParamSpec("sizeFrom", min=0.5),
        ParamSpec("sizeTo", min=0.5),
    ],
)
def gradient(
    ctx: NearbyContext,
    source: str | None = None,
    count: int = 10,
    offset_x: float = 8.0,
    offset_y: float = 0.0,
    color_from: str | None = None,
    color_to: str | None = None,
    size_from: float | None = None,
    size_to: float | None = None,
    seed: int | None = None,
):
    src = resolve_source(ctx, source)
    if src is None:
        return []

    color_from = color_from or src.color
    color_to = color_to or src.color
    size_from = src.size if size_from is None else size_from
    size_to = src.size if size_to is None else size_to

    out = []
    for i in range(count):
        t = i / (count - 1) if count > 1 else 0.0
        out.append(
            make_stroke(
                offset_path(src.points, offset_x * (i + 1), offset_y * (i + 1)),
                lerp_color(color_from, color_to, t),
                lerp(size_from, size_to, t),
                src.opacity,
            )
        )
    return collect(out)
