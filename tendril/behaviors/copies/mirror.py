"""Mirror: reflect a stroke across an axis through its centroid."""

from __future__ import annotations

from tendril.behaviors.common import resolve_source
from tendril.engine.context import NearbyContext
from tendril.engine.registry import Category, ParamSpec, behavior
from tendril.engine.strokes import collect, make_stroke
from tendril.utils.geometry import mirror_path


@behavior(
    name="mirror",
    category=Category.COPIES,
    description="Reflect a stroke across a vertical or horizontal axis",
    params=[
        ParamSpec("source", kind="string", required=True, aliases=("from",)),
        ParamSpec("axis", kind="enum", default="vertical", options=("horizontal", "vertical")),
        ParamSpec("offset", default=0.0, description="Axis shift from the centroid"),
        ParamSpec("opacity", default=1.0, min=0.01, max=1),
        ParamSpec("colorShift", kind="string"),
    ],
)
def mirror(
    ctx: NearbyContext,
    source: str | None = None,
    axis: str = "vertical",
    offset: float = 0.0,
    opacity: float = 1.0,
    color_shift: str | None = None,
    seed: int | None = None,
):
    src = resolve_source(ctx, source)
    if src is None:
        return []

    cx, cy = src.centroid
    position = (cx if axis == "vertical" else cy) + offset
    return collect([
        make_stroke(
            mirror_path(src.points, axis, position),
            color_shift or src.color,
            src.size,
            max(0.05, opacity),
        )
    ])
