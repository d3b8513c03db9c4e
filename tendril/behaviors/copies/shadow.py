"""Shadow: a darker, thicker, offset copy."""

from __future__ import annotations

from tendril.behaviors.common import resolve_source
from tendril.engine.context import NearbyContext
from tendril.engine.registry import Category, ParamSpec, behavior
from tendril.engine.strokes import collect, make_stroke
from tendril.utils.color import darken as darken_color
from tendril.utils.geometry import offset_path


@behavior(
    name="shadow",
    category=Category.COPIES,
    description="Darkened, widened copy offset behind the source",
    params=[
        ParamSpec("source", kind="string", required=True, aliases=("from",)),
        ParamSpec("offsetX", default=5.0),
        ParamSpec("offsetY", default=5.0),
        ParamSpec("darken", default=0.4, min=0, max=1),
        ParamSpec("opacity", default=0.5, min=0.01, max=1),
        ParamSpec("blur", default=0.3, min=0, max=1),
    ],
)
def shadow(
    ctx: NearbyContext,
    source: str | None = None,
    offset_x: float = 5.0,
    offset_y: float = 5.0,
    darken: float = 0.4,
    opacity: float = 0.5,
    blur: float = 0.3,
    seed: int | None = None,
):
    src = resolve_source(ctx, source)
    if src is None:
        return []
    return collect([
        make_stroke(
            offset_path(src.points, offset_x, offset_y),
            darken_color(src.color, darken),
            src.size * (1 + blur * 0.5),
            max(0.05, opacity),
        )
    ])
