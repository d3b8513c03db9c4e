"""Fragment: break a stroke into scattered, fading pieces."""

from __future__ import annotations

from tendril.behaviors.common import resolve_source
from tendril.engine.context import NearbyContext
from tendril.engine.noise import Randomness
from tendril.engine.registry import Category, ParamSpec, behavior
from tendril.engine.strokes import collect, make_stroke
from tendril.utils.geometry import offset_path
from tendril.utils.math_helpers import clamp


@behavior(
    name="fragment",
    category=Category.REACTIVE,
    description="Split a stroke into pieces, scatter them and fade each one further",
    params=[
        ParamSpec("source", kind="string", required=True, aliases=("from",)),
        ParamSpec("pieces", kind="integer", default=5, min=2, max=20),
        ParamSpec("scatter", default=30.0, min=0, max=200),
        ParamSpec("opacityDecay", default=0.15, min=0, max=1),
    ],
)
def fragment(
    ctx: NearbyContext,
    source: str | None = None,
    pieces: int = 5,
    scatter: float = 30.0,
    opacity_decay: float = 0.15,
    seed: int | None = None,
):
    src = resolve_source(ctx, source)
    if src is None:
        return []

    noise = Randomness(seed).noise
    pts = src.points
    seg = max(2, len(pts) // pieces)
    out = []
    for i in range(pieces):
        start = min(i * seg, len(pts) - 1)
        piece = pts[start : start + seg]
        if len(piece) < 2:
            continue
        dx = noise.signed(i * 1.3, 0.5) * scatter
        dy = noise.signed(0.5, i * 1.3) * scatter
        opacity = clamp(src.opacity - opacity_decay * i, 0.05, 1)
        out.append(make_stroke(offset_path(piece, dx, dy), src.color, src.size, opacity))
    return collect(out)
