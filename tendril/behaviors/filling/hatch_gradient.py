"""Hatch gradient: parallel hatch lines whose spacing ramps across a rectangle.

Lines are clipped to the rectangle and broken wherever they come within
``6 + brush size`` of an existing stroke, so hatching fills negative space.
"""

from __future__ import annotations

import logging
import math

from shapely.geometry import LineString, Point
from shapely.ops import unary_union

from tendril.engine.context import NearbyContext
from tendril.engine.registry import Category, ParamSpec, behavior
from tendril.engine.strokes import collect, make_stroke
from tendril.utils.geometry import clip_segment_to_rect
from tendril.utils.math_helpers import lerp

logger = logging.getLogger(__name__)

# Hatch stops this far (plus the stroke's brush size) from existing strokes
BLOCK_MARGIN = 6.0
MIN_SEGMENT = 5.0
HATCH_OPACITY = 0.8


def _blocked_zone(ctx: NearbyContext, rect: tuple[float, float, float, float]):
    zones = []
    for entry in ctx.strokes:
        if len(entry.points) == 0:
            continue
        margin = BLOCK_MARGIN + entry.size
        x0, y0, x1, y1 = entry.bbox
        if x1 + margin < rect[0] or x0 - margin > rect[2] or y1 + margin < rect[1] or y0 - margin > rect[3]:
            continue
        if len(entry.points) == 1:
            zones.append(Point(entry.points[0]).buffer(margin))
        else:
            zones.append(LineString(entry.points).buffer(margin))
    return unary_union(zones) if zones else None


@behavior(
    name="hatchGradient",
    category=Category.FILLING,
    description="Rectangle hatching with spacing ramping from spacingFrom to spacingTo",
    params=[
        ParamSpec("x", default=0.0),
        ParamSpec("y", default=0.0),
        ParamSpec("w", default=300.0, min=1),
        ParamSpec("h", default=300.0, min=1),
        ParamSpec("angle", default=45.0),
        ParamSpec("spacingFrom", default=5.0, min=3, max=50),
        ParamSpec("spacingTo", default=15.0, min=5, max=100),
        ParamSpec("gradientDirection", kind="enum", default="along", options=("along", "across")),
        ParamSpec("color", kind="string"),
        ParamSpec("brushSize", default=3.0, min=0.5),
    ],
)
def hatch_gradient(
    ctx: NearbyContext,
    x: float = 0.0,
    y: float = 0.0,
    w: float = 300.0,
    h: float = 300.0,
    angle: float = 45.0,
    spacing_from: float = 5.0,
    spacing_to: float = 15.0,
    gradient_direction: str = "along",
    color: str | None = None,
    brush_size: float = 3.0,
    seed: int | None = None,
):
    if ctx.is_empty:
        return []
    color = color or ctx.palette_color()
    rad = math.radians(angle)
    cos, sin = math.cos(rad), math.sin(rad)
    diagonal = math.hypot(w, h)
    rect = (x, y, x + w, y + h)
    cx0, cy0 = x + w / 2, y + h / 2
    blocked = _blocked_zone(ctx, rect)

    out = []
    d = -diagonal
    while d < diagonal:
        g = (d + diagonal) / (2 * diagonal)
        spacing = lerp(spacing_from, spacing_to, g if gradient_direction == "along" else 1 - g)
        cx, cy = cx0 - sin * d, cy0 + cos * d
        clipped = clip_segment_to_rect(
            (cx - cos * diagonal, cy - sin * diagonal),
            (cx + cos * diagonal, cy + sin * diagonal),
            rect,
        )
        d += spacing
        if clipped is None:
            continue
        if blocked is None:
            out.append(make_stroke(list(clipped), color, brush_size, HATCH_OPACITY, "flat"))
            continue

        free = LineString(clipped).difference(blocked)
        for piece in getattr(free, "geoms", [free]):
            if piece.is_empty or piece.geom_type != "LineString" or piece.length <= MIN_SEGMENT:
                continue
            coords = list(piece.coords)
            out.append(make_stroke([coords[0], coords[-1]], color, brush_size, HATCH_OPACITY, "flat"))

    logger.debug("hatchGradient: %d lines in %.0fx%.0f", len(out), w, h)
    return collect(out)
