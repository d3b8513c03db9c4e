"""Interior fill: hatch, stipple or wash inside every closed region near a point.

Regions come from topology hints or planar faces. Each region gets its own
distance field so marks can thin out toward the boundary: the edge weight of
a point is its distance to the boundary over a falloff, clamped to [0, 1].
"""

from __future__ import annotations

import logging
import math

from tendril.engine.config import SurfaceConfig
from tendril.engine.context import NearbyContext, square_bounds
from tendril.engine.noise import Randomness, ValueNoise
from tendril.engine.registry import Category, ParamSpec, behavior
from tendril.engine.strokes import collect, make_stroke
from tendril.fields.regions import Shape, collect_surface_shapes
from tendril.fields.sdf import SurfaceField, build_shape_field
from tendril.models.stroke import Stroke
from tendril.utils.color import darken, lerp_color
from tendril.utils.geometry import clip_segment_to_polygon
from tendril.utils.math_helpers import clamp, lerp

logger = logging.getLogger(__name__)

FILL_STYLES = ("hatch", "stipple", "wash")
HATCH_ANGLE_DEG = 45.0
WASH_POINTS = 16


def _edge_weight(field: SurfaceField, x: float, y: float, falloff: float) -> float:
    d = field.unsigned_distance(x, y)
    if not math.isfinite(d):
        return 0.0
    return clamp(d / max(falloff, 1.0), 0.0, 1.0)


def _hatch(
    shape: Shape, field: SurfaceField, color: str, density: float, brush: float
) -> list[Stroke | None]:
    x0, y0, x1, y1 = shape.bbox
    diagonal = math.hypot(x1 - x0, y1 - y0)
    cx, cy = shape.centroid
    spacing = lerp(15, 4, density)
    rad = math.radians(HATCH_ANGLE_DEG)
    cos, sin = math.cos(rad), math.sin(rad)
    dark = darken(color, 0.4)
    total = max(1, math.ceil(2 * diagonal / spacing))

    out: list[Stroke | None] = []
    for k in range(total):
        d = -diagonal + k * spacing
        if d >= diagonal:
            break
        t = k / total
        line_color = lerp_color(color, dark, t)
        line_opacity = lerp(0.7, 0.4, t)
        ox, oy = cx - sin * d, cy + cos * d
        pieces = clip_segment_to_polygon(
            (ox - cos * diagonal, oy - sin * diagonal),
            (ox + cos * diagonal, oy + sin * diagonal),
            shape.geometry,
        )
        for a, b in pieces:
            if math.hypot(b[0] - a[0], b[1] - a[1]) <= 3:
                continue
            ew = _edge_weight(field, (a[0] + b[0]) / 2, (a[1] + b[1]) / 2, spacing * 2.4)
            out.append(
                make_stroke(
                    [a, b],
                    line_color,
                    brush * (0.75 + ew * 0.45),
                    line_opacity * (0.35 + ew * 0.65),
                    "flat",
                )
            )
    return out


def _stipple(
    shape: Shape, field: SurfaceField, color: str, density: float, brush: float, noise: ValueNoise
) -> list[Stroke | None]:
    x0, y0, x1, y1 = shape.bbox
    w, h = x1 - x0, y1 - y0
    cx = shape.centroid[0]
    count = round(shape.area * density * 0.012)
    falloff = max(brush * 5, 10)

    out: list[Stroke | None] = []
    for i in range(count):
        px = x0 + noise(i * 0.7, cx * 0.01) * w
        py = y0 + noise(cx * 0.01, i * 0.7) * h
        if not shape.contains(px, py):
            continue
        ew = _edge_weight(field, px, py, falloff)
        if noise(px * 0.03 + i * 0.11, py * 0.03 + i * 0.17) > 0.2 + ew * 0.8:
            continue
        size = brush * (0.6 + ew * 0.6)
        opacity = clamp(0.15 + ew * 0.55 + noise(i * 0.3, 0.5) * 0.18, 0.12, 0.85)
        delta = max(0.6, size * 0.35)
        out.append(make_stroke([(px, py), (px + delta, py + delta)], color, size, opacity))
    return out


def _wash(
    shape: Shape, field: SurfaceField, color: str, density: float, brush: float, noise: ValueNoise
) -> list[Stroke | None]:
    x0, y0, x1, y1 = shape.bbox
    cx, cy = shape.centroid
    reach = max(x1 - x0, y1 - y0) / 2
    falloff = reach * 0.5

    out: list[Stroke | None] = []
    for i in range(round(5 + density * 10)):
        angle = noise(i * 0.5, cy * 0.01) * 2 * math.pi
        length = reach * (0.5 + noise(i * 0.3, 0.7) * 0.5)
        sx = cx + (noise(i * 0.7, 1.3) - 0.5) * reach * 0.5
        sy = cy + (noise(1.3, i * 0.7) - 0.5) * reach * 0.5
        if not shape.contains(sx, sy) or _edge_weight(field, sx, sy, falloff) < 0.06:
            continue

        pts: list[tuple[float, float]] = []
        edge_sum = 0.0
        for j in range(WASH_POINTS):
            t = j / (WASH_POINTS - 1)
            wx = sx + math.cos(angle) * length * t + (noise(j * 0.3, i * 0.7) - 0.5) * 10
            wy = sy + math.sin(angle) * length * t + (noise(i * 0.7, j * 0.3) - 0.5) * 10
            if not shape.contains(wx, wy):
                break
            ew = _edge_weight(field, wx, wy, falloff)
            if ew < 0.03:
                break
            edge_sum += ew
            pts.append((wx, wy))

        if len(pts) < 2:
            continue
        avg = edge_sum / len(pts)
        opacity = clamp((0.09 + density * 0.2) * (0.45 + avg * 0.8), 0.06, 0.45)
        out.append(make_stroke(pts, color, brush * (1.9 + avg * 1.5), opacity))
    return out


@behavior(
    name="interiorFill",
    category=Category.FILLING,
    description="Fill closed regions near a point with hatch, stipple or wash marks",
    params=[
        ParamSpec("nearX", default=0.0),
        ParamSpec("nearY", default=0.0),
        ParamSpec("radius", default=300.0, min=50, max=2000),
        ParamSpec("style", kind="enum", default="hatch", options=FILL_STYLES),
        ParamSpec("density", default=0.5, min=0.1, max=1),
        ParamSpec("color", kind="string"),
        ParamSpec("brushSize", default=2.0, min=1, max=10),
    ],
)
def interior_fill(
    ctx: NearbyContext,
    near_x: float = 0.0,
    near_y: float = 0.0,
    radius: float = 300.0,
    style: str = "hatch",
    density: float = 0.5,
    color: str | None = None,
    brush_size: float = 2.0,
    seed: int | None = None,
):
    if ctx.is_empty:
        return []
    cfg = SurfaceConfig()
    noise = Randomness(seed).noise
    shapes = collect_surface_shapes(
        ctx, square_bounds(near_x, near_y, radius), cfg.max_shapes, cfg.min_shape_area
    )
    if not shapes:
        logger.debug("interiorFill: no closed regions near (%.1f, %.1f)", near_x, near_y)
        return []

    fallback = color or ctx.palette_color()
    pad = max(8, brush_size * 4)
    out: list[Stroke | None] = []
    for shape in shapes:
        if shape.geometry is None:
            continue
        owner = ctx.find_by_id(shape.stroke_ids[0]) if len(shape.stroke_ids) == 1 else None
        shape_color = owner.color if owner is not None else fallback
        field = build_shape_field(shape, pad)
        if style == "stipple":
            out.extend(_stipple(shape, field, shape_color, density, brush_size, noise))
        elif style == "wash":
            out.extend(_wash(shape, field, shape_color, density, brush_size, noise))
        else:
            out.extend(_hatch(shape, field, shape_color, density, brush_size))

    logger.debug("interiorFill: %d regions, %d %s strokes", len(shapes), len(out), style)
    return collect(out)
