"""Outline: a closed contour around a group of strokes.

``convex`` pushes the convex hull out radially by ``padding``. ``tight``
follows the largest enclosed face of the strokes (or a single nearly closed
stroke) and offsets it along the outward surface normal; it falls back to the
convex outline when no enclosed shape exists.
"""

from __future__ import annotations

import logging

import numpy as np

from tendril.behaviors.common import parse_id_list
from tendril.engine.context import NearbyContext, StrokeEntry
from tendril.engine.registry import Category, ParamSpec, behavior
from tendril.engine.strokes import collect, make_stroke
from tendril.fields.regions import Shape, extract_planar_faces, shape_from_ring
from tendril.fields.sdf import build_shape_field
from tendril.utils.geometry import bbox, centroid, convex_hull, normalize_vec

logger = logging.getLogger(__name__)

# A lone stroke whose ends are closer than this counts as a closed outline
CLOSE_GAP = 24.0
OUTLINE_OPACITY = 0.8


def _tight_shape(selected: list[StrokeEntry], points: np.ndarray, padding: float) -> Shape | None:
    x0, y0, x1, y1 = bbox(points)
    margin = padding + 10
    faces = extract_planar_faces(selected, (x0 - margin, y0 - margin, x1 + margin, y1 + margin))
    if faces:
        return max(faces, key=lambda s: s.area)
    if len(selected) == 1 and len(selected[0].points) >= 3 and selected[0].closing_gap() < CLOSE_GAP:
        return shape_from_ring(selected[0].points, [selected[0].id])
    return None


def _expand_tight(shape: Shape, padding: float) -> np.ndarray:
    field = build_shape_field(shape, padding + 6)
    cx, cy = centroid(shape.polygon)
    out = []
    for x, y in shape.polygon:
        nx, ny = field.normal(x, y)
        if abs(nx) + abs(ny) < 1e-8:
            nx, ny = normalize_vec(x - cx, y - cy)
        out.append((x + nx * padding, y + ny * padding))
    return np.array(out)


def _expand_convex(points: np.ndarray, padding: float) -> np.ndarray | None:
    hull = convex_hull(points)
    if len(hull) < 3:
        return None
    center = np.array(centroid(hull))
    rel = hull - center
    dist = np.hypot(rel[:, 0], rel[:, 1])
    scale = np.where(dist > 1e-6, padding / np.maximum(dist, 1e-6), 0.0)
    return hull + rel * scale[:, None]


@behavior(
    name="outline",
    category=Category.REACTIVE,
    description="Closed contour around the listed strokes (convex hull or tight face)",
    params=[
        ParamSpec("strokes", kind="string", required=True, description="Comma-separated stroke ids"),
        ParamSpec("padding", default=20.0, min=0, max=200),
        ParamSpec("style", kind="enum", default="convex", options=("convex", "tight")),
        ParamSpec("color", kind="string"),
        ParamSpec("brushSize", default=3.0, min=0.5),
    ],
)
def outline(
    ctx: NearbyContext,
    strokes: str | None = None,
    padding: float = 20.0,
    style: str = "convex",
    color: str | None = None,
    brush_size: float = 3.0,
    seed: int | None = None,
):
    selected: list[StrokeEntry] = []
    seen: set[int] = set()
    for ref in parse_id_list(strokes):
        entry = ctx.find(ref)
        if entry is not None and len(entry.points) > 0 and entry.index not in seen:
            seen.add(entry.index)
            selected.append(entry)
    if not selected:
        logger.debug("outline: none of %r resolved", strokes)
        return []
    points = np.vstack([s.points for s in selected])
    if len(points) < 3:
        return []

    color = color or selected[0].color
    ring = None
    if style == "tight":
        shape = _tight_shape(selected, points, padding)
        if shape is not None:
            ring = _expand_tight(shape, padding)
    if ring is None:
        ring = _expand_convex(points, padding)
    if ring is None:
        return []
    ring = np.vstack([ring, ring[:1]])
    return collect([make_stroke(ring, color, brush_size, OUTLINE_OPACITY)])
