"""Closed region extraction.

Two strategies, tried in order:
1. Topology hints on the snapshot (``closedStrokes`` and ``loops``).
2. Planar faces: node every stroke segment at its intersections and
   polygonize the resulting line network.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable

import numpy as np
from numpy.typing import NDArray
from shapely import box, contains_xy, prepare
from shapely.geometry import LineString, Polygon
from shapely.ops import polygonize, unary_union

from tendril.utils.geometry import as_points, bbox, to_polygon

if TYPE_CHECKING:
    from tendril.engine.context import Bounds, NearbyContext, StrokeEntry

logger = logging.getLogger(__name__)

MIN_SHAPE_AREA = 16.0
# A stroke whose ends are this close (and within a fraction of its length) is treated as closed
NEAR_CLOSED_GAP = 12.0
NEAR_CLOSED_RATIO = 0.2
# Boundary overlap needed before a stroke counts as contributing to a face
_CONTRIB_BUFFER = 0.75
_CONTRIB_MIN_LENGTH = 1.0


@dataclass
class Shape:
    """One closed region. ``polygon`` is an open ring of its exterior."""

    polygon: NDArray[np.float64]
    centroid: tuple[float, float]
    area: float
    stroke_ids: list[str] = field(default_factory=list)
    bbox: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.0)
    geometry: Polygon | None = None
    closing_segments: list[NDArray[np.float64]] = field(default_factory=list)

    def contains(self, x: float, y: float) -> bool:
        x0, y0, x1, y1 = self.bbox
        if x < x0 or x > x1 or y < y0 or y > y1:
            return False
        if self.geometry is None:
            return False
        return bool(contains_xy(self.geometry, x, y))


def _open_ring(coords: Iterable) -> NDArray[np.float64]:
    ring = as_points(list(coords))
    if len(ring) > 1 and np.allclose(ring[0], ring[-1]):
        ring = ring[:-1]
    return ring


def _shape_from_polygon(
    poly: Polygon,
    stroke_ids: list[str],
    closing_segments: list[NDArray[np.float64]] | None = None,
) -> Shape | None:
    ring = _open_ring(poly.exterior.coords)
    if len(ring) < 3:
        return None
    prepare(poly)
    c = poly.centroid
    return Shape(
        polygon=ring,
        centroid=(float(c.x), float(c.y)),
        area=float(poly.area),
        stroke_ids=stroke_ids,
        bbox=bbox(ring),
        geometry=poly,
        closing_segments=closing_segments or [],
    )


def _gap_segment(a: NDArray[np.float64], b: NDArray[np.float64]) -> NDArray[np.float64] | None:
    if float(np.hypot(*(b - a))) < 1e-6:
        return None
    return np.vstack([a, b])


def shape_from_ring(ring: Any, stroke_ids: Iterable[str] = ()) -> Shape | None:
    """Shape for an explicit ring, open or closed. None when degenerate."""
    poly = to_polygon(_open_ring(as_points(ring)))
    if poly is None:
        return None
    return _shape_from_polygon(poly, list(stroke_ids))


# == Topology hints ==


def _closed_from_entry(entry: StrokeEntry) -> Shape | None:
    pts = entry.points
    if len(pts) < 3:
        return None
    poly = to_polygon(_open_ring(pts))
    if poly is None:
        return None
    closing = _gap_segment(pts[-1], pts[0])
    return _shape_from_polygon(poly, [entry.id], [closing] if closing is not None else [])


def _chain_loop(entries: list[StrokeEntry]) -> Shape | None:
    """Chain members end to end, flipping each one to shorten its join."""
    parts = [e for e in entries if len(e.points) >= 2]
    if not parts:
        return None
    chain = [np.asarray(parts[0].points)]
    closing: list[NDArray[np.float64]] = []
    for entry in parts[1:]:
        tail = chain[-1][-1]
        pts = np.asarray(entry.points)
        if np.hypot(*(pts[-1] - tail)) < np.hypot(*(pts[0] - tail)):
            pts = pts[::-1]
        seg = _gap_segment(tail, pts[0])
        if seg is not None:
            closing.append(seg)
        chain.append(pts)
    ring_pts = np.vstack(chain)
    seg = _gap_segment(ring_pts[-1], ring_pts[0])
    if seg is not None:
        closing.append(seg)

    poly = to_polygon(_open_ring(ring_pts))
    if poly is None:
        return None
    return _shape_from_polygon(poly, [e.id for e in parts], closing)


def _id_list(value: Any) -> list:
    if isinstance(value, (list, tuple)):
        return [v for v in value if isinstance(v, (str, int)) and not isinstance(v, bool)]
    return []


def detect_closed_shapes(ctx: NearbyContext) -> list[Shape]:
    """Shapes described by the snapshot's topology hints. Unknown content is ignored."""
    topo = ctx.topology
    if not isinstance(topo, dict):
        return []

    shapes: list[Shape] = []
    for ref in _id_list(topo.get("closedStrokes")):
        entry = ctx.find_by_id(ref)
        if entry is None:
            logger.debug("Topology references unknown stroke %r", ref)
            continue
        shape = _closed_from_entry(entry)
        if shape is not None:
            shapes.append(shape)

    loops = topo.get("loops")
    if isinstance(loops, (list, tuple)):
        for loop in loops:
            members = [ctx.find_by_id(ref) for ref in _id_list(loop)]
            resolved = [m for m in members if m is not None]
            if len(resolved) != len(members):
                logger.debug("Skipping loop with unresolved members: %r", loop)
                continue
            shape = _chain_loop(resolved)
            if shape is not None:
                shapes.append(shape)
    return shapes


# == Planar faces ==


def _stroke_lines(strokes: list[StrokeEntry]) -> list[tuple[StrokeEntry, LineString]]:
    out = []
    for entry in strokes:
        pts = entry.points
        if len(pts) < 2:
            continue
        coords = np.asarray(pts)
        gap = entry.closing_gap()
        if 1e-6 < gap < NEAR_CLOSED_GAP and gap < NEAR_CLOSED_RATIO * entry.length:
            coords = np.vstack([coords, coords[:1]])
        line = LineString(coords)
        if line.length > 1e-6:
            out.append((entry, line))
    return out


def extract_planar_faces(strokes: list[StrokeEntry], bounds: Bounds | None = None) -> list[Shape]:
    """Bounded faces of the planar graph formed by all stroke segments."""
    lines = _stroke_lines(strokes)
    if not lines:
        return []

    noded = unary_union([line for _, line in lines])
    parts = list(getattr(noded, "geoms", [noded]))
    clip = box(*bounds) if bounds is not None else None
    buffered = [(entry, line.buffer(_CONTRIB_BUFFER)) for entry, line in lines]

    shapes: list[Shape] = []
    for face in polygonize(parts):
        if face.is_empty or face.area < 1e-9:
            continue
        if clip is not None and not face.intersects(clip):
            continue
        boundary = face.exterior
        contributors = [
            entry.id
            for entry, zone in buffered
            if zone.intersection(boundary).length > _CONTRIB_MIN_LENGTH
        ]
        shape = _shape_from_polygon(face, contributors)
        if shape is not None:
            shapes.append(shape)
    return shapes


def collect_surface_shapes(
    ctx: NearbyContext,
    bounds: Bounds | None = None,
    max_shapes: int = 64,
    min_area: float = MIN_SHAPE_AREA,
) -> list[Shape]:
    """Topology shapes if any, else planar faces; largest first, slivers dropped."""
    if ctx.is_empty:
        return []
    raw = detect_closed_shapes(ctx) if ctx.topology else []
    if not raw:
        candidates = ctx.strokes_in_bounds(bounds) if bounds is not None else ctx.strokes
        raw = extract_planar_faces(candidates, bounds)

    shapes = [
        s for s in raw if len(s.polygon) >= 3 and np.isfinite(s.area) and s.area >= min_area
    ]
    shapes.sort(key=lambda s: s.area, reverse=True)
    return shapes[: max(0, int(max_shapes))]
