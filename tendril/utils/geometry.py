"""Leaf-node geometry helpers. No engine imports.

Polylines are ``(n, 2)`` float arrays in draw order. Polygons are open rings
(no closing duplicate vertex).
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray
from scipy.spatial import ConvexHull, QhullError
from shapely import clip_by_rect
from shapely.geometry import LineString, Polygon
from shapely.validation import make_valid

_EPS = 1e-8


def as_points(points) -> NDArray[np.float64]:
    """Coerce any point sequence to an ``(n, 2)`` float array."""
    arr = np.asarray(points, dtype=np.float64)
    if arr.size == 0:
        return np.empty((0, 2), dtype=np.float64)
    return arr.reshape(-1, 2)


def bbox(points: NDArray[np.float64]) -> tuple[float, float, float, float]:
    """Compute (xmin, ymin, xmax, ymax) bounding box."""
    if len(points) == 0:
        return (0.0, 0.0, 0.0, 0.0)
    return (
        float(np.min(points[:, 0])),
        float(np.min(points[:, 1])),
        float(np.max(points[:, 0])),
        float(np.max(points[:, 1])),
    )


def centroid(points: NDArray[np.float64]) -> tuple[float, float]:
    """Compute centroid of a point set."""
    if len(points) == 0:
        return (0.0, 0.0)
    return (float(np.mean(points[:, 0])), float(np.mean(points[:, 1])))


def arc_lengths(points: NDArray[np.float64]) -> NDArray[np.float64]:
    """Cumulative arc-length along a point sequence."""
    if len(points) == 0:
        return np.zeros(0)
    diffs = np.diff(points, axis=0)
    segment_lengths = np.sqrt(np.sum(diffs**2, axis=1))
    return np.concatenate([[0.0], np.cumsum(segment_lengths)])


def path_length(points: NDArray[np.float64]) -> float:
    if len(points) < 2:
        return 0.0
    return float(arc_lengths(points)[-1])


def resample_path(points: NDArray[np.float64], n: int) -> NDArray[np.float64]:
    """Resample a polyline to exactly ``n`` points evenly spaced by arc length.

    Degenerate input (single point, zero length) collapses to the first point.
    """
    pts = as_points(points)
    if len(pts) == 0:
        return pts
    if len(pts) == 1 or n <= 1:
        return pts[:1].copy()

    seg = np.sqrt(np.sum(np.diff(pts, axis=0) ** 2, axis=1))
    keep = np.concatenate([[True], seg > 1e-12])
    pts = pts[keep]
    if len(pts) < 2:
        return pts[:1].copy()

    s = arc_lengths(pts)
    total = s[-1]
    if total < 1e-6:
        return pts[:1].copy()

    targets = np.linspace(0.0, total, int(n))
    return np.column_stack([np.interp(targets, s, pts[:, 0]), np.interp(targets, s, pts[:, 1])])


def normalize_vec(
    x: float, y: float, fallback: tuple[float, float] = (1.0, 0.0)
) -> tuple[float, float]:
    """Unit vector, or ``fallback`` when the input is (nearly) zero."""
    length = math.hypot(x, y)
    if length < _EPS or not math.isfinite(length):
        return fallback
    return (x / length, y / length)


def normalize_rows(vectors: NDArray[np.float64]) -> NDArray[np.float64]:
    """Row-wise unit vectors; zero rows become (1, 0)."""
    norms = np.sqrt(np.sum(vectors**2, axis=1))
    out = np.zeros_like(vectors)
    ok = norms > _EPS
    out[ok] = vectors[ok] / norms[ok, None]
    out[~ok] = (1.0, 0.0)
    return out


def tangents(points: NDArray[np.float64]) -> NDArray[np.float64]:
    """Unit tangent at every point: central differences, one-sided at the ends."""
    n = len(points)
    if n < 2:
        return np.tile([1.0, 0.0], (n, 1))
    d = np.empty_like(points)
    d[1:-1] = points[2:] - points[:-2]
    d[0] = points[1] - points[0]
    d[-1] = points[-1] - points[-2]
    return normalize_rows(d)


def normals(points: NDArray[np.float64]) -> NDArray[np.float64]:
    """Left-hand unit normal (-ty, tx) at every point."""
    t = tangents(points)
    return np.column_stack([-t[:, 1], t[:, 0]])


def tangent_at(points: NDArray[np.float64], i: int) -> tuple[float, float]:
    n = len(points)
    if n < 2:
        return (1.0, 0.0)
    if i <= 0:
        d = points[1] - points[0]
    elif i >= n - 1:
        d = points[n - 1] - points[n - 2]
    else:
        d = points[i + 1] - points[i - 1]
    return normalize_vec(float(d[0]), float(d[1]))


def normal_at(points: NDArray[np.float64], i: int) -> tuple[float, float]:
    tx, ty = tangent_at(points, i)
    return (-ty, tx)


def offset_path(points: NDArray[np.float64], dx: float, dy: float) -> NDArray[np.float64]:
    return points + np.array([dx, dy])


def rotate_path(
    points: NDArray[np.float64], angle: float, origin: tuple[float, float]
) -> NDArray[np.float64]:
    """Rotate by ``angle`` radians around ``origin``."""
    c, s = math.cos(angle), math.sin(angle)
    o = np.array(origin, dtype=np.float64)
    rel = points - o
    return np.column_stack([rel[:, 0] * c - rel[:, 1] * s, rel[:, 0] * s + rel[:, 1] * c]) + o


def scale_path(
    points: NDArray[np.float64], factor: float, origin: tuple[float, float]
) -> NDArray[np.float64]:
    o = np.array(origin, dtype=np.float64)
    return o + (points - o) * factor


def mirror_path(points: NDArray[np.float64], axis: str, position: float) -> NDArray[np.float64]:
    """Reflect across a vertical (x = position) or horizontal (y = position) line."""
    out = points.copy()
    if axis == "vertical":
        out[:, 0] = 2 * position - points[:, 0]
    else:
        out[:, 1] = 2 * position - points[:, 1]
    return out


def convex_hull(points: NDArray[np.float64]) -> NDArray[np.float64]:
    """Hull vertices in CCW order. Collinear or tiny inputs return their extremes."""
    pts = np.unique(as_points(points), axis=0)
    if len(pts) < 3:
        return pts
    try:
        hull = ConvexHull(pts)
    except QhullError:
        # Collinear set: the two extreme points along the dominant axis
        axis = int(np.argmax(np.ptp(pts, axis=0)))
        return pts[[int(np.argmin(pts[:, axis])), int(np.argmax(pts[:, axis]))]]
    return pts[hull.vertices]


def clip_segment_to_rect(
    p0: tuple[float, float],
    p1: tuple[float, float],
    rect: tuple[float, float, float, float],
) -> tuple[tuple[float, float], tuple[float, float]] | None:
    """Clip a segment to (xmin, ymin, xmax, ymax). None when fully outside."""
    clipped = clip_by_rect(LineString([p0, p1]), *rect)
    if clipped.is_empty or clipped.geom_type != "LineString":
        return None
    coords = list(clipped.coords)
    if len(coords) < 2:
        return None
    (ax, ay), (bx, by) = coords[0], coords[-1]
    # clip_by_rect may return the segment reversed
    if math.hypot(ax - p0[0], ay - p0[1]) > math.hypot(bx - p0[0], by - p0[1]):
        (ax, ay), (bx, by) = (bx, by), (ax, ay)
    return (ax, ay), (bx, by)


def to_polygon(ring: NDArray[np.float64]) -> Polygon | None:
    """Shapely polygon from an open ring, repaired when self-intersecting."""
    if len(ring) < 3:
        return None
    poly = Polygon(ring)
    if not poly.is_valid:
        poly = make_valid(poly)
        if poly.geom_type != "Polygon":
            parts = [g for g in getattr(poly, "geoms", []) if g.geom_type == "Polygon"]
            if not parts:
                return None
            poly = max(parts, key=lambda g: g.area)
    if poly.is_empty or poly.area < 1e-9:
        return None
    return poly


def clip_segment_to_polygon(
    p0: tuple[float, float], p1: tuple[float, float], polygon: Polygon
) -> list[tuple[tuple[float, float], tuple[float, float]]]:
    """Inside portions of a segment, ordered from ``p0`` toward ``p1``."""
    inter = LineString([p0, p1]).intersection(polygon)
    if inter.is_empty:
        return []
    lines = [inter] if inter.geom_type == "LineString" else [
        g for g in getattr(inter, "geoms", []) if g.geom_type == "LineString"
    ]
    pieces = []
    for line in lines:
        coords = list(line.coords)
        if len(coords) < 2:
            continue
        a, b = coords[0], coords[-1]
        if math.hypot(a[0] - p0[0], a[1] - p0[1]) > math.hypot(b[0] - p0[0], b[1] - p0[1]):
            a, b = b, a
        pieces.append(((a[0], a[1]), (b[0], b[1])))
    pieces.sort(key=lambda seg: math.hypot(seg[0][0] - p0[0], seg[0][1] - p0[1]))
    return pieces


def principal_axis(points: NDArray[np.float64]) -> tuple[float, float]:
    """Unit direction of the major PCA axis. (1, 0) for fewer than two points."""
    if len(points) < 2:
        return (1.0, 0.0)
    centered = points - np.mean(points, axis=0)
    cxx = float(np.mean(centered[:, 0] ** 2))
    cyy = float(np.mean(centered[:, 1] ** 2))
    cxy = float(np.mean(centered[:, 0] * centered[:, 1]))
    theta = 0.5 * math.atan2(2 * cxy, cxx - cyy)
    return (math.cos(theta), math.sin(theta))
