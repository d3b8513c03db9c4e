"""Signed distance field over existing strokes.

The unsigned part is a grid of nearest-segment distances sampled at every grid
node and bilinearly interpolated. The sign comes from region membership: a
point inside any extracted closed shape gets a negative distance.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Sequence

import numpy as np
from numpy.typing import NDArray
from scipy.spatial import cKDTree

from tendril.utils.geometry import as_points, normalize_vec
from tendril.utils.math_helpers import clamp

if TYPE_CHECKING:
    from tendril.engine.context import Bounds
    from tendril.fields.regions import Shape

logger = logging.getLogger(__name__)

_INF = float("inf")
# Densified segment samples are capped; spacing grows past the cap
_MAX_SEGMENT_SAMPLES = 60000


def _densify(
    polylines: Sequence[NDArray[np.float64]], spacing: float
) -> NDArray[np.float64]:
    """Points along every non-degenerate segment, no more than ``spacing`` apart."""
    chunks: list[NDArray[np.float64]] = []
    for line in polylines:
        pts = as_points(line)
        if len(pts) < 2:
            continue
        a, b = pts[:-1], pts[1:]
        seg_len = np.hypot(*(b - a).T)
        keep = seg_len > 1e-9
        for (ax, ay), (bx, by), length in zip(a[keep], b[keep], seg_len[keep]):
            steps = max(1, int(math.ceil(length / spacing)))
            t = np.linspace(0.0, 1.0, steps + 1)
            chunks.append(np.column_stack([ax + (bx - ax) * t, ay + (by - ay) * t]))
    if not chunks:
        return np.empty((0, 2))
    return np.vstack(chunks)


class DistanceGrid:
    """Unsigned distance-to-nearest-segment sampled on a (res+1)² node grid."""

    def __init__(
        self,
        polylines: Sequence[NDArray[np.float64]],
        bounds: Bounds,
        resolution: int = 120,
    ) -> None:
        self.resolution = max(2, int(resolution))
        x0, y0, x1, y1 = bounds
        self.bounds = (float(x0), float(y0), float(max(x1, x0 + 1e-6)), float(max(y1, y0 + 1e-6)))
        self.cell_w = (self.bounds[2] - self.bounds[0]) / self.resolution
        self.cell_h = (self.bounds[3] - self.bounds[1]) / self.resolution

        spacing = max(min(self.cell_w, self.cell_h) * 0.5, 1e-3)
        samples = _densify(polylines, spacing)
        while len(samples) > _MAX_SEGMENT_SAMPLES:
            spacing *= 2
            samples = _densify(polylines, spacing)

        self.empty = len(samples) == 0
        if self.empty:
            self.grid: NDArray[np.float64] | None = None
            return

        xs = np.linspace(self.bounds[0], self.bounds[2], self.resolution + 1)
        ys = np.linspace(self.bounds[1], self.bounds[3], self.resolution + 1)
        gx, gy = np.meshgrid(xs, ys)
        nodes = np.column_stack([gx.ravel(), gy.ravel()])
        dist, _ = cKDTree(samples).query(nodes)
        self.grid = dist.reshape(self.resolution + 1, self.resolution + 1)

    def query(self, x: float, y: float) -> float:
        """Bilinear distance. Outside the bounds, adds the distance to the bounds."""
        if self.grid is None or not (math.isfinite(x) and math.isfinite(y)):
            return _INF
        bx0, by0, bx1, by1 = self.bounds
        cx = min(max(x, bx0), bx1)
        cy = min(max(y, by0), by1)
        outside = math.hypot(x - cx, y - cy)

        fx = (cx - bx0) / self.cell_w
        fy = (cy - by0) / self.cell_h
        ix = min(int(fx), self.resolution - 1)
        iy = min(int(fy), self.resolution - 1)
        tx = fx - ix
        ty = fy - iy
        g = self.grid
        d0 = g[iy, ix] * (1 - tx) + g[iy, ix + 1] * tx
        d1 = g[iy + 1, ix] * (1 - tx) + g[iy + 1, ix + 1] * tx
        return float(d0 * (1 - ty) + d1 * ty) + outside

    def gradient(self, x: float, y: float) -> tuple[float, float]:
        """Central differences at a probe of about one cell."""
        h = max(self.cell_w, self.cell_h, 1.0)
        gx = (self.query(x + h, y) - self.query(x - h, y)) / (2 * h)
        gy = (self.query(x, y + h) - self.query(x, y - h)) / (2 * h)
        if not (math.isfinite(gx) and math.isfinite(gy)):
            return (0.0, 0.0)
        return (gx, gy)


class SurfaceField:
    """Distance grid plus closed-shape membership."""

    def __init__(self, distance: DistanceGrid, shapes: Sequence[Shape] = ()) -> None:
        self.distance = distance
        self.shapes = list(shapes)
        self.resolution = distance.resolution
        self.probe = max(distance.cell_w, distance.cell_h, 1.0)

    def is_inside(self, x: float, y: float) -> bool:
        return any(shape.contains(x, y) for shape in self.shapes)

    def unsigned_distance(self, x: float, y: float) -> float:
        d = abs(self.distance.query(x, y))
        return d if math.isfinite(d) else _INF

    def signed_distance(self, x: float, y: float) -> float:
        d = self.unsigned_distance(x, y)
        if not math.isfinite(d):
            return d
        return -d if self.is_inside(x, y) else d

    def normal(self, x: float, y: float) -> tuple[float, float]:
        """Unit normal pointing toward increasing signed distance; (0, 0) when flat."""
        gx, gy = self.distance.gradient(x, y)
        nx, ny = normalize_vec(gx, gy, (0.0, 0.0))
        if abs(nx) + abs(ny) < 1e-8:
            return (0.0, 0.0)
        fwd = self.signed_distance(x + nx * self.probe, y + ny * self.probe)
        bwd = self.signed_distance(x - nx * self.probe, y - ny * self.probe)
        return (nx, ny) if fwd >= bwd else (-nx, -ny)

    def tangent(self, x: float, y: float) -> tuple[float, float]:
        nx, ny = self.normal(x, y)
        return (-ny, nx)


def build_surface_field(
    polylines: Sequence[NDArray[np.float64]],
    bounds: Bounds,
    shapes: Sequence[Shape] = (),
    resolution: int = 120,
) -> SurfaceField:
    """SDF over the given polylines, closing each shape's open gaps first."""
    lines = [as_points(p) for p in polylines]
    for shape in shapes:
        lines.extend(as_points(seg) for seg in shape.closing_segments)
    grid = DistanceGrid(lines, bounds, resolution)
    if grid.empty:
        logger.debug("Surface field built with no segments in %s", bounds)
    return SurfaceField(grid, shapes)


def build_shape_field(shape: Shape, pad: float) -> SurfaceField:
    """SDF of one shape's closed boundary over its padded bbox."""
    ring = np.vstack([shape.polygon, shape.polygon[:1]])
    x0, y0, x1, y1 = shape.bbox
    resolution = int(clamp(round(max(x1 - x0, y1 - y0) / 2.2), 80, 150))
    return build_surface_field([ring], (x0 - pad, y0 - pad, x1 + pad, y1 + pad), [shape], resolution)
