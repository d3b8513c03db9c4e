"""Coarse occupancy grid used as a crowding signal."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Sequence

import numpy as np
from numpy.typing import NDArray

from tendril.utils.geometry import as_points, path_length, resample_path

if TYPE_CHECKING:
    from tendril.engine.context import Bounds

# Resampling spacing for counted points, in canvas units
_SAMPLE_SPACING = 4.0


class DensityMap:
    """Per-cell point counts normalized to [0, 1] by the busiest cell."""

    def __init__(
        self, polylines: Sequence[NDArray[np.float64]], bounds: Bounds, resolution: int = 32
    ) -> None:
        self.resolution = max(1, int(resolution))
        x0, y0, x1, y1 = bounds
        self.bounds = (float(x0), float(y0), float(max(x1, x0 + 1e-6)), float(max(y1, y0 + 1e-6)))

        samples = []
        for line in polylines:
            pts = as_points(line)
            if len(pts) == 0:
                continue
            n = max(2, int(math.ceil(path_length(pts) / _SAMPLE_SPACING)) + 1)
            samples.append(resample_path(pts, n) if len(pts) > 1 else pts)

        self.grid = np.zeros((self.resolution, self.resolution))
        if samples:
            pts = np.vstack(samples)
            counts, _, _ = np.histogram2d(
                pts[:, 1],
                pts[:, 0],
                bins=self.resolution,
                range=[[self.bounds[1], self.bounds[3]], [self.bounds[0], self.bounds[2]]],
            )
            peak = counts.max()
            if peak > 0:
                self.grid = counts / peak

    def get(self, x: float, y: float) -> float:
        """Occupancy of the containing cell; 0 outside the built bounds."""
        if not (math.isfinite(x) and math.isfinite(y)):
            return 0.0
        bx0, by0, bx1, by1 = self.bounds
        if x < bx0 or x > bx1 or y < by0 or y > by1:
            return 0.0
        ix = min(int((x - bx0) / (bx1 - bx0) * self.resolution), self.resolution - 1)
        iy = min(int((y - by0) / (by1 - by0) * self.resolution), self.resolution - 1)
        return float(self.grid[iy, ix])

    def gradient(self, x: float, y: float, probe: float = 5.0) -> tuple[float, float]:
        gx = (self.get(x + probe, y) - self.get(x - probe, y)) / (2 * probe)
        gy = (self.get(x, y + probe) - self.get(x, y - probe)) / (2 * probe)
        return (gx, gy)


def build_density_map(
    polylines: Sequence[NDArray[np.float64]], bounds: Bounds, resolution: int = 32
) -> DensityMap:
    return DensityMap(polylines, bounds, resolution)
