"""Per-call bundle of derived fields around a search center."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from tendril.engine.config import SurfaceConfig
from tendril.engine.context import Bounds, NearbyContext, square_bounds
from tendril.fields.density import DensityMap, build_density_map
from tendril.fields.regions import Shape, collect_surface_shapes
from tendril.fields.sdf import SurfaceField, build_surface_field
from tendril.fields.stroke_field import StrokeField, build_stroke_field
from tendril.utils.math_helpers import clamp

logger = logging.getLogger(__name__)


@dataclass
class Environment:
    bounds: Bounds
    shapes: list[Shape]
    surface: SurfaceField
    density: DensityMap
    strokes: StrokeField


class AttractorSet:
    """Attractor positions and strengths as parallel arrays."""

    def __init__(self, rows: list[tuple[float, float, float]]) -> None:
        arr = np.array(rows, dtype=np.float64).reshape(-1, 3)
        self.xy = arr[:, :2]
        self.strength = arr[:, 2]

    def __len__(self) -> int:
        return len(self.xy)

    def pull(self, sx: float, sy: float, hx: float, hy: float) -> float:
        """Heading-aligned, distance-damped attraction felt at (sx, sy)."""
        dx = self.xy[:, 0] - sx
        dy = self.xy[:, 1] - sy
        d2 = dx * dx + dy * dy
        ok = d2 >= 1
        if not ok.any():
            return 0.0
        d = np.sqrt(d2[ok])
        align = (dx[ok] / d) * hx + (dy[ok] / d) * hy
        return float(np.sum(self.strength[ok] * (1 + align * 0.35) / (1 + d2[ok] * 0.001)))


def build_environment(
    ctx: NearbyContext,
    near_x: float,
    near_y: float,
    radius: float,
    *,
    surface_resolution: float,
    field_spacing: float,
    config: SurfaceConfig | None = None,
) -> Environment:
    """Regions, SDF, density and stroke field over the square around the center."""
    config = config or SurfaceConfig()
    bounds = square_bounds(near_x, near_y, radius)
    shapes = collect_surface_shapes(ctx, bounds, config.max_shapes, config.min_shape_area)
    resolution = int(
        clamp(round(surface_resolution), config.sdf_resolution_min, config.sdf_resolution_max)
    )
    lines = [s.points for s in ctx.strokes]
    env = Environment(
        bounds=bounds,
        shapes=shapes,
        surface=build_surface_field(lines, bounds, shapes, resolution),
        density=build_density_map(lines, bounds, config.density_resolution),
        strokes=build_stroke_field(ctx, bounds, field_spacing),
    )
    logger.debug(
        "Environment at (%.1f, %.1f) r=%.1f: %d shapes, %d field samples",
        near_x,
        near_y,
        radius,
        len(shapes),
        env.strokes.sample_count,
    )
    return env
