"""Stroke (tangent) field: tangent/normal-tagged samples of existing strokes.

Every stroke touching the bounds is resampled at roughly ``sample_spacing``
and each sample is bucketed in a :class:`SpatialHash`. Queries only visit the
cells within their radius.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from tendril.fields.spatial_hash import SpatialHash
from tendril.utils.geometry import normalize_vec, path_length, resample_path, tangents
from tendril.utils.math_helpers import clamp

if TYPE_CHECKING:
    from tendril.engine.context import Bounds, NearbyContext, StrokeEntry

logger = logging.getLogger(__name__)

MAX_SAMPLES = 14000
_MIN_PER_STROKE = 8
_MAX_PER_STROKE = 240
# Inverse-distance weight: w = 1 / (1 + d * _FALLOFF)
_FALLOFF = 0.42


@dataclass
class FieldSample:
    x: float
    y: float
    tangent: tuple[float, float]
    normal: tuple[float, float]
    stroke: StrokeEntry


@dataclass
class Influence:
    dist: float
    tangent: tuple[float, float]
    normal: tuple[float, float]
    center: tuple[float, float]
    nearest: FieldSample
    weight: float


@dataclass
class Steer:
    x: float
    y: float
    error: float
    info: Influence | None


@dataclass
class StyleSample:
    color: str
    brush_size: float
    opacity: float
    info: Influence | None


class StrokeField:
    def __init__(
        self,
        ctx: NearbyContext,
        bounds: Bounds | None = None,
        sample_spacing: float = 10.0,
        ignore_stroke_id: str | None = None,
    ) -> None:
        self.spacing = clamp(float(sample_spacing or 10.0), 4.0, 40.0)
        self.cell_size = clamp(self.spacing * 2.6, 10.0, 120.0)
        self._hash: SpatialHash[int] = SpatialHash(self.cell_size)

        xy: list[np.ndarray] = []
        tan: list[np.ndarray] = []
        owners: list[StrokeEntry] = []
        owner_idx: list[np.ndarray] = []
        total = 0
        for entry in ctx.strokes:
            if total >= MAX_SAMPLES:
                break
            if ignore_stroke_id and entry.id == ignore_stroke_id:
                continue
            pts = entry.points
            if len(pts) < 2:
                continue
            if bounds is not None:
                inside = (
                    (pts[:, 0] >= bounds[0])
                    & (pts[:, 0] <= bounds[2])
                    & (pts[:, 1] >= bounds[1])
                    & (pts[:, 1] <= bounds[3])
                )
                if not inside.any():
                    continue
            length = path_length(pts)
            if length < 1e-3:
                continue
            n = int(clamp(round(length / self.spacing), _MIN_PER_STROKE, _MAX_PER_STROKE))
            res = resample_path(pts, n)[: MAX_SAMPLES - total]
            xy.append(res)
            tan.append(tangents(res))
            owner_idx.append(np.full(len(res), len(owners)))
            owners.append(entry)
            total += len(res)

        if total:
            self.xy = np.vstack(xy)
            self.tangents = np.vstack(tan)
            self.owner_idx = np.concatenate(owner_idx)
        else:
            self.xy = np.empty((0, 2))
            self.tangents = np.empty((0, 2))
            self.owner_idx = np.zeros(0, dtype=np.int64)
        self._owners = owners
        for i, (x, y) in enumerate(self.xy):
            self._hash.insert(float(x), float(y), i)

    @property
    def sample_count(self) -> int:
        return len(self.xy)

    def _sample(self, i: int) -> FieldSample:
        tx, ty = float(self.tangents[i, 0]), float(self.tangents[i, 1])
        return FieldSample(
            x=float(self.xy[i, 0]),
            y=float(self.xy[i, 1]),
            tangent=(tx, ty),
            normal=(-ty, tx),
            stroke=self._owners[int(self.owner_idx[i])],
        )

    def influence(
        self,
        x: float,
        y: float,
        heading: tuple[float, float] | None = None,
        max_radius: float = 80.0,
    ) -> Influence | None:
        """Inverse-distance-weighted summary of samples within ``max_radius``."""
        if not self.sample_count or not (math.isfinite(x) and math.isfinite(y)):
            return None
        radius = max(1.0, max_radius)
        idx = np.fromiter(
            (i for _, _, i in self._hash.candidates(x, y, radius)), dtype=np.int64
        )
        if len(idx) == 0:
            return None

        pts = self.xy[idx]
        d2 = (x - pts[:, 0]) ** 2 + (y - pts[:, 1]) ** 2
        keep = d2 <= radius * radius
        if not keep.any():
            return None
        idx, pts, d2 = idx[keep], pts[keep], d2[keep]

        d = np.sqrt(d2)
        w = 1.0 / (1.0 + d * _FALLOFF)
        sum_w = float(w.sum())
        if sum_w < 1e-8:
            return None

        tan = self.tangents[idx].copy()
        if heading is not None and all(math.isfinite(v) for v in heading):
            hx, hy = normalize_vec(heading[0], heading[1])
            flip = tan[:, 0] * hx + tan[:, 1] * hy < 0
            tan[flip] *= -1

        best = int(np.argmin(d2))
        nearest = self._sample(int(idx[best]))
        cx = float((pts[:, 0] * w).sum() / sum_w)
        cy = float((pts[:, 1] * w).sum() / sum_w)
        tangent = normalize_vec(
            float((tan[:, 0] * w).sum()), float((tan[:, 1] * w).sum()), nearest.tangent
        )
        nx, ny = x - cx, y - cy
        n_len = math.hypot(nx, ny)
        if n_len > 1e-6:
            normal = (nx / n_len, ny / n_len)
        else:
            normal = normalize_vec(*nearest.normal, fallback=(-tangent[1], tangent[0]))

        return Influence(
            dist=float(d[best]),
            tangent=tangent,
            normal=normal,
            center=(cx, cy),
            nearest=nearest,
            weight=sum_w,
        )

    def steer_along_stroke(
        self,
        x: float,
        y: float,
        heading: tuple[float, float] | None,
        target_dist: float = 14.0,
        max_radius: float = 84.0,
        tangent_weight: float = 1.0,
        normal_weight: float = 0.75,
    ) -> Steer:
        """Flow along nearby strokes while holding ``target_dist`` off them."""
        info = self.influence(x, y, heading, max_radius)
        if info is None:
            return Steer(0.0, 0.0, 0.0, None)
        desired = max(1.0, target_dist)
        err = clamp((desired - info.dist) / desired, -1.0, 1.0)
        return Steer(
            x=info.tangent[0] * tangent_weight + info.normal[0] * err * normal_weight,
            y=info.tangent[1] * tangent_weight + info.normal[1] * err * normal_weight,
            error=err,
            info=info,
        )

    def style_at(
        self,
        x: float,
        y: float,
        fallback_color: str = "#ffffff",
        fallback_size: float = 4.0,
        fallback_opacity: float = 0.9,
        max_radius: float = 80.0,
    ) -> StyleSample:
        """Brush of the nearest sampled stroke, or the fallbacks."""
        info = self.influence(x, y, None, max_radius)
        if info is None:
            return StyleSample(fallback_color, fallback_size, fallback_opacity, None)
        src = info.nearest.stroke
        return StyleSample(
            color=src.color or fallback_color,
            brush_size=src.size or fallback_size,
            opacity=src.opacity or fallback_opacity,
            info=info,
        )


def build_stroke_field(
    ctx: NearbyContext,
    bounds: Bounds | None = None,
    sample_spacing: float = 10.0,
    ignore_stroke_id: str | None = None,
) -> StrokeField:
    field = StrokeField(ctx, bounds, sample_spacing, ignore_stroke_id)
    logger.debug("Stroke field: %d samples, cell %.1f", field.sample_count, field.cell_size)
    return field
