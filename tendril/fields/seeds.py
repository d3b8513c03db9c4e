"""Endpoint classification, attractors and ranked growth seeds."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Sequence

from tendril.fields.spatial_hash import SpatialHash
from tendril.utils.geometry import normalize_vec, path_length, resample_path
from tendril.utils.math_helpers import clamp

if TYPE_CHECKING:
    from tendril.engine.context import NearbyContext, StrokeEntry
    from tendril.fields.regions import Shape
    from tendril.fields.sdf import SurfaceField

logger = logging.getLogger(__name__)

SECTORS = 8
# An endpoint with at least this many empty sectors is open to growth
EXTERIOR_MIN_EMPTY = 5
DEFAULT_CLASSIFY_RADIUS = 60.0


@dataclass
class Endpoint:
    x: float
    y: float
    stroke_id: str
    angle: float  # outward tangent angle
    empty_sectors: int
    growth_dir: tuple[float, float] = (0.0, 0.0)


@dataclass
class EndpointClasses:
    exterior: list[Endpoint] = field(default_factory=list)
    interior: list[Endpoint] = field(default_factory=list)


@dataclass
class Attractor:
    x: float
    y: float
    direction: tuple[float, float]
    strength: float


@dataclass
class Seed:
    x: float
    y: float
    dir: tuple[float, float]
    strength: float
    color: str
    brush_size: float


def _endpoints(entry: StrokeEntry) -> list[tuple[float, float, float]]:
    pts = entry.points
    if len(pts) < 2:
        return []
    (x0, y0), (x1, y1) = pts[0], pts[1]
    (xa, ya), (xb, yb) = pts[-2], pts[-1]
    return [
        (float(x0), float(y0), math.atan2(y0 - y1, x0 - x1)),
        (float(xb), float(yb), math.atan2(yb - ya, xb - xa)),
    ]


def classify_endpoints(strokes: Sequence[StrokeEntry], radius: float) -> EndpointClasses:
    """Split endpoints into exterior (mostly empty surroundings) and interior."""
    radius = max(1.0, radius)
    spacing = clamp(radius / 6, 3.0, 20.0)
    grid: SpatialHash[int] = SpatialHash(radius)
    for pos, entry in enumerate(strokes):
        if len(entry.points) == 0:
            continue
        n = max(2, int(math.ceil(path_length(entry.points) / spacing)) + 1)
        pts = resample_path(entry.points, n) if len(entry.points) > 1 else entry.points
        for x, y in pts:
            grid.insert(float(x), float(y), pos)

    out = EndpointClasses()
    sector_width = 2 * math.pi / SECTORS
    for entry in strokes:
        for x, y, angle in _endpoints(entry):
            filled = [False] * SECTORS
            for px, py, _ in grid.within(x, y, radius):
                dx, dy = px - x, py - y
                if dx * dx + dy * dy < 1.0:
                    continue
                a = math.atan2(dy, dx) % (2 * math.pi)
                filled[min(SECTORS - 1, int(a / sector_width))] = True

            empty = [i for i, f in enumerate(filled) if not f]
            gx = sum(math.cos((i + 0.5) * sector_width) for i in empty)
            gy = sum(math.sin((i + 0.5) * sector_width) for i in empty)
            ep = Endpoint(
                x=x,
                y=y,
                stroke_id=entry.id,
                angle=angle,
                empty_sectors=len(empty),
                growth_dir=normalize_vec(gx, gy, (0.0, 0.0)),
            )
            if len(empty) >= EXTERIOR_MIN_EMPTY:
                out.exterior.append(ep)
            else:
                out.interior.append(ep)
    return out


def build_attractors(
    strokes: Sequence[StrokeEntry], max_count: int, radius: float = DEFAULT_CLASSIFY_RADIUS
) -> list[Attractor]:
    """Exterior endpoints as attractors, emptiest surroundings first."""
    exterior = classify_endpoints(strokes, radius).exterior
    exterior.sort(key=lambda ep: ep.empty_sectors, reverse=True)
    out = []
    for ep in exterior[: max(0, max_count)]:
        fallback = (math.cos(ep.angle), math.sin(ep.angle))
        out.append(
            Attractor(
                x=ep.x,
                y=ep.y,
                direction=normalize_vec(*ep.growth_dir, fallback=fallback),
                strength=ep.empty_sectors / SECTORS,
            )
        )
    return out


@dataclass
class _Candidate:
    x: float
    y: float
    dir: tuple[float, float]
    strength: float
    source: StrokeEntry | None


def build_surface_seeds(
    ctx: NearbyContext,
    near_x: float,
    near_y: float,
    radius: float,
    shapes: Sequence[Shape],
    surface: SurfaceField,
    max_seeds: int = 24,
    color_override: str | None = None,
    brush_override: float | None = None,
    brush_scale: float = 0.8,
) -> list[Seed]:
    """Ranked, spaced growth origins around (near_x, near_y).

    Sources in priority order: exterior-endpoint attractors, classified
    exterior endpoints, closed-shape boundaries, and finally raw endpoint
    tangents when nothing else qualifies.
    """
    if ctx.is_empty:
        return []

    candidates: list[_Candidate] = []
    reach2 = (radius * 1.45) ** 2

    def add(x: float, y: float, d: tuple[float, float], strength: float, src) -> None:
        if not all(math.isfinite(v) for v in (x, y, d[0], d[1])):
            return
        if (x - near_x) ** 2 + (y - near_y) ** 2 > reach2:
            return
        candidates.append(_Candidate(x, y, d, strength, src))

    for attr in build_attractors(ctx.strokes, max(max_seeds * 3, 24)):
        d = normalize_vec(*attr.direction)
        add(
            attr.x + d[0] * 2,
            attr.y + d[1] * 2,
            d,
            0.55 + clamp(attr.strength, 0, 1) * 0.55,
            ctx.find_nearest(attr.x, attr.y),
        )

    classes = classify_endpoints(ctx.strokes, clamp(radius * 0.22, 45, 130))
    for ep in classes.exterior:
        d = ep.growth_dir
        if abs(d[0]) + abs(d[1]) < 1e-8:
            d = normalize_vec(*surface.normal(ep.x, ep.y))
        src = ctx.find_by_id(ep.stroke_id) or ctx.find_nearest(ep.x, ep.y)
        add(
            ep.x + d[0] * 2,
            ep.y + d[1] * 2,
            d,
            0.7 + clamp((ep.empty_sectors - 3) / 5, 0, 1) * 0.45,
            src,
        )

    area_norm = max(1.0, math.pi * radius * radius * 0.25)
    for shape in shapes:
        poly = shape.polygon
        if len(poly) < 3:
            continue
        samples = int(clamp(round(math.sqrt(shape.area) / 26), 3, 14))
        step = max(1, len(poly) // samples)
        strength = 0.85 + clamp(shape.area / area_norm, 0, 1) * 0.4
        owner = ctx.find_by_id(shape.stroke_ids[0]) if shape.stroke_ids else None
        for px, py in poly[::step]:
            px, py = float(px), float(py)
            n = surface.normal(px, py)
            if abs(n[0]) + abs(n[1]) < 1e-8:
                n = normalize_vec(px - shape.centroid[0], py - shape.centroid[1])
            add(px + n[0] * 2.5, py + n[1] * 2.5, n, strength, owner or ctx.find_nearest(px, py))

    if not candidates:
        for entry in ctx.strokes:
            for x, y, angle in _endpoints(entry):
                d = (math.cos(angle), math.sin(angle))
                add(x + d[0] * 2, y + d[1] * 2, d, 0.5, entry)
            if len(candidates) >= max_seeds * 3:
                break

    candidates.sort(key=lambda c: c.strength, reverse=True)
    min_dist2 = clamp(radius * 0.12, 18, 64) ** 2
    palette = ctx.palette_color()
    seeds: list[Seed] = []
    for cand in candidates:
        if any((cand.x - s.x) ** 2 + (cand.y - s.y) ** 2 < min_dist2 for s in seeds):
            continue
        src_color = cand.source.color if cand.source else palette
        src_size = cand.source.size if cand.source else 5.0
        seeds.append(
            Seed(
                x=cand.x,
                y=cand.y,
                dir=normalize_vec(*cand.dir),
                strength=clamp(cand.strength, 0.0, 1.0),
                color=color_override or src_color,
                brush_size=brush_override or clamp(src_size * brush_scale, 1, 20),
            )
        )
        if len(seeds) >= max_seeds:
            break

    logger.debug("Built %d seeds from %d candidates", len(seeds), len(candidates))
    return seeds
