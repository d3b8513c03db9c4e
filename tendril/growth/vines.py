"""Stochastic self-avoiding vine grower with HSL color drift.

Tips start on surface seeds (grow mode) or on face boundaries aimed at the
face centroid (fill mode). Every global iteration advances each live tip by
one step. A tip dies on deep collision with existing geometry, on leaving
2.5x the search radius, on losing all nearby geometry, on touching another
tip's trail, or when its step budget runs out.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import dataclass, field

from tendril.engine.config import SurfaceConfig, VineConfig
from tendril.engine.context import NearbyContext
from tendril.engine.noise import ValueNoise
from tendril.engine.strokes import split_into_strokes
from tendril.fields.regions import extract_planar_faces
from tendril.fields.seeds import build_surface_seeds
from tendril.fields.spatial_hash import SpatialHash
from tendril.growth.environment import build_environment
from tendril.models.stroke import Stroke
from tendril.utils.color import hex_to_rgb, hsl_to_hex, rgb_to_hsl
from tendril.utils.geometry import normalize_vec
from tendril.utils.math_helpers import clamp

logger = logging.getLogger(__name__)


@dataclass
class Tip:
    x: float
    y: float
    angle: float
    source_angle: float
    h: float
    s: float
    lum: float
    size: float
    generation: int = 0
    dist: float = 0.0
    step_count: int = 0
    steps_remaining: int = 0
    points: list[tuple[float, float]] = field(default_factory=list)
    alive: bool = True
    cooldown: int = 0


class VineTrailGrid:
    """Recorded trail points keyed by owning tip, bucketed at 2x the avoid radius."""

    def __init__(self, avoid_radius: float) -> None:
        self.cell = avoid_radius * 2
        self._hash: SpatialHash[int] = SpatialHash(self.cell)

    def add(self, x: float, y: float, tip_index: int) -> None:
        self._hash.insert(x, y, tip_index)

    def nearby(self, x: float, y: float):
        """Points in the 3x3 cell neighborhood around (x, y)."""
        return self._hash.candidates(x, y, self.cell)

    def collides(self, x: float, y: float, tip_index: int, distance: float) -> bool:
        """True if another tip recorded a point within ``distance`` of (x, y)."""
        return self._hash.any_within(x, y, distance, exclude=tip_index)

    def __len__(self) -> int:
        return len(self._hash)


@dataclass
class VineStats:
    seeds: int = 0
    branches: int = 0
    iterations: int = 0
    deaths: Counter = field(default_factory=Counter)


def _hsl(color: str) -> tuple[float, float, float]:
    return rgb_to_hsl(*hex_to_rgb(color))


def run_vine_growth(
    ctx: NearbyContext,
    near_x: float,
    near_y: float,
    radius: float,
    max_branches: int,
    step_len: float,
    branch_prob: float,
    mode: str,
    drift_range: float,
    noise: ValueNoise,
    config: VineConfig | None = None,
    surface_config: SurfaceConfig | None = None,
    stats: VineStats | None = None,
) -> list[Stroke | None]:
    cfg = config or VineConfig()
    stats = stats if stats is not None else VineStats()
    if ctx.is_empty:
        return []

    env = build_environment(
        ctx,
        near_x,
        near_y,
        radius,
        surface_resolution=radius / 2.8,
        field_spacing=clamp(step_len * 0.95, 5, 22),
        config=surface_config,
    )
    surface, strokes_field, density = env.surface, env.strokes, env.density
    collision = step_len * cfg.collision_factor * math.sqrt(0.65)
    color_grace = step_len * cfg.color_grace_steps
    avoid_r = cfg.avoid_radius
    trails = VineTrailGrid(avoid_r)
    tips: list[Tip] = []
    total_branches = 0

    def new_tip(x, y, angle, hsl, size, **kw) -> Tip:
        h, s, lum = hsl
        return Tip(
            x=x,
            y=y,
            angle=angle,
            source_angle=angle,
            h=h,
            s=s,
            lum=lum,
            size=size,
            steps_remaining=cfg.tip_budget,
            points=[(x, y)],
            **kw,
        )

    # == Seeding ==
    if mode == "fill":
        faces = env.shapes or extract_planar_faces(ctx.strokes, env.bounds)
        for face in faces:
            if total_branches >= max_branches:
                break
            poly = face.polygon
            if len(poly) < 3:
                continue
            cx, cy = (float(v) for v in poly.mean(axis=0))
            nearest = ctx.find_nearest(cx, cy)
            base_color = nearest.color if nearest else ctx.palette_color()
            base_size = nearest.size if nearest else 5.0
            base_op = nearest.opacity if nearest else 0.9
            style = strokes_field.style_at(cx, cy, base_color, base_size, base_op, radius * 0.2)
            count = min(math.ceil(len(poly) / 3), max_branches - total_branches, cfg.max_fill_tips)
            stride = max(1, len(poly) // max(1, count))
            for px, py in poly[::stride]:
                if total_branches >= max_branches:
                    break
                px, py = float(px), float(py)
                angle = math.atan2(cy - py, cx - px)
                tips.append(new_tip(px, py, angle, _hsl(style.color), style.brush_size * 0.8))
                total_branches += 1
    else:
        seeds = build_surface_seeds(
            ctx,
            near_x,
            near_y,
            radius,
            env.shapes,
            surface,
            min(max_branches, max(14, round(max_branches * 0.45))),
            brush_scale=0.8,
        )
        for seed in seeds:
            if total_branches >= max_branches:
                break
            style = strokes_field.style_at(seed.x, seed.y, seed.color, seed.brush_size, 0.9, radius * 0.22)
            size = clamp(seed.brush_size * 0.6 + style.brush_size * 0.4, 1, 24)
            angle = math.atan2(seed.dir[1], seed.dir[0])
            tips.append(new_tip(seed.x, seed.y, angle, _hsl(style.color), size))
            total_branches += 1

    if not tips:
        return []
    stats.seeds = len(tips)

    # == Growth ==
    iteration = 0
    while iteration < cfg.max_global_iterations and any(
        t.alive and t.steps_remaining > 0 for t in tips
    ):
        iteration += 1
        # Tips spawned during this pass start moving on the next one
        for ti in range(len(tips)):
            tip = tips[ti]
            if not tip.alive or tip.steps_remaining <= 0:
                continue
            tip.steps_remaining -= 1
            tip.step_count += 1

            if tip.step_count < cfg.momentum_steps:
                momentum = 1 - (tip.step_count / cfg.momentum_steps) * 0.8
            else:
                momentum = 0.0
            dx = math.cos(tip.source_angle) * momentum + math.cos(tip.angle) * (1 - momentum)
            dy = math.sin(tip.source_angle) * momentum + math.sin(tip.angle) * (1 - momentum)

            sd = surface.signed_distance(tip.x, tip.y)
            dist = abs(sd)
            gx, gy = surface.normal(tip.x, tip.y)
            has_grad = abs(gx) + abs(gy) > 1e-8

            if tip.step_count > 18 and sd < -step_len * 0.32 and dist < step_len * 1.1:
                tip.points.pop()
                tip.alive = False
                stats.deaths["sdf"] += 1
                continue

            if dist < cfg.edge_threshold and has_grad:
                tx, ty = -gy, gx
                blend = (1 - dist / cfg.edge_threshold) * cfg.edge_blend
                sign = 1 if dx * tx + dy * ty >= 0 else -1
                dx = dx * (1 - blend) + sign * tx * blend
                dy = dy * (1 - blend) + sign * ty * blend
                if dist < step_len * 3:
                    repel = (1 - dist / (step_len * 3)) * 0.8
                    dx += gx * repel
                    dy += gy * repel

            if sd < 0 and has_grad:
                push = clamp(-sd / (step_len * 2), 0, 1) * 1.1
                dx += gx * push
                dy += gy * push

            steer = strokes_field.steer_along_stroke(
                tip.x, tip.y, (dx, dy), clamp(step_len * 3.5, 8, 48), clamp(step_len * 13, 24, 170), 1.0, 0.88
            )
            if steer.info is not None:
                near = clamp(1 - steer.info.dist / (step_len * 12), 0, 1)
                dx += steer.x * (0.28 + near * 0.95)
                dy += steer.y * (0.28 + near * 0.95)

            leash = strokes_field.influence(tip.x, tip.y, (dx, dy), clamp(step_len * 22, 70, 260))
            if leash is not None:
                leash_dist = step_len * 10.5
                if leash.dist > leash_dist:
                    pull = clamp((leash.dist - leash_dist) / leash_dist, 0, 1)
                    dx -= leash.normal[0] * (0.58 + pull * 1.7)
                    dy -= leash.normal[1] * (0.58 + pull * 1.7)
            elif tip.step_count > 24:
                cx, cy = normalize_vec(near_x - tip.x, near_y - tip.y)
                dx += cx * 0.55
                dy += cy * 0.55

            curl = noise(tip.x * cfg.noise_scale, tip.y * cfg.noise_scale) * 2 * math.pi
            dx += math.cos(curl) * cfg.noise_strength
            dy += math.sin(curl) * cfg.noise_strength

            ax = ay = 0.0
            for vx, vy, owner in trails.nearby(tip.x, tip.y):
                if owner == ti:
                    continue
                ox, oy = tip.x - vx, tip.y - vy
                d2 = ox * ox + oy * oy
                if 1 < d2 < avoid_r * avoid_r:
                    d = math.sqrt(d2)
                    ax += ox / d * (1 - d / avoid_r)
                    ay += oy / d * (1 - d / avoid_r)
            dx += ax * 0.5
            dy += ay * 0.5

            local = density.get(tip.x, tip.y)
            if local > 0.3:
                dx += (noise(tip.x * 0.02, iteration * 0.1) - 0.5) * local * 0.8
                dy += (noise(iteration * 0.1, tip.y * 0.02) - 0.5) * local * 0.8

            d_len = math.hypot(dx, dy)
            if d_len < 1e-6:
                tip.alive = False
                stats.deaths["stalled"] += 1
                continue
            dx /= d_len
            dy /= d_len
            tip.x += dx * step_len
            tip.y += dy * step_len
            tip.angle = math.atan2(dy, dx)
            tip.dist += step_len
            tip.points.append((tip.x, tip.y))

            if tip.step_count % 3 == 0:
                trails.add(tip.x, tip.y, ti)
            if tip.step_count > cfg.collide_after_steps and trails.collides(tip.x, tip.y, ti, collision):
                tip.points.pop()
                tip.alive = False
                stats.deaths["collision"] += 1
                continue

            # Color drift ramps in past the grace distance
            ratio = 0.0 if tip.dist < color_grace else clamp(tip.dist / (radius * 1.5), 0, 1)
            walk = drift_range * ratio
            cn = noise(tip.x * 0.01 + iteration * 0.3, tip.y * 0.01)
            tip.h = (tip.h + (cn - 0.5) * walk * 60 + 360) % 360
            tip.s = clamp(tip.s + (cn - 0.5) * walk * 15, 10, 95)
            tip.lum = clamp(tip.lum + (noise(iteration * 0.3, tip.x * 0.01) - 0.2) * walk * 10, 35, 85)

            if tip.cooldown > 0:
                tip.cooldown -= 1
            elif tip.step_count > cfg.momentum_steps:
                if steer.info is not None:
                    interest = clamp(
                        abs(steer.error) + (1 - min(steer.info.dist / (step_len * 10), 1)) * 0.5,
                        0.2,
                        1.6,
                    )
                else:
                    interest = 0.65
                prob = (
                    branch_prob
                    * (1 + ratio * 0.5)
                    * (1 + (1 - local) * 0.3)
                    * (1.0 if tip.generation < 2 else 0.5)
                    * (0.8 + interest * 0.55)
                )
                if (
                    noise(iteration * 1.7 + ti * 3.1, tip.x * 0.05) < prob
                    and tip.generation < cfg.max_generation
                    and total_branches < max_branches
                ):
                    fork = math.radians(50 + noise(ti * 2.3, iteration * 1.1) * 40)
                    sign = 1 if noise(iteration * 0.9, ti * 1.7) > 0.5 else -1
                    angle = tip.angle + sign * fork
                    if steer.info is not None:
                        tan_a = math.atan2(steer.info.tangent[1], steer.info.tangent[0])
                        geom_blend = clamp(0.25 + interest * 0.2, 0.2, 0.55)
                        tangent_fork = tan_a + sign * math.pi * (0.42 + interest * 0.08)
                        angle = angle * (1 - geom_blend) + tangent_fork * geom_blend
                    tips.append(
                        new_tip(
                            tip.x,
                            tip.y,
                            angle,
                            (tip.h, tip.s, tip.lum),
                            tip.size * cfg.size_shrink,
                            generation=tip.generation + 1,
                            dist=tip.dist,
                        )
                    )
                    total_branches += 1
                    stats.branches += 1
                    tip.cooldown = cfg.branch_cooldown

            if (tip.x - near_x) ** 2 + (tip.y - near_y) ** 2 > (radius * cfg.kill_radius) ** 2:
                tip.alive = False
                stats.deaths["boundary"] += 1
                continue
            if tip.step_count > cfg.detach_after_steps:
                anchor = strokes_field.influence(
                    tip.x,
                    tip.y,
                    (math.cos(tip.angle), math.sin(tip.angle)),
                    clamp(step_len * 24, 80, 300),
                )
                if anchor is None or anchor.dist > step_len * 20:
                    tip.alive = False
                    stats.deaths["detached"] += 1
                    continue

    for tip in tips:
        if tip.alive and tip.steps_remaining <= 0:
            tip.alive = False
            stats.deaths["budget"] += 1
    stats.iterations = iteration

    out: list[Stroke | None] = []
    for tip in tips:
        if len(tip.points) < 3:
            continue
        opacity = clamp(0.9 - tip.generation * 0.12, 0.3, 0.9)
        color = hsl_to_hex(tip.h, tip.s, tip.lum)
        out.extend(split_into_strokes(tip.points, color, tip.size, opacity, "taper"))
    logger.debug(
        "vineGrowth: %d seeds, %d branches, %d iterations, deaths %s",
        stats.seeds,
        stats.branches,
        iteration,
        dict(stats.deaths),
    )
    return out
