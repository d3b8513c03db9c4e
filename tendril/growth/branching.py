"""Recursive fractal branch grower.

Each seed grows a trunk that bends away from existing geometry and follows
nearby strokes. At its end the branch forks into two or three children with
shrunken length and brush, recursing until the generation depth or the total
stroke cap is reached.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from tendril.engine.config import BranchConfig, SurfaceConfig
from tendril.engine.context import NearbyContext
from tendril.engine.noise import ValueNoise
from tendril.engine.strokes import make_stroke
from tendril.fields.seeds import Seed, build_surface_seeds
from tendril.growth.environment import Environment, build_environment
from tendril.models.stroke import Stroke
from tendril.utils.geometry import normalize_vec
from tendril.utils.math_helpers import clamp

logger = logging.getLogger(__name__)


@dataclass
class _Tree:
    env: Environment
    noise: ValueNoise
    config: BranchConfig
    near: tuple[float, float]
    radius: float
    generations: int
    strokes: list[Stroke | None] = field(default_factory=list)

    @property
    def full(self) -> bool:
        return len(self.strokes) >= self.config.max_tree_strokes

    def grow(
        self,
        color: str,
        x: float,
        y: float,
        direction: tuple[float, float],
        length: float,
        gen: int,
        size: float,
    ) -> None:
        if gen <= 0 or length < 4 or size < 0.6 or self.full:
            return

        surface = self.env.surface
        noise = self.noise
        step = max(2.3, length / max(6, round(length / 2.8)))
        steps = max(6, round(length / step))
        kill2 = (self.radius * self.config.kill_radius) ** 2
        pts = [(x, y)]
        px, py = x, y
        dx, dy = direction

        for i in range(steps):
            ud = surface.unsigned_distance(px, py)
            if not math.isfinite(ud):
                break
            sd = surface.signed_distance(px, py)
            nx, ny = surface.normal(px, py)
            tx, ty = -ny, nx
            near_surface = clamp(1 - ud / (step * 8), 0, 1)
            inside_push = clamp(-sd / (step * 3), 0, 1) if sd < 0 else 0.0

            steer = self.env.strokes.steer_along_stroke(
                px, py, (dx, dy), clamp(length * 0.24, 6, 38), clamp(length * 2.8, 24, 150), 1.0, 0.92
            )
            if steer.info is not None:
                near_stroke = clamp(1 - steer.info.dist / max(length * 0.75, step * 12), 0, 1)
                dx += steer.x * (0.26 + near_stroke * 0.68)
                dy += steer.y * (0.26 + near_stroke * 0.68)

            push = 0.24 + near_surface * 0.42 + inside_push * 1.05
            dx += nx * push
            dy += ny * push

            wobble = (noise(px * 0.006 + gen * 0.7, py * 0.006 + i * 0.3) - 0.5) * 0.55
            dx += tx * wobble * near_surface
            dy += ty * wobble * near_surface

            local = self.env.density.get(px, py)
            if local > 0.55:
                dx += (noise(py * 0.014, i * 0.31) - 0.5) * local * 0.75
                dy += (noise(i * 0.31, px * 0.014) - 0.5) * local * 0.75

            dx += (noise(gen * 1.3 + i * 0.17, px * 0.008) - 0.5) * 0.35
            dy += (noise(py * 0.008, gen * 1.3 + i * 0.17) - 0.5) * 0.35

            d_len = math.hypot(dx, dy)
            if d_len < 1e-6:
                break
            dx /= d_len
            dy /= d_len
            px += dx * step
            py += dy * step
            if (px - self.near[0]) ** 2 + (py - self.near[1]) ** 2 > kill2:
                break
            if i > 2 and surface.unsigned_distance(px, py) < step * 0.22:
                px += tx * step * 0.34
                py += ty * step * 0.34
            pts.append((px, py))

        if len(pts) < 3:
            return
        opacity = clamp(0.92 - (self.generations - gen) * 0.14, 0.28, 0.92)
        self.strokes.append(make_stroke(pts, color, size, opacity, "taper"))
        if gen <= 1:
            return

        (ax, ay), (bx, by) = pts[-2], pts[-1]
        out_dir = normalize_vec(bx - ax, by - ay, direction)
        base = math.atan2(out_dir[1], out_dir[0])
        jitter = (noise(bx * 0.007, by * 0.007 + gen) - 0.5) * math.radians(
            self.config.spread_jitter_deg
        )
        spread = math.radians(self.config.base_angle_deg) + jitter
        child_len = length * self.config.length_shrink
        child_size = max(1.0, size * self.config.size_shrink)

        angles = [base - spread, base + spread]
        local_field = self.env.strokes.influence(bx, by, out_dir, clamp(child_len * 3.2, 20, 150))
        if local_field is not None:
            angles.append(math.atan2(local_field.tangent[1], local_field.tangent[0]) + spread * 0.42)
        if (
            gen >= self.config.extra_branch_min_generation
            and noise(gen * 2.1, bx * 0.013 + by * 0.009) > 1 - self.config.extra_branch_chance
        ):
            angles.append(base + jitter * 0.4)

        for a in angles:
            if self.full:
                break
            self.grow(color, bx, by, (math.cos(a), math.sin(a)), child_len, gen - 1, child_size)


def run_attractor_branch(
    ctx: NearbyContext,
    near_x: float,
    near_y: float,
    radius: float,
    length: float,
    generations: int,
    color: str | None,
    brush_size: float | None,
    noise: ValueNoise,
    config: BranchConfig | None = None,
    surface_config: SurfaceConfig | None = None,
) -> list[Stroke | None]:
    """Grow one tree per surface seed; recursion depth is ``generations``."""
    cfg = config or BranchConfig()
    if ctx.is_empty:
        return []

    env = build_environment(
        ctx,
        near_x,
        near_y,
        radius,
        surface_resolution=radius / 3,
        field_spacing=clamp(radius / 30, 6, 22),
        config=surface_config or SurfaceConfig(density_resolution=36),
    )
    seeds: list[Seed] = build_surface_seeds(
        ctx,
        near_x,
        near_y,
        radius,
        env.shapes,
        env.surface,
        min(cfg.max_seeds, max(cfg.min_seeds, round(radius / 38))),
        color_override=color,
        brush_override=brush_size,
        brush_scale=0.82,
    )
    if not seeds:
        return []

    tree = _Tree(env, noise, cfg, (near_x, near_y), radius, generations)
    for seed in seeds:
        if tree.full:
            break
        styled = env.strokes.style_at(seed.x, seed.y, seed.color, seed.brush_size, 0.9, radius * 0.25)
        trunk_color = seed.color if color else styled.color
        trunk_brush = (
            seed.brush_size
            if brush_size
            else clamp(seed.brush_size * 0.55 + styled.brush_size * 0.45, 1, 24)
        )
        tree.grow(
            trunk_color,
            seed.x,
            seed.y,
            seed.dir,
            length * (0.86 + seed.strength * 0.62),
            generations,
            trunk_brush * (0.92 + seed.strength * 0.24),
        )

    logger.debug("attractorBranch: %d seeds, %d strokes", len(seeds), len(tree.strokes))
    return tree.strokes[: cfg.max_tree_strokes]
