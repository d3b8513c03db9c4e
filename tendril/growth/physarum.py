"""Agent / pheromone trail simulation (slime-mold style).

Agents start on surface seeds and each step sense three forward points
(ahead, left, right). The strongest sensor wins the turn. Pheromone
evaporates globally every step and is deposited with a 3x3 falloff footprint.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

import numpy as np

from tendril.engine.config import PhysarumConfig, SurfaceConfig
from tendril.engine.context import Bounds, NearbyContext
from tendril.engine.noise import ValueNoise
from tendril.engine.strokes import make_stroke
from tendril.fields.seeds import build_attractors, build_surface_seeds
from tendril.growth.environment import AttractorSet, Environment, build_environment
from tendril.models.stroke import Stroke
from tendril.utils.geometry import normalize_vec
from tendril.utils.math_helpers import clamp

logger = logging.getLogger(__name__)


class PheromoneGrid:
    def __init__(self, bounds: Bounds, resolution: int) -> None:
        self.bounds = bounds
        self.resolution = resolution
        self.cell_w = (bounds[2] - bounds[0]) / resolution
        self.cell_h = (bounds[3] - bounds[1]) / resolution
        self.cell = max(self.cell_w, self.cell_h, 1.0)
        self.grid = np.zeros((resolution, resolution))
        offsets = [(dx, dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1)]
        self._footprint = [
            (dx, dy, 1 - min(1.0, math.hypot(dx, dy) / 1.6)) for dx, dy in offsets
        ]

    def _cell_of(self, x: float, y: float) -> tuple[int, int]:
        return (
            math.floor((x - self.bounds[0]) / self.cell_w),
            math.floor((y - self.bounds[1]) / self.cell_h),
        )

    def sample(self, x: float, y: float) -> float:
        if not (math.isfinite(x) and math.isfinite(y)):
            return 0.0
        col, row = self._cell_of(x, y)
        if col < 0 or col >= self.resolution or row < 0 or row >= self.resolution:
            return 0.0
        return float(self.grid[row, col])

    def deposit(self, x: float, y: float, amount: float) -> None:
        col, row = self._cell_of(x, y)
        for dx, dy, falloff in self._footprint:
            c, r = col + dx, row + dy
            if 0 <= c < self.resolution and 0 <= r < self.resolution:
                self.grid[r, c] += amount * falloff

    def gradient(self, x: float, y: float) -> tuple[float, float]:
        eps = self.cell * 0.75
        denom = max(2 * eps, 1.0)
        return (
            (self.sample(x + eps, y) - self.sample(x - eps, y)) / denom,
            (self.sample(x, y + eps) - self.sample(x, y - eps)) / denom,
        )

    def evaporate(self, decay: float) -> None:
        self.grid *= decay


@dataclass
class Agent:
    x: float
    y: float
    angle: float
    trail: list[tuple[float, float]] = field(default_factory=list)


def _sense(
    x: float,
    y: float,
    angle: float,
    dist: float,
    step: float,
    attractors: AttractorSet,
    env: Environment,
    pheromone: PheromoneGrid,
) -> float:
    hx, hy = math.cos(angle), math.sin(angle)
    sx, sy = x + hx * dist, y + hy * dist
    signal = attractors.pull(sx, sy, hx, hy)
    signal -= env.density.get(sx, sy) * 1.35

    sd = env.surface.signed_distance(sx, sy)
    ud = abs(sd)
    if math.isfinite(ud):
        tx, ty = env.surface.tangent(sx, sy)
        near_w = clamp(1 - ud / max(step * 10, 1), 0, 1)
        signal += near_w * (0.35 + abs(hx * tx + hy * ty) * 0.7)
        if sd < 0:
            signal -= clamp(-sd / max(step * 2.2, 1), 0, 1) * 1.55

    steer = env.strokes.steer_along_stroke(
        sx, sy, (hx, hy), clamp(step * 3, 8, 42), clamp(step * 12, 24, 150), 1.0, 0.8
    )
    if steer.info is not None:
        align = hx * steer.info.tangent[0] + hy * steer.info.tangent[1]
        signal += max(0.0, align) * 0.85
        signal += clamp(1 - steer.info.dist / max(step * 10, 1), 0, 1) * 0.55

    signal += clamp(pheromone.sample(sx, sy), 0, 2.2) * 0.7
    gx, gy = pheromone.gradient(sx, sy)
    signal += (gx * hx + gy * hy) * 0.28
    return signal


def run_physarum(
    ctx: NearbyContext,
    near_x: float,
    near_y: float,
    radius: float,
    agents: int,
    steps: int,
    trail_width: float,
    color: str | None,
    noise: ValueNoise,
    config: PhysarumConfig | None = None,
    surface_config: SurfaceConfig | None = None,
) -> list[Stroke | None]:
    """Simulate ``agents`` agents for ``steps`` steps. Empty snapshot or no attractors → []."""
    cfg = config or PhysarumConfig()
    if ctx.is_empty:
        return []

    env = build_environment(
        ctx,
        near_x,
        near_y,
        radius,
        surface_resolution=radius / 3,
        field_spacing=clamp(radius / 26, 6, 22),
        config=surface_config,
    )
    seeds = build_surface_seeds(
        ctx,
        near_x,
        near_y,
        radius,
        env.shapes,
        env.surface,
        min(max(agents, cfg.min_seeds), cfg.max_seeds),
        brush_scale=0.85,
    )
    rows = [(s.x, s.y, clamp(s.strength, 0, 1)) for s in seeds]
    rows += [
        (a.x, a.y, clamp(a.strength, 0, 1))
        for a in build_attractors(ctx.strokes, min(agents, cfg.max_attractors))
    ]
    if not rows:
        logger.debug("physarum: no attractors near (%.1f, %.1f)", near_x, near_y)
        return []
    attractors = AttractorSet(rows)

    pheromone = PheromoneGrid(env.bounds, int(clamp(round(radius / 14), 24, 96)))

    population: list[Agent] = []
    for i in range(agents):
        seed = seeds[i % len(seeds)] if seeds else None
        base = math.atan2(seed.dir[1], seed.dir[0]) if seed else (i / agents) * 2 * math.pi
        angle = base + (noise(i * 0.7, 0.3) - 0.5) * 0.8
        if seed is not None:
            spread = radius * 0.06
            side = (-seed.dir[1], seed.dir[0])
            along_j = (noise(i * 0.31, 2.9) - 0.5) * spread * 0.35
            side_j = (noise(2.9, i * 0.31) - 0.5) * spread * 0.5
            x = seed.x + seed.dir[0] * along_j + side[0] * side_j
            y = seed.y + seed.dir[1] * along_j + side[1] * side_j
        else:
            x = near_x + (noise(i * 0.3, 1.7) - 0.5) * radius * 0.3
            y = near_y + (noise(1.7, i * 0.3) - 0.5) * radius * 0.3
        population.append(Agent(x, y, angle, [(x, y)]))

    sensor_angle = math.radians(cfg.sensor_angle_deg)
    sensor_dist = clamp(radius * 0.09, 10, 90)
    step_size = clamp(radius * 0.012, 2.5, 18)
    kill = radius * cfg.kill_radius

    for step in range(steps):
        pheromone.evaporate(cfg.pheromone_decay)
        for agent in population:
            ahead, left, right = (
                _sense(agent.x, agent.y, agent.angle + offset, sensor_dist, step_size, attractors, env, pheromone)
                for offset in (0.0, -sensor_angle, sensor_angle)
            )
            if left > ahead and left > right:
                agent.angle -= sensor_angle * cfg.turn_rate
            elif right > ahead and right > left:
                agent.angle += sensor_angle * cfg.turn_rate

            heading = (math.cos(agent.angle), math.sin(agent.angle))
            steer = env.strokes.steer_along_stroke(
                agent.x,
                agent.y,
                heading,
                clamp(step_size * 3.2, 8, 44),
                clamp(step_size * 11, 26, 150),
                0.95,
                0.85,
            )
            if steer.info is not None:
                near = clamp(1 - steer.info.dist / (step_size * 9), 0, 1)
                blend = clamp(0.22 + near * 0.53, 0.2, 0.78)
                sx, sy = normalize_vec(steer.x, steer.y, heading)
                hx, hy = normalize_vec(
                    heading[0] * (1 - blend) + sx * blend,
                    heading[1] * (1 - blend) + sy * blend,
                    heading,
                )
                agent.angle = math.atan2(hy, hx)

            agent.angle += (noise(step * 0.11, agent.x * 0.009 + agent.y * 0.007) - 0.5) * 0.22

            nx = agent.x + math.cos(agent.angle) * step_size
            ny = agent.y + math.sin(agent.angle) * step_size
            dx, dy = nx - near_x, ny - near_y
            d = math.hypot(dx, dy)
            if d > kill:
                nx = near_x + dx / d * kill
                ny = near_y + dy / d * kill
                agent.angle += math.pi * 0.58

            sd = env.surface.signed_distance(nx, ny)
            if math.isfinite(sd) and sd < -step_size * 0.7:
                ox, oy = env.surface.normal(nx, ny)
                nx += ox * step_size * 1.05
                ny += oy * step_size * 1.05
                agent.angle += math.pi * 0.62

            local = env.density.get(nx, ny)
            if local > cfg.density_jitter_threshold:
                agent.angle += (noise(nx * 0.012, ny * 0.012 + step * 0.09) - 0.5) * 0.45

            agent.x, agent.y = nx, ny
            agent.trail.append((nx, ny))
            if len(agent.trail) > cfg.max_trail:
                del agent.trail[0]
            pheromone.deposit(nx, ny, 0.34 + local * 0.22)

    fallback = color or ctx.palette_color()
    out: list[Stroke | None] = []
    for agent in population:
        trail = agent.trail
        if len(trail) < 3:
            continue
        for i in range(0, len(trail), cfg.chunk_points):
            seg = trail[i : i + cfg.chunk_points + 1]
            if len(seg) < 2:
                continue
            t = i / len(trail)
            mx, my = seg[len(seg) // 2]
            styled = env.strokes.style_at(mx, my, fallback, trail_width, 0.8, step_size * 14)
            out.append(
                make_stroke(
                    seg,
                    color or styled.color,
                    clamp(trail_width * 0.7 + styled.brush_size * 0.3, 1, 20),
                    clamp((0.34 + t * 0.44) * (0.75 + styled.opacity * 0.25), 0.2, 0.9),
                    "taper",
                )
            )
    logger.debug("physarum: %d agents, %d steps, %d strokes", agents, steps, len(out))
    return out
