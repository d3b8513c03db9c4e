"""Streamlines pulled toward attractors and bent along existing geometry."""

from __future__ import annotations

import logging
import math
from collections import defaultdict

from tendril.engine.config import FlowConfig, SurfaceConfig
from tendril.engine.context import NearbyContext
from tendril.engine.noise import ValueNoise
from tendril.engine.strokes import split_into_strokes
from tendril.fields.seeds import build_attractors, build_surface_seeds
from tendril.growth.environment import AttractorSet, build_environment
from tendril.models.stroke import Stroke
from tendril.utils.color import lerp_color
from tendril.utils.math_helpers import clamp

logger = logging.getLogger(__name__)


def run_attractor_flow(
    ctx: NearbyContext,
    near_x: float,
    near_y: float,
    radius: float,
    lines: int,
    steps: int,
    color: str | None,
    brush_size: float | None,
    noise: ValueNoise,
    config: FlowConfig | None = None,
    surface_config: SurfaceConfig | None = None,
) -> list[Stroke | None]:
    cfg = config or FlowConfig()
    if ctx.is_empty:
        return []

    env = build_environment(
        ctx,
        near_x,
        near_y,
        radius,
        surface_resolution=radius / 3,
        field_spacing=clamp(radius / 28, 6, 22),
        config=surface_config,
    )
    seeds = build_surface_seeds(
        ctx,
        near_x,
        near_y,
        radius,
        env.shapes,
        env.surface,
        min(lines * 2, cfg.max_seeds),
        brush_scale=0.78,
    )
    rows = [(s.x, s.y, clamp(s.strength, 0, 1)) for s in seeds]
    rows += [(a.x, a.y, clamp(a.strength, 0, 1)) for a in build_attractors(ctx.strokes, cfg.max_attractors)]
    if not rows:
        return []
    attractors = AttractorSet(rows)
    ax, ay, strength = attractors.xy[:, 0], attractors.xy[:, 1], attractors.strength

    step = clamp(radius * 0.017, 2.4, 24)
    visit_scale = max(4.0, step * 1.8)
    kill2 = radius * radius * cfg.kill_radius_sq
    base_color = color or ctx.palette_color()
    base_size = brush_size or 3.0
    surface = env.surface

    out: list[Stroke | None] = []
    for i in range(lines):
        seed = seeds[i % len(seeds)] if seeds else None
        if seed is not None:
            jitter = (noise(i * 0.73, 0.41) - 0.5) * step
            x = seed.x + seed.dir[0] * (2 + jitter)
            y = seed.y + seed.dir[1] * (2 + jitter)
            hx, hy = seed.dir
        else:
            start = (i / lines) * 2 * math.pi
            r0 = radius * (0.2 + noise(i * 0.7, 0.5) * 0.3)
            x = near_x + math.cos(start) * r0
            y = near_y + math.sin(start) * r0
            hx, hy = math.cos(start), math.sin(start)

        line_color = color or (seed.color if seed else base_color)
        line_size = brush_size or clamp(seed.brush_size * 0.85 if seed else base_size, 1, 20)
        pts = [(x, y)]
        visits: dict[tuple[int, int], int] = defaultdict(int)

        for s in range(steps):
            fx = hx * cfg.momentum
            fy = hy * cfg.momentum

            dx = ax - x
            dy = ay - y
            d2 = dx * dx + dy * dy
            ok = d2 >= 1
            if ok.any():
                d = d2[ok] ** 0.5
                w = strength[ok] / (1 + d * 0.012)
                fx += float((dx[ok] / d * w).sum())
                fy += float((dy[ok] / d * w).sum())

            fx -= (env.density.get(x + 5, y) - env.density.get(x - 5, y)) * 3
            fy -= (env.density.get(x, y + 5) - env.density.get(x, y - 5)) * 3

            sd = surface.signed_distance(x, y)
            if math.isfinite(sd):
                nx, ny = surface.normal(x, y)
                tx, ty = -ny, nx
                near_w = clamp(1 - abs(sd) / (step * 8), 0, 1)
                if near_w > 0:
                    sign = 1 if fx * tx + fy * ty >= 0 else -1
                    blend = near_w * 0.72
                    fx = fx * (1 - blend) + tx * sign * blend
                    fy = fy * (1 - blend) + ty * sign * blend
                if sd < 0:
                    push = clamp(-sd / (step * 2.5), 0, 1) * 1.25
                    fx += nx * push
                    fy += ny * push

            steer = env.strokes.steer_along_stroke(
                x, y, (hx, hy), clamp(step * 3.4, 8, 46), clamp(step * 12, 24, 170), 1.05, 0.95
            )
            if steer.info is not None:
                near = clamp(1 - steer.info.dist / (step * 11), 0, 1)
                fx += steer.x * (0.34 + near * 0.92)
                fy += steer.y * (0.34 + near * 0.92)

            curl = noise(x * cfg.curl_scale, y * cfg.curl_scale) * 2 * math.pi
            fx += math.cos(curl) * cfg.curl_weight
            fy += math.sin(curl) * cfg.curl_weight

            f_len = math.hypot(fx, fy)
            if f_len < 1e-6:
                break
            hx, hy = fx / f_len, fy / f_len
            x += hx * step
            y += hy * step

            cell = (math.floor(x / visit_scale), math.floor(y / visit_scale))
            visits[cell] += 1
            if visits[cell] > cfg.max_cell_visits and s > 8:
                break
            if (x - near_x) ** 2 + (y - near_y) ** 2 > kill2:
                break
            if surface.signed_distance(x, y) < -step * 0.8:
                nx, ny = surface.normal(x, y)
                x += nx * step * 0.95
                y += ny * step * 0.95
            pts.append((x, y))

        if len(pts) < 3:
            continue
        seed_strength = clamp(seed.strength, 0, 1) if seed else 0.5
        mx, my = pts[len(pts) // 2]
        styled = env.strokes.style_at(mx, my, line_color, line_size, 0.85, step * 15)
        draw_color = line_color if color else lerp_color(line_color, styled.color, 0.45)
        draw_size = line_size if brush_size else clamp(line_size * 0.65 + styled.brush_size * 0.35, 1, 20)
        opacity = clamp(
            (0.34 + seed_strength * 0.42 + noise(i * 1.3, 0.7) * 0.16) * (0.78 + styled.opacity * 0.24),
            0.22,
            0.92,
        )
        out.extend(split_into_strokes(pts, draw_color, draw_size, opacity, "taper"))

    logger.debug("attractorFlow: %d lines, %d strokes", lines, len(out))
    return out
