"""Contour: light-aware hatching that follows a stroke's form.

Each resampled point is lit by the dot product of its path normal with the
light direction. Hatch marks run across the path, packed densely where the
normal faces away from the light and thinning out (or skipped) where it faces
toward it. Extra layers rotate the marks: a slight fan for ``hatch``, an
orthogonal and diagonal pass for ``crosshatch``.
"""

from __future__ import annotations

import math

import numpy as np

from tendril.behaviors.common import resolve_source
from tendril.engine.context import NearbyContext
from tendril.engine.registry import Category, ParamSpec, behavior
from tendril.engine.strokes import collect, make_stroke
from tendril.utils.color import darken, lerp_color
from tendril.utils.geometry import arc_lengths, normals, path_length, resample_path, tangents
from tendril.utils.math_helpers import clamp

HATCH_SEGMENTS = 6

# (spacing base, spacing span, skip threshold above the first layer, layer angles)
_STYLES = {
    "hatch": (5.0, 18.0, 0.86, (0.0, math.pi / 8, -math.pi / 8)),
    "crosshatch": (6.0, 14.0, 0.75, (0.0, math.pi / 2, math.pi / 4)),
}
# First layer skips only the most brightly lit points
_FIRST_LAYER_SKIP = 0.92


def _mark_length(size: float, style: str, layer: int) -> float:
    if style == "crosshatch":
        return size * (2 - layer * 0.18)
    return size * (2.15 - layer * 0.08)


@behavior(
    name="contour",
    category=Category.SHADING,
    description="Form-following hatching, denser on the side facing away from the light",
    params=[
        ParamSpec("source", kind="string", required=True, aliases=("from",)),
        ParamSpec("lightAngle", default=315.0, description="Degrees, standard math convention"),
        ParamSpec("style", kind="enum", default="hatch", options=tuple(_STYLES)),
        ParamSpec("layers", kind="integer", default=1, min=1, max=3),
        ParamSpec("intensity", default=0.7, min=0, max=1),
    ],
)
def contour(
    ctx: NearbyContext,
    source: str | None = None,
    light_angle: float = 315.0,
    style: str = "hatch",
    layers: int = 1,
    intensity: float = 0.7,
    seed: int | None = None,
):
    src = resolve_source(ctx, source)
    if src is None:
        return []
    total = path_length(src.points)
    if total < 5:
        return []

    spacing_base, spacing_span, layer_skip, layer_angles = _STYLES[style]
    light = np.array([math.cos(math.radians(light_angle)), math.sin(math.radians(light_angle))])
    dark = darken(src.color, 0.5)

    sample_spacing = min(10.0, total / 8)
    path = resample_path(src.points, max(10, int(total // sample_spacing)))
    dist = arc_lengths(path)
    lit_all = (np.clip(normals(path) @ light, -1, 1) + 1) / 2
    tan = tangents(path)
    heading = np.arctan2(tan[:, 1], tan[:, 0])

    out = []
    for layer in range(layers):
        half_turn = math.pi / 2 + layer_angles[layer]
        next_at = 0.0
        for i in range(len(path)):
            if dist[i] < next_at:
                continue
            lit = float(lit_all[i])
            next_at = dist[i] + spacing_base + lit * intensity * spacing_span
            if lit > (_FIRST_LAYER_SKIP if layer == 0 else layer_skip):
                continue

            shade = 1 - lit
            a = heading[i] + half_turn
            length = _mark_length(src.size, style, layer)
            offsets = np.linspace(-length / 2, length / 2, HATCH_SEGMENTS + 1)[:, None]
            mark = path[i] + offsets * np.array([math.cos(a), math.sin(a)])
            out.append(
                make_stroke(
                    mark,
                    lerp_color(src.color, dark, shade * intensity),
                    max(2.0, src.size * 0.4 * (0.5 + shade * 0.5)),
                    clamp(0.4 + shade * intensity * 0.5, 0.2, 0.9),
                )
            )
    return collect(out)
