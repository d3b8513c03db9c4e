"""Output stroke construction: pressure profiles, finiteness filtering, chunking."""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray

from tendril.config import settings
from tendril.models.stroke import PRESSURE_STYLES, Brush, Point, Stroke
from tendril.utils.color import normalize_hex
from tendril.utils.geometry import as_points
from tendril.utils.math_helpers import clamp

_MIN_SIZE = 0.5
_MIN_OPACITY = 0.05
_COORD_DECIMALS = 2
_PULSE_CYCLES = 3


def pressure_for_style(t: float, style: str) -> float:
    """Pressure at normalized progress ``t`` in [0, 1] along the stroke."""
    if style == "flat":
        return 1.0
    if style == "taper":
        return clamp(1.0 - 0.85 * t, 0.15, 1.0)
    if style == "taperBoth":
        return clamp(0.15 + 0.85 * math.sin(math.pi * t), 0.15, 1.0)
    if style == "pulse":
        return 0.65 + 0.35 * math.sin(2 * math.pi * _PULSE_CYCLES * t)
    return 0.7 + 0.3 * math.sin(math.pi * t)


def _pressures(n: int, style: str) -> list[float]:
    if n <= 1:
        return [pressure_for_style(0.0, style)] * n
    return [round(pressure_for_style(i / (n - 1), style), 3) for i in range(n)]


def make_stroke(
    points: NDArray[np.float64] | list,
    color: str,
    size: float,
    opacity: float,
    pressure_style: str = "default",
) -> Stroke | None:
    """Build one output stroke. None when fewer than one finite point survives."""
    pts = as_points(points)
    if len(pts) > 0:
        pts = pts[np.all(np.isfinite(pts), axis=1)]
    if len(pts) == 0:
        return None

    style = pressure_style if pressure_style in PRESSURE_STYLES else "default"
    pts = np.round(pts, _COORD_DECIMALS)
    pressures = _pressures(len(pts), style)
    size = float(size) if math.isfinite(size) else _MIN_SIZE
    opacity = float(opacity) if math.isfinite(opacity) else 1.0
    return Stroke(
        points=[
            Point(x=float(x), y=float(y), pressure=p) for (x, y), p in zip(pts, pressures)
        ],
        brush=Brush(
            color=normalize_hex(color),
            size=round(max(_MIN_SIZE, size), 2),
            opacity=round(clamp(opacity, _MIN_OPACITY, 1.0), 3),
            pressure_style=style,
        ),
    )


def split_into_strokes(
    points: NDArray[np.float64] | list,
    color: str,
    size: float,
    opacity: float,
    pressure_style: str = "default",
    max_points: int | None = None,
) -> list[Stroke]:
    """Chunk a long polyline into consecutive strokes sharing one point at each seam."""
    pts = as_points(points)
    limit = max(2, max_points or settings.max_points_per_stroke)
    if len(pts) <= limit:
        stroke = make_stroke(pts, color, size, opacity, pressure_style)
        return [stroke] if stroke is not None else []

    out: list[Stroke] = []
    start = 0
    while start < len(pts) - 1:
        chunk = pts[start : start + limit]
        stroke = make_stroke(chunk, color, size, opacity, pressure_style)
        if stroke is not None:
            out.append(stroke)
        start += limit - 1
    return out


def collect(strokes: list[Stroke | None]) -> list[Stroke]:
    """Drop ``None`` results and cap the total output count."""
    out = [s for s in strokes if s is not None]
    return out[: settings.max_output_strokes]
