"""Connect: bridge the two closest endpoints of different strokes."""

from __future__ import annotations

import math

import numpy as np

from tendril.engine.context import NearbyContext, StrokeEntry
from tendril.engine.registry import Category, ParamSpec, behavior
from tendril.engine.strokes import collect, make_stroke
from tendril.models.stroke import Stroke
from tendril.utils.color import lerp_color

STYLES = ("blend", "match-a", "match-b")


def _bridge(
    a: tuple[float, float],
    b: tuple[float, float],
    curve: float,
    src_a: StrokeEntry | None,
    src_b: StrokeEntry | None,
    style: str,
) -> Stroke | None:
    """Cubic bezier from a to b; control points bow to opposite sides."""
    dx, dy = b[0] - a[0], b[1] - a[1]
    dist = math.hypot(dx, dy)
    nx, ny = -dy / (dist or 1), dx / (dist or 1)
    off = dist * curve

    p0 = np.array(a)
    p1 = np.array([a[0] + dx * 0.33 + nx * off, a[1] + dy * 0.33 + ny * off])
    p2 = np.array([a[0] + dx * 0.66 - nx * off, a[1] + dy * 0.66 - ny * off])
    p3 = np.array(b)
    t = np.linspace(0.0, 1.0, max(20, round(dist / 3)) + 1)[:, None]
    mt = 1 - t
    pts = mt**3 * p0 + 3 * mt**2 * t * p1 + 3 * mt * t**2 * p2 + t**3 * p3

    color_a = src_a.color if src_a else "#ffffff"
    color_b = src_b.color if src_b else "#ffffff"
    size_a = src_a.size if src_a else 5.0
    size_b = src_b.size if src_b else 5.0
    opacity = min(src_a.opacity if src_a else 1.0, src_b.opacity if src_b else 1.0)

    if style == "match-a":
        color, size = color_a, size_a
    elif style == "match-b":
        color, size = color_b, size_b
    else:
        color, size = lerp_color(color_a, color_b, 0.5), (size_a + size_b) / 2
    return make_stroke(pts, color, size, opacity)


@behavior(
    name="connect",
    category=Category.STRUCTURAL,
    description="Bridge the two nearest attach points (or stroke ends) of different strokes",
    params=[
        ParamSpec("nearX", default=0.0),
        ParamSpec("nearY", default=0.0),
        ParamSpec("radius", default=500.0, min=1),
        ParamSpec("style", kind="enum", default="blend", options=STYLES),
        ParamSpec("curve", default=0.3, min=0, max=1),
    ],
)
def connect(
    ctx: NearbyContext,
    near_x: float = 0.0,
    near_y: float = 0.0,
    radius: float = 500.0,
    style: str = "blend",
    curve: float = 0.3,
    seed: int | None = None,
):
    def d2(x: float, y: float) -> float:
        return (x - near_x) ** 2 + (y - near_y) ** 2

    r2 = radius * radius
    attach = [ap for ap in ctx.attach_points if d2(ap.x, ap.y) <= r2]
    if len(attach) >= 2:
        attach.sort(key=lambda ap: d2(ap.x, ap.y))
        first = attach[0]
        second = next(
            (ap for ap in attach[1:] if ap.stroke_id != first.stroke_id), attach[1]
        )
        bridge = _bridge(
            (first.x, first.y),
            (second.x, second.y),
            curve,
            ctx.find(first.stroke_id),
            ctx.find(second.stroke_id),
            style,
        )
        return collect([bridge])

    # No attach points: join the end of the nearest stroke to the start of the next
    candidates = [s for s in ctx.strokes if len(s.points) > 0]
    if len(candidates) < 2:
        return []
    candidates.sort(key=lambda s: d2(float(s.points[0, 0]), float(s.points[0, 1])))
    sa, sb = candidates[0], candidates[1]
    a = (float(sa.points[-1, 0]), float(sa.points[-1, 1]))
    b = (float(sb.points[0, 0]), float(sb.points[0, 1]))
    return collect([_bridge(a, b, curve, sa, sb, style)])
