"""Harmonize: continue the spacing pattern of a row of strokes.

Strokes whose centroids lie within ``radius`` are ordered along a dominant
axis (the caller's direction, else the principal axis of the centroids). The
average step between neighbours is then repeated from the furthest stroke.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from tendril.engine.context import NearbyContext
from tendril.engine.registry import Category, ParamSpec, behavior
from tendril.engine.strokes import collect, make_stroke
from tendril.utils.geometry import normalize_vec, principal_axis
from tendril.utils.math_helpers import clamp

logger = logging.getLogger(__name__)


@behavior(
    name="harmonize",
    category=Category.REACTIVE,
    description="Detect a repeating stroke pattern nearby and add the next copies",
    params=[
        ParamSpec("nearX", default=0.0),
        ParamSpec("nearY", default=0.0),
        ParamSpec("radius", default=300.0, min=40, max=3000),
        ParamSpec("count", kind="integer", default=3, min=1, max=10),
        ParamSpec("directionX"),
        ParamSpec("directionY"),
    ],
)
def harmonize(
    ctx: NearbyContext,
    near_x: float = 0.0,
    near_y: float = 0.0,
    radius: float = 300.0,
    count: int = 3,
    direction_x: float | None = None,
    direction_y: float | None = None,
    seed: int | None = None,
):
    members = []
    for entry in ctx.strokes:
        if len(entry.points) < 2:
            continue
        cx, cy = entry.centroid
        if math.hypot(cx - near_x, cy - near_y) <= radius:
            members.append(entry)
    if len(members) < 2:
        logger.debug("harmonize: %d strokes in range, need 2", len(members))
        return []

    centroids = np.array([m.centroid for m in members])
    has_dir = direction_x is not None or direction_y is not None
    if has_dir:
        axis = normalize_vec(direction_x or 0.0, direction_y or 0.0)
    else:
        axis = principal_axis(centroids)

    proj = (centroids[:, 0] - near_x) * axis[0] + (centroids[:, 1] - near_y) * axis[1]
    order = np.argsort(proj, kind="stable")
    centroids = centroids[order]
    proj = proj[order]
    members = [members[i] for i in order]

    steps = np.diff(centroids, axis=0)
    step_x, step_y = (float(v) for v in steps.mean(axis=0))
    if direction_x is not None:
        step_x = direction_x
    if direction_y is not None:
        step_y = direction_y

    if math.hypot(step_x, step_y) < 1e-5:
        spacing = float(np.abs(np.diff(proj)).mean()) or clamp(radius * 0.08, 8, 80)
        step_x, step_y = axis[0] * spacing, axis[1] * spacing

    growth = normalize_vec(step_x, step_y, axis)
    anchor_idx = int(np.argmax(centroids[:, 0] * growth[0] + centroids[:, 1] * growth[1]))
    anchor = members[anchor_idx]

    return collect([
        make_stroke(
            anchor.points + np.array([step_x * i, step_y * i]), anchor.color, anchor.size, anchor.opacity
        )
        for i in range(1, count + 1)
    ])
