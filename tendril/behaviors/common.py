"""Helpers shared by behaviors that transform one source stroke."""

from __future__ import annotations

import logging
import re
from typing import Any

from tendril.engine.context import NearbyContext, StrokeEntry
from tendril.utils.geometry import tangent_at

logger = logging.getLogger(__name__)

ENDPOINTS = ("start", "end")

# "x,y" references resolve to the nearest stroke
_COORD_RE = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*,\s*(-?\d+(?:\.\d+)?)\s*$")


def resolve_source(ctx: NearbyContext, source: Any, min_points: int = 2) -> StrokeEntry | None:
    """Source stroke by id or ``"x,y"`` coordinate. None when unresolved or too short."""
    if source is None:
        return None
    match = _COORD_RE.match(str(source))
    if match:
        entry = ctx.find_nearest(float(match.group(1)), float(match.group(2)))
    else:
        entry = ctx.find(source)
    if entry is None:
        logger.debug("Unresolved source stroke %r", source)
        return None
    if len(entry.points) < min_points:
        logger.debug("Source stroke %s has %d points", entry.id, len(entry.points))
        return None
    return entry


def endpoint_frame(entry: StrokeEntry, endpoint: str) -> tuple[float, float, float, float]:
    """(x, y, dx, dy): endpoint position and the outward unit direction there."""
    pts = entry.points
    if endpoint == "start":
        tx, ty = tangent_at(pts, 0)
        return float(pts[0, 0]), float(pts[0, 1]), -tx, -ty
    tx, ty = tangent_at(pts, len(pts) - 1)
    return float(pts[-1, 0]), float(pts[-1, 1]), tx, ty


def parse_id_list(value: Any) -> list[str]:
    """Ids from a comma-separated string; list literals and quotes are tolerated."""
    if value is None:
        return []
    items = value if isinstance(value, (list, tuple)) else str(value).strip("[] ").split(",")
    ids = [str(item).strip().strip("'\"").strip() for item in items]
    return [i for i in ids if i]
