"""NearbyContext: the read-only per-call view of existing canvas geometry.

Built once from a :class:`NearbySnapshot` and passed explicitly to every
behavior. Each stroke gets one canonical id at ingestion plus an alias table
covering every id-like field it carried, so lookups never re-scan raw fields.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any

import numpy as np
from numpy.typing import NDArray
from scipy.spatial import cKDTree

from tendril.models.stroke import AttachPoint, NearbySnapshot
from tendril.utils.color import normalize_hex
from tendril.utils.geometry import bbox, centroid, path_length

logger = logging.getLogger(__name__)

Bounds = tuple[float, float, float, float]

_QUOTES = "'\""
_DELIMITERS = (":", "/", "|", "@", "#")
_CO_ID_RE = re.compile(r"^co[-_]?(\d+)$")
# Shorter queries match too many qualified ids to be trusted
_MIN_FUZZY_QUERY = 3


def normalize_stroke_id(value: Any) -> str | None:
    """Trimmed, lower-cased id or None."""
    if value is None:
        return None
    text = str(value).strip()
    return text.lower() or None


def id_aliases(value: Any) -> list[str]:
    """Every spelling an id may be referred to by, canonical form first."""
    norm = normalize_stroke_id(value)
    if not norm:
        return []

    aliases: list[str] = [norm]
    unquoted = norm.strip(_QUOTES)
    aliases.append(unquoted)

    for delim in _DELIMITERS:
        if delim in unquoted:
            parts = [p.strip() for p in unquoted.split(delim) if p.strip()]
            if parts:
                aliases.append(parts[0])
                aliases.append(parts[-1])

    if unquoted.isdigit():
        aliases.append(str(int(unquoted)))
    co = _CO_ID_RE.match(unquoted)
    if co:
        n = co.group(1)
        aliases.extend([n, f"co-{n}", f"co_{n}"])

    return list(dict.fromkeys(a for a in aliases if a))


@dataclass
class StrokeEntry:
    """One ingested stroke."""

    id: str
    index: int
    points: NDArray[np.float64]
    color: str
    size: float
    opacity: float
    pressure_style: str = "default"
    raw_id: str | None = None
    aliases: frozenset[str] = frozenset()

    @property
    def bbox(self) -> Bounds:
        return bbox(self.points)

    @property
    def centroid(self) -> tuple[float, float]:
        return centroid(self.points)

    @property
    def length(self) -> float:
        return path_length(self.points)

    def closing_gap(self) -> float:
        if len(self.points) < 2:
            return float("inf")
        return float(np.hypot(*(self.points[-1] - self.points[0])))

    def touches(self, bounds: Bounds) -> bool:
        if len(self.points) == 0:
            return False
        x0, y0, x1, y1 = self.bbox
        return not (x1 < bounds[0] or x0 > bounds[2] or y1 < bounds[1] or y0 > bounds[3])


@dataclass
class NearbyContext:
    """Immutable borrow of the caller's snapshot for one behavior call."""

    strokes: list[StrokeEntry] = field(default_factory=list)
    attach_points: list[AttachPoint] = field(default_factory=list)
    topology: dict[str, Any] | None = None
    palette: list[str] = field(default_factory=list)
    _alias_index: dict[str, list[int]] = field(default_factory=dict, init=False, repr=False)
    _tree: cKDTree | None = field(default=None, init=False, repr=False)
    _owners: NDArray[np.int64] = field(
        default_factory=lambda: np.zeros(0, dtype=np.int64), init=False, repr=False
    )

    def __post_init__(self) -> None:
        for pos, entry in enumerate(self.strokes):
            for alias in entry.aliases:
                self._alias_index.setdefault(alias, []).append(pos)

        chunks = [s.points for s in self.strokes if len(s.points) > 0]
        if chunks:
            owners = [
                np.full(len(s.points), pos) for pos, s in enumerate(self.strokes) if len(s.points) > 0
            ]
            self._tree = cKDTree(np.vstack(chunks))
            self._owners = np.concatenate(owners)

    # == Construction ==

    @classmethod
    def from_snapshot(cls, snapshot: NearbySnapshot | dict | None) -> NearbyContext:
        if snapshot is None:
            return cls()
        if isinstance(snapshot, dict):
            snapshot = NearbySnapshot.model_validate(snapshot)

        entries: list[StrokeEntry] = []
        seen: set[str] = set()
        for index, stroke in enumerate(snapshot.strokes):
            pts = np.array([(p.x, p.y) for p in stroke.points if p.is_finite], dtype=np.float64)
            pts = pts.reshape(-1, 2)
            pts.setflags(write=False)

            canonical = normalize_stroke_id(stroke.id) or f"stroke-{index}"
            if canonical in seen:
                logger.debug("Duplicate stroke id %r at index %d", canonical, index)
            seen.add(canonical)

            aliases: set[str] = set(id_aliases(canonical))
            for legacy in stroke.legacy_ids:
                aliases.update(id_aliases(legacy))

            entries.append(
                StrokeEntry(
                    id=canonical,
                    index=index,
                    points=pts,
                    color=stroke.brush.color,
                    size=stroke.brush.size,
                    opacity=stroke.brush.opacity,
                    pressure_style=stroke.brush.pressure_style,
                    raw_id=stroke.id,
                    aliases=frozenset(aliases),
                )
            )

        return cls(
            strokes=entries,
            attach_points=list(snapshot.attach_points),
            topology=snapshot.topology or None,
            palette=list(snapshot.summary.palette),
        )

    # == Queries ==

    @property
    def is_empty(self) -> bool:
        return not self.strokes

    def find_by_id(self, stroke_id: Any) -> StrokeEntry | None:
        """Resolve a reference: raw id, then alias table, then unique prefix/suffix."""
        if stroke_id is None or not self.strokes:
            return None
        query_raw = str(stroke_id)
        for entry in self.strokes:
            if entry.raw_id is not None and entry.raw_id == query_raw:
                return entry

        query = id_aliases(stroke_id)
        if not query:
            return None

        exact: set[int] = set()
        for alias in query:
            exact.update(self._alias_index.get(alias, ()))
        if exact:
            # Deterministic tie-break: shortest canonical id, then draw order
            best = min(exact, key=lambda pos: (len(self.strokes[pos].id), pos))
            return self.strokes[best]

        fuzzy = [
            entry
            for entry in self.strokes
            if any(
                len(q) >= _MIN_FUZZY_QUERY
                and any(c.startswith(q) or c.endswith(q) for c in entry.aliases)
                for q in query
            )
        ]
        if len(fuzzy) == 1:
            return fuzzy[0]
        if fuzzy:
            logger.debug("Ambiguous stroke reference %r (%d candidates)", stroke_id, len(fuzzy))
        return None

    def find_nearest(self, x: float, y: float) -> StrokeEntry | None:
        """Stroke owning the point closest to (x, y)."""
        if self._tree is None or not (np.isfinite(x) and np.isfinite(y)):
            return None
        _, idx = self._tree.query([x, y])
        return self.strokes[int(self._owners[int(idx)])]

    def find(self, ref: Any) -> StrokeEntry | None:
        """Id-like references resolve by id, (x, y) pairs by proximity."""
        if isinstance(ref, (str, int)) and not isinstance(ref, bool):
            return self.find_by_id(ref)
        if isinstance(ref, (tuple, list)) and len(ref) == 2:
            return self.find_nearest(float(ref[0]), float(ref[1]))
        if isinstance(ref, dict) and "x" in ref and "y" in ref:
            return self.find_nearest(float(ref["x"]), float(ref["y"]))
        return None

    def strokes_in_bounds(self, bounds: Bounds) -> list[StrokeEntry]:
        return [s for s in self.strokes if s.touches(bounds)]

    def palette_color(self, default: str = "#ffffff") -> str:
        return normalize_hex(self.palette[0], default) if self.palette else default


def square_bounds(x: float, y: float, radius: float) -> Bounds:
    return (x - radius, y - radius, x + radius, y + radius)
