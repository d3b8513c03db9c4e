"""Uniform grid hash for 2D neighbor queries."""

from __future__ import annotations

import math
from collections import defaultdict
from typing import Generic, Iterator, TypeVar

T = TypeVar("T")


class SpatialHash(Generic[T]):
    """Buckets items by ``floor(coord / cell_size)``.

    Queries visit only the cells overlapping the search square, so lookups
    never degrade to a scan of every stored item.
    """

    def __init__(self, cell_size: float) -> None:
        self.cell_size = max(1e-6, float(cell_size))
        self._cells: dict[tuple[int, int], list[tuple[float, float, T]]] = defaultdict(list)
        self._count = 0

    def cell_of(self, x: float, y: float) -> tuple[int, int]:
        return (math.floor(x / self.cell_size), math.floor(y / self.cell_size))

    def insert(self, x: float, y: float, item: T) -> None:
        self._cells[self.cell_of(x, y)].append((x, y, item))
        self._count += 1

    def candidates(self, x: float, y: float, radius: float) -> Iterator[tuple[float, float, T]]:
        """Every entry in the cells within ``ceil(radius / cell_size)`` of (x, y)."""
        gx, gy = self.cell_of(x, y)
        reach = max(1, math.ceil(radius / self.cell_size))
        for dx in range(-reach, reach + 1):
            for dy in range(-reach, reach + 1):
                bucket = self._cells.get((gx + dx, gy + dy))
                if bucket:
                    yield from bucket

    def within(self, x: float, y: float, radius: float) -> Iterator[tuple[float, float, T]]:
        r2 = radius * radius
        for px, py, item in self.candidates(x, y, radius):
            if (px - x) ** 2 + (py - y) ** 2 <= r2:
                yield px, py, item

    def any_within(self, x: float, y: float, radius: float, exclude: T | None = None) -> bool:
        """True if an entry other than ``exclude`` lies within ``radius``."""
        for _, _, item in self.within(x, y, radius):
            if exclude is None or item != exclude:
                return True
        return False

    def __len__(self) -> int:
        return self._count
