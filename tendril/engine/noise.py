"""Seeded 2D value noise and random streams.

Every stochastic term in a behavior call draws from one seed, so a call is
reproducible given its input snapshot, parameters and seed.
"""

from __future__ import annotations

import math

import numpy as np

from tendril.config import settings
from tendril.utils.math_helpers import lerp, smoothstep

_TABLE_SIZE = 256
_MASK = _TABLE_SIZE - 1


def resolve_seed(seed: int | None) -> int:
    return abs(int(settings.noise_seed if seed is None else seed))


class ValueNoise:
    """Lattice value noise in [0, 1] with smoothstep interpolation.

    Lattice values come from a seeded permutation table, so the field repeats
    every 256 units along each axis.
    """

    def __init__(self, seed: int = 0) -> None:
        rng = np.random.default_rng(seed)
        perm = rng.permutation(_TABLE_SIZE)
        self._perm = [int(p) for p in np.concatenate([perm, perm])]
        self._values = [float(v) for v in rng.random(_TABLE_SIZE)]

    def _lattice(self, ix: int, iy: int) -> float:
        return self._values[self._perm[(self._perm[ix & _MASK] + iy) & _MASK]]

    def __call__(self, x: float, y: float) -> float:
        if not (math.isfinite(x) and math.isfinite(y)):
            return 0.5
        xi = math.floor(x)
        yi = math.floor(y)
        u = smoothstep(x - xi)
        v = smoothstep(y - yi)

        c00 = self._lattice(xi, yi)
        c10 = self._lattice(xi + 1, yi)
        c01 = self._lattice(xi, yi + 1)
        c11 = self._lattice(xi + 1, yi + 1)
        return lerp(lerp(c00, c10, u), lerp(c01, c11, u), v)

    def signed(self, x: float, y: float) -> float:
        """Noise remapped to [-1, 1]."""
        return self(x, y) * 2.0 - 1.0

    def curl(self, x: float, y: float, eps: float = 0.5) -> tuple[float, float]:
        """Divergence-free direction from the noise field's rotated gradient."""
        dx = (self(x + eps, y) - self(x - eps, y)) / (2 * eps)
        dy = (self(x, y + eps) - self(x, y - eps)) / (2 * eps)
        return (dy, -dx)


class Randomness:
    """Noise field plus a uniform random stream, both derived from one seed."""

    def __init__(self, seed: int | None = None) -> None:
        self.seed = resolve_seed(seed)
        self.noise = ValueNoise(self.seed)
        self.rng = np.random.default_rng(self.seed + 1)

    def random(self) -> float:
        return float(self.rng.random())

    def uniform(self, lo: float, hi: float) -> float:
        return float(self.rng.uniform(lo, hi))
