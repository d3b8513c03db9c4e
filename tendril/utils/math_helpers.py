"""Math helpers: clamping, interpolation, easing. No engine imports."""

from __future__ import annotations


def clamp(value: float, lo: float, hi: float) -> float:
    return lo if value < lo else hi if value > hi else value


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def smoothstep(t: float) -> float:
    """Hermite 3t² - 2t³ on [0, 1]."""
    return t * t * (3.0 - 2.0 * t)


EASINGS = ("linear", "ease-in", "ease-out", "ease-in-out")


def apply_easing(t: float, easing: str) -> float:
    """Quadratic easing curves. Unknown names fall back to linear."""
    if easing == "ease-in":
        return t * t
    if easing == "ease-out":
        return t * (2 - t)
    if easing == "ease-in-out":
        return 2 * t * t if t < 0.5 else -1 + (4 - 2 * t) * t
    return t
