"""Hex color helpers. No engine imports."""

from __future__ import annotations

import colorsys

from tendril.utils.math_helpers import clamp

DEFAULT_COLOR = "#ffffff"


def parse_hex(color: str | None) -> tuple[int, int, int] | None:
    """Parse ``#rgb`` / ``#rrggbb`` to (r, g, b). None when unparseable."""
    if not color:
        return None
    color = color.strip().lower()
    if not color.startswith("#"):
        return None
    color = color[1:]
    if len(color) == 3:
        color = color[0] * 2 + color[1] * 2 + color[2] * 2
    if len(color) != 6:
        return None
    try:
        return (int(color[0:2], 16), int(color[2:4], 16), int(color[4:6], 16))
    except ValueError:
        return None


def hex_to_rgb(color: str | None) -> tuple[int, int, int]:
    return parse_hex(color) or (255, 255, 255)


def rgb_to_hex(r: float, g: float, b: float) -> str:
    def channel(v: float) -> int:
        return int(round(clamp(v, 0, 255)))

    return "#{:02x}{:02x}{:02x}".format(channel(r), channel(g), channel(b))


def normalize_hex(color: str | None, fallback: str = DEFAULT_COLOR) -> str:
    """Canonical ``#rrggbb`` or ``fallback``."""
    rgb = parse_hex(color)
    return rgb_to_hex(*rgb) if rgb else fallback


def lerp_color(a: str, b: str, t: float) -> str:
    ra, ga, ba = hex_to_rgb(a)
    rb, gb, bb = hex_to_rgb(b)
    return rgb_to_hex(ra + (rb - ra) * t, ga + (gb - ga) * t, ba + (bb - ba) * t)


def darken(color: str, amount: float) -> str:
    """Scale each channel by (1 - amount)."""
    r, g, b = hex_to_rgb(color)
    k = 1 - clamp(amount, 0.0, 1.0)
    return rgb_to_hex(r * k, g * k, b * k)


def rgb_to_hsl(r: int, g: int, b: int) -> tuple[float, float, float]:
    """(h in degrees, s in percent, l in percent)."""
    h, lum, s = colorsys.rgb_to_hls(r / 255, g / 255, b / 255)
    return (h * 360, s * 100, lum * 100)


def hsl_to_hex(h: float, s: float, lum: float) -> str:
    """Inverse of :func:`rgb_to_hsl`; hue wraps, s and l clamp to [0, 100]."""
    r, g, b = colorsys.hls_to_rgb(
        (h % 360) / 360, clamp(lum, 0, 100) / 100, clamp(s, 0, 100) / 100
    )
    return rgb_to_hex(r * 255, g * 255, b * 255)
