import math

import numpy as np
from plotly.colors import find_intermediate_color, hex_to_rgb, label_rgb, unlabel_rgb

import config

# Named colors used by the config palette
NAMED_COLORS = {
    "red": (255, 0, 0),
    "white": (255, 255, 255),
    "green": (0, 128, 0),
    "black": (0, 0, 0),
}


def to_rgb_tuple(color):
    """'red' / '#ff0000' / 'rgb(255, 0, 0)' -> (255, 0, 0)"""
    if isinstance(color, tuple):
        return color
    color = str(color).strip().lower()
    if color in NAMED_COLORS:
        return NAMED_COLORS[color]
    if color.startswith("#"):
        return hex_to_rgb(color)
    if color.startswith("rgb"):
        return tuple(int(round(c)) for c in unlabel_rgb(color))
    raise ValueError(f"Unsupported color: {color}")


def _round_channel(c):
    return int(min(255, max(0, math.floor(c + 0.5))))


def _is_number(value):
    if value is None or isinstance(value, bool):
        return False
    try:
        return math.isfinite(float(value))
    except (TypeError, ValueError):
        return False

# ============================================================
# DIVERGING SCALE
# ============================================================

class DivergingColorScale:
    """
    Three-stop linear color scale over (low, neutral, high).

    Values below `low` or above `high` clamp to the end colors. Output is an
    'rgb(r, g, b)' string; None or NaN input has no color and returns None.
    """

    def __init__(self, domain, colors=None):
        low, mid, high = (float(d) for d in domain)
        self.domain = (low, mid, high)
        self.colors = tuple(colors or (config.NEGATIVE_COLOR, config.NEUTRAL_COLOR, config.POSITIVE_COLOR))
        self._stops = [to_rgb_tuple(c) for c in self.colors]

    @classmethod
    def from_values(cls, values, colors=None):
        """
        Domain (min, 0, max) over the finite values. The zero stop is kept
        inside the domain, so all-positive data only runs neutral -> positive.
        """
        finite = [float(v) for v in values if _is_number(v)]
        if not finite:
            return cls((0.0, 0.0, 0.0), colors)
        return cls((min(min(finite), 0.0), 0.0, max(max(finite), 0.0)), colors)

    @property
    def extent(self):
        return self.domain[0], self.domain[2]

    def rgb(self, value):
        low, mid, high = self.domain
        v = min(max(float(value), low), high)
        if v <= mid:
            t = (v - low) / (mid - low) if mid > low else 1.0
            a, b = self._stops[0], self._stops[1]
        else:
            t = (v - mid) / (high - mid)
            a, b = self._stops[1], self._stops[2]
        mixed = find_intermediate_color(a, b, t, colortype="tuple")
        return tuple(_round_channel(c) for c in mixed)

    def __call__(self, value):
        if not _is_number(value):
            return None
        return label_rgb(self.rgb(value))

    def __repr__(self):
        return f"DivergingColorScale(domain={self.domain}, colors={self.colors})"

# ============================================================
# CATEGORICAL + RECORD COLORS
# ============================================================

def categorical_color(index, palette=None):
    palette = palette or config.CATEGORICAL_PALETTE
    return palette[index % len(palette)]


def color_for_record(record, index, scale, palette=None):
    """Return-based color when the record has a return, else the palette color for its index."""
    color = scale(record.ytd_return) if scale is not None else None
    return color if color is not None else categorical_color(index, palette)

# ============================================================
# LEGEND
# ============================================================

def legend_ticks(scale, count=5):
    """`count` evenly spaced values from the scale's low to high end."""
    low, high = scale.extent
    if low == high:
        return [low]
    return [float(v) for v in np.linspace(low, high, count)]


def format_tick(value):
    """12.5 -> '12.5%', 10.0 -> '10%'"""
    value = round(float(value), 1) + 0.0
    return f"{value:g}%"
