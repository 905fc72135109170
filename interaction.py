"""
Hover handling shared by the three charts: nearest-point lookup on the
Cartesian charts, tooltip content, and the explicit tooltip state each chart
view owns.
"""

import bisect
from dataclasses import dataclass, field
from typing import List, Optional

from market_math import format_currency, format_percent, format_return


# ============================================================
# NEAREST POINT
# ============================================================

def _date_of(point):
    return point.date


def bisect_dates(series, date, key=_date_of) -> int:
    """Leftmost insertion index of `date` in a date-sorted series."""
    return bisect.bisect_left(series, date, key=key)


def nearest_point_index(series, date, key=_date_of) -> Optional[int]:
    """
    Index of the point the tooltip should show for `date`.

    This is the insertion index clamped into the series, so a date between
    two points resolves to the later one (2000-12-01 between 2000-01-01 and
    2001-01-01 gives 2001-01-01). None for an empty series.
    """
    if not series:
        return None
    i = bisect_dates(series, date, key=key)
    return min(max(i, 0), len(series) - 1)


def point_at_pixel(series, x_scale, pixel_x, key=_date_of):
    """(index, point) under a horizontal pixel position, or None."""
    i = nearest_point_index(series, x_scale.invert(pixel_x), key=key)
    if i is None:
        return None
    return i, series[i]


def pointer_from_hover(hover_data, margin):
    """
    Pointer position relative to the drawing origin from a dcc.Graph
    hoverData payload. The point's bbox is relative to the graph container,
    so the frame margin is subtracted; without a bbox the point's own
    coordinates are used (charts are drawn in pixel space).
    """
    if not hover_data or not hover_data.get("points"):
        return None
    point = hover_data["points"][0]
    bbox = point.get("bbox")
    if bbox:
        x = (bbox["x0"] + bbox["x1"]) / 2 - margin.left
        y = (bbox["y0"] + bbox["y1"]) / 2 - margin.top
        return x, y
    if "x" in point and "y" in point:
        try:
            return float(point["x"]), float(point["y"])
        except (TypeError, ValueError):
            return None
    return None

# ============================================================
# TOOLTIP
# ============================================================

@dataclass(frozen=True)
class TooltipLine:
    label: str
    value: str
    color: Optional[str] = None
    bold: bool = True

    def to_dict(self):
        return {"label": self.label, "value": self.value, "color": self.color, "bold": self.bold}

    @classmethod
    def from_dict(cls, d):
        return cls(d.get("label", ""), d.get("value", ""), d.get("color"), d.get("bold", True))


@dataclass
class TooltipState:
    """
    The one tooltip of a chart view. show() replaces position and content in
    place and hide() clears it, so repeated hovers never stack tooltips.
    """
    visible: bool = False
    x: float = 0.0
    y: float = 0.0
    lines: List[TooltipLine] = field(default_factory=list)

    def show(self, x, y, lines):
        self.visible = True
        self.x, self.y = float(x), float(y)
        self.lines = list(lines)
        return self

    def hide(self):
        self.visible = False
        self.lines = []
        return self

    def bbox(self):
        return {"x0": self.x, "y0": self.y, "x1": self.x, "y1": self.y}

    def props(self):
        """(show, bbox, lines) for the dcc.Tooltip outputs."""
        if not self.visible:
            return False, None, []
        return True, self.bbox(), self.lines


def anchor_position(x, y, margin, offset):
    """Tooltip position in container pixels: drawing-area point + margin + offset."""
    dx, dy = offset
    return x + margin.left + dx, y + margin.top + dy


def return_color(ytd_return):
    if ytd_return is None:
        return None
    return "red" if ytd_return < 0 else "green"


def company_tooltip_lines(record) -> List[TooltipLine]:
    return [
        TooltipLine("Symbol:", record.symbol),
        TooltipLine("Company:", record.name),
        TooltipLine("Weight:", format_percent(record.weight)),
        TooltipLine("Year To Date Price Return:", format_return(record.ytd_return),
                    color=return_color(record.ytd_return)),
    ]


def price_tooltip_lines(point) -> List[TooltipLine]:
    # e.g. "Sat Feb 29 2020" then the index level
    return [
        TooltipLine("", point.date.strftime("%a %b %d %Y"), bold=False),
        TooltipLine("", f"{point.value:.2f}"),
    ]


def investment_tooltip_lines(point) -> List[TooltipLine]:
    return [TooltipLine(f"Investment Value in {point.year.year}:", format_currency(point.value))]
