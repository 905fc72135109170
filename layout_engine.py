"""
Screen-space geometry for the three charts.

Two layouts live here:

* a squarified treemap over a flat, weight-sorted list of items (no tree is
  built; the list itself is the single level under an implicit root), and
* continuous time / linear scales that map (date, value) pairs onto a chart's
  drawing area, with vertical pixel 0 at the top.

Everything is rebuilt from scratch on every render. Empty input never raises:
it yields no cells, or a degenerate scale that maps to the middle of its range.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple

import squarify

EPOCH = datetime(1970, 1, 1)

# ============================================================
# FRAMES
# ============================================================

@dataclass(frozen=True)
class Margin:
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    left: float = 0.0


@dataclass(frozen=True)
class ChartFrame:
    """Outer canvas size plus the margins around the drawing area."""
    width: float
    height: float
    margin: Margin = field(default_factory=Margin)

    @property
    def inner_width(self) -> float:
        return max(0.0, self.width - self.margin.left - self.margin.right)

    @property
    def inner_height(self) -> float:
        return max(0.0, self.height - self.margin.top - self.margin.bottom)

    @classmethod
    def from_config(cls, values) -> "ChartFrame":
        """Build from a config tuple: (width, height, (top, right, bottom, left))."""
        width, height, (top, right, bottom, left) = values
        return cls(width, height, Margin(top, right, bottom, left))

# ============================================================
# TREEMAP
# ============================================================

@dataclass(frozen=True)
class Box:
    x0: float
    y0: float
    x1: float
    y1: float

    @property
    def width(self) -> float:
        return self.x1 - self.x0

    @property
    def height(self) -> float:
        return self.y1 - self.y0

    @property
    def area(self) -> float:
        return self.width * self.height


@dataclass(frozen=True)
class TreemapCell:
    """A positioned leaf. `tile` is the unpadded area the partition allotted."""
    index: int
    item: Any
    weight: float
    x0: float
    y0: float
    x1: float
    y1: float
    tile: Box

    @property
    def width(self) -> float:
        return self.x1 - self.x0

    @property
    def height(self) -> float:
        return self.y1 - self.y0

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x0 + self.x1) / 2, (self.y0 + self.y1) / 2

    def contains(self, x: float, y: float) -> bool:
        return self.x0 <= x <= self.x1 and self.y0 <= y <= self.y1

    def label(self, text: str, min_width: float = 30) -> str:
        """Full text, or a "." placeholder when the cell is too narrow for it."""
        return "." if self.width < min_width else text


def _box(rect) -> Box:
    return Box(rect["x"], rect["y"], rect["x"] + rect["dx"], rect["y"] + rect["dy"])


def partition(values: Sequence[float], x0: float, y0: float, x1: float, y1: float) -> List[Box]:
    """
    Partition the rectangle into one box per value, in order, with each box's
    area proportional to its value (squarified rows via `squarify`).

    Zero values get a zero-area box at the far corner.
    """
    values = [max(0.0, float(v)) for v in values]
    empty = Box(x1, y1, x1, y1)
    out: List[Box] = [empty] * len(values)

    positive = [i for i, v in enumerate(values) if v > 0]
    dx, dy = x1 - x0, y1 - y0
    if not positive or dx <= 0 or dy <= 0:
        return out

    sizes = squarify.normalize_sizes([values[i] for i in positive], dx, dy)
    for i, rect in zip(positive, squarify.squarify(sizes, x0, y0, dx, dy)):
        out[i] = _box(rect)
    return out


def _shrink(x0, y0, x1, y1, p):
    x0, y0, x1, y1 = x0 + p, y0 + p, x1 - p, y1 - p
    if x1 < x0:
        x0 = x1 = (x0 + x1) / 2
    if y1 < y0:
        y0 = y1 = (y0 + y1) / 2
    return x0, y0, x1, y1


def treemap_layout(items: Iterable[Any], weight: Callable[[Any], float],
                   width: float, height: float, padding: float = 2) -> List[TreemapCell]:
    """
    Lay out `items` as treemap leaves on a width x height canvas.

    Items are ordered by descending weight (equal weights keep input order)
    and partitioned with `partition`. `padding` is both the outer margin and
    the gap between neighbouring cells: the partition runs inside a
    padding/2 inset and every leaf is then shrunk by padding/2 on each side.
    """
    ordered = sorted(items, key=weight, reverse=True)
    if not ordered:
        return []

    weights = [max(0.0, float(weight(item))) for item in ordered]
    half = padding / 2
    tx0, ty0, tx1, ty1 = _shrink(0.0, 0.0, float(width), float(height), padding - half)
    tiles = partition(weights, tx0, ty0, tx1, ty1)

    cells = []
    for i, (item, w, tile) in enumerate(zip(ordered, weights, tiles)):
        x0, y0, x1, y1 = _shrink(tile.x0, tile.y0, tile.x1, tile.y1, half)
        cells.append(TreemapCell(index=i, item=item, weight=w,
                                 x0=x0, y0=y0, x1=x1, y1=y1, tile=tile))
    return cells


def cell_at(cells: Sequence[TreemapCell], x: float, y: float) -> Optional[TreemapCell]:
    """The cell whose rectangle contains the pixel, if any."""
    for cell in cells:
        if cell.contains(x, y):
            return cell
    return None

# ============================================================
# CONTINUOUS SCALES
# ============================================================

def _tick_step(start: float, stop: float, count: int) -> float:
    span = stop - start
    if span <= 0 or count <= 0:
        return 0.0
    raw = span / count
    step = 10 ** math.floor(math.log10(raw))
    error = raw / step
    if error >= math.sqrt(50):
        step *= 10
    elif error >= math.sqrt(10):
        step *= 5
    elif error >= math.sqrt(2):
        step *= 2
    return step


class LinearScale:
    """Maps a numeric domain linearly onto a pixel range (either direction)."""

    def __init__(self, domain, range_):
        self.d0, self.d1 = float(domain[0]), float(domain[1])
        self.r0, self.r1 = float(range_[0]), float(range_[1])

    @property
    def domain(self):
        return self.d0, self.d1

    @property
    def range(self):
        return self.r0, self.r1

    def __call__(self, value: float) -> float:
        if self.d1 == self.d0:
            return (self.r0 + self.r1) / 2
        t = (float(value) - self.d0) / (self.d1 - self.d0)
        return self.r0 + t * (self.r1 - self.r0)

    def invert(self, pixel: float) -> float:
        if self.r1 == self.r0:
            return (self.d0 + self.d1) / 2
        t = (float(pixel) - self.r0) / (self.r1 - self.r0)
        return self.d0 + t * (self.d1 - self.d0)

    def ticks(self, count: int = 10) -> List[float]:
        """Round-numbered ticks (1, 2 or 5 x 10^n apart) inside the domain."""
        lo, hi = sorted((self.d0, self.d1))
        if lo == hi:
            return [lo]
        step = _tick_step(lo, hi, count)
        if not step:
            return [lo]
        first, last = math.ceil(lo / step), math.floor(hi / step)
        return [round(i * step, 10) for i in range(first, last + 1)]

    def __repr__(self):
        return f"LinearScale(domain={self.domain}, range={self.range})"


def _seconds(dt: datetime) -> float:
    return (dt - EPOCH).total_seconds()


class TimeScale:
    """Maps a datetime domain linearly onto a pixel range."""

    def __init__(self, domain, range_):
        self.d0, self.d1 = domain
        self._linear = LinearScale((_seconds(self.d0), _seconds(self.d1)), range_)

    @classmethod
    def from_extent(cls, dates: Iterable[datetime], range_) -> "TimeScale":
        """Domain = [earliest, latest]; no dates gives a degenerate domain."""
        dates = list(dates)
        if not dates:
            return cls((EPOCH, EPOCH), range_)
        return cls((min(dates), max(dates)), range_)

    @property
    def domain(self):
        return self.d0, self.d1

    @property
    def range(self):
        return self._linear.range

    def __call__(self, value: datetime) -> float:
        return self._linear(_seconds(value))

    def invert(self, pixel: float) -> datetime:
        return EPOCH + timedelta(seconds=self._linear.invert(pixel))

    def year_ticks(self, every: int = 1) -> List[datetime]:
        """Jan 1 of every `every`-th year (year % every == 0) inside the domain."""
        every = max(1, int(every))
        lo, hi = sorted((self.d0, self.d1))
        year = lo.year if (lo.month, lo.day, lo.hour, lo.minute, lo.second) == (1, 1, 0, 0, 0) else lo.year + 1
        ticks = []
        while year <= hi.year:
            if year % every == 0:
                ticks.append(datetime(year, 1, 1))
            year += 1
        return ticks

    def __repr__(self):
        return f"TimeScale(domain={self.domain}, range={self.range})"


def value_scale(values: Iterable[float], height: float, headroom: float = 0.0,
                multiplier: float = 1.0) -> LinearScale:
    """
    Vertical scale for [0, max(values) * multiplier + headroom] onto
    [height, 0]: larger values sit higher on screen.
    """
    top = max(values, default=0.0) * multiplier + headroom
    return LinearScale((0.0, top), (height, 0.0))


def map_points(points, x_scale, y_scale,
               x: Callable[[Any], Any] = lambda p: p.date,
               y: Callable[[Any], float] = lambda p: p.value) -> List[Tuple[float, float]]:
    """Pixel position of every point through both scales."""
    return [(x_scale(x(p)), y_scale(y(p))) for p in points]
