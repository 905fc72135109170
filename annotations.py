import logging
from dataclasses import dataclass
from datetime import datetime

from market_math import format_currency

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Annotation:
    """A callout pinned to the data point dated `event_date`, drawn (dx, dy) pixels away."""
    event_date: datetime
    title: str
    label: str = ""
    dx: float = 0
    dy: float = 0


@dataclass(frozen=True)
class ResolvedAnnotation:
    annotation: Annotation
    point: object

    @property
    def title(self):
        return self.annotation.title

    @property
    def label(self):
        return self.annotation.label

    @property
    def dx(self):
        return self.annotation.dx

    @property
    def dy(self):
        return self.annotation.dy


# Offsets are hand-tuned against the 800 x 500 history drawing area
HISTORICAL_EVENTS = (
    Annotation(datetime(2020, 3, 1), "COVID-19 Pandemic", dx=0, dy=100),
    Annotation(datetime(2009, 2, 1), "Global Financial Crisis", dx=60, dy=15),
    Annotation(datetime(2000, 8, 1), "Dotcom Bubble Peak", dx=0, dy=-120),
    Annotation(datetime(2003, 2, 1), "Dotcom Bubble Burst", dx=-40, dy=35),
    Annotation(datetime(2007, 7, 1), "Housing Market Boom", dx=0, dy=-110),
    Annotation(datetime(2022, 2, 1), "Inflation, Ukraine Russia War", dx=20, dy=180),
)


def _same_day(a, b):
    return (a.year, a.month, a.day) == (b.year, b.month, b.day)


def resolve_annotations(series, events=HISTORICAL_EVENTS, key=lambda p: p.date):
    """
    Pin each event to the point with the same year/month/day. Events with no
    such point are left out.
    """
    resolved = []
    for event in events:
        point = next((p for p in series if _same_day(key(p), event.event_date)), None)
        if point is None:
            logger.debug("No data point on %s, skipping '%s'", event.event_date.date(), event.title)
            continue
        resolved.append(ResolvedAnnotation(event, point))
    return resolved


def growth_annotations(points, amount):
    """Callouts for the first (initial amount) and last (final value) growth points."""
    if not points:
        return []
    first, last = points[0], points[-1]
    return [
        ResolvedAnnotation(Annotation(first.year, "Initial Investment:", format_currency(amount), dx=80, dy=-100), first),
        ResolvedAnnotation(Annotation(last.year, f"Investment Value in {last.year.year}:",
                                      format_currency(last.value), dx=-80, dy=-30), last),
    ]
