import logging
from datetime import datetime

import config
from annotations import HISTORICAL_EVENTS, growth_annotations, resolve_annotations
from color_scale import DivergingColorScale, color_for_record, format_tick, legend_ticks
from data_loader import (
    LoadError,
    load_companies,
    load_history,
    load_index_series,
    load_many,
    load_performance,
)
from interaction import (
    TooltipState,
    anchor_position,
    company_tooltip_lines,
    investment_tooltip_lines,
    point_at_pixel,
    pointer_from_hover,
    price_tooltip_lines,
)
from layout_engine import (
    Box,
    ChartFrame,
    LinearScale,
    TimeScale,
    TreemapCell,
    cell_at,
    map_points,
    treemap_layout,
    value_scale,
)
from market_math import (
    join_company_returns,
    prepare_history,
    prepare_price_series,
)
from models import CompanyRecord, InvestmentPoint, PricePoint
from scene import Axis, Callout, Marker, Polyline, Rect, Scene, Text, empty_figure, scene_to_figure

logger = logging.getLogger(__name__)

HISTORY_FRAME = ChartFrame.from_config(config.HISTORY_FRAME)
TREEMAP_FRAME = ChartFrame.from_config(config.TREEMAP_FRAME)
GROWTH_FRAME = ChartFrame.from_config(config.GROWTH_FRAME)
LEGEND_FRAME = ChartFrame.from_config(config.LEGEND_FRAME)

# ============================================================
# DATA PIPELINES (one per chart, run on every render)
# ============================================================

def load_company_view():
    """Companies joined with their YTD returns. Both CSVs load concurrently."""
    companies, returns = load_many(load_companies, load_performance)
    return join_company_returns(companies, returns)


def load_index_view():
    return prepare_price_series(load_index_series(), config.INDEX_START_YEAR)


def load_growth_view():
    return prepare_history(load_history(), config.GROWTH_START_YEAR)


def load_status(name, rows=None, error=None):
    """One entry of the load-status badge summary."""
    return {"name": name, "rows": rows, "error": str(error) if error else None}

# ============================================================
# AXIS HELPERS
# ============================================================

def _number_tick(value):
    return f"{value:,.0f}" if float(value).is_integer() else f"{value:,.2f}"


def _dollar_tick(value):
    return "$" + _number_tick(value)


def time_axis(x_scale, every, title="Year", empty=False):
    """Year ticks along the bottom; none for an empty series."""
    ticks = () if empty else tuple((x_scale(d), str(d.year)) for d in x_scale.year_ticks(every))
    return Axis("bottom", ticks, title)


def value_axis(y_scale, title, fmt=_number_tick):
    ticks = tuple((y_scale(v), fmt(v)) for v in y_scale.ticks(10))
    return Axis("left", ticks, title, grid=True)

# ============================================================
# SCENE 1: HISTORICAL INDEX
# ============================================================

def history_scales(points, frame=HISTORY_FRAME):
    x = TimeScale.from_extent([p.date for p in points], (0, frame.inner_width))
    y = value_scale([p.value for p in points], frame.inner_height, headroom=config.HISTORY_HEADROOM)
    return x, y


def build_history_scene(points, frame=HISTORY_FRAME, events=HISTORICAL_EVENTS):
    x, y = history_scales(points, frame)
    scene = Scene(frame, hover="columns", focus_color=config.LINE_COLOR)

    if points:
        scene.add(Polyline(tuple(map_points(points, x, y))))

    resolved = resolve_annotations(points, events)
    for r in resolved:
        scene.add(Callout(x(r.point.date), y(r.point.value), r.dx, r.dy, r.title, r.label))

    scene.axes = [time_axis(x, config.HISTORY_TICK_YEARS, empty=not points), value_axis(y, "Index Value")]
    logger.info("History chart: %d points, %d annotations", len(points), len(resolved))
    return scene


def history_hover(hover_data, points, frame=HISTORY_FRAME):
    """
    Tooltip state and focus position for a hover over the history chart.
    The pointer's x is inverted to a date and the point found by bisection.
    """
    tooltip = TooltipState()
    pointer = pointer_from_hover(hover_data, frame.margin)
    if pointer is None or not points:
        return tooltip.hide(), None

    x, y = history_scales(points, frame)
    _, point = point_at_pixel(points, x, pointer[0])
    px, py = x(point.date), y(point.value)
    tx, ty = anchor_position(px, py, frame.margin, config.HISTORY_TOOLTIP_OFFSET)
    return tooltip.show(tx, ty, price_tooltip_lines(point)), (px, py)

# ============================================================
# SCENE 2: MARKET-CAP TREEMAP + LEGEND
# ============================================================

def layout_companies(companies, frame=TREEMAP_FRAME):
    return treemap_layout(companies, weight=lambda c: c.weight,
                          width=frame.inner_width, height=frame.inner_height,
                          padding=config.TREEMAP_PADDING)


def build_treemap_scene(companies, frame=TREEMAP_FRAME):
    """
    Cells first (trace i is cell i, so hover curveNumbers index the cells),
    then the symbol labels. Returns (scene, cells, color scale).
    """
    cells = layout_companies(companies, frame)
    scale = DivergingColorScale.from_values(c.ytd_return for c in companies)
    scene = Scene(frame, hover="cells")

    for cell in cells:
        scene.add(Rect(cell.x0, cell.y0, cell.x1, cell.y1,
                       fill=color_for_record(cell.item, cell.index, scale),
                       stroke="black", hover_id=cell.index))
    for cell in cells:
        scene.add(Text(cell.x0 + 4, cell.y0 + 14,
                       cell.label(cell.item.symbol, config.TREEMAP_MIN_LABEL_WIDTH),
                       size=13, color="black"))

    logger.info("Treemap: %d cells, return domain %s", len(cells), scale.domain)
    return scene, cells, scale


def build_legend_scene(scale, frame=LEGEND_FRAME, bar=(20, 20, 280, 30), steps=60):
    """Gradient bar sampled from the color scale, with 5 ticks beneath it."""
    x0, y0, x1, y1 = bar
    low, high = scale.extent
    along = LinearScale((low, high), (x0, x1))
    scene = Scene(frame)

    step = (x1 - x0) / steps
    for i in range(steps):
        value = along.invert(x0 + (i + 0.5) * step)
        scene.add(Rect(x0 + i * step, y0, x0 + (i + 1) * step, y1,
                       fill=scale(value), stroke=None))
    scene.add(Rect(x0, y0, x1, y1, fill=None, stroke="black"))

    for value in legend_ticks(scale):
        tx = along(value)
        scene.add(Polyline(((tx, y1), (tx, y1 + 5)), color="gray", width=1))
        scene.add(Text(tx, y1 + 18, format_tick(value), size=11, anchor="middle"))
    return scene


def treemap_hover(hover_data, cells, frame=TREEMAP_FRAME):
    """
    Tooltip for the hovered cell. The cell comes from the hovered trace
    (curveNumber); if that is unavailable the pointer is hit-tested.
    """
    tooltip = TooltipState()
    if not hover_data or not hover_data.get("points") or not cells:
        return tooltip.hide()

    point = hover_data["points"][0]
    cell = None
    curve = point.get("curveNumber")
    if isinstance(curve, int) and 0 <= curve < len(cells):
        cell = cells[curve]

    pointer = pointer_from_hover(hover_data, frame.margin)
    if cell is None and pointer is not None:
        cell = cell_at(cells, *pointer)
    if cell is None:
        return tooltip.hide()

    ax, ay = pointer if pointer is not None else cell.center
    tx, ty = anchor_position(ax, ay, frame.margin, config.TREEMAP_TOOLTIP_OFFSET)
    return tooltip.show(tx, ty, company_tooltip_lines(cell.item))


def holdings_rows(companies):
    """Rows for the holdings grid, heaviest first. Weight/return in percent."""
    ordered = sorted(companies, key=lambda c: c.weight, reverse=True)
    return [
        {
            "Symbol": c.symbol,
            "Company": c.name,
            "Weight": round(c.weight * 100, 2),
            "Price": c.price,
            "YTD Return": c.ytd_return,
        }
        for c in ordered
    ]

# ============================================================
# SCENE 3: INVESTMENT GROWTH
# ============================================================

def _year_of(point):
    return point.year


def growth_scales(points, frame=GROWTH_FRAME):
    x = TimeScale.from_extent([p.year for p in points], (0, frame.inner_width))
    y = value_scale([p.value for p in points], frame.inner_height,
                    headroom=config.GROWTH_HEADROOM, multiplier=config.GROWTH_MULTIPLIER)
    return x, y


def build_growth_scene(points, amount, frame=GROWTH_FRAME):
    x, y = growth_scales(points, frame)
    scene = Scene(frame, hover="columns")

    pixels = map_points(points, x, y, x=_year_of)
    if pixels:
        scene.add(Polyline(tuple(pixels)))
    scene.add(*(Marker(px, py, radius=5) for px, py in pixels))

    for r in growth_annotations(points, amount):
        scene.add(Callout(x(r.point.year), y(r.point.value), r.dx, r.dy, r.title, r.label))

    scene.axes = [time_axis(x, config.GROWTH_TICK_YEARS, empty=not points),
                  value_axis(y, "Investment Value ($)", fmt=_dollar_tick)]
    logger.info("Growth chart: %d points from $%.2f", len(points), amount)
    return scene


def growth_hover(hover_data, points, frame=GROWTH_FRAME):
    tooltip = TooltipState()
    pointer = pointer_from_hover(hover_data, frame.margin)
    if pointer is None or not points:
        return tooltip.hide()

    x, y = growth_scales(points, frame)
    _, point = point_at_pixel(points, x, pointer[0], key=_year_of)
    tx, ty = anchor_position(x(point.year), y(point.value), frame.margin, config.GROWTH_TOOLTIP_OFFSET)
    return tooltip.show(tx, ty, investment_tooltip_lines(point))

# ============================================================
# STORE (DE)SERIALIZATION
# ============================================================
# Hover callbacks read the view model back from a dcc.Store; the server keeps
# no per-session state.

def dump_price_series(points):
    return [[p.date.isoformat(), p.value] for p in points]


def parse_price_series(data):
    return [PricePoint(datetime.fromisoformat(d), float(v)) for d, v in (data or [])]


def dump_growth(points, amount):
    return {"amount": amount, "points": [[p.year.isoformat(), p.value] for p in points]}


def parse_growth(data):
    data = data or {}
    points = [InvestmentPoint(datetime.fromisoformat(d), float(v)) for d, v in data.get("points", [])]
    return points, data.get("amount")


def dump_cells(cells):
    return [
        {
            "symbol": c.item.symbol,
            "name": c.item.name,
            "weight": c.item.weight,
            "price": c.item.price,
            "ytd_return": c.item.ytd_return,
            "bounds": [c.x0, c.y0, c.x1, c.y1],
        }
        for c in cells
    ]


def parse_cells(data):
    cells = []
    for i, d in enumerate(data or []):
        x0, y0, x1, y1 = d["bounds"]
        record = CompanyRecord(d["name"], d["symbol"], d["weight"], d.get("price", ""), d.get("ytd_return"))
        cells.append(TreemapCell(i, record, record.weight, x0, y0, x1, y1, Box(x0, y0, x1, y1)))
    return cells
