"""Tests for the three chart builds, their hover handlers and the store payloads."""

import sys
from datetime import datetime
from pathlib import Path
from unittest.mock import patch

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
import config
from chart_wrappers import (
    GROWTH_FRAME,
    HISTORY_FRAME,
    build_growth_scene,
    build_history_scene,
    build_legend_scene,
    build_treemap_scene,
    dump_cells,
    dump_growth,
    dump_price_series,
    growth_hover,
    history_hover,
    holdings_rows,
    load_company_view,
    load_index_view,
    parse_cells,
    parse_growth,
    parse_price_series,
    treemap_hover,
)
from data_loader import LoadError
from market_math import calculate_investment_growth
from scene import Callout, Marker, Polyline, Rect, Text, empty_figure, focus_trace_index, scene_to_figure


def _hover_at(x, y):
    return {"points": [{"curveNumber": 0, "bbox": {"x0": x, "x1": x, "y0": y, "y1": y}}]}


# =====================================================================
# HISTORY
# =====================================================================

class TestHistoryChart:
    @pytest.fixture(scope="class")
    def index_points(self):
        return load_index_view()

    def test_bundled_series_starts_in_1980(self, index_points):
        assert index_points[0].date.year == 1980
        assert [p.date for p in index_points] == sorted(p.date for p in index_points)

    def test_scene_has_line_and_six_callouts(self, index_points):
        scene = build_history_scene(index_points)
        assert len(scene.of_type(Polyline)) == 1
        assert len(scene.of_type(Callout)) == 6

    def test_figure_is_drawn_in_pixel_space(self, index_points):
        fig = scene_to_figure(build_history_scene(index_points))
        assert fig.layout.width == 920
        assert fig.layout.height == 600
        assert list(fig.layout.xaxis.range) == [0, 800]
        assert list(fig.layout.yaxis.range) == [500, 0]
        assert fig.layout.margin.l == 70
        assert len(fig.layout.annotations) == 6

    def test_biennial_year_ticks(self, index_points):
        fig = scene_to_figure(build_history_scene(index_points))
        labels = list(fig.layout.xaxis.ticktext)
        assert labels[0] == "1980"
        assert labels[-1] == "2024"
        assert len(labels) == 23
        assert fig.layout.yaxis.title.text == "Index Value"

    def test_focus_marker_is_last_and_hidden(self, index_points):
        fig = scene_to_figure(build_history_scene(index_points), theme="dark")
        focus = fig.data[focus_trace_index(fig)]
        assert len(focus.x) == 0
        assert focus.marker.size == 16
        assert focus.marker.color == config.LINE_COLOR

    def test_hover_resolves_next_point(self, yearly_points):
        # pointer at x=350 in the drawing area is late 2000, which resolves to 2001
        tooltip, focus = history_hover(_hover_at(420, 100), yearly_points)
        show, bbox, lines = tooltip.props()
        assert show
        assert [line.value for line in lines] == ["Mon Jan 01 2001", "200.00"]
        px, py = focus
        assert px == pytest.approx(800 * 366 / 731)
        assert py == pytest.approx(375)
        assert bbox["x0"] == pytest.approx(px + 70 + 50)
        assert bbox["y0"] == pytest.approx(py + 30 - 50)

    def test_no_hover_hides_tooltip(self, yearly_points):
        tooltip, focus = history_hover(None, yearly_points)
        assert tooltip.props() == (False, None, [])
        assert focus is None

    def test_empty_series(self):
        scene = build_history_scene([])
        assert scene.of_type(Polyline) == []
        tooltip, focus = history_hover(_hover_at(420, 100), [])
        assert not tooltip.visible
        assert focus is None

    def test_empty_series_has_no_year_ticks(self):
        history_axis = build_history_scene([]).axes[0]
        growth_axis = build_growth_scene([], 10).axes[0]
        assert history_axis.orientation == "bottom"
        assert history_axis.ticks == ()
        assert growth_axis.ticks == ()

    def test_load_error_propagates(self):
        with patch("chart_wrappers.load_index_series", side_effect=LoadError("unreachable")):
            with pytest.raises(LoadError):
                load_index_view()


# =====================================================================
# TREEMAP
# =====================================================================

class TestTreemapChart:
    def test_cells_heaviest_first(self, sample_companies):
        _, cells, _ = build_treemap_scene(sample_companies)
        assert [c.item.symbol for c in cells] == ["NVDA", "AAPL", "BRK.B", "INTC"]

    def test_fill_colors(self, sample_companies):
        scene, _, scale = build_treemap_scene(sample_companies)
        fills = [r.fill for r in scene.of_type(Rect)]
        assert scale.domain == (-19.18, 0.0, 29.37)
        assert fills[0] == "rgb(0, 128, 0)"
        assert fills[1] == "rgb(255, 0, 0)"
        assert fills[2] == config.CATEGORICAL_PALETTE[2]

    def test_one_label_per_cell(self, sample_companies):
        scene, cells, _ = build_treemap_scene(sample_companies)
        texts = scene.of_type(Text)
        assert len(texts) == len(cells)
        assert texts[0].text == "NVDA"
        assert (texts[0].x, texts[0].y) == (cells[0].x0 + 4, cells[0].y0 + 14)

    def test_cell_traces_come_first(self, sample_companies):
        scene, cells, _ = build_treemap_scene(sample_companies)
        fig = scene_to_figure(scene)
        assert len(fig.data) == len(cells) + 1
        assert fig.data[-1].mode == "text"
        assert fig.layout.hovermode == "closest"

    def test_hover_by_curve_number(self, sample_companies):
        _, cells, _ = build_treemap_scene(sample_companies)
        tooltip = treemap_hover({"points": [{"curveNumber": 1}]}, cells)
        show, bbox, lines = tooltip.props()
        assert show
        assert lines[0].value == "AAPL"
        assert lines[-1].color == "red"
        cx, cy = cells[1].center
        assert (bbox["x0"], bbox["y0"]) == (pytest.approx(cx + 10), pytest.approx(cy - 10))

    def test_hover_falls_back_to_hit_test(self, sample_companies):
        _, cells, _ = build_treemap_scene(sample_companies)
        cx, cy = cells[2].center
        hover = {"points": [{"curveNumber": 99, "bbox": {"x0": cx, "x1": cx, "y0": cy, "y1": cy}}]}
        lines = treemap_hover(hover, cells).lines
        assert lines[0].value == "BRK.B"
        assert lines[-1].value == "N/A"

    def test_hover_outside_cells_hides(self, sample_companies):
        _, cells, _ = build_treemap_scene(sample_companies)
        assert not treemap_hover({"points": [{"curveNumber": 99, "x": -10, "y": -10}]}, cells).visible
        assert not treemap_hover(None, cells).visible

    def test_cells_store_payload(self, sample_companies):
        _, cells, _ = build_treemap_scene(sample_companies)
        restored = parse_cells(dump_cells(cells))
        assert [c.item for c in restored] == [c.item for c in cells]
        assert [(c.x0, c.y0, c.x1, c.y1) for c in restored] == [(c.x0, c.y0, c.x1, c.y1) for c in cells]
        assert treemap_hover({"points": [{"curveNumber": 3}]}, restored).lines[0].value == "INTC"


class TestLegend:
    def test_gradient_outline_and_ticks(self, sample_companies):
        _, _, scale = build_treemap_scene(sample_companies)
        scene = build_legend_scene(scale)
        rects = scene.of_type(Rect)
        assert len(rects) == 61
        assert rects[-1].fill is None
        assert [t.text for t in scene.of_type(Text)][::4] == ["-19.2%", "29.4%"]
        assert len(scene.of_type(Text)) == 5

    def test_gradient_runs_from_negative_to_positive(self, sample_companies):
        _, _, scale = build_treemap_scene(sample_companies)
        gradient = build_legend_scene(scale).of_type(Rect)[:60]
        assert all(r.fill and r.stroke is None for r in gradient)
        assert gradient[0].fill.startswith("rgb(255, ")
        assert gradient[0].x0 == 20
        assert gradient[-1].x1 == pytest.approx(280)


class TestHoldings:
    def test_rows_sorted_by_weight(self, sample_companies):
        rows = holdings_rows(sample_companies)
        assert [r["Symbol"] for r in rows] == ["NVDA", "AAPL", "BRK.B", "INTC"]
        assert rows[0]["Weight"] == 7.58
        assert rows[2]["YTD Return"] is None

    def test_bundled_company_view(self):
        companies = load_company_view()
        by_symbol = {c.symbol: c for c in companies}
        assert len(companies) == 25
        assert by_symbol["NVDA"].ytd_return == 29.37
        assert by_symbol["BRK.B"].ytd_return is None


# =====================================================================
# GROWTH
# =====================================================================

class TestGrowthChart:
    @pytest.fixture
    def growth_points(self, performance_entries):
        return calculate_investment_growth(performance_entries, 10)

    def test_scene(self, growth_points):
        scene = build_growth_scene(growth_points, 10)
        assert len(scene.of_type(Marker)) == 4
        callouts = scene.of_type(Callout)
        assert [c.title for c in callouts] == ["Initial Investment:", "Investment Value in 2012:"]
        assert callouts[1].label == "$12.54"

    def test_figure(self, growth_points):
        fig = scene_to_figure(build_growth_scene(growth_points, 10))
        assert list(fig.layout.xaxis.range) == [0, 670]
        assert list(fig.layout.yaxis.range) == [400, 0]
        assert list(fig.layout.xaxis.ticktext) == ["2009", "2010", "2011", "2012"]
        assert fig.layout.annotations[0].text == "<b>Initial Investment:</b><br>$10.00"
        assert fig.layout.hovermode == "x"

    def test_dollar_ticks(self, growth_points):
        fig = scene_to_figure(build_growth_scene(growth_points, 10))
        assert all(label.startswith("$") for label in fig.layout.yaxis.ticktext)

    def test_hover_at_right_edge(self, growth_points):
        right = GROWTH_FRAME.margin.left + GROWTH_FRAME.inner_width
        [line] = growth_hover(_hover_at(right, 100), growth_points).lines
        assert line.label == "Investment Value in 2012:"
        assert line.value == "$12.54"

    def test_no_hover(self, growth_points):
        assert not growth_hover(None, growth_points).visible

    def test_store_payload(self, growth_points):
        points, amount = parse_growth(dump_growth(growth_points, 10))
        assert points == growth_points
        assert amount == 10


# =====================================================================
# MISC
# =====================================================================

def test_price_series_store_payload(yearly_points):
    assert parse_price_series(dump_price_series(yearly_points)) == yearly_points
    assert parse_price_series(None) == []


def test_empty_figure_message():
    fig = empty_figure()
    assert fig.layout.annotations[0].text == "Data unavailable"


def test_frames_match_configuration():
    assert (HISTORY_FRAME.inner_width, HISTORY_FRAME.inner_height) == (800, 500)
    assert (GROWTH_FRAME.inner_width, GROWTH_FRAME.inner_height) == (670, 400)


def test_index_points_are_datetimes():
    points = load_index_view()
    assert all(isinstance(p.date, datetime) for p in points)
