"""Tests for the squarified treemap partition and the Cartesian scales."""

import sys
from datetime import datetime
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
import config
from layout_engine import (
    Box,
    ChartFrame,
    LinearScale,
    TimeScale,
    TreemapCell,
    cell_at,
    map_points,
    partition,
    treemap_layout,
    value_scale,
)
from models import PricePoint


class Item:
    def __init__(self, name, weight):
        self.name = name
        self.weight = weight


def _weight(item):
    return item.weight


# =====================================================================
# PARTITION
# =====================================================================

class TestPartition:
    VALUES = [6, 6, 4, 3, 2, 2, 1]

    def test_areas_proportional_to_values(self):
        boxes = partition(self.VALUES, 0, 0, 600, 400)
        total = sum(self.VALUES)
        for value, box in zip(self.VALUES, boxes):
            assert box.area == pytest.approx(600 * 400 * value / total)

    def test_boxes_fill_the_rectangle(self):
        boxes = partition(self.VALUES, 0, 0, 600, 400)
        assert sum(b.area for b in boxes) == pytest.approx(600 * 400)
        for b in boxes:
            assert b.x0 >= -1e-6 and b.x1 <= 600 + 1e-6 and b.width >= -1e-9
            assert b.y0 >= -1e-6 and b.y1 <= 400 + 1e-6 and b.height >= -1e-9

    def test_first_row_is_laid_along_the_short_side(self):
        boxes = partition(self.VALUES, 0, 0, 600, 400)
        # wider than tall: the first row is a vertical band at the left edge
        assert boxes[0].x0 == 0
        assert boxes[0].y0 == 0
        assert boxes[1].x0 == 0

    def test_zero_values_get_zero_area(self):
        boxes = partition([3, 0, 1], 0, 0, 100, 100)
        assert boxes[1].area == 0
        assert boxes[0].area == pytest.approx(7500)
        assert boxes[2].area == pytest.approx(2500)

    def test_all_zero_values_do_not_crash(self):
        boxes = partition([0, 0], 0, 0, 100, 100)
        assert len(boxes) == 2
        assert all(b.area == 0 for b in boxes)

    def test_empty(self):
        assert partition([], 0, 0, 100, 100) == []

    def test_zero_size_rectangle(self):
        boxes = partition([1, 2], 0, 0, 0, 100)
        assert all(b.area == 0 for b in boxes)


# =====================================================================
# TREEMAP LAYOUT
# =====================================================================

class TestTreemapLayout:
    def test_single_item_gets_outer_padding(self):
        [cell] = treemap_layout([Item("A", 1.0)], _weight, 800, 550, padding=2)
        assert (cell.x0, cell.y0, cell.x1, cell.y1) == (2, 2, 798, 548)

    def test_sorted_by_descending_weight(self):
        items = [Item("small", 0.1), Item("big", 0.5), Item("mid", 0.3)]
        cells = treemap_layout(items, _weight, 800, 550)
        assert [c.item.name for c in cells] == ["big", "mid", "small"]
        assert [c.index for c in cells] == [0, 1, 2]

    def test_equal_weights_keep_input_order(self):
        items = [Item("first", 0.2), Item("second", 0.2), Item("third", 0.2)]
        cells = treemap_layout(items, _weight, 300, 300)
        assert [c.item.name for c in cells] == ["first", "second", "third"]

    def test_tiles_proportional_to_weight(self):
        items = [Item(str(i), w) for i, w in enumerate([0.07, 0.05, 0.03, 0.02, 0.01])]
        cells = treemap_layout(items, _weight, 800, 550, padding=2)
        total = sum(i.weight for i in items)
        tiled = (800 - 2) * (550 - 2)
        for cell in cells:
            assert cell.tile.area == pytest.approx(tiled * cell.weight / total)
        assert sum(c.tile.area for c in cells) == pytest.approx(tiled)

    def test_cells_are_inset_inside_their_tiles(self):
        cells = treemap_layout([Item("a", 2), Item("b", 1)], _weight, 400, 200, padding=2)
        for cell in cells:
            assert cell.x0 == pytest.approx(cell.tile.x0 + 1)
            assert cell.x1 == pytest.approx(cell.tile.x1 - 1)
        assert min(c.x0 for c in cells) == pytest.approx(2)
        assert max(c.x1 for c in cells) == pytest.approx(398)

    def test_empty_input(self):
        assert treemap_layout([], _weight, 800, 550) == []

    def test_zero_weights_do_not_crash(self):
        cells = treemap_layout([Item("a", 0), Item("b", 0)], _weight, 800, 550)
        assert len(cells) == 2
        assert all(c.area == 0 for c in cells)

    def test_zero_weight_among_positive_weights(self):
        cells = treemap_layout([Item("a", 0.5), Item("none", 0), Item("b", 0.2)], _weight, 800, 550)
        assert [c.item.name for c in cells] == ["a", "b", "none"]
        assert cells[2].area == 0
        assert cells[0].tile.area + cells[1].tile.area == pytest.approx(798 * 548)


class TestTreemapCell:
    def _cell(self, x0, y0, x1, y1):
        return TreemapCell(0, None, 1.0, x0, y0, x1, y1, Box(x0, y0, x1, y1))

    def test_label_placeholder_below_min_width(self):
        assert self._cell(0, 0, 29, 50).label("AAPL") == "."
        assert self._cell(0, 0, 30, 50).label("AAPL") == "AAPL"

    def test_geometry(self):
        cell = self._cell(10, 20, 50, 40)
        assert (cell.width, cell.height, cell.area) == (40, 20, 800)
        assert cell.center == (30, 30)

    def test_cell_at(self):
        cells = treemap_layout([Item("a", 3), Item("b", 1)], _weight, 400, 200)
        x, y = cells[1].center
        assert cell_at(cells, x, y) is cells[1]
        assert cell_at(cells, -5, -5) is None


# =====================================================================
# SCALES
# =====================================================================

class TestLinearScale:
    def test_maps_and_inverts(self):
        y = LinearScale((0, 100), (500, 0))
        assert y(0) == 500
        assert y(100) == 0
        assert y(25) == 375
        assert y.invert(375) == 25

    def test_degenerate_domain_maps_to_range_middle(self):
        assert LinearScale((5, 5), (0, 800))(5) == 400

    def test_nice_ticks(self):
        ticks = LinearScale((0, 5073.82), (500, 0)).ticks(10)
        assert ticks == [i * 500 for i in range(11)]

    def test_ticks_within_domain(self):
        ticks = LinearScale((0, 27), (0, 1)).ticks(10)
        assert ticks == [0, 2, 4, 6, 8, 10, 12, 14, 16, 18, 20, 22, 24, 26]


class TestTimeScale:
    D0, D1 = datetime(2000, 1, 1), datetime(2010, 1, 1)

    def test_domain_ends_map_to_range_ends(self):
        x = TimeScale((self.D0, self.D1), (0, 800))
        assert x(self.D0) == 0
        assert x(self.D1) == pytest.approx(800)

    def test_invert_round_trip(self):
        x = TimeScale((self.D0, self.D1), (0, 800))
        d = datetime(2004, 6, 15)
        assert abs((x.invert(x(d)) - d).total_seconds()) < 1

    def test_empty_extent_is_degenerate(self):
        x = TimeScale.from_extent([], (0, 800))
        assert x(datetime(2020, 1, 1)) == 400

    def test_biennial_ticks(self):
        x = TimeScale((datetime(1980, 1, 1), datetime(2024, 7, 1)), (0, 800))
        years = [d.year for d in x.year_ticks(2)]
        assert years[0] == 1980
        assert years[-1] == 2024
        assert all(y % 2 == 0 for y in years)
        assert len(years) == 23

    def test_yearly_ticks_skip_partial_first_year(self):
        x = TimeScale((datetime(2009, 3, 1), datetime(2012, 1, 1)), (0, 800))
        assert [d.year for d in x.year_ticks(1)] == [2010, 2011, 2012]


class TestValueScaleAndPoints:
    def test_headroom(self):
        y = value_scale([100, 200], 500, headroom=500)
        assert y.domain == (0.0, 700.0)
        assert y(700) == 0

    def test_multiplier_and_headroom(self):
        y = value_scale([10], 400, headroom=5, multiplier=1.5)
        assert y.domain == (0.0, 20.0)

    def test_empty_values(self):
        y = value_scale([], 400)
        assert y(0) == 200

    def test_map_points(self):
        points = [PricePoint(datetime(2000, 1, 1), 0.0), PricePoint(datetime(2010, 1, 1), 100.0)]
        x = TimeScale.from_extent([p.date for p in points], (0, 800))
        y = LinearScale((0, 100), (500, 0))
        assert map_points(points, x, y) == [(0, 500), (pytest.approx(800), 0)]


class TestChartFrame:
    def test_configured_frames(self):
        history = ChartFrame.from_config(config.HISTORY_FRAME)
        growth = ChartFrame.from_config(config.GROWTH_FRAME)
        assert (history.inner_width, history.inner_height) == (800, 500)
        assert (growth.inner_width, growth.inner_height) == (670, 400)
