"""Tests for axis extent computation."""

import pytest

from region_plot.core.errors import ConfigError
from region_plot.layers import DataLayer
from region_plot.layout.config import AxisConfig
from region_plot.layout.extent import compute_extent, union_extents


def _layer(**x_axis):
    return DataLayer({"id": "d", "x_axis": {"field": "x", **x_axis}})


def _values(*xs):
    return [{"x": x} for x in xs]


class TestAxisValidation:
    @pytest.mark.parametrize("axis_id", [None, "foo", 1])
    def test_invalid_axis_raises(self, axis_id):
        with pytest.raises(ConfigError, match="Invalid axis"):
            _layer().get_axis_extent(axis_id)

    def test_axis_without_field_raises(self):
        with pytest.raises(ConfigError, match="no field"):
            _layer().get_axis_extent("y1")

    def test_compute_requires_field(self):
        with pytest.raises(ConfigError):
            compute_extent(_values(1), AxisConfig())


class TestDataExtent:
    def test_empty(self):
        assert _layer().get_axis_extent("x") == []

    def test_min_max(self):
        layer = _layer()
        layer.data = _values(1, 2, 3, 4)
        assert layer.get_axis_extent("x") == [1, 4]
        layer.data = _values(200, -73, 0, 38)
        assert layer.get_axis_extent("x") == [-73, 200]

    def test_single_value(self):
        layer = _layer()
        layer.data = _values(6)
        assert layer.get_axis_extent("x") == [6, 6]

    def test_non_numeric(self):
        layer = _layer()
        layer.data = _values("apple", "pear", "orange")
        assert layer.get_axis_extent("x") == [None, None]


class TestBuffers:
    def test_lower_buffer(self):
        layer = _layer(lower_buffer=0.05)
        layer.data = _values(1, 2, 3, 4)
        assert layer.get_axis_extent("x") == pytest.approx([0.85, 4])

    def test_upper_buffer(self):
        layer = _layer(upper_buffer=0.25)
        layer.data = _values(-18, 100)
        assert layer.get_axis_extent("x") == pytest.approx([-18, 129.5])

    def test_both_buffers(self):
        layer = _layer(lower_buffer=0.1, upper_buffer=0.5)
        layer.data = _values(-73, 0, 200)
        assert layer.get_axis_extent("x") == pytest.approx([-100.3, 336.5])

    def test_zero_range_unchanged(self):
        layer = _layer(lower_buffer=0.5, upper_buffer=0.5)
        layer.data = _values(6, 6)
        assert layer.get_axis_extent("x") == [6, 6]


class TestMinExtent:
    def test_only_widens(self):
        layer = _layer(min_extent=[0, 3])
        layer.data = _values(1, 2, 3, 4)
        assert layer.get_axis_extent("x") == [0, 4]

    def test_empty_data_uses_min_extent(self):
        assert _layer(min_extent=[0, 3]).get_axis_extent("x") == [0, 3]

    @pytest.mark.parametrize("xs,expected", [
        ((3, 4, 5, 6), [0, 10]),
        ((0.6, 4, 5, 9), [-1.08, 10]),
        ((0.4, 4, 5, 9.8), [-1.48, 10.74]),
    ])
    def test_with_buffers(self, xs, expected):
        layer = _layer(lower_buffer=0.2, upper_buffer=0.1, min_extent=[0, 10])
        layer.data = _values(*xs)
        assert layer.get_axis_extent("x") == pytest.approx(expected)

    def test_invalid_min_extent(self):
        with pytest.raises(ConfigError, match="min_extent"):
            _layer(min_extent=[1])


class TestFloorCeiling:
    def test_ceiling_after_everything(self):
        layer = _layer(min_extent=[0, 10], upper_buffer=0.8, ceiling=5)
        layer.data = _values(3, 4, 5, 6)
        assert layer.get_axis_extent("x") == [0, 5]

    def test_floor_and_ceiling(self):
        layer = _layer(floor=0, ceiling=10)
        layer.data = _values(-5, 15)
        assert layer.get_axis_extent("x") == [0, 10]

    def test_floor_only(self):
        layer = _layer(floor=4, ceiling=6)
        layer.data = _values(3, 5, 8)
        assert layer.get_axis_extent("x") == [4, 6]

    def test_floor_below_window_does_not_extend_it(self):
        layer = _layer(min_extent=[6, 10], lower_buffer=0.5, floor=0)
        layer.data = _values(8, 9, 8, 8.5)
        assert layer.get_axis_extent("x") == [6.0, 10.0]

    def test_inverted_bounds_not_revalidated(self):
        layer = _layer(floor=8, ceiling=2)
        layer.data = _values(0, 10)
        assert layer.get_axis_extent("x") == [8, 2]


class TestUnionExtents:
    def test_union(self):
        assert union_extents([[0, 5], [], [None, None], [-2, 3]]) == [-2, 5]

    def test_nothing_usable(self):
        assert union_extents([[], [None, None]]) == []
