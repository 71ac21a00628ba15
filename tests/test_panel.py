"""Tests for Panel: layer construction, removal and axis union."""

import pytest

from region_plot.core.errors import ConfigError
from region_plot.layers import CategoryScatter, DataLayer, HighlightRegions, Scatter
from region_plot.plot.panel import Panel


class TestPanelInit:
    def test_requires_id(self):
        with pytest.raises(ConfigError, match="'id'"):
            Panel({"data_layers": []})

    def test_layer_types(self):
        panel = Panel({"id": "p", "data_layers": [
            {"id": "plain"},
            {"id": "points", "type": "scatter"},
            {"id": "phewas", "type": "category_scatter",
             "x_axis": {"category_field": "category"}},
            {"id": "regions", "type": "highlight_regions"},
        ]})
        assert type(panel.data_layers["plain"]) is DataLayer
        assert isinstance(panel.data_layers["points"], Scatter)
        assert isinstance(panel.data_layers["phewas"], CategoryScatter)
        assert isinstance(panel.data_layers["regions"], HighlightRegions)

    def test_unknown_type_raises(self):
        with pytest.raises(ConfigError, match="Unknown data layer type"):
            Panel({"id": "p", "data_layers": [{"id": "x", "type": "forest"}]})

    def test_duplicate_layer_raises(self):
        with pytest.raises(ConfigError, match="already exists"):
            Panel({"id": "p", "data_layers": [{"id": "x"}, {"id": "x"}]})

    def test_layer_without_id_raises(self):
        with pytest.raises(ConfigError, match="'id'"):
            Panel({"id": "p", "data_layers": [{"type": "scatter"}]})


class TestPanelLayers:
    def test_remove(self):
        panel = Panel({"id": "p", "data_layers": [{"id": "a"}, {"id": "b"}]})
        panel.remove_data_layer("a")
        assert panel.data_layer_ids_by_z_index == ["b"]
        assert panel.data_layers["b"].z_index == 0

    def test_get_unknown_raises(self):
        panel = Panel({"id": "p"})
        with pytest.raises(ConfigError, match="Unknown data layer"):
            panel.get_data_layer("nope")


class TestPanelAxes:
    def test_union_of_layer_extents(self):
        panel = Panel({"id": "p", "data_layers": [
            {"id": "a", "x_axis": {"field": "x"}},
            {"id": "b", "x_axis": {"field": "x"}},
            {"id": "c"},
        ]})
        panel.data_layers["a"].data = [{"x": 1}, {"x": 5}]
        panel.data_layers["b"].data = [{"x": -2}, {"x": 3}]
        assert panel.get_axis_extent("x") == [-2, 5]
        assert panel.get_axis_extent("y1") == []

    def test_render_in_draw_order(self):
        panel = Panel({"id": "p", "data_layers": [{"id": "a"}, {"id": "b", "z_index": 0}]})
        render = panel.render()
        assert [layer.layer_id for layer in render.layers] == ["b", "a"]
        assert [layer.z_index for layer in render.layers] == [0, 1]
