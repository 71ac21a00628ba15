"""Tests for the HighlightRegions layer."""

import pytest

from region_plot.core.errors import ConfigError, UsageError
from region_plot.layers import HighlightRegions


def _spans(layer):
    return [(r["start"], r["end"]) for r in layer.regions()]


class TestHighlightRegionsDefaults:
    def test_defaults(self):
        layer = HighlightRegions({"id": "hl"})
        assert layer.layout["color"] == "#CCCCCC"
        assert layer.layout["fill_opacity"] == 0.5
        assert layer.start_field == "start"
        assert layer.end_field == "end"
        assert layer.layout["merge_field"] is None

    def test_rejects_mouse_events(self):
        with pytest.raises(ConfigError, match="mouse events"):
            HighlightRegions({"id": "hl", "behaviors": {"onclick": []}})
        with pytest.raises(ConfigError, match="mouse events"):
            HighlightRegions({"id": "hl", "interaction": {"x_linked": True}})

    def test_rejects_tooltips(self):
        with pytest.raises(UsageError, match="tooltips"):
            HighlightRegions({"id": "hl", "tooltip": {"html": "hi"}})


class TestHighlightRegionsSource:
    def test_layout_regions_take_precedence(self):
        layer = HighlightRegions({"id": "hl", "regions": [{"start": 1, "end": 5}]})
        layer.data = [{"start": 100, "end": 200}]
        assert _spans(layer) == [(1, 5)]

    def test_data_regions(self):
        layer = HighlightRegions({"id": "hl"})
        layer.data = [{"start": 1, "end": 5}, {"start": 10, "end": 20}]
        assert _spans(layer) == [(1, 5), (10, 20)]

    def test_missing_ids_get_index(self):
        layer = HighlightRegions({"id": "hl"})
        layer.data = [{"start": 1, "end": 5}, {"id": "named", "start": 10, "end": 20}]
        assert layer.render().element_ids == ["hl-0", "hl-named"]

    def test_render_values(self):
        layer = HighlightRegions({"id": "hl", "regions": [{"start": 1, "end": 5}]})
        values = layer.render().elements[0].values
        assert values == {"color": "#CCCCCC", "fill_opacity": 0.5, "start": 1, "end": 5}

    def test_filters(self):
        layer = HighlightRegions({"id": "hl", "filters": [{"field": "start", "operator": ">", "value": 5}]})
        layer.data = [{"start": 1, "end": 5}, {"start": 10, "end": 20}]
        assert _spans(layer) == [(10, 20)]


class TestMergeNodes:
    def test_merge_overlapping_same_category(self):
        layer = HighlightRegions({"id": "hl", "merge_field": "cat"})
        layer.data = [
            {"start": 1, "end": 5, "cat": "a"},
            {"start": 4, "end": 8, "cat": "a"},
            {"start": 6, "end": 7, "cat": "b"},
            {"start": 9, "end": 12, "cat": "a"},
        ]
        assert _spans(layer) == [(1, 8), (9, 12), (6, 7)]

    def test_contained_interval(self):
        layer = HighlightRegions({"id": "hl", "merge_field": "cat"})
        layer.data = [{"start": 1, "end": 10, "cat": "a"}, {"start": 2, "end": 3, "cat": "a"}]
        assert _spans(layer) == [(1, 10)]

    def test_no_merge_without_field(self):
        layer = HighlightRegions({"id": "hl"})
        layer.data = [{"start": 1, "end": 5}, {"start": 4, "end": 8}]
        assert _spans(layer) == [(1, 5), (4, 8)]
