"""Tests for JSON serialization of render results."""

import json

import numpy as np
import pandas as pd
import pytest

from region_plot import (
    Plot,
    StaticProvider,
    serialize_layer_render,
    serialize_panel_render,
    serialize_plot_render,
)
from region_plot.scale import ScaleRegistry, register_builtins


def _plot(data, color=None, registry=None):
    layout = {"panels": [{"id": "p", "data_layers": [{
        "id": "d",
        "type": "scatter",
        "x_axis": {"field": "x"},
        "y_axis": {"axis": 1, "field": "y"},
    }]}]}
    if color is not None:
        layout["panels"][0]["data_layers"][0]["color"] = color
    return Plot("plot", layout, data_provider=StaticProvider(data), registry=registry)


class TestSerializeLayerRender:
    def test_layer_json(self):
        plot = _plot([{"id": "a", "x": 1, "y": 2}])
        render = plot.render().panels[0].layers[0]
        parsed = json.loads(serialize_layer_render(render))
        assert parsed["id"] == "d"
        assert parsed["type"] == "scatter"
        assert parsed["zIndex"] == 0
        assert parsed["elements"][0]["id"] == "plot_p_d-a"
        assert parsed["elements"][0]["values"]["x"] == 1
        assert "labels" not in parsed

    def test_numpy_values(self):
        df = pd.DataFrame({"id": ["a", "b"], "x": np.array([1, 2], dtype=np.int64), "y": [0.5, np.nan]})
        plot = _plot(df)
        render = plot.render().panels[0].layers[0]
        parsed = json.loads(serialize_layer_render(render))
        assert [e["values"]["x"] for e in parsed["elements"]] == [1, 2]
        assert parsed["elements"][1]["values"]["y"] is None

    def test_nan_from_list_records(self):
        plot = _plot([{"id": "a", "x": 1, "y": float("nan")}])
        text = serialize_layer_render(plot.render().panels[0].layers[0])
        assert "NaN" not in text
        assert json.loads(text)["elements"][0]["values"]["y"] is None

    def test_nan_from_scale_function(self):
        registry = register_builtins(ScaleRegistry())
        registry.add("nan_color", lambda parameters, value, index: np.float64("nan"))
        plot = _plot([{"id": "a", "x": 1, "y": 2}], color={"scale_function": "nan_color"}, registry=registry)
        text = serialize_layer_render(plot.render().panels[0].layers[0])
        parsed = json.loads(text, parse_constant=lambda name: pytest.fail(f"non-standard JSON constant {name}"))
        assert parsed["elements"][0]["values"]["color"] is None


class TestSerializePanelRender:
    def test_axes(self):
        plot = _plot([{"id": "a", "x": 1, "y": 2}, {"id": "b", "x": 3, "y": 4}])
        parsed = json.loads(serialize_panel_render(plot.render().panels[0]))
        assert parsed["axes"]["x"] == [1, 3]
        assert parsed["axes"]["y1"] == [2, 4]
        assert parsed["axes"]["y2"] == []
        assert [layer["id"] for layer in parsed["layers"]] == ["d"]


class TestSerializePlotRender:
    def test_state_included(self):
        plot = _plot([])
        render = plot.apply_state(chr="19", start=1, end=10)
        parsed = json.loads(serialize_plot_render(render))
        assert parsed["state"] == {"chr": "19", "start": 1, "end": 10, "ldrefvar": None}
        assert parsed["panels"][0]["layers"][0]["elements"] == []
