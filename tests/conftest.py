"""Shared test fixtures for region-plot."""

import pytest

from region_plot.core.records import StaticProvider
from region_plot.plot.plot import Plot
from region_plot.scale import ScaleRegistry, register_builtins


@pytest.fixture
def registry():
    """A private registry with the built-in scale functions."""
    return register_builtins(ScaleRegistry())


@pytest.fixture
def abc_records():
    """Three records keyed by a namespaced id field."""
    return [
        {"d:id": "a", "d:x": 1, "d:y": 10},
        {"d:id": "b", "d:x": 2, "d:y": 20},
        {"d:id": "c", "d:x": 3, "d:y": 30},
    ]


@pytest.fixture
def tooltip_layout():
    """Tooltip shown while highlighted or selected."""
    return {
        "show": {"or": ["highlighted", "selected"]},
        "hide": {"and": ["unhighlighted", "unselected"]},
        "html": "<strong>{{ d['d:id'] }}</strong>",
    }


@pytest.fixture
def make_plot():
    """Build a plot 'plot' with one panel 'p' holding the given layer layouts."""
    def _make(*layer_layouts, data=None, state=None):
        layout = {
            "state": state or {},
            "panels": [{"id": "p", "data_layers": list(layer_layouts)}],
        }
        provider = StaticProvider(data) if data is not None else None
        return Plot("plot", layout, data_provider=provider)
    return _make


@pytest.fixture
def d_layer_layout():
    """Layer 'd' of a plain DataLayer keyed by 'd:id'."""
    return {"id": "d", "id_field": "d:id", "x_axis": {"field": "d:x"}}
