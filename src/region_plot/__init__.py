"""region-plot: layout-driven data layers for genomic region plots."""

from ._version import __version__
from .core.errors import ConfigError, UsageError
from .core.records import StaticProvider, normalize_records
from .layers import (
    CategoryScatter,
    DataLayer,
    HighlightRegions,
    Scatter,
)
from .plot.panel import Panel
from .plot.plot import Plot
from .scale import SCALABLE, ScaleRegistry
from .state.plot_state import PlotState
from .widget.serializers import (
    serialize_layer_render,
    serialize_panel_render,
    serialize_plot_render,
)

__all__ = [
    "__version__",
    "Plot",
    "Panel",
    "PlotState",
    "DataLayer",
    "Scatter",
    "CategoryScatter",
    "HighlightRegions",
    "SCALABLE",
    "ScaleRegistry",
    "StaticProvider",
    "normalize_records",
    "ConfigError",
    "UsageError",
    "serialize_layer_render",
    "serialize_panel_render",
    "serialize_plot_render",
]
