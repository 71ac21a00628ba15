"""Data layer types."""

from .base import DataLayer
from .highlight_regions import HighlightRegions
from .render import ElementRender, LabelRender, LayerRender
from .scatter import CategoryScatter, Scatter

# layout["type"] -> layer class; a missing type builds a plain DataLayer
LAYER_TYPES = {
    None: DataLayer,
    "scatter": Scatter,
    "category_scatter": CategoryScatter,
    "highlight_regions": HighlightRegions,
}

__all__ = [
    "LAYER_TYPES",
    "DataLayer",
    "Scatter",
    "CategoryScatter",
    "HighlightRegions",
    "ElementRender",
    "LabelRender",
    "LayerRender",
]
