"""Scatter layers: points with per-element size, shape, color, labels."""

from __future__ import annotations

import copy
import math
from collections.abc import Mapping
from typing import Any

from ..core.errors import ConfigError, UsageError
from ..core.validation import validate_axis_id
from .base import DataLayer
from .render import LabelRender, LayerRender
from .templating import render_template


class Scatter(DataLayer):
    """Standard scatter plot layer."""

    DEFAULT_LAYOUT = {
        "point_size": 40,
        "point_shape": "circle",
        "tooltip_positioning": "horizontal",
        "color": "#888888",
        "fill_opacity": 1,
        "y_axis": {"axis": 1},
        "id_field": "id",
    }
    SCALABLE_OPTIONS = ("point_size", "point_shape", "color", "fill_opacity")

    def _x_field(self) -> str | None:
        return self.config.axis("x").field

    def _y_field(self) -> str | None:
        y_axis = self.layout.get("y_axis") or {}
        return y_axis.get("field")

    def _element_values(self, record: dict, index: int) -> dict[str, Any]:
        values = super()._element_values(record, index)
        values["x"] = record.get(self._x_field()) if self._x_field() else None
        values["y"] = record.get(self._y_field()) if self._y_field() else None
        return values

    def _point_radius(self, record: Any, index: int | None = None) -> float:
        size = self.resolve_scalable_parameter(self.scalable_option("point_size"), record, index)
        if not isinstance(size, (int, float)) or size < 0:
            return 0.0
        return math.sqrt(size / math.pi)

    def _get_tooltip_position(self, record: Any) -> dict | None:
        if not isinstance(record, Mapping):
            return None
        return {
            "x": record.get(self._x_field()) if self._x_field() else None,
            "y": record.get(self._y_field()) if self._y_field() else None,
            "offset": self._point_radius(record),
            "positioning": self.layout.get("tooltip_positioning"),
        }

    def _labels(self, track_data: list[tuple[int, dict]]) -> list[LabelRender]:
        label = self.config.label
        if label is None:
            return []
        labels = []
        for index, record in track_data:
            if not self.filter(label.filters, record):
                continue
            size = self.resolve_scalable_parameter(self.scalable_option("point_size"), record, index)
            offset = math.sqrt(size) if isinstance(size, (int, float)) and size > 0 else 0.0
            labels.append(LabelRender(
                element_id=self.identify(record),
                text=render_template(label.text, record, self.annotations.get_all(record)),
                x=record.get(self._x_field()) if self._x_field() else None,
                y=record.get(self._y_field()) if self._y_field() else None,
                offset=offset + label.spacing,
                style=dict(label.style),
            ))
        return labels

    def render(self) -> LayerRender:
        result = super().render()
        result.labels = self._labels(self._track_data())
        return result

    def make_ld_reference(self, element: Any = None) -> str:
        """Make an element the plot's LD reference variant and re-render.

        Returns the reference id that was applied.
        """
        if element is None:
            raise UsageError("make_ld_reference requires one argument of any type")
        if isinstance(element, Mapping):
            value = element.get(self.config.id_field)
            if value is None:
                value = element.get("id")
            ref = str(value) if value is not None else str(element)
        else:
            ref = str(element)
        plot = self.parent_plot
        if plot is None:
            raise UsageError("make_ld_reference requires the layer to belong to a plot")
        plot.apply_state(ldrefvar=ref)
        return ref


# Originally from d3v3 category20
CATEGORY20_COLORS = [
    "#1f77b4", "#aec7e8", "#ff7f0e", "#ffbb78", "#2ca02c", "#98df8a",
    "#d62728", "#ff9896", "#9467bd", "#c5b0d5", "#8c564b", "#c49c94",
    "#e377c2", "#f7b6d2", "#7f7f7f", "#c7c7c7", "#bcbd22", "#dbdb8d",
    "#17becf", "#9edae5",
]

VALID_TICK_POSITIONS = ("left", "center", "right")


def _find_categorical_bin(color_spec: Any) -> dict:
    candidates = color_spec if isinstance(color_spec, list) else [color_spec]
    for option in candidates:
        if isinstance(option, Mapping) and option.get("scale_function") == "categorical_bin":
            return option
    raise ConfigError(
        "This layer requires that color options be provided as a `categorical_bin`"
    )


def _category_sort_key(value: Any) -> tuple:
    if isinstance(value, str):
        return (value is None, True, value.lower())
    return (value is None, False, value)


class CategoryScatter(Scatter):
    """Scatter plot whose x-axis is grouped by category (e.g. PheWAS).

    Records are sorted so each category is contiguous, the color scheme is
    derived from the categories present, and x ticks mark category bounds.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        # {category: [min_x, max_x]}
        self._categories: dict[Any, list] = {}
        self._color_spec: Any = None

    @property
    def categories(self) -> dict[Any, list]:
        return {k: list(v) for k, v in self._categories.items()}

    def _category_field(self) -> str:
        category_field = self.config.axis("x").category_field
        if not category_field:
            raise ConfigError(f"Layout for {self.id} must specify category_field")
        return category_field

    def _prepare_data(self) -> list[dict]:
        x_field = self._x_field() or "x"
        category_field = self._category_field()
        # Stable: records within a category keep their incoming order
        records = sorted(self._data, key=lambda r: _category_sort_key(r.get(category_field)))
        for i, record in enumerate(records):
            if record.get(x_field) is None:
                record[x_field] = i
        return records

    def _generate_category_bounds(self) -> dict[Any, list]:
        category_field = self._category_field()
        x_field = self._x_field() or "x"
        bounds: dict[Any, list] = {}
        for record in self._data:
            category = record.get(category_field)
            x = record.get(x_field)
            low, high = bounds.get(category, [x, x])
            bounds[category] = [min(low, x), max(high, x)]
        self._set_dynamic_color_scheme(list(bounds))
        return bounds

    def _set_dynamic_color_scheme(self, category_names: list) -> None:
        """Fill in categorical_bin categories/values from the data.

        Preset categories are kept only when they cover every category in
        the data; preset colors are reused (cycled) when given.
        """
        base_spec = self.config.option("color")
        base_params = _find_categorical_bin(base_spec).get("parameters") or {}
        preset_categories = list(base_params.get("categories") or [])
        preset_values = list(base_params.get("values") or [])

        if preset_categories and preset_values and all(n in preset_categories for n in category_names):
            categories = preset_categories
        else:
            categories = list(category_names)

        colors = preset_values or list(CATEGORY20_COLORS)
        while colors and len(colors) < len(categories):
            colors = colors + colors
        colors = colors[:len(categories)]

        spec = copy.deepcopy(base_spec)
        rule = _find_categorical_bin(spec)
        rule["parameters"] = {**(rule.get("parameters") or {}), "categories": categories, "values": colors}
        self._color_spec = spec

    def scalable_option(self, name: str) -> Any:
        if name == "color" and self._color_spec is not None:
            return self._color_spec
        return super().scalable_option(name)

    def apply_custom_data_methods(self) -> CategoryScatter:
        self._data = self._prepare_data()
        self._categories = self._generate_category_bounds()
        return self

    def get_ticks(self, dimension: str, position: str = "left") -> list[dict]:
        """Tick marks for category bounds on the x axis, colored like the points."""
        validate_axis_id(dimension)
        if position not in VALID_TICK_POSITIONS:
            raise ConfigError(
                f"Invalid tick position '{position}'. Use one of: {', '.join(VALID_TICK_POSITIONS)}."
            )
        if not self._categories or dimension != "x":
            return []

        params = _find_categorical_bin(self.scalable_option("color")).get("parameters") or {}
        known_categories = list(params.get("categories") or [])
        known_colors = list(params.get("values") or [])

        ticks = []
        for category, (low, high) in self._categories.items():
            if position == "left":
                x = low
            elif position == "center":
                x = low + (high - low) / 2
            else:
                x = high
            try:
                fill = known_colors[known_categories.index(category)]
            except (ValueError, IndexError):
                fill = "#000000"
            ticks.append({"x": x, "text": category, "style": {"fill": fill}})
        return ticks

    def render(self) -> LayerRender:
        result = super().render()
        result.extra["ticks"] = self.get_ticks("x", "center")
        return result
