"""Effective layer configuration: layout + defaults, merged once and frozen."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ..core.errors import ConfigError
from ..core.identity import DEFAULT_ID_FIELD
from ..core.validation import (
    VALID_AXES,
    validate_bound,
    validate_fraction,
    validate_min_extent,
)
from ..state.status import validate_status_expression


DEFAULT_LABEL_SPACING = 4.0


def merge_layout(layout: Mapping | None, defaults: Mapping | None) -> dict:
    """Recursively fill missing keys of ``layout`` from ``defaults``.

    Caller values always win. Neither input is mutated and the result
    shares no mutable state with ``defaults``.
    """
    merged = copy.deepcopy(dict(layout or {}))
    for key, default in (defaults or {}).items():
        if key not in merged:
            merged[key] = copy.deepcopy(default)
        elif isinstance(merged[key], Mapping) and isinstance(default, Mapping):
            merged[key] = merge_layout(merged[key], default)
    return merged


@dataclass(frozen=True)
class AxisConfig:
    """Extent rules for one axis of a layer."""

    field: str | None = None
    axis: int = 1
    lower_buffer: float = 0.0
    upper_buffer: float = 0.0
    min_extent: tuple[float, float] | None = None
    floor: float | None = None
    ceiling: float | None = None
    category_field: str | None = None

    @classmethod
    def from_layout(cls, layout: Mapping | None) -> AxisConfig:
        layout = layout or {}
        return cls(
            field=layout.get("field"),
            axis=int(layout.get("axis", 1)),
            lower_buffer=validate_fraction(layout.get("lower_buffer", 0.0), "lower_buffer"),
            upper_buffer=validate_fraction(layout.get("upper_buffer", 0.0), "upper_buffer"),
            min_extent=validate_min_extent(layout.get("min_extent")),
            floor=validate_bound(layout.get("floor"), "floor"),
            ceiling=validate_bound(layout.get("ceiling"), "ceiling"),
            category_field=layout.get("category_field"),
        )


@dataclass(frozen=True)
class TooltipConfig:
    """When to show a tooltip and what it contains.

    ``show``/``hide`` are status expressions such as
    ``{"or": ["highlighted", "selected"]}``.
    """

    show: Any = None
    hide: Any = None
    closable: bool = False
    html: str = ""

    @classmethod
    def from_layout(cls, layout: Mapping | None) -> TooltipConfig | None:
        if not layout:
            return None
        show = layout.get("show")
        hide = layout.get("hide")
        if show is not None:
            validate_status_expression(show)
        if hide is not None:
            validate_status_expression(hide)
        return cls(
            show=show,
            hide=hide,
            closable=bool(layout.get("closable", False)),
            html=str(layout.get("html", "")),
        )


@dataclass(frozen=True)
class LabelConfig:
    text: str = ""
    spacing: float = DEFAULT_LABEL_SPACING
    filters: tuple = ()
    style: dict = field(default_factory=dict)

    @classmethod
    def from_layout(cls, layout: Mapping | None) -> LabelConfig | None:
        if not layout:
            return None
        spacing = layout.get("spacing")
        if spacing is None:
            spacing = DEFAULT_LABEL_SPACING
        return cls(
            text=str(layout.get("text", "")),
            spacing=float(spacing),
            filters=tuple(layout.get("filters") or ()),
            style=dict(layout.get("style") or {}),
        )


@dataclass(frozen=True)
class LayerConfig:
    """Fully resolved configuration of one data layer.

    Scalable parameters (``color``, ``point_size`` ...) stay in ``layout``
    and are read with :meth:`option`.
    """

    id: str
    type: str | None
    id_field: str
    z_index: int | None
    axes: dict
    fields: tuple
    filters: tuple
    tooltip: TooltipConfig | None
    label: LabelConfig | None
    behaviors: dict
    layout: dict

    @classmethod
    def from_layout(cls, layout: Mapping | None, defaults: Mapping | None = None) -> LayerConfig:
        merged = merge_layout(layout, defaults)
        layer_id = merged.get("id")
        if layer_id is None or layer_id == "":
            raise ConfigError("Every data layer layout must have an 'id'.")
        z_index = merged.get("z_index")
        if z_index is not None and (isinstance(z_index, bool) or not isinstance(z_index, int)):
            raise ConfigError(
                f"z_index for layer '{layer_id}' must be an integer, got {z_index!r}."
            )
        axes = {axis_id: _axis_config(merged, axis_id) for axis_id in VALID_AXES}
        return cls(
            id=str(layer_id),
            type=merged.get("type"),
            id_field=merged.get("id_field") or DEFAULT_ID_FIELD,
            z_index=z_index,
            axes=axes,
            fields=tuple(merged.get("fields") or ()),
            filters=tuple(merged.get("filters") or ()),
            tooltip=TooltipConfig.from_layout(merged.get("tooltip")),
            label=LabelConfig.from_layout(merged.get("label")),
            behaviors=dict(merged.get("behaviors") or {}),
            layout=merged,
        )

    def axis(self, axis_id: str) -> AxisConfig:
        return self.axes[axis_id]

    def option(self, name: str, default: Any = None) -> Any:
        return self.layout.get(name, default)


def _axis_config(layout: Mapping, axis_id: str) -> AxisConfig:
    """x reads ``x_axis``; y1/y2 read ``y_axis`` when its ``axis`` number matches."""
    if axis_id == "x":
        return AxisConfig.from_layout(layout.get("x_axis"))
    y_layout = layout.get("y_axis") or {}
    if int(y_layout.get("axis", 1)) != int(axis_id[1:]):
        return AxisConfig(axis=int(axis_id[1:]))
    return AxisConfig.from_layout(y_layout)
