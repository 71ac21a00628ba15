"""Panel: a horizontal strip of the plot holding an ordered stack of data layers."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ..core.errors import ConfigError
from ..core.validation import VALID_AXES
from ..layers import LAYER_TYPES, DataLayer, LayerRender
from ..layout.extent import union_extents
from ..layout.ordering import LayerOrder
from ..scale import ScaleRegistry

if TYPE_CHECKING:
    from .plot import Plot

log = logging.getLogger(__name__)


@dataclass
class PanelRender:
    """Layers of one panel in draw order, with the panel's axis extents."""

    panel_id: str
    layers: list[LayerRender] = field(default_factory=list)
    axes: dict[str, list] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "id": self.panel_id,
            "axes": self.axes,
            "layers": [layer.to_dict() for layer in self.layers],
        }


class Panel:
    """Container for data layers sharing one set of axes.

    Layer order is held in a :class:`LayerOrder`; a layer's ``z_index`` is
    its position there, so ``data_layer_ids_by_z_index[layer.z_index] ==
    layer.id`` for every layer.
    """

    def __init__(
        self,
        layout: Mapping | None = None,
        parent: Plot | None = None,
        registry: ScaleRegistry | None = None,
    ) -> None:
        self.layout = dict(layout or {})
        panel_id = self.layout.get("id")
        if panel_id is None or panel_id == "":
            raise ConfigError("Every panel layout must have an 'id'.")
        self.id = str(panel_id)
        self.parent = parent
        self.registry = registry

        self.layer_order = LayerOrder()
        self.data_layers: dict[str, DataLayer] = {}
        for layer_layout in self.layout.get("data_layers") or []:
            self.add_data_layer(layer_layout)

    @property
    def data_layer_ids_by_z_index(self) -> list[str]:
        return self.layer_order.ids

    # --- Layers ---

    def add_data_layer(self, layout: Mapping) -> DataLayer:
        """Build a layer from its layout and insert it at its ``z_index`` (or on top)."""
        if not isinstance(layout, Mapping):
            raise ConfigError(f"Data layer layout must be a mapping, got {type(layout).__name__}.")
        layer_type = layout.get("type")
        layer_cls = LAYER_TYPES.get(layer_type)
        if layer_cls is None:
            known = ", ".join(sorted(t for t in LAYER_TYPES if t))
            raise ConfigError(f"Unknown data layer type '{layer_type}'. Use one of: {known}.")
        layer_id = layout.get("id")
        if layer_id is not None and str(layer_id) in self.data_layers:
            raise ConfigError(f"Data layer '{layer_id}' already exists in panel '{self.id}'.")

        layer = layer_cls(layout, parent=self, registry=self.registry)
        self.layer_order.add(layer.id, layer.config.z_index)
        self.data_layers[layer.id] = layer
        log.debug("Added %s '%s' to panel %s", type(layer).__name__, layer.id, self.id)
        return layer

    def remove_data_layer(self, layer_id: str) -> Panel:
        layer = self.get_data_layer(layer_id)
        layer.destroy()
        self.layer_order.remove(layer_id)
        del self.data_layers[layer_id]
        return self

    def get_data_layer(self, layer_id: str) -> DataLayer:
        try:
            return self.data_layers[layer_id]
        except KeyError:
            raise ConfigError(
                f"Unknown data layer '{layer_id}' in panel '{self.id}'. "
                f"Known layers: {self.layer_order.ids}"
            ) from None

    def move_layer_up(self, layer_id: str) -> Panel:
        self.get_data_layer(layer_id).move_up()
        return self

    def move_layer_down(self, layer_id: str) -> Panel:
        self.get_data_layer(layer_id).move_down()
        return self

    def layers_by_z_index(self) -> list[DataLayer]:
        return [self.data_layers[layer_id] for layer_id in self.layer_order]

    # --- Axes ---

    def get_axis_extent(self, axis_id: str) -> list:
        """Union of the extents of every layer with a field on this axis."""
        extents = [
            layer.get_axis_extent(axis_id)
            for layer in self.layers_by_z_index()
            if layer.config.axis(axis_id).field
        ]
        return union_extents(extents)

    # --- Render ---

    def reload(self, provider: Any = None, plot_state: Any = None) -> Panel:
        """Give every layer a fresh record collection.

        Without a provider the layers keep their current data, but open
        tooltips are still rebuilt.
        """
        for layer in self.layers_by_z_index():
            records = provider(layer.config, plot_state) if provider is not None else layer.data
            layer.reload(records)
        return self

    def render(self) -> PanelRender:
        layers = [layer.render() for layer in self.layers_by_z_index()]
        axes = {
            axis_id: self.get_axis_extent(axis_id)
            for axis_id in VALID_AXES
        }
        return PanelRender(panel_id=self.id, layers=layers, axes=axes)

    def __repr__(self) -> str:
        return f"Panel(id={self.id!r}, layers={self.layer_order.ids})"
