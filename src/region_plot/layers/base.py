"""DataLayer: base class for every visual layer in a panel.

A layer owns no painting code. It turns records plus its layout into
resolved per-element values, axis extents and interaction state, and keeps
that state (status flags, annotations) in the plot's :class:`PlotState`
so it survives re-renders.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ..core.errors import ConfigError, UsageError
from ..core.identity import ElementIdentifier, make_base_id
from ..core.records import normalize_records
from ..core.validation import validate_axis_id
from ..layout.config import LayerConfig
from ..layout.extent import compute_extent
from ..scale import SCALABLE, ScaleRegistry, resolve_scalable_parameter
from ..state.annotations import AnnotationStore
from ..state.filters import filter_indexed, matches, validate_filters
from ..state.plot_state import LayerState
from ..state.status import STATUS_ADJECTIVES, ElementStateTracker, Tooltip
from .render import ElementRender, LayerRender
from .templating import render_template

if TYPE_CHECKING:
    from ..plot.panel import Panel
    from ..plot.plot import Plot

log = logging.getLogger(__name__)


class DataLayer:
    """Base data layer.

    Usage::

        layer = DataLayer({"id": "assoc", "id_field": "assoc:id",
                           "x_axis": {"field": "assoc:position"}})
        layer.data = records
        layer.get_axis_extent("x")
        layer.select_element(records[0])
    """

    # Merged under the caller's layout (caller values win)
    DEFAULT_LAYOUT: dict = {"id_field": "id"}
    # Layout keys resolved per element as scalable parameters
    SCALABLE_OPTIONS: tuple[str, ...] = ("color", "fill_opacity")

    def __init__(
        self,
        layout: Mapping | None = None,
        parent: Panel | None = None,
        registry: ScaleRegistry | None = None,
    ) -> None:
        self.config = LayerConfig.from_layout(layout, self.DEFAULT_LAYOUT)
        validate_filters(self.config.filters)
        if self.config.label is not None:
            validate_filters(self.config.label.filters)
        self.id = self.config.id
        self.parent = parent
        self.registry = registry if registry is not None else SCALABLE

        self._data: list[dict] = []
        self._by_id: dict[str, dict] = {}
        self._fields: list[str] = list(self.config.fields)

        plot = self.parent_plot
        layer_state = plot.state.layer_state(self.state_id) if plot is not None else LayerState()
        self.layer_state = layer_state
        self.identify = ElementIdentifier(self.base_id, self.config.id_field)
        self.annotations = AnnotationStore(self.identify, layer_state.extra_fields)
        self.status = ElementStateTracker(
            self.identify,
            status_flags=layer_state.status_flags,
            tooltip_config=self.config.tooltip,
            tooltip_factory=self._build_tooltip,
            find_record=self.get_element_by_id,
        )

    # --- Identity & hierarchy ---

    @property
    def layout(self) -> dict:
        return self.config.layout

    @property
    def parent_plot(self) -> Plot | None:
        return self.parent.parent if self.parent is not None else None

    @property
    def base_id(self) -> str:
        panel_id = self.parent.id if self.parent is not None else None
        plot = self.parent_plot
        plot_id = plot.id if plot is not None else None
        return make_base_id(plot_id, panel_id, self.id)

    @property
    def state_id(self) -> str:
        """Key of this layer's entry in ``PlotState.layer_states``."""
        if self.parent is None:
            return self.id
        return f"{self.parent.id}.{self.id}"

    @property
    def z_index(self) -> int:
        if self.parent is None:
            return 0
        return self.parent.layer_order.z_index_of(self.id)

    def get_element_id(self, element: Any) -> str:
        """Layer-scoped id for a record, raw id or element id."""
        return self.identify(element)

    def get_element_by_id(self, element_id: str) -> dict | None:
        return self._by_id.get(self.identify(element_id))

    # --- Data ---

    @property
    def data(self) -> list[dict]:
        return self._data

    @data.setter
    def data(self, records: Any) -> None:
        self._data = normalize_records(records)
        self.apply_custom_data_methods()
        self._by_id = {self.identify(r): r for r in self._data}

    def apply_custom_data_methods(self) -> DataLayer:
        """Hook for layer types that reshape freshly loaded data."""
        return self

    def reload(self, records: Any) -> DataLayer:
        """Replace the data with a complete fresh collection and restore open tooltips."""
        self.data = records
        self.status.restore_tooltips(self._data)
        return self

    def add_field(self, field: str, namespace: str, transformations: Any = None) -> str:
        """Request a field from a data source, as ``namespace:field|t1|t2``."""
        if not field or not namespace:
            raise UsageError("Must specify field name and namespace to use when adding field")
        if transformations is None:
            transformations = []
        elif isinstance(transformations, str):
            transformations = [transformations]
        elif not isinstance(transformations, (list, tuple)) or not all(
            isinstance(t, str) for t in transformations
        ):
            raise UsageError("Must provide transformations as either a string or array of strings")
        full_name = "|".join([f"{namespace}:{field}", *transformations])
        if full_name not in self._fields:
            self._fields.append(full_name)
        return full_name

    @property
    def fields(self) -> list[str]:
        return list(self._fields)

    # --- Scalable parameters ---

    def _lookup_field(self, record: Any, field: str) -> Any:
        """Record value first, even a null one; annotations only when the record lacks the field."""
        if isinstance(record, Mapping):
            if field in record:
                return record[field]
        elif not isinstance(record, str):
            return None
        return self.annotations.get(record, field)

    def scalable_option(self, name: str) -> Any:
        """The layout spec for a scalable option; layer types may substitute their own."""
        return self.config.option(name)

    def resolve_scalable_parameter(self, spec: Any, record: Any, index: int | None = None) -> Any:
        return resolve_scalable_parameter(
            spec, record, index, registry=self.registry, lookup=self._lookup_field,
        )

    # --- Extents ---

    def get_axis_extent(self, axis_id: str) -> list:
        """[min, max] for ``x``, ``y1`` or ``y2``; ``[]`` for empty data without min_extent."""
        validate_axis_id(axis_id)
        axis = self.config.axis(axis_id)
        if not axis.field:
            raise ConfigError(f"Layer '{self.id}' has no field defined for axis '{axis_id}'.")
        return compute_extent(self._data, axis, axis_id)

    # --- Annotations ---

    def set_element_annotation(self, element: Any, key: str, value: Any) -> DataLayer:
        self.annotations.set(element, key, value)
        return self

    def get_element_annotation(self, element: Any, key: str) -> Any:
        return self.annotations.get(element, key)

    # --- Status ---

    @property
    def tooltips(self) -> dict[str, Tooltip]:
        return self.status.tooltips

    def set_element_status(self, status: str, element: Any, active: bool = True, exclusive: bool = False) -> DataLayer:
        self.status.set_status(status, element, active, exclusive)
        return self

    def set_all_element_status(self, status: str, active: bool = True) -> DataLayer:
        self.status.set_all(status, self._data, active)
        return self

    def highlight_element(self, element: Any) -> DataLayer:
        self.status.highlight_element(element)
        return self

    def unhighlight_element(self, element: Any) -> DataLayer:
        self.status.unhighlight_element(element)
        return self

    def select_element(self, element: Any) -> DataLayer:
        self.status.select_element(element)
        return self

    def unselect_element(self, element: Any) -> DataLayer:
        self.status.unselect_element(element)
        return self

    def highlight_all_elements(self) -> DataLayer:
        self.status.highlight_all_elements(self._data)
        return self

    def unhighlight_all_elements(self) -> DataLayer:
        self.status.unhighlight_all_elements()
        return self

    def select_all_elements(self) -> DataLayer:
        self.status.select_all_elements(self._data)
        return self

    def unselect_all_elements(self) -> DataLayer:
        self.status.unselect_all_elements()
        return self

    def element_statuses(self, element: Any) -> tuple[str, ...]:
        element_id = self.identify(element)
        return tuple(s for s in STATUS_ADJECTIVES if element_id in self.status.status_flags[s])

    # --- Tooltips ---

    def create_tooltip(self, record: Any) -> Tooltip:
        return self.status.create_tooltip(record)

    def destroy_tooltip(self, element: Any, temporary: bool = False) -> DataLayer:
        self.status.destroy_tooltip(element, temporary)
        return self

    def position_tooltip(self, element: Any = None) -> dict | None:
        """Recompute the anchor of an open tooltip. Returns None if it is not open."""
        if element is None:
            raise UsageError("position_tooltip requires an element or element id")
        tooltip = self.tooltips.get(self.identify(element))
        if tooltip is None:
            return None
        tooltip.position = self._get_tooltip_position(tooltip.data)
        return tooltip.position

    def _get_tooltip_position(self, record: Any) -> dict | None:
        """Layer-specific tooltip anchor in data coordinates."""
        return None

    def _build_tooltip(self, record: Any, element_id: str) -> Tooltip:
        config = self.config.tooltip
        html = ""
        closable = False
        if config is not None:
            html = render_template(config.html, record, self.annotations.get_all(record), autoescape=True)
            closable = config.closable
        return Tooltip(
            element_id=element_id,
            data=record,
            html=html,
            closable=closable,
            position=self._get_tooltip_position(record),
        )

    # --- Filters ---

    def filter(self, filters: Any, record: Any) -> bool:
        """True if ``record`` passes every filter; annotations count as fields."""
        return matches(record, list(filters or ()), self._lookup_field)

    def apply_filters(self) -> list[tuple[int, dict]]:
        """Records passing ``layout.filters`` with their original data index."""
        return filter_indexed(self._data, list(self.config.filters), self._lookup_field)

    # --- Ordering ---

    def move_up(self) -> DataLayer:
        """Draw this layer one step later (above its upper neighbour)."""
        if self.parent is not None:
            self.parent.layer_order.move_up(self.id)
        return self

    def move_down(self) -> DataLayer:
        if self.parent is not None:
            self.parent.layer_order.move_down(self.id)
        return self

    # --- Rendering ---

    def _element_values(self, record: dict, index: int) -> dict[str, Any]:
        return {
            name: self.resolve_scalable_parameter(self.scalable_option(name), record, index)
            for name in self.SCALABLE_OPTIONS
            if self.scalable_option(name) is not None
        }

    def _track_data(self) -> list[tuple[int, dict]]:
        return self.apply_filters()

    def render(self) -> LayerRender:
        """Resolve every visible element. Same state in, same output out."""
        elements = [
            ElementRender(
                element_id=self.identify(record),
                index=index,
                values=self._element_values(record, index),
                statuses=self.element_statuses(record),
            )
            for index, record in self._track_data()
        ]
        result = LayerRender(
            layer_id=self.id,
            layer_type=self.config.type,
            z_index=self.z_index,
            elements=elements,
            tooltips=list(self.tooltips.values()),
        )
        log.debug("Rendered layer %s: %d elements", self.id, len(elements))
        return result

    def destroy(self) -> None:
        """Forget this layer's persistent state."""
        plot = self.parent_plot
        if plot is not None:
            plot.state.drop_layer_state(self.state_id)
        self.status.tooltips.clear()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, records={len(self._data)})"
