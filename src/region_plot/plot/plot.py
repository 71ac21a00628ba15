"""Plot: the top of the hierarchy. Owns panels, the data provider and PlotState."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ..core.errors import ConfigError
from ..core.records import DataProvider
from ..scale import ScaleRegistry
from ..state.plot_state import PlotState
from .panel import Panel, PanelRender

log = logging.getLogger(__name__)

# PlotState parameters that callers may change through apply_state
STATE_KEYS = ("chr", "start", "end", "ldrefvar")


@dataclass
class PlotRender:
    plot_id: str
    state: dict
    panels: list[PanelRender] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.plot_id,
            "state": self.state,
            "panels": [panel.to_dict() for panel in self.panels],
        }


class Plot:
    """A region plot: panels of data layers driven by one shared state.

    Usage::

        plot = Plot("plot", {
            "state": {"chr": "10", "start": 114_550_000, "end": 115_067_000},
            "panels": [{"id": "assoc", "data_layers": [
                {"id": "points", "type": "scatter", "id_field": "id",
                 "x_axis": {"field": "position"},
                 "y_axis": {"axis": 1, "field": "log_pvalue"}},
            ]}],
        }, data_provider=StaticProvider(records))
        plot.render()
        plot.apply_state(start=114_600_000)

    Every change applied through :meth:`apply_state` reloads data from the
    provider and re-renders every panel. Status flags, annotations and open
    tooltips persist across re-renders.
    """

    def __init__(
        self,
        id: str,
        layout: Mapping | None = None,
        data_provider: DataProvider | None = None,
        state: PlotState | None = None,
        registry: ScaleRegistry | None = None,
    ) -> None:
        if not id:
            raise ConfigError("A plot must have a non-empty id.")
        self.id = str(id)
        self.layout = dict(layout or {})
        self.data_provider = data_provider
        self.registry = registry
        if state is None:
            initial = dict(self.layout.get("state") or {})
            _check_state_keys(initial)
            state = PlotState(**initial)
        self.state = state

        self.panels: dict[str, Panel] = {}
        self.panel_ids: list[str] = []
        for panel_layout in self.layout.get("panels") or []:
            self.add_panel(panel_layout)

        self.last_render: PlotRender | None = None
        self.state.param.watch(self._on_state_change, list(STATE_KEYS), onlychanged=False)

    # --- Panels ---

    def add_panel(self, layout: Mapping) -> Panel:
        panel = Panel(layout, parent=self, registry=self.registry)
        if panel.id in self.panels:
            raise ConfigError(f"Panel '{panel.id}' already exists in plot '{self.id}'.")
        self.panels[panel.id] = panel
        self.panel_ids.append(panel.id)
        return panel

    def remove_panel(self, panel_id: str) -> Plot:
        panel = self.get_panel(panel_id)
        for layer_id in panel.layer_order.ids:
            panel.remove_data_layer(layer_id)
        del self.panels[panel_id]
        self.panel_ids.remove(panel_id)
        return self

    def get_panel(self, panel_id: str) -> Panel:
        try:
            return self.panels[panel_id]
        except KeyError:
            raise ConfigError(
                f"Unknown panel '{panel_id}'. Known panels: {self.panel_ids}"
            ) from None

    # --- State ---

    def apply_state(self, **changes: Any) -> PlotRender:
        """Update plot state and re-render. With no changes, just re-render."""
        _check_state_keys(changes)
        if not changes:
            return self.render()
        # One batched update -> one watcher call -> one render
        self.state.param.update(**changes)
        return self.last_render

    def _on_state_change(self, *events: Any) -> None:
        log.debug("State change: %s", ", ".join(f"{e.name}={e.new!r}" for e in events))
        self.render()

    # --- Render ---

    def render(self) -> PlotRender:
        """Reload data for every layer and resolve the whole plot."""
        panels = []
        for panel_id in self.panel_ids:
            panel = self.panels[panel_id]
            panel.reload(self.data_provider, self.state)
            panels.append(panel.render())
        self.last_render = PlotRender(plot_id=self.id, state=self._state_dict(), panels=panels)
        log.debug("Rendered plot %s (%d panels)", self.id, len(panels))
        return self.last_render

    def _state_dict(self) -> dict:
        return {key: getattr(self.state, key) for key in STATE_KEYS}

    def __repr__(self) -> str:
        return f"Plot(id={self.id!r}, panels={self.panel_ids}, state={self.state!r})"


def _check_state_keys(changes: Mapping) -> None:
    unknown = [key for key in changes if key not in STATE_KEYS]
    if unknown:
        raise ConfigError(
            f"Unknown plot state key(s): {unknown}. Use one of: {', '.join(STATE_KEYS)}."
        )
