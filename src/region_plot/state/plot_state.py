"""PlotState: reactive plot-wide state plus per-layer interaction state."""

from __future__ import annotations

from dataclasses import dataclass, field

import param

from .status import empty_status_flags


@dataclass
class LayerState:
    """Interaction state of one layer, kept outside the layer object.

    Lives in :class:`PlotState` keyed by ``"{panel}.{layer}"`` so it
    survives every re-render and data reload.
    """

    status_flags: dict[str, list[str]] = field(default_factory=empty_status_flags)
    extra_fields: dict[str, dict] = field(default_factory=dict)


class PlotState(param.Parameterized):
    """Plot-wide state subject to change via user input (region, LD reference).

    Changing any region parameter through ``Plot.apply_state`` triggers a
    re-render of every panel.
    """

    # --- Region ---
    chr = param.String(default="", doc="Chromosome of the plotted region")
    start = param.Integer(default=0, bounds=(0, None))
    end = param.Integer(default=0, bounds=(0, None))

    # --- Reference variant (set by scatter layers) ---
    ldrefvar = param.String(default=None, allow_None=True)

    # --- Internal: per-layer status flags and annotations ---
    layer_states = param.Dict(default={}, doc="{state_id: LayerState}")

    def __init__(self, **params):
        params.setdefault("layer_states", {})
        super().__init__(**params)

    def layer_state(self, state_id: str) -> LayerState:
        """Return (creating on first use) the state for one layer."""
        if state_id not in self.layer_states:
            self.layer_states[state_id] = LayerState()
        return self.layer_states[state_id]

    def drop_layer_state(self, state_id: str) -> None:
        self.layer_states.pop(state_id, None)

    @property
    def region(self) -> dict:
        return {"chr": self.chr, "start": self.start, "end": self.end}

    def __repr__(self) -> str:
        return (
            f"PlotState(chr={self.chr!r}, start={self.start}, end={self.end}, "
            f"layers={len(self.layer_states)})"
        )
