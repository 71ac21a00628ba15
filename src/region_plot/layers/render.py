"""Render output: resolved per-element values handed to a painter."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..state.status import Tooltip


@dataclass
class ElementRender:
    """One drawable element with its resolved visual values."""

    element_id: str
    index: int
    values: dict[str, Any]
    statuses: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "id": self.element_id,
            "index": self.index,
            "values": self.values,
            "statuses": list(self.statuses),
        }


@dataclass
class LabelRender:
    element_id: str
    text: str
    x: Any
    y: Any
    offset: float
    style: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "id": f"{self.element_id}_label",
            "elementId": self.element_id,
            "text": self.text,
            "x": self.x,
            "y": self.y,
            "offset": self.offset,
            "style": dict(self.style),
        }


@dataclass
class LayerRender:
    """Everything a painter needs to draw one layer."""

    layer_id: str
    layer_type: str | None
    z_index: int
    elements: list[ElementRender] = field(default_factory=list)
    labels: list[LabelRender] = field(default_factory=list)
    tooltips: list[Tooltip] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def element_ids(self) -> list[str]:
        return [e.element_id for e in self.elements]

    def to_dict(self) -> dict:
        d = {
            "id": self.layer_id,
            "type": self.layer_type,
            "zIndex": self.z_index,
            "elements": [e.to_dict() for e in self.elements],
            "tooltips": [t.to_dict() for t in self.tooltips],
        }
        if self.labels:
            d["labels"] = [label.to_dict() for label in self.labels]
        if self.extra:
            d.update(self.extra)
        return d
