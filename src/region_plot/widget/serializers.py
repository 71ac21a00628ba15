"""Serializers: convert render results to JSON strings for a JS painter."""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from typing import Any

import numpy as np

from ..layers.render import LayerRender
from ..plot.panel import PanelRender
from ..plot.plot import PlotRender


def _sanitize(value: Any) -> Any:
    """Recursively replace non-finite floats with None and unwrap numpy scalars.

    ``np.float64`` subclasses ``float``, so ``json.dumps`` never hands it to
    the ``default`` hook; NaN has to be caught before dumping.
    """
    if isinstance(value, Mapping):
        return {k: _sanitize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_sanitize(v) for v in value]
    if isinstance(value, (set, frozenset)):
        return [_sanitize(v) for v in sorted(value, key=str)]
    if isinstance(value, np.ndarray):
        return [_sanitize(v) for v in value.tolist()]
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if isinstance(value, np.integer):
        return int(value)
    if isinstance(value, (float, np.floating)):
        value = float(value)
        return value if math.isfinite(value) else None
    return value


def _json_default(value: Any) -> Any:
    return str(value)


def _dumps(data: dict) -> str:
    return json.dumps(_sanitize(data), default=_json_default, allow_nan=False)


def serialize_layer_render(render: LayerRender) -> str:
    """Serialize one layer's resolved elements, labels and tooltips as JSON string."""
    return _dumps(render.to_dict())


def serialize_panel_render(render: PanelRender) -> str:
    """Serialize a panel's layers (in draw order) and axis extents as JSON string."""
    return _dumps(render.to_dict())


def serialize_plot_render(render: PlotRender) -> str:
    return _dumps(render.to_dict())
