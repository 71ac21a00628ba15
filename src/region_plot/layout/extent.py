"""Axis extent computation: data range + buffers + minimum extent + hard clamps."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

import numpy as np

from ..core.errors import ConfigError
from .config import AxisConfig


def compute_extent(
    records: Sequence[Mapping],
    axis: AxisConfig,
    axis_id: str = "x",
) -> list:
    """Compute the [min, max] domain for one axis.

    Steps, in order:

    1. Empty data: return ``min_extent`` as given, or ``[]``.
    2. Any non-numeric value: ``[None, None]`` with no further adjustment.
    3. Buffers widen by a fraction of the raw data range (no-op for a
       zero-width range).
    4. ``min_extent`` only ever widens the window.
    5. ``floor`` / ``ceiling`` clamp last. The result is not re-checked for
       ``min <= max``; a floor above the ceiling is a layout error that
       shows up as an inverted extent.
    """
    if not axis.field:
        raise ConfigError(f"Axis '{axis_id}' has no field to compute an extent from.")

    if len(records) == 0:
        if axis.min_extent is None:
            return []
        return list(axis.min_extent)

    values = _numeric_values(records, axis.field)
    if values is None or len(values) == 0:
        return [None, None]

    data_min = float(values.min())
    data_max = float(values.max())
    span = data_max - data_min
    lower = data_min - span * axis.lower_buffer if axis.lower_buffer else data_min
    upper = data_max + span * axis.upper_buffer if axis.upper_buffer else data_max

    if axis.min_extent is not None:
        lo, hi = axis.min_extent
        lower = min(lo, lower)
        upper = max(hi, upper)

    if axis.floor is not None:
        lower = max(lower, axis.floor)
    if axis.ceiling is not None:
        upper = min(upper, axis.ceiling)
    return [lower, upper]


def _numeric_values(records: Sequence[Mapping], field: str) -> np.ndarray | None:
    """Finite float values of ``field``; None if any present value is non-numeric."""
    raw = [r.get(field) if isinstance(r, Mapping) else None for r in records]
    try:
        values = np.asarray(raw, dtype=np.float64)
    except (TypeError, ValueError):
        return None
    return values[np.isfinite(values)]


def union_extents(extents: Sequence[Sequence]) -> list:
    """Combine per-layer extents into one panel extent, ignoring empty or non-numeric ones."""
    usable = [e for e in extents if len(e) == 2 and e[0] is not None and e[1] is not None]
    if not usable:
        return []
    return [min(e[0] for e in usable), max(e[1] for e in usable)]
