"""Layout validation with clear error messages for plot authors."""

from __future__ import annotations

from typing import Any

from .errors import ConfigError


VALID_AXES = ("x", "y1", "y2")


def validate_axis_id(axis_id: Any) -> str:
    """Validate that an axis identifier is one of x, y1, y2."""
    if axis_id not in VALID_AXES:
        raise ConfigError(
            f"Invalid axis identifier {axis_id!r}. "
            f"Use one of: {', '.join(VALID_AXES)}."
        )
    return axis_id


def validate_fraction(value: Any, name: str) -> float:
    """Validate a buffer fraction (plain number, normally 0-1)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(
            f"{name} must be a number (fraction of the data range), "
            f"got {type(value).__name__}."
        )
    return float(value)


def validate_bound(value: Any, name: str) -> float | None:
    """Validate an optional hard bound such as floor or ceiling."""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{name} must be a number, got {type(value).__name__}.")
    return float(value)


def validate_min_extent(value: Any) -> tuple[float, float] | None:
    """Validate that min_extent is a [lo, hi] pair of numbers."""
    if value is None:
        return None
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ConfigError(
            f"min_extent must be a [lo, hi] pair, got {value!r}."
        )
    lo, hi = value
    return (validate_bound(lo, "min_extent[0]"), validate_bound(hi, "min_extent[1]"))


def validate_colormap_name(name: str) -> str:
    """Validate that a matplotlib colormap name exists."""
    import matplotlib.pyplot as plt

    try:
        plt.get_cmap(name)
    except ValueError:
        raise ConfigError(
            f"Unknown colormap '{name}'. Use a matplotlib colormap name "
            f"like 'viridis', 'plasma', 'RdBu_r', etc."
        ) from None
    return name
