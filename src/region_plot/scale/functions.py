"""Built-in scale functions.

Each takes ``(parameters, input, index)`` and returns a value or ``None``.
``input`` is a field value when the rule names a field, otherwise the
whole record.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from matplotlib.colors import is_color_like, to_hex, to_rgb

from ..core.errors import ConfigError
from .color_scale import get_color_scale
from .registry import ScaleRegistry


def _as_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number):
        return None
    return number


def if_value(parameters: dict, input: Any, index: int | None = None) -> Any:
    """Return ``then`` when input equals ``field_value``, else ``else`` (or None)."""
    if input is None or parameters.get("field_value") != input:
        return parameters.get("else")
    return parameters.get("then")


def numerical_bin(parameters: dict, input: Any, index: int | None = None) -> Any:
    """Pick the value for the bin whose lower break the input falls on or above.

    Inputs below the first break use the first value.
    """
    breaks = parameters.get("breaks") or []
    values = parameters.get("values") or []
    number = _as_number(input)
    if number is None or not breaks:
        return parameters.get("null_value")
    position = 0
    for i, brk in enumerate(breaks):
        if number >= brk:
            position = i
    if position >= len(values):
        return parameters.get("null_value")
    return values[position]


def categorical_bin(parameters: dict, input: Any, index: int | None = None) -> Any:
    categories = parameters.get("categories") or []
    values = parameters.get("values") or []
    if input is None or input not in categories:
        return parameters.get("null_value")
    position = categories.index(input)
    if position >= len(values):
        return parameters.get("null_value")
    return values[position]


def ordinal_cycle(parameters: dict, input: Any, index: int | None = None) -> Any:
    """Cycle through ``values`` by element position; ignores the input."""
    values = parameters.get("values") or []
    if not values or index is None:
        return None
    return values[index % len(values)]


def _interpolate_pair(low: Any, high: Any, t: float) -> Any:
    if isinstance(low, (int, float)) and isinstance(high, (int, float)):
        return low + (high - low) * t
    if is_color_like(low) and is_color_like(high):
        lo_rgb, hi_rgb = to_rgb(low), to_rgb(high)
        mixed = tuple(a + (b - a) * t for a, b in zip(lo_rgb, hi_rgb))
        return to_hex(mixed)
    return low if t < 0.5 else high


def interpolate(parameters: dict, input: Any, index: int | None = None) -> Any:
    """Linear interpolation between ``values`` at matching ``breaks``.

    Numbers interpolate numerically, colors in RGB space.
    """
    breaks = parameters.get("breaks") or []
    values = parameters.get("values") or []
    null_value = parameters.get("null_value")
    if len(breaks) < 2 or len(breaks) != len(values):
        return null_value
    number = _as_number(input)
    if number is None:
        return null_value
    if number <= breaks[0]:
        return values[0]
    if number >= breaks[-1]:
        return values[-1]
    for upper in range(1, len(breaks)):
        if breaks[upper - 1] <= number <= breaks[upper]:
            span = breaks[upper] - breaks[upper - 1]
            if span == 0:
                return null_value
            t = (number - breaks[upper - 1]) / span
            return _interpolate_pair(values[upper - 1], values[upper], t)
    return null_value


def effect_direction(parameters: dict, input: Any, index: int | None = None) -> Any:
    """Choose ``+`` or ``-`` from the sign of beta, using 2 standard errors when known."""
    if not isinstance(input, Mapping):
        return None
    beta_field = parameters.get("beta_field")
    stderr_field = parameters.get("stderr_beta_field")
    if not beta_field or not stderr_field:
        raise ConfigError(
            "effect_direction must specify how to find required "
            "'beta_field' and 'stderr_beta_field' fields."
        )
    plus_result = parameters.get("+")
    minus_result = parameters.get("-")
    beta = _as_number(input.get(beta_field))
    stderr = _as_number(input.get(stderr_field))
    if beta is None:
        return None
    if stderr is not None:
        if beta - 2 * stderr > 0:
            return plus_result
        if beta + 2 * stderr < 0:
            return minus_result
        return None
    if beta > 0:
        return plus_result
    if beta < 0:
        return minus_result
    return None


def colormap(parameters: dict, input: Any, index: int | None = None) -> Any:
    """Map a numeric input onto a matplotlib colormap (``cmap``, ``vmin``, ``vmax``)."""
    scale = get_color_scale(
        parameters.get("cmap", "viridis"),
        float(parameters.get("vmin", 0.0)),
        float(parameters.get("vmax", 1.0)),
        parameters.get("null_value"),
    )
    return scale.value_to_hex(_as_number(input))


BUILTIN_SCALE_FUNCTIONS = {
    "if": if_value,
    "numerical_bin": numerical_bin,
    "categorical_bin": categorical_bin,
    "ordinal_cycle": ordinal_cycle,
    "interpolate": interpolate,
    "effect_direction": effect_direction,
    "colormap": colormap,
}


def register_builtins(registry: ScaleRegistry) -> ScaleRegistry:
    for name, fn in BUILTIN_SCALE_FUNCTIONS.items():
        registry.add(name, fn, override=True)
    return registry
