"""ColorScale: matplotlib colormap → 256-entry RGBA lookup table → hex colors."""

from __future__ import annotations

import math
from functools import lru_cache

import numpy as np

from ..core.validation import validate_colormap_name


class ColorScale:
    """Maps scalar values to hex colors via a 256-entry RGBA lookup table.

    The LUT is pre-computed once from a matplotlib colormap; per-element
    lookups are a clamp and an index.
    """

    __slots__ = ("_lut", "_vmin", "_vmax", "_cmap_name", "_nan_color")

    LUT_SIZE = 256

    def __init__(
        self,
        cmap_name: str = "viridis",
        vmin: float = 0.0,
        vmax: float = 1.0,
        nan_color: str | None = None,
    ) -> None:
        validate_colormap_name(cmap_name)
        self._cmap_name = cmap_name
        self._vmin = float(vmin)
        self._vmax = float(vmax)
        self._nan_color = nan_color
        self._lut = self._build_lut()

    def _build_lut(self) -> np.ndarray:
        """Build a (256, 4) uint8 RGBA lookup table from the matplotlib cmap."""
        import matplotlib.pyplot as plt
        cmap = plt.get_cmap(self._cmap_name)
        positions = np.linspace(0.0, 1.0, self.LUT_SIZE)
        rgba_float = cmap(positions)  # (256, 4) float in [0, 1]
        return (rgba_float * 255).astype(np.uint8)

    @property
    def lut(self) -> np.ndarray:
        """(256, 4) uint8 RGBA lookup table."""
        return self._lut

    @property
    def vmin(self) -> float:
        return self._vmin

    @property
    def vmax(self) -> float:
        return self._vmax

    @property
    def cmap_name(self) -> str:
        return self._cmap_name

    @property
    def nan_color(self) -> str | None:
        return self._nan_color

    def value_to_index(self, value: float) -> int:
        """Map a scalar value to a LUT index [0, 255]."""
        if self._vmax == self._vmin:
            return 127
        normalized = (value - self._vmin) / (self._vmax - self._vmin)
        clamped = max(0.0, min(1.0, normalized))
        return int(clamped * 255)

    def value_to_hex(self, value: float | None) -> str | None:
        """Map a scalar value to a ``#rrggbb`` color; missing values get nan_color."""
        if value is None or (isinstance(value, float) and math.isnan(value)):
            return self._nan_color
        r, g, b, _ = self._lut[self.value_to_index(float(value))]
        return f"#{int(r):02x}{int(g):02x}{int(b):02x}"


@lru_cache(maxsize=32)
def get_color_scale(
    cmap_name: str,
    vmin: float,
    vmax: float,
    nan_color: str | None = None,
) -> ColorScale:
    """Shared ColorScale instances so scale functions don't rebuild LUTs per element."""
    return ColorScale(cmap_name, vmin=vmin, vmax=vmax, nan_color=nan_color)
