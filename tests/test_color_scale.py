"""Tests for ColorScale."""

import numpy as np
import pytest

from region_plot.core.errors import ConfigError
from region_plot.scale.color_scale import ColorScale, get_color_scale


class TestColorScaleInit:
    def test_default(self):
        cs = ColorScale()
        assert cs.cmap_name == "viridis"
        assert cs.vmin == 0.0
        assert cs.vmax == 1.0
        assert cs.nan_color is None

    def test_invalid_cmap_raises(self):
        with pytest.raises(ConfigError, match="Unknown colormap"):
            ColorScale("not_a_real_cmap")


class TestColorScaleLUT:
    def test_lut_shape(self):
        cs = ColorScale()
        assert cs.lut.shape == (256, 4)
        assert cs.lut.dtype == np.uint8

    def test_different_cmaps_differ(self):
        assert not np.array_equal(ColorScale("viridis").lut, ColorScale("plasma").lut)


class TestColorScaleValueToIndex:
    def test_min_maps_to_0(self):
        assert ColorScale(vmin=0, vmax=10).value_to_index(0) == 0

    def test_max_maps_to_255(self):
        assert ColorScale(vmin=0, vmax=10).value_to_index(10) == 255

    def test_clamps(self):
        cs = ColorScale(vmin=0, vmax=10)
        assert cs.value_to_index(-5) == 0
        assert cs.value_to_index(50) == 255

    def test_zero_range(self):
        assert ColorScale(vmin=3, vmax=3).value_to_index(3) == 127


class TestColorScaleValueToHex:
    def test_hex_format(self):
        color = ColorScale().value_to_hex(0.5)
        assert color.startswith("#")
        assert len(color) == 7

    def test_missing_uses_nan_color(self):
        cs = ColorScale(nan_color="#cccccc")
        assert cs.value_to_hex(None) == "#cccccc"
        assert cs.value_to_hex(float("nan")) == "#cccccc"

    def test_cached_instances(self):
        assert get_color_scale("viridis", 0.0, 1.0) is get_color_scale("viridis", 0.0, 1.0)
