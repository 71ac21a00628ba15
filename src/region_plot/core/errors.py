"""Error types raised by the layer engine."""

from __future__ import annotations


class ConfigError(ValueError):
    """The layout or registry configuration is invalid.

    Raised synchronously for problems the caller controls: an unknown axis,
    a missing axis field, an unregistered scale function, a missing
    ``category_field``. These indicate a layout bug and are never retried.
    """


class UsageError(TypeError):
    """A public method was called with missing or ill-typed arguments."""
