"""ScaleRegistry: named, pure scale functions addressable by string."""

from __future__ import annotations

import logging
from typing import Any, Callable

from ..core.errors import ConfigError

log = logging.getLogger(__name__)

ScaleFunction = Callable[[dict, Any, "int | None"], Any]


class ScaleRegistry:
    """Registry of scale functions ``fn(parameters, input, index) -> value``.

    ``add`` and ``remove`` are the only mutation surface. The registry does
    not check whether a function is still referenced by a layout when it is
    removed; scoping registration is the caller's job.
    """

    def __init__(self) -> None:
        self._items: dict[str, ScaleFunction] = {}

    def add(self, name: str, fn: ScaleFunction, override: bool = False) -> ScaleRegistry:
        """Register ``fn`` under ``name``."""
        if not callable(fn):
            raise ConfigError(f"Scale function '{name}' must be callable.")
        if name in self._items and not override:
            raise ConfigError(
                f"Scale function '{name}' is already registered. "
                "Pass override=True to replace it."
            )
        self._items[name] = fn
        log.debug("Registered scale function %r", name)
        return self

    def remove(self, name: str) -> bool:
        """Unregister ``name``. Returns False if it was not registered."""
        removed = self._items.pop(name, None) is not None
        if removed:
            log.debug("Removed scale function %r", name)
        return removed

    def get(self, name: str) -> ScaleFunction:
        try:
            return self._items[name]
        except KeyError:
            raise ConfigError(
                f"Unknown scale function '{name}'. "
                f"Registered: {sorted(self._items)}"
            ) from None

    def list(self) -> list[str]:
        return sorted(self._items)

    def __contains__(self, name: object) -> bool:
        return name in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"ScaleRegistry({len(self._items)} functions)"
