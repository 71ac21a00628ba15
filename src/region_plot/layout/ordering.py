"""LayerOrder: draw order (z_index) of sibling layers within a panel."""

from __future__ import annotations

import logging
from typing import Iterator

from ..core.errors import ConfigError

log = logging.getLogger(__name__)


class LayerOrder:
    """Ordered sequence of layer ids; position in the sequence is the z_index.

    Invariant: ``order.ids[order.z_index_of(layer_id)] == layer_id`` for
    every layer, and z_index values are contiguous from 0. Index 0 is drawn
    first (bottom); the last id is drawn on top.
    """

    def __init__(self) -> None:
        self._ids: list[str] = []
        self._z_index: dict[str, int] = {}

    @property
    def ids(self) -> list[str]:
        """Layer ids from bottom (z_index 0) to top."""
        return list(self._ids)

    def z_index_of(self, layer_id: str) -> int:
        self._require(layer_id)
        return self._z_index[layer_id]

    def add(self, layer_id: str, z_index: int | None = None) -> LayerOrder:
        """Insert a layer, at ``z_index`` if given, otherwise on top.

        A negative ``z_index`` counts from the end of the current sequence
        (``-1`` goes just below the current top layer). It is interpreted
        once, here; later moves only ever deal in positions.
        """
        if layer_id in self._z_index:
            raise ConfigError(f"Layer '{layer_id}' is already in this panel.")
        if z_index is not None and self._ids:
            if z_index < 0:
                z_index = max(len(self._ids) + z_index, 0)
            self._ids.insert(min(z_index, len(self._ids)), layer_id)
        else:
            self._ids.append(layer_id)
        self._reindex()
        return self

    def remove(self, layer_id: str) -> LayerOrder:
        self._require(layer_id)
        self._ids.remove(layer_id)
        self._reindex()
        return self

    def move_up(self, layer_id: str) -> LayerOrder:
        """Swap a layer with the one above it. No-op for the top layer."""
        position = self.z_index_of(layer_id)
        if position < len(self._ids) - 1:
            self._swap(position, position + 1)
        return self

    def move_down(self, layer_id: str) -> LayerOrder:
        """Swap a layer with the one below it. No-op for the bottom layer."""
        position = self.z_index_of(layer_id)
        if position > 0:
            self._swap(position, position - 1)
        return self

    def _swap(self, a: int, b: int) -> None:
        self._ids[a], self._ids[b] = self._ids[b], self._ids[a]
        self._reindex()
        log.debug("Layer order is now %s", self._ids)

    def _reindex(self) -> None:
        self._z_index = {layer_id: i for i, layer_id in enumerate(self._ids)}

    def _require(self, layer_id: str) -> None:
        if layer_id not in self._z_index:
            raise ConfigError(
                f"Unknown layer '{layer_id}'. Known layers: {self._ids}"
            )

    def __contains__(self, layer_id: object) -> bool:
        return layer_id in self._z_index

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._ids))

    def __len__(self) -> int:
        return len(self._ids)

    def __repr__(self) -> str:
        return f"LayerOrder({self._ids})"
