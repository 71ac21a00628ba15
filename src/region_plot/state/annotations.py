"""AnnotationStore: persistent per-element key/value marks for one layer."""

from __future__ import annotations

from typing import Any, Callable


class AnnotationStore:
    """User- or application-set fields keyed by layer-scoped element id.

    The store is not data-driven: reloading a layer's records leaves it
    untouched, so marks survive re-renders until explicitly cleared.
    Lookups return ``None`` (never raise) when nothing is stored.
    """

    def __init__(
        self,
        identify: Callable[[Any], str],
        entries: dict[str, dict[str, Any]] | None = None,
    ) -> None:
        self._identify = identify
        # Shared with the layer state so the marks outlive the layer object
        self._entries = entries if entries is not None else {}

    @property
    def entries(self) -> dict[str, dict[str, Any]]:
        return self._entries

    def set(self, element: Any, key: str, value: Any) -> None:
        element_id = self._identify(element)
        self._entries.setdefault(element_id, {})[key] = value

    def get(self, element: Any, key: str) -> Any:
        entry = self._entries.get(self._identify(element))
        if entry is None:
            return None
        return entry.get(key)

    def get_all(self, element: Any) -> dict[str, Any]:
        """All annotations for one element (a copy; empty if none)."""
        return dict(self._entries.get(self._identify(element), {}))

    def remove(self, element: Any, key: str) -> None:
        element_id = self._identify(element)
        entry = self._entries.get(element_id)
        if entry is None:
            return
        entry.pop(key, None)
        if not entry:
            del self._entries[element_id]

    def clear(self, element: Any = None) -> None:
        """Clear one element's annotations, or every annotation when no element is given."""
        if element is None:
            self._entries.clear()
        else:
            self._entries.pop(self._identify(element), None)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"AnnotationStore(elements={len(self._entries)})"
