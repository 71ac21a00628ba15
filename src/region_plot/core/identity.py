"""Element identity: the one place records, ids and partial records become ids.

Every component that needs "something with an id" (status flags, tooltips,
annotations) goes through :func:`resolve_element_id`, so a raw id (``"a"``),
an already-scoped element id (``"plot_p_d-a"``) and a record
(``{"d:id": "a"}``) all resolve to the same layer-scoped string.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

log = logging.getLogger(__name__)

# Characters that are not safe inside a rendered element id
_UNSAFE_ID_CHARS = re.compile(r"[:.\[\],]")
_NON_WORD = re.compile(r"\W")

DEFAULT_ID_FIELD = "id"


def make_base_id(*parts: str) -> str:
    """Join plot, panel and layer ids into the layer's base id."""
    return ".".join(str(p) for p in parts if p)


def _raw_id(element: Any, id_field: str) -> str:
    if isinstance(element, (str, int)):
        return _NON_WORD.sub("", str(element))
    if isinstance(element, Mapping):
        for key in (id_field, DEFAULT_ID_FIELD):
            value = element.get(key)
            if value is not None:
                return _NON_WORD.sub("", str(value))
    # Partially loaded data: tolerate it rather than fail the interaction
    log.warning("Could not find %r on element %r; using its string form", id_field, element)
    return _NON_WORD.sub("", str(element))


def resolve_element_id(element: Any, base_id: str, id_field: str = DEFAULT_ID_FIELD) -> str:
    """Return the layer-scoped element id for a record, raw id or element id.

    Strings that already carry the layer prefix are returned unchanged.
    """
    prefix = scoped_prefix(base_id)
    if isinstance(element, str) and prefix and element.startswith(prefix):
        return element
    raw = _raw_id(element, id_field)
    scoped = f"{base_id}-{raw}" if base_id else raw
    return _UNSAFE_ID_CHARS.sub("_", scoped)


def scoped_prefix(base_id: str) -> str:
    """The prefix every element id of a layer starts with."""
    if not base_id:
        return ""
    return _UNSAFE_ID_CHARS.sub("_", f"{base_id}-")


@dataclass(frozen=True)
class ElementIdentifier:
    """Callable that resolves element ids for one layer.

    Passed to the annotation store and the state tracker so they share a
    single identity rule.
    """

    base_id: str
    id_field: str = DEFAULT_ID_FIELD

    def __call__(self, element: Any) -> str:
        return resolve_element_id(element, self.base_id, self.id_field)
