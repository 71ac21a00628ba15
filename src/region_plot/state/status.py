"""ElementStateTracker: status flags and tooltip lifecycle for one layer.

Status flags are ordered sets of element ids. Tooltip visibility is driven
by declarative expressions over those flags, e.g.::

    tooltip = {
        "show": {"or": ["highlighted", "selected"]},
        "hide": {"and": ["unhighlighted", "unselected"]},
    }

Whether a tooltip is currently open is tracked separately in the
``has_tooltip`` flag, so closing a tooltip never changes selection or
highlight, and a closed tooltip stays closed across re-renders.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

from ..core.errors import ConfigError

log = logging.getLogger(__name__)

STATUS_ADJECTIVES = ("highlighted", "selected", "faded", "hidden")
TOOLTIP_FLAG = "has_tooltip"
STATUS_FLAGS = STATUS_ADJECTIVES + (TOOLTIP_FLAG,)
EXPRESSION_OPERATORS = ("and", "or")
# "unselected" is true when "selected" is not
EXPRESSION_NAMES = STATUS_ADJECTIVES + tuple(f"un{s}" for s in STATUS_ADJECTIVES)


def empty_status_flags() -> dict[str, list[str]]:
    return {flag: [] for flag in STATUS_FLAGS}


def validate_status_expression(expression: Any) -> Any:
    """Check a show/hide expression: names, lists, or {"and"|"or": ...} mappings."""
    if isinstance(expression, str):
        if expression not in EXPRESSION_NAMES:
            raise ConfigError(
                f"Unknown status '{expression}' in tooltip expression. "
                f"Use one of: {', '.join(EXPRESSION_NAMES)}."
            )
    elif isinstance(expression, (list, tuple)):
        for item in expression:
            validate_status_expression(item)
    elif isinstance(expression, Mapping):
        for operator, operand in expression.items():
            if operator not in EXPRESSION_OPERATORS:
                raise ConfigError(
                    f"Unknown operator '{operator}' in tooltip expression. Use 'and' or 'or'."
                )
            validate_status_expression(operand)
    else:
        raise ConfigError(
            f"Tooltip expressions must be strings, lists or mappings, got {type(expression).__name__}."
        )
    return expression


def evaluate_status_expression(
    expression: Any,
    statuses: Mapping[str, bool],
    operator: str = "and",
) -> bool:
    """Evaluate a status expression against one element's statuses.

    Lists combine their items with the enclosing operator (``and`` at the
    top level); each key of a mapping applies its own operator, and the
    keys' results combine with the enclosing operator.
    """
    if expression is None:
        return False
    if isinstance(expression, str):
        return bool(statuses.get(expression, False))
    combine = all if operator == "and" else any
    if isinstance(expression, (list, tuple)):
        return combine(evaluate_status_expression(e, statuses) for e in expression) if expression else False
    if isinstance(expression, Mapping):
        if not expression:
            return False
        return combine(
            evaluate_status_expression(operand, statuses, sub_operator)
            for sub_operator, operand in expression.items()
        )
    return False


@dataclass
class Tooltip:
    """A tooltip descriptor for the painter. One per element id."""

    element_id: str
    data: Any
    html: str = ""
    closable: bool = False
    position: dict | None = None

    def to_dict(self) -> dict:
        d = {
            "id": f"{self.element_id}-tooltip",
            "elementId": self.element_id,
            "html": self.html,
            "closable": self.closable,
        }
        if self.position is not None:
            d["position"] = self.position
        return d


TooltipFactory = Callable[[Any, str], Tooltip]


class ElementStateTracker:
    """Single source of truth for element statuses and open tooltips in a layer.

    Parameters
    ----------
    identify : callable
        Resolves a record, raw id or element id to the layer-scoped id.
    status_flags : dict, optional
        Backing ``{flag: [element ids]}`` storage; shared with the layer
        state so it survives re-renders.
    tooltip_config : TooltipConfig, optional
        Object with ``show``/``hide`` expressions. No tooltips are shown
        automatically without one.
    tooltip_factory : callable, optional
        ``(record, element_id) -> Tooltip``; builds content and position.
    find_record : callable, optional
        ``element_id -> record or None`` over the layer's current data.
    """

    def __init__(
        self,
        identify: Callable[[Any], str],
        status_flags: dict[str, list[str]] | None = None,
        tooltip_config: Any = None,
        tooltip_factory: TooltipFactory | None = None,
        find_record: Callable[[str], Any] | None = None,
    ) -> None:
        self._identify = identify
        self._flags = status_flags if status_flags is not None else empty_status_flags()
        for flag in STATUS_FLAGS:
            self._flags.setdefault(flag, [])
        self._tooltip_config = tooltip_config
        self._tooltip_factory = tooltip_factory
        self._find_record = find_record or (lambda element_id: None)
        self.tooltips: dict[str, Tooltip] = {}

    @property
    def status_flags(self) -> dict[str, list[str]]:
        return self._flags

    def ids_with(self, flag: str) -> list[str]:
        _validate_flag(flag, STATUS_FLAGS)
        return list(self._flags[flag])

    def is_active(self, flag: str, element: Any) -> bool:
        _validate_flag(flag, STATUS_FLAGS)
        return self._identify(element) in self._flags[flag]

    def get_statuses(self, element: Any) -> dict[str, bool]:
        """``{status: bool}`` for every status and its ``un`` negation."""
        element_id = self._identify(element)
        statuses = {}
        for status in STATUS_ADJECTIVES:
            active = element_id in self._flags[status]
            statuses[status] = active
            statuses[f"un{status}"] = not active
        return statuses

    # --- Status flags ---

    def set_status(self, flag: str, element: Any, active: bool, exclusive: bool = False) -> None:
        """Add (``active``) or remove an element from a status flag.

        With ``exclusive``, every other element is first removed from the
        flag. Ids that are not in the current data are still recorded, so an
        interaction that arrives before its data is not lost.
        """
        _validate_flag(flag, STATUS_ADJECTIVES)
        element_id = self._identify(element)
        if exclusive:
            for other_id in list(self._flags[flag]):
                if other_id != element_id:
                    self._flags[flag].remove(other_id)
                    self.update_tooltip(other_id)

        members = self._flags[flag]
        if active and element_id not in members:
            members.append(element_id)
        elif not active and element_id in members:
            members.remove(element_id)
        else:
            return
        self.update_tooltip(element)

    def set_all(self, flag: str, records: Iterable[Any], active: bool) -> None:
        """Apply a status to every record, in data order; inactive clears the flag."""
        _validate_flag(flag, STATUS_ADJECTIVES)
        if active:
            for record in records:
                self.set_status(flag, record, True)
            return
        for element_id in list(self._flags[flag]):
            self.set_status(flag, element_id, False)
        self._flags[flag].clear()

    def highlight_element(self, element: Any, exclusive: bool = False) -> None:
        self.set_status("highlighted", element, True, exclusive)

    def unhighlight_element(self, element: Any) -> None:
        self.set_status("highlighted", element, False)

    def select_element(self, element: Any, exclusive: bool = False) -> None:
        self.set_status("selected", element, True, exclusive)

    def unselect_element(self, element: Any) -> None:
        self.set_status("selected", element, False)

    def highlight_all_elements(self, records: Iterable[Any]) -> None:
        self.set_all("highlighted", records, True)

    def unhighlight_all_elements(self) -> None:
        self.set_all("highlighted", (), False)

    def select_all_elements(self, records: Iterable[Any]) -> None:
        self.set_all("selected", records, True)

    def unselect_all_elements(self) -> None:
        self.set_all("selected", (), False)

    # --- Tooltips ---

    def create_tooltip(self, record: Any) -> Tooltip:
        """Create (or refresh) the tooltip for an element and mark it open."""
        element_id = self._identify(record)
        if self._tooltip_factory is not None:
            tooltip = self._tooltip_factory(record, element_id)
        else:
            tooltip = Tooltip(element_id=element_id, data=record)
        self.tooltips[element_id] = tooltip
        if element_id not in self._flags[TOOLTIP_FLAG]:
            self._flags[TOOLTIP_FLAG].append(element_id)
        return tooltip

    def destroy_tooltip(self, element: Any, temporary: bool = False) -> None:
        """Remove an element's tooltip.

        Only ``has_tooltip`` changes; selection and highlight are left alone.
        ``temporary`` keeps the open state so a re-render can restore it.
        """
        element_id = self._identify(element)
        self.tooltips.pop(element_id, None)
        if not temporary and element_id in self._flags[TOOLTIP_FLAG]:
            self._flags[TOOLTIP_FLAG].remove(element_id)

    def update_tooltip(self, element: Any) -> None:
        """Re-evaluate show/hide for one element and create or destroy its tooltip."""
        config = self._tooltip_config
        if config is None or config.show is None:
            return
        statuses = self.get_statuses(element)
        show = evaluate_status_expression(config.show, statuses)
        hide = evaluate_status_expression(config.hide, statuses)
        if show and not hide:
            record = element if isinstance(element, Mapping) else self._find_record(self._identify(element))
            if record is None:
                log.debug("No data for %r yet; tooltip not created", element)
                return
            self.create_tooltip(record)
        else:
            self.destroy_tooltip(element)

    def restore_tooltips(self, records: Iterable[Any]) -> None:
        """Rebuild descriptors for open tooltips against freshly loaded records.

        Tooltips the user closed are absent from ``has_tooltip`` and stay closed.
        """
        for element_id in list(self.tooltips):
            self.destroy_tooltip(element_id, temporary=True)
        open_ids = set(self._flags[TOOLTIP_FLAG])
        if not open_ids:
            return
        for record in records:
            if self._identify(record) in open_ids:
                self.create_tooltip(record)

    def __repr__(self) -> str:
        counts = ", ".join(f"{flag}={len(ids)}" for flag, ids in self._flags.items())
        return f"ElementStateTracker({counts})"


def _validate_flag(flag: str, allowed: tuple[str, ...]) -> None:
    if flag not in allowed:
        raise ConfigError(
            f"Unknown status flag '{flag}'. Use one of: {', '.join(allowed)}."
        )
