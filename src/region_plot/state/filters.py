"""Layout-driven record filters, e.g. "only label points where custom_field = true"."""

from __future__ import annotations

import operator as op
from collections.abc import Mapping
from typing import Any, Callable, Iterable, Sequence

from ..core.errors import ConfigError
from ..scale.resolver import FieldLookup, default_lookup


def _ordered(compare: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    def test(field_value: Any, value: Any) -> bool:
        if field_value is None or value is None:
            return False
        try:
            return compare(field_value, value)
        except TypeError:
            return False
    return test


def _in(field_value: Any, value: Any) -> bool:
    try:
        return field_value in value
    except TypeError:
        return False


def _match(field_value: Any, value: Any) -> bool:
    if field_value is None:
        return False
    return str(value) in str(field_value)


OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "=": op.eq,
    "!=": op.ne,
    "<": _ordered(op.lt),
    "<=": _ordered(op.le),
    ">": _ordered(op.gt),
    ">=": _ordered(op.ge),
    "in": _in,
    "match": _match,
}


def validate_filters(filters: Iterable[Mapping]) -> None:
    for rule in filters:
        if not isinstance(rule, Mapping) or "field" not in rule:
            raise ConfigError(f"Filter {rule!r} must be a mapping with a 'field'.")
        if rule.get("operator", "=") not in OPERATORS:
            raise ConfigError(
                f"Unknown filter operator {rule.get('operator')!r}. "
                f"Use one of: {', '.join(OPERATORS)}."
            )


def matches(
    record: Any,
    filters: Sequence[Mapping],
    lookup: FieldLookup = default_lookup,
) -> bool:
    """True when the record passes every filter (an empty filter list passes all)."""
    for rule in filters:
        test = OPERATORS.get(rule.get("operator", "="))
        if test is None:
            raise ConfigError(f"Unknown filter operator {rule.get('operator')!r}.")
        if not test(lookup(record, rule["field"]), rule.get("value")):
            return False
    return True


def filter_indexed(
    records: Sequence[Any],
    filters: Sequence[Mapping],
    lookup: FieldLookup = default_lookup,
) -> list[tuple[int, Any]]:
    """``(index, record)`` pairs that pass, keeping each record's original index."""
    return [(i, r) for i, r in enumerate(records) if matches(r, filters, lookup)]
