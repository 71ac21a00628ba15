"""Scalable parameters: literal | rule | ordered list of rules, and their resolution.

A layout value such as ``color`` may be a plain literal, a rule that calls a
registered scale function, or a list tried left to right::

    color = [
        {"scale_function": "if", "field": "assoc:id",
         "parameters": {"field_value": "rs7", "then": "#9632b8"}},
        {"scale_function": "numerical_bin", "field": "ld:r2",
         "parameters": {"breaks": [0, 0.2, 0.8], "values": ["#357ebd", "#eea236", "#d43f3a"]}},
        "#B8B8B8",
    ]
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Union

from ..core.errors import ConfigError
from .registry import ScaleRegistry

# (record, field) -> value or None. Lets callers add a secondary namespace.
FieldLookup = Callable[[Any, str], Any]


@dataclass(frozen=True)
class Literal:
    """A data-independent value."""

    value: Any


@dataclass(frozen=True)
class Rule:
    """Invoke a registered scale function on a field (or the whole record)."""

    scale_function: str
    field: str | None = None
    parameters: Any = None


@dataclass(frozen=True)
class RuleList:
    """Options tried in order; the first non-None result wins."""

    options: tuple[Union[Literal, Rule], ...]


ScalableParameter = Union[Literal, Rule, RuleList]


def _parse_option(spec: Any) -> Literal | Rule:
    if isinstance(spec, Mapping):
        name = spec.get("scale_function")
        if not name:
            raise ConfigError(
                f"Scalable parameter rule {dict(spec)!r} must name a scale_function."
            )
        return Rule(
            scale_function=name,
            field=spec.get("field"),
            parameters=spec.get("parameters"),
        )
    return Literal(spec)


def parse_scalable(spec: Any) -> ScalableParameter:
    """Convert a raw layout value into its tagged form."""
    if isinstance(spec, (Literal, Rule, RuleList)):
        return spec
    if isinstance(spec, (list, tuple)):
        return RuleList(tuple(_parse_option(option) for option in spec))
    return _parse_option(spec)


def default_lookup(record: Any, field: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(field)
    return None


def resolve_scalable_parameter(
    spec: Any,
    record: Any,
    index: int | None = None,
    *,
    registry: ScaleRegistry,
    lookup: FieldLookup = default_lookup,
) -> Any:
    """Resolve a scalable parameter for one element.

    ``index`` is passed untouched to scale functions so they can depend on
    the element's position in its originating collection.
    """
    parsed = parse_scalable(spec)
    if isinstance(parsed, Literal):
        return parsed.value
    if isinstance(parsed, Rule):
        return _apply_rule(parsed, record, index, registry, lookup)
    if isinstance(parsed, RuleList):
        for option in parsed.options:
            if isinstance(option, Literal):
                result = option.value
            else:
                result = _apply_rule(option, record, index, registry, lookup)
            if result is not None:
                return result
        return None
    raise TypeError(f"Unhandled scalable parameter type: {type(parsed).__name__}")


def _apply_rule(
    rule: Rule,
    record: Any,
    index: int | None,
    registry: ScaleRegistry,
    lookup: FieldLookup,
) -> Any:
    fn = registry.get(rule.scale_function)
    parameters = rule.parameters if rule.parameters is not None else {}
    if rule.field:
        value = lookup(record, rule.field)
    else:
        value = record
    return fn(parameters, value, index)
