"""Scale functions, their registry, and scalable-parameter resolution."""

from .registry import ScaleRegistry
from .functions import register_builtins
from .resolver import (
    Literal,
    Rule,
    RuleList,
    parse_scalable,
    resolve_scalable_parameter,
)
from .color_scale import ColorScale

# Process-wide default registry. Layers use it unless given their own.
SCALABLE = register_builtins(ScaleRegistry())

__all__ = [
    "SCALABLE",
    "ScaleRegistry",
    "ColorScale",
    "Literal",
    "Rule",
    "RuleList",
    "parse_scalable",
    "resolve_scalable_parameter",
    "register_builtins",
]
