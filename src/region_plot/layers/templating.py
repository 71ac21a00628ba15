"""Label and tooltip text: jinja2 templates rendered per element.

Templates see the record as ``d`` and the element's annotations as
``annotations``. Namespaced fields use item access::

    "{{ d['assoc:variant'] }} (p={{ d['assoc:pvalue'] }})"
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

import jinja2


@lru_cache(maxsize=2)
def _environment(autoescape: bool) -> jinja2.Environment:
    return jinja2.Environment(autoescape=autoescape, undefined=jinja2.ChainableUndefined)


@lru_cache(maxsize=128)
def _compile(text: str, autoescape: bool) -> jinja2.Template:
    return _environment(autoescape).from_string(text)


def render_template(
    text: str,
    record: Any,
    annotations: dict | None = None,
    autoescape: bool = False,
) -> str:
    """Render ``text`` for one element. Plain text without markup is returned as is."""
    if not text:
        return ""
    if "{" not in text:
        return text
    return _compile(text, autoescape).render(d=record, annotations=annotations or {})
