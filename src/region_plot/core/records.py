"""Record collections: the uniform list-of-mappings every layer consumes."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any, Callable

import pandas as pd

DataProvider = Callable[[Any, Any], Any]


def normalize_records(data: Any) -> list[dict]:
    """Validate and convert incoming data into a list of record dicts.

    Accepts a list of mappings or a pandas DataFrame (one record per row).
    Missing values (pandas NA, float NaN) become ``None``. Returns new dicts
    so later in-place preparation never touches the caller's objects.
    """
    if data is None:
        return []
    if isinstance(data, pd.DataFrame):
        frame = data.astype(object).where(pd.notna(data), None)
        return frame.to_dict("records")
    if isinstance(data, Mapping) or isinstance(data, (str, bytes)):
        raise TypeError(
            f"Expected a list of records or a pandas DataFrame, got "
            f"{type(data).__name__}. Wrap a single record in a list."
        )
    records = list(data)
    bad = [i for i, r in enumerate(records) if not isinstance(r, Mapping)]
    if bad:
        raise TypeError(
            f"Every record must be a mapping of field name to value. "
            f"Non-mapping entries at positions: {bad[:5]}"
            + (f" (and {len(bad) - 5} more)" if len(bad) > 5 else "")
        )
    return [{k: _missing_to_none(v) for k, v in r.items()} for r in records]


def _missing_to_none(value: Any) -> Any:
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


class StaticProvider:
    """Data provider that always returns the same records.

    Providers are called as ``provider(layer_config, plot_state)`` and must
    return a complete record collection for that layer.
    """

    def __init__(self, data: Any) -> None:
        self._records = normalize_records(data)

    def __call__(self, layer_config: Any = None, plot_state: Any = None) -> list[dict]:
        return [dict(r) for r in self._records]

    def __len__(self) -> int:
        return len(self._records)
