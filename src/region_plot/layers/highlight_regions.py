"""HighlightRegions: shaded x-ranges (e.g. recombination hotspots, exons)."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..core.errors import ConfigError, UsageError
from ..core.records import normalize_records
from .base import DataLayer


def _merge_key(value: Any) -> tuple:
    return (value is None, "" if value is None else value)


class HighlightRegions(DataLayer):
    """Draw rectangles spanning ``start_field``..``end_field`` on the x axis.

    Regions come from ``layout["regions"]`` when given, otherwise from the
    data. With ``merge_field``, overlapping regions of the same category are
    drawn as one. The layer has no mouse interaction and no tooltips.
    """

    DEFAULT_LAYOUT = {
        "color": "#CCCCCC",
        "fill_opacity": 0.5,
        "regions": [],
        "id_field": "id",
        "start_field": "start",
        "end_field": "end",
        "merge_field": None,
    }

    def __init__(self, layout: Mapping | None = None, *args: Any, **kwargs: Any) -> None:
        layout = layout or {}
        if layout.get("interaction") or layout.get("behaviors"):
            raise ConfigError("highlight_regions layer does not support mouse events")
        if layout.get("tooltip"):
            raise UsageError("highlight_regions layer does not support tooltips")
        super().__init__(layout, *args, **kwargs)

    @property
    def start_field(self) -> str:
        return self.layout["start_field"]

    @property
    def end_field(self) -> str:
        return self.layout["end_field"]

    @staticmethod
    def _with_ids(records: list[dict]) -> list[dict]:
        for i, record in enumerate(records):
            if record.get("id") is None:
                record["id"] = i
        return records

    def apply_custom_data_methods(self) -> HighlightRegions:
        self._with_ids(self._data)
        return self

    def _merge_nodes(self, records: list[dict]) -> list[dict]:
        """Combine overlapping intervals that share a ``merge_field`` value."""
        merge_field = self.layout.get("merge_field")
        if not merge_field:
            return records
        start, end = self.start_field, self.end_field
        ordered = sorted(records, key=lambda r: (_merge_key(r.get(merge_field)), r.get(start)))
        merged: list[dict] = []
        for current in ordered:
            previous = merged[-1] if merged else None
            if (
                previous is not None
                and current.get(merge_field) == previous.get(merge_field)
                and current[start] <= previous[end]
            ):
                current = {
                    **previous,
                    **current,
                    start: min(previous[start], current[start]),
                    end: max(previous[end], current[end]),
                }
                merged.pop()
            merged.append(current)
        return merged

    def regions(self) -> list[dict]:
        """The regions to draw after filtering and merging."""
        configured = self.layout.get("regions") or []
        if configured:
            records = self._with_ids(normalize_records(configured))
        else:
            records = self._data
        passing = [r for r in records if self.filter(self.config.filters, r)]
        return self._merge_nodes(passing)

    def _track_data(self) -> list[tuple[int, dict]]:
        return list(enumerate(self.regions()))

    def _element_values(self, record: dict, index: int) -> dict[str, Any]:
        values = super()._element_values(record, index)
        values["start"] = record.get(self.start_field)
        values["end"] = record.get(self.end_field)
        return values
