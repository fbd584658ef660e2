"""Column filter state for data tables.

Holds at most one filter value per column.  Switching a column's filter off
drops its value, so switching it back on always starts from an empty string.
"""

from __future__ import annotations

from typing import Any, Iterator


class FilterState:
    __slots__ = ("_values",)

    def __init__(self, values: dict[str, str] | None = None):
        self._values: dict[str, str] = dict(values or {})

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FilterState):
            return NotImplemented
        return self._values == other._values

    def __hash__(self) -> int:
        return hash(frozenset(self._values.items()))

    def __repr__(self) -> str:
        return f"FilterState({self._values!r})"

    def __contains__(self, column: object) -> bool:
        return column in self._values

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self._values.items())

    def __len__(self) -> int:
        return len(self._values)

    def value_for(self, column: str) -> str | None:
        return self._values.get(column)

    def toggle(self, column: str) -> FilterState:
        values = dict(self._values)
        if column in values:
            del values[column]
        else:
            values[column] = ""
        return FilterState(values)

    def update(self, column: str, value: str) -> FilterState:
        if column not in self._values:
            return self
        values = dict(self._values)
        values[column] = value
        return FilterState(values)

    def to_list(self) -> list[dict[str, Any]]:
        return [{"id": column, "value": value} for column, value in self._values.items()]

    @classmethod
    def from_list(cls, items: list[dict[str, Any]] | None) -> FilterState:
        return cls({str(item["id"]): str(item.get("value") or "") for item in items or []})
