"""Table rendering engine.

``project`` turns a row set plus sort and filter state into the ordered,
filtered view a data table shows.

Filtering keeps a row only when every active filter matches the value that
column's accessor reads from the row.  Matching is configurable but fixed per
matcher: case-insensitive substring by default, or exact.  An empty filter
value matches every row.

Sorting orders by the active column's natural comparison: numbers
numerically, everything else as strings.  Missing values sort after present
ones in ascending order.  Python's sort is stable, so rows with equal keys
keep their store order in either direction.  With no active sort the store
order is returned unchanged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Sequence

from app.config import settings
from app.table.filtering import FilterState
from app.table.sorting import SortState

logger = logging.getLogger(__name__)

Row = dict[str, Any]

SUBSTRING = "substring"
EXACT = "exact"


def key_accessor(key: str) -> Callable[[Row], Any]:
    return lambda row: row.get(key)


@dataclass(frozen=True)
class ColumnDescriptor:
    key: str
    header: str
    accessor: Callable[[Row], Any]
    render: Callable[[Any], Any] | None = None
    sortable: bool = True
    filterable: bool = True
    # Text a filter is matched against; defaults to str(value)
    text: Callable[[Any], str] | None = None

    def value(self, row: Row) -> Any:
        return self.accessor(row)

    def filter_text(self, row: Row) -> str:
        value = self.accessor(row)
        if self.text is not None:
            return self.text(value)
        return "" if value is None else str(value)

    def cell(self, row: Row) -> Any:
        value = self.accessor(row)
        return self.render(value) if self.render else value


@dataclass(frozen=True)
class FilterMatcher:
    mode: str = SUBSTRING
    case_sensitive: bool = False

    def __post_init__(self) -> None:
        if self.mode not in (SUBSTRING, EXACT):
            raise ValueError(f"Unknown filter match mode: {self.mode!r}")

    @classmethod
    def from_settings(cls) -> FilterMatcher:
        return cls(mode=settings.filter_match_mode, case_sensitive=settings.filter_case_sensitive)

    def matches(self, text: str, needle: str) -> bool:
        if needle == "":
            return True
        if not self.case_sensitive:
            text = text.casefold()
            needle = needle.casefold()
        if self.mode == EXACT:
            return text == needle
        return needle in text


@dataclass
class ProjectedRow:
    source: Row
    cells: dict[str, Any]

    @property
    def edit_id(self) -> Any:
        """The row id handed to an editor when the row's Edit affordance is used."""
        return self.source.get("id")


@dataclass
class Projection:
    columns: list[ColumnDescriptor]
    rows: list[ProjectedRow] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not self.rows

    def __len__(self) -> int:
        return len(self.rows)

    def ids(self) -> list[Any]:
        return [r.edit_id for r in self.rows]


def _sort_key(value: Any) -> tuple:
    if value is None:
        return (2, 0)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (0, value)
    return (1, str(value))


def columns_by_key(columns: Iterable[ColumnDescriptor]) -> dict[str, ColumnDescriptor]:
    return {c.key: c for c in columns}


def project(
    rows: Sequence[Row],
    columns: Sequence[ColumnDescriptor],
    sort: SortState,
    filters: FilterState,
    matcher: FilterMatcher | None = None,
) -> Projection:
    matcher = matcher or FilterMatcher.from_settings()
    by_key = columns_by_key(columns)

    active_filters = []
    for column_key, needle in filters:
        column = by_key.get(column_key)
        if column is None or not column.filterable:
            logger.debug("Ignoring filter on unknown or unfilterable column %r", column_key)
            continue
        active_filters.append((column, needle))

    visible = [
        row
        for row in rows
        if all(matcher.matches(column.filter_text(row), needle) for column, needle in active_filters)
    ]

    active_sort = sort.active
    if active_sort is not None:
        column = by_key.get(active_sort.id)
        if column is not None and column.sortable:
            # None sorts last ascending and first descending
            visible = sorted(
                visible,
                key=lambda row: _sort_key(column.value(row)),
                reverse=active_sort.desc,
            )
        else:
            logger.debug("Ignoring sort on unknown or unsortable column %r", active_sort.id)

    return Projection(
        columns=list(columns),
        rows=[ProjectedRow(source=row, cells={c.key: c.cell(row) for c in columns}) for row in visible],
    )
