"""Controls bar: turns user intents into sort/filter/editor transitions on a DataTable."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Union

from app.table.data_table import DataTable, RowLoader
from app.table.debounce import Debouncer


class SortAction(str, enum.Enum):
    add = "add"
    remove = "remove"
    toggle_direction = "toggle-direction"


class FilterAction(str, enum.Enum):
    toggle = "toggle"
    update = "update"


@dataclass(frozen=True)
class SortIntent:
    type: SortAction
    column: str = ""


@dataclass(frozen=True)
class FilterIntent:
    type: FilterAction
    column: str
    value: str = ""


@dataclass(frozen=True)
class InsertIntent:
    pass


@dataclass(frozen=True)
class EditIntent:
    row_id: Any


Intent = Union[SortIntent, FilterIntent, InsertIntent, EditIntent]


class Controls:
    def __init__(self, table: DataTable):
        self.table = table

    @property
    def sortable_columns(self) -> list[str]:
        return [c.key for c in self.table.columns if c.sortable]

    @property
    def filterable_columns(self) -> list[str]:
        return [c.key for c in self.table.columns if c.filterable]

    @property
    def sort_label(self) -> str:
        sorted_by = self.table.sort.sorted_by
        return f"Sorted by {sorted_by}" if sorted_by else "Sort"

    def dispatch(self, intent: Intent) -> None:
        table = self.table
        if isinstance(intent, SortIntent):
            if intent.type == SortAction.remove:
                table.sort = table.sort.remove()
                return
            if intent.column not in self.sortable_columns:
                raise ValueError(f"Column '{intent.column}' is not sortable")
            if intent.type == SortAction.add:
                table.sort = table.sort.add(intent.column)
            else:
                table.sort = table.sort.toggle_direction(intent.column)
        elif isinstance(intent, FilterIntent):
            if intent.column not in self.filterable_columns:
                raise ValueError(f"Column '{intent.column}' is not filterable")
            if intent.type == FilterAction.toggle:
                table.filters = table.filters.toggle(intent.column)
            else:
                table.filters = table.filters.update(intent.column, intent.value)
        elif isinstance(intent, InsertIntent):
            table.open_insert()
        elif isinstance(intent, EditIntent):
            table.open_edit(intent.row_id)
        else:
            raise TypeError(f"Unsupported intent: {intent!r}")

    def filter_input(self, column: str, delay_ms: int | None = None) -> Debouncer[str]:
        """Debounced text box for a column filter; values apply once typing pauses."""
        if column not in self.filterable_columns:
            raise ValueError(f"Column '{column}' is not filterable")
        return Debouncer(
            lambda value: self.dispatch(FilterIntent(FilterAction.update, column, value)),
            delay_ms=delay_ms,
        )

    async def refresh(self, loader: RowLoader) -> bool:
        return await self.table.refresh(loader)
