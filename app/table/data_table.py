"""Data table container.

Each DataTable owns its own sort state, filter state, row set and editor
panel, so two tables never share UI state.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Sequence

from app.table.filtering import FilterState
from app.table.projection import ColumnDescriptor, FilterMatcher, Projection, Row, project
from app.table.sequencing import RequestSequencer
from app.table.sorting import SortState

logger = logging.getLogger(__name__)

RowLoader = Callable[[], Awaitable[list[Row]]]


@dataclass
class EditorPanel:
    """Which editor sidecar is showing.  ``selected_id`` is None for an insert."""

    open: bool = False
    selected_id: Any = None

    @property
    def mode(self) -> str | None:
        if not self.open:
            return None
        return "insert" if self.selected_id is None else "update"


class DataTable:
    def __init__(
        self,
        columns: Sequence[ColumnDescriptor],
        rows: Sequence[Row] | None = None,
        *,
        sort: SortState | None = None,
        filters: FilterState | None = None,
        matcher: FilterMatcher | None = None,
    ):
        self.columns = list(columns)
        self.rows: list[Row] = list(rows or [])
        self.sort = sort or SortState()
        self.filters = filters or FilterState()
        self.matcher = matcher
        self.editor = EditorPanel()
        self._refreshes = RequestSequencer()

    def column_keys(self) -> list[str]:
        return [c.key for c in self.columns]

    def projection(self) -> Projection:
        return project(self.rows, self.columns, self.sort, self.filters, self.matcher)

    async def refresh(self, loader: RowLoader) -> bool:
        """Reload rows; returns False if a newer refresh started meanwhile and this result was dropped."""
        token = self._refreshes.next()
        rows = await loader()
        if not self._refreshes.is_current(token):
            logger.debug("Dropping stale row set (request %s, latest %s)", token, self._refreshes.latest)
            return False
        self.rows = list(rows)
        return True

    def open_insert(self) -> None:
        self.editor = EditorPanel(open=True, selected_id=None)

    def open_edit(self, row_id: Any) -> None:
        self.editor = EditorPanel(open=True, selected_id=row_id)

    def close_editor(self) -> None:
        self.editor = EditorPanel()
