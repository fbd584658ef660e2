"""Dashboard router — server-driven data tables for the back-office and loadout pages.

The client posts its current sort/filter state plus at most one control
intent; the server applies the intent through ``Controls``, reloads the rows
and returns the new state with the projected rows.
"""

from dataclasses import dataclass
from typing import Awaitable, Callable

from fastapi import APIRouter, Depends, HTTPException, status

from app.dependencies import get_current_user, get_store, get_token_claims
from app.models.user import User
from app.schemas.table import (
    ColumnInfo,
    EditorInfo,
    FilterEntry,
    SortEntry,
    TableIntent,
    TableRow,
    TableViewRequest,
    TableViewResponse,
)
from app.services.auth_service import TokenClaims
from app.services.catalog_service import (
    list_attachment_types,
    list_attachments,
    list_loadouts,
    list_models_with_attachments,
    list_user_loadouts,
)
from app.services.record_store import RecordStore, Row
from app.table.columns import attachment_columns, loadout_columns, model_columns, type_columns
from app.table.controls import (
    Controls,
    EditIntent,
    FilterAction,
    FilterIntent,
    InsertIntent,
    Intent,
    SortAction,
    SortIntent,
)
from app.table.data_table import DataTable
from app.table.filtering import FilterState
from app.table.projection import ColumnDescriptor
from app.table.sorting import SortState

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@dataclass(frozen=True)
class TableSource:
    columns: Callable[[], list[ColumnDescriptor]]
    load: Callable[[RecordStore, User], Awaitable[list[Row]]]
    admin_only: bool = False


TABLE_SOURCES: dict[str, TableSource] = {
    "models": TableSource(
        model_columns, lambda store, user: list_models_with_attachments(store), admin_only=True
    ),
    "types": TableSource(
        type_columns, lambda store, user: list_attachment_types(store), admin_only=True
    ),
    "attachments": TableSource(
        attachment_columns, lambda store, user: list_attachments(store), admin_only=True
    ),
    "loadouts": TableSource(loadout_columns, lambda store, user: list_loadouts(store)),
    "my-loadouts": TableSource(
        loadout_columns, lambda store, user: list_user_loadouts(store, user.id)
    ),
}


def _source_or_404(table: str, claims: TokenClaims | None) -> TableSource:
    source = TABLE_SOURCES.get(table)
    if source is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Table not found")
    if source.admin_only and (claims is None or not claims.is_admin):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return source


def to_control_intent(body: TableIntent) -> Intent:
    try:
        if body.kind == "sort":
            return SortIntent(SortAction(body.type), body.column)
        if body.kind == "filter":
            return FilterIntent(FilterAction(body.type), body.column, body.value)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown {body.kind} action: {body.type}",
        ) from None
    if body.kind == "insert":
        return InsertIntent()
    if body.row_id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Edit requires row_id")
    return EditIntent(body.row_id)


def _view(table: str, data_table: DataTable, controls: Controls) -> TableViewResponse:
    projection = data_table.projection()
    editor = data_table.editor
    return TableViewResponse(
        table=table,
        sorting=[SortEntry(**entry) for entry in data_table.sort.to_list()],
        filters=[FilterEntry(**entry) for entry in data_table.filters.to_list()],
        sort_label=controls.sort_label,
        sortable_columns=controls.sortable_columns,
        filterable_columns=controls.filterable_columns,
        columns=[
            ColumnInfo(key=c.key, header=c.header, sortable=c.sortable, filterable=c.filterable)
            for c in projection.columns
        ],
        rows=[TableRow(id=row.edit_id, cells=row.cells) for row in projection.rows],
        empty=projection.empty,
        editor=EditorInfo(open=editor.open, mode=editor.mode, selected_id=editor.selected_id),
    )


async def _render(
    table: str,
    body: TableViewRequest,
    store: RecordStore,
    user: User,
    claims: TokenClaims | None,
) -> TableViewResponse:
    source = _source_or_404(table, claims)
    data_table = DataTable(
        source.columns(),
        sort=SortState.from_list([entry.model_dump() for entry in body.sorting]),
        filters=FilterState.from_list([entry.model_dump() for entry in body.filters]),
    )
    controls = Controls(data_table)
    if body.intent is not None:
        try:
            controls.dispatch(to_control_intent(body.intent))
        except ValueError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    await controls.refresh(lambda: source.load(store, user))
    return _view(table, data_table, controls)


@router.get("/{table}", response_model=TableViewResponse)
async def get_table(
    table: str,
    store: RecordStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
    claims: TokenClaims | None = Depends(get_token_claims),
):
    return await _render(table, TableViewRequest(), store, current_user, claims)


@router.post("/{table}/view", response_model=TableViewResponse)
async def view_table(
    table: str,
    body: TableViewRequest,
    store: RecordStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
    claims: TokenClaims | None = Depends(get_token_claims),
):
    """Apply one control intent to the posted table state and return the new view."""
    return await _render(table, body, store, current_user, claims)
