from typing import Any, Literal

from pydantic import BaseModel, Field


class SortEntry(BaseModel):
    id: str
    desc: bool = False


class FilterEntry(BaseModel):
    id: str
    value: str = ""


class TableIntent(BaseModel):
    kind: Literal["sort", "filter", "insert", "edit"]
    # sort: add | remove | toggle-direction; filter: toggle | update
    type: str | None = None
    column: str = ""
    value: str = ""
    row_id: int | None = None


class TableViewRequest(BaseModel):
    sorting: list[SortEntry] = Field(default_factory=list)
    filters: list[FilterEntry] = Field(default_factory=list)
    intent: TableIntent | None = None


class ColumnInfo(BaseModel):
    key: str
    header: str
    sortable: bool
    filterable: bool


class TableRow(BaseModel):
    id: Any
    cells: dict[str, Any]


class EditorInfo(BaseModel):
    open: bool = False
    mode: Literal["insert", "update"] | None = None
    selected_id: Any = None


class TableViewResponse(BaseModel):
    table: str
    sorting: list[SortEntry]
    filters: list[FilterEntry]
    sort_label: str
    sortable_columns: list[str]
    filterable_columns: list[str]
    columns: list[ColumnInfo]
    rows: list[TableRow]
    empty: bool
    editor: EditorInfo
