"""Column sets for the back-office and loadout tables."""

from typing import Any

from app.models.attachment_type import ATTACHMENT_SLOT_LABELS, AttachmentSlot
from app.models.weapon_model import WEAPON_CATEGORY_LABELS, WeaponCategory
from app.table.projection import ColumnDescriptor, Row, key_accessor


def _nested(relation: str, key: str):
    def accessor(row: Row) -> Any:
        related = row.get(relation) or {}
        return related.get(key)

    return accessor


def _category_label(value: Any) -> Any:
    try:
        return WEAPON_CATEGORY_LABELS[WeaponCategory(value)]
    except ValueError:
        return value


def _slot_label(value: Any) -> Any:
    try:
        return ATTACHMENT_SLOT_LABELS[AttachmentSlot(value)]
    except ValueError:
        return value


def _characteristics(row: Row) -> dict[str, list[str]]:
    values = row.get("characteristics") or {}
    return {"pros": list(values.get("pros", [])), "cons": list(values.get("cons", []))}


def _characteristics_text(value: dict[str, list[str]]) -> str:
    return " ".join([*value["pros"], *value["cons"]])


def _split_tags(value: Any) -> list[str]:
    return [tag for tag in (value or "").split(",") if tag]


def model_columns() -> list[ColumnDescriptor]:
    return [
        ColumnDescriptor("name", "Name", key_accessor("name")),
        ColumnDescriptor("type", "Type", key_accessor("type"), render=_category_label),
        ColumnDescriptor(
            "attachments",
            "Attachments",
            lambda row: len(row.get("attachments") or []),
            filterable=False,
        ),
    ]


def type_columns() -> list[ColumnDescriptor]:
    return [
        ColumnDescriptor("name", "Name", key_accessor("name")),
        ColumnDescriptor("type", "Type", key_accessor("type"), render=_slot_label),
    ]


def attachment_columns() -> list[ColumnDescriptor]:
    return [
        ColumnDescriptor("name", "Name", _nested("attachment_types", "name")),
        ColumnDescriptor("type", "Type", _nested("attachment_types", "type"), render=_slot_label),
        ColumnDescriptor("model", "Model", _nested("models", "name")),
        ColumnDescriptor(
            "characteristics",
            "Characteristics",
            _characteristics,
            sortable=False,
            text=_characteristics_text,
        ),
    ]


def loadout_columns() -> list[ColumnDescriptor]:
    return [
        ColumnDescriptor("name", "Name", _nested("loadouts", "name")),
        ColumnDescriptor("username", "Author", _nested("loadouts", "username")),
        ColumnDescriptor("rating", "Rating", key_accessor("rating"), filterable=False),
        ColumnDescriptor(
            "tags", "Tags", _nested("loadouts", "tags"), render=_split_tags, sortable=False
        ),
        ColumnDescriptor("created_at", "Created", _nested("loadouts", "created_at"), filterable=False),
    ]
