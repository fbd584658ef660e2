"""Editable drafts for each entity an editor can work on.

A draft starts from a blank template (insert) or a stored row (update),
is mutated by the editor's form controls, validates itself without touching
the store, and produces the record that gets submitted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Mapping

from app.config import settings
from app.models.attachment_type import AttachmentSlot
from app.models.weapon_model import WeaponCategory

UNSELECTED = -1

SLOTS: tuple[str, ...] = tuple(slot.value for slot in AttachmentSlot)


def _to_int(value: Any, default: int = UNSELECTED) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def split_list(value: str | None) -> list[str]:
    """Split a comma-joined form field, dropping empty entries."""
    return [item for item in (value or "").split(",") if item.strip()]


def clean_entries(values: list[str]) -> list[str]:
    """Strip entries and drop blanks and repeats, keeping first-seen order."""
    seen: list[str] = []
    for value in values:
        text = value.strip()
        if text and text not in seen:
            seen.append(text)
    return seen


class Draft:
    """Interface every editor draft implements."""

    table: ClassVar[str]
    label: ClassVar[str]

    @classmethod
    def blank(cls) -> Draft:
        return cls()

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Draft:
        raise NotImplementedError

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> Draft:
        raise NotImplementedError

    def validate(self) -> dict[str, str]:
        raise NotImplementedError

    def to_record(self) -> dict[str, Any]:
        raise NotImplementedError


@dataclass
class ModelDraft(Draft):
    table: ClassVar[str] = "models"
    label: ClassVar[str] = "model"

    name: str = ""
    type: str = WeaponCategory.assault.value

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> ModelDraft:
        return cls(name=row.get("name") or "", type=row.get("type") or "")

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> ModelDraft:
        return cls(name=form.get("name") or "", type=form.get("type") or "")

    def validate(self) -> dict[str, str]:
        errors: dict[str, str] = {}
        if not self.name.strip():
            errors["name"] = "Enter model name"
        if self.type not in {c.value for c in WeaponCategory}:
            errors["type"] = "Select weapon type"
        return errors

    def to_record(self) -> dict[str, Any]:
        return {"name": self.name.strip(), "type": self.type}


@dataclass
class AttachmentTypeDraft(Draft):
    table: ClassVar[str] = "attachment_types"
    label: ClassVar[str] = "attachment type"

    name: str = ""
    type: str = ""

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> AttachmentTypeDraft:
        return cls(name=row.get("name") or "", type=row.get("type") or "")

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> AttachmentTypeDraft:
        return cls(name=form.get("name") or "", type=form.get("type") or "")

    def validate(self) -> dict[str, str]:
        errors: dict[str, str] = {}
        if self.type not in {s.value for s in AttachmentSlot}:
            errors["type"] = "Select attachment variant"
        if not self.name.strip():
            errors["name"] = "Enter attachment type name"
        return errors

    def to_record(self) -> dict[str, Any]:
        return {"name": self.name.strip(), "type": self.type}


@dataclass
class AttachmentDraft(Draft):
    table: ClassVar[str] = "attachments"
    label: ClassVar[str] = "attachment"

    model: int = UNSELECTED
    type: int = UNSELECTED
    pros: list[str] = field(default_factory=list)
    cons: list[str] = field(default_factory=list)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> AttachmentDraft:
        characteristics = row.get("characteristics") or {}
        return cls(
            model=_to_int(row.get("model")),
            type=_to_int(row.get("type")),
            pros=list(characteristics.get("pros", [])),
            cons=list(characteristics.get("cons", [])),
        )

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> AttachmentDraft:
        return cls(
            model=_to_int(form.get("model")),
            type=_to_int(form.get("type")),
            pros=split_list(form.get("pros")),
            cons=split_list(form.get("cons")),
        )

    # Form controls for the pros/cons lists
    def add_pro(self) -> None:
        self.pros.append("")

    def add_con(self) -> None:
        self.cons.append("")

    def update_pro(self, index: int, value: str) -> None:
        self.pros[index] = value

    def update_con(self, index: int, value: str) -> None:
        self.cons[index] = value

    def remove_pro(self, index: int) -> None:
        del self.pros[index]

    def remove_con(self, index: int) -> None:
        del self.cons[index]

    def validate(self) -> dict[str, str]:
        errors: dict[str, str] = {}
        if self.type < 0:
            errors["type"] = "Select attachment type"
        if self.model < 0:
            errors["model"] = "Select attachment model"
        return errors

    def to_record(self) -> dict[str, Any]:
        return {
            "model": self.model,
            "type": self.type,
            "characteristics": {
                "pros": clean_entries(self.pros),
                "cons": clean_entries(self.cons),
            },
        }


def _blank_slots() -> dict[str, int]:
    return {slot: UNSELECTED for slot in SLOTS}


@dataclass
class LoadoutDraft(Draft):
    table: ClassVar[str] = "loadouts"
    label: ClassVar[str] = "loadout"

    name: str = ""
    model: int = UNSELECTED
    attachments: dict[str, int] = field(default_factory=_blank_slots)
    tags: list[str] = field(default_factory=list)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> LoadoutDraft:
        attachments = _blank_slots()
        for slot in SLOTS:
            if row.get(slot) is not None:
                attachments[slot] = _to_int(row[slot])
        return cls(
            name=row.get("name") or "",
            model=_to_int(row.get("model")),
            attachments=attachments,
            tags=split_list(row.get("tags")),
        )

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> LoadoutDraft:
        return cls(
            name=form.get("name") or "",
            model=_to_int(form.get("model")),
            attachments={slot: _to_int(form.get(slot)) for slot in SLOTS},
            tags=clean_entries(split_list(form.get("tags"))),
        )

    def set_model(self, model_id: int) -> None:
        # Attachments belong to a model, so picking another one clears them
        self.model = model_id
        self.attachments = _blank_slots()

    def set_slot(self, slot: str, attachment_id: int) -> None:
        if slot not in self.attachments:
            raise ValueError(f"Unknown attachment slot: {slot}")
        self.attachments[slot] = attachment_id

    def add_tag(self, tag: str) -> None:
        tag = tag.strip()
        if tag and tag not in self.tags:
            self.tags.append(tag)

    def remove_tag(self, tag: str) -> None:
        self.tags = [t for t in self.tags if t != tag]

    @property
    def selected_slots(self) -> dict[str, int]:
        return {slot: value for slot, value in self.attachments.items() if value != UNSELECTED}

    def validate(self) -> dict[str, str]:
        errors: dict[str, str] = {}
        limit = settings.max_loadout_attachments
        if len(self.selected_slots) > limit:
            errors["attachment"] = f"You can only select up to {limit} attachments"
        if self.model < 0:
            errors["model"] = "Please select a model"
        if not self.name.strip():
            errors["name"] = "Please enter a name"
        return errors

    def to_record(self) -> dict[str, Any]:
        record: dict[str, Any] = {
            "name": self.name.strip(),
            "model": self.model,
            "tags": ",".join(self.tags),
        }
        # Cleared slots are written as NULL so an update drops them
        for slot, value in self.attachments.items():
            record[slot] = None if value == UNSELECTED else value
        return record


DRAFTS: dict[str, type[Draft]] = {
    ModelDraft.table: ModelDraft,
    AttachmentTypeDraft.table: AttachmentTypeDraft,
    AttachmentDraft.table: AttachmentDraft,
    LoadoutDraft.table: LoadoutDraft,
}
