"""Form bodies posted by the editors and the like button.

Every field is optional text so that bad input reaches the editor's own
validation and comes back as field errors instead of a 422.
"""

from typing import Any

from pydantic import BaseModel


class ModelForm(BaseModel):
    intent: str = ""
    id: str | None = None
    name: str = ""
    type: str = ""


class AttachmentTypeForm(BaseModel):
    intent: str = ""
    id: str | None = None
    name: str = ""
    type: str = ""


class AttachmentForm(BaseModel):
    intent: str = ""
    id: str | None = None
    model: str = "-1"
    type: str = "-1"
    # Comma-joined lists
    pros: str = ""
    cons: str = ""


class LoadoutForm(BaseModel):
    intent: str = ""
    id: str | None = None
    name: str = ""
    model: str = "-1"
    muzzle: str = "-1"
    barrel: str = "-1"
    optic: str = "-1"
    stock: str = "-1"
    grip: str = "-1"
    magazine: str = "-1"
    underbarrel: str = "-1"
    laser: str = "-1"
    perk: str = "-1"
    tags: str = ""


class LikeForm(BaseModel):
    post: str = ""


class FormResult(BaseModel):
    success: bool
    errors: dict[str, str] | None = None


class LikeResponse(FormResult):
    liked: bool | None = None
    rating: int | None = None


class RecordResult(BaseModel):
    data: dict[str, Any] | None = None
    error: str | None = None
