"""Form API router — editor submissions, fetch-for-edit and the like button.

Every POST answers ``{"success": bool, "errors": {field: message} | null}``
so the editor sidecar can render field errors or a form-level banner.
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Form

from app.dependencies import get_current_user, get_store, require_admin
from app.editor.drafts import AttachmentDraft, AttachmentTypeDraft, Draft, LoadoutDraft, ModelDraft
from app.editor.messages import GENERIC_MESSAGE, SERVER_FIELD, errors_for_store_error
from app.editor.session import Deleter, EditorSession, Inserter
from app.models.user import User
from app.schemas.forms import (
    AttachmentForm,
    AttachmentTypeForm,
    FormResult,
    LikeForm,
    LikeResponse,
    LoadoutForm,
    ModelForm,
    RecordResult,
)
from app.services.like_service import toggle_like
from app.services.loadout_service import create_loadout, delete_loadout
from app.services.record_store import RecordStore
from app.services.store_errors import PermissionDeniedError, StoreError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["api"])


def parse_id(value: Any) -> int | None:
    """Parse a posted id; None when it is missing or not an integer."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


async def submit_form(
    store: RecordStore,
    draft_cls: type[Draft],
    form: Any,
    *,
    inserter: Inserter | None = None,
    deleter: Deleter | None = None,
) -> FormResult:
    fields = form.model_dump()
    session = EditorSession(store, draft_cls, inserter=inserter, deleter=deleter)
    session.open(draft_cls.from_form(fields), row_id=parse_id(fields.get("id")))
    result = await session.submit(fields.get("intent") or "")
    return FormResult(**result.as_dict())


async def fetch_record(store: RecordStore, draft_cls: type[Draft], row_id: int) -> RecordResult:
    row = await store.get(draft_cls.table, row_id)
    if row is None:
        return RecordResult(error=f"No {draft_cls.label} with id {row_id}")
    return RecordResult(data=row)


# ── models ────────────────────────────────────────────────────────────────────


@router.post("/models", response_model=FormResult)
async def submit_model(
    form: Annotated[ModelForm, Form()],
    store: RecordStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    return await submit_form(store, ModelDraft, form)


@router.get("/models/{model_id}", response_model=RecordResult)
async def get_model(
    model_id: int,
    store: RecordStore = Depends(get_store),
    current_user: User = Depends(require_admin),
):
    return await fetch_record(store, ModelDraft, model_id)


# ── attachment types ──────────────────────────────────────────────────────────


@router.post("/types", response_model=FormResult)
async def submit_attachment_type(
    form: Annotated[AttachmentTypeForm, Form()],
    store: RecordStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    return await submit_form(store, AttachmentTypeDraft, form)


@router.get("/types/{type_id}", response_model=RecordResult)
async def get_attachment_type(
    type_id: int,
    store: RecordStore = Depends(get_store),
    current_user: User = Depends(require_admin),
):
    return await fetch_record(store, AttachmentTypeDraft, type_id)


# ── attachments ───────────────────────────────────────────────────────────────


@router.post("/attachments", response_model=FormResult)
async def submit_attachment(
    form: Annotated[AttachmentForm, Form()],
    store: RecordStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    return await submit_form(store, AttachmentDraft, form)


@router.get("/attachments/{attachment_id}", response_model=RecordResult)
async def get_attachment(
    attachment_id: int,
    store: RecordStore = Depends(get_store),
    current_user: User = Depends(require_admin),
):
    return await fetch_record(store, AttachmentDraft, attachment_id)


# ── loadouts ──────────────────────────────────────────────────────────────────


@router.post("/loadouts", response_model=FormResult)
async def submit_loadout(
    form: Annotated[LoadoutForm, Form()],
    store: RecordStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    return await submit_form(
        store, LoadoutDraft, form, inserter=create_loadout, deleter=delete_loadout
    )


# ── likes ─────────────────────────────────────────────────────────────────────


@router.post("/like", response_model=LikeResponse)
async def like(
    form: Annotated[LikeForm, Form()],
    store: RecordStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    loadout_id = parse_id(form.post)
    if loadout_id is None:
        return LikeResponse(success=False)
    try:
        result = await toggle_like(store, current_user.id, loadout_id)
    except PermissionDeniedError as exc:
        return LikeResponse(success=False, errors=errors_for_store_error(exc))
    except StoreError as exc:
        logger.error("Like by user %s on loadout %s failed: %r", current_user.id, loadout_id, exc)
        return LikeResponse(success=False, errors={SERVER_FIELD: GENERIC_MESSAGE})
    return LikeResponse(success=result.success, liked=result.liked, rating=result.rating)
