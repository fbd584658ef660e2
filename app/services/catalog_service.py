"""Catalog service — joined listings over the reference tables and loadouts.

Rows are fetched through the record store and joined in memory, giving each
attachment its model and attachment-type rows and each rating its loadout.
"""

import asyncio
from datetime import datetime

from app.models.attachment_type import AttachmentSlot
from app.services.record_store import RecordStore, Row


async def list_attachments(store: RecordStore) -> list[Row]:
    attachments, models, types = await asyncio.gather(
        store.list("attachments"),
        store.list("models"),
        store.list("attachment_types"),
    )
    models_by_id = {m["id"]: m for m in models}
    types_by_id = {t["id"]: t for t in types}
    result = []
    for attachment in attachments:
        model = models_by_id.get(attachment["model"])
        attachment_type = types_by_id.get(attachment["type"])
        result.append(
            {
                **attachment,
                "models": {"id": model["id"], "name": model["name"]} if model else None,
                "attachment_types": (
                    {"name": attachment_type["name"], "type": attachment_type["type"]}
                    if attachment_type
                    else None
                ),
            }
        )
    return result


async def list_models_with_attachments(store: RecordStore) -> list[Row]:
    models, attachments = await asyncio.gather(store.list("models"), store.list("attachments"))
    by_model: dict[int, list[Row]] = {}
    for attachment in attachments:
        by_model.setdefault(attachment["model"], []).append(attachment)
    return [{**model, "attachments": by_model.get(model["id"], [])} for model in models]


async def list_attachment_types(store: RecordStore) -> list[Row]:
    return await store.list("attachment_types")


async def list_loadouts(store: RecordStore, user_id: int | None = None) -> list[Row]:
    """Return rating rows joined with their loadout, optionally only one user's.

    Ratings whose loadout row is missing are dropped.
    """
    ratings, loadouts = await asyncio.gather(store.list("loadout_ratings"), store.list("loadouts"))
    loadouts_by_id = {l["id"]: l for l in loadouts}
    result = []
    for rating in ratings:
        loadout = loadouts_by_id.get(rating["id"])
        if loadout is None:
            continue
        if user_id is not None and loadout["user_id"] != user_id:
            continue
        result.append({**rating, "loadouts": loadout})
    return result


async def list_user_loadouts(store: RecordStore, user_id: int) -> list[Row]:
    return await list_loadouts(store, user_id=user_id)


def _newest_first(row: Row) -> tuple:
    created_at = row["loadouts"]["created_at"]
    return (created_at is not None, created_at or datetime.min, row["id"])


async def list_feed(store: RecordStore, user_id: int | None = None) -> list[Row]:
    """Loadouts for the public feed, newest first, with model and attachment names resolved.

    Each row gains ``model_name`` and ``attachment_names`` (slot to attachment
    type name).  Loadouts created in the same instant fall back to id order.
    """
    rows, models, attachments = await asyncio.gather(
        list_loadouts(store, user_id=user_id),
        store.list("models"),
        list_attachments(store),
    )
    model_names = {m["id"]: m["name"] for m in models}
    attachment_names = {
        a["id"]: a["attachment_types"]["name"] for a in attachments if a["attachment_types"]
    }
    result = []
    for row in sorted(rows, key=_newest_first, reverse=True):
        loadout = row["loadouts"]
        result.append(
            {
                **row,
                "model_name": model_names.get(loadout["model"]),
                "attachment_names": {
                    slot: attachment_names[loadout[slot]]
                    for slot in (s.value for s in AttachmentSlot)
                    if loadout.get(slot) in attachment_names
                },
            }
        )
    return result
