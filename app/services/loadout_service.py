import logging
from typing import Any

from app.services.record_store import RecordStore
from app.services.store_errors import PermissionDeniedError

logger = logging.getLogger(__name__)


async def create_loadout(store: RecordStore, record: dict[str, Any]) -> int:
    """Insert a loadout owned by the acting user together with its zeroed rating row."""
    user_id = store.actor.user_id
    if user_id is None:
        raise PermissionDeniedError('permission denied: insert on "loadouts"')

    profile = await store.get("profiles", user_id)
    row = {
        **record,
        "user_id": user_id,
        "username": profile["username"] if profile else None,
    }
    async with store.transaction() as tx:
        loadout_id = await tx.insert("loadouts", row)
        await tx.insert("loadout_ratings", {"id": loadout_id, "rating": 0})
    logger.info("User %s created loadout %s", user_id, loadout_id)
    return loadout_id


async def delete_loadout(store: RecordStore, loadout_id: int) -> None:
    async with store.transaction() as tx:
        if await tx.get("loadout_ratings", loadout_id) is not None:
            await tx.delete("loadout_ratings", loadout_id)
        await tx.delete("loadouts", loadout_id)
