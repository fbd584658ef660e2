"""Loadouts router — public feed, the caller's own loadouts, and deletion."""

from fastapi import APIRouter, Depends, HTTPException, status

from app.dependencies import get_current_user, get_optional_user, get_store
from app.editor.drafts import SLOTS
from app.models.user import User
from app.schemas.loadout import LoadoutCard
from app.services.catalog_service import list_feed
from app.services.like_service import has_liked
from app.services.loadout_service import delete_loadout
from app.services.record_store import RecordStore, Row
from app.services.store_errors import NotFoundError, PermissionDeniedError

router = APIRouter(prefix="/loadouts", tags=["loadouts"])


def _card(row: Row, liked_posts: str | None) -> LoadoutCard:
    loadout = row["loadouts"]
    return LoadoutCard(
        id=row["id"],
        name=loadout["name"],
        username=loadout["username"],
        model=loadout["model"],
        model_name=row["model_name"],
        attachments={slot: loadout[slot] for slot in SLOTS if loadout.get(slot) is not None},
        attachment_names=row["attachment_names"],
        tags=[tag for tag in (loadout["tags"] or "").split(",") if tag],
        rating=row["rating"],
        liked=has_liked(liked_posts, row["id"]),
        created_at=loadout["created_at"],
    )


async def _liked_posts(store: RecordStore, user: User | None) -> str | None:
    if user is None:
        return None
    profile = await store.get("profiles", user.id)
    return profile["liked_posts"] if profile else None


@router.get("", response_model=list[LoadoutCard])
async def get_feed(
    store: RecordStore = Depends(get_store),
    current_user: User | None = Depends(get_optional_user),
):
    rows = await list_feed(store)
    liked_posts = await _liked_posts(store, current_user)
    return [_card(row, liked_posts) for row in rows]


@router.get("/mine", response_model=list[LoadoutCard])
async def list_mine(
    store: RecordStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    rows = await list_feed(store, user_id=current_user.id)
    liked_posts = await _liked_posts(store, current_user)
    return [_card(row, liked_posts) for row in rows]


@router.delete("/{loadout_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_loadout(
    loadout_id: int,
    store: RecordStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    try:
        await delete_loadout(store, loadout_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Loadout not found")
    except PermissionDeniedError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="You can only delete your own loadouts"
        )
    return None
