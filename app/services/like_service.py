"""Like service — toggles a user's like on a loadout.

Responsibilities:
  - Read the caller's profile and the loadout's rating row concurrently
  - Decide like vs. unlike from membership in the profile's liked_posts list
  - Apply the liked_posts change and the rating change so that
    ``rating == number of profiles whose liked_posts contains the loadout``
    keeps holding under concurrent toggles

The rating is never written as "value read + 1".  It is moved with a single
atomic ``rating = rating + delta`` statement, and the liked_posts change is a
compare-and-set against the value that was read, both inside one transaction.
If another toggle by the same user changed liked_posts in between, the whole
attempt is retried from fresh reads.
"""

import asyncio
import logging
from dataclasses import dataclass

from app.config import settings
from app.services.record_store import RecordStore
from app.services.store_errors import NotFoundError, StoreError

logger = logging.getLogger(__name__)


@dataclass
class LikeResult:
    success: bool
    liked: bool | None = None
    rating: int | None = None


class _StaleLikedSet(Exception):
    pass


def parse_liked_posts(liked_posts: str | None) -> list[str]:
    return [post for post in (liked_posts or "").split(",") if post]


def has_liked(liked_posts: str | None, loadout_id: int | str) -> bool:
    return str(loadout_id) in parse_liked_posts(liked_posts)


def add_liked_post(liked_posts: str | None, loadout_id: int | str) -> str:
    posts = parse_liked_posts(liked_posts)
    if str(loadout_id) not in posts:
        posts.append(str(loadout_id))
    return ",".join(posts)


def remove_liked_post(liked_posts: str | None, loadout_id: int | str) -> str:
    return ",".join(post for post in parse_liked_posts(liked_posts) if post != str(loadout_id))


async def toggle_like(store: RecordStore, user_id: int, loadout_id: int) -> LikeResult:
    """Like the loadout if the user has not liked it yet, otherwise take the like back.

    ``user_id`` must come from the verified session.  A missing profile or
    loadout yields ``LikeResult(success=False)`` and writes nothing; store
    write failures propagate.
    """
    for attempt in range(1, settings.like_max_attempts + 1):
        profile, rating = await asyncio.gather(
            store.get("profiles", user_id),
            store.get("loadout_ratings", loadout_id),
        )
        if profile is None or rating is None:
            logger.info(
                "Like skipped: profile %s found=%s, loadout %s found=%s",
                user_id, profile is not None, loadout_id, rating is not None,
            )
            return LikeResult(success=False)

        current = profile["liked_posts"]
        liked = has_liked(current, loadout_id)
        updated = remove_liked_post(current, loadout_id) if liked else add_liked_post(current, loadout_id)
        delta = -1 if liked else 1

        try:
            async with store.transaction() as tx:
                if not await tx.compare_and_set("profiles", user_id, "liked_posts", current, updated):
                    raise _StaleLikedSet()
                new_rating = await tx.increment("loadout_ratings", loadout_id, "rating", delta)
                if new_rating is None:
                    raise NotFoundError(f"Loadout {loadout_id} has no rating row")
        except _StaleLikedSet:
            logger.debug("liked_posts for user %s changed during toggle (attempt %s)", user_id, attempt)
            continue
        except NotFoundError:
            logger.info("Like skipped: loadout %s removed during toggle", loadout_id)
            return LikeResult(success=False)

        return LikeResult(success=True, liked=not liked, rating=new_rating)

    logger.error("Giving up toggling like for user %s on loadout %s", user_id, loadout_id)
    raise StoreError(f"liked_posts for user {user_id} kept changing during the toggle")
