import asyncio

from app.models.user import User
from app.services.like_service import (
    add_liked_post,
    has_liked,
    parse_liked_posts,
    remove_liked_post,
    toggle_like,
)
from app.services.loadout_service import create_loadout
from app.services.record_store import RecordStore


async def setup_loadout(make_user, store_for) -> tuple[User, int]:
    admin = await make_user("root", is_admin=True)
    model_id = await store_for(admin).insert("models", {"name": "M4", "type": "assault"})
    loadout_id = await create_loadout(store_for(admin), {"name": "Rush", "model": model_id})
    return admin, loadout_id


async def rating_of(store: RecordStore, loadout_id: int) -> int:
    return (await store.get("loadout_ratings", loadout_id))["rating"]


async def liked_posts_of(store: RecordStore, user: User) -> str | None:
    return (await store.get("profiles", user.id))["liked_posts"]


class TestLikedPosts:
    def test_parse(self):
        assert parse_liked_posts(None) == []
        assert parse_liked_posts("") == []
        assert parse_liked_posts("3,17") == ["3", "17"]

    def test_membership_is_exact(self):
        assert has_liked("12,3", 3) is True
        assert has_liked("12,31", 3) is False
        assert has_liked(None, 3) is False

    def test_add_and_remove(self):
        assert add_liked_post(None, 5) == "5"
        assert add_liked_post("5", 5) == "5"
        assert add_liked_post("5", 7) == "5,7"
        assert remove_liked_post("5,7,57", 5) == "7,57"
        assert remove_liked_post("7", 7) == ""


class TestToggleLike:
    async def test_like_then_unlike_round_trip(self, make_user, store_for):
        _, loadout_id = await setup_loadout(make_user, store_for)
        alice = await make_user("alice")
        store = store_for(alice)

        first = await toggle_like(store, alice.id, loadout_id)
        assert first.success is True
        assert first.liked is True
        assert first.rating == 1
        assert has_liked(await liked_posts_of(store, alice), loadout_id)

        second = await toggle_like(store, alice.id, loadout_id)
        assert second.liked is False
        assert await rating_of(store, loadout_id) == 0
        assert not has_liked(await liked_posts_of(store, alice), loadout_id)

    async def test_missing_loadout_is_a_noop(self, make_user, store_for):
        alice = await make_user("alice")
        store = store_for(alice)
        result = await toggle_like(store, alice.id, 404)
        assert result.success is False
        assert await liked_posts_of(store, alice) is None

    async def test_missing_profile_is_a_noop(self, make_user, store_for):
        admin, loadout_id = await setup_loadout(make_user, store_for)
        store = store_for(admin)
        result = await toggle_like(store, 999, loadout_id)
        assert result.success is False
        assert await rating_of(store, loadout_id) == 0

    async def test_rating_can_go_negative(self, make_user, store_for):
        admin, loadout_id = await setup_loadout(make_user, store_for)
        alice = await make_user("alice")
        await store_for(alice).update("profiles", alice.id, {"liked_posts": str(loadout_id)})

        result = await toggle_like(store_for(alice), alice.id, loadout_id)
        assert result.liked is False
        assert result.rating == -1


class TestConcurrentLikes:
    async def test_naive_read_then_write_loses_an_update(self, make_user, store_for):
        """Two read-then-write likes racing on one loadout end one short."""
        admin, loadout_id = await setup_loadout(make_user, store_for)
        store = store_for(admin)

        seen = await asyncio.gather(rating_of(store, loadout_id), rating_of(store, loadout_id))
        await asyncio.gather(
            *(store.update("loadout_ratings", loadout_id, {"rating": value + 1}) for value in seen)
        )

        assert await rating_of(store, loadout_id) == 1

    async def test_two_users_liking_at_once_both_count(self, make_user, store_for):
        _, loadout_id = await setup_loadout(make_user, store_for)
        alice = await make_user("alice")
        bob = await make_user("bob")

        results = await asyncio.gather(
            toggle_like(store_for(alice), alice.id, loadout_id),
            toggle_like(store_for(bob), bob.id, loadout_id),
        )

        assert all(r.success for r in results)
        assert await rating_of(store_for(), loadout_id) == 2

    async def test_same_user_double_toggle_stays_consistent(self, make_user, store_for):
        _, loadout_id = await setup_loadout(make_user, store_for)
        alice = await make_user("alice")
        store = store_for(alice)

        await asyncio.gather(
            toggle_like(store, alice.id, loadout_id),
            toggle_like(store, alice.id, loadout_id),
        )

        liked = has_liked(await liked_posts_of(store, alice), loadout_id)
        assert await rating_of(store, loadout_id) == (1 if liked else 0)

    async def test_rating_matches_liked_sets(self, make_user, store_for):
        _, loadout_id = await setup_loadout(make_user, store_for)
        users = [await make_user(f"fan{i}") for i in range(4)]

        await asyncio.gather(*(toggle_like(store_for(u), u.id, loadout_id) for u in users))
        await toggle_like(store_for(users[0]), users[0].id, loadout_id)

        likers = 0
        for user in users:
            if has_liked(await liked_posts_of(store_for(), user), loadout_id):
                likers += 1
        assert likers == 3
        assert await rating_of(store_for(), loadout_id) == likers
