import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.editor.drafts import (
    UNSELECTED,
    AttachmentDraft,
    AttachmentTypeDraft,
    LoadoutDraft,
    ModelDraft,
    clean_entries,
    split_list,
)
from app.editor.messages import CONFLICT_MESSAGE, GENERIC_MESSAGE, PERMISSION_MESSAGE
from app.editor.session import EditorBusyError, EditorSession, EditorState
from app.services.store_errors import StoreError


def mock_store() -> MagicMock:
    store = MagicMock()
    store.insert = AsyncMock(return_value=1)
    store.update = AsyncMock(return_value=None)
    store.delete = AsyncMock(return_value=None)
    store.get = AsyncMock(return_value=None)
    return store


def loadout_with_slots(count: int) -> LoadoutDraft:
    draft = LoadoutDraft(name="Rush", model=1)
    slots = ["muzzle", "barrel", "optic", "stock", "grip", "magazine", "underbarrel"]
    for index, slot in enumerate(slots[:count], start=1):
        draft.set_slot(slot, index)
    return draft


class TestValidation:
    async def test_attachment_without_model_never_reaches_store(self):
        store = mock_store()
        session = EditorSession(store, AttachmentDraft)
        session.open(AttachmentDraft(model=UNSELECTED, type=2))

        result = await session.submit("insert")

        assert result.success is False
        assert result.errors == {"model": "Select attachment model"}
        assert session.state == EditorState.failed
        store.insert.assert_not_called()

    async def test_six_attachments_rejected(self):
        store = mock_store()
        session = EditorSession(store, LoadoutDraft)
        session.open(loadout_with_slots(6))

        result = await session.submit("insert")

        assert result.errors == {"attachment": "You can only select up to 5 attachments"}
        store.insert.assert_not_called()

    async def test_five_attachments_inserted(self):
        store = mock_store()
        session = EditorSession(store, LoadoutDraft)
        session.open(loadout_with_slots(5))

        result = await session.submit("insert")

        assert result.success is True
        assert result.refresh_required is True
        store.insert.assert_awaited_once()
        table, record = store.insert.await_args.args
        assert table == "loadouts"
        assert record["muzzle"] == 1
        assert record["grip"] == 5
        assert record["magazine"] is None

    async def test_model_draft_messages(self):
        session = EditorSession(mock_store(), ModelDraft)
        session.open(ModelDraft(name="  ", type="laser"))
        result = await session.submit("insert")
        assert result.errors == {"name": "Enter model name", "type": "Select weapon type"}

    async def test_attachment_type_messages(self):
        session = EditorSession(mock_store(), AttachmentTypeDraft)
        result = await session.submit("insert")
        assert result.errors == {
            "type": "Select attachment variant",
            "name": "Enter attachment type name",
        }

    async def test_unknown_intent(self):
        store = mock_store()
        session = EditorSession(store, ModelDraft)
        session.open(ModelDraft(name="M4"))
        result = await session.submit("upsert")
        assert result.errors == {"request": "Invalid submission type"}
        store.insert.assert_not_called()

    async def test_update_without_id(self):
        store = mock_store()
        session = EditorSession(store, AttachmentDraft)
        session.open(AttachmentDraft(model=1, type=1))
        result = await session.submit("update")
        assert result.errors == {"request": "Invalid attachment id"}
        store.update.assert_not_called()

    async def test_delete_skips_draft_validation(self):
        store = mock_store()
        session = EditorSession(store, ModelDraft)
        session.open(ModelDraft(name=""), row_id=4)
        result = await session.submit("delete")
        assert result.success is True
        store.delete.assert_awaited_once_with("models", 4)


class TestSubmission:
    async def test_update_writes_draft_record(self):
        store = mock_store()
        session = EditorSession(store, ModelDraft)
        session.open_update(3, {"id": 3, "name": "M4", "type": "assault"})
        session.draft.name = "M4A1"
        result = await session.submit("update")
        assert result.as_dict() == {"success": True, "errors": None}
        store.update.assert_awaited_once_with("models", 3, {"name": "M4A1", "type": "assault"})
        assert session.state == EditorState.succeeded

    async def test_duplicate_submit_rejected_while_in_flight(self):
        store = mock_store()
        gate = asyncio.Event()

        async def slow_insert(table, record):
            await gate.wait()
            return 1

        store.insert = AsyncMock(side_effect=slow_insert)
        session = EditorSession(store, ModelDraft)
        session.open(ModelDraft(name="M4"))

        first = asyncio.create_task(session.submit("insert"))
        await asyncio.sleep(0)
        assert session.state == EditorState.submitting
        assert session.can_submit is False
        with pytest.raises(EditorBusyError):
            await session.submit("insert")
        gate.set()
        assert (await first).success is True
        assert store.insert.await_count == 1

    async def test_custom_inserter(self):
        store = mock_store()
        inserter = AsyncMock(return_value=10)
        session = EditorSession(store, LoadoutDraft, inserter=inserter)
        session.open(loadout_with_slots(1))
        await session.submit("insert")
        inserter.assert_awaited_once()
        store.insert.assert_not_called()

    async def test_unexpected_error_propagates(self):
        store = mock_store()
        store.insert = AsyncMock(side_effect=RuntimeError("boom"))
        session = EditorSession(store, ModelDraft)
        session.open(ModelDraft(name="M4"))
        with pytest.raises(RuntimeError):
            await session.submit("insert")
        assert session.state == EditorState.failed


class TestStoreErrors:
    async def test_conflict_maps_to_name_field(self, make_user, store_for):
        admin = await make_user("root", is_admin=True)
        store = store_for(admin)
        await store.insert("attachment_types", {"name": "Compensator", "type": "muzzle"})

        session = EditorSession(store, AttachmentTypeDraft)
        session.open(AttachmentTypeDraft(name="Compensator", type="muzzle"))
        result = await session.submit("insert")

        assert result.errors == {"name": CONFLICT_MESSAGE}
        assert session.draft.name == "Compensator"

    async def test_permission_maps_to_banner(self, make_user, store_for):
        user = await make_user("player")
        session = EditorSession(store_for(user), ModelDraft)
        session.open(ModelDraft(name="M4"))
        result = await session.submit("insert")
        assert result.errors == {"server": PERMISSION_MESSAGE}
        assert session.state == EditorState.failed

    async def test_other_errors_are_generic(self):
        store = mock_store()
        store.insert = AsyncMock(side_effect=StoreError("disk full", code="53100"))
        session = EditorSession(store, ModelDraft)
        session.open(ModelDraft(name="M4"))
        result = await session.submit("insert")
        assert result.errors == {"server": GENERIC_MESSAGE}


class TestLoad:
    async def test_load_fills_draft(self):
        store = mock_store()
        store.get = AsyncMock(return_value={"id": 5, "name": "Kar98", "type": "sniper"})
        session = EditorSession(store, ModelDraft)
        assert await session.load(5) is True
        assert session.draft == ModelDraft(name="Kar98", type="sniper")
        assert session.row_id == 5

    async def test_missing_row(self):
        session = EditorSession(mock_store(), ModelDraft)
        assert await session.load(99) is False
        assert session.state == EditorState.failed
        assert "request" in session.errors

    async def test_superseded_load_is_discarded(self):
        store = mock_store()
        gate = asyncio.Event()

        async def slow_get(table, row_id):
            await gate.wait()
            return {"id": row_id, "name": "Old", "type": "smg"}

        store.get = AsyncMock(side_effect=slow_get)
        session = EditorSession(store, ModelDraft)
        pending = asyncio.create_task(session.load(1))
        await asyncio.sleep(0)
        session.open_insert()
        gate.set()

        assert await pending is False
        assert session.row_id is None
        assert session.draft == ModelDraft()


class TestDrafts:
    def test_set_model_clears_slots(self):
        draft = loadout_with_slots(3)
        draft.set_model(2)
        assert draft.selected_slots == {}

    def test_unknown_slot(self):
        with pytest.raises(ValueError):
            LoadoutDraft().set_slot("bayonet", 1)

    def test_tags(self):
        draft = LoadoutDraft()
        draft.add_tag(" fast ")
        draft.add_tag("fast")
        draft.add_tag("close")
        draft.remove_tag("fast")
        assert draft.tags == ["close"]

    def test_loadout_from_row(self):
        draft = LoadoutDraft.from_row({"name": "A", "model": 2, "optic": 7, "tags": "x,y"})
        assert draft.selected_slots == {"optic": 7}
        assert draft.tags == ["x", "y"]

    def test_attachment_lists(self):
        draft = AttachmentDraft(model=1, type=1)
        draft.add_pro()
        draft.update_pro(0, " Range ")
        draft.add_con()
        draft.add_con()
        draft.update_con(1, "Weight")
        draft.remove_con(0)
        assert draft.to_record()["characteristics"] == {"pros": ["Range"], "cons": ["Weight"]}

    def test_attachment_from_form(self):
        draft = AttachmentDraft.from_form({"model": "3", "type": "x", "pros": "a,,b", "cons": ""})
        assert draft.model == 3
        assert draft.type == UNSELECTED
        assert draft.pros == ["a", "b"]

    def test_list_helpers(self):
        assert split_list("a,,b, ") == ["a", "b"]
        assert split_list(None) == []
        assert clean_entries([" a", "a", "", "b"]) == ["a", "b"]
