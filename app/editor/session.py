"""Editor session — the insert / update / delete workflow behind an editor sidecar.

States:
  idle        draft loaded from a blank template or a stored row
  validating  field checks run locally; failures never reach the store
  submitting  exactly one insert, update or delete is in flight
  succeeded   the host should close the editor and refresh its rows
  failed      the draft is kept and ``errors`` says what went wrong

Opening the session again (``open`` / ``open_update`` / ``load``) returns it to idle.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from app.editor.drafts import Draft
from app.editor.messages import (
    BUSY_MESSAGE,
    INVALID_INTENT_MESSAGE,
    REQUEST_FIELD,
    errors_for_store_error,
)
from app.services.record_store import RecordStore, Row
from app.services.store_errors import StoreError
from app.table.sequencing import RequestSequencer

logger = logging.getLogger(__name__)

Inserter = Callable[[RecordStore, Row], Awaitable[Any]]
Deleter = Callable[[RecordStore, Any], Awaitable[None]]


class EditorState(str, enum.Enum):
    idle = "idle"
    validating = "validating"
    submitting = "submitting"
    succeeded = "succeeded"
    failed = "failed"


class Intent(str, enum.Enum):
    insert = "insert"
    update = "update"
    delete = "delete"


class EditorBusyError(RuntimeError):
    """Raised when a submit arrives while another one is still in flight."""


@dataclass
class SubmitResult:
    success: bool
    errors: dict[str, str] | None = None
    # The host must reload its rows after a successful mutation
    refresh_required: bool = False

    def as_dict(self) -> dict[str, Any]:
        return {"success": self.success, "errors": self.errors}


class EditorSession:
    def __init__(
        self,
        store: RecordStore,
        draft_cls: type[Draft],
        *,
        inserter: Inserter | None = None,
        deleter: Deleter | None = None,
    ):
        self.store = store
        self.draft_cls = draft_cls
        self.table = draft_cls.table
        self._inserter = inserter
        self._deleter = deleter
        self._loads = RequestSequencer()
        self.draft: Draft = draft_cls.blank()
        self.row_id: Any = None
        self.state = EditorState.idle
        self.errors: dict[str, str] = {}

    # ── opening ───────────────────────────────────────────────────────────────

    def _reset(self, draft: Draft, row_id: Any) -> None:
        self.draft = draft
        self.row_id = row_id
        self.state = EditorState.idle
        self.errors = {}

    def open(self, draft: Draft | None = None, row_id: Any = None) -> None:
        """Edit ``draft`` (a blank template when omitted); no ``row_id`` means insert."""
        self._loads.next()  # any fetch still in flight is now stale
        self._reset(draft or self.draft_cls.blank(), row_id)

    def open_insert(self, draft: Draft | None = None) -> None:
        self.open(draft)

    def open_update(self, row_id: Any, row: Row) -> None:
        self._loads.next()
        self._reset(self.draft_cls.from_row(row), row_id)

    async def load(self, row_id: Any) -> bool:
        """Fetch a row for editing.

        Returns False when the row does not exist or when a later open
        superseded this fetch; in the latter case the session is left as the
        later open set it.
        """
        token = self._loads.next()
        row = await self.store.get(self.table, row_id)
        if not self._loads.is_current(token):
            logger.debug("Discarding stale %s fetch for id %s", self.table, row_id)
            return False
        if row is None:
            self._reset(self.draft_cls.blank(), None)
            self.state = EditorState.failed
            self.errors = {REQUEST_FIELD: f"No {self.draft_cls.label} with id {row_id}"}
            return False
        self._reset(self.draft_cls.from_row(row), row_id)
        return True

    # ── submission ────────────────────────────────────────────────────────────

    @property
    def can_submit(self) -> bool:
        """False while a submission is in flight; the submit control is disabled."""
        return self.state != EditorState.submitting

    def _fail(self, errors: dict[str, str]) -> SubmitResult:
        self.state = EditorState.failed
        self.errors = errors
        logger.debug("%s editor failed: %s", self.table, errors)
        return SubmitResult(success=False, errors=errors)

    def _validate(self, intent: Intent) -> dict[str, str]:
        if intent == Intent.insert:
            return self.draft.validate()
        if self.row_id is None or (isinstance(self.row_id, int) and self.row_id < 0):
            return {REQUEST_FIELD: f"Invalid {self.draft_cls.label} id"}
        if intent == Intent.update:
            return self.draft.validate()
        return {}

    async def _write(self, intent: Intent) -> None:
        if intent == Intent.insert:
            record = self.draft.to_record()
            if self._inserter is not None:
                await self._inserter(self.store, record)
            else:
                await self.store.insert(self.table, record)
        elif intent == Intent.update:
            await self.store.update(self.table, self.row_id, self.draft.to_record())
        elif self._deleter is not None:
            await self._deleter(self.store, self.row_id)
        else:
            await self.store.delete(self.table, self.row_id)

    async def submit(self, intent: Intent | str) -> SubmitResult:
        if not self.can_submit:
            raise EditorBusyError(BUSY_MESSAGE)
        try:
            intent = Intent(intent)
        except ValueError:
            return self._fail({REQUEST_FIELD: INVALID_INTENT_MESSAGE})

        self.state = EditorState.validating
        errors = self._validate(intent)
        if errors:
            return self._fail(errors)

        self.state = EditorState.submitting
        try:
            await self._write(intent)
        except StoreError as exc:
            logger.info("%s %s rejected by store: %r", self.table, intent.value, exc)
            return self._fail(errors_for_store_error(exc))
        except BaseException:
            self.state = EditorState.failed
            raise

        self.state = EditorState.succeeded
        self.errors = {}
        return SubmitResult(success=True, refresh_required=True)
