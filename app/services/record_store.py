"""Record store client — uniform row access keyed by table name.

Responsibilities:
  - get / list / insert / update / delete against the named tables
  - atomic counter updates and conditional single-row writes
  - row-level write permissions for the acting user
  - translation of driver errors into the StoreError taxonomy

Every call on an unbound store runs in its own short-lived transaction, so
independent calls may be awaited concurrently.  Calls on a store obtained
from ``transaction()`` share one session and must be awaited one at a time.
"""

import enum
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator

from sqlalchemy import select, update
from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.models.attachment import Attachment
from app.models.attachment_type import AttachmentType
from app.models.base import Base
from app.models.loadout import Loadout, LoadoutRating
from app.models.profile import Profile
from app.models.weapon_model import WeaponModel
from app.services.store_errors import (
    FOREIGN_KEY_VIOLATION,
    UNIQUE_VIOLATION,
    NotFoundError,
    PermissionDeniedError,
    StoreError,
    error_for_code,
)

logger = logging.getLogger(__name__)

Row = dict[str, Any]

TABLES: dict[str, type[Base]] = {
    "models": WeaponModel,
    "attachment_types": AttachmentType,
    "attachments": Attachment,
    "loadouts": Loadout,
    "loadout_ratings": LoadoutRating,
    "profiles": Profile,
}

# Reference data is maintained from the admin back-office only
ADMIN_TABLES = frozenset({"models", "attachment_types", "attachments"})

UNDEFINED_COLUMN = "42703"
UNDEFINED_TABLE = "42P01"
INVALID_TEXT_REPRESENTATION = "22P02"


@dataclass(frozen=True)
class Actor:
    """Who is performing store writes. ``user_id`` is None for anonymous callers."""

    user_id: int | None = None
    is_admin: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


ANONYMOUS = Actor()


def _sqlstate(exc: DBAPIError) -> str | None:
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code:
        return str(code)
    # SQLite reports constraint failures only through the message text
    text = str(orig)
    if "UNIQUE constraint failed" in text:
        return UNIQUE_VIOLATION
    if "FOREIGN KEY constraint failed" in text:
        return FOREIGN_KEY_VIOLATION
    return None


def translate_error(exc: SQLAlchemyError) -> StoreError:
    if isinstance(exc, DBAPIError):
        code = _sqlstate(exc)
        error = error_for_code(code, str(exc.orig))
    elif isinstance(getattr(exc, "orig", None), LookupError):
        # Enum value outside the column's allowed set
        error = StoreError(str(exc.orig), code=INVALID_TEXT_REPRESENTATION)
    else:
        error = StoreError(str(exc))
    if type(error) is StoreError:
        logger.warning("Unmapped store error (code=%s): %s", error.code, error.message)
    return error


def to_row(obj: Base) -> Row:
    """Flatten an ORM instance into a plain dict of its column values."""
    row: Row = {}
    for attr in obj.__mapper__.column_attrs:
        value = getattr(obj, attr.key)
        if isinstance(value, enum.Enum):
            value = value.value
        row[attr.key] = value
    return row


class RecordStore:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        actor: Actor = ANONYMOUS,
        *,
        session: AsyncSession | None = None,
    ):
        self._session_factory = session_factory
        self._session = session
        self.actor = actor

    def as_actor(self, actor: Actor) -> "RecordStore":
        return RecordStore(self._session_factory, actor, session=self._session)

    # ── plumbing ──────────────────────────────────────────────────────────────

    @staticmethod
    def _model(table: str) -> type[Base]:
        try:
            return TABLES[table]
        except KeyError:
            raise StoreError(f'relation "{table}" does not exist', code=UNDEFINED_TABLE) from None

    @staticmethod
    def _check_columns(model: type[Base], record: Row) -> None:
        known = {attr.key for attr in model.__mapper__.column_attrs}
        unknown = sorted(set(record) - known)
        if unknown:
            raise StoreError(
                f"column(s) {', '.join(unknown)} do not exist on {model.__tablename__}",
                code=UNDEFINED_COLUMN,
            )

    @asynccontextmanager
    async def _scope(self) -> AsyncIterator[AsyncSession]:
        if self._session is not None:
            yield self._session
            return
        async with self._session_factory() as session:
            async with session.begin():
                yield session

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["RecordStore"]:
        """Yield a store whose calls share one transaction.

        The transaction commits when the block exits normally and rolls back
        when it raises.
        """
        if self._session is not None:
            yield self
            return
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    yield RecordStore(self._session_factory, self.actor, session=session)
        except SQLAlchemyError as exc:
            raise translate_error(exc) from exc

    # ── permissions ───────────────────────────────────────────────────────────

    async def _authorize(
        self, session: AsyncSession, table: str, op: str, row_id: Any, record: Row | None
    ) -> None:
        actor = self.actor
        denied = PermissionDeniedError(f'permission denied: {op} on "{table}"')
        if table in ADMIN_TABLES:
            if not actor.is_admin:
                raise denied
            return
        if not actor.is_authenticated:
            raise denied
        if table == "profiles":
            target = row_id if row_id is not None else (record or {}).get("id")
            if target != actor.user_id:
                raise denied
        elif table == "loadouts" or (table == "loadout_ratings" and op == "delete"):
            # A rating row shares its loadout's id and owner
            if op == "insert":
                if (record or {}).get("user_id") != actor.user_id:
                    raise denied
                return
            if actor.is_admin:
                return
            owner = await session.scalar(select(Loadout.user_id).where(Loadout.id == row_id))
            if owner is not None and owner != actor.user_id:
                raise denied

    # ── reads ─────────────────────────────────────────────────────────────────

    async def get(self, table: str, row_id: Any) -> Row | None:
        model = self._model(table)
        try:
            async with self._scope() as session:
                obj = await session.scalar(select(model).where(model.id == row_id))
                return to_row(obj) if obj is not None else None
        except SQLAlchemyError as exc:
            raise translate_error(exc) from exc

    async def get_or_raise(self, table: str, row_id: Any) -> Row:
        row = await self.get(table, row_id)
        if row is None:
            raise NotFoundError(f"No {table} row with id {row_id}")
        return row

    async def list(self, table: str) -> list[Row]:
        """Return every row of ``table`` ordered by id ascending."""
        model = self._model(table)
        try:
            async with self._scope() as session:
                result = await session.scalars(select(model).order_by(model.id))
                return [to_row(obj) for obj in result.all()]
        except SQLAlchemyError as exc:
            raise translate_error(exc) from exc

    # ── writes ────────────────────────────────────────────────────────────────

    async def insert(self, table: str, record: Row) -> int:
        """Insert one row and return its store-assigned id."""
        model = self._model(table)
        self._check_columns(model, record)
        try:
            async with self._scope() as session:
                await self._authorize(session, table, "insert", None, record)
                obj = model(**record)
                session.add(obj)
                await session.flush()
                new_id = obj.id
        except SQLAlchemyError as exc:
            raise translate_error(exc) from exc
        logger.debug("Inserted %s row %s", table, new_id)
        return new_id

    async def update(self, table: str, row_id: Any, partial: Row) -> None:
        model = self._model(table)
        self._check_columns(model, partial)
        values = {k: v for k, v in partial.items() if k != "id"}
        try:
            async with self._scope() as session:
                await self._authorize(session, table, "update", row_id, partial)
                obj = await session.scalar(select(model).where(model.id == row_id))
                if obj is None:
                    raise NotFoundError(f"No {table} row with id {row_id}")
                for key, value in values.items():
                    setattr(obj, key, value)
                await session.flush()
        except SQLAlchemyError as exc:
            raise translate_error(exc) from exc

    async def delete(self, table: str, row_id: Any) -> None:
        model = self._model(table)
        try:
            async with self._scope() as session:
                await self._authorize(session, table, "delete", row_id, None)
                obj = await session.scalar(select(model).where(model.id == row_id))
                if obj is None:
                    raise NotFoundError(f"No {table} row with id {row_id}")
                await session.delete(obj)
                await session.flush()
        except SQLAlchemyError as exc:
            raise translate_error(exc) from exc

    async def increment(self, table: str, row_id: Any, column: str, delta: int) -> int | None:
        """Atomically add ``delta`` to a numeric column.

        Issues a single ``SET col = col + delta`` statement, so concurrent
        increments never overwrite each other.  Returns the new value, or
        None when no row has that id.
        """
        model = self._model(table)
        self._check_columns(model, {column: delta})
        col = getattr(model, column)
        try:
            async with self._scope() as session:
                await self._authorize(session, table, "update", row_id, None)
                result = await session.execute(
                    update(model)
                    .where(model.id == row_id)
                    .values({column: col + delta})
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount == 0:
                    return None
                return await session.scalar(select(col).where(model.id == row_id))
        except SQLAlchemyError as exc:
            raise translate_error(exc) from exc

    async def compare_and_set(
        self, table: str, row_id: Any, column: str, expected: Any, value: Any
    ) -> bool:
        """Write ``value`` only if the column still holds ``expected``.

        Returns True when the row matched and was updated.
        """
        model = self._model(table)
        self._check_columns(model, {column: value})
        col = getattr(model, column)
        condition = col.is_(None) if expected is None else col == expected
        try:
            async with self._scope() as session:
                await self._authorize(session, table, "update", row_id, None)
                result = await session.execute(
                    update(model)
                    .where(model.id == row_id, condition)
                    .values({column: value})
                    .execution_options(synchronize_session=False)
                )
                return result.rowcount == 1
        except SQLAlchemyError as exc:
            raise translate_error(exc) from exc
