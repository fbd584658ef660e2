import os
import tempfile

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.database import get_db, get_session_factory
from app.main import app
from app.models.base import Base
from app.models.user import User
from app.services.auth_service import create_access_token, create_user
from app.services.record_store import Actor, RecordStore


@pytest.fixture
async def db_engine():
    db_fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(db_fd)
    test_db_url = f"sqlite+aiosqlite:///{db_path}"
    engine = create_async_engine(test_db_url, connect_args={"check_same_thread": False})
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncSession:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client() -> AsyncClient:
    """HTTP client that does NOT override the DB (for endpoints that don't need DB)."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def db_client(db_session: AsyncSession, session_factory) -> AsyncClient:
    """HTTP client with DB dependencies overridden to use the test SQLite DB."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session: AsyncSession):
    """Factory creating a user (and profile); pass is_admin=True for an admin."""
    counter = {"n": 0}

    async def _make(username: str | None = None, is_admin: bool = False) -> User:
        counter["n"] += 1
        username = username or f"user{counter['n']}"
        user = await create_user(
            db_session, email=f"{username}@example.com", username=username, password="secret123"
        )
        if is_admin:
            user.is_admin = True
            await db_session.commit()
        return user

    return _make


@pytest.fixture
def store_for(session_factory):
    """Build a RecordStore acting as the given user (anonymous when None)."""

    def _store(user: User | None = None) -> RecordStore:
        if user is None:
            return RecordStore(session_factory)
        return RecordStore(session_factory, Actor(user_id=user.id, is_admin=user.is_admin))

    return _store


@pytest.fixture
def auth_headers():
    """Bearer headers for a user, carrying their admin claim."""

    def _headers(user: User) -> dict[str, str]:
        token = create_access_token(user.id, is_admin=user.is_admin)
        return {"Authorization": f"Bearer {token}"}

    return _headers
