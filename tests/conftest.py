"""Shared fixtures: a throwaway SQLite database per test."""
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

import locallibrary.models  # noqa: F401
from locallibrary.api.deps import get_store
from locallibrary.config import Settings
from locallibrary.database import Base
from locallibrary.main import app
from locallibrary.services import AUTHOR, BOOK, BOOK_INSTANCE, GENRE, EntityManager
from locallibrary.store import Store


@pytest.fixture
async def engine(tmp_path):
    """Set up test database."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def store(engine) -> Store:
    return Store(async_sessionmaker(engine, expire_on_commit=False))


@pytest.fixture
def settings() -> Settings:
    return Settings(check_author_lifespan=False, check_references=True)


@pytest.fixture
def authors(store, settings) -> EntityManager:
    return EntityManager(AUTHOR, store, settings)


@pytest.fixture
def genres(store, settings) -> EntityManager:
    return EntityManager(GENRE, store, settings)


@pytest.fixture
def books(store, settings) -> EntityManager:
    return EntityManager(BOOK, store, settings)


@pytest.fixture
def copies(store, settings) -> EntityManager:
    return EntityManager(BOOK_INSTANCE, store, settings)


@pytest.fixture
async def client(store):
    """Create test client."""
    app.dependency_overrides[get_store] = lambda: store
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def record_id(url: str) -> int:
    """ID at the end of a detail URL such as ``/catalog/author/3``."""
    return int(url.rstrip("/").rsplit("/", 1)[-1])
