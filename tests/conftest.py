from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from comicvault.config import settings
from comicvault.db import database
from comicvault.main import app
from comicvault.models.db import Base
from comicvault.services.cover_storage import CoverStorage, get_cover_storage
from comicvault.services.session_registry import SessionRegistry, get_session_registry


@pytest.fixture(autouse=True)
def catalog_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Pin catalog settings so tests never depend on the local environment."""
    monkeypatch.setattr(settings, "comic_vine_api_key", "test-key")
    monkeypatch.setattr(settings, "comic_vine_base_url", "https://comicvine.gamespot.com/api")
    monkeypatch.setattr(settings, "comic_vine_fetch_issue_covers", True)
    monkeypatch.setattr(settings, "metron_base_url", "https://metron.cloud/api")
    monkeypatch.setattr(settings, "metron_origin", "https://metron.cloud")
    monkeypatch.setattr(settings, "metron_username", "")
    monkeypatch.setattr(settings, "guia_base_url", "http://www.guiadosquadrinhos.com")
    monkeypatch.setattr(settings, "catalog_page_size", 20)
    monkeypatch.setattr(settings, "default_publisher", "Desconhecido")


@pytest.fixture
async def async_engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def session(async_engine) -> AsyncSession:
    """Provide a database session for tests."""
    async_session = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session


@pytest.fixture
def registry() -> SessionRegistry:
    return SessionRegistry()


@pytest.fixture
def cover_storage(tmp_path: Path) -> CoverStorage:
    return CoverStorage(tmp_path / "covers", "/covers")


@pytest.fixture
async def client(
    async_engine,
    registry: SessionRegistry,
    cover_storage: CoverStorage,
    monkeypatch: pytest.MonkeyPatch,
):
    """Provide an async test client whose request sessions use the test engine."""
    monkeypatch.setattr(
        database,
        "async_session_factory",
        async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False),
    )
    app.dependency_overrides[get_session_registry] = lambda: registry
    app.dependency_overrides[get_cover_storage] = lambda: cover_storage

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


async def sign_in(client: AsyncClient, user_id: str) -> dict[str, str]:
    """Sign in through the API and return the Authorization header."""
    response = await client.post("/auth/sign-in", json={"user_id": user_id})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
async def alice(client: AsyncClient) -> dict[str, str]:
    return await sign_in(client, "alice")


@pytest.fixture
async def bob(client: AsyncClient) -> dict[str, str]:
    return await sign_in(client, "bob")
