"""Tests for application startup."""

from pathlib import Path

import pytest

from comicvault import main
from comicvault.config import settings
from comicvault.services.session_registry import log_session_event, session_registry


@pytest.fixture
def no_db(monkeypatch: pytest.MonkeyPatch) -> None:
    async def skip_init_db() -> None:
        return None

    monkeypatch.setattr(main, "init_db", skip_init_db)


class TestLifespan:
    async def test_creates_cover_directory(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, no_db: None
    ) -> None:
        cover_dir = tmp_path / "covers"
        monkeypatch.setattr(settings, "cover_storage_dir", str(cover_dir))

        async with main.lifespan(main.app):
            assert cover_dir.is_dir()

    async def test_session_logging_only_while_running(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, no_db: None
    ) -> None:
        monkeypatch.setattr(settings, "cover_storage_dir", str(tmp_path / "covers"))

        async with main.lifespan(main.app):
            assert log_session_event in session_registry._listeners

        assert log_session_event not in session_registry._listeners
