"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from littag.config import Settings
from littag.database.repository import AttributeSchemaRepository, LiteratureRepository
from littag.models.literature import JournalArticle
from littag.models.project import ProjectContext, ProjectSettings
from littag.services.project_service import ProjectStore


@pytest.fixture
def app_dir(tmp_path: Path) -> Path:
    """Application-owned directory (stands in for ~/.littag)."""
    d = tmp_path / "app"
    d.mkdir()
    return d


@pytest.fixture
def settings(app_dir: Path, monkeypatch):
    """Fresh Settings singleton bound to the temporary app dir."""
    monkeypatch.delenv("LITTAG_LOG_LEVEL", raising=False)
    Settings.reset()
    loaded = Settings.load(app_dir)
    yield loaded
    Settings.reset()


@pytest.fixture
def store(app_dir: Path) -> ProjectStore:
    return ProjectStore(app_dir)


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    return tmp_path / "proj"


@pytest.fixture
def context(store: ProjectStore, project_dir: Path) -> ProjectContext:
    """An activated project."""
    return store.activate_project(
        ProjectSettings(
            project_name="Review",
            project_description="Systematic review",
            working_dir=str(project_dir),
        )
    )


@pytest.fixture
def literatures(context: ProjectContext) -> LiteratureRepository:
    return LiteratureRepository(context)


@pytest.fixture
def schemas(context: ProjectContext) -> AttributeSchemaRepository:
    return AttributeSchemaRepository(context)


@pytest.fixture
def article() -> JournalArticle:
    """An unsaved journal article."""
    return JournalArticle(
        title="A Study",
        year=2023,
        authors=["X"],
        journal="Journal of Studies",
        volume="12",
    )


@pytest.fixture
async def client(settings, context):
    """Async HTTP client against the API with an active project."""
    from littag.api.app import app
    from littag.api.state import init_state

    init_state(settings)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def unconfigured_client(settings):
    """Async HTTP client with no active project."""
    from littag.api.app import app
    from littag.api.state import init_state

    init_state(settings)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
