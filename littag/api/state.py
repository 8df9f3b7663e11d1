"""Application state and per-request service accessors."""

from littag.config import Settings
from littag.database.repository import AttributeSchemaRepository, LiteratureRepository
from littag.services.attribute_service import AttributeService
from littag.services.project_service import ProjectStore


# ============================================================================
# Global State
# ============================================================================


class AppState:
    """Mutable singleton holding the runtime services."""

    settings: Settings
    store: ProjectStore


state = AppState()


def init_state(settings: Settings) -> None:
    """Bind services to *settings* (called from the app lifespan and tests)."""
    state.settings = settings
    state.store = ProjectStore(settings.app_dir)


# ============================================================================
# Repositories for the active project
# ============================================================================
# The active project can change between requests, so repositories are
# built from the store on every call.


def literature_repo() -> LiteratureRepository:
    return LiteratureRepository(state.store.active_context())


def schema_repo() -> AttributeSchemaRepository:
    return AttributeSchemaRepository(state.store.active_context())


def attribute_service() -> AttributeService:
    context = state.store.active_context()
    return AttributeService(LiteratureRepository(context), AttributeSchemaRepository(context))
