"""Active project resolution, activation and adoption."""

import logging
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Any, Optional, Union

from littag.database.repository import read_json, write_json_atomic
from littag.errors import NotAProjectError, ProjectNotConfiguredError
from littag.models.literature import LiteratureBase
from littag.models.project import (
    METADATA_FILENAME,
    ProjectContext,
    ProjectMetadata,
    ProjectSettings,
)
from littag.utils.timestamps import utc_now_iso

logger = logging.getLogger(__name__)


class ProjectStore:
    """Reads and writes the application-level project pointer.

    The active project is stored as a single JSON blob in the app
    directory; every project root carries a ``project-metadata.json``
    marker that identifies it as a littag project.
    """

    def __init__(self, app_dir: Path):
        """Initialize store.

        Args:
            app_dir: Application-owned directory for global state
        """
        self.app_dir = app_dir
        self.settings_path = app_dir / "project-settings.json"
        self.navigation_path = app_dir / "navigation-state.json"

    def resolve_active_project(self) -> Optional[ProjectSettings]:
        """Return the active project settings, or None if not configured."""
        try:
            data = read_json(self.settings_path)
        except FileNotFoundError:
            return None
        return ProjectSettings.model_validate(data)

    def active_context(self) -> ProjectContext:
        """Paths of the active project.

        Raises:
            ProjectNotConfiguredError: If no project has been activated
        """
        settings = self.resolve_active_project()
        if settings is None:
            raise ProjectNotConfiguredError()
        return ProjectContext.from_settings(settings)

    def activate_project(self, settings: Union[ProjectSettings, dict[str, Any]]) -> ProjectContext:
        """Make *settings* the active project and prepare its directory.

        Writes the active-settings blob and the project marker (an
        existing marker keeps its ``createdAt``), then ensures the
        ``literatures/`` and ``attributes/`` collections exist.
        """
        if not isinstance(settings, ProjectSettings):
            settings = ProjectSettings.model_validate(settings)
        context = ProjectContext.from_settings(settings)

        context.working_dir.mkdir(parents=True, exist_ok=True)
        write_json_atomic(self.settings_path, settings.to_json_dict())

        now = utc_now_iso()
        created_at = now
        existing = self._read_marker(context.working_dir)
        if existing is not None:
            created_at = existing.created_at
        metadata = ProjectMetadata(
            **settings.model_dump(),
            created_at=created_at,
            updated_at=now,
        )
        write_json_atomic(context.metadata_path, metadata.to_json_dict())

        self._ensure_collections(context)
        logger.info("Activated project '%s' at %s", settings.project_name, context.working_dir)
        return context

    def adopt_existing_project(self, directory: Union[str, Path]) -> ProjectSettings:
        """Switch to an existing project directory.

        Raises:
            NotAProjectError: If *directory* has no project marker
        """
        directory = Path(directory).expanduser().resolve()
        metadata = self._read_marker(directory)
        if metadata is None:
            raise NotAProjectError(str(directory))

        settings = ProjectSettings(
            project_name=metadata.project_name,
            project_description=metadata.project_description,
            working_dir=str(directory),
            repository_dir=metadata.repository_dir,
        )
        write_json_atomic(self.settings_path, settings.to_json_dict())
        self._ensure_collections(ProjectContext.from_settings(settings))
        logger.info("Switched to project '%s' at %s", settings.project_name, directory)
        return settings

    # ── Navigation state ──────────────────────────────────────────────

    def load_navigation_state(self) -> dict[str, Any]:
        """Last saved UI navigation state; ``{}`` when none was saved."""
        try:
            data = read_json(self.navigation_path)
        except FileNotFoundError:
            return {}
        return data if isinstance(data, dict) else {}

    def save_navigation_state(self, state: dict[str, Any]) -> None:
        write_json_atomic(self.navigation_path, state)

    # ── Private ───────────────────────────────────────────────────────

    @staticmethod
    def _read_marker(directory: Path) -> Optional[ProjectMetadata]:
        try:
            data = read_json(directory / METADATA_FILENAME)
        except FileNotFoundError:
            return None
        if not isinstance(data, dict):
            raise ValueError(f"Malformed project marker in {directory}: expected a JSON object")
        # The directory is authoritative; a moved project has a stale workingDir
        data = dict(data)
        data["workingDir"] = str(directory)
        return ProjectMetadata.model_validate(data)

    @staticmethod
    def _ensure_collections(context: ProjectContext) -> None:
        context.literatures_dir.mkdir(parents=True, exist_ok=True)
        context.attributes_dir.mkdir(parents=True, exist_ok=True)


def resolve_pdf_path(literature: LiteratureBase, context: ProjectContext) -> Optional[Path]:
    """Absolute path of the literature's PDF, or None when it has none.

    Relative paths resolve against the project's repository directory,
    falling back to the working directory.
    """
    raw = (literature.pdf_file_path or "").strip()
    if not raw:
        return None
    if PureWindowsPath(raw).is_absolute() or PurePosixPath(raw).is_absolute():
        return Path(raw)
    base = context.repository_dir or context.working_dir
    return base / raw
