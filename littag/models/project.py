"""Project settings and resolved project paths."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pydantic import field_validator

from littag.models.literature import CamelModel

METADATA_FILENAME = "project-metadata.json"
LITERATURES_DIRNAME = "literatures"
ATTRIBUTES_DIRNAME = "attributes"


class ProjectSettings(CamelModel):
    """User-entered settings of one project."""

    project_name: str
    project_description: str = ""
    working_dir: str
    repository_dir: Optional[str] = None

    @field_validator("project_name")
    @classmethod
    def validate_project_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("project name is required")
        return v

    @field_validator("working_dir")
    @classmethod
    def validate_working_dir(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("working directory is required")
        if not Path(v).is_absolute():
            raise ValueError("working directory must be an absolute path")
        return v

    @field_validator("repository_dir")
    @classmethod
    def blank_repository_dir_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v if v and v.strip() else None


class ProjectMetadata(ProjectSettings):
    """Marker written at the project root."""

    created_at: str
    updated_at: str


@dataclass(frozen=True)
class ProjectContext:
    """Resolved paths of one project, passed into every repository."""

    working_dir: Path
    repository_dir: Optional[Path] = None

    @classmethod
    def from_settings(cls, settings: ProjectSettings) -> "ProjectContext":
        return cls(
            working_dir=Path(settings.working_dir),
            repository_dir=Path(settings.repository_dir) if settings.repository_dir else None,
        )

    @property
    def metadata_path(self) -> Path:
        return self.working_dir / METADATA_FILENAME

    @property
    def literatures_dir(self) -> Path:
        return self.working_dir / LITERATURES_DIRNAME

    @property
    def attributes_dir(self) -> Path:
        return self.working_dir / ATTRIBUTES_DIRNAME
