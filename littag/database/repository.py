"""JSON-file repositories: one file per record under the project directory."""

import json
import logging
import os
import re
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Generic, Optional, TypeVar, Union

from pydantic import BaseModel

from littag.errors import (
    CorruptRecordError,
    ImmutableTypeError,
    LittagError,
    NotFoundError,
)
from littag.models.attribute import AttributeSchema, AttributeSchemaSummary
from littag.models.literature import LiteratureBase, LiteratureSummary, validate_literature
from littag.models.project import ATTRIBUTES_DIRNAME, LITERATURES_DIRNAME, ProjectContext
from littag.utils.ids import generate_id
from littag.utils.timestamps import utc_now_iso

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)
SummaryT = TypeVar("SummaryT", bound=BaseModel)

_ID_RE = re.compile(r"^[A-Za-z0-9_-]+$")


def write_json_atomic(path: Path, data: Any) -> None:
    """Write *data* as JSON to *path* via a temp file and ``os.replace``.

    Readers never observe a half-written file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def read_json(path: Path) -> Any:
    """Read JSON from *path*. Missing files raise ``FileNotFoundError``."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


class JsonRecordRepository(ABC, Generic[RecordT, SummaryT]):
    """CRUD over ``<dirname>/<id><suffix>`` files.

    Subclasses set ``kind``, ``dirname`` and ``suffix`` and implement
    ``_parse`` and ``_summarize``.
    """

    kind: str = "record"
    dirname: str = ""
    suffix: str = ".json"

    def __init__(self, context: ProjectContext):
        """Initialize repository for a project.

        Args:
            context: Resolved project paths
        """
        self.context = context

    @property
    def directory(self) -> Path:
        return self.context.working_dir / self.dirname

    def path_for(self, record_id: str) -> Path:
        """Path of the file that stores *record_id*."""
        if not _ID_RE.match(record_id):
            raise ValueError(f"Invalid {self.kind} id: {record_id!r}")
        return self.directory / f"{record_id}{self.suffix}"

    def exists(self, record_id: str) -> bool:
        return self.path_for(record_id).is_file()

    # ── Hooks ─────────────────────────────────────────────────────────

    @abstractmethod
    def _parse(self, data: Any) -> RecordT:
        """Validate raw JSON into a record."""

    @abstractmethod
    def _summarize(self, record: RecordT) -> SummaryT:
        """Project a record to its listing summary."""

    def _coerce(self, record: Union[RecordT, dict[str, Any]]) -> RecordT:
        """Validate a record (or raw dict) before it is persisted."""
        if isinstance(record, BaseModel):
            record = record.model_dump(by_alias=True)
        return self._parse(record)

    def _before_write(self, record: RecordT, existing: Optional[RecordT]) -> RecordT:
        return record

    # ── CRUD ──────────────────────────────────────────────────────────

    def save(self, record: Union[RecordT, dict[str, Any]]) -> RecordT:
        """Persist a record, assigning an id and timestamps as needed.

        ``created_at`` is set on first save only; ``updated_at`` is
        refreshed on every save.

        Returns:
            The record as written (with ``id`` set)
        """
        record = self._coerce(record)
        existing: Optional[RecordT] = None
        if record.id:
            try:
                existing = self.load(record.id)
            except CorruptRecordError as e:
                logger.warning("Overwriting unreadable %s file: %s", self.kind, e)

        now = utc_now_iso()
        record_id = record.id or generate_id()
        created_at = record.created_at or (existing.created_at if existing else None) or now
        stamped = record.model_copy(
            update={"id": record_id, "created_at": created_at, "updated_at": now}
        )
        stamped = self._before_write(stamped, existing)

        path = self.path_for(record_id)
        write_json_atomic(path, stamped.to_json_dict())
        logger.debug("Saved %s %s -> %s", self.kind, record_id, path)
        return stamped

    def load(self, record_id: str) -> Optional[RecordT]:
        """Load a record by id.

        Returns:
            The record, or None if no file exists for the id

        Raises:
            CorruptRecordError: If the file exists but cannot be parsed
        """
        path = self.path_for(record_id)
        try:
            data = read_json(path)
        except FileNotFoundError:
            return None
        except ValueError as e:
            raise CorruptRecordError(str(path), str(e)) from e

        try:
            return self._parse(data)
        except (ValueError, LittagError) as e:
            raise CorruptRecordError(str(path), str(e)) from e

    def list_records(self) -> list[RecordT]:
        """Load every record; unreadable files are logged and skipped."""
        if not self.directory.is_dir():
            return []
        records = []
        for path in self.directory.glob(f"*{self.suffix}"):
            if not path.is_file():
                continue
            try:
                records.append(self._parse(read_json(path)))
            except (ValueError, LittagError) as e:
                logger.warning("Skipped unreadable %s file %s: %s", self.kind, path.name, e)
        return records

    def list(self) -> list[SummaryT]:
        """Summaries of all records, in no particular order."""
        return [self._summarize(record) for record in self.list_records()]

    def delete(self, record_id: str) -> None:
        """Delete a record file.

        Raises:
            NotFoundError: If no file exists for the id
        """
        path = self.path_for(record_id)
        try:
            path.unlink()
        except FileNotFoundError:
            raise NotFoundError(self.kind, record_id) from None
        logger.info("Deleted %s %s", self.kind, record_id)


class LiteratureRepository(JsonRecordRepository[LiteratureBase, LiteratureSummary]):
    """Literature records in ``literatures/<id>.literature.json``."""

    kind = "literature"
    dirname = LITERATURES_DIRNAME
    suffix = ".literature.json"

    def _parse(self, data: Any) -> LiteratureBase:
        if not isinstance(data, dict):
            raise ValueError("literature file must contain a JSON object")
        return validate_literature(data)

    def _summarize(self, record: LiteratureBase) -> LiteratureSummary:
        return LiteratureSummary(
            id=record.id or "",
            title=record.title,
            type=record.type,
            year=record.year,
            authors=list(record.authors),
            attributes=list(record.attributes or []),
        )

    def _before_write(
        self, record: LiteratureBase, existing: Optional[LiteratureBase]
    ) -> LiteratureBase:
        if existing is not None and existing.type != record.type:
            raise ImmutableTypeError(record.id or "", existing.type, record.type)
        return record


class AttributeSchemaRepository(JsonRecordRepository[AttributeSchema, AttributeSchemaSummary]):
    """Attribute schemas in ``attributes/<id>.attribute-schema.json``."""

    kind = "attribute schema"
    dirname = ATTRIBUTES_DIRNAME
    suffix = ".attribute-schema.json"

    def _parse(self, data: Any) -> AttributeSchema:
        return AttributeSchema.model_validate(data)

    def _summarize(self, record: AttributeSchema) -> AttributeSchemaSummary:
        return AttributeSchemaSummary(id=record.id or "", name=record.name)

    def _before_write(
        self, record: AttributeSchema, existing: Optional[AttributeSchema]
    ) -> AttributeSchema:
        if not record.predefined_values:
            return record
        values = [
            item if item.id else item.model_copy(update={"id": generate_id()})
            for item in record.predefined_values
        ]
        return record.model_copy(update={"predefined_values": values})

    def as_lookup(self) -> dict[str, AttributeSchema]:
        """All schemas keyed by id."""
        return {schema.id: schema for schema in self.list_records() if schema.id}
