"""Attaching attribute values to literature records.

The module-level functions are pure: they return an updated copy and
never touch the input record. :class:`AttributeService` wraps them with
load/save against the repositories.
"""

import logging
from typing import Optional, TypeVar

from littag.database.repository import AttributeSchemaRepository, LiteratureRepository
from littag.errors import CorruptRecordError, FreeTextNotAllowedError, NotFoundError
from littag.models.attribute import AttributeSchema
from littag.models.literature import AttributeApplication, LiteratureBase

logger = logging.getLogger(__name__)

LiteratureT = TypeVar("LiteratureT", bound=LiteratureBase)


def find_application(
    record: LiteratureBase, attribute_id: str
) -> Optional[AttributeApplication]:
    """The record's application of *attribute_id*, if any."""
    return next(
        (a for a in record.attributes or [] if a.attribute_id == attribute_id),
        None,
    )


def _with_attributes(
    record: LiteratureT, applications: list[AttributeApplication]
) -> LiteratureT:
    return record.model_copy(update={"attributes": applications or None})


def apply_value(record: LiteratureT, attribute_id: str, value: str) -> LiteratureT:
    """Add *value* to the record's application of *attribute_id*.

    Creates the application when missing. A value already present is
    not added twice; insertion order is kept. Blank values are ignored.
    Returns *record* itself when nothing changes.
    """
    value = value.strip()
    if not value:
        return record

    existing = find_application(record, attribute_id)
    if existing is not None and value in existing.values:
        return record

    applications = []
    for application in record.attributes or []:
        if application.attribute_id == attribute_id:
            application = application.model_copy(
                update={"values": [*application.values, value]}
            )
        applications.append(application)
    if existing is None:
        applications.append(
            AttributeApplication(attribute_id=attribute_id, values=[value], note="")
        )
    return _with_attributes(record, applications)


def remove_value(record: LiteratureT, attribute_id: str, value: str) -> LiteratureT:
    """Remove *value*; an application left without values is dropped.

    Returns *record* itself when the value is not applied.
    """
    value = value.strip()
    existing = find_application(record, attribute_id)
    if existing is None or value not in existing.values:
        return record

    applications = []
    for application in record.attributes or []:
        if application.attribute_id == attribute_id:
            remaining = [v for v in application.values if v != value]
            if not remaining:
                continue
            application = application.model_copy(update={"values": remaining})
        applications.append(application)
    return _with_attributes(record, applications)


def set_note(record: LiteratureT, attribute_id: str, note: str) -> LiteratureT:
    """Replace the note of an existing application (no-op otherwise)."""
    if find_application(record, attribute_id) is None:
        return record
    applications = [
        a.model_copy(update={"note": note}) if a.attribute_id == attribute_id else a
        for a in record.attributes or []
    ]
    return _with_attributes(record, applications)


def resolve_schema(
    schemas: AttributeSchemaRepository, attribute_id: str
) -> Optional[AttributeSchema]:
    """Look up a schema; missing or unreadable schemas yield None."""
    try:
        return schemas.load(attribute_id)
    except (CorruptRecordError, ValueError) as e:
        logger.warning("Cannot resolve attribute schema %s: %s", attribute_id, e)
        return None


class AttributeService:
    """Repository-backed attribute operations on stored literature."""

    def __init__(self, literatures: LiteratureRepository, schemas: AttributeSchemaRepository):
        self.literatures = literatures
        self.schemas = schemas

    def _load(self, literature_id: str) -> LiteratureBase:
        record = self.literatures.load(literature_id)
        if record is None:
            raise NotFoundError("literature", literature_id)
        return record

    def tag(self, literature_id: str, attribute_id: str, value: str) -> LiteratureBase:
        """Apply *value* and save.

        Raises:
            NotFoundError: If the literature does not exist
            FreeTextNotAllowedError: If the schema restricts values to its
                predefined list and *value* is not on it
        """
        record = self._load(literature_id)
        schema = resolve_schema(self.schemas, attribute_id)
        if schema is not None and not schema.allows(value.strip()):
            raise FreeTextNotAllowedError(schema.name, value)
        updated = apply_value(record, attribute_id, value)
        if updated is record:
            return record
        return self.literatures.save(updated)

    def untag(self, literature_id: str, attribute_id: str, value: str) -> LiteratureBase:
        """Remove *value* and save."""
        record = self._load(literature_id)
        updated = remove_value(record, attribute_id, value)
        if updated is record:
            return record
        return self.literatures.save(updated)

    def annotate(self, literature_id: str, attribute_id: str, note: str) -> LiteratureBase:
        """Set the note of an applied attribute and save."""
        record = self._load(literature_id)
        updated = set_note(record, attribute_id, note)
        if updated is record:
            return record
        return self.literatures.save(updated)

    def schema_names(self) -> dict[str, str]:
        """Schema id → display name for every readable schema."""
        return {schema_id: s.name for schema_id, s in self.schemas.as_lookup().items()}
