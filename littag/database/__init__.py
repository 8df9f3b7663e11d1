"""JSON-file persistence."""

from littag.database.repository import (
    AttributeSchemaRepository,
    JsonRecordRepository,
    LiteratureRepository,
)

__all__ = ["AttributeSchemaRepository", "JsonRecordRepository", "LiteratureRepository"]
