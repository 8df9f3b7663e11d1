"""Data models."""

from littag.models.attribute import AttributeSchema, AttributeSchemaSummary, AttributeValue
from littag.models.literature import (
    LITERATURE_TYPE_LABELS,
    LITERATURE_TYPES,
    AttributeApplication,
    Book,
    BookChapter,
    ConferencePaper,
    JournalArticle,
    Literature,
    LiteratureBase,
    LiteratureSummary,
    OtherLiterature,
    Thesis,
    collect_errors,
    validate_literature,
)
from littag.models.project import ProjectContext, ProjectMetadata, ProjectSettings

__all__ = [
    "LITERATURE_TYPES",
    "LITERATURE_TYPE_LABELS",
    "AttributeApplication",
    "AttributeSchema",
    "AttributeSchemaSummary",
    "AttributeValue",
    "Book",
    "BookChapter",
    "ConferencePaper",
    "JournalArticle",
    "Literature",
    "LiteratureBase",
    "LiteratureSummary",
    "OtherLiterature",
    "ProjectContext",
    "ProjectMetadata",
    "ProjectSettings",
    "Thesis",
    "collect_errors",
    "validate_literature",
]
