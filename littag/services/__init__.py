"""Service layer."""

from littag.services.attribute_service import (
    AttributeService,
    apply_value,
    remove_value,
    resolve_schema,
    set_note,
)
from littag.services.export_service import ExportConfig, TidyDataExporter, escape_field
from littag.services.project_service import ProjectStore, resolve_pdf_path

__all__ = [
    "AttributeService",
    "ExportConfig",
    "ProjectStore",
    "TidyDataExporter",
    "apply_value",
    "escape_field",
    "remove_value",
    "resolve_pdf_path",
    "resolve_schema",
    "set_note",
]
