"""Tidy-data export route."""

from typing import Literal, Optional

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from littag.api.state import state
from littag.database.repository import AttributeSchemaRepository, LiteratureRepository
from littag.models.literature import CamelModel
from littag.services.export_service import ExportConfig, ExportField, TidyDataExporter

router = APIRouter()

MEDIA_TYPES = {"csv": "text/csv", "tsv": "text/tab-separated-values"}


class ExportRequest(CamelModel):
    format: Optional[Literal["csv", "tsv"]] = None
    fields: Optional[list[ExportField]] = None
    attribute_ids: Optional[list[str]] = None


@router.post("/export")
async def export_tidy_data(request: ExportRequest):
    """Render the active project as CSV/TSV; saving it is up to the client."""
    config = ExportConfig(
        format=request.format or state.settings.export_format,  # type: ignore[arg-type]
        fields=list(request.fields or state.settings.export_fields),
        attribute_ids=request.attribute_ids,
    )
    context = state.store.active_context()
    body = TidyDataExporter(config).export(
        LiteratureRepository(context).list_records(),
        AttributeSchemaRepository(context).as_lookup(),
    )
    return PlainTextResponse(
        body,
        media_type=MEDIA_TYPES[config.format],
        headers={"Content-Disposition": f'attachment; filename="tidy.{config.format}"'},
    )
