"""Literature routes: list/search, CRUD, file paths, attribute tagging."""

from typing import Any, Optional

from fastapi import APIRouter, Body, Query, Response
from fastapi.responses import JSONResponse

from littag.api.state import attribute_service, literature_repo, state
from littag.errors import NotFoundError
from littag.models.literature import CamelModel, LiteratureBase
from littag.services.project_service import resolve_pdf_path
from littag.services.search_service import (
    filter_by_attribute,
    filter_by_keywords,
    filter_by_type,
    filter_by_year,
    paginate,
    sort_literatures,
)

router = APIRouter(prefix="/literatures")


class ApplyValueRequest(CamelModel):
    attribute_id: str
    value: str


class NoteRequest(CamelModel):
    note: str = ""


def _load_or_404(literature_id: str) -> LiteratureBase:
    record = literature_repo().load(literature_id)
    if record is None:
        raise NotFoundError("literature", literature_id)
    return record


# ============================================================================
# List / Search
# ============================================================================


@router.get("")
async def list_literatures(
    keyword: Optional[list[str]] = Query(None, description="Title/author keywords"),
    mode: str = Query("or", pattern="^(or|and)$"),
    type: Optional[list[str]] = Query(None, description="Literature types"),
    attribute: Optional[str] = Query(None, description="Attribute id"),
    value: Optional[str] = Query(None, description="Attribute value"),
    year_from: Optional[int] = Query(None),
    year_to: Optional[int] = Query(None),
    sort: str = Query("title", description="title, year, or type"),
    order: str = Query("asc", pattern="^(asc|desc)$"),
    page: int = Query(0, ge=0),
    per_page: int = Query(0, ge=0, description="0 = no paging"),
):
    """Literature summaries, filtered and sorted."""
    items = literature_repo().list()
    items = filter_by_keywords(items, keyword or [], mode)
    items = filter_by_type(items, type)
    items = filter_by_attribute(items, attribute, value)
    items = filter_by_year(items, year_from, year_to)
    sort_literatures(items, sort, order)
    total = len(items)
    items = paginate(items, page, per_page)
    return JSONResponse({
        "total": total,
        "items": [i.to_json_dict() for i in items],
    })


# ============================================================================
# CRUD
# ============================================================================


@router.post("")
async def create_literature(payload: dict[str, Any] = Body(...)):
    """Validate and save a new record; the id is assigned here."""
    payload = {k: v for k, v in payload.items() if k not in ("id", "createdAt", "updatedAt")}
    record = literature_repo().save(payload)
    return JSONResponse(status_code=201, content=record.to_json_dict())


@router.get("/{literature_id}")
async def get_literature(literature_id: str):
    return JSONResponse(_load_or_404(literature_id).to_json_dict())


@router.put("/{literature_id}")
async def update_literature(literature_id: str, payload: dict[str, Any] = Body(...)):
    """Overwrite an existing record; ``type`` must not change."""
    _load_or_404(literature_id)
    record = literature_repo().save({**payload, "id": literature_id})
    return JSONResponse(record.to_json_dict())


@router.delete("/{literature_id}", status_code=204)
async def delete_literature(literature_id: str):
    literature_repo().delete(literature_id)
    return Response(status_code=204)


@router.get("/{literature_id}/paths")
async def literature_paths(literature_id: str):
    """Record file path and resolved PDF path (for open/copy actions)."""
    record = _load_or_404(literature_id)
    context = state.store.active_context()
    pdf = resolve_pdf_path(record, context)
    return JSONResponse({
        "record": str(literature_repo().path_for(literature_id)),
        "pdf": str(pdf) if pdf else None,
        "pdfExists": bool(pdf and pdf.is_file()),
    })


# ============================================================================
# Attribute tagging
# ============================================================================


@router.post("/{literature_id}/attributes")
async def apply_attribute_value(literature_id: str, request: ApplyValueRequest):
    record = attribute_service().tag(literature_id, request.attribute_id, request.value)
    return JSONResponse(record.to_json_dict())


@router.delete("/{literature_id}/attributes/{attribute_id}/values/{value:path}")
async def remove_attribute_value(literature_id: str, attribute_id: str, value: str):
    record = attribute_service().untag(literature_id, attribute_id, value)
    return JSONResponse(record.to_json_dict())


@router.put("/{literature_id}/attributes/{attribute_id}/note")
async def set_attribute_note(literature_id: str, attribute_id: str, request: NoteRequest):
    record = attribute_service().annotate(literature_id, attribute_id, request.note)
    return JSONResponse(record.to_json_dict())
