"""Attribute schema routes."""

from typing import Any

from fastapi import APIRouter, Body, Query, Response
from fastapi.responses import JSONResponse

from littag.api.state import schema_repo
from littag.errors import NotFoundError

router = APIRouter(prefix="/attributes")


@router.get("")
async def list_schemas(full: bool = Query(False, description="Return full schemas")):
    """Schema summaries (id/name), or full schemas with ``full=true``."""
    repo = schema_repo()
    if full:
        items = sorted(repo.list_records(), key=lambda s: s.name.lower())
    else:
        items = sorted(repo.list(), key=lambda s: s.name.lower())
    return JSONResponse([s.to_json_dict() for s in items])


@router.post("")
async def create_schema(payload: dict[str, Any] = Body(...)):
    payload = {k: v for k, v in payload.items() if k not in ("id", "createdAt", "updatedAt")}
    schema = schema_repo().save(payload)
    return JSONResponse(status_code=201, content=schema.to_json_dict())


@router.get("/{schema_id}")
async def get_schema(schema_id: str):
    schema = schema_repo().load(schema_id)
    if schema is None:
        raise NotFoundError("attribute schema", schema_id)
    return JSONResponse(schema.to_json_dict())


@router.put("/{schema_id}")
async def update_schema(schema_id: str, payload: dict[str, Any] = Body(...)):
    """Overwrite a schema in full."""
    repo = schema_repo()
    if not repo.exists(schema_id):
        raise NotFoundError("attribute schema", schema_id)
    schema = repo.save({**payload, "id": schema_id})
    return JSONResponse(schema.to_json_dict())


@router.delete("/{schema_id}", status_code=204)
async def delete_schema(schema_id: str):
    """Delete a schema; literature referencing it is left untouched."""
    schema_repo().delete(schema_id)
    return Response(status_code=204)
