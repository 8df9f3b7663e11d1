"""Project routes: active project, activation, adoption, navigation state."""

from typing import Any

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse

from littag.api.state import state
from littag.models.literature import CamelModel

router = APIRouter()


class AdoptRequest(CamelModel):
    directory: str


@router.get("/project")
async def get_project():
    """Active project settings; ``configured: false`` when none is set."""
    settings = state.store.resolve_active_project()
    if settings is None:
        return JSONResponse({"configured": False, "project": None})
    return JSONResponse({"configured": True, "project": settings.to_json_dict()})


@router.post("/project")
async def activate_project(payload: dict[str, Any] = Body(...)):
    """Save settings as the active project and prepare its directory."""
    state.store.activate_project(payload)
    settings = state.store.resolve_active_project()
    return JSONResponse({"configured": True, "project": settings.to_json_dict()})


@router.post("/project/adopt")
async def adopt_project(request: AdoptRequest):
    """Switch to an existing project directory."""
    settings = state.store.adopt_existing_project(request.directory)
    return JSONResponse({"configured": True, "project": settings.to_json_dict()})


# ============================================================================
# Navigation State
# ============================================================================


@router.get("/navigation-state")
async def get_navigation_state():
    return JSONResponse(state.store.load_navigation_state())


@router.put("/navigation-state")
async def put_navigation_state(payload: dict[str, Any] = Body(...)):
    state.store.save_navigation_state(payload)
    return JSONResponse(payload)
