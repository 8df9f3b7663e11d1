"""FastAPI JSON API consumed by the littag UI."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from littag import __version__
from littag.api.routers import attributes, export, literatures, project
from littag.api.state import init_state
from littag.config import Settings
from littag.errors import (
    CorruptRecordError,
    FieldError,
    FreeTextNotAllowedError,
    ImmutableTypeError,
    LiteratureValidationError,
    NotAProjectError,
    NotFoundError,
    ProjectNotConfiguredError,
)
from littag.logging_setup import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize services on startup."""
    settings = Settings.load()
    setup_logging(settings.log_level, settings.log_dir)
    init_state(settings)
    logger.info("littag %s using app dir %s", __version__, settings.app_dir)
    yield


app = FastAPI(title="littag", version=__version__, lifespan=lifespan)

app.include_router(project.router)
app.include_router(literatures.router)
app.include_router(attributes.router)
app.include_router(export.router)


# ============================================================================
# Error mapping
# ============================================================================


def _error(status_code: int, exc: Exception, errors: list[FieldError] | None = None) -> JSONResponse:
    body: dict = {"detail": str(exc)}
    if errors is not None:
        body["errors"] = [e.to_dict() for e in errors]
    return JSONResponse(status_code=status_code, content=body)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return _error(404, exc)


@app.exception_handler(LiteratureValidationError)
async def literature_validation_handler(request: Request, exc: LiteratureValidationError):
    return _error(422, exc, exc.errors)


@app.exception_handler(ValidationError)
async def model_validation_handler(request: Request, exc: ValidationError):
    errors = [
        FieldError(".".join(str(p) for p in err["loc"]) or "(root)", err["msg"])
        for err in exc.errors()
    ]
    return _error(422, exc, errors)


@app.exception_handler(ProjectNotConfiguredError)
async def not_configured_handler(request: Request, exc: ProjectNotConfiguredError):
    return _error(409, exc)


@app.exception_handler(NotAProjectError)
async def not_a_project_handler(request: Request, exc: NotAProjectError):
    return _error(400, exc)


@app.exception_handler(ImmutableTypeError)
async def immutable_type_handler(request: Request, exc: ImmutableTypeError):
    return _error(400, exc)


@app.exception_handler(FreeTextNotAllowedError)
async def free_text_handler(request: Request, exc: FreeTextNotAllowedError):
    return _error(400, exc)


@app.exception_handler(CorruptRecordError)
async def corrupt_record_handler(request: Request, exc: CorruptRecordError):
    logger.error("%s", exc)
    return _error(500, exc)


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    return _error(400, exc)
