"""FastAPI entrypoint for the Mejora backend."""

from __future__ import annotations

import json
from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from mejora import __version__, schemas
from mejora.config import settings
from mejora.errors import InvalidMethod, MejoraError
from mejora.handler import get_improvement_service, handle_mejorar
from mejora.logging_utils import configure_logging
from mejora.services.improvement import ImprovementService
from mejora.web.views import router as web_router

configure_logging(level=settings.log_level)

app = FastAPI(title="Mejora Backend", version=__version__)


@app.exception_handler(MejoraError)
async def mejora_error_handler(request: Request, exc: MejoraError) -> JSONResponse:
    """Render any taxonomy error as ``{error, details?}`` with its status code."""
    body = schemas.ErrorResponse(error=exc.message, details=exc.details)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(exclude_none=True))


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Give routing errors such as 405 the same ``{error}`` body as every other failure."""
    message = InvalidMethod().message if exc.status_code == 405 else str(exc.detail)
    body = schemas.ErrorResponse(error=message)
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(exclude_none=True),
        headers=getattr(exc, "headers", None),
    )


@app.get("/health", response_model=schemas.HealthResponse)
async def health() -> schemas.HealthResponse:
    """Simple health-check endpoint."""
    return schemas.HealthResponse(
        status="ok",
        environment=settings.environment,
        version=__version__,
    )


@app.post("/api/mejorar")
async def mejorar(
    request: Request,
    service: ImprovementService = Depends(get_improvement_service),
) -> dict[str, Any]:
    """Correct and translate text, or optimize it for the requested English tones."""
    body = await _read_json(request)
    return await handle_mejorar(body, service)


async def _read_json(request: Request) -> Any:
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {}


app.include_router(web_router)
