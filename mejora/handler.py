"""Request orchestration for /api/mejorar.

Shared by the JSON endpoint and the server-rendered pages: both hand a
decoded body to :func:`handle_mejorar` and get back the response payload, or
a :class:`~mejora.errors.MejoraError` describing the failure.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic import ValidationError

from mejora.config import settings
from mejora.errors import MejoraError, PayloadValidationError, UnclassifiedInternalError, UpstreamFailure
from mejora.logging_utils import get_logger, preview
from mejora.models.client import ModelClientError
from mejora.schemas import MejorarPayload, PlainRequest, PlainResponse, ToneRequest, ToneResponse
from mejora.services.improvement import ImprovementService

logger = get_logger(__name__)

INVALID_MODE_MESSAGE = "'mode' debe ser 'anti_latino' o cadena vacía."
INVALID_TEXT_MESSAGE = "Se requiere un texto válido."


async def handle_mejorar(body: Any, service: ImprovementService) -> dict[str, Any]:
    """Validate ``body``, run the matching pipeline and return the response payload."""
    service.ensure_credentials()

    payload = MejorarPayload.model_validate(body if isinstance(body, dict) else {})

    try:
        if payload.wants_tone_optimization:
            return await _optimize_tones(payload, service)
        return await _improve_plain(payload, service)
    except MejoraError:
        raise
    except ModelClientError as exc:
        logger.warning("Model call failed: %s", exc)
        raise UpstreamFailure() from exc
    except Exception as exc:
        logger.exception("Unexpected error in /api/mejorar")
        raise UnclassifiedInternalError() from exc


async def _improve_plain(payload: MejorarPayload, service: ImprovementService) -> dict[str, Any]:
    try:
        request = PlainRequest.model_validate({"text": payload.text})
    except ValidationError as exc:
        raise PayloadValidationError(INVALID_TEXT_MESSAGE) from exc

    result = await service.improve_plain(request.text)

    logger.info(
        "Improve request processed | mode=plain model=%s latency_ms=%.2f text_len=%d%s",
        result.model,
        result.latency_ms,
        len(request.text),
        preview(request.text, enabled=settings.log_content_enabled),
    )
    return PlainResponse(mejorado=result.improved_text, english=result.translated_text).model_dump()


async def _optimize_tones(payload: MejorarPayload, service: ImprovementService) -> dict[str, Any]:
    try:
        request = ToneRequest.model_validate(
            payload.model_dump(include={"spanish_input", "mode", "tone_preferences", "context"})
        )
    except ValidationError as exc:
        raise PayloadValidationError(INVALID_MODE_MESSAGE) from exc

    result = await service.optimize_tones(request)

    logger.info(
        "Tone request processed | mode=%s tones=%s model=%s latency_ms=%.2f text_len=%d%s",
        request.mode or "default",
        ",".join(result.results),
        result.model,
        result.latency_ms,
        len(request.spanish_input),
        preview(request.spanish_input, enabled=settings.log_content_enabled),
    )
    return ToneResponse(improved_spanish=result.improved_spanish, results=result.results).model_dump()


@lru_cache(maxsize=1)
def get_improvement_service() -> ImprovementService:
    """Instantiate the improvement service."""
    return ImprovementService(settings=settings)
