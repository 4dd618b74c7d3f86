"""Server-rendered pages for the plain and tone optimization flows."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from mejora.errors import MejoraError
from mejora.handler import get_improvement_service, handle_mejorar
from mejora.logging_utils import get_logger
from mejora.services.improvement import ImprovementService
from mejora.types import ALLOWED_TONES, DEFAULT_TONE
from mejora.web.extraction import extract_improved_spanish, extract_tone_results
from mejora.web.renderer import ResultRenderer, build_environment

logger = get_logger(__name__)

router = APIRouter(include_in_schema=False)

EMPTY_TEXT_MESSAGE = "Por favor, escribe un texto en la columna de entrada."
EMPTY_SPANISH_MESSAGE = "Please add Spanish input before optimizing."
PLAIN_FALLBACK_MESSAGE = "No se pudo completar la solicitud."
TONE_FALLBACK_MESSAGE = "Unable to optimize this request right now."

_renderer = ResultRenderer(build_environment())


def get_renderer() -> ResultRenderer:
    return _renderer


@router.get("/", response_class=HTMLResponse)
async def plain_page(renderer: ResultRenderer = Depends(get_renderer)) -> str:
    return renderer.render_page("index.html", text="", mejorado="", english="")


@router.post("/", response_class=HTMLResponse)
async def plain_submit(
    request: Request,
    service: ImprovementService = Depends(get_improvement_service),
    renderer: ResultRenderer = Depends(get_renderer),
) -> str:
    form = await request.form()
    text = str(form.get("text") or "")
    context: dict[str, Any] = {"text": text, "mejorado": "", "english": "", "error": ""}

    if not text.strip():
        context["error"] = EMPTY_TEXT_MESSAGE
        return renderer.render_page("index.html", **context)

    payload, error = await _submit({"text": text.strip()}, service, fallback=PLAIN_FALLBACK_MESSAGE)
    if error:
        context["error"] = error
    else:
        context["mejorado"] = payload.get("mejorado") or ""
        context["english"] = payload.get("english") or ""
    return renderer.render_page("index.html", **context)


@router.get("/latino", response_class=HTMLResponse)
async def tone_page(renderer: ResultRenderer = Depends(get_renderer)) -> str:
    return renderer.render_page("latino.html", **_tone_context("", "", [DEFAULT_TONE], ""))


@router.post("/latino", response_class=HTMLResponse)
async def tone_submit(
    request: Request,
    service: ImprovementService = Depends(get_improvement_service),
    renderer: ResultRenderer = Depends(get_renderer),
) -> str:
    form = await request.form()
    spanish_input = str(form.get("spanish_input") or "")
    mode = "anti_latino" if form.get("mode") == "anti_latino" else ""
    selected_tones = [str(tone) for tone in form.getlist("tone_preferences")]
    context = _tone_context(spanish_input, mode, selected_tones, str(form.get("context") or ""))

    if not spanish_input.strip():
        context["error"] = EMPTY_SPANISH_MESSAGE
        return renderer.render_page("latino.html", **context)

    body = {
        "spanish_input": spanish_input.strip(),
        "mode": mode,
        "tone_preferences": selected_tones,
        "context": context["context"],
    }
    payload, error = await _submit(body, service, fallback=TONE_FALLBACK_MESSAGE)
    if error:
        context["error"] = error
    else:
        context["improved_spanish"] = extract_improved_spanish(payload)
        context["results_html"] = renderer.render_tone_results(extract_tone_results(payload))
    return renderer.render_page("latino.html", **context)


async def _submit(
    body: dict[str, Any], service: ImprovementService, *, fallback: str
) -> tuple[dict[str, Any], str]:
    """Run the API handler; return its payload, or the message to show instead."""
    try:
        return await handle_mejorar(body, service), ""
    except MejoraError as exc:
        logger.info("Page request failed | status=%d error=%s", exc.status_code, exc.message)
        return {}, exc.message or fallback


def _tone_context(spanish_input: str, mode: str, selected_tones: list[str], context: str) -> dict[str, Any]:
    return {
        "lang": "en",
        "spanish_input": spanish_input,
        "mode": mode,
        "tones": ALLOWED_TONES,
        "selected_tones": selected_tones,
        "context": context,
        "improved_spanish": "",
        "results_html": "",
        "error": "",
    }
