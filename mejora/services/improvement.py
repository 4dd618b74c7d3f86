"""Improvement service orchestrating prompt assembly and model invocation."""

from __future__ import annotations

import json
import math
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Protocol

from mejora.config import Settings
from mejora.errors import (
    EmptyImprovement,
    EmptyTranslation,
    MalformedUpstreamJSON,
    MissingCredential,
    NoUsableResults,
)
from mejora.logging_utils import get_logger
from mejora.models.client import ModelClient, ModelResponse
from mejora.models.routers import resolve_model_config
from mejora.prompts import build_messages, build_tone_messages, build_tone_response_format
from mejora.schemas import ToneRequest, ToneResult
from mejora.types import PipelineStep, Tone

logger = get_logger(__name__)


class ChatClient(Protocol):
    async def generate(
        self,
        messages: list[dict[str, str]],
        response_format: dict[str, Any] | None = None,
    ) -> ModelResponse: ...


ClientFactory = Callable[[PipelineStep], ChatClient]


@dataclass
class ImprovementResult:
    """Output of the plain pipeline."""

    improved_text: str
    translated_text: str
    model: str
    latency_ms: float


@dataclass
class ToneOptimizationResult:
    """Output of the tone optimization pipeline."""

    improved_spanish: str
    results: dict[Tone, ToneResult] = field(default_factory=dict)
    model: str = ""
    latency_ms: float = 0.0


class ImprovementService:
    """Service combining prompts, routing, and downstream model calls.

    Every step is a single, sequential call; failures are never retried.
    """

    def __init__(self, *, settings: Settings, client_factory: ClientFactory | None = None) -> None:
        self._settings = settings
        self._client_factory = client_factory or self._default_client

    def _default_client(self, step: PipelineStep) -> ChatClient:
        config = resolve_model_config(step, self._settings)
        return ModelClient(config, timeout=self._settings.request_timeout_seconds)

    def ensure_credentials(self) -> None:
        """Raise if the generation API credential is not configured."""
        if not self._settings.has_credentials:
            raise MissingCredential(details="Set the OPENAI_API_KEY environment variable.")

    @property
    def model_name(self) -> str:
        return self._settings.openai_model

    async def improve_plain(self, text: str) -> ImprovementResult:
        """Correct the Spanish text, then translate the correction to English."""
        start = time.perf_counter()

        improved = await self._complete("improve", text)
        if not improved:
            raise EmptyImprovement()

        translated = await self._complete("translate", improved)
        if not translated:
            raise EmptyTranslation()

        latency_ms = (time.perf_counter() - start) * 1000
        logger.debug(
            "Plain pipeline completed | model=%s latency_ms=%.2f text_len=%d",
            self.model_name,
            latency_ms,
            len(text),
        )
        return ImprovementResult(
            improved_text=improved,
            translated_text=translated,
            model=self.model_name,
            latency_ms=latency_ms,
        )

    async def optimize_tones(self, request: ToneRequest) -> ToneOptimizationResult:
        """Clarify the Spanish input, then rewrite it in English for each requested tone."""
        start = time.perf_counter()

        improved_spanish = await self._complete("clarify", request.spanish_input)
        if not improved_spanish:
            raise EmptyImprovement("No se pudo mejorar el texto en español.")

        client = self._client_factory("tone")
        response = await client.generate(
            build_tone_messages(
                improved_spanish=improved_spanish,
                context=request.context,
                mode=request.mode,
                requested_tones=request.tone_preferences,
            ),
            response_format=build_tone_response_format(request.tone_preferences),
        )

        raw_results = parse_structured_results(response.content)
        results = select_tone_results(raw_results, request.tone_preferences)
        if not results:
            logger.warning(
                "Structured output had no usable tones | requested=%s received=%s",
                ",".join(request.tone_preferences),
                ",".join(str(key) for key in raw_results),
            )
            raise NoUsableResults()

        latency_ms = (time.perf_counter() - start) * 1000
        logger.debug(
            "Tone pipeline completed | model=%s latency_ms=%.2f tones=%s",
            self.model_name,
            latency_ms,
            ",".join(results),
        )
        return ToneOptimizationResult(
            improved_spanish=improved_spanish,
            results=results,
            model=self.model_name,
            latency_ms=latency_ms,
        )

    async def _complete(self, step: PipelineStep, content: str) -> str:
        client = self._client_factory(step)
        response = await client.generate(build_messages(step, content))
        return response.content.strip()


def parse_structured_results(raw: str) -> dict[str, Any]:
    """Parse the structured tone response and return its ``results`` object."""
    try:
        parsed = json.loads(raw.strip())
    except (ValueError, RecursionError) as exc:
        logger.warning("Structured output is not valid JSON: %s", exc)
        raise MalformedUpstreamJSON() from exc

    results = parsed.get("results") if isinstance(parsed, dict) else None
    if not isinstance(results, dict):
        logger.warning("Structured output is missing a 'results' object.")
        raise MalformedUpstreamJSON()
    return results


def select_tone_results(raw_results: dict[str, Any], requested_tones: list[Tone]) -> dict[Tone, ToneResult]:
    """Keep the requested tones that came back as objects, in request order."""
    results: dict[Tone, ToneResult] = {}
    for tone in requested_tones:
        entry = raw_results.get(tone)
        if not isinstance(entry, dict):
            continue
        results[tone] = coerce_tone_result(entry)
    return results


def coerce_tone_result(entry: dict[str, Any]) -> ToneResult:
    """Copy through the well-typed fields of one upstream tone entry."""
    text = entry.get("text")
    score = entry.get("naturalness_score")
    if isinstance(score, bool) or not isinstance(score, (int, float)) or not math.isfinite(score):
        score = 0
    return ToneResult(
        text=text if isinstance(text, str) else "",
        naturalness_score=min(max(score, 0), 100),
        flags=_string_items(entry.get("flags")),
        why_natural=_string_items(entry.get("why_natural")),
    )


def _string_items(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]
