"""Prompt templates and builders for each pipeline step."""

from __future__ import annotations

import json
from typing import Any, Sequence

from mejora.types import OptimizationMode, PipelineStep, Tone

PROMPTS: dict[PipelineStep, str] = {
    "improve": (
        "Eres un editor experto en español. Corrige ortografía y puntuación, mejora redacción "
        "con cambios mínimos, mantén significado y tono. Responde SOLO con el texto mejorado, "
        "sin comillas ni explicaciones."
    ),
    "clarify": (
        "Eres un editor experto en español. Reescribe el texto para que sea más claro, breve y "
        "natural, manteniendo el significado central. Responde SOLO con el texto final en "
        "español, sin comillas ni explicaciones."
    ),
    "translate": (
        "Eres un traductor profesional al inglés. Traduce fielmente el texto proporcionado, "
        "manteniendo tono y significado. Responde SOLO con la traducción en inglés, sin "
        "comillas ni explicaciones."
    ),
    "tone": (
        "You are a senior English communication strategist specialized in helping "
        "Spanish-speaking professionals sound natural and culturally fluent in American "
        "business English. You do not translate literally. You optimize for clarity, brevity, "
        "tone alignment, and native-level phrasing. When anti_latino mode is active, detect "
        "structural transfer from Spanish, excessive politeness, length inflation, and literal "
        "phrasing. Rewrite to concise, confident, natural American professional English. "
        "Return ONLY valid JSON in the specified structure."
    ),
}

TONE_INSTRUCTIONS = (
    "Generate outputs only for requested_tones. For each tone include: text, "
    "naturalness_score (0-100), flags (array), why_natural (array of short bullet strings)."
)

TONE_OUTPUT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "required": ["text", "naturalness_score", "flags", "why_natural"],
    "properties": {
        "text": {"type": "string"},
        "naturalness_score": {"type": "number", "minimum": 0, "maximum": 100},
        "flags": {"type": "array", "items": {"type": "string"}},
        "why_natural": {"type": "array", "items": {"type": "string"}},
    },
}


def build_messages(step: PipelineStep, content: str) -> list[dict[str, str]]:
    """Build chat messages for the downstream LLM."""
    return [
        {"role": "system", "content": PROMPTS[step]},
        {"role": "user", "content": content},
    ]


def build_tone_messages(
    *,
    improved_spanish: str,
    context: str,
    mode: OptimizationMode,
    requested_tones: Sequence[Tone],
) -> list[dict[str, str]]:
    """Build the structured tone-rewrite request, serialized as a JSON user message."""
    user_payload = {
        "improved_spanish": improved_spanish,
        "context": context,
        "mode": mode,
        "requested_tones": list(requested_tones),
        "instructions": TONE_INSTRUCTIONS,
    }
    return build_messages("tone", json.dumps(user_payload, ensure_ascii=False))


def build_tone_response_format(requested_tones: Sequence[Tone]) -> dict[str, Any]:
    """Return a strict json_schema response format keyed by the requested tones.

    Strict mode requires every declared property to be listed as required, so
    the schema only declares the tones that were asked for.
    """
    tones = list(requested_tones)
    return {
        "type": "json_schema",
        "json_schema": {
            "name": "latino_tone_results",
            "strict": True,
            "schema": {
                "type": "object",
                "additionalProperties": False,
                "required": ["results"],
                "properties": {
                    "results": {
                        "type": "object",
                        "additionalProperties": False,
                        "required": tones,
                        "properties": {tone: TONE_OUTPUT_SCHEMA for tone in tones},
                    },
                },
            },
        },
    }
