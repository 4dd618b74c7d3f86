"""Routing helpers for selecting model settings per pipeline step."""

from __future__ import annotations

from mejora.config import ModelConfig, Settings
from mejora.types import PipelineStep

# Correction and translation stay close to the source; rewrites get more room.
STEP_TEMPERATURE: dict[PipelineStep, float] = {
    "improve": 0.1,
    "clarify": 0.4,
    "translate": 0.1,
    "tone": 0.5,
}


def resolve_model_config(step: PipelineStep, settings: Settings) -> ModelConfig:
    """Return the model configuration used for a given pipeline step."""
    api_key = settings.openai_api_key.get_secret_value() if settings.openai_api_key else ""
    return ModelConfig(
        name=settings.openai_model,
        endpoint=settings.chat_completions_url,
        api_key=api_key,
        temperature=STEP_TEMPERATURE[step],
    )
