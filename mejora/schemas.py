"""Pydantic models for API requests and responses."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator

from mejora.tones import normalize_tone_preferences
from mejora.types import OptimizationMode, Tone


class HealthResponse(BaseModel):
    """Response model for /health."""

    status: str
    environment: str
    version: str


class MejorarPayload(BaseModel):
    """Loose view of the /api/mejorar body; the handler picks the pipeline from it."""

    model_config = ConfigDict(extra="ignore")

    text: Any = None
    spanish_input: Any = None
    mode: Any = None
    tone_preferences: Any = None
    context: Any = None

    @property
    def wants_tone_optimization(self) -> bool:
        """Tone mode is selected by a non-blank ``spanish_input``."""
        return isinstance(self.spanish_input, str) and bool(self.spanish_input.strip())


class PlainRequest(BaseModel):
    """Plain improve + translate request."""

    text: StrictStr = Field(..., min_length=1, description="Spanish text to correct and translate.")

    @field_validator("text")
    @classmethod
    def ensure_content(cls, value: str) -> str:
        """Ensure text contains non-whitespace characters."""
        if not value.strip():
            raise ValueError("Text must contain non-whitespace characters.")
        return value


class ToneRequest(BaseModel):
    """Tone optimization request."""

    spanish_input: StrictStr = Field(..., min_length=1)
    mode: OptimizationMode = ""
    tone_preferences: list[Tone] = Field(default_factory=lambda: ["professional"])
    context: str = ""

    @field_validator("mode", mode="before")
    @classmethod
    def strip_mode(cls, value: Any) -> str:
        return value.strip() if isinstance(value, str) else ""

    @field_validator("tone_preferences", mode="before")
    @classmethod
    def normalize_tones(cls, value: Any) -> list[Tone]:
        return normalize_tone_preferences(value)

    @field_validator("context", mode="before")
    @classmethod
    def coerce_context(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""


class PlainResponse(BaseModel):
    """Response payload for the plain pipeline."""

    mejorado: str
    english: str


class ToneResult(BaseModel):
    """Rewrite for a single tone."""

    text: str
    naturalness_score: int | float = Field(..., ge=0, le=100)
    flags: list[str] = Field(default_factory=list)
    why_natural: list[str] = Field(default_factory=list)


class ToneResponse(BaseModel):
    """Response payload for the tone optimization pipeline."""

    improved_spanish: str
    results: dict[str, ToneResult]


class ErrorResponse(BaseModel):
    """Error body shared by every failure status."""

    error: str
    details: str | None = None
