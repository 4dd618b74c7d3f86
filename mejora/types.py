"""Shared typing helpers."""

from typing import Literal

Tone = Literal["simple", "professional", "executive"]
OptimizationMode = Literal["", "anti_latino"]
PipelineStep = Literal["improve", "clarify", "translate", "tone"]

ALLOWED_TONES: tuple[Tone, ...] = ("simple", "professional", "executive")
DEFAULT_TONE: Tone = "professional"
