"""Normalize /api/mejorar payloads into display-ready tone results.

The server emits ``results`` as a mapping of tone name to result object.
Older responses carried either a list of results, each with its own ``tone``
key, or flat top-level ``simple``/``professional``/``executive`` objects;
both are still accepted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from mejora.types import ALLOWED_TONES

PLACEHOLDER = "N/A"
NO_IMPROVED_SPANISH = "No improved Spanish returned."


@dataclass
class DisplayToneResult:
    """One tone card, with placeholders filled in for display."""

    tone: str
    text: str
    naturalness_score: float | str = PLACEHOLDER
    flags: list[str] = field(default_factory=list)
    why_natural: list[str] = field(default_factory=list)


def extract_tone_results(payload: Any) -> list[DisplayToneResult]:
    """Return the tone results carried by ``payload`` in source order."""
    if not isinstance(payload, dict):
        return []
    return [
        result
        for result in (_to_display(tone, entry) for tone, entry in _iter_entries(payload))
        if result is not None
    ]


def extract_improved_spanish(payload: Any) -> str:
    """Return the improved Spanish text from any known key, or a placeholder."""
    if isinstance(payload, dict):
        for key in ("improved_spanish", "mejorado", "improvedSpanish"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
    return NO_IMPROVED_SPANISH


def _iter_entries(payload: dict[str, Any]) -> Iterable[tuple[str, Any]]:
    results = payload.get("results")

    if isinstance(results, dict):
        return results.items()

    # Legacy shapes.
    if isinstance(results, list):
        return ((entry.get("tone", "") if isinstance(entry, dict) else "", entry) for entry in results)
    return ((tone, payload[tone]) for tone in ALLOWED_TONES if isinstance(payload.get(tone), dict))


def _to_display(tone: Any, entry: Any) -> DisplayToneResult | None:
    if not isinstance(entry, dict) or not entry.get("text"):
        return None

    score = entry.get("naturalness_score")
    flags = entry.get("flags")
    why_natural = entry.get("why_natural")
    return DisplayToneResult(
        tone=str(tone or ""),
        text=str(entry["text"]),
        naturalness_score=PLACEHOLDER if score is None or score == "" else score,
        flags=[str(flag) for flag in flags] if isinstance(flags, list) else [],
        why_natural=[str(item) for item in why_natural] if isinstance(why_natural, list) else [],
    )


def format_flags(flags: Any) -> str:
    """Join flags for display, ``"none"`` when there are none."""
    if not flags:
        return "none"
    if isinstance(flags, list):
        return ", ".join(str(flag) for flag in flags)
    return str(flags)


def format_meta_value(value: Any) -> str:
    """Format a score or list for display, ``"N/A"`` when missing."""
    if value is None or value == "" or value == []:
        return PLACEHOLDER
    if isinstance(value, list):
        return ", ".join(str(item) for item in value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def capitalize_label(label: str) -> str:
    """Upper-case the first letter of a tone name."""
    return label[:1].upper() + label[1:]
