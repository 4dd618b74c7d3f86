"""Tone preference normalization."""

from __future__ import annotations

from typing import Any, cast

from mejora.types import ALLOWED_TONES, DEFAULT_TONE, Tone


def normalize_tone_preferences(value: Any) -> list[Tone]:
    """Return the requested tones as an ordered, deduplicated list of allowed tones.

    Anything that is not a non-empty list, or that filters down to nothing,
    yields ``["professional"]``.
    """
    if not isinstance(value, list) or not value:
        return [DEFAULT_TONE]

    normalized: list[Tone] = []
    for item in value:
        if not isinstance(item, str):
            continue
        tone = item.strip().lower()
        if tone in ALLOWED_TONES and tone not in normalized:
            normalized.append(cast(Tone, tone))

    return normalized or [DEFAULT_TONE]
