"""Simple sanity check script to exercise both /api/mejorar pipelines."""

from __future__ import annotations

import json
from typing import Any

import httpx

from mejora.web.extraction import extract_improved_spanish, extract_tone_results, format_flags

API_URL = "http://localhost:8000/api/mejorar"


def run_sample(payload: dict[str, Any]) -> None:
    """Send a sample request and dump the response."""
    with httpx.Client(timeout=60.0) as client:
        response = client.post(API_URL, json=payload)
    data = response.json()
    print(f"Request: {json.dumps(payload, ensure_ascii=False)}")
    print(f"Status: {response.status_code}")

    if not response.is_success:
        print(f"Error: {data.get('error')}")
    elif "english" in data:
        print(f"Mejorado: {data['mejorado']}")
        print(f"English: {data['english']}")
    else:
        print(f"Improved Spanish: {extract_improved_spanish(data)}")
        for result in extract_tone_results(data):
            print(f"[{result.tone}] ({result.naturalness_score}) {result.text}")
            print(f"    flags: {format_flags(result.flags)}")
    print("-" * 60)


def main() -> None:
    """Invoke each pipeline with canned text."""
    scenarios = [
        {"text": "hola  mundo, como estas?"},
        {
            "spanish_input": "Quisiera solicitar amablemente una reunión para revisar el presupuesto.",
            "mode": "anti_latino",
            "tone_preferences": ["simple", "executive"],
        },
        {"spanish_input": ""},
    ]

    for payload in scenarios:
        run_sample(payload)


if __name__ == "__main__":
    main()
