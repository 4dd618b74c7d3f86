"""Model client abstraction layer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from mejora.config import ModelConfig


class ModelClientError(RuntimeError):
    """Raised when a downstream model call fails."""


@dataclass
class ModelResponse:
    """Structured response from the model."""

    content: str
    model: str | None = None


class ModelClient:
    """HTTP client for OpenAI-compatible chat completion endpoints."""

    def __init__(
        self,
        config: ModelConfig,
        *,
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self.timeout = timeout
        self._transport = transport

    async def generate(
        self,
        messages: list[dict[str, str]],
        response_format: dict[str, Any] | None = None,
    ) -> ModelResponse:
        """Call the downstream model with the constructed messages.

        ``response_format`` is passed through untouched, e.g. a strict
        ``json_schema`` constraint for structured output.
        """
        payload = self._build_payload(messages, response_format)
        headers = {"Authorization": f"Bearer {self.config.api_key}"}

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await client.post(self.config.endpoint, json=payload, headers=headers)
                response.raise_for_status()
            except httpx.HTTPError as exc:
                raise ModelClientError(str(exc)) from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise ModelClientError("Malformed response: body is not JSON.") from exc
        return self._parse_response(data)

    def _build_payload(
        self,
        messages: list[dict[str, str]],
        response_format: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Translate messages to the downstream API shape."""
        payload: dict[str, Any] = {
            "model": self.config.name,
            "messages": messages,
        }
        if self.config.temperature is not None:
            payload["temperature"] = self.config.temperature
        if response_format:
            payload["response_format"] = response_format
        return payload

    def _parse_response(self, payload: Any) -> ModelResponse:
        """Extract the assistant text from a chat completion."""
        choices = payload.get("choices") if isinstance(payload, dict) else None
        if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
            raise ModelClientError("Malformed response: missing 'choices'.")

        message = choices[0].get("message") or {}
        if not isinstance(message, dict):
            raise ModelClientError("Malformed response: 'message' is not an object.")

        # Refusals under structured output come back with null content.
        content = message.get("content") or ""
        if not isinstance(content, str):
            raise ModelClientError("Malformed response: 'content' is not text.")
        return ModelResponse(content=content.strip(), model=payload.get("model"))
