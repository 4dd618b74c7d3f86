"""Tests for the chat completion client and per-step model routing."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from mejora.config import ModelConfig, Settings
from mejora.handler import get_improvement_service
from mejora.main import app
from mejora.models.client import ModelClient, ModelClientError
from mejora.models.routers import resolve_model_config
from mejora.prompts import build_messages, build_tone_response_format
from mejora.services.improvement import ImprovementService

CONFIG = ModelConfig(
    name="gpt-test",
    endpoint="https://llm.example.test/v1/chat/completions",
    api_key="sk-test",
    temperature=0.1,
)


def completion(content: str | None) -> dict:
    return {"model": "gpt-test", "choices": [{"message": {"role": "assistant", "content": content}}]}


def test_generate_posts_chat_completion() -> None:
    """Messages, model and auth header are sent; the reply text is returned stripped."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=completion("  Hola, mundo. \n"))

    client = ModelClient(CONFIG, transport=httpx.MockTransport(handler))
    response = asyncio.run(client.generate(build_messages("improve", "hola  mundo")))

    assert response.content == "Hola, mundo."
    request = seen[0]
    assert str(request.url) == CONFIG.endpoint
    assert request.headers["Authorization"] == "Bearer sk-test"
    body = json.loads(request.content)
    assert body["model"] == "gpt-test"
    assert body["temperature"] == 0.1
    assert body["messages"][1] == {"role": "user", "content": "hola  mundo"}
    assert "response_format" not in body


def test_generate_forwards_response_format() -> None:
    captured: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured.update(json.loads(request.content))
        return httpx.Response(200, json=completion('{"results": {}}'))

    client = ModelClient(CONFIG, transport=httpx.MockTransport(handler))
    response_format = build_tone_response_format(["simple"])
    asyncio.run(client.generate(build_messages("tone", "{}"), response_format=response_format))
    assert captured["response_format"] == response_format


def test_null_content_becomes_empty_text() -> None:
    client = ModelClient(CONFIG, transport=httpx.MockTransport(lambda request: httpx.Response(200, json=completion(None))))
    assert asyncio.run(client.generate([])).content == ""


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, json={"error": {"message": "boom"}}),
        httpx.Response(401, json={"error": {"message": "bad key"}}),
        httpx.Response(200, json={"choices": []}),
        httpx.Response(200, json={"unexpected": True}),
        httpx.Response(200, content=b"<html>gateway</html>"),
        httpx.Response(200, json={"choices": {"0": {"message": {"content": "hi"}}}}),
        httpx.Response(200, json={"choices": [{"message": "oops"}]}),
        httpx.Response(200, json={"choices": [{"message": {"content": [{"type": "text", "text": "hi"}]}}]}),
    ],
)
def test_generate_raises_model_client_error(response: httpx.Response) -> None:
    client = ModelClient(CONFIG, transport=httpx.MockTransport(lambda request: response))
    with pytest.raises(ModelClientError):
        asyncio.run(client.generate([]))


def test_transport_error_is_wrapped() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = ModelClient(CONFIG, transport=httpx.MockTransport(handler))
    with pytest.raises(ModelClientError, match="connection refused"):
        asyncio.run(client.generate([]))


def test_resolve_model_config_uses_settings() -> None:
    settings = Settings(OPENAI_API_KEY="sk-abc", OPENAI_BASE_URL="https://proxy.test/v1/", OPENAI_MODEL="m")
    config = resolve_model_config("translate", settings)
    assert config.endpoint == "https://proxy.test/v1/chat/completions"
    assert config.name == "m"
    assert config.api_key == "sk-abc"
    assert "sk-abc" not in repr(config)


def test_tone_response_format_requires_each_requested_tone() -> None:
    schema = build_tone_response_format(["simple", "executive"])["json_schema"]["schema"]
    results = schema["properties"]["results"]
    assert results["required"] == ["simple", "executive"]
    assert results["additionalProperties"] is False
    assert results["properties"]["simple"]["required"] == ["text", "naturalness_score", "flags", "why_natural"]


def test_malformed_completion_maps_to_bad_gateway() -> None:
    """A completion with an unexpected message shape is an upstream failure, not a crash."""
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"choices": [{"message": "oops"}]}))
    settings = Settings(OPENAI_API_KEY="sk-test", OPENAI_BASE_URL="https://llm.example.test/v1")

    def client_factory(step):
        return ModelClient(resolve_model_config(step, settings), transport=transport)

    service = ImprovementService(settings=settings, client_factory=client_factory)
    app.dependency_overrides[get_improvement_service] = lambda: service
    try:
        response = TestClient(app).post("/api/mejorar", json={"text": "hola"})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 502
    assert response.json() == {"error": "El servicio de generación no respondió correctamente."}
