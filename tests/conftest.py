"""Shared fixtures: a scripted model client and an app wired to it."""

from __future__ import annotations

import os
from typing import Any, Callable, Iterator

import pytest

os.environ.setdefault("OPENAI_API_KEY", "test-key")

from fastapi.testclient import TestClient

from mejora.config import Settings
from mejora.handler import get_improvement_service
from mejora.main import app
from mejora.models.client import ModelResponse
from mejora.services.improvement import ImprovementService


class ScriptedModel:
    """Fake model client that replays canned replies and records every call."""

    def __init__(self, replies: list[str | Exception]) -> None:
        self.replies = list(replies)
        self.steps: list[str] = []
        self.calls: list[dict[str, Any]] = []

    def __call__(self, step: str) -> "ScriptedModel":
        self.steps.append(step)
        return self

    async def generate(
        self,
        messages: list[dict[str, str]],
        response_format: dict[str, Any] | None = None,
    ) -> ModelResponse:
        self.calls.append({"messages": messages, "response_format": response_format})
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return ModelResponse(content=reply, model="fake-model")


def make_service(model: ScriptedModel, *, api_key: str | None = "test-key") -> ImprovementService:
    """Build a real service whose model calls go to ``model``."""
    settings = Settings(OPENAI_API_KEY=api_key, OPENAI_MODEL="fake-model")
    return ImprovementService(settings=settings, client_factory=model)


@pytest.fixture(name="client_for")
def client_for_fixture() -> Iterator[Callable[..., tuple[TestClient, ScriptedModel]]]:
    """Return a factory producing a TestClient backed by a scripted model."""

    def factory(*replies: str | Exception, api_key: str | None = "test-key") -> tuple[TestClient, ScriptedModel]:
        model = ScriptedModel(list(replies))
        service = make_service(model, api_key=api_key)
        app.dependency_overrides[get_improvement_service] = lambda: service
        return TestClient(app), model

    yield factory
    app.dependency_overrides.clear()
