"""Tests for the improvement pipelines, driven by a scripted model client."""

from __future__ import annotations

import asyncio
import json

import pytest

from mejora.errors import EmptyImprovement, MalformedUpstreamJSON, MissingCredential, NoUsableResults
from mejora.schemas import ToneRequest
from mejora.services.improvement import coerce_tone_result, parse_structured_results, select_tone_results

from conftest import ScriptedModel, make_service


def test_improve_plain_strips_replies() -> None:
    model = ScriptedModel(["  Hola, mundo.\n", "Hello, world.  "])
    result = asyncio.run(make_service(model).improve_plain("hola  mundo"))
    assert result.improved_text == "Hola, mundo."
    assert result.translated_text == "Hello, world."
    assert result.model == "fake-model"


def test_improve_plain_uses_spanish_editor_then_translator() -> None:
    model = ScriptedModel(["Hola.", "Hello."])
    asyncio.run(make_service(model).improve_plain("hola"))
    first_system = model.calls[0]["messages"][0]["content"]
    second_system = model.calls[1]["messages"][0]["content"]
    assert "editor experto en español" in first_system
    assert "traductor profesional" in second_system
    assert all(call["response_format"] is None for call in model.calls)


def test_empty_improvement_never_translates() -> None:
    model = ScriptedModel(["", "Hello."])
    with pytest.raises(EmptyImprovement):
        asyncio.run(make_service(model).improve_plain("hola"))
    assert model.steps == ["improve"]


def test_ensure_credentials() -> None:
    service = make_service(ScriptedModel([]), api_key="  ")
    with pytest.raises(MissingCredential):
        service.ensure_credentials()
    make_service(ScriptedModel([])).ensure_credentials()


def test_optimize_tones_passes_context_and_mode() -> None:
    reply = json.dumps(
        {"results": {"executive": {"text": "Let's meet.", "naturalness_score": 95, "flags": [], "why_natural": []}}}
    )
    model = ScriptedModel(["Reunámonos.", reply])
    request = ToneRequest.model_validate(
        {"spanish_input": "Quisiera reunirme", "mode": " anti_latino ", "tone_preferences": ["executive"], "context": "email"}
    )
    result = asyncio.run(make_service(model).optimize_tones(request))

    assert result.improved_spanish == "Reunámonos."
    assert result.results["executive"].text == "Let's meet."
    user_payload = json.loads(model.calls[1]["messages"][-1]["content"])
    assert user_payload["mode"] == "anti_latino"
    assert user_payload["context"] == "email"
    assert user_payload["improved_spanish"] == "Reunámonos."
    assert model.calls[1]["response_format"]["json_schema"]["strict"] is True


@pytest.mark.parametrize(
    "raw",
    ["", "not json", "[]", '{"results": []}', '{"other": {}}', '{"results": null}', pytest.param("[" * 100000, id="deeply-nested")],
)
def test_parse_structured_results_rejects_bad_shapes(raw: str) -> None:
    with pytest.raises(MalformedUpstreamJSON):
        parse_structured_results(raw)


def test_select_tone_results_skips_missing_and_non_objects() -> None:
    raw = {
        "simple": ["not", "an", "object"],
        "executive": {"text": "Done.", "naturalness_score": 70, "flags": [], "why_natural": []},
        "professional": {"text": "Unrequested.", "naturalness_score": 99, "flags": [], "why_natural": []},
    }
    results = select_tone_results(raw, ["simple", "executive"])
    assert list(results) == ["executive"]


def test_coerce_tone_result_copies_only_well_typed_fields() -> None:
    result = coerce_tone_result(
        {"text": 5, "naturalness_score": True, "flags": ["ok", 3, None], "why_natural": "because"}
    )
    assert result.text == ""
    assert result.naturalness_score == 0
    assert result.flags == ["ok"]
    assert result.why_natural == []


def test_coerce_tone_result_clamps_score() -> None:
    assert coerce_tone_result({"text": "x", "naturalness_score": 140}).naturalness_score == 100
    assert coerce_tone_result({"text": "x", "naturalness_score": -3}).naturalness_score == 0
    assert coerce_tone_result({"text": "x", "naturalness_score": 72.5}).naturalness_score == 72.5


def test_coerce_tone_result_keeps_integer_scores() -> None:
    score = coerce_tone_result({"text": "x", "naturalness_score": 91}).naturalness_score
    assert score == 91
    assert isinstance(score, int)


def test_no_usable_results() -> None:
    model = ScriptedModel(["Hola.", json.dumps({"results": {}})])
    request = ToneRequest.model_validate({"spanish_input": "hola"})
    with pytest.raises(NoUsableResults):
        asyncio.run(make_service(model).optimize_tones(request))
