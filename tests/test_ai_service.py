"""Test module for the AI translation service and providers."""

from __future__ import annotations

import json

import httpx
import pytest

from transtree.ai.exceptions import TranslationError
from transtree.ai.service import AIService, validate_ai_config
from transtree.config import save_config, load_config


def _configure(**translation) -> None:
    config = load_config()
    config["gemini"]["api_key"] = "test-key"
    config["openai"]["api_key"] = "test-key"
    config["translation"].update(translation)
    save_config(config)


def test_translate_sends_one_request_per_chunk(monkeypatch, no_sleep) -> None:
    """Verify chunks are wrapped in document tags and outputs concatenated."""
    _configure(lines_per_chunk=2, request_interval=1.5)
    service = AIService()
    prompts: list[str] = []

    def fake_call(prompt: str) -> str:
        prompts.append(prompt)
        body = prompt.split("<document>", 1)[1].split("\n</document>", 1)[0]
        return f"<output>\n{body.upper()}</output>"

    monkeypatch.setattr(service, "_call_ai_api_text", fake_call)

    result = service.translate("one\ntwo\nthree\n", "French")

    assert result == "ONE\nTWO\nTHREE\n"
    assert len(prompts) == 2
    assert all("French (fr)" in prompt for prompt in prompts)
    assert no_sleep == [1.5, 1.5]


def test_chunk_without_output_section_is_empty(monkeypatch, no_sleep) -> None:
    """Verify a response lacking delimiters is not an error."""
    service = AIService()
    monkeypatch.setattr(service, "_call_ai_api_text", lambda prompt: "Sorry, no.")

    assert service.translate("hello", "German") == ""


def test_retries_then_raises(monkeypatch, no_sleep) -> None:
    """Verify server errors are retried and finally reported."""
    _configure(request_interval=0)
    service = AIService()
    calls: list[str] = []

    def failing(prompt: str) -> str:
        calls.append(prompt)
        raise TranslationError("Gemini API error (503): overloaded")

    monkeypatch.setattr(service, "_call_ai_api_text", failing)

    with pytest.raises(TranslationError) as excinfo:
        service.translate("hello", "French")
    assert len(calls) == 3
    assert excinfo.value.code == "translation_failed"
    assert no_sleep == [1, 2]


def test_auth_errors_are_not_retried(monkeypatch, no_sleep) -> None:
    """Verify a 401 stops after the first attempt."""
    _configure(request_interval=0)
    service = AIService()
    calls: list[str] = []

    def unauthorized(prompt: str) -> str:
        calls.append(prompt)
        raise TranslationError("OpenAI API error (401): bad key")

    monkeypatch.setattr(service, "_call_ai_api_text", unauthorized)

    with pytest.raises(TranslationError):
        service.translate("hello", "French")
    assert len(calls) == 1


def test_validate_ai_config(monkeypatch) -> None:
    """Verify missing keys are reported and environment keys accepted."""
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    with pytest.raises(TranslationError) as excinfo:
        validate_ai_config()
    assert excinfo.value.details["missing_field"] == "api_key"

    monkeypatch.setenv("GOOGLE_API_KEY", "from-env")
    validate_ai_config()

    with pytest.raises(TranslationError):
        validate_ai_config("my-provider")


def _mock_transport(monkeypatch, handler) -> None:
    real_client = httpx.Client
    monkeypatch.setattr(
        "transtree.ai.providers.httpx.Client",
        lambda **kwargs: real_client(transport=httpx.MockTransport(handler), **kwargs),
    )


def test_gemini_provider_request_and_response(monkeypatch, no_sleep) -> None:
    """Verify the Gemini call shape and text extraction."""
    _configure(request_interval=0)
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": "<output>Salut</output>"}]}}]})

    _mock_transport(monkeypatch, handler)

    assert AIService().translate("Hi", "French") == "Salut"
    assert seen[0].url.path.endswith("/gemini-2.0-flash:generateContent")
    assert seen[0].url.params["key"] == "test-key"
    body = json.loads(seen[0].content)
    assert "<document>Hi\n</document>" in body["contents"][0]["parts"][0]["text"]


def test_openai_provider_http_error(monkeypatch, no_sleep) -> None:
    """Verify HTTP errors carry the provider message and status."""
    _configure(request_interval=0)

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["Authorization"] == "Bearer test-key"
        return httpx.Response(400, json={"error": {"message": "invalid model"}})

    _mock_transport(monkeypatch, handler)
    service = AIService(provider_override="openai")

    with pytest.raises(TranslationError) as excinfo:
        service.translate("Hi", "Spanish")
    assert "invalid model" in str(excinfo.value)
    assert excinfo.value.__cause__.code == "provider_http_error"
