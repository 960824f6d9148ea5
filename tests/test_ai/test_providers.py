"""Tests for the httpx based OpenAI compatible provider."""
from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from quillpad.ai.errors import QPAiConfigError, QPAiProviderError
from quillpad.ai.providers import OpenAICompatibleProvider, ProviderSettings, create_provider


def _make_provider(
    handler: Callable[[httpx.Request], httpx.Response], **overrides: Any
) -> OpenAICompatibleProvider:
    settings = ProviderSettings(
        base_url="https://mock.local/v1",
        api_key="test-key",
        model="test-model",
        transport=httpx.MockTransport(handler),
        **overrides,
    )
    return OpenAICompatibleProvider(settings)


def _chat_reply(content: Any) -> dict[str, Any]:
    return {
        "id": "chat_1",
        "choices": [{"index": 0, "message": {"role": "assistant", "content": content}}],
    }


def test_generate_posts_chat_completion_payload() -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json=_chat_reply("Hello there"))

    provider = _make_provider(handler, extra_headers={"X-Trace": "1"})
    text = provider.generate(
        [{"role": "user", "content": "Hi"}], max_tokens=500, temperature=0.7, stop=None
    )
    provider.close()

    assert text == "Hello there"
    assert len(captured) == 1
    request = captured[0]
    assert request.method == "POST"
    assert request.url.path == "/v1/chat/completions"
    assert request.headers["Authorization"] == "Bearer test-key"
    assert request.headers["X-Trace"] == "1"
    payload = json.loads(request.content.decode())
    assert payload == {
        "model": "test-model",
        "messages": [{"role": "user", "content": "Hi"}],
        "max_tokens": 500,
        "temperature": 0.7,
    }


@pytest.mark.parametrize(
    "body",
    [
        {"choices": []},
        _chat_reply(None),
    ],
)
def test_generate_returns_empty_string_without_content(body: dict[str, Any]) -> None:
    provider = _make_provider(lambda request: httpx.Response(200, json=body))

    assert provider.generate([{"role": "user", "content": "Hi"}]) == ""


def test_generate_reports_upstream_error_message() -> None:
    provider = _make_provider(
        lambda request: httpx.Response(401, json={"error": {"message": "Invalid API Key"}})
    )

    with pytest.raises(QPAiProviderError, match="401: Invalid API Key"):
        provider.generate([{"role": "user", "content": "Hi"}])


def test_generate_reports_plain_status_without_body() -> None:
    provider = _make_provider(lambda request: httpx.Response(503, text="unavailable"))

    with pytest.raises(QPAiProviderError, match="/chat/completions 503"):
        provider.generate([{"role": "user", "content": "Hi"}])


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="not json"),
        httpx.Response(200, json={"id": "chat_1"}),
        httpx.Response(200, json={"choices": ["oops"]}),
        httpx.Response(200, json=_chat_reply(["not", "text"])),
    ],
)
def test_generate_rejects_malformed_payloads(response: httpx.Response) -> None:
    provider = _make_provider(lambda request: response)

    with pytest.raises(QPAiProviderError, match="Malformed completion response"):
        provider.generate([{"role": "user", "content": "Hi"}])


def test_generate_maps_timeouts() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    provider = _make_provider(handler, timeout=2.0)

    with pytest.raises(QPAiProviderError, match="timed out after 2.0 seconds"):
        provider.generate([{"role": "user", "content": "Hi"}])


def test_generate_maps_transport_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    provider = _make_provider(handler)

    with pytest.raises(QPAiProviderError, match="request failed: connection refused"):
        provider.generate([{"role": "user", "content": "Hi"}])


def test_create_provider_rejects_unknown_identifier() -> None:
    settings = ProviderSettings(base_url="https://mock.local/v1", api_key="k", model="m")

    assert isinstance(create_provider(" Groq ", settings), OpenAICompatibleProvider)
    with pytest.raises(QPAiConfigError):
        create_provider("unknown", settings)
