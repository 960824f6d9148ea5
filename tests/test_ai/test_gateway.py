"""Tests for the provider gateway."""
from __future__ import annotations

import json

import httpx
import pytest

from quillpad.ai.config import AIConfig
from quillpad.ai.errors import QPAiConfigError, QPAiProviderError, QPAiValidationError
from quillpad.ai.gateway import ProviderGateway, sanitise_messages


def test_sanitise_messages_keeps_only_role_and_content() -> None:
    cleaned = sanitise_messages([
        {"id": "1", "role": "user", "content": "Hi", "timestamp": "2024-01-01", "type": "text"},
        {"role": "assistant", "content": None},
    ])

    assert cleaned == [
        {"role": "user", "content": "Hi"},
        {"role": "assistant", "content": ""},
    ]


def test_sanitise_messages_rejects_unknown_roles() -> None:
    with pytest.raises(QPAiValidationError) as excinfo:
        sanitise_messages([{"role": "tool", "content": "x"}])
    assert excinfo.value.field == "messages"


def test_complete_rejects_unknown_roles_before_any_call(gateway, fake_provider) -> None:
    with pytest.raises(QPAiValidationError):
        gateway.complete([{"role": "tool", "content": "x"}], max_tokens=10)
    assert fake_provider.calls == []


def test_complete_sends_sanitised_messages(gateway, fake_provider) -> None:
    fake_provider.replies = ["Hello! How can I help?"]

    reply = gateway.complete(
        [{"id": "m1", "role": "user", "content": "Hi", "type": "text"}], max_tokens=500
    )

    assert reply == "Hello! How can I help?"
    assert fake_provider.calls == [{
        "messages": [{"role": "user", "content": "Hi"}],
        "max_tokens": 500,
        "temperature": pytest.approx(0.7),
    }]


def test_complete_requires_credentials_before_any_call(fake_provider) -> None:
    gateway = ProviderGateway(AIConfig(), provider_factory=lambda _cfg: fake_provider)

    with pytest.raises(QPAiConfigError, match="GROQ_API_KEY"):
        gateway.complete([{"role": "user", "content": "Hi"}], max_tokens=10)
    assert fake_provider.calls == []


def test_complete_wraps_unexpected_provider_failures(gateway, fake_provider) -> None:
    fake_provider.error = RuntimeError("socket closed")

    with pytest.raises(QPAiProviderError, match="socket closed"):
        gateway.complete([{"role": "user", "content": "Hi"}], max_tokens=10)


def test_complete_returns_empty_string_for_empty_reply(gateway, fake_provider) -> None:
    assert gateway.complete([{"role": "user", "content": "Hi"}], max_tokens=10) == ""


def test_search_is_capped_and_fails_open(gateway, fake_search, paris_results) -> None:
    gateway.config.search_max_results = 1
    fake_search.results = paris_results

    assert gateway.search("capital of France") == paris_results[:1]

    fake_search.error = QPAiProviderError("Search API request failed with status 500")
    assert gateway.search("capital of France") == []
    assert fake_search.queries == ["capital of France", "capital of France"]


def test_search_without_key_returns_no_results(fake_search) -> None:
    cfg = AIConfig()
    cfg.api_key = "test-key"
    gateway = ProviderGateway(cfg, search_factory=lambda _cfg: fake_search)

    with pytest.raises(QPAiConfigError, match="Search API key not configured"):
        gateway.require_search()
    assert gateway.search("anything") == []
    assert fake_search.queries == []


def test_close_releases_providers(gateway, fake_provider, fake_search) -> None:
    gateway.complete([{"role": "user", "content": "Hi"}], max_tokens=10)
    gateway.search("query")
    gateway.close()

    assert fake_provider.closed is True
    assert fake_search.closed is True


def test_gateway_builds_http_providers_from_config() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "google.serper.dev":
            return httpx.Response(200, json={"organic": [
                {"title": "T", "link": "https://t", "snippet": "S", "displayedLink": "t"}
            ]})
        payload = json.loads(request.content.decode())
        assert payload["model"] == "llama-3.1-8b-instant"
        return httpx.Response(200, json={"choices": [{"message": {"content": "ok"}}]})

    cfg = AIConfig.from_env({"GROQ_API_KEY": "groq", "SERPER_API_KEY": "serper"})
    gateway = ProviderGateway(cfg, transport=httpx.MockTransport(handler))
    try:
        assert gateway.complete([{"role": "user", "content": "Hi"}], max_tokens=10) == "ok"
        assert [result.title for result in gateway.search("q")] == ["T"]
    finally:
        gateway.close()


def test_gateway_creates_provider_through_config(monkeypatch: pytest.MonkeyPatch, fake_provider) -> None:
    cfg = AIConfig()
    cfg.api_key = "test-key"
    transport = httpx.MockTransport(lambda request: httpx.Response(200))
    seen: list[object] = []

    def create_provider(self, *, transport=None):
        seen.append(transport)
        return fake_provider

    monkeypatch.setattr(AIConfig, "create_provider", create_provider)
    fake_provider.replies = ["ok"]
    gateway = ProviderGateway(cfg, transport=transport)

    assert gateway.complete([{"role": "user", "content": "Hi"}], max_tokens=10) == "ok"
    assert seen == [transport]
