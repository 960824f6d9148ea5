"""Tests for the Serper web search provider."""
from __future__ import annotations

import json
from typing import Callable

import httpx
import pytest

from quillpad.ai.errors import QPAiProviderError
from quillpad.ai.models import SearchResult
from quillpad.ai.providers import SearchSettings, SerperSearchProvider

_SEARCH_URL = "https://google.serper.dev/search"


def _make_provider(
    handler: Callable[[httpx.Request], httpx.Response], max_results: int = 5
) -> SerperSearchProvider:
    settings = SearchSettings(
        url=_SEARCH_URL,
        api_key="serper-key",
        max_results=max_results,
        transport=httpx.MockTransport(handler),
    )
    return SerperSearchProvider(settings)


def test_search_posts_query_and_normalises_results() -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={
            "searchParameters": {"q": "capital of France"},
            "organic": [
                {
                    "title": "Paris - Wikipedia",
                    "link": "https://en.wikipedia.org/wiki/Paris",
                    "snippet": "Paris is the capital of France.",
                    "displayedLink": "en.wikipedia.org",
                },
                {"title": "No source", "link": "https://example.org", "snippet": "Snippet"},
            ],
        })

    provider = _make_provider(handler)
    results = provider.search("capital of France")
    provider.close()

    request = captured[0]
    assert str(request.url) == _SEARCH_URL
    assert request.headers["X-API-KEY"] == "serper-key"
    assert json.loads(request.content.decode()) == {"q": "capital of France", "num": 5}
    assert results == [
        SearchResult(
            title="Paris - Wikipedia",
            url="https://en.wikipedia.org/wiki/Paris",
            snippet="Paris is the capital of France.",
            source="en.wikipedia.org",
        ),
        SearchResult(title="No source", url="https://example.org", snippet="Snippet", source="Unknown"),
    ]


def test_search_caps_results() -> None:
    organic = [{"title": f"Hit {idx}", "link": f"https://h/{idx}", "snippet": "s"} for idx in range(8)]
    provider = _make_provider(lambda request: httpx.Response(200, json={"organic": organic}), max_results=3)

    results = provider.search("many")

    assert [result.title for result in results] == ["Hit 0", "Hit 1", "Hit 2"]


def test_search_without_organic_results_is_empty() -> None:
    provider = _make_provider(lambda request: httpx.Response(200, json={"answerBox": {}}))

    assert provider.search("nothing") == []


@pytest.mark.parametrize(
    ("response", "message"),
    [
        (httpx.Response(403, json={"message": "Unauthorized"}), "status 403"),
        (httpx.Response(200, text="<html>"), "non-JSON"),
        (httpx.Response(200, json=["unexpected"]), "unexpected payload"),
    ],
)
def test_search_failures_raise_provider_errors(response: httpx.Response, message: str) -> None:
    provider = _make_provider(lambda request: response)

    with pytest.raises(QPAiProviderError, match=message):
        provider.search("query")


def test_search_maps_timeouts() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("slow", request=request)

    provider = _make_provider(handler)

    with pytest.raises(QPAiProviderError, match="timed out"):
        provider.search("query")
