"""Shared fakes for the AI domain and HTTP tests."""
from __future__ import annotations

from typing import Any, Mapping

import pytest

from quillpad.ai.config import AIConfig
from quillpad.ai.gateway import ProviderGateway
from quillpad.ai.models import SearchResult
from quillpad.ai.providers import BaseProvider, BaseSearchProvider, ProviderSettings, SearchSettings


class FakeProvider(BaseProvider):
    """Completion provider returning scripted replies and recording calls."""

    def __init__(self) -> None:
        super().__init__(
            ProviderSettings(base_url="https://mock.local/v1", api_key="test-key", model="test-model")
        )
        self.replies: list[str] = []
        self.error: Exception | None = None
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    def generate(self, messages: list[Mapping[str, Any]], **kwargs: Any) -> str:
        self.calls.append({"messages": [dict(message) for message in messages], **kwargs})
        if self.error is not None:
            raise self.error
        return self.replies.pop(0) if self.replies else ""

    def close(self) -> None:
        self.closed = True


class FakeSearchProvider(BaseSearchProvider):
    def __init__(self) -> None:
        super().__init__(SearchSettings(url="https://search.local/search", api_key="search-key"))
        self.results: list[SearchResult] = []
        self.error: Exception | None = None
        self.queries: list[str] = []
        self.closed = False

    def search(self, query: str) -> list[SearchResult]:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return list(self.results)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def ai_config() -> AIConfig:
    cfg = AIConfig()
    cfg.api_key = "test-key"
    cfg.search_api_key = "search-key"
    return cfg


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def fake_search() -> FakeSearchProvider:
    return FakeSearchProvider()


@pytest.fixture
def gateway(ai_config: AIConfig, fake_provider: FakeProvider, fake_search: FakeSearchProvider) -> ProviderGateway:
    return ProviderGateway(
        ai_config,
        provider_factory=lambda _cfg: fake_provider,
        search_factory=lambda _cfg: fake_search,
    )


@pytest.fixture
def paris_results() -> list[SearchResult]:
    return [
        SearchResult(
            title="Paris - Wikipedia",
            url="https://en.wikipedia.org/wiki/Paris",
            snippet="Paris is the capital and largest city of France.",
            source="en.wikipedia.org",
        ),
        SearchResult(
            title="France capital facts",
            url="https://example.org/france",
            snippet="The capital of France is Paris.",
            source="example.org",
        ),
    ]
