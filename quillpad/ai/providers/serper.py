"""Web search provider for the Serper Google search API."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from quillpad.ai.errors import QPAiProviderError
from quillpad.ai.models import SearchResult

from .base import BaseSearchProvider, SearchSettings

logger = logging.getLogger(__name__)

_USER_AGENT = "Quillpad-Search-Provider/1.0"


class SerperSearchProvider(BaseSearchProvider):
    """Runs queries against ``google.serper.dev`` and normalises organic hits."""

    def __init__(self, settings: SearchSettings) -> None:
        super().__init__(settings)
        self._client: httpx.Client | None = None

    def search(self, query: str) -> list[SearchResult]:
        client = self._ensure_client()
        payload = {"q": query, "num": self.settings.max_results}
        logger.debug("Dispatching search request (num=%d)", self.settings.max_results)

        try:
            response = client.post(self.settings.url, json=payload)
        except httpx.TimeoutException as exc:
            raise QPAiProviderError(f"Search request timed out after {self.settings.timeout} seconds") from exc
        except httpx.HTTPError as exc:
            raise QPAiProviderError(f"Search request failed: {exc}") from exc

        if response.status_code >= 400:
            raise QPAiProviderError(f"Search API request failed with status {response.status_code}")

        try:
            data = response.json()
        except json.JSONDecodeError as exc:
            raise QPAiProviderError("Search API returned a non-JSON body") from exc
        if not isinstance(data, dict):
            raise QPAiProviderError("Search API returned an unexpected payload")

        results = [
            self._normalise_entry(entry)
            for entry in data.get("organic") or []
            if isinstance(entry, dict)
        ]
        return results[: self.settings.max_results]

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def _ensure_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                headers={
                    "X-API-KEY": self.settings.api_key,
                    "Content-Type": "application/json",
                    "User-Agent": self.settings.user_agent or _USER_AGENT,
                },
                timeout=self.settings.timeout,
                transport=self.settings.transport,
            )
        return self._client

    @staticmethod
    def _normalise_entry(entry: dict[str, Any]) -> SearchResult:
        return SearchResult(
            title=str(entry.get("title") or ""),
            url=str(entry.get("link") or ""),
            snippet=str(entry.get("snippet") or ""),
            source=str(entry.get("displayedLink") or "Unknown"),
        )
