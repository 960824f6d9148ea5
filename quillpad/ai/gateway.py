"""Uniform access to the completion and web search providers."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Iterable, Mapping, Optional

from .config import AIConfig
from .errors import QPAiConfigError, QPAiProviderError, QPAiValidationError
from .models import SearchResult
from .providers import (
    BaseProvider,
    BaseSearchProvider,
    search_provider_from_config,
)

if TYPE_CHECKING:  # pragma: no cover - typing only
    import httpx

__all__ = ["ProviderGateway", "sanitise_messages"]

logger = logging.getLogger(__name__)

_ALLOWED_ROLES = frozenset(("system", "user", "assistant"))


def sanitise_messages(messages: Iterable[Mapping[str, Any]]) -> list[dict[str, str]]:
    """Reduce each message to its ``role`` and ``content`` fields."""

    cleaned: list[dict[str, str]] = []
    for message in messages:
        role = str(message.get("role") or "user")
        if role not in _ALLOWED_ROLES:
            raise QPAiValidationError(f"Unsupported message role '{role}'", field="messages")
        content = message.get("content")
        cleaned.append({"role": role, "content": "" if content is None else str(content)})
    return cleaned


class ProviderGateway:
    """Translates generic completion and search calls into provider calls.

    Providers are created lazily from the configuration, so a missing
    credential is reported as :class:`QPAiConfigError` before any network
    traffic. Factories may be injected for tests.
    """

    def __init__(
        self,
        config: AIConfig,
        *,
        transport: "httpx.BaseTransport" | None = None,
        provider_factory: Optional[Callable[[AIConfig], BaseProvider]] = None,
        search_factory: Optional[Callable[[AIConfig], BaseSearchProvider]] = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._provider_factory = provider_factory
        self._search_factory = search_factory
        self._provider: BaseProvider | None = None
        self._search_provider: BaseSearchProvider | None = None

    @property
    def config(self) -> AIConfig:
        return self._config

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------
    def require_completion(self) -> None:
        """Raise :class:`QPAiConfigError` when no completion credential exists."""

        if not self._config.completion_configured:
            raise QPAiConfigError("GROQ_API_KEY not found in environment variables")

    def complete(
        self,
        messages: Iterable[Mapping[str, Any]],
        *,
        max_tokens: int,
        temperature: float | None = None,
    ) -> str:
        """Return the provider's reply to ``messages``.

        Only ``role`` and ``content`` of each message are transmitted. An
        empty reply is returned as ``""``.
        """

        self.require_completion()
        payload = sanitise_messages(messages)
        provider = self._ensure_provider()
        try:
            text = provider.generate(
                payload,
                max_tokens=max_tokens,
                temperature=self._config.temperature if temperature is None else temperature,
            )
        except QPAiProviderError:
            raise
        except Exception as exc:  # noqa: BLE001 - normalise to provider error
            raise QPAiProviderError(str(exc) or exc.__class__.__name__) from exc
        return text or ""

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------
    def require_search(self) -> None:
        """Raise :class:`QPAiConfigError` when no search credential exists."""

        if not self._config.search_configured:
            raise QPAiConfigError("Search API key not configured")

    def search(self, query: str) -> list[SearchResult]:
        """Return at most ``search_max_results`` hits, or ``[]`` on any failure."""

        try:
            self.require_search()
            results = self._ensure_search_provider().search(query)
        except Exception as exc:  # noqa: BLE001 - search fails open
            logger.warning("Search failed, continuing without results: %s", exc)
            return []
        return list(results)[: max(1, self._config.search_max_results)]

    def close(self) -> None:
        if self._provider is not None:
            self._provider.close()
            self._provider = None
        if self._search_provider is not None:
            self._search_provider.close()
            self._search_provider = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _ensure_provider(self) -> BaseProvider:
        if self._provider is None:
            if self._provider_factory is not None:
                self._provider = self._provider_factory(self._config)
            else:
                self._provider = self._config.create_provider(transport=self._transport)
        return self._provider

    def _ensure_search_provider(self) -> BaseSearchProvider:
        if self._search_provider is None:
            if self._search_factory is not None:
                self._search_provider = self._search_factory(self._config)
            else:
                self._search_provider = search_provider_from_config(
                    self._config, transport=self._transport
                )
        return self._search_provider
