"""Base provider abstractions shared by the completion and search backends."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping

if TYPE_CHECKING:  # pragma: no cover - typing only
    import httpx

    from quillpad.ai.models import SearchResult

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ProviderSettings:
    """Immutable-like configuration holder for completion providers."""

    base_url: str
    api_key: str
    model: str
    timeout: float = 30.0
    extra_headers: Mapping[str, str] | None = None
    user_agent: str | None = None
    transport: "httpx.BaseTransport" | None = None


@dataclass(slots=True)
class SearchSettings:
    """Configuration holder for web search providers."""

    url: str
    api_key: str
    max_results: int = 5
    timeout: float = 30.0
    user_agent: str | None = None
    transport: "httpx.BaseTransport" | None = None


class BaseProvider(ABC):
    """Base class for chat completion providers."""

    def __init__(self, settings: ProviderSettings) -> None:
        self._settings = settings

    @property
    def settings(self) -> ProviderSettings:
        """Return the provider settings."""

        return self._settings

    @abstractmethod
    def generate(self, messages: list[Mapping[str, Any]], **kwargs: Any) -> str:
        """Execute a completion request and return the generated text.

        Implementations raise :class:`QPAiProviderError` for any upstream
        failure and return an empty string when the provider produced no
        content.
        """

    def close(self) -> None:
        """Release any resources held by the provider instance."""

    def __enter__(self) -> "BaseProvider":  # pragma: no cover - context mgr sugar
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # pragma: no cover - context mgr sugar
        self.close()


class BaseSearchProvider(ABC):
    """Base class for web search providers."""

    def __init__(self, settings: SearchSettings) -> None:
        self._settings = settings

    @property
    def settings(self) -> SearchSettings:
        return self._settings

    @abstractmethod
    def search(self, query: str) -> list["SearchResult"]:
        """Return ranked results for ``query``, raising on provider failure."""

    def close(self) -> None:
        """Release any resources held by the provider instance."""

    def __enter__(self) -> "BaseSearchProvider":  # pragma: no cover - context mgr sugar
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # pragma: no cover - context mgr sugar
        self.close()
