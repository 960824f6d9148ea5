"""Provider factory helpers for the Quillpad AI services."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Mapping

from quillpad.ai.errors import QPAiConfigError

from .base import BaseProvider, BaseSearchProvider, ProviderSettings
from .openai_compatible import OpenAICompatibleProvider
from .openai_sdk import OpenAISDKProvider
from .serper import SerperSearchProvider

if TYPE_CHECKING:  # pragma: no cover - typing only
    import httpx
    from quillpad.ai.config import AIConfig

logger = logging.getLogger(__name__)


_PROVIDER_REGISTRY: Mapping[str, Callable[[ProviderSettings], BaseProvider]] = {
    "openai": OpenAICompatibleProvider,
    "groq": OpenAICompatibleProvider,
    "openai-compatible": OpenAICompatibleProvider,
    "openai_compatible": OpenAICompatibleProvider,
    "openai-sdk": OpenAISDKProvider,
    "openai_sdk": OpenAISDKProvider,
}


def create_provider(provider_id: str, settings: ProviderSettings) -> BaseProvider:
    """Instantiate a provider by identifier using the registered factories."""

    normalised = (provider_id or "openai").strip().lower()
    try:
        factory = _PROVIDER_REGISTRY[normalised]
    except KeyError as exc:
        raise QPAiConfigError(f"Unsupported AI provider '{provider_id}'.") from exc

    provider = factory(settings)
    logger.debug("Created AI provider '%s' with base URL '%s'", normalised, settings.base_url)
    return provider


def provider_from_config(ai_config: "AIConfig", *, transport: "httpx.BaseTransport" | None = None) -> BaseProvider:
    """Create a completion provider based on an :class:`AIConfig` object."""

    settings = ai_config.build_provider_settings(transport=transport)
    return create_provider(ai_config.provider, settings)


def search_provider_from_config(
    ai_config: "AIConfig", *, transport: "httpx.BaseTransport" | None = None
) -> BaseSearchProvider:
    """Create the web search provider based on an :class:`AIConfig` object."""

    return SerperSearchProvider(ai_config.build_search_settings(transport=transport))
