"""Provider implementations for the Quillpad AI services."""

from .base import BaseProvider, BaseSearchProvider, ProviderSettings, SearchSettings
from .factory import create_provider, provider_from_config, search_provider_from_config
from .openai_compatible import OpenAICompatibleProvider
from .openai_sdk import OpenAISDKProvider
from .serper import SerperSearchProvider

__all__ = [
    "ProviderSettings",
    "SearchSettings",
    "BaseProvider",
    "BaseSearchProvider",
    "OpenAICompatibleProvider",
    "OpenAISDKProvider",
    "SerperSearchProvider",
    "create_provider",
    "provider_from_config",
    "search_provider_from_config",
]
