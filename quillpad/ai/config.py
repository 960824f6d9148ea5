"""Configuration helpers for the Quillpad AI services."""

from __future__ import annotations

import logging
import os
from configparser import ConfigParser
from typing import TYPE_CHECKING, Any, Mapping, Protocol

from quillpad.ai.errors import QPAiConfigError

if TYPE_CHECKING:  # pragma: no cover - typing only
    import httpx
    from quillpad.ai.providers.base import BaseProvider, ProviderSettings, SearchSettings

logger = logging.getLogger(__name__)


class _ConfigReader(Protocol):
    """Protocol describing the subset of config readers we rely on."""

    def has_option(self, section: str, option: str) -> bool:  # pragma: no cover - typing aid
        ...

    def get(self, section: str, option: str, *args: Any, **kwargs: Any) -> str:  # pragma: no cover
        ...

    def getint(self, section: str, option: str, *args: Any, **kwargs: Any) -> int:  # pragma: no cover
        ...

    def getfloat(self, section: str, option: str, *args: Any, **kwargs: Any) -> float:  # pragma: no cover
        ...


_DEF_BASE_URL = "https://api.groq.com/openai/v1"
_DEF_MODEL = "llama-3.1-8b-instant"
_DEF_SEARCH_URL = "https://google.serper.dev/search"

ENV_API_KEY = "GROQ_API_KEY"
ENV_SEARCH_API_KEY = "SERPER_API_KEY"

# Optional non-secret overrides, applied by ``from_env``
_ENV_OVERRIDES: dict[str, str] = {
    "QUILLPAD_PROVIDER": "provider",
    "QUILLPAD_MODEL": "model",
    "QUILLPAD_BASE_URL": "base_url",
    "QUILLPAD_TIMEOUT": "timeout",
    "QUILLPAD_LOG_LEVEL": "log_level",
}

_PROVIDER_SYNONYMS: dict[str, str] = {
    "openai": "openai",
    "groq": "openai",
    "openai-compatible": "openai",
    "openai_compatible": "openai",
    "openai-sdk": "openai-sdk",
    "openai_sdk": "openai-sdk",
}


class AIConfig:
    """Encapsulates configuration for the completion and search providers."""

    __slots__ = (
        "provider",
        "model",
        "base_url",
        "api_key",
        "timeout",
        "temperature",
        "edit_max_tokens",
        "chat_max_tokens",
        "answer_max_tokens",
        "search_url",
        "search_api_key",
        "search_max_results",
        "history_window",
        "log_level",
        "user_agent",
        "extra_headers",
    )

    SECTION = "AI"

    def __init__(self) -> None:
        self.provider: str = "openai"
        self.model: str = _DEF_MODEL
        self.base_url: str = _DEF_BASE_URL
        self.api_key: str = ""
        self.timeout: float = 30.0
        self.temperature: float = 0.7
        self.edit_max_tokens: int = 500
        self.chat_max_tokens: int = 500
        self.answer_max_tokens: int = 1000
        self.search_url: str = _DEF_SEARCH_URL
        self.search_api_key: str = ""
        self.search_max_results: int = 5
        self.history_window: int = 20
        self.log_level: str = "INFO"
        self.user_agent: str | None = None
        self.extra_headers: dict[str, str] | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "AIConfig":
        """Build a configuration from process environment variables."""

        env = os.environ if environ is None else environ
        config = cls()
        for name, attr in _ENV_OVERRIDES.items():
            raw = (env.get(name) or "").strip()
            if not raw:
                continue
            if attr == "timeout":
                try:
                    config.timeout = float(raw)
                except ValueError:
                    logger.warning("Ignoring invalid %s value '%s'", name, raw)
                continue
            setattr(config, attr, raw)
        config.provider = config._normalise_provider_id(config.provider)
        config.apply_env_credentials(env)
        return config

    @property
    def completion_configured(self) -> bool:
        return bool((self.api_key or "").strip())

    @property
    def search_configured(self) -> bool:
        return bool((self.search_api_key or "").strip())

    # ------------------------------------------------------------------
    # Persistence helpers
    # ------------------------------------------------------------------
    def load_from_main_config(
        self, conf: _ConfigReader, environ: Mapping[str, str] | None = None
    ) -> None:
        """Populate the AI settings from an INI style configuration object.

        Credentials found in the environment take precedence over stored ones.
        """

        reader = _ReaderFacade(conf)
        section = self.SECTION

        self.provider = self._normalise_provider_id(
            reader.get_str(section, "provider", self.provider)
        )
        self.model = reader.get_str(section, "model", self.model)
        self.base_url = reader.get_str(section, "base_url", self.base_url)
        self.timeout = reader.get_float(section, "timeout", self.timeout)
        self.temperature = reader.get_float(section, "temperature", self.temperature)
        self.edit_max_tokens = reader.get_int(section, "edit_max_tokens", self.edit_max_tokens)
        self.chat_max_tokens = reader.get_int(section, "chat_max_tokens", self.chat_max_tokens)
        self.answer_max_tokens = reader.get_int(section, "answer_max_tokens", self.answer_max_tokens)
        self.search_url = reader.get_str(section, "search_url", self.search_url)
        self.search_max_results = reader.get_int(
            section, "search_max_results", self.search_max_results
        )
        self.history_window = reader.get_int(section, "history_window", self.history_window)
        self.log_level = reader.get_str(section, "log_level", self.log_level)
        self.user_agent = self._normalise_optional(
            reader.get_str(section, "user_agent", self.user_agent or "")
        )
        self.extra_headers = self._parse_header_entries(
            reader.get_str(section, "extra_headers", "")
        )
        self.api_key = reader.get_str(section, "api_key", self.api_key)
        self.search_api_key = reader.get_str(section, "search_api_key", self.search_api_key)

        self.apply_env_credentials(os.environ if environ is None else environ)

    def save_to_main_config(self, conf: ConfigParser) -> None:
        """Persist the non-secret settings into a config parser."""

        section = self.SECTION
        if not conf.has_section(section):
            conf[section] = {}

        conf[section]["provider"] = self._normalise_provider_id(self.provider)
        conf[section]["model"] = str(self.model)
        conf[section]["base_url"] = str(self.base_url)
        conf[section]["timeout"] = str(self.timeout)
        conf[section]["temperature"] = str(self.temperature)
        conf[section]["edit_max_tokens"] = str(self.edit_max_tokens)
        conf[section]["chat_max_tokens"] = str(self.chat_max_tokens)
        conf[section]["answer_max_tokens"] = str(self.answer_max_tokens)
        conf[section]["search_url"] = str(self.search_url)
        conf[section]["search_max_results"] = str(self.search_max_results)
        conf[section]["history_window"] = str(self.history_window)
        conf[section]["log_level"] = str(self.log_level)

        if self.user_agent:
            conf[section]["user_agent"] = str(self.user_agent)
        elif conf.has_option(section, "user_agent"):
            conf.remove_option(section, "user_agent")

        headers_serialised = self._serialise_header_entries(self.extra_headers)
        if headers_serialised:
            conf[section]["extra_headers"] = headers_serialised
        elif conf.has_option(section, "extra_headers"):
            conf.remove_option(section, "extra_headers")

    def apply_env_credentials(self, environ: Mapping[str, str]) -> None:
        """Take both provider credentials from ``environ`` when present."""

        env_key = (environ.get(ENV_API_KEY) or "").strip()
        if env_key:
            if self.api_key and self.api_key != env_key:
                logger.debug("Ignoring stored completion key due to %s override", ENV_API_KEY)
            self.api_key = env_key

        env_search_key = (environ.get(ENV_SEARCH_API_KEY) or "").strip()
        if env_search_key:
            if self.search_api_key and self.search_api_key != env_search_key:
                logger.debug("Ignoring stored search key due to %s override", ENV_SEARCH_API_KEY)
            self.search_api_key = env_search_key

    # ------------------------------------------------------------------
    # Provider wiring
    # ------------------------------------------------------------------
    def build_provider_settings(
        self,
        *,
        transport: "httpx.BaseTransport" | None = None,
    ) -> "ProviderSettings":
        """Translate configuration values into :class:`ProviderSettings`."""

        from quillpad.ai.providers.base import ProviderSettings  # Local import to avoid cycles

        api_key = (self.api_key or "").strip()
        if not api_key:
            raise QPAiConfigError(f"{ENV_API_KEY} not found in environment variables")

        base_url = (self.base_url or "").strip()
        if not base_url:
            raise QPAiConfigError("Completion provider base URL is not configured.")

        model = (self.model or "").strip()
        if not model:
            raise QPAiConfigError("Model name must be configured for the completion provider.")

        return ProviderSettings(
            base_url=base_url,
            api_key=api_key,
            model=model,
            timeout=float(self.timeout),
            extra_headers=self.extra_headers,
            user_agent=self.user_agent,
            transport=transport,
        )

    def build_search_settings(
        self,
        *,
        transport: "httpx.BaseTransport" | None = None,
    ) -> "SearchSettings":
        """Translate search configuration into :class:`SearchSettings`."""

        from quillpad.ai.providers.base import SearchSettings

        api_key = (self.search_api_key or "").strip()
        if not api_key:
            raise QPAiConfigError("Search API key not configured")

        return SearchSettings(
            url=(self.search_url or _DEF_SEARCH_URL).strip(),
            api_key=api_key,
            max_results=max(1, int(self.search_max_results)),
            timeout=float(self.timeout),
            user_agent=self.user_agent,
            transport=transport,
        )

    def create_provider(
        self,
        *,
        transport: "httpx.BaseTransport" | None = None,
    ) -> "BaseProvider":
        """Instantiate the configured completion provider."""

        from quillpad.ai.providers.factory import provider_from_config

        return provider_from_config(self, transport=transport)

    def _normalise_provider_id(self, provider: str) -> str:
        key = (provider or "openai").strip().lower()
        return _PROVIDER_SYNONYMS.get(key, key)

    @staticmethod
    def _normalise_optional(value: str | None) -> str | None:
        cleaned = (value or "").strip()
        return cleaned or None

    @staticmethod
    def _parse_header_entries(raw: str) -> dict[str, str] | None:
        if not raw:
            return None
        entries = [chunk.strip() for chunk in raw.split(";") if chunk.strip()]
        if not entries:
            return None
        headers: dict[str, str] = {}
        for entry in entries:
            if ":" not in entry:
                continue
            key, value = entry.split(":", 1)
            key = key.strip()
            value = value.strip()
            if key:
                headers[key] = value
        return headers or None

    @staticmethod
    def _serialise_header_entries(headers: dict[str, str] | None) -> str:
        if not headers:
            return ""
        return "; ".join(f"{key}: {value}" for key, value in headers.items())


class _ReaderFacade:
    """Typed accessors over a :class:`ConfigParser` section."""

    __slots__ = ("_conf",)

    def __init__(self, conf: _ConfigReader) -> None:
        self._conf = conf

    def get_str(self, section: str, option: str, default: str) -> str:
        return self._conf.get(section, option, fallback=default)

    def get_int(self, section: str, option: str, default: int) -> int:
        try:
            return self._conf.getint(section, option, fallback=default)
        except ValueError:
            logger.warning("Invalid integer for '%s:%s' in AI config", section, option)
            return default

    def get_float(self, section: str, option: str, default: float) -> float:
        try:
            return self._conf.getfloat(section, option, fallback=default)
        except (ValueError, TypeError):
            logger.warning("Invalid float for '%s:%s' in AI config", section, option)
            return default
