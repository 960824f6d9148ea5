"""Provider implementation backed by the official OpenAI Python SDK."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

import httpx
from openai import APIStatusError, APITimeoutError, OpenAI, OpenAIError

from quillpad.ai.errors import QPAiProviderError

from .base import BaseProvider, ProviderSettings

logger = logging.getLogger(__name__)


class OpenAISDKProvider(BaseProvider):
    """Provider implementation delegating to ``openai.OpenAI`` client."""

    def __init__(self, settings: ProviderSettings) -> None:
        super().__init__(settings)
        self._client: OpenAI | None = None
        self._http_client: httpx.Client | None = None

    def generate(self, messages: list[Mapping[str, Any]], **kwargs: Any) -> str:
        client = self._ensure_client()
        extra = {key: value for key, value in kwargs.items() if value is not None}
        timeout = extra.pop("timeout", None)
        timeout_value = timeout if timeout is not None else self.settings.timeout

        logger.debug("Dispatching chat.completions via OpenAI SDK (model=%s)", self.settings.model)
        try:
            response = client.chat.completions.create(
                model=self.settings.model,
                messages=[dict(message) for message in messages],
                stream=False,
                timeout=timeout_value,
                **extra,
            )
        except Exception as exc:  # noqa: BLE001 - normalise to provider error
            raise _wrap_exception(exc, endpoint="chat.completions") from exc

        return _collapse_chat_output(response)

    def close(self) -> None:
        client = self._client
        if client is not None:
            client.close()
            self._client = None
        if self._http_client is not None:
            self._http_client.close()
            self._http_client = None

    # ------------------------------------------------------------------
    # OpenAI client helpers
    # ------------------------------------------------------------------
    def _ensure_client(self) -> OpenAI:
        if self._client is not None:
            return self._client

        client_kwargs: dict[str, Any] = {
            "api_key": self.settings.api_key,
            "base_url": self.settings.base_url,
            "max_retries": 0,
        }
        if self.settings.timeout:
            client_kwargs["timeout"] = float(self.settings.timeout)

        headers: dict[str, str] = {}
        if self.settings.user_agent:
            headers["User-Agent"] = self.settings.user_agent
        if self.settings.extra_headers:
            headers.update(self.settings.extra_headers)
        if headers:
            client_kwargs["default_headers"] = headers

        if self.settings.transport is not None:
            self._http_client = httpx.Client(
                transport=self.settings.transport,
                timeout=self.settings.timeout,
            )
            client_kwargs["http_client"] = self._http_client

        self._client = OpenAI(**client_kwargs)
        return self._client


def _wrap_exception(exc: Exception, *, endpoint: str) -> QPAiProviderError:
    message = str(exc) or exc.__class__.__name__
    if isinstance(exc, APITimeoutError):
        message = f"{endpoint} timed out"
    elif isinstance(exc, APIStatusError):
        message = f"{endpoint} {exc.status_code}: {exc.message or message}"
    elif isinstance(exc, OpenAIError):
        message = f"{endpoint} failed: {message}"
    logger.debug("OpenAI SDK call to %s failed: %s", endpoint, message)
    return QPAiProviderError(message)


def _safe_as_dict(data: Any) -> dict[str, Any]:
    if data is None:
        return {}
    if isinstance(data, Mapping):
        return dict(data)
    converter = getattr(data, "model_dump", None)
    if callable(converter):
        return converter()
    if hasattr(data, "__dict__"):
        return {key: value for key, value in vars(data).items() if not key.startswith("_")}
    return {}


def _collapse_chat_output(response: Any) -> str:
    payload = _safe_as_dict(response)
    choices = payload.get("choices")
    if not isinstance(choices, Sequence):
        raise QPAiProviderError("Malformed completion response: missing 'choices'")
    if not choices:
        return ""
    message = _safe_as_dict(_safe_as_dict(choices[0]).get("message"))
    content = message.get("content")
    if content is None:
        return ""
    if not isinstance(content, str):
        raise QPAiProviderError("Malformed completion response: content is not text")
    return content
