"""OpenAI API compatible completion provider built on httpx."""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

import httpx

from quillpad.ai.errors import QPAiProviderError

from .base import BaseProvider, ProviderSettings

logger = logging.getLogger(__name__)


_CHAT_COMPLETIONS_ENDPOINT = "/chat/completions"
_USER_AGENT = "Quillpad-AI-Provider/1.0"


class OpenAICompatibleProvider(BaseProvider):
    """Provider implementation for OpenAI compatible HTTP endpoints (Groq included)."""

    def __init__(self, settings: ProviderSettings) -> None:
        super().__init__(settings)
        self._client: httpx.Client | None = None

    def generate(self, messages: list[Mapping[str, Any]], **kwargs: Any) -> str:
        """Send a non-streaming chat completion request and return its text."""

        client = self._ensure_client()
        extra = dict(kwargs)
        timeout_override = extra.pop("timeout", None)
        timeout = timeout_override if timeout_override is not None else self.settings.timeout

        payload = self._build_chat_payload(messages, extra=extra)
        logger.debug(
            "Dispatching chat completion to %s (model=%s, messages=%d)",
            self.settings.base_url,
            self.settings.model,
            len(payload["messages"]),
        )

        try:
            response = client.post(_CHAT_COMPLETIONS_ENDPOINT, json=payload, timeout=timeout)
        except httpx.TimeoutException as exc:
            raise QPAiProviderError(
                f"{_CHAT_COMPLETIONS_ENDPOINT} timed out after {timeout} seconds"
            ) from exc
        except httpx.HTTPError as exc:
            raise QPAiProviderError(f"{_CHAT_COMPLETIONS_ENDPOINT} request failed: {exc}") from exc

        if response.status_code >= 400:
            raise QPAiProviderError(self._build_error_message(_CHAT_COMPLETIONS_ENDPOINT, response))

        return self._extract_content(self._safe_json(response))

    def close(self) -> None:
        client = self._client
        if client is not None:
            client.close()
            self._client = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _ensure_client(self) -> httpx.Client:
        if self._client is not None:
            return self._client

        headers = {
            "Authorization": f"Bearer {self.settings.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": self.settings.user_agent or _USER_AGENT,
        }
        if self.settings.extra_headers:
            headers.update(self.settings.extra_headers)

        self._client = httpx.Client(
            base_url=self.settings.base_url.rstrip("/") + "/",
            headers=headers,
            timeout=self.settings.timeout,
            transport=self.settings.transport,
        )
        return self._client

    def _build_chat_payload(
        self,
        messages: list[Mapping[str, Any]],
        *,
        extra: dict[str, Any],
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": self.settings.model,
            "messages": [dict(message) for message in messages],
        }
        payload.update({key: value for key, value in extra.items() if value is not None})
        return payload

    @staticmethod
    def _extract_content(payload: Any) -> str:
        if not isinstance(payload, dict):
            raise QPAiProviderError("Malformed completion response: expected a JSON object")
        choices = payload.get("choices")
        if not isinstance(choices, list):
            raise QPAiProviderError("Malformed completion response: missing 'choices'")
        if not choices:
            return ""
        first = choices[0]
        if not isinstance(first, dict):
            raise QPAiProviderError("Malformed completion response: invalid choice entry")
        message = first.get("message") or {}
        if not isinstance(message, dict):
            raise QPAiProviderError("Malformed completion response: invalid message entry")
        content = message.get("content")
        if content is None:
            return ""
        if not isinstance(content, str):
            raise QPAiProviderError("Malformed completion response: content is not text")
        return content

    @staticmethod
    def _safe_json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except json.JSONDecodeError:
            return response.text

    @staticmethod
    def _build_error_message(endpoint: str, response: httpx.Response) -> str:
        payload = OpenAICompatibleProvider._safe_json(response)
        if isinstance(payload, dict) and "error" in payload:
            detail = payload["error"]
            if isinstance(detail, dict) and "message" in detail:
                return f"{endpoint} {response.status_code}: {detail['message']}"
            return f"{endpoint} {response.status_code}: {detail}"
        return f"{endpoint} {response.status_code}"
