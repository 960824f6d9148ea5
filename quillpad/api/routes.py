"""
Quillpad – API Routes
=====================

The search, chat and edit endpoints.

This file is a part of Quillpad
Copyright (C) 2025 Quillpad contributors

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by
the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful, but
WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the GNU
General Public License for more details.

You should have received a copy of the GNU General Public License
along with this program. If not, see <https://www.gnu.org/licenses/>.
"""
from __future__ import annotations

import logging
from typing import Any, Iterator

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from quillpad.ai.answer import AnswerEngine
from quillpad.ai.editing import suggest_edit
from quillpad.ai.errors import QPAiValidationError
from quillpad.ai.gateway import ProviderGateway
from quillpad.ai.models import EditAction
from quillpad.ai.session import EMPTY_REPLY_TEXT
from quillpad.api.exceptions import ERROR_TYPE_PROVIDER, classify_exception
from quillpad.api.models import (
    ChatRequest,
    ChatResponse,
    EditRequest,
    EditResponse,
    SearchRequest,
    SearchResponse,
)

logger = logging.getLogger(__name__)

SEARCH_FAILED_MESSAGE = "Failed to process search request"
CHAT_FAILED_MESSAGE = "Failed to process chat request. Please check your API payload."
EDIT_FAILED_MESSAGE = "Failed to generate AI suggestion. Please check your API key."

router = APIRouter()


def get_gateway(request: Request) -> Iterator[ProviderGateway]:
    """Yield a gateway for one request and release its HTTP clients afterwards."""
    gateway = request.app.state.gateway_factory()
    try:
        yield gateway
    finally:
        gateway.close()


def _error_response(exc: Exception, fallback_message: str,
                    details: dict[str, Any] | None = None) -> JSONResponse:
    error = classify_exception(exc, fallback_message, details)
    if error.error_type == ERROR_TYPE_PROVIDER:
        logger.warning("Provider failure: %s", exc)
    else:
        logger.debug("Request rejected with %d: %s", error.status_code, error.message)
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


@router.post("/agent/search", response_model=SearchResponse)
def agent_search(body: SearchRequest, gateway: ProviderGateway = Depends(get_gateway)):
    """Answer a query from web search results."""
    try:
        query = (body.query or "").strip()
        if not query:
            raise QPAiValidationError("Query is required", field="query")
        gateway.require_search()
        gateway.require_completion()
        bundle = AnswerEngine(gateway).answer(query)
    except Exception as exc:  # noqa: BLE001 - mapped onto an error response
        return _error_response(exc, SEARCH_FAILED_MESSAGE)
    return SearchResponse(**bundle.as_dict())


@router.post("/ai/chat", response_model=ChatResponse)
def ai_chat(body: ChatRequest, gateway: ProviderGateway = Depends(get_gateway)):
    """Forward a conversation to the completion provider."""
    try:
        if body.messages is None:
            raise QPAiValidationError("Messages are required", field="messages")
        gateway.require_completion()
        window = gateway.config.history_window
        messages = body.messages[-window:] if window > 0 else body.messages
        content = gateway.complete(messages, max_tokens=gateway.config.chat_max_tokens)
    except Exception as exc:  # noqa: BLE001 - mapped onto an error response
        return _error_response(exc, CHAT_FAILED_MESSAGE)
    return ChatResponse(content=content or EMPTY_REPLY_TEXT)


@router.post("/ai/edit", response_model=EditResponse)
def ai_edit(body: EditRequest, gateway: ProviderGateway = Depends(get_gateway)):
    """Rewrite a piece of text according to an edit action.

    A provider failure still carries the original text as the suggestion,
    so a client can fall back to leaving the document unchanged.
    """
    details = None
    try:
        if not body.text:
            raise QPAiValidationError("Text is required", field="text")
        action = EditAction.parse(body.action)
        details = {"suggestion": body.text, "original": body.text, "action": action.value}
        gateway.require_completion()
        suggestion = suggest_edit(gateway, action, body.text)
    except Exception as exc:  # noqa: BLE001 - mapped onto an error response
        return _error_response(exc, EDIT_FAILED_MESSAGE, details)
    return EditResponse(suggestion=suggestion, original=body.text, action=action.value)
