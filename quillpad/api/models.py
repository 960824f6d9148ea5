"""
Quillpad – API Models
=====================

Request and response bodies of the HTTP endpoints.

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

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class SearchRequest(BaseModel):
    """Body of ``POST /api/agent/search``."""

    model_config = ConfigDict(extra="ignore")

    query: Optional[str] = None


class SearchResultModel(BaseModel):
    title: str
    url: str
    snippet: str
    source: str


class SearchResponse(BaseModel):
    text: str
    searchResults: list[SearchResultModel] = Field(default_factory=list)
    shouldInsert: bool = False


class ChatRequest(BaseModel):
    """Body of ``POST /api/ai/chat``; messages may carry extra UI fields."""

    model_config = ConfigDict(extra="ignore")

    messages: Optional[list[dict[str, Any]]] = None


class ChatResponse(BaseModel):
    content: str


class EditRequest(BaseModel):
    """Body of ``POST /api/ai/edit``."""

    model_config = ConfigDict(extra="ignore")

    text: Optional[str] = None
    action: Optional[str] = None
    context: Optional[str] = None


class EditResponse(BaseModel):
    suggestion: str
    original: str
    action: str


class HealthResponse(BaseModel):
    status: str
    completion_configured: bool
    search_configured: bool
