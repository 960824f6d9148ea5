"""Data transfer objects shared across the Quillpad AI domain layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from .errors import QPAiValidationError

__all__ = [
    "TextSpan",
    "EditAction",
    "EditSuggestion",
    "ChatMessage",
    "SearchResult",
    "AnswerBundle",
]


@dataclass(frozen=True)
class TextSpan:
    """Snapshot of a half-open ``[start, end)`` range of a document.

    The text is copied at observation time and goes stale when the
    document changes afterwards.
    """

    text: str
    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.start > self.end:
            raise QPAiValidationError(
                f"Invalid text span [{self.start}:{self.end}]", field="span"
            )

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    @classmethod
    def from_text(cls, document: str, start: int, end: int) -> "TextSpan":
        """Snapshot the range ``[start, end)`` of ``document``."""

        return cls(text=document[start:end], start=start, end=end)

    def as_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "from": self.start,
            "to": self.end,
            "isEmpty": self.is_empty,
        }


class EditAction(str, Enum):
    """Closed set of selection edits offered by the floating toolbar."""

    SHORTEN = "shorten"
    EXPAND = "expand"
    CONVERT_TO_TABLE = "convert_to_table"
    IMPROVE_STYLE = "improve_style"
    GENERAL_EDIT = "general_edit"

    @classmethod
    def parse(cls, value: Any) -> "EditAction":
        """Return the action named by ``value`` or raise a validation error."""

        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or "").strip())
        except ValueError as exc:
            raise QPAiValidationError(f"Unsupported edit action '{value}'", field="action") from exc


@dataclass
class EditSuggestion:
    """Pending replacement for the span an edit was requested on."""

    original_text: str
    suggested_text: str
    action: EditAction
    source_span: TextSpan
    id: str = field(default_factory=lambda: uuid4().hex)
    error: Optional[str] = None

    @property
    def is_fallback(self) -> bool:
        return self.error is not None

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "original": self.original_text,
            "suggestion": self.suggested_text,
            "action": self.action.value,
            "span": self.source_span.as_dict(),
        }
        if self.error:
            payload["error"] = self.error
        return payload


@dataclass(frozen=True)
class ChatMessage:
    """Single immutable entry of a conversation history."""

    role: str
    content: str
    id: str = field(default_factory=lambda: uuid4().hex)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    kind: str = "text"

    def __post_init__(self) -> None:
        if self.role not in ("user", "assistant"):
            raise QPAiValidationError(f"Unsupported message role '{self.role}'", field="role")
        if self.kind not in ("text", "edit"):
            raise QPAiValidationError(f"Unsupported message kind '{self.kind}'", field="kind")

    def as_payload(self) -> dict[str, str]:
        """Return the provider-facing view of the message."""

        return {"role": self.role, "content": self.content}

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "role": self.role,
            "content": self.content,
            "timestamp": self.timestamp.isoformat(),
            "type": self.kind,
        }


@dataclass(frozen=True)
class SearchResult:
    """Normalised web search hit."""

    title: str
    url: str
    snippet: str
    source: str

    def as_dict(self) -> dict[str, str]:
        return {
            "title": self.title,
            "url": self.url,
            "snippet": self.snippet,
            "source": self.source,
        }


@dataclass
class AnswerBundle:
    """Synthesised answer with the evidence it was built from."""

    text: str
    search_results: list[SearchResult] = field(default_factory=list)
    should_insert: bool = False

    def as_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "searchResults": [result.as_dict() for result in self.search_results],
            "shouldInsert": self.should_insert,
        }
