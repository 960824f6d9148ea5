"""Conversation history for the assistant sidebar."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List
from uuid import uuid4

from .models import ChatMessage

logger = logging.getLogger(__name__)


class ConversationMemory:
    """Append-only, ordered message history for one UI session.

    The history itself is never truncated; :meth:`window` bounds what is
    sent to the completion provider on each turn.
    """

    def __init__(self) -> None:
        self._messages: List[ChatMessage] = []
        self._session_id = uuid4().hex
        self._created_at = datetime.now(timezone.utc)

        logger.debug("ConversationMemory initialized, session_id=%s", self._session_id)

    @property
    def session_id(self) -> str:
        """Get the current session identifier."""
        return self._session_id

    @property
    def created_at(self) -> datetime:
        """Get session creation timestamp."""
        return self._created_at

    @property
    def messages(self) -> List[ChatMessage]:
        """Copy of the full history, oldest first."""
        return list(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def append(self, role: str, content: str, *, kind: str = "text") -> ChatMessage:
        """Create a message and add it to the end of the history."""
        message = ChatMessage(role=role, content=content, kind=kind)
        self._messages.append(message)

        logger.debug("Added %s message %s (session: %s)", role, message.id, self._session_id)

        return message

    def window(self, count: int) -> List[ChatMessage]:
        """Get the most recent ``count`` messages, oldest first.

        A non-positive ``count`` returns the whole history.
        """
        if count <= 0:
            return list(self._messages)
        return self._messages[-count:]

    def clear(self) -> None:
        """Drop all messages and start a new session."""
        old_session_id = self._session_id
        self._messages.clear()
        self._session_id = uuid4().hex
        self._created_at = datetime.now(timezone.utc)

        logger.info("Cleared conversation memory. Old session: %s, New session: %s",
                    old_session_id, self._session_id)

    def summary(self) -> Dict[str, Any]:
        """Get a summary of current memory state."""
        role_counts: Dict[str, int] = {}
        for message in self._messages:
            role_counts[message.role] = role_counts.get(message.role, 0) + 1

        return {
            "session_id": self._session_id,
            "created_at": self._created_at.isoformat(),
            "total_messages": len(self._messages),
            "role_distribution": role_counts,
            "oldest_message": self._messages[0].timestamp.isoformat() if self._messages else None,
            "newest_message": self._messages[-1].timestamp.isoformat() if self._messages else None,
        }
