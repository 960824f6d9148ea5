"""Assistant sidebar session: chat turns, quick actions and web search."""

from __future__ import annotations

import logging
from threading import Lock
from typing import Callable, Optional

from .answer import AnswerEngine, deliver_answer
from .buffer import DocumentBuffer
from .directives import ApplyEdit, Insert, decode_directive
from .errors import QPAiApiError
from .gateway import ProviderGateway
from .memory import ConversationMemory
from .models import AnswerBundle, ChatMessage, TextSpan
from .prompts import QuickAction, build_quick_action_prompt

__all__ = [
    "ConversationSession",
    "EMPTY_REPLY_TEXT",
    "ERROR_REPLY_TEXT",
    "SELECT_FIRST_TEXT",
]

logger = logging.getLogger(__name__)

EMPTY_REPLY_TEXT = "Sorry, I could not process your request."
ERROR_REPLY_TEXT = "Sorry, I encountered an error. Please try again."
SELECT_FIRST_TEXT = "Please select some text first, then try the quick action."

TextCallback = Callable[[str], None]


class ConversationSession:
    """Owns one message history and routes input to chat or search.

    Every accepted user turn ends with exactly one assistant message. An
    ``[EDIT]`` or ``[INSERT]`` directive in the reply is stripped and the
    remaining text is handed to ``on_apply_edit`` or ``on_insert_text``;
    the edit directive wins when both are present.
    """

    def __init__(
        self,
        gateway: ProviderGateway,
        *,
        on_apply_edit: Optional[TextCallback] = None,
        on_insert_text: Optional[TextCallback] = None,
        history_window: int | None = None,
        max_tokens: int | None = None,
        answer_engine: Optional[AnswerEngine] = None,
    ) -> None:
        self._gateway = gateway
        self._on_apply_edit = on_apply_edit
        self._on_insert_text = on_insert_text
        self._history_window = (
            gateway.config.history_window if history_window is None else history_window
        )
        self._max_tokens = max_tokens or gateway.config.chat_max_tokens
        self._answer_engine = answer_engine or AnswerEngine(gateway)
        self._flight = Lock()
        self.memory = ConversationMemory()
        self.draft = ""

    @classmethod
    def for_buffer(cls, gateway: ProviderGateway, buffer: DocumentBuffer, **kwargs) -> "ConversationSession":
        """Create a session whose directives mutate ``buffer``."""

        return cls(
            gateway,
            on_apply_edit=buffer.replace_selection,
            on_insert_text=buffer.insert_at_cursor,
            **kwargs,
        )

    @property
    def messages(self) -> list[ChatMessage]:
        return self.memory.messages

    @property
    def is_busy(self) -> bool:
        return self._flight.locked()

    def submit(self, text: str) -> Optional[ChatMessage]:
        """Send ``text`` as a user turn and return the assistant reply.

        Blank input is ignored and returns ``None``.
        """

        if not text or not text.strip():
            return None

        self._acquire()
        try:
            self.memory.append("user", text)
            window = self.memory.window(self._history_window)
            try:
                reply = self._gateway.complete(
                    [message.as_payload() for message in window],
                    max_tokens=self._max_tokens,
                )
            except Exception as exc:  # noqa: BLE001 - every turn gets a reply
                logger.warning("Chat completion failed: %s", exc)
                return self.memory.append("assistant", ERROR_REPLY_TEXT)

            directive = decode_directive(reply or EMPTY_REPLY_TEXT)
            kind = "edit" if isinstance(directive, (ApplyEdit, Insert)) else "text"
            content = directive.text if directive.text.strip() else EMPTY_REPLY_TEXT
            message = self.memory.append("assistant", content, kind=kind)
        finally:
            self._flight.release()

        if isinstance(directive, ApplyEdit) and self._on_apply_edit is not None:
            self._on_apply_edit(directive.text)
        elif isinstance(directive, Insert) and self._on_insert_text is not None:
            self._on_insert_text(directive.text)
        return message

    def quick_action(self, action: QuickAction | str, selection: TextSpan | None) -> Optional[ChatMessage]:
        """Run a canned request against the selected text."""

        if selection is None or selection.is_empty or not selection.text:
            return self.memory.append("assistant", SELECT_FIRST_TEXT)
        return self.submit(build_quick_action_prompt(action, selection.text))

    def search(self, query: str, buffer: DocumentBuffer | None = None) -> AnswerBundle:
        """Answer ``query`` from the web and deliver the answer.

        With a buffer the answer is inserted at its cursor when the model
        asked for insertion; otherwise it becomes the session's draft.
        """

        self._acquire()
        try:
            bundle = self._answer_engine.answer(query)
        finally:
            self._flight.release()

        if buffer is not None:
            deliver_answer(bundle, buffer, self)
        elif not bundle.should_insert:
            self.draft = bundle.text
        return bundle

    def take_draft(self) -> str:
        """Return and clear the staged input text."""

        draft, self.draft = self.draft, ""
        return draft

    def clear(self) -> None:
        self.memory.clear()
        self.draft = ""

    def _acquire(self) -> None:
        if not self._flight.acquire(blocking=False):
            raise QPAiApiError("A request is already in flight for this session")
