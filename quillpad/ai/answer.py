"""Search-augmented answer generation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .directives import strip_insert_marker
from .gateway import ProviderGateway
from .models import AnswerBundle
from .prompts import build_answer_prompt, build_search_context

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .buffer import DocumentBuffer
    from .session import ConversationSession

__all__ = ["AnswerEngine", "deliver_answer", "APOLOGY_TEXT", "EMPTY_ANSWER_TEXT"]

logger = logging.getLogger(__name__)

APOLOGY_TEXT = "Sorry, I encountered an error while processing your request."
EMPTY_ANSWER_TEXT = "No response generated"


class AnswerEngine:
    """Runs search, then synthesis, strictly in sequence.

    :meth:`answer` never raises: an empty result set still goes to
    synthesis, and any other failure yields the fixed apology bundle.
    """

    def __init__(self, gateway: ProviderGateway, *, max_tokens: int | None = None) -> None:
        self._gateway = gateway
        self._max_tokens = max_tokens or gateway.config.answer_max_tokens

    def answer(self, query: str) -> AnswerBundle:
        try:
            results = self._gateway.search(query)
            context = build_search_context(results)
            reply = self._gateway.complete(
                [{"role": "user", "content": build_answer_prompt(query, context)}],
                max_tokens=self._max_tokens,
            )
        except Exception as exc:  # noqa: BLE001 - answer generation fails soft
            logger.warning("Answer generation failed for query: %s", exc)
            return AnswerBundle(text=APOLOGY_TEXT, search_results=[], should_insert=False)

        text, should_insert = strip_insert_marker(reply or EMPTY_ANSWER_TEXT)
        text = text or EMPTY_ANSWER_TEXT
        logger.debug("Synthesised answer from %d results (insert=%s)", len(results), should_insert)
        return AnswerBundle(text=text, search_results=results, should_insert=should_insert)


def deliver_answer(
    bundle: AnswerBundle,
    buffer: "DocumentBuffer",
    session: "ConversationSession",
) -> bool:
    """Insert the answer at the cursor, or stage it as the session's draft.

    Returns ``True`` when the buffer was changed.
    """

    if bundle.should_insert:
        buffer.insert_at_cursor(bundle.text)
        return True
    session.draft = bundle.text
    return False
