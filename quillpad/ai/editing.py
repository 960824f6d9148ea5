"""Selection edit workflow: request, preview, then confirm or cancel."""

from __future__ import annotations

import difflib
import logging
from dataclasses import dataclass
from enum import Enum
from threading import Lock
from typing import Optional

from .buffer import DocumentBuffer
from .errors import QPAiApiError, QPAiError, QPAiValidationError
from .gateway import ProviderGateway
from .models import EditAction, EditSuggestion, TextSpan
from .prompts import build_edit_prompt

__all__ = ["EditState", "EditPreview", "EditWorkflow", "suggest_edit"]

logger = logging.getLogger(__name__)


class EditState(str, Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    PREVIEWING = "previewing"


@dataclass(frozen=True)
class EditPreview:
    """Document text as it would read after confirming, with a unified diff."""

    text: str
    diff: str
    stats: dict[str, int]


def _compute_diff_payload(
    original: str,
    modified: str,
    *,
    from_label: str = "original",
    to_label: str = "suggested",
) -> tuple[str, dict[str, int]]:
    """Generate a unified diff and line statistics for the given text pair."""

    diff_lines = list(
        difflib.unified_diff(
            original.splitlines(keepends=True),
            modified.splitlines(keepends=True),
            fromfile=from_label,
            tofile=to_label,
            lineterm="",
        )
    )

    stats = {"lines_added": 0, "lines_removed": 0, "lines_changed": 0}
    for line in diff_lines:
        if line.startswith("+") and not line.startswith("+++"):
            stats["lines_added"] += 1
        elif line.startswith("-") and not line.startswith("---"):
            stats["lines_removed"] += 1
    stats["lines_changed"] = min(stats["lines_added"], stats["lines_removed"])

    return "".join(diff_lines) or "No changes", stats


def suggest_edit(
    gateway: ProviderGateway,
    action: EditAction | str,
    text: str,
    *,
    max_tokens: int | None = None,
) -> str:
    """Return the provider's rewrite of ``text``, or ``text`` itself when the reply is empty."""

    prompt = build_edit_prompt(action, text)
    reply = gateway.complete(
        [{"role": "user", "content": prompt}],
        max_tokens=max_tokens or gateway.config.edit_max_tokens,
    )
    return reply.strip() or text


class EditWorkflow:
    """Manages at most one pending suggestion against a document buffer.

    Only one provider call may be in flight at a time; a second request
    raises :class:`QPAiApiError` instead of queueing. A confirmed suggestion
    always replaces the span captured when it was requested, whatever the
    buffer's selection is at confirm time.
    """

    def __init__(
        self,
        gateway: ProviderGateway,
        buffer: DocumentBuffer,
        *,
        max_tokens: int | None = None,
    ) -> None:
        self._gateway = gateway
        self._buffer = buffer
        self._max_tokens = max_tokens or gateway.config.edit_max_tokens
        self._flight = Lock()
        self._state = EditState.IDLE
        self._pending: Optional[EditSuggestion] = None
        self.last_error: Optional[QPAiError] = None

    @property
    def state(self) -> EditState:
        return self._state

    @property
    def pending(self) -> Optional[EditSuggestion]:
        return self._pending

    @property
    def is_busy(self) -> bool:
        """True while a provider call is in flight; edit controls should be disabled."""

        return self._flight.locked()

    def request(self, action: EditAction | str, span: TextSpan | None = None) -> EditSuggestion:
        """Ask the provider for a suggestion for ``span`` (default: the selection)."""

        edit_action = EditAction.parse(action)
        source_span = span if span is not None else self._buffer.selection
        if source_span.is_empty:
            raise QPAiValidationError("Select some text before requesting an edit", field="text")

        if not self._flight.acquire(blocking=False):
            raise QPAiApiError("An edit request is already in flight")
        try:
            if self._pending is not None:
                logger.debug("Discarding unconfirmed suggestion %s", self._pending.id)
            self._pending = None
            self._state = EditState.REQUESTING
            self.last_error = None

            try:
                suggested_text = suggest_edit(
                    self._gateway, edit_action, source_span.text, max_tokens=self._max_tokens
                )
            except QPAiError as exc:
                logger.warning("Edit request '%s' failed: %s", edit_action.value, exc)
                self.last_error = exc
                return EditSuggestion(
                    original_text=source_span.text,
                    suggested_text=source_span.text,
                    action=edit_action,
                    source_span=source_span,
                    error=str(exc),
                )

            suggestion = EditSuggestion(
                original_text=source_span.text,
                suggested_text=suggested_text,
                action=edit_action,
                source_span=source_span,
            )
            self._pending = suggestion
            self._state = EditState.PREVIEWING
            return suggestion
        finally:
            if self._state is EditState.REQUESTING:
                self._state = EditState.IDLE
            self._flight.release()

    def preview(self) -> EditPreview:
        suggestion = self._require_pending()
        span = suggestion.source_span
        original = self._buffer.text
        preview_text = original[: span.start] + suggestion.suggested_text + original[span.end :]
        diff, stats = _compute_diff_payload(original, preview_text)
        return EditPreview(text=preview_text, diff=diff, stats=stats)

    def confirm(self) -> EditSuggestion:
        """Apply the pending suggestion to its recorded source span."""

        suggestion = self._require_pending()
        span = suggestion.source_span
        try:
            self._buffer.replace(span.start, span.end, suggestion.suggested_text)
        finally:
            self._pending = None
            self._state = EditState.IDLE
        logger.info("Applied '%s' suggestion %s to [%d:%d]", suggestion.action.value,
                    suggestion.id, span.start, span.end)
        return suggestion

    def cancel(self) -> Optional[EditSuggestion]:
        """Discard the pending suggestion; the buffer is never touched."""

        suggestion = self._pending
        self._pending = None
        if self._state is EditState.PREVIEWING:
            self._state = EditState.IDLE
        return suggestion

    def _require_pending(self) -> EditSuggestion:
        if self._state is not EditState.PREVIEWING or self._pending is None:
            raise QPAiApiError("There is no pending suggestion")
        return self._pending
