"""Plain text document buffer with a single selection."""

from __future__ import annotations

import logging

from .errors import QPAiApiError
from .models import TextSpan

__all__ = ["DocumentBuffer"]

logger = logging.getLogger(__name__)


class DocumentBuffer:
    """Text content plus a half-open selection ``[start, end)``.

    Stands in for the rich-text editor: the workflows only need to read
    spans, move the selection and replace ranges.
    """

    def __init__(self, text: str = "") -> None:
        self._text = text
        self._start = len(text)
        self._end = len(text)

    @property
    def text(self) -> str:
        return self._text

    @property
    def selection(self) -> TextSpan:
        """Snapshot of the current selection."""

        return TextSpan.from_text(self._text, self._start, self._end)

    @property
    def cursor(self) -> int:
        return self._end

    def span(self, start: int, end: int) -> TextSpan:
        self._check_range(start, end)
        return TextSpan.from_text(self._text, start, end)

    def select(self, start: int, end: int) -> TextSpan:
        self._check_range(start, end)
        self._start, self._end = start, end
        return self.selection

    def collapse(self, position: int) -> None:
        """Place the cursor at ``position`` with an empty selection."""

        self.select(position, position)

    def replace(self, start: int, end: int, text: str) -> None:
        """Replace ``[start, end)`` with ``text`` and put the cursor after it."""

        self._check_range(start, end)
        self._text = self._text[:start] + text + self._text[end:]
        self._start = self._end = start + len(text)
        logger.debug("Replaced range [%d:%d] with %d characters", start, end, len(text))

    def replace_selection(self, text: str) -> None:
        self.replace(self._start, self._end, text)

    def insert_at_cursor(self, text: str, start: int | None = None, end: int | None = None) -> None:
        """Insert ``text`` at the cursor, or over ``[start, end)`` when given.

        A non-empty selection is replaced, as a rich-text editor would.
        """

        if start is not None and end is not None:
            self.select(start, end)
        self.replace(self._start, self._end, text)

    def _check_range(self, start: int, end: int) -> None:
        if start < 0 or end > len(self._text) or start > end:
            raise QPAiApiError(
                f"Invalid text range [{start}:{end}] for a document of length {len(self._text)}"
            )
