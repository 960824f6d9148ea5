"""Decoding of the in-band directive markers found in generated text.

Markers are matched as plain, case-sensitive substrings. When a message
carries both markers only the edit directive is acted on.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

__all__ = [
    "EDIT_MARKER",
    "INSERT_MARKER",
    "NoDirective",
    "ApplyEdit",
    "Insert",
    "Directive",
    "decode_directive",
    "strip_insert_marker",
]

EDIT_MARKER = "[EDIT]"
INSERT_MARKER = "[INSERT]"


@dataclass(frozen=True)
class NoDirective:
    text: str


@dataclass(frozen=True)
class ApplyEdit:
    """Replace the current selection with ``text``."""

    text: str


@dataclass(frozen=True)
class Insert:
    """Insert ``text`` at the cursor."""

    text: str


Directive = Union[NoDirective, ApplyEdit, Insert]


def _strip_markers(text: str) -> str:
    # Removing one marker may join the halves of another
    while EDIT_MARKER in text or INSERT_MARKER in text:
        for marker in (EDIT_MARKER, INSERT_MARKER):
            text = text.replace(marker, "")
    return text.strip()


def decode_directive(text: str) -> Directive:
    """Classify ``text`` and strip every directive marker from it.

    A marker with nothing left around it is no directive at all.
    """

    if EDIT_MARKER not in text and INSERT_MARKER not in text:
        return NoDirective(text)
    payload = _strip_markers(text)
    if not payload:
        return NoDirective(payload)
    if EDIT_MARKER in text:
        return ApplyEdit(payload)
    return Insert(payload)


def strip_insert_marker(text: str) -> tuple[str, bool]:
    """Return ``text`` without directive markers and whether it asked for insertion."""

    should_insert = INSERT_MARKER in text
    if not should_insert and EDIT_MARKER not in text:
        return text, False
    cleaned = _strip_markers(text)
    return cleaned, should_insert and bool(cleaned)
