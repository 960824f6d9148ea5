"""Tests for the document buffer."""
from __future__ import annotations

import pytest

from quillpad.ai.buffer import DocumentBuffer
from quillpad.ai.errors import QPAiApiError


def test_new_buffer_places_cursor_at_end() -> None:
    buffer = DocumentBuffer("Hello world")

    assert buffer.cursor == 11
    assert buffer.selection.is_empty
    assert buffer.selection.text == ""


def test_select_and_replace_selection() -> None:
    buffer = DocumentBuffer("Hello world")

    span = buffer.select(6, 11)
    assert span.text == "world"
    assert span.as_dict() == {"text": "world", "from": 6, "to": 11, "isEmpty": False}

    buffer.replace_selection("there")
    assert buffer.text == "Hello there"
    assert buffer.cursor == 11
    assert buffer.selection.is_empty


def test_insert_at_cursor() -> None:
    buffer = DocumentBuffer("Intro.")
    buffer.collapse(0)

    buffer.insert_at_cursor("Title\n")
    assert buffer.text == "Title\nIntro."
    assert buffer.cursor == 6

    buffer.insert_at_cursor("Lead.", start=6, end=12)
    assert buffer.text == "Title\nLead."


def test_span_snapshot_does_not_follow_later_changes() -> None:
    buffer = DocumentBuffer("abcdef")
    span = buffer.span(0, 3)

    buffer.replace(0, 6, "xyz")

    assert span.text == "abc"
    assert buffer.text == "xyz"


@pytest.mark.parametrize(("start", "end"), [(-1, 2), (3, 2), (0, 99)])
def test_invalid_ranges_are_rejected(start: int, end: int) -> None:
    buffer = DocumentBuffer("short")

    with pytest.raises(QPAiApiError):
        buffer.select(start, end)
