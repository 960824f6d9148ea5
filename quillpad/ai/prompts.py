"""Instruction templates sent to the completion provider."""

from __future__ import annotations

from enum import Enum
from typing import Iterable

from .directives import INSERT_MARKER
from .errors import QPAiValidationError
from .models import EditAction, SearchResult

__all__ = [
    "QuickAction",
    "build_edit_prompt",
    "build_quick_action_prompt",
    "build_search_context",
    "build_answer_prompt",
]

_EDIT_TEMPLATES: dict[EditAction, str] = {
    EditAction.SHORTEN: 'Please shorten the following text while keeping the main points: "{text}"',
    EditAction.EXPAND: 'Please expand the following text with more details and examples: "{text}"',
    EditAction.CONVERT_TO_TABLE: 'Convert the following text into a well-formatted table: "{text}"',
    EditAction.IMPROVE_STYLE: 'Improve the writing style and flow of the following text: "{text}"',
    EditAction.GENERAL_EDIT: 'Please edit and improve the following text: "{text}"',
}


class QuickAction(str, Enum):
    """Canned chat requests offered for the current selection."""

    GRAMMAR = "grammar"
    SUMMARIZE = "summarize"
    EXPAND = "expand"


_QUICK_ACTION_TEMPLATES: dict[QuickAction, str] = {
    QuickAction.GRAMMAR: 'Please check and fix any grammar errors in this text: "{text}"',
    QuickAction.SUMMARIZE: 'Please provide a summary of this text: "{text}"',
    QuickAction.EXPAND: 'Please expand on this text with more details: "{text}"',
}

_ANSWER_TEMPLATE = """Based on the following search results, provide a comprehensive answer to the user's query: "{query}"

Search Results:
{context}

Please provide a well-structured response that:
1. Directly answers the user's question
2. Incorporates relevant information from the search results
3. Cites sources when appropriate
4. Is ready to be inserted into a document

If the response should be inserted into the document, end with {marker} tag."""


def build_edit_prompt(action: EditAction | str, text: str) -> str:
    """Return the instruction for applying ``action`` to ``text``."""

    return _EDIT_TEMPLATES[EditAction.parse(action)].format(text=text)


def build_quick_action_prompt(action: QuickAction | str, text: str) -> str:
    try:
        key = QuickAction(action)
    except ValueError as exc:
        raise QPAiValidationError(f"Unsupported quick action '{action}'", field="action") from exc
    return _QUICK_ACTION_TEMPLATES[key].format(text=text)


def build_search_context(results: Iterable[SearchResult]) -> str:
    """Join ``title: snippet`` of each result with blank lines, in order."""

    return "\n\n".join(f"{result.title}: {result.snippet}" for result in results)


def build_answer_prompt(query: str, context: str) -> str:
    return _ANSWER_TEMPLATE.format(query=query, context=context, marker=INSERT_MARKER)
