"""Core AI domain package for Quillpad."""

from .answer import AnswerEngine, deliver_answer
from .buffer import DocumentBuffer
from .config import AIConfig
from .editing import EditState, EditWorkflow
from .errors import (
    QPAiApiError,
    QPAiConfigError,
    QPAiError,
    QPAiProviderError,
    QPAiValidationError,
)
from .gateway import ProviderGateway
from .memory import ConversationMemory
from .models import AnswerBundle, ChatMessage, EditAction, EditSuggestion, SearchResult, TextSpan
from .session import ConversationSession

__all__ = [
    "AIConfig",
    "ProviderGateway",
    "DocumentBuffer",
    "EditWorkflow",
    "EditState",
    "AnswerEngine",
    "deliver_answer",
    "ConversationMemory",
    "ConversationSession",
    "QPAiError",
    "QPAiApiError",
    "QPAiProviderError",
    "QPAiConfigError",
    "QPAiValidationError",
    "TextSpan",
    "EditAction",
    "EditSuggestion",
    "ChatMessage",
    "SearchResult",
    "AnswerBundle",
]
