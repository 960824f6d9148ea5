"""Error hierarchy shared by the Quillpad AI domain layer."""

from __future__ import annotations

__all__ = [
    "QPAiError",
    "QPAiProviderError",
    "QPAiApiError",
    "QPAiConfigError",
    "QPAiValidationError",
]


class QPAiError(Exception):
    """Base error for all AI domain failures."""


class QPAiProviderError(QPAiError):
    """Raised when a provider backend fails or behaves unexpectedly."""


class QPAiApiError(QPAiError):
    """Raised when a workflow detects invalid usage or state."""


class QPAiConfigError(QPAiError):
    """Raised when AI-specific configuration values are missing or invalid."""


class QPAiValidationError(QPAiError):
    """Raised when a required input field is missing or malformed."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field
