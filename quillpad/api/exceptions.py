"""
Quillpad – API Exceptions
=========================

Unified error responses for the HTTP endpoints.

This file is a part of Quillpad
Copyright (C) 2025 Quillpad contributors

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by
the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful, but
WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the GNU
General Public License for more details.

You should have received a copy of the GNU General Public License
along with this program. If not, see <https://www.gnu.org/licenses/>.
"""
from __future__ import annotations

import logging
from typing import Any

from quillpad.ai.errors import (
    QPAiConfigError,
    QPAiProviderError,
    QPAiValidationError,
)

logger = logging.getLogger(__name__)

ERROR_TYPE_VALIDATION = "validation"
ERROR_TYPE_CONFIGURATION = "configuration"
ERROR_TYPE_PROVIDER = "provider"
ERROR_TYPE_INTERNAL = "internal"


class APIError(Exception):
    """Error that is safe to return to an HTTP client."""

    def __init__(self, message: str, status_code: int = 500,
                 error_type: str = ERROR_TYPE_INTERNAL,
                 details: dict[str, Any] | None = None) -> None:
        """Initialize an API error.

        Args:
            message: Human-readable error message
            status_code: HTTP status code of the response
            error_type: Stable category clients can branch on
            details: Extra fields merged into the response body

        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_type = error_type
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert the error to the JSON response body."""
        body: dict[str, Any] = {"error": self.message, "error_type": self.error_type}
        body.update(self.details)
        return body


def classify_exception(exc: Exception, fallback_message: str,
                       details: dict[str, Any] | None = None) -> APIError:
    """Map any exception onto an :class:`APIError`.

    Validation and configuration messages are user facing and pass through.
    Provider and unexpected failures are replaced by ``fallback_message``.
    ``details`` carries the fallback payload of provider and internal failures.

    Args:
        exc: The exception caught at the endpoint boundary
        fallback_message: Safe message for provider and internal failures
        details: Fallback payload for provider and internal failures

    """
    if isinstance(exc, APIError):
        return exc
    if isinstance(exc, QPAiValidationError):
        extra = {"field": exc.field} if exc.field else None
        return APIError(str(exc), 400, ERROR_TYPE_VALIDATION, extra)
    if isinstance(exc, QPAiConfigError):
        return APIError(str(exc), 500, ERROR_TYPE_CONFIGURATION)
    if isinstance(exc, QPAiProviderError):
        return APIError(fallback_message, 500, ERROR_TYPE_PROVIDER, details)
    logger.error("Unexpected error at API boundary: %s", exc, exc_info=exc)
    return APIError(fallback_message, 500, ERROR_TYPE_INTERNAL, details)
