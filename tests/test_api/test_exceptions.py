"""
Quillpad – API Exception Tests
==============================

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

import pytest

from quillpad.ai.errors import QPAiApiError, QPAiConfigError, QPAiProviderError, QPAiValidationError
from quillpad.api.exceptions import APIError, classify_exception

FALLBACK = "Failed to process chat request. Please check your API payload."


def test_validation_errors_are_client_errors() -> None:
    error = classify_exception(QPAiValidationError("Query is required", field="query"), FALLBACK)

    assert error.status_code == 400
    assert error.to_dict() == {"error": "Query is required", "error_type": "validation", "field": "query"}


def test_configuration_errors_keep_their_message() -> None:
    error = classify_exception(
        QPAiConfigError("GROQ_API_KEY not found in environment variables"), FALLBACK,
        details={"suggestion": "ignored"},
    )

    assert error.status_code == 500
    assert error.to_dict() == {
        "error": "GROQ_API_KEY not found in environment variables",
        "error_type": "configuration",
    }


def test_provider_errors_use_fallback_message_and_details() -> None:
    error = classify_exception(
        QPAiProviderError("/chat/completions 401: Invalid API Key"), FALLBACK,
        details={"original": "text"},
    )

    assert error.status_code == 500
    assert error.to_dict() == {"error": FALLBACK, "error_type": "provider", "original": "text"}


@pytest.mark.parametrize("exc", [RuntimeError("boom"), QPAiApiError("bad state")])
def test_unexpected_errors_are_logged(exc: Exception, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.ERROR, logger="quillpad.api.exceptions"):
        error = classify_exception(exc, FALLBACK)

    assert error.status_code == 500
    assert error.error_type == "internal"
    assert error.message == FALLBACK
    assert "Unexpected error at API boundary" in caplog.text


def test_api_errors_pass_through() -> None:
    original = APIError("Teapot", 418, "validation")

    assert classify_exception(original, FALLBACK) is original
