"""
Quillpad – API Application
==========================

Application factory for the HTTP endpoints.

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
from typing import TYPE_CHECKING, Callable, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from quillpad import __version__
from quillpad.ai.config import AIConfig
from quillpad.ai.gateway import ProviderGateway
from quillpad.api.exceptions import ERROR_TYPE_VALIDATION, APIError
from quillpad.api.models import HealthResponse
from quillpad.api.routes import router

if TYPE_CHECKING:  # pragma: no cover - typing only
    import httpx

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[AIConfig] = None,
    *,
    transport: "httpx.BaseTransport" | None = None,
    gateway_factory: Optional[Callable[[], ProviderGateway]] = None,
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        config: AI configuration, read from the environment if omitted
        transport: Optional httpx transport shared by all provider clients
        gateway_factory: Optional callable returning a gateway per request

    """
    if config is None:
        config = AIConfig.from_env()

    app = FastAPI(
        title="Quillpad",
        description="AI-assisted editing, chat and search-augmented answers",
        version=__version__,
    )
    app.state.config = config
    app.state.gateway_factory = gateway_factory or (
        lambda: ProviderGateway(config, transport=transport)
    )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.debug("Malformed request body on %s: %s", request.url.path, exc.errors())
        error = APIError("Malformed request body", 400, ERROR_TYPE_VALIDATION)
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    app.include_router(router, prefix="/api")

    @app.get("/health", response_model=HealthResponse)
    def health_check() -> HealthResponse:
        """Report which credentials are configured."""
        return HealthResponse(
            status="healthy",
            completion_configured=config.completion_configured,
            search_configured=config.search_configured,
        )

    if not config.completion_configured:
        logger.warning("No completion API key configured; AI endpoints will fail")
    return app
