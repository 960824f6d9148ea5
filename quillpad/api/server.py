"""
Quillpad – API Server
=====================

Runs the HTTP application with uvicorn.

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

import argparse
import logging
from typing import Optional, Sequence

import uvicorn
from fastapi import FastAPI

from quillpad.ai.config import AIConfig
from quillpad.api.app import create_app

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000

_app: Optional[FastAPI] = None


def get_app() -> FastAPI:
    """Get the current application instance, creating it on first use."""
    global _app
    if _app is None:
        _app = create_app()
    return _app


def run_server(host: str = DEFAULT_HOST, port: int = DEFAULT_PORT, reload: bool = False) -> None:
    """Serve the application until interrupted."""
    logger.info("Starting Quillpad server on %s:%d", host, port)
    uvicorn.run(
        "quillpad.api.server:get_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Entry point of the ``quillpad-server`` console script."""
    parser = argparse.ArgumentParser(prog="quillpad-server", description=__doc__.strip().splitlines()[0])
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--reload", action="store_true")
    args = parser.parse_args(argv)

    config = AIConfig.from_env()
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="[%(asctime)s] %(name)s:%(lineno)d %(levelname)s: %(message)s",
    )
    run_server(args.host, args.port, args.reload)


if __name__ == "__main__":
    main()
