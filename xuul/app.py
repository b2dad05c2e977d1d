"""Application assembly and the server entry point."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from dotenv import find_dotenv, load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from xuul import config
from xuul.config import ConfigError
from xuul.frontend import create_frontend_router
from xuul.logger import init_logging
from xuul.response import AppError, JsonResponse, PathError, QueryError
from xuul.routes import create_api_router
from xuul.state import create_state

log = logging.getLogger(__name__)

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = "3000"
GREETING = "Hello xuul!"
JSON_MEDIA_TYPE = "application/json; charset=utf-8"


def _render(response: JsonResponse) -> JSONResponse:
    return JSONResponse(
        response.to_dict(), status_code=response.code, media_type=JSON_MEDIA_TYPE
    )


def _describe(exc: RequestValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', '')}"
        for err in exc.errors()
    )


async def _app_error_handler(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, AppError)
    return _render(exc.to_response())


async def _validation_handler(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, RequestValidationError)
    in_path = any(err.get("loc", ("",))[0] == "path" for err in exc.errors())
    if in_path:
        failure: AppError = PathError(f"Invalid URL: {_describe(exc)}")
    else:
        failure = QueryError(f"Failed to deserialize query string: {_describe(exc)}")
    return _render(failure.to_response())


def create_app(state: Any = None) -> FastAPI:
    """Build the application; without ``state`` it is created at startup and closed at shutdown."""
    log.info("creating app")

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if state is not None:
            yield
            return
        owned = create_state()
        app.state.xuul = owned
        try:
            yield
        finally:
            await owned.aclose()

    app = FastAPI(lifespan=lifespan)
    if state is not None:
        app.state.xuul = state

    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=".*",
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[],
    )
    app.add_exception_handler(AppError, _app_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_handler)

    @app.get("/api", response_class=PlainTextResponse)
    async def _greeting() -> str:
        return GREETING

    app.include_router(create_api_router(), prefix="/api")
    app.include_router(create_frontend_router(), prefix="/api/v1")
    return app


def main(argv: list[str] | None = None) -> int:
    """Load configuration and serve the application."""
    parser = argparse.ArgumentParser(prog="xuul", description="Run the API server.")
    parser.add_argument("--host", help="address to bind (default: SERVER_HOST)")
    parser.add_argument("--port", type=int, help="port to bind (default: SERVER_PORT)")
    args = parser.parse_args(argv)

    env_file = find_dotenv(usecwd=True)
    if env_file:
        load_dotenv(env_file)
    init_logging()
    try:
        config.read_env()
    except ConfigError as exc:
        log.error("cannot read configuration: %s", exc)
        print(f"xuul: cannot read configuration: {exc}", file=sys.stderr)
        return 1

    host = args.host or config.get("SERVER_HOST", DEFAULT_HOST)
    port = args.port if args.port is not None else int(config.get("SERVER_PORT", DEFAULT_PORT))
    log.info("listening on http://%s:%s", host, port)
    uvicorn.run(create_app(), host=host, port=port)
    return 0