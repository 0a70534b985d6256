"""Cross-cutting HTTP behavior: CORS, request logging and validation error mapping."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware

logger = logging.getLogger(__name__)

CORS_ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"]
CORS_ALLOWED_HEADERS = ["Content-Type", "Authorization"]


def install_cors(app: FastAPI, *, allow_origins: list[str]) -> None:
    """Allow browser clients from configured origins."""

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_methods=CORS_ALLOWED_METHODS,
        allow_headers=CORS_ALLOWED_HEADERS,
    )


def install_request_logging(app: FastAPI) -> None:
    """Log one line per incoming request."""

    @app.middleware("http")
    async def log_request(
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        host = request.client.host if request.client is not None else "unknown"
        logger.info(
            "http_request method=%s path=%s host=%s",
            request.method,
            request.url.path,
            host,
        )
        return await call_next(request)


def install_validation_error_handler(app: FastAPI) -> None:
    """Report malformed request payloads and parameters as 400 Bad Request."""

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        logger.info(
            "http_request_rejected method=%s path=%s errors=%d",
            request.method,
            request.url.path,
            len(exc.errors()),
        )
        return JSONResponse(
            status_code=400,
            content={"detail": jsonable_encoder(_strip_inputs(exc.errors()))},
        )


def _strip_inputs(errors: object) -> list[dict[str, object]]:
    """Drop echoed input values so submitted passwords never appear in responses."""

    stripped: list[dict[str, object]] = []
    for error in errors if isinstance(errors, (list, tuple)) else []:
        if not isinstance(error, dict):
            continue
        stripped.append(
            {key: value for key, value in error.items() if key not in {"input", "ctx", "url"}}
        )
    return stripped
