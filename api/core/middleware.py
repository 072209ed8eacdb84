"""
HTTP middleware: request-id tagging, request logging and CORS.

Order matters. Request id is outermost so every log line and response
(including CORS preflights and 500s) carries it. Unexpected exceptions are
rendered innermost, inside CORS.
"""

from __future__ import annotations

import logging
import time
import uuid
from http import HTTPStatus
from typing import Awaitable, Callable

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from . import config, errors

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

CallNext = Callable[[Request], Awaitable[Response]]


def _status_text(code: int) -> str:
    try:
        return HTTPStatus(code).phrase
    except ValueError:
        return ""


def _level_for(code: int) -> int:
    if code >= 500:
        return logging.ERROR
    if code >= 400:
        return logging.WARNING
    return logging.INFO


async def log_request(request: Request, call_next: CallNext) -> Response:
    remote_addr = request.client.host if request.client else "-"
    request_id = getattr(request.state, "request_id", None)
    logger.info(
        "started %s %s remote_addr=%s request_id=%s",
        request.method,
        request.url.path,
        remote_addr,
        request_id,
    )

    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000.0

    logger.log(
        _level_for(response.status_code),
        "completed with %d %s in %.2fms remote_addr=%s request_id=%s",
        response.status_code,
        _status_text(response.status_code),
        elapsed_ms,
        remote_addr,
        request_id,
    )
    return response


async def set_request_id(request: Request, call_next: CallNext) -> Response:
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers[REQUEST_ID_HEADER] = request_id
    return response


def install_middleware(app: FastAPI) -> None:
    # Starlette runs the last-added middleware first.
    app.middleware("http")(errors.render_unhandled_errors)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[config.cors_origin()],
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "PUT", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
    app.middleware("http")(log_request)
    app.middleware("http")(set_request_id)
