"""
Error types shared across features and the handlers that render them.

Every error response body has the same shape: {"error": "<message>"}.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)

MSG_NOT_AUTHENTICATED = "not authenticated"
MSG_INCORRECT_EMAIL_OR_PASSWORD = "incorrect email or password"
MSG_NO_PERMISSION = "no permission"
MSG_RECORD_NOT_FOUND = "record not found"
MSG_INTERNAL = "internal server error"

# pydantic error types for a body that decoded fine but is not an object.
_NOT_AN_OBJECT_TYPES = {"model_type", "model_attributes_type", "dict_type"}


class StoreError(RuntimeError):
    pass


class RecordNotFoundError(StoreError):
    def __init__(self, message: str = MSG_RECORD_NOT_FOUND) -> None:
        super().__init__(message)


class DuplicateEmailError(StoreError):
    def __init__(self, message: str = "email is already registered") -> None:
        super().__init__(message)


def error_response(status_code: int, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def _format_validation_errors(errors: list[dict]) -> str:
    parts: list[str] = []
    for err in errors:
        # loc is ("body", "header"), ("path", "post_id"), ...
        loc = [str(x) for x in err.get("loc", ()) if x not in ("body", "path", "query")]
        field = ".".join(loc)
        msg = str(err.get("msg") or "invalid value")
        parts.append(f"{field}: {msg}" if field else msg)
    return "; ".join(parts) or "invalid request"


async def _http_exception_handler(_: Request, exc: HTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def _validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    errors = list(exc.errors())
    if any(err.get("type") == "json_invalid" for err in errors):
        return error_response(status.HTTP_400_BAD_REQUEST, "malformed JSON body")
    if any(
        err.get("type") in _NOT_AN_OBJECT_TYPES and tuple(err.get("loc", ())) == ("body",)
        for err in errors
    ):
        return error_response(status.HTTP_400_BAD_REQUEST, "request body must be a JSON object")
    return error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, _format_validation_errors(errors))


async def _duplicate_email_handler(_: Request, exc: DuplicateEmailError) -> JSONResponse:
    return error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, str(exc))


async def _store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    logger.warning(
        "store_error path=%s request_id=%s error=%s",
        request.url.path,
        getattr(request.state, "request_id", None),
        exc,
    )
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))


async def render_unhandled_errors(request: Request, call_next) -> Response:
    """
    Innermost HTTP middleware. Unexpected exceptions become the generic 500
    body here, so the outer middleware still tags, logs and CORS-wraps it.
    """
    try:
        return await call_next(request)
    except Exception as exc:
        logger.exception(
            "unhandled_error path=%s request_id=%s",
            request.url.path,
            getattr(request.state, "request_id", None),
            exc_info=exc,
        )
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, MSG_INTERNAL)


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(HTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(DuplicateEmailError, _duplicate_email_handler)
    app.add_exception_handler(StoreError, _store_error_handler)
