from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import HTTP_422_UNPROCESSABLE_ENTITY, HTTP_500_INTERNAL_SERVER_ERROR

logger = logging.getLogger(__name__)


def _error_payload(
    *,
    error: str,
    type_: str,
    code: str | None = None,
    details: Any | None = None,
    response: Any | None = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {"error": error, "code": code, "type": type_}
    if details is not None:
        payload["details"] = details
    if response is not None:
        payload["response"] = response
    return payload


class StudyBuddyException(Exception):
    """Base exception for the relay.

    Raised from request handlers or the services they call so FastAPI can
    translate them via the registered exception handlers.
    """

    status_code: int = 400
    default_code: str | None = None

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        status_code: int | None = None,
        details: Any | None = None,
    ) -> None:
        self.message = message
        self.code = code if code is not None else self.default_code
        self.status_code = status_code if status_code is not None else self.status_code
        self.details = details
        super().__init__(message)


class InvalidRequestError(StudyBuddyException):
    """Raised when caller input is rejected before any upstream call."""

    status_code = 400
    default_code = "invalid_request"


class ConfigurationError(StudyBuddyException):
    """Raised when configuration is invalid (server-side)."""

    status_code = 500
    default_code = "configuration_error"


class UpstreamError(StudyBuddyException):
    """The LLM runtime could not produce a usable reply.

    ``response`` holds the upstream error payload when the runtime sent one.
    """

    status_code = 500
    default_code = "upstream_error"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        status_code: int | None = None,
        details: Any | None = None,
        response: Any | None = None,
    ) -> None:
        super().__init__(message, code=code, status_code=status_code, details=details)
        self.response = response

    def with_context(self, message: str) -> "UpstreamError":
        """Re-label the error for a route while keeping the cause as ``details``."""
        return type(self)(
            message,
            code=self.code,
            status_code=self.status_code,
            details=self.details or self.message,
            response=self.response,
        )


class UpstreamUnreachableError(UpstreamError):
    default_code = "upstream_unreachable"


class UpstreamMalformedError(UpstreamError):
    default_code = "upstream_malformed"


def register_exception_handlers(app: FastAPI) -> None:
    """Register the relay's exception handlers on a FastAPI app."""

    @app.exception_handler(StudyBuddyException)
    async def _studybuddy_exception_handler(
        _request: Request, exc: StudyBuddyException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_payload(
                error=exc.message,
                code=exc.code,
                type_=exc.__class__.__name__,
                details=exc.details,
                response=getattr(exc, "response", None),
            ),
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_exception_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=HTTP_422_UNPROCESSABLE_ENTITY,
            content=_error_payload(
                error="Validation error",
                code="validation_error",
                type_=exc.__class__.__name__,
                details=jsonable_errors(exc),
            ),
        )

    @app.exception_handler(StarletteHTTPException)
    async def _http_exception_handler(
        _request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        detail = getattr(exc, "detail", None)
        if isinstance(detail, str):
            error = detail
            details = None
        else:
            error = "Request failed"
            details = detail
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_payload(
                error=error,
                code="http_exception",
                type_=exc.__class__.__name__,
                details=details,
            ),
        )

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception: %s", exc)
        return JSONResponse(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_payload(
                error="Internal server error",
                code="internal_error",
                type_="InternalServerError",
            ),
        )


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    # pydantic may embed the raised ValueError under ctx; it is not JSON serializable
    out: list[dict[str, Any]] = []
    for err in exc.errors():
        item = dict(err)
        ctx = item.get("ctx")
        if isinstance(ctx, dict):
            item["ctx"] = {k: str(v) for k, v in ctx.items()}
        out.append(item)
    return out
