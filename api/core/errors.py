"""
Exception handlers shared by every router.

All error bodies use the shape `{"error": "<message>"}`, optionally with a
`details` field.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from . import settings

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal server error"
ROUTE_NOT_FOUND = "Route not found"
HIDDEN_DETAILS = "Details hidden in production"


def error_details(exc: BaseException) -> str:
    """
    Message safe to return to a client for an unexpected failure.
    """
    if settings.is_development():
        return str(exc)
    return HIDDEN_DETAILS


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail
    # Starlette raises a bare 404 when no route matches.
    if exc.status_code == 404 and detail == "Not Found":
        detail = ROUTE_NOT_FOUND
    # Dict details are already a full error body.
    content = detail if isinstance(detail, dict) else {"error": detail}
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(content),
        headers=getattr(exc, "headers", None),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = jsonable_encoder(exc.errors())
    logger.warning("request_invalid path=%s issues=%s", request.url.path, len(errors))
    return JSONResponse(
        status_code=422,
        content={"error": "Invalid request body", "details": errors},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error method=%s path=%s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR})


class UnhandledErrorMiddleware(BaseHTTPMiddleware):
    """
    Unexpected errors become the JSON 500 body inside the middleware stack,
    where CORS and security headers still apply. The `Exception` handler
    alone would only run in the outermost server-error layer.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            return await unhandled_exception_handler(request, exc)


def setup_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
