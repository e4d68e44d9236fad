from __future__ import annotations

import logging

from air.responses import JSONResponse
from fastapi import FastAPI
from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def error_response(
    status: int,
    code: str,
    message: str,
    details: dict | None = None,
    headers: dict | None = None,
) -> JSONResponse:
    """JSON error body shared by every non-404 failure."""
    body = {"error": {"status": status, "code": code, "message": message, "details": details or {}}}
    return JSONResponse(status_code=status, content=body, headers=headers)


async def not_found(request: Request, exc: Exception):
    return PlainTextResponse("Not Found", status_code=404)


async def http_error(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, "http_error", exc.detail or "HTTP error", headers=exc.headers)


async def bad_request(request: Request, exc: RequestValidationError):
    errors = jsonable_encoder(exc.errors())
    return error_response(422, "validation_error", "Validation failed", {"errors": errors})


async def server_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(500, "server_error", "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    # Status-code keys win over exception classes in starlette
    app.add_exception_handler(404, not_found)
    app.add_exception_handler(500, server_error)
    app.add_exception_handler(StarletteHTTPException, http_error)
    app.add_exception_handler(RequestValidationError, bad_request)
    app.add_exception_handler(Exception, server_error)
