"""
API Error Handlers

Every error leaves the API as
    {"error": {"status": ..., "code": ..., "message": ..., "field": ...}}
except an invalid session token, which is answered with an empty 401.
"""

from typing import Optional

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.errors import StorefrontError, UnauthorizedError, UpstreamError

logger = structlog.get_logger(__name__)


def error_response(
    status_code: int,
    code: str,
    message: str,
    field: Optional[str] = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    error = {"status": status_code, "code": code, "message": message}
    if field:
        error["field"] = field
    return JSONResponse(status_code=status_code, content={"error": error}, headers=headers)


async def storefront_error_handler(request: Request, exc: StorefrontError) -> Response:
    """Map StorefrontError subclasses to their HTTP status."""
    if isinstance(exc, UnauthorizedError) and not exc.disclose:
        return Response(status_code=exc.status_code)

    if isinstance(exc, UpstreamError):
        logger.error(
            "Upstream failure",
            path=request.url.path,
            error_type=type(exc).__name__,
            error=exc.message,
        )
        return error_response(exc.status_code, exc.code, exc.public_message)

    logger.info(
        "Request rejected",
        path=request.url.path,
        status_code=exc.status_code,
        code=exc.code,
    )
    return error_response(exc.status_code, exc.code, exc.message, getattr(exc, "field", None))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ())[1:]) or None
    return error_response(400, "VAL_02", first.get("msg", "Invalid request"), field)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, f"HTTP_{exc.status_code}", str(exc.detail), headers=exc.headers)


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(
        "Database error",
        path=request.url.path,
        error_type=type(exc).__name__,
        exc_info=exc,
    )
    return error_response(500, "SRV_02", "Internal server error")


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error",
        path=request.url.path,
        error_type=type(exc).__name__,
        exc_info=exc,
    )
    return error_response(500, "SRV_01", "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
