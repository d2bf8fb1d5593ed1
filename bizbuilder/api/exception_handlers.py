"""Exception handlers: every failure leaves the API as
``{"success": false, "error": "<message>", "details": [...]?}``.
"""

from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from bizbuilder.core.errors import AppError, ServerError, issues_from_pydantic
from bizbuilder.core.logging import get_logger

logger = get_logger(__name__)

GENERIC_ERROR = "Something went wrong!"


def _error(status_code: int, error: str, details: list | None = None) -> JSONResponse:
    body: dict = {"success": False, "error": error}
    if details:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if isinstance(exc, ServerError):
        logger.error("Server error", path=request.url.path, kind=exc.kind, error=exc.detail,
                     cause=repr(exc.__cause__))
        if request.app.state.settings.is_production:
            return _error(exc.status_hint, GENERIC_ERROR)
    return JSONResponse(status_code=exc.status_hint, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error(
        status.HTTP_400_BAD_REQUEST,
        "Validation failed",
        issues_from_pydantic(list(exc.errors())),
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        return _error(exc.status_code, "Route not found")
    return _error(exc.status_code, str(exc.detail))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", path=request.url.path)
    if request.app.state.settings.is_production:
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc) or type(exc).__name__)


def setup_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
