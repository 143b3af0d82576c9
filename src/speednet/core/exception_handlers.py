# File: src/speednet/core/exception_handlers.py
"""Global exception handlers for FastAPI."""

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from speednet.core.errors import AppError, ErrorDetail
from speednet.core.logging import get_logger

logger = get_logger(__name__)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """
    Handle all AppError exceptions and convert to JSON response.

    Returns standardized error format:
    {
        "code": "NOT_FOUND",
        "message": "NetworkingSession with ID xyz not found",
        "details": {"resource": "NetworkingSession", "resource_id": "xyz"}
    }
    """
    logger.info(
        "app_error",
        code=exc.code,
        status_code=exc.status_code,
        path=request.url.path,
    )
    error_response = exc.to_response()
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response.model_dump(exclude_none=True),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render body/query validation failures in the same shape as AppError."""
    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())),
            "message": error.get("msg", "Invalid value"),
        }
        for error in exc.errors()
    ]
    detail = ErrorDetail(
        code="VALIDATION_ERROR",
        message=errors[0]["message"] if errors else "Invalid request",
        details={"errors": errors},
    )
    return JSONResponse(status_code=422, content=detail.model_dump(exclude_none=True))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.error(
        "http_exception",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )


def register_exception_handlers(app) -> None:
    """Register all custom exception handlers with FastAPI app."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
