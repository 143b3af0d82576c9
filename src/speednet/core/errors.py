"""Domain errors raised by the services and the JSON body they render to."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Body of every error response: {code, message, details}."""

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[dict[str, Any]] = Field(None, description="Additional context")


class AppError(Exception):
    """
    Base for errors the API renders itself.

    Services raise subclasses; the exception handlers turn them into an
    ErrorDetail body with status_code.
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_response(self) -> ErrorDetail:
        """Empty details render as null."""
        return ErrorDetail(
            code=self.code,
            message=self.message,
            details=self.details if self.details else None,
        )


class ValidationError(AppError):
    """Raised when input is malformed or out of range."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            status_code=422,
            details=details,
        )


class NotFoundError(AppError):
    """Raised when a referenced session, signup or card doesn't exist."""

    def __init__(self, resource: str, resource_id: Any):
        super().__init__(
            code="NOT_FOUND",
            message=f"{resource} with ID {resource_id} not found",
            status_code=404,
            details={"resource": resource, "resource_id": str(resource_id)},
        )


class ConflictError(AppError):
    """Raised when the request is well-formed but conflicts with current state."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            code="CONFLICT",
            message=message,
            status_code=409,
            details=details,
        )


class AuthorizationError(AppError):
    """Raised when the caller's workspace scope excludes the target resource."""

    def __init__(self, message: str = "Forbidden", details: Optional[dict] = None):
        super().__init__(
            code="FORBIDDEN",
            message=message,
            status_code=403,
            details=details,
        )
