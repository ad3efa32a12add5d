"""
Shared Errors Module - Standardized API Error Responses.

Every handler that rejects a request or fails on a provider call raises an
APIException. The app-level exception handler renders it as JSON with the
human-readable message under the ``error`` key, which is what the browser
client reads, plus a machine-readable code and a request id for tracing.
"""

import uuid
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ErrorCode(str, Enum):
    """Standardized error codes for API responses.

    Error codes are prefixed by category:
    - VALIDATION_*: Input validation errors
    - AUTH*: Authentication errors
    - RESOURCE_*: Resource-related errors
    - USAGE_*: Daily generation limits
    - SERVICE_*: Upstream provider errors
    - PAYMENT_*: Stripe errors
    """

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    VALIDATION_MISSING_FIELD = "VALIDATION_MISSING_FIELD"

    # Authentication errors
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"

    # Resource errors
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"

    # Usage limits
    USAGE_LIMIT_EXCEEDED = "USAGE_LIMIT_EXCEEDED"

    # Provider errors
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    SERVICE_UPSTREAM_ERROR = "SERVICE_UPSTREAM_ERROR"

    # Payments
    PAYMENT_SIGNATURE_INVALID = "PAYMENT_SIGNATURE_INVALID"

    # Internal errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"


class APIError(BaseModel):
    """Standardized API error response model.

    Attributes:
        error_code: Machine-readable error code from ErrorCode enum.
        message: Human-readable error description.
        details: Optional additional context.
        request_id: Unique identifier for request tracing.
        service: Name of service that generated the error.
    """

    error_code: str = Field(
        ...,
        description="Machine-readable error code",
        examples=["VALIDATION_MISSING_FIELD", "SERVICE_UPSTREAM_ERROR"],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Topic is required"],
    )
    details: dict[str, Any] | None = Field(
        default=None,
        description="Additional error context",
        examples=[{"field": "topic"}],
    )
    request_id: str = Field(
        default_factory=lambda: f"req_{uuid.uuid4().hex[:12]}",
        description="Unique request identifier for tracing",
    )
    service: str = Field(
        default="quartz",
        description="Service that generated the error",
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "error_code": "SERVICE_UPSTREAM_ERROR",
                "message": "Failed to generate audio",
                "details": None,
                "request_id": "req_abc123def456",
                "service": "quartz",
            }
        }
    }


class APIException(Exception):
    """Exception wrapper for APIError responses.

    Attributes:
        error: The APIError model containing error details.
        status_code: HTTP status code for the response.

    Example:
        >>> raise APIException(
        ...     error_code=ErrorCode.VALIDATION_MISSING_FIELD,
        ...     message="Topic is required",
        ... )
    """

    def __init__(
        self,
        error_code: str,
        message: str,
        details: dict[str, Any] | None = None,
        status_code: int | None = None,
        service: str = "quartz",
    ):
        self.error = APIError(
            error_code=error_code.value if isinstance(error_code, ErrorCode) else error_code,
            message=message,
            details=details,
            service=service,
        )
        self.status_code = status_code or get_status_code(self.error.error_code)
        super().__init__(message)

    def to_response(self) -> dict[str, Any]:
        """Convert to dictionary for JSONResponse."""
        body = {"error": self.error.message}
        body.update(self.error.model_dump())
        return body


def missing_field(message: str, field: str) -> APIException:
    """Shorthand for the 400 raised when a required body field is absent."""
    return APIException(
        error_code=ErrorCode.VALIDATION_MISSING_FIELD,
        message=message,
        details={"field": field},
    )


def upstream_failure(message: str, details: dict[str, Any] | None = None) -> APIException:
    """Shorthand for the generic 500 returned after a provider call fails."""
    return APIException(
        error_code=ErrorCode.SERVICE_UPSTREAM_ERROR,
        message=message,
        details=details,
        status_code=500,
    )


# HTTP status code mappings
ERROR_STATUS_CODES: dict[str, int] = {
    ErrorCode.VALIDATION_ERROR.value: 400,
    ErrorCode.VALIDATION_MISSING_FIELD.value: 400,
    ErrorCode.AUTHENTICATION_FAILED.value: 401,
    ErrorCode.RESOURCE_NOT_FOUND.value: 404,
    ErrorCode.USAGE_LIMIT_EXCEEDED.value: 429,
    ErrorCode.SERVICE_UNAVAILABLE.value: 503,
    ErrorCode.SERVICE_UPSTREAM_ERROR.value: 502,
    ErrorCode.PAYMENT_SIGNATURE_INVALID.value: 400,
    ErrorCode.INTERNAL_ERROR.value: 500,
    ErrorCode.CONFIGURATION_ERROR.value: 500,
}


def get_status_code(error_code: str) -> int:
    """Get HTTP status code for error code.

    Args:
        error_code: Error code string.

    Returns:
        int: Appropriate HTTP status code.
    """
    return ERROR_STATUS_CODES.get(error_code, 500)
