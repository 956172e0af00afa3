"""
Error taxonomy and error-to-response mapping for the order notification handlers.

Every failure a handler can surface is a ``BaseServiceError`` subclass carrying an
error code, a severity and a category. The handler boundary converts them into
the flat JSON error body returned to callers (``{"error": ..., "details": ...}``)
using ``get_http_status_code`` to pick the HTTP status.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from aws_lambda_powertools.metrics import MetricUnit

from service.handlers.utils.observability import logger, metrics, tracer
from service.models.output import ErrorOutput


class ErrorSeverity(str, Enum):
    """Error severity levels for classification."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class ErrorCategory(str, Enum):
    """Error categories for classification."""
    VALIDATION = "VALIDATION"
    BUSINESS_LOGIC = "BUSINESS_LOGIC"
    EXTERNAL_SERVICE = "EXTERNAL_SERVICE"
    INFRASTRUCTURE = "INFRASTRUCTURE"


class BaseServiceError(Exception):
    """Base exception class for service errors."""

    def __init__(
        self,
        message: str,
        error_code: str,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        category: ErrorCategory = ErrorCategory.BUSINESS_LOGIC,
        details: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.severity = severity
        self.category = category
        self.details = details
        self.error_id = str(uuid.uuid4())

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging."""
        return {
            "error_id": self.error_id,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "severity": self.severity.value,
            "category": self.category.value,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }


class InputError(BaseServiceError):
    """Raised when a required request field is missing or malformed."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.VALIDATION,
            details=details,
        )


class MethodNotAllowedError(BaseServiceError):
    """Raised when the request uses an HTTP verb the function does not serve."""

    def __init__(self, method: Optional[str] = None):
        super().__init__(
            message="Method not allowed",
            error_code="METHOD_NOT_ALLOWED",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.VALIDATION,
        )
        self.method = method


class ResourceNotFoundError(BaseServiceError):
    """Raised when no record matches the request."""

    def __init__(self, message: str, resource_type: str, resource_id: str):
        super().__init__(
            message=message,
            error_code="RESOURCE_NOT_FOUND",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.BUSINESS_LOGIC,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class UpstreamError(BaseServiceError):
    """Raised when the order data store rejects or fails a query."""

    def __init__(self, message: str, details: Optional[str] = None, service_name: str = "orders-data-api"):
        super().__init__(
            message=message,
            error_code="UPSTREAM_ERROR",
            severity=ErrorSeverity.HIGH,
            category=ErrorCategory.INFRASTRUCTURE,
            details=details,
        )
        self.service_name = service_name


class TransportError(BaseServiceError):
    """Mail delivery failure. Reported inline, never mapped to an error status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(
            message=message,
            error_code="TRANSPORT_ERROR",
            severity=ErrorSeverity.MEDIUM,
            category=ErrorCategory.EXTERNAL_SERVICE,
        )
        self.status_code = status_code


class UnexpectedError(BaseServiceError):
    """Wraps anything the handler did not anticipate."""

    def __init__(self, details: Optional[str] = None):
        super().__init__(
            message="Internal server error",
            error_code="INTERNAL_SERVER_ERROR",
            severity=ErrorSeverity.CRITICAL,
            category=ErrorCategory.INFRASTRUCTURE,
            details=details or "Unknown error",
        )


def get_http_status_code(error: BaseServiceError) -> int:
    """Get appropriate HTTP status code for error."""

    status_mapping = {
        "VALIDATION_ERROR": 400,
        "RESOURCE_NOT_FOUND": 404,
        "METHOD_NOT_ALLOWED": 405,
        "UPSTREAM_ERROR": 500,
        "INTERNAL_SERVER_ERROR": 500,
    }

    return status_mapping.get(error.error_code, 500)


def format_error_response(error: BaseServiceError) -> Dict[str, Any]:
    """Format error for API response."""
    return ErrorOutput(error=error.message, details=error.details or None).model_dump(exclude_none=True)


@tracer.capture_method
def log_error_metrics(error: BaseServiceError) -> None:
    """Log error metrics for monitoring and alerting."""

    metrics.add_metric(name="ErrorCount", unit=MetricUnit.Count, value=1)
    metrics.add_metric(name=f"Error{error.category.value}Count", unit=MetricUnit.Count, value=1)

    tracer.put_annotation("error_code", error.error_code)
    tracer.put_metadata("error_details", error.to_dict())

    log = logger.error if error.severity in (ErrorSeverity.HIGH, ErrorSeverity.CRITICAL) else logger.warning
    log(
        "Service error occurred",
        extra={
            "error_id": error.error_id,
            "error_code": error.error_code,
            "error_severity": error.severity.value,
            "error_category": error.category.value,
            "error_message": error.message,
            "error_details": error.details,
        }
    )
