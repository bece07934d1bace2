"""Exception hierarchy shared by services and the web API."""

from typing import Any, Dict, Optional


class SignalistException(Exception):
    """Base exception for Signalist application."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
        request_id: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.request_id = request_id


class ValidationException(SignalistException):
    """Exception for validation errors."""

    def __init__(
        self,
        message: str = "Validation failed",
        field_errors: Optional[Dict[str, str]] = None,
        request_id: Optional[str] = None,
    ):
        super().__init__(
            message=message,
            status_code=422,
            details={"field_errors": field_errors or {}},
            request_id=request_id,
        )


class NotFoundError(SignalistException):
    """Exception for resource not found errors."""

    def __init__(
        self, resource: str, identifier: str, request_id: Optional[str] = None
    ):
        message = f"{resource} with identifier '{identifier}' not found"
        super().__init__(
            message=message,
            status_code=404,
            details={"resource": resource, "identifier": identifier},
            request_id=request_id,
        )


class ExternalServiceError(SignalistException):
    """Exception for external service errors."""

    def __init__(
        self,
        service: str,
        operation: str,
        message: str,
        request_id: Optional[str] = None,
    ):
        super().__init__(
            message=f"{service} service error during {operation}: {message}",
            status_code=503,
            details={"service": service, "operation": operation},
            request_id=request_id,
        )


class EmailDeliveryError(ExternalServiceError):
    """Raised when the SMTP transport rejects or fails a send."""

    def __init__(self, recipient: str, message: str, request_id: Optional[str] = None):
        super().__init__(
            service="SMTP",
            operation="send",
            message=message,
            request_id=request_id,
        )
        self.details["recipient"] = recipient


class ConfigurationError(SignalistException):
    """Exception for configuration errors."""

    def __init__(self, setting: str, message: str, request_id: Optional[str] = None):
        super().__init__(
            message=f"Configuration error for '{setting}': {message}",
            status_code=500,
            details={"setting": setting},
            request_id=request_id,
        )
