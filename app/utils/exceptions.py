from typing import Any, Dict, Optional


class SadhanaError(Exception):
    """Base class for errors raised by the CRUD layer and mapped to HTTP responses."""

    status_code = 500
    error_code = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"detail": self.message, "code": self.error_code}
        if self.details:
            body["details"] = self.details
        return body


class NotFoundError(SadhanaError):
    status_code = 404
    error_code = "NOT_FOUND"

    def __init__(self, resource: str, resource_id: Optional[str] = None):
        message = f"{resource} not found"
        details = {"resource": resource}
        if resource_id is not None:
            details["id"] = resource_id
        super().__init__(message, details)


class PermissionDeniedError(SadhanaError):
    status_code = 403
    error_code = "PERMISSION_DENIED"


class ConflictError(SadhanaError):
    status_code = 409
    error_code = "CONFLICT"


class ValidationFailedError(SadhanaError):
    status_code = 400
    error_code = "VALIDATION_ERROR"
