from typing import Any, Optional


class ClinicError(Exception):
    """Base for errors the API reports to callers with a fixed status code."""

    status_code = 500
    error = "Internal Server Error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(ClinicError):
    status_code = 404
    error = "Resource Not Found"

    def __init__(self, entity: str, field: str, value: Any):
        self.entity = entity
        self.field = field
        self.value = value
        super().__init__(f"{entity} not found with {field}: {value}")


class BusinessError(ClinicError):
    """Uniqueness violations, bootstrap on a non-empty store, forbidden status changes."""

    status_code = 400
    error = "Business Rule Violation"


class ValidationError(ClinicError):
    status_code = 400
    error = "Validation Failed"

    def __init__(self, message: str, errors: Optional[list[dict]] = None):
        self.errors = errors or []
        super().__init__(message)


class AuthenticationError(ClinicError):
    status_code = 401
    error = "Authentication Failed"


class AuthorizationError(ClinicError):
    status_code = 403
    error = "Access Denied"
