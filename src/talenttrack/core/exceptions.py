from __future__ import annotations

from datetime import datetime, timezone
import traceback
from typing import Any, Optional


class DomainError(Exception):
    """Base exception for business rule violations.

    Carries the HTTP status and machine-readable code the API layer renders.
    """

    status_code = 500
    error_code: Optional[str] = None

    def __init__(self, message: str, *, status_code: Optional[int] = None, error_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if error_code is not None:
            self.error_code = error_code
        self.timestamp = datetime.now(timezone.utc).isoformat()

    def to_dict(self, *, include_stack: bool = False) -> dict[str, Any]:
        body: dict[str, Any] = {"message": self.message}
        if self.error_code:
            body["code"] = self.error_code
        field = getattr(self, "field", None)
        if field:
            body["field"] = field
        if include_stack:
            body["stack"] = "".join(traceback.format_exception(type(self), self, self.__traceback__))
        return body


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    status_code = 400
    error_code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    status_code = 401
    error_code = "AUTHENTICATION_ERROR"

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message)


class TokenError(AuthenticationError):
    error_code = "TOKEN_ERROR"

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message)


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403
    error_code = "AUTHORIZATION_ERROR"

    def __init__(self, message: str = "Access denied"):
        super().__init__(message)


class NotFoundError(DomainError):
    status_code = 404
    error_code = "NOT_FOUND_ERROR"

    def __init__(self, resource: str = "Resource"):
        super().__init__(f"{resource} not found")
        self.resource = resource


class ConflictError(DomainError):
    status_code = 409
    error_code = "CONFLICT_ERROR"

    def __init__(self, message: str = "Resource already exists"):
        super().__init__(message)


class BusinessLogicError(DomainError):
    """Raised when a request is well-formed but breaks a workflow rule."""

    status_code = 422
    error_code = "BUSINESS_LOGIC_ERROR"

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message)
        self.operation = operation
