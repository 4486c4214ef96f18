"""
Application errors and their HTTP mapping
"""

from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    """Error kinds surfaced to API clients"""
    VALIDATION = "validation"
    INVALID_ARGUMENT = "invalid_argument"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    DEPENDENCY = "dependency"
    TIMEOUT = "timeout"


_HTTP_STATUS = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.INVALID_ARGUMENT: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.DEPENDENCY: 503,
    ErrorKind.TIMEOUT: 503,
}


class TaghraError(Exception):
    """Base class for errors the API knows how to render"""
    kind = ErrorKind.DEPENDENCY

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)

    @property
    def http_status(self) -> int:
        return _HTTP_STATUS.get(self.kind, 500)

    def to_dict(self) -> dict:
        body = {"success": False, "message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class FieldValidationError(TaghraError):
    """Malformed or out-of-range input; carries the offending field name"""
    kind = ErrorKind.VALIDATION

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message, details=[{"field": field, "message": message}])


class InvalidArgumentError(TaghraError):
    kind = ErrorKind.INVALID_ARGUMENT


class NotFoundError(TaghraError):
    kind = ErrorKind.NOT_FOUND


class ConflictError(TaghraError):
    kind = ErrorKind.CONFLICT


class DependencyError(TaghraError):
    """Storage backend unreachable or failing"""
    kind = ErrorKind.DEPENDENCY

    def __init__(self, message: str = "Storage backend unavailable", details: Optional[Any] = None):
        super().__init__(message, details)


class DependencyTimeoutError(DependencyError):
    kind = ErrorKind.TIMEOUT

    def __init__(self, message: str = "Storage backend timed out", details: Optional[Any] = None):
        super().__init__(message, details)
