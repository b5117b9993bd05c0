from enum import Enum
from typing import Any, Dict, Optional


class ErrorType(str, Enum):
    NOT_FOUND = "NotFound"
    VALIDATION = "ValidationError"
    CONFLICT = "ConflictError"
    DATABASE = "DatabaseError"


class DomainError(Exception):
    error_type: ErrorType = ErrorType.VALIDATION

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class DomainValidationError(DomainError):
    """Raised by value objects and factories when input breaks a business rule."""
    error_type = ErrorType.VALIDATION
