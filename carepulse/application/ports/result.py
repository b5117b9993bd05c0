from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Optional, TypeVar

from ...domain.errors import ErrorType

T = TypeVar("T")


@dataclass
class RepositoryError:
    type: ErrorType
    message: str
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass
class RepositoryResult(Generic[T]):
    success: bool
    data: Optional[T] = None
    error: Optional[RepositoryError] = None

    @classmethod
    def ok(cls, data: T = None) -> "RepositoryResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error_type: ErrorType, message: str, details: Optional[Dict[str, Any]] = None) -> "RepositoryResult[T]":
        return cls(success=False, error=RepositoryError(error_type, message, details or {}))

    @classmethod
    def not_found(cls, message: str, details: Optional[Dict[str, Any]] = None) -> "RepositoryResult[T]":
        return cls.fail(ErrorType.NOT_FOUND, message, details)

    @classmethod
    def conflict(cls, message: str, details: Optional[Dict[str, Any]] = None) -> "RepositoryResult[T]":
        return cls.fail(ErrorType.CONFLICT, message, details)
