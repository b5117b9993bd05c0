# carepulse/schemas/common/common.py
from pydantic import BaseModel
from typing import Any, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


class ErrorBody(BaseModel):
    type: str
    message: str
    details: Dict[str, Any] = {}


class ErrorResponse(BaseModel):
    success: bool = False
    error: ErrorBody


class SuccessResponse(BaseModel, Generic[T]):
    success: bool = True
    data: T


class Pagination(BaseModel):
    total: int
    limit: Optional[int] = None
    offset: int = 0


class PaginatedData(BaseModel, Generic[T]):
    items: List[T]
    pagination: Pagination


class MessageData(BaseModel):
    message: str


__all__ = ["ErrorBody", "ErrorResponse", "SuccessResponse", "Pagination", "PaginatedData", "MessageData"]
