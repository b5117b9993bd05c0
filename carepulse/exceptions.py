import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .application.ports.result import RepositoryError
from .domain.errors import DomainError, ErrorType

logger = logging.getLogger(__name__)

STATUS_BY_ERROR_TYPE = {
    ErrorType.NOT_FOUND: 404,
    ErrorType.VALIDATION: 400,
    ErrorType.CONFLICT: 409,
    ErrorType.DATABASE: 500,
}

ERROR_TYPE_BY_STATUS = {
    400: ErrorType.VALIDATION,
    404: ErrorType.NOT_FOUND,
    409: ErrorType.CONFLICT,
    422: ErrorType.VALIDATION,
}


class APIException(HTTPException):
    def __init__(self, error_type: ErrorType, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(status_code=STATUS_BY_ERROR_TYPE[error_type], detail=message)
        self.error_type = error_type
        self.message = message
        self.details = details or {}

    @classmethod
    def from_error(cls, error: RepositoryError) -> "APIException":
        return cls(error.type, error.message, error.details)

    @classmethod
    def not_found(cls, message: str, details: Optional[Dict[str, Any]] = None) -> "APIException":
        return cls(ErrorType.NOT_FOUND, message, details)

    @classmethod
    def validation(cls, message: str, details: Optional[Dict[str, Any]] = None) -> "APIException":
        return cls(ErrorType.VALIDATION, message, details)

    @classmethod
    def conflict(cls, message: str, details: Optional[Dict[str, Any]] = None) -> "APIException":
        return cls(ErrorType.CONFLICT, message, details)


def create_error_response(error_type: ErrorType, message: str, details: Optional[Dict[str, Any]] = None) -> dict:
    """Create a standardized error response"""
    return {
        "success": False,
        "error": {
            "type": error_type.value,
            "message": message,
            "details": details or {},
        },
    }


def create_success_response(data: Any) -> dict:
    """Create a standardized success response"""
    return {
        "success": True,
        "data": data,
    }


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render every HTTPException in the error envelope"""
    if isinstance(exc, APIException):
        content = create_error_response(exc.error_type, exc.message, exc.details)
    else:
        error_type = ERROR_TYPE_BY_STATUS.get(exc.status_code, ErrorType.DATABASE if exc.status_code >= 500 else ErrorType.VALIDATION)
        content = create_error_response(error_type, str(exc.detail))
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(content),
        headers=getattr(exc, "headers", None),
    )


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    return JSONResponse(
        status_code=STATUS_BY_ERROR_TYPE[exc.error_type],
        content=jsonable_encoder(create_error_response(exc.error_type, exc.message, exc.details)),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Request body/query/path validation failures"""
    fields = [
        {"field": ".".join(str(p) for p in err.get("loc", ()) if p != "body"), "message": err.get("msg", "")}
        for err in exc.errors()
    ]
    logger.info(f"Validation failed for {request.method} {request.url.path}: {fields}")
    return JSONResponse(
        status_code=400,
        content=jsonable_encoder(
            create_error_response(ErrorType.VALIDATION, "Invalid request data", {"fields": fields})
        ),
    )
