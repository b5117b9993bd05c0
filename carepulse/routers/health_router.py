from datetime import datetime, timezone

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ..core.config import settings
from ..database import check_database_connection
from ..exceptions import create_success_response

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(request: Request):
    return create_success_response({
        "status": "healthy" if getattr(request.app.state, "db_init_ok", True) else "degraded",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    })


@router.get("/health/detailed")
def detailed_health_check(request: Request):
    database_ok = check_database_connection()
    payload = {
        "status": "healthy" if database_ok else "unhealthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": {
            "database": "connected" if database_ok else "unreachable",
            "db_init_error": getattr(request.app.state, "db_init_error", None),
        },
        "clinic": {
            "timezone": settings.CLINIC_TIMEZONE,
            "opening_hour": settings.OPENING_HOUR,
            "closing_hour": settings.CLOSING_HOUR,
            "enforce_status_transitions": settings.ENFORCE_STATUS_TRANSITIONS,
        },
    }
    return JSONResponse(status_code=200 if database_ok else 503, content=create_success_response(payload))
