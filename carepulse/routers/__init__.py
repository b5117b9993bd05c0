# Routers package
from . import health_router
from . import patients_router
from . import doctors_router
from . import appointments_router

__all__ = [
    "health_router",
    "patients_router",
    "doctors_router",
    "appointments_router",
]
