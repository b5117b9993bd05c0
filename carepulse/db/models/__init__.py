# Models package (re-export feature modules for stable imports)
from .users.user import User
from .clinic.patient import Patient
from .clinic.doctor import Doctor
from .clinic.appointment import Appointment

__all__ = [
    "User",
    "Patient",
    "Doctor",
    "Appointment",
]
