"""Enums and value objects shared by the clinic domain."""
import re
from datetime import datetime, timedelta
from enum import Enum

from .errors import DomainValidationError


class UserRole(str, Enum):
    PATIENT = "PATIENT"
    DOCTOR = "DOCTOR"
    STAFF = "STAFF"


class AppointmentStatus(str, Enum):
    SCHEDULED = "SCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"


class AppointmentType(str, Enum):
    FIRST_CONSULT = "FIRST_CONSULT"
    CHECK_UP = "CHECK_UP"
    FOLLOW_UP = "FOLLOW_UP"


class EmailAddress:
    """Email value object, normalized to lowercase."""

    _PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

    def __init__(self, value: str):
        if value is None or not self._PATTERN.match(value.strip()):
            raise DomainValidationError(
                f'Invalid email format: "{value}". Expected format: user@domain.com'
            )
        self._value = value.strip().lower()

    @property
    def value(self) -> str:
        return self._value

    @property
    def domain(self) -> str:
        return self._value.split("@", 1)[1]

    @property
    def username(self) -> str:
        return self._value.split("@", 1)[0]

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"EmailAddress({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, EmailAddress) and other._value == self._value

    def __hash__(self) -> int:
        return hash(self._value)


class PhoneNumber:
    """Singapore mobile number (starts with 6, 8 or 9).

    Kept internally as the bare 8 digits; ``value`` is the display form
    ``+65 XXXX XXXX`` which is also what gets stored.
    """

    _PATTERN = re.compile(r"^(?:\+65[\s-]?)?[689]\d{3}[\s-]?\d{4}$")

    def __init__(self, value: str):
        if value is None or not self._PATTERN.match(value.strip()):
            raise DomainValidationError(
                f'Invalid Singapore phone number: "{value}". '
                "Expected format: +65 XXXX XXXX (mobile numbers starting with 6, 8, or 9)"
            )
        cleaned = re.sub(r"^\+65[\s-]?", "", value.strip())
        self._digits = re.sub(r"[\s-]", "", cleaned)

    @property
    def digits(self) -> str:
        return self._digits

    @property
    def value(self) -> str:
        return self.format_for_display()

    def format_for_display(self) -> str:
        return f"+65 {self._digits[:4]} {self._digits[4:]}"

    def __str__(self) -> str:
        return self._digits

    def __repr__(self) -> str:
        return f"PhoneNumber({self.format_for_display()!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, PhoneNumber) and other._digits == self._digits

    def __hash__(self) -> int:
        return hash(self._digits)


ALLOWED_DURATIONS = (15, 30, 45, 60, 90, 120, 180)


class AppointmentDuration:
    """Length of an appointment, restricted to the clinic's bookable granularities."""

    def __init__(self, minutes: int):
        if isinstance(minutes, bool) or not isinstance(minutes, int):
            raise DomainValidationError(f"Appointment duration must be a whole number of minutes. Got: {minutes!r}")
        if minutes not in ALLOWED_DURATIONS:
            raise DomainValidationError(
                f"Appointment duration must be one of {list(ALLOWED_DURATIONS)} minutes. Got: {minutes}",
                details={"duration_minutes": minutes, "allowed": list(ALLOWED_DURATIONS)},
            )
        self._minutes = minutes

    @classmethod
    def standard(cls) -> "AppointmentDuration":
        return cls(60)

    @classmethod
    def for_type(cls, appointment_type: AppointmentType) -> "AppointmentDuration":
        defaults = {
            AppointmentType.FIRST_CONSULT: 90,
            AppointmentType.CHECK_UP: 30,
            AppointmentType.FOLLOW_UP: 30,
        }
        return cls(defaults.get(appointment_type, 60))

    @property
    def minutes(self) -> int:
        return self._minutes

    def as_timedelta(self) -> timedelta:
        return timedelta(minutes=self._minutes)

    def end_time(self, start: datetime) -> datetime:
        return start + self.as_timedelta()

    def format_for_display(self) -> str:
        if self._minutes < 60:
            return f"{self._minutes} minutes"
        if self._minutes == 60:
            return "1 hour"
        hours, mins = divmod(self._minutes, 60)
        if mins == 0:
            return f"{hours} hours"
        return f"{hours} hour{'s' if hours > 1 else ''} {mins} minutes"

    def format_for_api(self) -> str:
        hours, mins = divmod(self._minutes, 60)
        return f"PT{hours}H{mins}M"

    def __int__(self) -> int:
        return self._minutes

    def __repr__(self) -> str:
        return f"AppointmentDuration({self._minutes})"

    def __eq__(self, other) -> bool:
        return isinstance(other, AppointmentDuration) and other._minutes == self._minutes

    def __hash__(self) -> int:
        return hash(self._minutes)
