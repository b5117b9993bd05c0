from datetime import datetime, timezone, tzinfo
from typing import Optional


# =========================
# Clinic time handling
# =========================
def to_utc(value: datetime, clinic_tz: tzinfo) -> datetime:
    """Aware UTC datetime; naive input is read as clinic-local wall time."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=clinic_tz)
    return value.astimezone(timezone.utc)


def to_storage(value: Optional[datetime]) -> Optional[datetime]:
    """Timezone-aware UTC, the form the database columns hold; naive input is taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def from_storage(value: Optional[datetime]) -> Optional[datetime]:
    """Aware UTC; SQLite hands stored values back without an offset."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
