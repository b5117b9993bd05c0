"""Prefixed string identifiers.

Every id the service hands out looks like ``<prefix>_<suffix>``. Older rows and
some clients send ids without the prefix, or with the prefix repeated
(``doctor_doctor_abc``); :func:`canonical_id` is the one place that turns any of
those into the canonical form.
"""
import re
import secrets
from typing import List

from .errors import DomainValidationError

USER_PREFIX = "user"
PATIENT_PREFIX = "patient"
DOCTOR_PREFIX = "doctor"
APPOINTMENT_PREFIX = "appt"

ID_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz_"
ID_SUFFIX_LENGTH = 8

_SUFFIX_RE = re.compile(r"^[A-Za-z0-9_]+$")


def new_id(prefix: str) -> str:
    suffix = "".join(secrets.choice(ID_ALPHABET) for _ in range(ID_SUFFIX_LENGTH))
    return f"{prefix}_{suffix}"


def strip_prefix(prefix: str, raw: str) -> str:
    marker = f"{prefix}_"
    value = raw
    while value.startswith(marker):
        value = value[len(marker):]
    return value


def canonical_id(prefix: str, raw: str) -> str:
    """Return ``raw`` with ``prefix`` present exactly once.

    >>> canonical_id("doctor", "abc")
    'doctor_abc'
    >>> canonical_id("doctor", "doctor_doctor_abc")
    'doctor_abc'
    """
    if raw is None or not str(raw).strip():
        raise DomainValidationError(f"Missing {prefix} id")
    value = str(raw).strip()
    suffix = strip_prefix(prefix, value)
    if not suffix or not _SUFFIX_RE.match(suffix):
        raise DomainValidationError(
            f"Invalid {prefix} id format (expected: {prefix}_<alphanumeric>)",
            details={"id": value},
        )
    return f"{prefix}_{suffix}"


def lookup_keys(prefix: str, raw: str) -> List[str]:
    """Stored forms a canonical id may still have in legacy rows."""
    canonical = canonical_id(prefix, raw)
    suffix = canonical[len(prefix) + 1:]
    return [canonical, suffix, f"{prefix}_{canonical}"]


def patient_id(raw: str) -> str:
    return canonical_id(PATIENT_PREFIX, raw)


def doctor_id(raw: str) -> str:
    return canonical_id(DOCTOR_PREFIX, raw)


def appointment_id(raw: str) -> str:
    return canonical_id(APPOINTMENT_PREFIX, raw)
