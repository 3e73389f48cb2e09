"""Input cleaning shared by candidate and voter registration."""

import re

from django.conf import settings

from core.elections_errors import InvalidInputError


def clean_name(value: object, *, field_label: str = "name") -> str:
    """Return the stripped name or raise InvalidInputError if blank or too long."""
    v = str(value or "").strip()
    if not v:
        raise InvalidInputError(f"Invalid {field_label}: must not be empty")
    max_length = int(settings.ELECTION_NAME_MAX_LENGTH)
    if len(v) > max_length:
        raise InvalidInputError(f"Invalid {field_label}: must be at most {max_length} characters")
    return v


def clean_optional_text(value: object, *, field_label: str) -> str:
    v = str(value or "").strip()
    max_length = int(settings.ELECTION_NAME_MAX_LENGTH)
    if len(v) > max_length:
        raise InvalidInputError(f"Invalid {field_label}: must be at most {max_length} characters")
    return v


def clean_age(value: object) -> int:
    # bool is an int subclass; True must not pass as age 1.
    if isinstance(value, bool):
        raise InvalidInputError("Invalid age: must be a positive integer")
    try:
        age = int(str(value).strip())
    except (TypeError, ValueError, OverflowError):
        raise InvalidInputError("Invalid age: must be a positive integer") from None
    if age <= 0:
        raise InvalidInputError("Invalid age: must be a positive integer")
    if age > 32767:
        raise InvalidInputError("Invalid age: out of range")
    return age


def is_well_formed_identity(value: object) -> bool:
    v = str(value or "").strip()
    if not v:
        return False
    return re.fullmatch(settings.ELECTION_IDENTITY_PATTERN, v) is not None


def normalize_identity(value: object) -> str:
    """Validate an identity and return its canonical (lower-case) spelling."""
    v = str(value or "").strip()
    if not is_well_formed_identity(v):
        raise InvalidInputError("Invalid identity: malformed principal")
    return v.lower()
