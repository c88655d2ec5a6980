"""Phone number normalization and validation helpers."""

import re

_NON_DIGIT = re.compile(r"\D")
_ALLOWED_PHONE_CHARS = re.compile(r"^[0-9\s\-()+]+$")

MIN_PHONE_DIGITS = 10
MAX_PHONE_DIGITS = 11


def normalize_digits(value: str) -> str:
    return _NON_DIGIT.sub("", value)


def normalize_nullable_phone(value: str | None) -> str | None:
    """
    Normalize an optional phone value.

    None passes through. A string with no digits collapses to None so an
    empty-string phone is never persisted.
    """
    if value is None:
        return None
    digits = normalize_digits(value)
    return digits or None


def is_valid_optional_phone(value: str | None) -> bool:
    if value is None or value == "":
        return True
    if not _ALLOWED_PHONE_CHARS.match(value):
        return False
    digits = normalize_digits(value)
    return MIN_PHONE_DIGITS <= len(digits) <= MAX_PHONE_DIGITS
