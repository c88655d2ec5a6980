import pytest

from grouproster.app.core.phone import is_valid_optional_phone, normalize_digits, normalize_nullable_phone


@pytest.mark.parametrize(
    "raw",
    ["010-1234-5678", "(010) 123 4567", "+82 10 1234 5678", "abc", "", "  ", "0101234567"],
)
def test_normalize_digits_is_idempotent(raw):
    once = normalize_digits(raw)
    assert normalize_digits(once) == once
    assert once.isdigit() or once == ""


def test_normalize_digits_strips_everything_but_digits():
    assert normalize_digits("010-1234-5678") == "01012345678"
    assert normalize_digits("(02) 555 0199") == "025550199"


def test_blank_phone_collapses_to_none():
    assert normalize_nullable_phone("") is None
    assert normalize_nullable_phone("  - ") is None
    assert normalize_nullable_phone(None) is None
    assert normalize_nullable_phone("010-1234-5678") == "01012345678"


def test_optional_phone_accepts_absent_values():
    assert is_valid_optional_phone(None)
    assert is_valid_optional_phone("")


def test_optional_phone_digit_count_boundary():
    assert is_valid_optional_phone("0101234567")  # 10 digits
    assert is_valid_optional_phone("01012345678")  # 11 digits
    assert not is_valid_optional_phone("010123456")  # 9 digits
    assert not is_valid_optional_phone("010123456789")  # 12 digits


def test_optional_phone_formats():
    assert is_valid_optional_phone("010-1234-5678")
    assert is_valid_optional_phone("(010) 123 4567")
    assert not is_valid_optional_phone("010-123-456")
    assert not is_valid_optional_phone("010-1234-56789")
    assert not is_valid_optional_phone("010-ABCD-5678")
    assert not is_valid_optional_phone("010.1234.5678")
