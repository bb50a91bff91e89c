import pytest

from taskmanager.services.password_validator import (
    MISSING_DIGIT,
    MISSING_SPECIAL,
    MISSING_UPPERCASE,
    TOO_SHORT,
    validate_password,
)


def test_accepts_strong_password():
    result = validate_password("ValidPass1!")

    assert result.is_valid
    assert result.reason is None
    assert bool(result) is True


@pytest.mark.parametrize(
    "password, expected_reason",
    [
        ("short1!", TOO_SHORT),
        ("Ab1!", TOO_SHORT),
        ("", TOO_SHORT),
        ("lowercase1!", MISSING_UPPERCASE),
        ("NoDigitsHere!", MISSING_DIGIT),
        ("NoSpecial123", MISSING_SPECIAL),
    ],
)
def test_rejects_weak_password_with_first_failing_rule(password, expected_reason):
    result = validate_password(password)

    assert not result.is_valid
    assert result.reason == expected_reason


def test_length_is_reported_even_when_every_other_rule_also_fails():
    # "short" has no uppercase, digit or special character either
    assert validate_password("short").reason == TOO_SHORT


def test_uppercase_checked_before_digit_and_special():
    assert validate_password("abcdefgh").reason == MISSING_UPPERCASE


def test_underscore_counts_as_special_character():
    assert validate_password("Password_1").is_valid


def test_whitespace_counts_as_special_character():
    assert validate_password("Pass word1").is_valid
