# Password strength rules, checked in order; the first failing rule is reported

import re

from pydantic import BaseModel, ConfigDict

MIN_PASSWORD_LENGTH = 8

TOO_SHORT = f"Password must be at least {MIN_PASSWORD_LENGTH} characters long."
MISSING_UPPERCASE = "Password must contain at least one uppercase letter."
MISSING_DIGIT = "Password must contain at least one digit."
MISSING_SPECIAL = "Password must contain at least one special character."

# Anything that is not a letter or digit; underscore counts as special
_SPECIAL_CHARACTER = re.compile(r"[\W_]")


class PasswordValidationResult(BaseModel):
    is_valid: bool
    reason: str | None = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def ok(cls) -> "PasswordValidationResult":
        return cls(is_valid=True)

    @classmethod
    def fail(cls, reason: str) -> "PasswordValidationResult":
        return cls(is_valid=False, reason=reason)

    def __bool__(self) -> bool:
        return self.is_valid


def validate_password(password: str) -> PasswordValidationResult:
    if len(password) < MIN_PASSWORD_LENGTH:
        return PasswordValidationResult.fail(TOO_SHORT)
    if not any(char.isupper() for char in password):
        return PasswordValidationResult.fail(MISSING_UPPERCASE)
    if not any(char.isdigit() for char in password):
        return PasswordValidationResult.fail(MISSING_DIGIT)
    if not _SPECIAL_CHARACTER.search(password):
        return PasswordValidationResult.fail(MISSING_SPECIAL)
    return PasswordValidationResult.ok()
