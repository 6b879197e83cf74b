"""
Validation rule set - Shared field rules for registration data.

Every rule is a pure function mapping a raw field value (and, for the
password confirmation, the primary password) to a ValidationResult.
Rules never raise: a non-string value for a string field is treated as
missing. The first failing check wins.

This module is the single source of truth for both validation sites:
the form session (registrar.client) and the server-side mirror
(registrar.domain.screening).
"""

import re
from collections.abc import Callable, Collection, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any


class RegistrationField(str, Enum):
    """Registration field names, spelled as they appear on the wire."""

    FIRST_NAME = "firstName"
    LAST_NAME = "lastName"
    EMAIL = "email"
    PASSWORD = "password"
    CONFIRM_PASSWORD = "confirmPassword"
    DATE_OF_BIRTH = "dateOfBirth"
    TERMS_ACCEPTED = "termsAccepted"


class RegistrationFlow(str, Enum):
    """
    Registration flow variants.

    - PROFILE: identity + credentials (first/last name, email, password)
    - ACCOUNT: credentials + confirmation, date of birth and terms
    """

    PROFILE = "profile"
    ACCOUNT = "account"


FLOW_FIELDS: dict[RegistrationFlow, tuple[RegistrationField, ...]] = {
    RegistrationFlow.PROFILE: (
        RegistrationField.FIRST_NAME,
        RegistrationField.LAST_NAME,
        RegistrationField.EMAIL,
        RegistrationField.PASSWORD,
    ),
    RegistrationFlow.ACCOUNT: (
        RegistrationField.EMAIL,
        RegistrationField.PASSWORD,
        RegistrationField.CONFIRM_PASSWORD,
        RegistrationField.DATE_OF_BIRTH,
        RegistrationField.TERMS_ACCEPTED,
    ),
}

DEFAULT_RESERVED_EMAILS = frozenset({"test@gmail.com"})

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 30
MINIMUM_AGE = 18

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
GMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@gmail\.com", re.IGNORECASE)
ISO_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")
SPECIAL_CHARACTERS = '!@#$%^&*(),.?":{}|<>'

ALREADY_REGISTERED_MESSAGE = "This email address is already registered"

# Checked in order; the first missing class is reported.
_PASSWORD_CLASSES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"[A-Z]"), "Password must contain at least one uppercase letter"),
    (re.compile(r"[a-z]"), "Password must contain at least one lowercase letter"),
    (re.compile(r"[0-9]"), "Password must contain at least one number"),
    (
        re.compile("[" + re.escape(SPECIAL_CHARACTERS) + "]"),
        "Password must contain at least one special character",
    ),
)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a single rule: ok, or a failure with a message."""

    ok: bool
    message: str | None = None

    def __bool__(self) -> bool:
        return self.ok


PASSED = ValidationResult(ok=True)


def _fail(message: str) -> ValidationResult:
    return ValidationResult(ok=False, message=message)


def _text(value: Any) -> str:
    """Return value if it is a string, else empty string (missing)."""
    return value if isinstance(value, str) else ""


def _validate_name(value: Any, label: str) -> ValidationResult:
    text = _text(value)
    if not text:
        return _fail(f"{label} is required")

    trimmed = text.strip()
    if len(trimmed) < NAME_MIN_LENGTH:
        return _fail(f"{label} must be at least {NAME_MIN_LENGTH} characters")
    if len(trimmed) > NAME_MAX_LENGTH:
        return _fail(f"{label} must not exceed {NAME_MAX_LENGTH} characters")
    return PASSED


def validate_first_name(value: Any) -> ValidationResult:
    """Validate first name: required, 2-100 characters after trimming."""
    return _validate_name(value, "First name")


def validate_last_name(value: Any) -> ValidationResult:
    """Validate last name: required, 2-100 characters after trimming."""
    return _validate_name(value, "Last name")


def validate_email(
    value: Any, reserved: Collection[str] = DEFAULT_RESERVED_EMAILS
) -> ValidationResult:
    """
    Validate email address (Gmail only).

    Checks, in order:
    1. Present
    2. Generic local@domain.tld shape
    3. Domain is exactly gmail.com (case-insensitive)
    4. Not a reserved (already registered) address

    Args:
        value: Raw email value; surrounding whitespace is ignored
        reserved: Lower-cased addresses treated as already registered

    Returns:
        ValidationResult
    """
    text = _text(value)
    if not text:
        return _fail("Email is required")

    trimmed = text.strip()
    if not EMAIL_PATTERN.fullmatch(trimmed):
        return _fail("Please enter a valid email address")

    if not GMAIL_PATTERN.fullmatch(trimmed):
        return _fail("Only Gmail addresses are accepted")

    if trimmed.lower() in reserved:
        return _fail(ALREADY_REGISTERED_MESSAGE)

    return PASSED


def validate_password(value: Any) -> ValidationResult:
    """
    Validate password strength.

    Length is checked first (8-30 inclusive, untrimmed), then each
    required character class. Only the first missing class is reported.
    """
    password = _text(value)
    if not password:
        return _fail("Password is required")

    if len(password) < PASSWORD_MIN_LENGTH:
        return _fail(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    if len(password) > PASSWORD_MAX_LENGTH:
        return _fail(f"Password must not exceed {PASSWORD_MAX_LENGTH} characters")

    for pattern, message in _PASSWORD_CLASSES:
        if not pattern.search(password):
            return _fail(message)

    return PASSED


def validate_confirm_password(password: Any, confirmation: Any) -> ValidationResult:
    """Validate that the confirmation is present and equals the password."""
    confirm = _text(confirmation)
    if not confirm:
        return _fail("Please confirm your password")
    if confirm != _text(password):
        return _fail("Passwords do not match")
    return PASSED


def calculate_age(born: date, today: date) -> int:
    """Whole years between born and today, one less if the birthday is still ahead."""
    age = today.year - born.year
    if (today.month, today.day) < (born.month, born.day):
        age -= 1
    return age


def validate_date_of_birth(value: Any, today: date | None = None) -> ValidationResult:
    """
    Validate an ISO (YYYY-MM-DD) date of birth.

    The date must parse, lie strictly before today, and give an age of at
    least 18 whole years.

    Args:
        value: Raw date string
        today: Reference date (defaults to date.today())
    """
    text = _text(value).strip()
    if not text:
        return _fail("Date of birth is required")

    if not ISO_DATE_PATTERN.fullmatch(text):
        return _fail("Please enter a valid date")
    try:
        born = date.fromisoformat(text)
    except ValueError:
        return _fail("Please enter a valid date")

    reference = today or date.today()
    if born >= reference:
        return _fail("Date of birth must be in the past")

    if calculate_age(born, reference) < MINIMUM_AGE:
        return _fail(f"You must be at least {MINIMUM_AGE} years old")

    return PASSED


def validate_terms(value: Any) -> ValidationResult:
    """Terms must be explicitly accepted (boolean True)."""
    if value is not True:
        return _fail("You must accept the terms and conditions")
    return PASSED


@dataclass(frozen=True)
class RuleSet:
    """
    Rule dispatcher bound to its configurable context.

    Both validation sites build a RuleSet from the same settings so the
    reserved addresses and the reference date never differ between them.
    """

    reserved_emails: frozenset[str] = DEFAULT_RESERVED_EMAILS
    today: Callable[[], date] = field(default=date.today)

    def check(self, name: str, values: Mapping[str, Any]) -> ValidationResult:
        """
        Validate one field against the current form values.

        The whole value mapping is passed so the confirmation rule can
        compare against the primary password. Unknown fields pass.
        """
        key = field_key(name)
        value = values.get(key)

        if key == RegistrationField.FIRST_NAME.value:
            return validate_first_name(value)
        if key == RegistrationField.LAST_NAME.value:
            return validate_last_name(value)
        if key == RegistrationField.EMAIL.value:
            return validate_email(value, self.reserved_emails)
        if key == RegistrationField.PASSWORD.value:
            return validate_password(value)
        if key == RegistrationField.CONFIRM_PASSWORD.value:
            return validate_confirm_password(
                values.get(RegistrationField.PASSWORD.value), value
            )
        if key == RegistrationField.DATE_OF_BIRTH.value:
            return validate_date_of_birth(value, self.today())
        if key == RegistrationField.TERMS_ACCEPTED.value:
            return validate_terms(value)
        return PASSED

    def check_all(
        self, fields: Iterable[str], values: Mapping[str, Any]
    ) -> dict[str, str]:
        """Run every field's rule; return messages for failing fields, in field order."""
        errors: dict[str, str] = {}
        for name in fields:
            result = self.check(name, values)
            if not result.ok:
                errors[field_key(name)] = result.message or ""
        return errors


def field_key(name: str) -> str:
    """Plain string key for a field name or RegistrationField member."""
    return name.value if isinstance(name, RegistrationField) else name


def field_names(flow: RegistrationFlow) -> tuple[str, ...]:
    """Plain string field names for a flow."""
    return tuple(f.value for f in FLOW_FIELDS[flow])
