"""
Registration screening - Server-side mirror of the form rules.

Runs the shared RuleSet over a raw request body before anything reaches
the persistence gateway. The outcome is either a normalized body or a
list of field violations; there are no side effects either way.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .rules import RegistrationField, RuleSet, field_key

# Identity fields are trimmed before being passed downstream.
# Password fields are passed through untouched.
_TRIMMED_FIELDS = frozenset(
    {
        RegistrationField.FIRST_NAME.value,
        RegistrationField.LAST_NAME.value,
        RegistrationField.EMAIL.value,
        RegistrationField.DATE_OF_BIRTH.value,
    }
)


@dataclass(frozen=True)
class FieldViolation:
    """A validation failure attached to one named field."""

    field: str
    message: str


@dataclass(frozen=True)
class Screening:
    """Result of screening a registration body."""

    body: dict[str, Any] = field(default_factory=dict)
    violations: tuple[FieldViolation, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.violations


def normalize_body(body: Mapping[str, Any], fields: Iterable[str]) -> dict[str, Any]:
    """
    Trim identity strings and lower-case the email.

    Only the flow's fields are kept; anything else in the body is dropped.
    """
    normalized: dict[str, Any] = {}
    for name in fields:
        key = field_key(name)
        value = body.get(key)
        if isinstance(value, str) and key in _TRIMMED_FIELDS:
            value = value.strip()
        if key == RegistrationField.EMAIL.value and isinstance(value, str):
            value = value.lower()
        normalized[key] = value
    return normalized


def screen_registration(
    body: Mapping[str, Any], fields: Iterable[str], rules: RuleSet
) -> Screening:
    """
    Validate a raw registration body with the shared rule set.

    Args:
        body: Raw request body (camelCase keys)
        fields: Fields required by the active registration flow
        rules: Rule set shared with the form session

    Returns:
        Screening with the normalized body, or with violations in field order
    """
    fields = tuple(fields)
    errors = rules.check_all(fields, body)
    if errors:
        return Screening(
            violations=tuple(FieldViolation(name, message) for name, message in errors.items())
        )
    return Screening(body=normalize_body(body, fields))
