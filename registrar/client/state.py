"""
Form state machine - Immutable snapshots and a pure reducer.

Form State Machine
==================

States:
- IDLE: Nothing in flight (initial state)
- WARNING: Submission accepted by validation, registration call in flight
- FAILURE: Validation or the registration call failed
- SUCCESS: Registration call succeeded; resets to IDLE after a delay

Transitions:
    IDLE/WARNING/SUCCESS -> FAILURE   (submit with invalid fields, or call failed)
    IDLE/FAILURE/SUCCESS -> WARNING   (submit with valid fields)
    WARNING -> SUCCESS                (call succeeded)
    SUCCESS -> IDLE                   (reset delay elapsed; values cleared)

A submit is judged from the current state in one step: from IDLE,
FAILURE or SUCCESS it goes straight to WARNING (all fields pass) or
FAILURE (any field fails). There is no route to SUCCESS except
through WARNING; events that do not apply to the current state leave the
snapshot unchanged.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Union

from registrar.domain.rules import RegistrationField, RuleSet, field_key
from registrar.domain.screening import FieldViolation

from .touched import TouchedFields

FieldValue = Union[str, bool]


class FormState(str, Enum):
    """Presentation state of a registration form."""

    IDLE = "idle"
    WARNING = "warning"
    FAILURE = "failure"
    SUCCESS = "success"


@dataclass(frozen=True)
class FormSnapshot:
    """
    One immutable state of a form session.

    errors only holds fields that currently fail; a missing key means no error.
    """

    fields: tuple[str, ...]
    values: Mapping[str, FieldValue]
    errors: Mapping[str, str] = field(default_factory=dict)
    touched: TouchedFields = field(default_factory=TouchedFields)
    state: FormState = FormState.IDLE
    submitting: bool = False


# Events


@dataclass(frozen=True)
class FieldChanged:
    field: str
    value: FieldValue


@dataclass(frozen=True)
class FieldBlurred:
    field: str


@dataclass(frozen=True)
class SubmitRequested:
    pass


@dataclass(frozen=True)
class SubmissionSucceeded:
    pass


@dataclass(frozen=True)
class SubmissionRejected:
    violations: tuple[FieldViolation, ...]


@dataclass(frozen=True)
class SubmissionFailed:
    field: str
    message: str


@dataclass(frozen=True)
class SubmissionSettled:
    pass


@dataclass(frozen=True)
class ResetElapsed:
    pass


FormEvent = Union[
    FieldChanged,
    FieldBlurred,
    SubmitRequested,
    SubmissionSucceeded,
    SubmissionRejected,
    SubmissionFailed,
    SubmissionSettled,
    ResetElapsed,
]


def initial_values(fields: tuple[str, ...]) -> dict[str, FieldValue]:
    """Blank values for a form: empty strings, terms unchecked."""
    return {
        name: False if name == RegistrationField.TERMS_ACCEPTED.value else ""
        for name in fields
    }


def initial_snapshot(fields: tuple[str, ...]) -> FormSnapshot:
    fields = tuple(field_key(name) for name in fields)
    return FormSnapshot(fields=fields, values=initial_values(fields))


def _with_error(errors: Mapping[str, str], name: str, message: str | None) -> dict[str, str]:
    updated = dict(errors)
    if message:
        updated[name] = message
    else:
        updated.pop(name, None)
    return updated


def reduce(snapshot: FormSnapshot, event: FormEvent, rules: RuleSet) -> FormSnapshot:
    """
    Apply one event to a snapshot.

    Args:
        snapshot: Current form snapshot
        event: Event to apply
        rules: Shared validation rule set

    Returns:
        The next snapshot (the same object if the event does not apply)
    """
    if isinstance(event, FieldChanged):
        name = field_key(event.field)
        values = {**snapshot.values, name: event.value}
        errors = dict(snapshot.errors)

        if snapshot.touched.is_touched(name):
            errors = _with_error(errors, name, rules.check(name, values).message)

        # The confirmation depends on the password: re-check it on password edits.
        confirm = RegistrationField.CONFIRM_PASSWORD.value
        if name == RegistrationField.PASSWORD.value and snapshot.touched.is_touched(confirm):
            errors = _with_error(errors, confirm, rules.check(confirm, values).message)

        return replace(snapshot, values=values, errors=errors)

    if isinstance(event, FieldBlurred):
        name = field_key(event.field)
        return replace(
            snapshot,
            touched=snapshot.touched.touch(name),
            errors=_with_error(snapshot.errors, name, rules.check(name, snapshot.values).message),
        )

    if isinstance(event, SubmitRequested):
        if snapshot.submitting:
            return snapshot
        errors = rules.check_all(snapshot.fields, snapshot.values)
        return replace(
            snapshot,
            submitting=True,
            errors=errors,
            touched=snapshot.touched.touch_all(snapshot.fields),
            state=FormState.FAILURE if errors else FormState.WARNING,
        )

    if isinstance(event, SubmissionSucceeded):
        if snapshot.state is not FormState.WARNING:
            return snapshot
        return replace(snapshot, state=FormState.SUCCESS)

    if isinstance(event, SubmissionRejected):
        if snapshot.state is not FormState.WARNING:
            return snapshot
        errors = dict(snapshot.errors)
        for violation in event.violations:
            errors[violation.field] = violation.message
        return replace(
            snapshot,
            errors=errors,
            touched=snapshot.touched.touch_all(errors),
            state=FormState.FAILURE,
        )

    if isinstance(event, SubmissionFailed):
        if snapshot.state is not FormState.WARNING:
            return snapshot
        name = field_key(event.field)
        return replace(
            snapshot,
            errors={**snapshot.errors, name: event.message},
            touched=snapshot.touched.touch(name),
            state=FormState.FAILURE,
        )

    if isinstance(event, SubmissionSettled):
        return replace(snapshot, submitting=False)

    if isinstance(event, ResetElapsed):
        if snapshot.state is not FormState.SUCCESS:
            return snapshot
        return initial_snapshot(snapshot.fields)

    raise TypeError(f"Unknown form event: {event!r}")


def visible_errors(snapshot: FormSnapshot) -> dict[str, str]:
    """Errors of touched fields only."""
    return {
        name: message
        for name, message in snapshot.errors.items()
        if snapshot.touched.is_touched(name)
    }


def status_message(snapshot: FormSnapshot) -> str | None:
    """Banner text for the current state (None while idle)."""
    if snapshot.state is FormState.WARNING:
        return "Processing your registration..."
    if snapshot.state is FormState.SUCCESS:
        return "Registration successful! Welcome aboard!"
    if snapshot.state is FormState.FAILURE:
        if snapshot.errors:
            return "Please fix the errors above and try again."
        return "Registration failed. Please try again."
    return None
