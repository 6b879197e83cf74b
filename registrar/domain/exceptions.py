"""
Domain exceptions - Semantic error types for registration.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
Field validation failures are not exceptions; they are returned as
ValidationResult / FieldViolation values.
"""


class RegistrationError(Exception):
    """Base class for registration domain errors."""

    pass


class EmailAlreadyRegistered(RegistrationError):
    """Email is already taken by an existing user (pre-check or insert-time conflict)."""

    pass


class RegistrationUnavailable(RegistrationError):
    """The registration service could not be reached (transport failure)."""

    pass
