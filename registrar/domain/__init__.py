"""
Domain layer - Pure business logic with zero framework imports.

This package contains the shared validation rule set, the server-side
screening mirror, and the user persistence gateway. It defines its own
port interfaces for infrastructure abstraction.
"""

from .exceptions import EmailAlreadyRegistered, RegistrationError, RegistrationUnavailable
from .ports import NewUser, User, UserRepository
from .registration import RegistrationService
from .rules import (
    FLOW_FIELDS,
    RegistrationField,
    RegistrationFlow,
    RuleSet,
    ValidationResult,
)
from .screening import FieldViolation, Screening, screen_registration

__all__ = [
    "FLOW_FIELDS",
    "EmailAlreadyRegistered",
    "FieldViolation",
    "NewUser",
    "RegistrationError",
    "RegistrationField",
    "RegistrationFlow",
    "RegistrationService",
    "RegistrationUnavailable",
    "RuleSet",
    "Screening",
    "User",
    "UserRepository",
    "ValidationResult",
    "screen_registration",
]
