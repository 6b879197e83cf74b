"""
Client layer - Registration form session.

Field touch tracking, the form state machine (snapshot + reducer), and
the submission orchestrator. Validation comes from the shared rule set
in registrar.domain.rules.
"""

from .ports import (
    RegistrationAccepted,
    RegistrationClient,
    RegistrationFailed,
    RegistrationOutcome,
    RegistrationRejected,
)
from .session import RegistrationForm
from .state import FormSnapshot, FormState, reduce, status_message, visible_errors
from .touched import TouchedFields

__all__ = [
    "FormSnapshot",
    "FormState",
    "RegistrationAccepted",
    "RegistrationClient",
    "RegistrationFailed",
    "RegistrationForm",
    "RegistrationOutcome",
    "RegistrationRejected",
    "TouchedFields",
    "reduce",
    "status_message",
    "visible_errors",
]
