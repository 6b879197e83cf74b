"""
Port interfaces - Registration call seam for the form session.

The form session never decides the outcome of a registration itself; it
asks a RegistrationClient. Adapters talk to the API over HTTP or call the
gateway in-process, and tests supply their own.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, Union

from registrar.domain.screening import FieldViolation


@dataclass(frozen=True)
class RegistrationAccepted:
    """The user was created. data is the public user record."""

    data: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RegistrationRejected:
    """The service reported field-level problems (validation or duplicate email)."""

    violations: tuple[FieldViolation, ...]


@dataclass(frozen=True)
class RegistrationFailed:
    """The service failed without field detail."""

    message: str


RegistrationOutcome = Union[RegistrationAccepted, RegistrationRejected, RegistrationFailed]


class RegistrationClient(Protocol):
    """Port interface for submitting a registration."""

    async def register(self, values: Mapping[str, Any]) -> RegistrationOutcome:
        """
        Submit form values for registration.

        Args:
            values: Current form values keyed by wire field name

        Returns:
            RegistrationOutcome describing the service's answer

        Raises:
            RegistrationUnavailable: If the service could not be reached
        """
        ...
