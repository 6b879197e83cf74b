"""
In-process registration client - Implements RegistrationClient protocol.

Runs the server-side screening and the persistence gateway directly,
without HTTP. The gateway is synchronous (bcrypt, database), so it runs
in a worker thread to keep the event loop free.
"""

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from registrar.client.ports import (
    RegistrationAccepted,
    RegistrationOutcome,
    RegistrationRejected,
)
from registrar.domain.exceptions import EmailAlreadyRegistered
from registrar.domain.registration import RegistrationService
from registrar.domain.rules import (
    ALREADY_REGISTERED_MESSAGE,
    RegistrationField,
    RegistrationFlow,
    RuleSet,
    field_names,
)
from registrar.domain.screening import FieldViolation, screen_registration


@dataclass
class LocalRegistrationClient:
    """
    Implements RegistrationClient protocol in-process.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    service: RegistrationService
    fields: tuple[str, ...] = field(default_factory=lambda: field_names(RegistrationFlow.ACCOUNT))
    rules: RuleSet = field(default_factory=RuleSet)

    async def register(self, values: Mapping[str, Any]) -> RegistrationOutcome:
        screening = screen_registration(values, self.fields, self.rules)
        if not screening.ok:
            return RegistrationRejected(screening.violations)

        try:
            user = await asyncio.to_thread(self.service.register_screened, screening.body)
        except EmailAlreadyRegistered:
            return RegistrationRejected(
                (FieldViolation(RegistrationField.EMAIL.value, ALREADY_REGISTERED_MESSAGE),)
            )

        return RegistrationAccepted(data=user.public_record())
