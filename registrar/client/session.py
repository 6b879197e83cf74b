"""
Registration form session - Submission orchestrator.

Owns one form's snapshot and drives it through the reducer in
registrar.client.state. The only suspension point is the registration
call inside submit(); while it is in flight the submitting flag blocks
re-entry, and field edits still update the snapshot.
"""

import asyncio
import logging
from collections.abc import Iterable

from registrar.config.settings import Settings
from registrar.domain.exceptions import RegistrationUnavailable
from registrar.domain.rules import RegistrationField, RegistrationFlow, RuleSet, field_names

from .ports import (
    RegistrationAccepted,
    RegistrationClient,
    RegistrationFailed,
    RegistrationOutcome,
    RegistrationRejected,
)
from .state import (
    FieldBlurred,
    FieldChanged,
    FieldValue,
    FormEvent,
    FormSnapshot,
    FormState,
    ResetElapsed,
    SubmissionFailed,
    SubmissionRejected,
    SubmissionSettled,
    SubmissionSucceeded,
    SubmitRequested,
    initial_snapshot,
    reduce,
)

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Registration failed. Please try again."
UNAVAILABLE_MESSAGE = "Unable to reach the registration service. Please try again."
DEFAULT_RESET_DELAY = 3.0


class RegistrationForm:
    """
    One user's registration form.

    Args:
        client: Registration call seam (HTTP, in-process, or a test double)
        fields: Fields of the form, in display order
        rules: Shared validation rule set
        reset_delay: Seconds the success state is shown before the form resets
        generic_error_field: Field that carries messages without field detail
    """

    def __init__(
        self,
        client: RegistrationClient,
        fields: Iterable[str] = field_names(RegistrationFlow.ACCOUNT),
        rules: RuleSet | None = None,
        reset_delay: float = DEFAULT_RESET_DELAY,
        generic_error_field: str = RegistrationField.EMAIL.value,
    ) -> None:
        self._client = client
        self._rules = rules or RuleSet()
        self._snapshot = initial_snapshot(tuple(fields))
        self._reset_delay = reset_delay
        self._generic_error_field = generic_error_field
        self._reset_task: asyncio.Task[None] | None = None

    @classmethod
    def from_settings(cls, settings: Settings, client: RegistrationClient) -> "RegistrationForm":
        """Build a form for the configured flow, rules and reset delay."""
        return cls(
            client,
            fields=field_names(settings.registration_flow),
            rules=settings.rule_set(),
            reset_delay=settings.form_reset_delay_seconds,
        )

    @property
    def snapshot(self) -> FormSnapshot:
        return self._snapshot

    @property
    def state(self) -> FormState:
        return self._snapshot.state

    def dispatch(self, event: FormEvent) -> FormSnapshot:
        """Apply an event and store the resulting snapshot."""
        self._snapshot = reduce(self._snapshot, event, self._rules)
        return self._snapshot

    def change(self, name: str, value: FieldValue) -> FormSnapshot:
        return self.dispatch(FieldChanged(name, value))

    def blur(self, name: str) -> FormSnapshot:
        return self.dispatch(FieldBlurred(name))

    async def submit(self) -> tuple[FormState, dict[str, str]]:
        """
        Validate every field and, if all pass, submit the registration.

        Returns:
            The resulting form state and error map
        """
        if self._snapshot.submitting:
            return self._result()

        self._cancel_reset()
        self.dispatch(SubmitRequested())
        try:
            if self._snapshot.state is not FormState.WARNING:
                logger.info(
                    "Registration blocked by validation: %s",
                    ", ".join(sorted(self._snapshot.errors)),
                )
                return self._result()

            await self._call_registration()
        finally:
            self.dispatch(SubmissionSettled())

        return self._result()

    async def wait_for_reset(self) -> None:
        """Wait until a pending post-success reset has run (or was cancelled)."""
        if self._reset_task is not None:
            await asyncio.wait({self._reset_task})

    def close(self) -> None:
        """Cancel any pending reset; call when the session ends."""
        self._cancel_reset()

    async def _call_registration(self) -> None:
        values = dict(self._snapshot.values)
        try:
            outcome = await self._client.register(values)
        except RegistrationUnavailable:
            logger.warning("Registration service unavailable")
            self._fail(UNAVAILABLE_MESSAGE)
            return
        except Exception:
            logger.exception("Unexpected error during registration call")
            self._fail(GENERIC_FAILURE_MESSAGE)
            return

        self._apply_outcome(outcome)

    def _apply_outcome(self, outcome: RegistrationOutcome) -> None:
        if isinstance(outcome, RegistrationAccepted):
            self.dispatch(SubmissionSucceeded())
            self._schedule_reset()
        elif isinstance(outcome, RegistrationRejected) and outcome.violations:
            logger.info(
                "Registration rejected for fields: %s",
                ", ".join(v.field for v in outcome.violations),
            )
            self.dispatch(SubmissionRejected(outcome.violations))
        elif isinstance(outcome, RegistrationFailed) and outcome.message:
            self._fail(outcome.message)
        else:
            self._fail(GENERIC_FAILURE_MESSAGE)

    def _fail(self, message: str) -> None:
        self.dispatch(SubmissionFailed(self._generic_error_field, message))

    def _schedule_reset(self) -> None:
        self._reset_task = asyncio.get_running_loop().create_task(self._reset_after_delay())

    async def _reset_after_delay(self) -> None:
        await asyncio.sleep(self._reset_delay)
        self.dispatch(ResetElapsed())

    def _cancel_reset(self) -> None:
        if self._reset_task is not None and not self._reset_task.done():
            self._reset_task.cancel()

    def _result(self) -> tuple[FormState, dict[str, str]]:
        return self._snapshot.state, dict(self._snapshot.errors)

