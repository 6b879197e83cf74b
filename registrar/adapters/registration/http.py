"""
HTTP registration client - Implements RegistrationClient protocol.

Submits form values to the registration API (POST /register) with httpx
and maps the response contract onto registration outcomes:

- 201                     -> RegistrationAccepted
- 400/409 with "errors"   -> RegistrationRejected
- anything else           -> RegistrationFailed (server "message" if present)
- transport error         -> RegistrationUnavailable is raised

No timeout policy lives in the form session; the httpx client's timeout
is the only one.
"""

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from registrar.client.ports import (
    RegistrationAccepted,
    RegistrationFailed,
    RegistrationOutcome,
    RegistrationRejected,
)
from registrar.client.session import GENERIC_FAILURE_MESSAGE
from registrar.config.settings import Settings
from registrar.domain.exceptions import RegistrationUnavailable
from registrar.domain.screening import FieldViolation

logger = logging.getLogger(__name__)


def outcome_from_response(response: httpx.Response) -> RegistrationOutcome:
    """Translate a /register response into a registration outcome."""
    try:
        body = response.json()
    except ValueError:
        logger.error(f"Non-JSON registration response (HTTP {response.status_code})")
        return RegistrationFailed(GENERIC_FAILURE_MESSAGE)

    if not isinstance(body, dict):
        return RegistrationFailed(GENERIC_FAILURE_MESSAGE)

    if response.status_code == 201 and body.get("success"):
        return RegistrationAccepted(data=body.get("data") or {})

    errors = body.get("errors")
    if response.status_code in (400, 409) and isinstance(errors, list):
        violations = tuple(
            FieldViolation(field=str(item["field"]), message=str(item["message"]))
            for item in errors
            if isinstance(item, dict) and "field" in item and "message" in item
        )
        if violations:
            return RegistrationRejected(violations)

    message = body.get("message")
    if isinstance(message, str) and message:
        return RegistrationFailed(message)
    return RegistrationFailed(GENERIC_FAILURE_MESSAGE)


class HttpRegistrationClient:
    """
    Implements RegistrationClient protocol over HTTP.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Args:
            base_url: API root (e.g. http://localhost:5001)
            timeout: Request timeout in seconds for the lazily created client
            client: Preconfigured AsyncClient (its base_url is used as-is)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "HttpRegistrationClient":
        return cls(settings.api_base_url)

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-initialize HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout)
        return self._client

    async def register(self, values: Mapping[str, Any]) -> RegistrationOutcome:
        try:
            response = await self.client.post("/register", json=dict(values))
        except httpx.HTTPError as e:
            logger.error(f"Registration request failed: {e}")
            raise RegistrationUnavailable(str(e)) from e

        return outcome_from_response(response)

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
