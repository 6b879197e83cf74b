"""Registration client adapters - HTTP and in-process implementations."""

from .http import HttpRegistrationClient, outcome_from_response
from .local import LocalRegistrationClient

__all__ = ["HttpRegistrationClient", "LocalRegistrationClient", "outcome_from_response"]
