"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- A rule set pinned to a fixed reference date
- Valid registration bodies for both flows
- In-memory repository and registration service
"""

from datetime import date
from typing import Any

import pytest

from registrar.adapters.repository.memory import InMemoryUserRepository
from registrar.domain.registration import RegistrationService
from registrar.domain.rules import RuleSet

TODAY = date(2024, 6, 15)

# bcrypt's minimum cost keeps the suite fast; the cost-factor test builds its own service.
FAST_BCRYPT_ROUNDS = 4


@pytest.fixture
def today() -> date:
    """Fixed reference date used by date-of-birth rules."""
    return TODAY


@pytest.fixture
def rules() -> RuleSet:
    """Rule set with the default reserved address and a fixed 'today'."""
    return RuleSet(today=lambda: TODAY)


@pytest.fixture
def profile_body() -> dict[str, Any]:
    """Valid body for the profile flow."""
    return {
        "firstName": "John",
        "lastName": "Doe",
        "email": "john.doe@gmail.com",
        "password": "Password1!",
    }


@pytest.fixture
def account_values() -> dict[str, Any]:
    """Valid values for the account flow (relative to TODAY)."""
    return {
        "email": "jane.roe@gmail.com",
        "password": "Password1!",
        "confirmPassword": "Password1!",
        "dateOfBirth": "1990-01-01",
        "termsAccepted": True,
    }


@pytest.fixture
def repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def service(repository: InMemoryUserRepository) -> RegistrationService:
    return RegistrationService(repository=repository, bcrypt_rounds=FAST_BCRYPT_ROUNDS)
