"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting the domain
service, the shared rule set and the active registration fields into
routes.
"""

from fastapi import Depends, Request

from registrar.config.settings import Settings, get_settings
from registrar.domain.ports import UserRepository
from registrar.domain.registration import RegistrationService
from registrar.domain.rules import RuleSet, field_names


def get_repository(request: Request) -> UserRepository:
    """
    Get the user repository from app state.

    The repository is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.repository


def get_registration_service(
    request: Request, settings: Settings = Depends(get_settings)
) -> RegistrationService:
    """Create registration service over the app's repository."""
    repository = get_repository(request)
    return RegistrationService(repository=repository, bcrypt_rounds=settings.bcrypt_cost)


def get_rule_set(settings: Settings = Depends(get_settings)) -> RuleSet:
    """Shared validation rule set, built from configuration."""
    return settings.rule_set()


def get_registration_fields(settings: Settings = Depends(get_settings)) -> tuple[str, ...]:
    """Fields required by the configured registration flow."""
    return field_names(settings.registration_flow)
