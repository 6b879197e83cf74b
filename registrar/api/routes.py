"""
API routes - Registration and user management endpoints.

This module defines the HTTP endpoints:
- POST /register - Screen the body, then create the user
- GET /users - List registered users (no credentials)
- DELETE /users/{email} - Delete a user by email
"""

import logging
from collections.abc import Iterable

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from registrar.api.dependencies import (
    get_registration_fields,
    get_registration_service,
    get_rule_set,
)
from registrar.api.models import (
    ErrorResponse,
    FieldError,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
    UserListResponse,
    UserResponse,
    ValidationErrorResponse,
)
from registrar.domain.exceptions import EmailAlreadyRegistered
from registrar.domain.registration import RegistrationService
from registrar.domain.rules import ALREADY_REGISTERED_MESSAGE, RegistrationField, RuleSet
from registrar.domain.screening import FieldViolation, screen_registration

logger = logging.getLogger(__name__)

router = APIRouter(tags=["users"])


def _violations_response(status_code: int, violations: Iterable[FieldViolation]) -> JSONResponse:
    body = ValidationErrorResponse(
        errors=[FieldError(field=v.field, message=v.message) for v in violations]
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


def _error_response(status_code: int, message: str) -> JSONResponse:
    body = ErrorResponse(message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@router.post(
    "/register",
    response_model=RegisterResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ValidationErrorResponse, "description": "Field validation failed"},
        409: {"model": ValidationErrorResponse, "description": "Email already registered"},
        500: {"model": ErrorResponse, "description": "Unexpected failure"},
    },
    summary="Register a new user",
    description="Validate the registration body with the shared rule set and create the user. "
    "Field failures are reported as a list of {field, message}.",
)
async def register(
    request_data: RegisterRequest,
    service: RegistrationService = Depends(get_registration_service),
    rules: RuleSet = Depends(get_rule_set),
    fields: tuple[str, ...] = Depends(get_registration_fields),
) -> RegisterResponse | JSONResponse:
    """
    Register a new user.

    Screening runs before the gateway is touched; a body with any failing
    field never reaches the repository.
    """
    screening = screen_registration(request_data.model_dump(by_alias=True), fields, rules)
    if not screening.ok:
        logger.info(
            "Registration rejected by validation: %s",
            ", ".join(v.field for v in screening.violations),
        )
        return _violations_response(status.HTTP_400_BAD_REQUEST, screening.violations)

    try:
        user = service.register_screened(screening.body)
    except EmailAlreadyRegistered:
        return _violations_response(
            status.HTTP_409_CONFLICT,
            [FieldViolation(RegistrationField.EMAIL.value, ALREADY_REGISTERED_MESSAGE)],
        )
    except Exception:
        logger.exception("Registration error")
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "An error occurred during registration"
        )

    return RegisterResponse(message="Registration successful", data=UserResponse.from_user(user))


@router.get(
    "/users",
    response_model=UserListResponse,
    response_model_exclude_none=True,
    responses={500: {"model": ErrorResponse, "description": "Unexpected failure"}},
    summary="List registered users",
)
async def list_users(
    service: RegistrationService = Depends(get_registration_service),
) -> UserListResponse | JSONResponse:
    """Return all registered users, newest first, without credentials."""
    try:
        users = service.list_users()
    except Exception:
        logger.exception("Get users error")
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "An error occurred while fetching users"
        )

    return UserListResponse(data=[UserResponse.from_user(user) for user in users])


@router.delete(
    "/users/{email}",
    response_model=MessageResponse,
    responses={
        404: {"model": ErrorResponse, "description": "User not found"},
        500: {"model": ErrorResponse, "description": "Unexpected failure"},
    },
    summary="Delete a user by email",
)
async def delete_user(
    email: str,
    service: RegistrationService = Depends(get_registration_service),
) -> MessageResponse | JSONResponse:
    """Delete the user registered under email (case-insensitive)."""
    try:
        deleted = service.delete_user(email)
    except Exception:
        logger.exception("Delete user error")
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "An error occurred while deleting user"
        )

    if not deleted:
        return _error_response(status.HTTP_404_NOT_FOUND, "User not found")

    return MessageResponse(message="User deleted successfully")
