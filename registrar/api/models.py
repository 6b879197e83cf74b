"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.

RegisterRequest deliberately accepts any JSON value per field: field rules
are applied by the shared rule set (registrar.domain.screening) so that
failures come back as 400 field errors rather than 422 schema errors.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from registrar.domain.ports import User


class RegisterRequest(BaseModel):
    """Request model for user registration (fields depend on the registration flow)."""

    model_config = ConfigDict(extra="ignore")

    first_name: Any = Field(None, alias="firstName", description="First name (2-100 characters)")
    last_name: Any = Field(None, alias="lastName", description="Last name (2-100 characters)")
    email: Any = Field(None, description="Gmail address")
    password: Any = Field(
        None,
        description="8-30 characters with upper, lower, digit and special character",
    )
    confirm_password: Any = Field(None, alias="confirmPassword", description="Repeat of password")
    date_of_birth: Any = Field(None, alias="dateOfBirth", description="ISO date, 18+ years ago")
    terms_accepted: Any = Field(None, alias="termsAccepted", description="Must be true")


class UserResponse(BaseModel):
    """Public user record (no credentials)."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    first_name: str | None = Field(None, alias="firstName")
    last_name: str | None = Field(None, alias="lastName")
    email: str
    created_at: datetime = Field(alias="createdAt")

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            created_at=user.created_at,
        )


class RegisterResponse(BaseModel):
    """Response model for successful registration."""

    success: bool = True
    message: str
    data: UserResponse


class UserListResponse(BaseModel):
    """Response model for the user listing."""

    success: bool = True
    data: list[UserResponse]


class FieldError(BaseModel):
    """One field-level error."""

    field: str
    message: str


class ValidationErrorResponse(BaseModel):
    """Field-level failure (400 validation, 409 duplicate email)."""

    success: bool = False
    errors: list[FieldError]


class ErrorResponse(BaseModel):
    """Standard error response model."""

    success: bool = False
    message: str
    error: str | None = None


class MessageResponse(BaseModel):
    """Confirmation message."""

    success: bool = True
    message: str


class HealthResponse(BaseModel):
    """Liveness probe response."""

    success: bool = True
    message: str
    timestamp: datetime
