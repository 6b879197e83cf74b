"""
Registration domain service - User persistence gateway.

This module contains the create/find/delete contract the rest of the
system consumes. It owns email normalization and password hashing; the
repository owns uniqueness.

Uniqueness
==========

The service pre-checks find_by_email() so the common duplicate case is
rejected before bcrypt runs. The pre-check is only an optimization: two
requests can both pass it. The repository's insert is the arbiter, and
a conflict at insert time is reported as EmailAlreadyRegistered, the
same error the pre-check raises.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import bcrypt

from .exceptions import EmailAlreadyRegistered
from .ports import NewUser, User, UserRepository
from .rules import RegistrationField

logger = logging.getLogger(__name__)


@dataclass
class RegistrationService:
    """
    Domain service for user registration.

    Orchestrates the create flow: email normalization, uniqueness
    pre-check, password hashing, and insert.
    """

    repository: UserRepository
    bcrypt_rounds: int = 10

    def register(
        self,
        email: str,
        password: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> User:
        """
        Create a new user.

        Args:
            email: User's email address (will be normalized)
            password: User's plaintext password (will be hashed)
            first_name: Optional first name
            last_name: Optional last name

        Returns:
            The created User

        Raises:
            EmailAlreadyRegistered: If the email is already taken
        """
        normalized_email = self._normalize_email(email)

        if self.repository.find_by_email(normalized_email) is not None:
            raise EmailAlreadyRegistered(normalized_email)

        password_hash = self._hash_password(password)
        user = self.repository.insert(
            NewUser(
                email=normalized_email,
                password_hash=password_hash,
                first_name=first_name,
                last_name=last_name,
            )
        )
        if user is None:
            logger.info("Insert-time uniqueness conflict for registration")
            raise EmailAlreadyRegistered(normalized_email)

        logger.info("User %s registered", user.id)
        return user

    def register_screened(self, body: Mapping[str, Any]) -> User:
        """Create a user from a body that already passed screen_registration()."""
        return self.register(
            email=body[RegistrationField.EMAIL.value],
            password=body[RegistrationField.PASSWORD.value],
            first_name=body.get(RegistrationField.FIRST_NAME.value),
            last_name=body.get(RegistrationField.LAST_NAME.value),
        )

    def find_by_email(self, email: str) -> User | None:
        """Look up a user by (normalized) email."""
        return self.repository.find_by_email(self._normalize_email(email))

    def list_users(self) -> list[User]:
        """Return all registered users, newest first."""
        return self.repository.list_all()

    def delete_user(self, email: str) -> bool:
        """Delete a user by (normalized) email. Returns False if absent."""
        return self.repository.delete_by_email(self._normalize_email(email))

    def verify_password(self, user: User, password: str) -> bool:
        """Check a plaintext password against the user's bcrypt hash."""
        return bcrypt.checkpw(password.encode(), user.password_hash.encode())

    def _normalize_email(self, email: str) -> str:
        """
        Normalize email address for consistent storage and lookup.

        Applies: strip whitespace + lowercase
        """
        return email.strip().lower()

    def _hash_password(self, password: str) -> str:
        """Hash password using bcrypt with the configured cost factor."""
        return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=self.bcrypt_rounds)).decode()
