"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the persisted User entity and the interface (port)
the domain requires from the persistence layer. Adapters implement it.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol


@dataclass(frozen=True)
class NewUser:
    """Insert payload for a user. Email is normalized, password already hashed."""

    email: str
    password_hash: str
    first_name: str | None = None
    last_name: str | None = None


@dataclass(frozen=True)
class User:
    """
    Persisted user entity.

    Immutable once created except for updated_at, which the store maintains.
    The password hash never leaves the domain/API boundary.
    """

    id: int
    email: str
    password_hash: str
    first_name: str | None
    last_name: str | None
    created_at: datetime
    updated_at: datetime

    def public_record(self) -> dict[str, Any]:
        """Wire representation without credentials (camelCase keys)."""
        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "createdAt": self.created_at.isoformat(),
        }


class UserRepository(Protocol):
    """Port interface for user persistence."""

    def insert(self, user: NewUser) -> User | None:
        """
        Atomically insert a user.

        The store's uniqueness constraint on email is authoritative: a
        concurrent insert that already claimed the address makes this
        call return None rather than raise a storage error.

        Args:
            user: Normalized insert payload

        Returns:
            Created User, or None if the email is already taken
        """
        ...

    def find_by_email(self, email: str) -> User | None:
        """Look up a user by normalized email."""
        ...

    def list_all(self) -> list[User]:
        """Return all users, newest first."""
        ...

    def delete_by_email(self, email: str) -> bool:
        """
        Delete a user by normalized email.

        Returns:
            True if a user was deleted, False if none matched
        """
        ...
