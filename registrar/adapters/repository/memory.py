"""
In-memory repository adapter - Implements UserRepository protocol.

Used for development (REPOSITORY_BACKEND=memory) and tests. A single
lock makes insert atomic, so it enforces email uniqueness the same way
the database constraint does.
"""

import itertools
import threading
from datetime import datetime, timezone

from registrar.domain.ports import NewUser, User


class InMemoryUserRepository:
    """
    Implements UserRepository protocol with a lock-guarded dict.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def insert(self, user: NewUser) -> User | None:
        with self._lock:
            if user.email in self._users:
                return None
            now = datetime.now(timezone.utc)
            created = User(
                id=next(self._ids),
                email=user.email,
                password_hash=user.password_hash,
                first_name=user.first_name,
                last_name=user.last_name,
                created_at=now,
                updated_at=now,
            )
            self._users[user.email] = created
            return created

    def find_by_email(self, email: str) -> User | None:
        with self._lock:
            return self._users.get(email)

    def list_all(self) -> list[User]:
        with self._lock:
            users = list(self._users.values())
        return sorted(users, key=lambda u: (u.created_at, u.id), reverse=True)

    def delete_by_email(self, email: str) -> bool:
        with self._lock:
            return self._users.pop(email, None) is not None
