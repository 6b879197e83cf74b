"""Repository adapters - Database implementations."""

from .memory import InMemoryUserRepository
from .postgres import PostgresUserRepository, checked_out, run_migrations

__all__ = ["InMemoryUserRepository", "PostgresUserRepository", "checked_out", "run_migrations"]
