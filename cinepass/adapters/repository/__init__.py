"""Repository adapters - Database and in-memory implementations."""

from .memory import InMemoryCredentialStore, InMemoryVerificationCodeStore
from .postgres import PostgresCredentialStore, PostgresVerificationCodeStore, run_migrations

__all__ = [
    "InMemoryCredentialStore",
    "InMemoryVerificationCodeStore",
    "PostgresCredentialStore",
    "PostgresVerificationCodeStore",
    "run_migrations",
]
