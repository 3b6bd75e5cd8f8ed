"""
In-memory repository adapters - Process-local store implementations.

Used for tests and for running the API without PostgreSQL
(storage_backend=memory). Each store guards its state with a lock so the
check-and-insert for email uniqueness is atomic across threads, matching
the UNIQUE constraint of the PostgreSQL adapter.
"""

import threading
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timedelta, timezone

from cinepass.domain.ports import UserRecord, VerificationCodeRecord


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryCredentialStore:
    """Implements CredentialStore protocol with a dict keyed by email."""

    def __init__(self) -> None:
        self._users: dict[str, UserRecord] = {}
        self._lock = threading.Lock()

    def find_by_email(self, email: str) -> UserRecord | None:
        with self._lock:
            return self._users.get(email)

    def insert(self, user: UserRecord) -> bool:
        with self._lock:
            if user.email in self._users:
                return False
            self._users[user.email] = user
            return True

    def set_verified(self, email: str) -> bool:
        with self._lock:
            user = self._users.get(email)
            if user is None:
                return False
            self._users[email] = replace(user, verified=True)
            return True


class InMemoryVerificationCodeStore:
    """
    Implements VerificationCodeStore protocol with a list of records.

    Expiry is checked against the injected clock on every read.
    """

    def __init__(self, ttl_seconds: int = 600, clock: Callable[[], datetime] = utc_now) -> None:
        self._records: list[VerificationCodeRecord] = []
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock
        self._lock = threading.Lock()

    def insert(self, email: str, code: str) -> VerificationCodeRecord:
        now = self._clock()
        record = VerificationCodeRecord(
            email=email, code=code, created_at=now, expires_at=now + self._ttl
        )
        with self._lock:
            self._records.append(record)
        return record

    def find_by_email_and_code(self, email: str, code: str) -> VerificationCodeRecord | None:
        now = self._clock()
        with self._lock:
            for record in reversed(self._records):
                if record.email == email and record.code == code and not record.is_expired(now):
                    return record
        return None

    def delete_by_email_and_code(self, email: str, code: str) -> bool:
        with self._lock:
            kept = [r for r in self._records if not (r.email == email and r.code == code)]
            deleted = len(kept) != len(self._records)
            self._records = kept
        return deleted

    def purge_expired(self) -> int:
        now = self._clock()
        with self._lock:
            kept = [r for r in self._records if not r.is_expired(now)]
            purged = len(self._records) - len(kept)
            self._records = kept
        return purged

    def count(self, email: str | None = None) -> int:
        """Number of stored records (expired included), optionally for one email."""
        with self._lock:
            return sum(1 for r in self._records if email is None or r.email == email)
