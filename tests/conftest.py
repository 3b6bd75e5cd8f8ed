"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- In-memory stores with a controllable clock
- A notification sender that records outgoing messages
- An AccountService wired to those fakes
"""

import re
from datetime import datetime, timedelta, timezone

import pytest

from cinepass.adapters.repository.memory import (
    InMemoryCredentialStore,
    InMemoryVerificationCodeStore,
)
from cinepass.domain.accounts import AccountService

CODE_PATTERN = re.compile(r"Your verification code is ([0-9a-f]{6})")


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class RecordingSender:
    """NotificationSender that keeps every message instead of delivering it."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str, str]] = []

    def send(self, to_address: str, subject: str, body: str) -> None:
        self.sent.append((to_address, subject, body))

    def last_code(self, to_address: str) -> str:
        for address, _, body in reversed(self.sent):
            if address == to_address:
                match = CODE_PATTERN.search(body)
                assert match is not None, f"no code in {body!r}"
                return match.group(1)
        raise AssertionError(f"nothing sent to {to_address}")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def credential_store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest.fixture
def code_store(clock: FakeClock) -> InMemoryVerificationCodeStore:
    return InMemoryVerificationCodeStore(ttl_seconds=600, clock=clock)


@pytest.fixture
def sender() -> RecordingSender:
    return RecordingSender()


@pytest.fixture
def service(
    credential_store: InMemoryCredentialStore,
    code_store: InMemoryVerificationCodeStore,
    sender: RecordingSender,
) -> AccountService:
    """AccountService over in-memory fakes (low bcrypt cost keeps tests fast)."""
    return AccountService(
        credentials=credential_store, codes=code_store, notifier=sender, bcrypt_cost=4
    )
