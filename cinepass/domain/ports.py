"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the records the account workflow owns and the
interfaces (ports) it requires from infrastructure. Adapters implement
these protocols via structural subtyping.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


@dataclass(frozen=True)
class UserRecord:
    """
    Credential record for one account.

    Lifecycle:
    - Created by signup with verified=False
    - verified flips to True exactly once, via verify
    - Never reverts, never deleted by the workflow
    """

    username: str
    email: str
    password_hash: str
    verified: bool = False


@dataclass(frozen=True)
class VerificationCodeRecord:
    """One-time code proving ownership of an email address."""

    email: str
    code: str
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


class CredentialStore(Protocol):
    """Port interface for credential persistence."""

    def find_by_email(self, email: str) -> UserRecord | None:
        """
        Look up the credential record for an email.

        Args:
            email: Normalized email address

        Returns:
            The stored record, or None if no account exists
        """
        ...

    def insert(self, user: UserRecord) -> bool:
        """
        Persist a new credential record.

        Uniqueness of email must be enforced by the store itself so that
        concurrent inserts for the same email cannot both succeed.

        Returns:
            True if inserted, False if the email is already registered
        """
        ...

    def set_verified(self, email: str) -> bool:
        """
        Mark the account as verified.

        Returns:
            True if an account exists for the email, False otherwise
        """
        ...


class VerificationCodeStore(Protocol):
    """Port interface for one-time verification code persistence."""

    def insert(self, email: str, code: str) -> VerificationCodeRecord:
        """
        Store a new code for an email, independent of any prior codes.

        The store stamps created_at and expires_at (created_at + TTL).
        """
        ...

    def find_by_email_and_code(self, email: str, code: str) -> VerificationCodeRecord | None:
        """
        Find an exact (email, code) match.

        Returns:
            The record, or None if absent or past its expiry
        """
        ...

    def delete_by_email_and_code(self, email: str, code: str) -> bool:
        """
        Delete the matching code record(s).

        Returns:
            True if anything was deleted
        """
        ...

    def purge_expired(self) -> int:
        """
        Physically remove expired records.

        Returns:
            Number of records removed
        """
        ...


class NotificationSender(Protocol):
    """Port interface for outbound email delivery."""

    def send(self, to_address: str, subject: str, body: str) -> None:
        """
        Deliver a message.

        Raises:
            NotificationFailed: If the message could not be delivered
        """
        ...
