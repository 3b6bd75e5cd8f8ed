"""
Account domain service - Verification workflow implementation.

This module contains the core business logic for user accounts:
signup, email verification, sign-in and code resend.

Account Lifecycle
=================

States:
- UNVERIFIED: Credential record exists, verified=False, a code was issued
- VERIFIED: Code confirmed, terminal for this workflow

Transitions:
    UNVERIFIED -> VERIFIED    (verify with matching, unexpired code)
    UNVERIFIED -> UNVERIFIED  (resend_code issues a fresh code)

Sign-in is a stateless check against this lifecycle:
    UNVERIFIED + any password   -> EmailNotVerified
    VERIFIED + correct password -> success (no session is created)
    VERIFIED + wrong password   -> InvalidCredentials

Note: Email uniqueness is enforced by the credential store, not by the
find-then-insert sequence here, which is not atomic.
"""

import logging
import secrets
from dataclasses import dataclass

import bcrypt

from .exceptions import (
    AccountNotPending,
    DuplicateAccount,
    EmailNotVerified,
    InternalError,
    InvalidCode,
    InvalidCredentials,
)
from .ports import CredentialStore, NotificationSender, UserRecord, VerificationCodeStore

logger = logging.getLogger(__name__)

VERIFICATION_SUBJECT = "Verification Code"

# Compared against when the email is unknown so sign-in always pays the bcrypt cost.
_DUMMY_BCRYPT_HASH = bcrypt.hashpw(b"dummy_password_for_timing_safety", bcrypt.gensalt(10)).decode()


# bcrypt only reads the first 72 bytes; bcrypt>=5 raises instead of truncating.
BCRYPT_MAX_PASSWORD_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode()[:BCRYPT_MAX_PASSWORD_BYTES]


@dataclass
class AccountService:
    """
    Domain service for user accounts.

    Orchestrates signup, verify and signin as independent transactions
    against the credential store, the code store and the notification sender.
    """

    credentials: CredentialStore
    codes: VerificationCodeStore
    notifier: NotificationSender
    bcrypt_cost: int = 10

    def signup(self, username: str, email: str, password: str) -> str:
        """
        Register a new, unverified account and email it a verification code.

        A failure after the credential record is stored is not rolled back:
        the account stays unverified and can request a new code through
        resend_code.

        Args:
            username: Display name
            email: User's email address (will be normalized)
            password: User's password (will be hashed)

        Returns:
            Normalized email address

        Raises:
            DuplicateAccount: If the email is already registered
            NotificationFailed: If the code could not be sent
        """
        normalized_email = self._normalize_email(email)

        if self.credentials.find_by_email(normalized_email) is not None:
            raise DuplicateAccount(normalized_email)

        user = UserRecord(
            username=username,
            email=normalized_email,
            password_hash=self._hash_password(password),
        )
        # Store-level constraint catches signups racing past the check above
        if not self.credentials.insert(user):
            raise DuplicateAccount(normalized_email)

        self._issue_code(normalized_email)
        return normalized_email

    def verify(self, email: str, code: str) -> str:
        """
        Consume a verification code and mark the account verified.

        Args:
            email: User's email (will be normalized)
            code: Code received by email

        Returns:
            Normalized email address

        Raises:
            InvalidCode: No unexpired code matches (email, code), or the
                account is already verified
            InternalError: The code matched but no account exists
        """
        normalized_email = self._normalize_email(email)

        entry = self.codes.find_by_email_and_code(normalized_email, code)
        if entry is None:
            raise InvalidCode(normalized_email)

        user = self.credentials.find_by_email(normalized_email)
        if user is None:
            raise InternalError(f"verification code without account: {normalized_email}")
        # Leftover codes from earlier signups or resends are dead once verified
        if user.verified:
            raise InvalidCode(normalized_email)

        # Consuming first makes the code single-use under concurrent verifies
        if not self.codes.delete_by_email_and_code(normalized_email, code):
            raise InvalidCode(normalized_email)

        if not self.credentials.set_verified(normalized_email):
            raise InternalError(f"account vanished during verification: {normalized_email}")

        logger.info("Account verified: %s", normalized_email)
        return normalized_email

    def signin(self, email: str, password: str) -> str:
        """
        Check credentials for a verified account.

        Unknown email and wrong password raise the same error, and bcrypt
        runs in both cases.

        Returns:
            Normalized email address

        Raises:
            InvalidCredentials: Unknown email or wrong password
            EmailNotVerified: Account exists but is not verified
        """
        normalized_email = self._normalize_email(email)

        user = self.credentials.find_by_email(normalized_email)
        if user is None:
            self._check_password(password, _DUMMY_BCRYPT_HASH)
            raise InvalidCredentials(normalized_email)

        if not user.verified:
            raise EmailNotVerified(normalized_email)

        if not self._check_password(password, user.password_hash):
            raise InvalidCredentials(normalized_email)

        return normalized_email

    def resend_code(self, email: str) -> str:
        """
        Issue and send a fresh code to an unverified account.

        Earlier codes stay valid until their own expiry.

        Raises:
            AccountNotPending: Unknown email or already verified
            NotificationFailed: If the code could not be sent
        """
        normalized_email = self._normalize_email(email)

        user = self.credentials.find_by_email(normalized_email)
        if user is None or user.verified:
            raise AccountNotPending(normalized_email)

        self._issue_code(normalized_email)
        return normalized_email

    def _issue_code(self, email: str) -> None:
        code = self._generate_verification_code()
        self.codes.insert(email, code)
        self.notifier.send(email, VERIFICATION_SUBJECT, f"Your verification code is {code}")

    def _normalize_email(self, email: str) -> str:
        """
        Normalize email address for consistent storage and lookup.

        Applies: strip whitespace + lowercase
        """
        return email.strip().lower()

    def _generate_verification_code(self) -> str:
        """
        Generate a 6-character hex code from 3 cryptographically random bytes.
        """
        return secrets.token_hex(3)

    def _hash_password(self, password: str) -> str:
        return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=self.bcrypt_cost)).decode()

    def _check_password(self, password: str, password_hash: str) -> bool:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode())
