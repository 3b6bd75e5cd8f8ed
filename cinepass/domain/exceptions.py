"""
Domain exceptions - Semantic error types for the account workflow.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
Client-facing kinds map to 400 responses; InternalError maps to 500.
"""


class AccountError(Exception):
    """Base class for account workflow errors."""

    pass


class DuplicateAccount(AccountError):
    """An account is already registered for this email."""

    pass


class InvalidCode(AccountError):
    """No unexpired verification code matches the email and code."""

    pass


class InvalidCredentials(AccountError):
    """Unknown email or password mismatch (deliberately indistinguishable)."""

    pass


class EmailNotVerified(AccountError):
    """Sign-in attempted before the email was verified."""

    pass


class AccountNotPending(AccountError):
    """Account does not exist or is already verified."""

    pass


class InternalError(AccountError):
    """Store inconsistency or collaborator failure."""

    pass


class NotificationFailed(InternalError):
    """Verification code could not be delivered."""

    pass
