"""
Domain layer - Pure business logic with zero framework imports.

This package contains the account verification workflow. It defines its
own port interfaces for infrastructure abstraction, so stores and the
notification sender can be swapped without touching the workflow.
"""

from .accounts import AccountService
from .exceptions import (
    AccountError,
    AccountNotPending,
    DuplicateAccount,
    EmailNotVerified,
    InternalError,
    InvalidCode,
    InvalidCredentials,
    NotificationFailed,
)
from .ports import (
    CredentialStore,
    NotificationSender,
    UserRecord,
    VerificationCodeRecord,
    VerificationCodeStore,
)

__all__ = [
    "AccountError",
    "AccountNotPending",
    "AccountService",
    "CredentialStore",
    "DuplicateAccount",
    "EmailNotVerified",
    "InternalError",
    "InvalidCode",
    "InvalidCredentials",
    "NotificationFailed",
    "NotificationSender",
    "UserRecord",
    "VerificationCodeRecord",
    "VerificationCodeStore",
]
