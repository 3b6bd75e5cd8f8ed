"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting the account
service and its store and notification adapters into routes. Adapters
are created once during app lifespan and kept in app.state.
"""

from fastapi import Request

from cinepass.adapters.smtp.console import ConsoleNotificationSender
from cinepass.adapters.smtp.relay import SmtpNotificationSender
from cinepass.config.settings import Settings, get_settings
from cinepass.domain.accounts import AccountService
from cinepass.domain.ports import CredentialStore, NotificationSender, VerificationCodeStore


def build_notification_sender(settings: Settings) -> NotificationSender:
    """Select the notification adapter configured by email_backend."""
    if settings.email_backend == "smtp":
        return SmtpNotificationSender(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_user,
            password=settings.smtp_password,
            from_address=settings.mail_from,
            use_tls=settings.smtp_use_tls,
            timeout=settings.smtp_timeout_seconds,
            attempts=settings.smtp_send_attempts,
        )
    return ConsoleNotificationSender()


def get_credential_store(request: Request) -> CredentialStore:
    return request.app.state.credential_store


def get_code_store(request: Request) -> VerificationCodeStore:
    return request.app.state.code_store


def get_notification_sender(request: Request) -> NotificationSender:
    return request.app.state.notifier


def get_account_service(request: Request) -> AccountService:
    """
    Create account service with injected dependencies.

    Wires together both stores and the notification sender for the domain service.
    """
    return AccountService(
        credentials=get_credential_store(request),
        codes=get_code_store(request),
        notifier=get_notification_sender(request),
        bcrypt_cost=get_settings().bcrypt_cost,
    )
