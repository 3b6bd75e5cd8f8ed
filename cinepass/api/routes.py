"""
API routes - Signup, verification and sign-in endpoints.

This module defines the HTTP endpoints:
- POST /signup - Create an unverified account and email a code
- POST /verify - Confirm the emailed code
- POST /signin - Check credentials of a verified account
- POST /resend-code - Email a fresh code to an unverified account

Every failure is converted to a response here: client errors become 400
with a fixed message, anything else is logged and becomes 500.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from cinepass.api.dependencies import get_account_service
from cinepass.api.models import (
    MessageResponse,
    ResendCodeRequest,
    SigninRequest,
    SignupRequest,
    VerifyRequest,
)
from cinepass.domain.accounts import AccountService
from cinepass.domain.exceptions import (
    AccountNotPending,
    DuplicateAccount,
    EmailNotVerified,
    InvalidCode,
    InvalidCredentials,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["accounts"])

_ERROR_RESPONSES = {
    400: {"model": MessageResponse, "description": "Rejected request"},
    422: {"description": "Validation error"},
    500: {"model": MessageResponse, "description": "Internal error"},
}


def _client_error(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


def _server_error(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message)


@router.post(
    "/signup",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_ERROR_RESPONSES,
    summary="Register a new user",
    description="Create an unverified account and send a verification code to its email.",
)
def signup(
    request_data: SignupRequest,
    service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    """
    Register a new user and send verification code.

    - **username**: Display name
    - **email**: Email address to register
    - **password**: Account password
    """
    try:
        service.signup(request_data.username, request_data.email, request_data.password)
    except DuplicateAccount:
        raise _client_error("Email already in use") from None
    except Exception:
        logger.exception("Error creating user")
        raise _server_error("Error creating user") from None
    return MessageResponse(message="User created successfully, verification code sent to email")


@router.post(
    "/verify",
    response_model=MessageResponse,
    responses=_ERROR_RESPONSES,
    summary="Verify email with code",
)
def verify(
    request_data: VerifyRequest,
    service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    """Consume the emailed code and mark the account verified."""
    try:
        service.verify(request_data.email, request_data.code)
    except InvalidCode:
        raise _client_error("Invalid verification code") from None
    except Exception:
        logger.exception("Error verifying user")
        raise _server_error("Error verifying user") from None
    return MessageResponse(message="Verification successful")


@router.post(
    "/signin",
    response_model=MessageResponse,
    responses=_ERROR_RESPONSES,
    summary="Sign in",
    description="Check the password of a verified account. No session or token is issued.",
)
def signin(
    request_data: SigninRequest,
    service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    try:
        service.signin(request_data.email, request_data.password)
    except InvalidCredentials:
        raise _client_error("Invalid email or password") from None
    except EmailNotVerified:
        raise _client_error("Email not verified") from None
    except Exception:
        logger.exception("Error signing in")
        raise _server_error("Error signing in") from None
    return MessageResponse(message="Sign-in successful")


@router.post(
    "/resend-code",
    response_model=MessageResponse,
    responses=_ERROR_RESPONSES,
    summary="Send a new verification code",
)
def resend_code(
    request_data: ResendCodeRequest,
    service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    """Issue a fresh code for an account that signed up but never verified."""
    try:
        service.resend_code(request_data.email)
    except AccountNotPending:
        raise _client_error("Account is not pending verification") from None
    except Exception:
        logger.exception("Error sending verification code")
        raise _server_error("Error sending verification code") from None
    return MessageResponse(message="Verification code sent to email")
