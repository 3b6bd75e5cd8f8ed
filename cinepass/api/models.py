"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
"""

from pydantic import BaseModel, EmailStr, Field


class SignupRequest(BaseModel):
    """Request model for account signup."""

    username: str = Field(..., min_length=1, description="Display name")
    email: EmailStr
    password: str = Field(..., min_length=1, description="Account password")


class VerifyRequest(BaseModel):
    """Request model for email verification."""

    email: EmailStr
    code: str = Field(..., min_length=1, description="Verification code received by email")


class SigninRequest(BaseModel):
    """Request model for sign-in."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class ResendCodeRequest(BaseModel):
    """Request model for issuing a new verification code."""

    email: EmailStr


class MessageResponse(BaseModel):
    """Response body shared by every endpoint, success or failure."""

    message: str
