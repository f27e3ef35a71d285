"""
Request DTOs for authentication endpoints.

RegisterRequest        - POST /auth/register
SignInRequest          - POST /auth/signin
VerifyEmailRequest     - POST /auth/verify-email
ForgotPasswordRequest  - POST /auth/forgot-password
ResetPasswordRequest   - POST /auth/reset-password  (token + id in query)

Fields default to None so presence checks happen in the service layer and
produce the same error envelope as every other failure.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """Request body for POST /auth/register."""

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    email: str | None = None
    password: str | None = None


class SignInRequest(BaseModel):
    """Request body for POST /auth/signin."""

    model_config = ConfigDict(populate_by_name=True)

    email: str | None = None
    password: str | None = None


class VerifyEmailRequest(BaseModel):
    """Request body for POST /auth/verify-email.

    ``otp`` is the numeric code sent to the user's email address.
    """

    model_config = ConfigDict(populate_by_name=True)

    user_id: str | None = Field(default=None, alias="userId")
    otp: str | None = None


class ForgotPasswordRequest(BaseModel):
    """Request body for POST /auth/forgot-password."""

    model_config = ConfigDict(populate_by_name=True)

    email: str | None = None


class ResetPasswordRequest(BaseModel):
    """Request body for POST /auth/reset-password."""

    model_config = ConfigDict(populate_by_name=True)

    password: str | None = None
