"""
Authentication endpoints.

POST /auth/register            - create an unverified user and email an OTP
POST /auth/signin              - exchange email/password for a session token
POST /auth/verify-email        - confirm the OTP and mark the user verified
POST /auth/forgot-password     - email a reset link
GET  /auth/verify-reset-token  - check a reset link (?token&id) without using it
POST /auth/reset-password      - set a new password (?token&id + body)
GET  /auth/me                  - profile of the bearer-token user

Errors are raised by AuthService and rendered by the handlers in errors.py.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from dependencies import get_auth_service, get_current_user, require_reset_token
from schemas.dto.requests.auth import (
    ForgotPasswordRequest,
    RegisterRequest,
    ResetPasswordRequest,
    SignInRequest,
    VerifyEmailRequest,
)
from schemas.dto.responses.auth import (
    CurrentUserResponse,
    RegisteredUser,
    RegisterResponse,
    SignedInUser,
    SignInResponse,
    UserSummary,
    VerifyEmailResponse,
)
from schemas.dto.responses.common import MessageResponse
from schemas.models.user import UserDoc
from services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse)
async def register(
    body: RegisterRequest, auth_service: AuthService = Depends(get_auth_service)
) -> RegisterResponse:
    user = await auth_service.register(body.name, body.email, body.password)
    return RegisterResponse(user=RegisteredUser.from_user(user))


@router.post("/signin", response_model=SignInResponse)
async def signin(
    body: SignInRequest, auth_service: AuthService = Depends(get_auth_service)
) -> SignInResponse:
    user, token = await auth_service.sign_in(body.email, body.password)
    return SignInResponse(
        user=SignedInUser(name=user.name, email=user.email, id=user.user_id, token=token)
    )


@router.post("/verify-email", response_model=VerifyEmailResponse)
async def verify_email(
    body: VerifyEmailRequest, auth_service: AuthService = Depends(get_auth_service)
) -> VerifyEmailResponse:
    user = await auth_service.verify_email(body.user_id, body.otp)
    return VerifyEmailResponse(
        message="your email is verified.", user=UserSummary.from_user(user)
    )


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    body: ForgotPasswordRequest, auth_service: AuthService = Depends(get_auth_service)
) -> MessageResponse:
    await auth_service.forgot_password(body.email)
    return MessageResponse(message="Password reset link is sent to your email.")


@router.get("/verify-reset-token", response_model=MessageResponse)
async def verify_reset_token(user: UserDoc = Depends(require_reset_token)) -> MessageResponse:
    return MessageResponse(message="Reset token is valid.")


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    body: ResetPasswordRequest,
    user: UserDoc = Depends(require_reset_token),
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    await auth_service.reset_password(user, body.password)
    return MessageResponse(message="Password reset Successful.")


@router.get("/me", response_model=CurrentUserResponse)
async def me(user: UserDoc = Depends(get_current_user)) -> CurrentUserResponse:
    return CurrentUserResponse(user=RegisteredUser.from_user(user))
