"""
Response DTOs for authentication endpoints.

UserSummary           - {name, email, id} shape shared by every user payload
RegisteredUser        - user payload of POST /auth/register and GET /auth/me
SignedInUser          - user payload of POST /auth/signin
RegisterResponse      - POST /auth/register  (200)
SignInResponse        - POST /auth/signin  (200)
VerifyEmailResponse   - POST /auth/verify-email  (200)
CurrentUserResponse   - GET /auth/me  (200)
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from schemas.models.user import UserDoc


class UserSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    email: str
    id: str

    @classmethod
    def from_user(cls, user: UserDoc) -> "UserSummary":
        return cls(name=user.name, email=user.email, id=user.user_id)


class RegisteredUser(UserSummary):
    verified: bool

    @classmethod
    def from_user(cls, user: UserDoc) -> "RegisteredUser":
        return cls(
            name=user.name, email=user.email, id=user.user_id, verified=user.verified
        )


class SignedInUser(UserSummary):
    token: str


class RegisterResponse(BaseModel):
    """Response body for POST /auth/register."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    user: RegisteredUser


class SignInResponse(BaseModel):
    """Response body for POST /auth/signin."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    user: SignedInUser


class VerifyEmailResponse(BaseModel):
    """Response body for POST /auth/verify-email."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str
    user: UserSummary


class CurrentUserResponse(BaseModel):
    """Response body for GET /auth/me."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    user: RegisteredUser
