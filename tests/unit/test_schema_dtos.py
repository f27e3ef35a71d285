"""Unit tests for request and response DTOs."""

from __future__ import annotations

from bson import ObjectId

from schemas.dto.requests.auth import (
    ForgotPasswordRequest,
    RegisterRequest,
    ResetPasswordRequest,
    SignInRequest,
    VerifyEmailRequest,
)
from schemas.dto.responses.auth import (
    RegisteredUser,
    RegisterResponse,
    SignedInUser,
    SignInResponse,
    UserSummary,
    VerifyEmailResponse,
)
from schemas.dto.responses.common import ErrorResponse, MessageResponse
from schemas.models.user import UserDoc


def _user(**overrides) -> UserDoc:
    base = dict(_id=ObjectId(), name="A", email="a@x.com", password_hash="h")
    base.update(overrides)
    return UserDoc(**base)


class TestRequests:
    def test_register_fields_optional(self):
        req = RegisterRequest.model_validate({})
        assert (req.name, req.email, req.password) == (None, None, None)

    def test_signin(self):
        req = SignInRequest.model_validate({"email": "a@x.com", "password": "p"})
        assert req.email == "a@x.com"

    def test_verify_email_accepts_camel_case_alias(self):
        req = VerifyEmailRequest.model_validate({"userId": "abc", "otp": "123456"})
        assert req.user_id == "abc"
        assert req.otp == "123456"

    def test_verify_email_accepts_field_name(self):
        assert VerifyEmailRequest.model_validate({"user_id": "abc"}).user_id == "abc"

    def test_forgot_and_reset(self):
        assert ForgotPasswordRequest.model_validate({"email": "a@x.com"}).email == "a@x.com"
        assert ResetPasswordRequest.model_validate({"password": "x"}).password == "x"


class TestResponses:
    def test_register_response_shape(self):
        user = _user()
        body = RegisterResponse(user=RegisteredUser.from_user(user)).model_dump()
        assert body == {
            "success": True,
            "user": {"name": "A", "email": "a@x.com", "id": user.user_id, "verified": False},
        }

    def test_signin_response_shape(self):
        body = SignInResponse(
            user=SignedInUser(name="A", email="a@x.com", id="1", token="t")
        ).model_dump()
        assert body["user"]["token"] == "t"
        assert body["success"] is True

    def test_verify_email_response_has_no_verified_flag(self):
        body = VerifyEmailResponse(
            message="ok", user=UserSummary.from_user(_user(verified=True))
        ).model_dump()
        assert set(body["user"]) == {"name", "email", "id"}

    def test_message_and_error(self):
        assert MessageResponse(message="hi").model_dump() == {"success": True, "message": "hi"}
        assert ErrorResponse(message="no").success is False
