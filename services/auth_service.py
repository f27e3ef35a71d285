"""
AuthService: registration, sign-in, email verification and password reset.

Every failure is raised as an AppError subclass; route handlers never build
error responses themselves. Token mismatches reuse the "not found" message so
a caller cannot tell which check failed.
"""

from __future__ import annotations

from typing import Optional
from urllib.parse import urlencode

from config import TokenSettings
from errors import AuthenticationError, ConflictError, NotFoundError, ValidationError
from repositories.protocol import UserStore
from schemas.models.user import UserDoc
from services.notifier import Notifier
from services.session_tokens import SessionTokenService
from services.token_store import TokenStore
from shared.generators import generate_otp_code, generate_reset_token
from shared.logging import get_logger
from shared.validators import (
    is_blank,
    is_utf8,
    validate_email,
    validate_object_id,
    validate_password_length,
)

log = get_logger(__name__)

INVALID_OTP_MESSAGE = "Invalid or expired verification code!"
INVALID_RESET_TOKEN_MESSAGE = "Invalid or expired reset token!"
ACTIVE_RESET_TOKEN_MESSAGE = "Only after one hour you can request for another token!"


class AuthService:
    def __init__(
        self,
        users: UserStore,
        verification_tokens: TokenStore,
        reset_tokens: TokenStore,
        sessions: SessionTokenService,
        notifier: Notifier,
        token_settings: Optional[TokenSettings] = None,
        app_url: str = "http://localhost:3000",
    ) -> None:
        self._users = users
        self._verification_tokens = verification_tokens
        self._reset_tokens = reset_tokens
        self._sessions = sessions
        self._notifier = notifier
        self._settings = token_settings or TokenSettings()
        self._app_url = app_url.rstrip("/")

    # ── Helpers ──────────────────────────────────────────────────────────────

    def _check_password_length(self, password: str) -> None:
        if not validate_password_length(
            password, self._settings.password_min_length, self._settings.password_max_length
        ):
            raise ValidationError(
                f"Password must be {self._settings.password_min_length} to "
                f"{self._settings.password_max_length} characters long!",
                field="password",
            )

    async def _get_user(self, user_id: str) -> UserDoc:
        user = await self._users.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found!")
        return user

    def reset_link(self, raw_token: str, user_id: str) -> str:
        query = urlencode({"token": raw_token, "id": user_id})
        return f"{self._app_url}/reset-password?{query}"

    # ── Registration ─────────────────────────────────────────────────────────

    async def register(
        self, name: Optional[str], email: Optional[str], password: Optional[str]
    ) -> UserDoc:
        if is_blank(name) or is_blank(email) or is_blank(password):
            raise ValidationError("name/email/password missing!")
        if not (is_utf8(name) and is_utf8(email) and is_utf8(password)):
            raise ValidationError("Invalid characters in name/email/password!")
        name, email = name.strip(), email.strip()
        if not validate_email(email):
            raise ValidationError("Invalid email address!", field="email")
        self._check_password_length(password)

        user = await self._users.create(name, email, password.strip())

        otp_code = generate_otp_code(self._settings.otp_length)
        await self._verification_tokens.issue(user.id, otp_code)
        self._notifier.notify_verification(user, otp_code)

        log.info("user_registered", user_id=user.user_id)
        return user

    # ── Sign-in ──────────────────────────────────────────────────────────────

    async def sign_in(
        self, email: Optional[str], password: Optional[str]
    ) -> tuple[UserDoc, str]:
        if is_blank(email) or is_blank(password):
            raise ValidationError("email/password missing!")
        if not is_utf8(email):
            raise ValidationError("Invalid email address!", field="email")

        user = await self._users.find_by_email(email.strip())
        if user is None:
            log.warning("signin_failed", reason="unknown_email")
            raise NotFoundError("User not found!")

        if not self._users.verify_password(user, password.strip()):
            log.warning("signin_failed", reason="invalid_password", user_id=user.user_id)
            raise AuthenticationError("email/password does not match!")

        token = self._sessions.issue(user.user_id)
        log.info("signin_success", user_id=user.user_id)
        return user, token

    async def current_user(self, session_token: Optional[str]) -> UserDoc:
        if is_blank(session_token):
            raise AuthenticationError("Missing session token!")
        user_id = self._sessions.user_id_from(session_token)
        if not validate_object_id(user_id):
            raise AuthenticationError("Invalid session token!")
        return await self._get_user(user_id)

    # ── Email verification ───────────────────────────────────────────────────

    async def verify_email(self, user_id: Optional[str], otp: Optional[str]) -> UserDoc:
        if is_blank(user_id) or is_blank(otp):
            raise ValidationError("Invalid request, missing parameters!")
        if not validate_object_id(user_id):
            raise ValidationError("Invalid user id!", field="userId")

        user = await self._get_user(user_id)
        if user.verified:
            raise ConflictError("This account is already verified!")

        record = await self._verification_tokens.find_by_owner(user.id)
        if record is None:
            log.warning("otp_verification_failed", user_id=user.user_id, reason="token_not_found")
            raise NotFoundError(INVALID_OTP_MESSAGE)

        if not self._verification_tokens.compare(record, otp.strip()):
            log.warning("otp_verification_failed", user_id=user.user_id, reason="mismatch")
            raise AuthenticationError(INVALID_OTP_MESSAGE)

        user.verified = True
        await self._verification_tokens.consume(record)
        await self._users.save(user)
        self._notifier.notify_welcome(user)

        log.info("email_verified", user_id=user.user_id)
        return user

    # ── Password reset ───────────────────────────────────────────────────────

    async def forgot_password(self, email: Optional[str]) -> None:
        if is_blank(email) or not is_utf8(email):
            raise ValidationError("Please provide a valid email!", field="email")

        user = await self._users.find_by_email(email.strip())
        if user is None:
            raise NotFoundError("User not found, invalid request!")

        raw_token = generate_reset_token(self._settings.reset_token_bytes)
        await self._reset_tokens.issue(user.id, raw_token, reject_existing=True)

        self._notifier.notify_password_reset(user, self.reset_link(raw_token, user.user_id))
        log.info("password_reset_requested", user_id=user.user_id)

    async def validate_reset_token(
        self, token: Optional[str], user_id: Optional[str]
    ) -> UserDoc:
        """Resolve the user a reset link was issued for, without consuming it."""
        if is_blank(token) or is_blank(user_id):
            raise ValidationError("Invalid request!")
        if not validate_object_id(user_id):
            raise ValidationError("Invalid user!", field="id")

        user = await self._get_user(user_id)

        record = await self._reset_tokens.find_by_owner(user.id)
        if record is None:
            log.warning("reset_token_rejected", user_id=user.user_id, reason="token_not_found")
            raise NotFoundError(INVALID_RESET_TOKEN_MESSAGE)

        if not self._reset_tokens.compare(record, token):
            log.warning("reset_token_rejected", user_id=user.user_id, reason="mismatch")
            raise AuthenticationError(INVALID_RESET_TOKEN_MESSAGE)

        return user

    async def reset_password(self, user: UserDoc, password: Optional[str]) -> None:
        """Set a new password for a user already resolved by validate_reset_token()."""
        user = await self._get_user(user.user_id)

        if is_blank(password):
            raise ValidationError("Password is required!", field="password")
        if not is_utf8(password):
            raise ValidationError("Invalid characters in password!", field="password")
        password = password.strip()

        if self._users.verify_password(user, password):
            raise ConflictError("Don't use old passwords!")
        self._check_password_length(password)

        self._users.set_password(user, password)
        await self._users.save(user)

        record = await self._reset_tokens.find_by_owner(user.id)
        if record is not None:
            await self._reset_tokens.consume(record)

        self._notifier.notify_password_changed(user)
        log.info("password_reset_completed", user_id=user.user_id)
