"""
Session (bearer) tokens: signed JWTs carrying the user id.

HS256 with JWT_SECRET by default; RS256 when both JWT_PRIVATE_KEY and
JWT_PUBLIC_KEY are configured.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Optional

import jwt

from config import JWTSettings
from errors import AuthenticationError
from shared.datetime_utils import utcnow
from shared.logging import get_logger

log = get_logger(__name__)


class SessionTokenService:
    def __init__(self, settings: JWTSettings) -> None:
        self._settings = settings
        if settings.use_rs256:
            # Support keys provided via env with literal \n sequences
            self._signing_key: Any = settings.jwt_private_key.replace("\\n", "\n").encode("utf-8")
            self._verify_key: Any = settings.jwt_public_key.replace("\\n", "\n").encode("utf-8")
            self._algorithm = "RS256"
        else:
            if not settings.jwt_secret:
                raise RuntimeError("JWT_SECRET must be set when RS256 keys are not provided")
            self._signing_key = self._verify_key = settings.jwt_secret
            self._algorithm = "HS256"

    @property
    def algorithm(self) -> str:
        return self._algorithm

    def issue(self, user_id: str, ttl_seconds: Optional[int] = None) -> str:
        """Sign a session token for *user_id* valid for the configured TTL."""
        now = utcnow()
        ttl = self._settings.session_token_ttl_seconds if ttl_seconds is None else ttl_seconds
        claims = {
            "iss": self._settings.jwt_issuer,
            "aud": self._settings.jwt_audience,
            "sub": str(user_id),
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(seconds=ttl)).timestamp()),
        }
        return jwt.encode(claims, self._signing_key, algorithm=self._algorithm)

    def decode(self, token: str) -> dict:
        """Verify *token* and return its claims.

        Raises:
            AuthenticationError: the token is expired, tampered with, or was
                issued for another issuer/audience.
        """
        try:
            return jwt.decode(
                token,
                self._verify_key,
                algorithms=[self._algorithm],
                audience=self._settings.jwt_audience,
                issuer=self._settings.jwt_issuer,
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            log.info("session_token_rejected", reason="expired")
            raise AuthenticationError("Session expired, please sign in again!")
        except jwt.InvalidTokenError as e:
            log.info("session_token_rejected", reason="invalid", error=str(e))
            raise AuthenticationError("Invalid session token!")

    def user_id_from(self, token: str) -> str:
        return self.decode(token)["sub"]
