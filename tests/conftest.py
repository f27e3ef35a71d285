"""
Shared fixtures: in-memory stores standing in for MongoDB, and an AuthService
wired from them. The stores follow the same contracts as the repositories
(including duplicate-key behaviour and expiry filtering).
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from config import JWTSettings, TokenSettings
from errors import ConflictError, NotFoundError
from infrastructure.email.logging_provider import LoggingEmailProvider
from schemas.models.token import (
    TOKEN_TYPE_EMAIL_VERIFY,
    TOKEN_TYPE_PASSWORD_RESET,
    TokenDoc,
)
from schemas.models.user import UserDoc
from services.auth_service import ACTIVE_RESET_TOKEN_MESSAGE, AuthService
from services.notifier import Notifier
from services.session_tokens import SessionTokenService
from services.token_store import TokenStore
from shared.crypto import hash_password, verify_password
from shared.datetime_utils import utcnow
from shared.validators import validate_object_id


class InMemoryUserStore:
    def __init__(self) -> None:
        self.docs: dict[ObjectId, UserDoc] = {}

    async def find_by_email(self, email: str) -> Optional[UserDoc]:
        for user in self.docs.values():
            if user.email == email:
                return user.model_copy()
        return None

    async def find_by_id(self, user_id) -> Optional[UserDoc]:
        if not validate_object_id(user_id):
            raise NotFoundError("User not found!")
        user = self.docs.get(ObjectId(user_id))
        return user.model_copy() if user else None

    async def create(self, name: str, email: str, raw_password: str) -> UserDoc:
        if await self.find_by_email(email) is not None:
            raise ConflictError("This email already exists!")
        now = utcnow()
        user = UserDoc(
            _id=ObjectId(),
            name=name,
            email=email,
            password_hash=hash_password(raw_password),
            created_at=now,
            updated_at=now,
        )
        self.docs[user.id] = user.model_copy()
        return user

    def verify_password(self, user: UserDoc, candidate: str) -> bool:
        return verify_password(candidate, user.password_hash)

    def set_password(self, user: UserDoc, raw_password: str) -> None:
        user.password_hash = hash_password(raw_password)

    async def save(self, user: UserDoc) -> None:
        user.updated_at = utcnow()
        self.docs[user.id] = user.model_copy()


class InMemoryTokenBackend:
    def __init__(self) -> None:
        self.docs: dict[ObjectId, TokenDoc] = {}

    def _find(self, owner_id, token_type) -> Optional[TokenDoc]:
        for doc in self.docs.values():
            if doc.owner_id == owner_id and doc.token_type == token_type:
                return doc
        return None

    async def insert(self, token: TokenDoc) -> TokenDoc:
        if self._find(token.owner_id, token.token_type) is not None:
            raise DuplicateKeyError("E11000 duplicate key error")
        token.id = ObjectId()
        self.docs[token.id] = token.model_copy()
        return token

    async def replace(self, token: TokenDoc) -> TokenDoc:
        existing = self._find(token.owner_id, token.token_type)
        token.id = existing.id if existing else ObjectId()
        self.docs[token.id] = token.model_copy()
        return token

    async def find_live(self, owner_id, token_type, now: Optional[datetime] = None):
        doc = self._find(owner_id, token_type)
        if doc is None or doc.is_expired(now):
            return None
        return doc.model_copy()

    async def delete(self, token_id) -> bool:
        return self.docs.pop(token_id, None) is not None

    async def delete_expired(self, token_type, owner_id=None, now=None) -> int:
        dead = [
            key
            for key, doc in self.docs.items()
            if doc.token_type == token_type
            and (owner_id is None or doc.owner_id == owner_id)
            and doc.is_expired(now)
        ]
        for key in dead:
            del self.docs[key]
        return len(dead)

    def expire_all(self, token_type: Optional[str] = None) -> None:
        """Move every (matching) token's expiry into the past."""
        past = utcnow() - timedelta(seconds=1)
        for key, doc in self.docs.items():
            if token_type is None or doc.token_type == token_type:
                self.docs[key] = doc.model_copy(update={"expires_at": past})


@pytest.fixture(autouse=True)
def no_dotenv(monkeypatch):
    """Keep pydantic-settings away from a developer .env; tests set env vars explicitly."""
    import pydantic_settings.sources.providers.dotenv as ps_dotenv

    monkeypatch.setattr(ps_dotenv, "dotenv_values", lambda *a, **kw: {})


@pytest.fixture
def jwt_settings():
    return JWTSettings(jwt_secret="test-secret", jwt_private_key="", jwt_public_key="")


@pytest.fixture
def token_settings():
    return TokenSettings()


@pytest.fixture
def user_store():
    return InMemoryUserStore()


@pytest.fixture
def token_backend():
    return InMemoryTokenBackend()


@pytest.fixture
def email_provider():
    return LoggingEmailProvider()


@pytest.fixture
async def notifier(email_provider):
    notifier = Notifier(email_provider, app_name="authkit")
    yield notifier
    await notifier.drain()


@pytest.fixture
def verification_tokens(token_backend, token_settings):
    return TokenStore(token_backend, TOKEN_TYPE_EMAIL_VERIFY, token_settings.otp_ttl_seconds)


@pytest.fixture
def reset_tokens(token_backend, token_settings):
    return TokenStore(
        token_backend,
        TOKEN_TYPE_PASSWORD_RESET,
        token_settings.reset_token_ttl_seconds,
        active_message=ACTIVE_RESET_TOKEN_MESSAGE,
    )


@pytest.fixture
def sessions(jwt_settings):
    return SessionTokenService(jwt_settings)


@pytest.fixture
def auth_service(
    user_store, verification_tokens, reset_tokens, sessions, notifier, token_settings
):
    return AuthService(
        users=user_store,
        verification_tokens=verification_tokens,
        reset_tokens=reset_tokens,
        sessions=sessions,
        notifier=notifier,
        token_settings=token_settings,
        app_url="http://localhost:3000",
    )
