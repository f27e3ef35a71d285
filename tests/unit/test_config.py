"""Unit tests for AppSettings and sub-configs."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from config import (
    AppSettings,
    DatabaseSettings,
    EmailSettings,
    JWTSettings,
    TokenSettings,
)


@pytest.fixture
def with_mongo(monkeypatch):
    """Set the required MONGODB_URI so AppSettings can be instantiated."""
    monkeypatch.setenv("MONGODB_URI", "mongodb://localhost:27017/")
    return monkeypatch


class TestDatabaseSettings:
    def test_loads_mongodb_uri(self, monkeypatch):
        monkeypatch.setenv("MONGODB_URI", "mongodb://localhost:27017/")
        assert DatabaseSettings().mongodb_uri == "mongodb://localhost:27017/"

    def test_default_db_name(self, monkeypatch):
        monkeypatch.setenv("MONGODB_URI", "mongodb://localhost:27017/")
        monkeypatch.delenv("DB_NAME", raising=False)
        assert DatabaseSettings().db_name == "authkit"

    def test_missing_mongodb_uri_raises(self, monkeypatch):
        monkeypatch.delenv("MONGODB_URI", raising=False)
        with pytest.raises(PydanticValidationError):
            DatabaseSettings()


class TestJWTSettings:
    def test_defaults(self, monkeypatch):
        for var in (
            "JWT_ISSUER",
            "JWT_AUDIENCE",
            "SESSION_TOKEN_TTL_SECONDS",
            "JWT_PRIVATE_KEY",
            "JWT_PUBLIC_KEY",
            "JWT_SECRET",
        ):
            monkeypatch.delenv(var, raising=False)
        s = JWTSettings()
        assert s.session_token_ttl_seconds == 86400
        assert s.jwt_issuer == "authkit"
        assert s.use_rs256 is False

    def test_use_rs256_requires_both_keys(self, monkeypatch):
        monkeypatch.setenv("JWT_PRIVATE_KEY", "priv")
        monkeypatch.delenv("JWT_PUBLIC_KEY", raising=False)
        assert JWTSettings().use_rs256 is False
        monkeypatch.setenv("JWT_PUBLIC_KEY", "pub")
        assert JWTSettings().use_rs256 is True


class TestTokenSettings:
    def test_defaults(self, monkeypatch):
        for var in ("OTP_TTL_SECONDS", "RESET_TOKEN_TTL_SECONDS", "OTP_LENGTH"):
            monkeypatch.delenv(var, raising=False)
        s = TokenSettings()
        assert s.otp_length == 6
        assert s.otp_ttl_seconds == 900
        assert s.reset_token_ttl_seconds == 3600
        assert (s.password_min_length, s.password_max_length) == (8, 20)

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("RESET_TOKEN_TTL_SECONDS", "60")
        assert TokenSettings().reset_token_ttl_seconds == 60


class TestAppSettings:
    def test_sub_configs_populated(self, with_mongo):
        s = AppSettings()
        assert isinstance(s.db, DatabaseSettings)
        assert isinstance(s.jwt, JWTSettings)
        assert isinstance(s.tokens, TokenSettings)
        assert isinstance(s.email, EmailSettings)
        assert s.logging is not None
        assert s.sentry is not None

    def test_is_production(self, with_mongo):
        with_mongo.setenv("ENV", "production")
        assert AppSettings().is_production is True

    def test_development_default(self, with_mongo):
        with_mongo.delenv("ENV", raising=False)
        assert AppSettings().is_production is False
