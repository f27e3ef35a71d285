"""
FastAPI application factory.
create_app() is the single entry point for building the app.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo.asynchronous.mongo_client import AsyncMongoClient

from config import AppSettings
from errors import register_error_handlers
from infrastructure.email.logging_provider import LoggingEmailProvider
from infrastructure.email.zeptomail import ZeptoMailProvider
from repositories import TokenRepository, UserRepository
from routes.auth_routes import router as auth_router
from routes.health_routes import router as health_router
from schemas.models.token import TOKEN_TYPE_EMAIL_VERIFY, TOKEN_TYPE_PASSWORD_RESET
from services.auth_service import ACTIVE_RESET_TOKEN_MESSAGE, AuthService
from services.notifier import Notifier
from services.session_tokens import SessionTokenService
from services.token_store import TokenStore
from shared.logging import get_logger, setup_logging

log = get_logger(__name__)


def build_email_provider(settings: AppSettings):
    """ZeptoMail when an API token is configured, otherwise log-only delivery."""
    if settings.email.zepto_api_token:
        return ZeptoMailProvider(settings.email)
    log.warning("email_provider_fallback", provider="logging")
    return LoggingEmailProvider()


def create_app(settings: Optional[AppSettings] = None) -> FastAPI:
    """Create and return a fully configured FastAPI application."""
    if settings is None:
        settings = AppSettings()

    setup_logging(settings.logging, env=settings.env)

    # Initialise Sentry before anything else so it captures startup errors
    if settings.sentry.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry.sentry_dsn,
            send_default_pii=settings.sentry.sentry_send_pii,
            traces_sample_rate=settings.sentry.sentry_traces_sample_rate,
            environment=settings.env,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # ── Startup ──────────────────────────────────────────────────────────
        mongo_client: AsyncMongoClient = AsyncMongoClient(
            settings.db.mongodb_uri, tz_aware=True
        )
        db = mongo_client[settings.db.db_name]
        app.state.mongo_client = mongo_client
        app.state.db = db
        app.state.settings = settings

        users = UserRepository(db["users"])
        tokens = TokenRepository(db["tokens"])
        await users.ensure_indexes()
        await tokens.ensure_indexes()

        email_provider = build_email_provider(settings)
        notifier = Notifier(
            email_provider,
            app_name=settings.app_name,
            otp_ttl_seconds=settings.tokens.otp_ttl_seconds,
            reset_ttl_seconds=settings.tokens.reset_token_ttl_seconds,
        )
        app.state.notifier = notifier
        app.state.auth_service = AuthService(
            users=users,
            verification_tokens=TokenStore(
                tokens, TOKEN_TYPE_EMAIL_VERIFY, settings.tokens.otp_ttl_seconds
            ),
            reset_tokens=TokenStore(
                tokens,
                TOKEN_TYPE_PASSWORD_RESET,
                settings.tokens.reset_token_ttl_seconds,
                active_message=ACTIVE_RESET_TOKEN_MESSAGE,
            ),
            sessions=SessionTokenService(settings.jwt),
            notifier=notifier,
            token_settings=settings.tokens,
            app_url=settings.app_url,
        )
        log.info("app_started", db_name=settings.db.db_name)

        yield

        # ── Shutdown ─────────────────────────────────────────────────────────
        await notifier.drain()
        await email_provider.aclose()
        await mongo_client.close()

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        docs_url=settings.docs_url,
        redoc_url=None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(auth_router)

    return app
