"""
FastAPI dependency providers.

All injectable dependencies are defined here as plain functions used with
FastAPI's Depends() system. Long-lived collaborators are built once in the
app lifespan and stored on app.state.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header, Query, Request

from schemas.models.user import UserDoc
from services.auth_service import AuthService


def get_auth_service(request: Request) -> AuthService:
    """Return the AuthService wired up in the lifespan."""
    return request.app.state.auth_service


async def require_reset_token(
    token: Optional[str] = Query(default=None),
    id: Optional[str] = Query(default=None),
    auth_service: AuthService = Depends(get_auth_service),
) -> UserDoc:
    """Gate for reset-password routes: resolves the user the reset link was issued for."""
    return await auth_service.validate_reset_token(token, id)


def bearer_token(authorization: Optional[str] = Header(default=None)) -> Optional[str]:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if authorization and authorization.lower().startswith("bearer "):
        return authorization.split(" ", 1)[1].strip() or None
    return None


async def get_current_user(
    token: Optional[str] = Depends(bearer_token),
    auth_service: AuthService = Depends(get_auth_service),
) -> UserDoc:
    return await auth_service.current_user(token)
