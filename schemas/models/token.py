"""
One-time token document model.

Maps to the `tokens` MongoDB collection.

Used for both email verification OTPs and password reset tokens.
token_hash stores SHA-256(raw token); the plain value is never stored.
A unique (owner_id, token_type) index keeps at most one record per owner
per kind, and a TTL index on expires_at sweeps dead records.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from schemas.models.base import MongoDocument, PyObjectId
from shared.datetime_utils import is_expired


TOKEN_TYPE_EMAIL_VERIFY = "email_verify"
TOKEN_TYPE_PASSWORD_RESET = "password_reset"


class TokenDoc(MongoDocument):
    """Document model for the `tokens` collection."""

    owner_id: PyObjectId
    token_type: str
    token_hash: str
    expires_at: datetime
    created_at: Optional[datetime] = None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return is_expired(self.expires_at, now)
