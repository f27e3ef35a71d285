"""
User document model.

Maps to the `users` MongoDB collection.

password_hash is always an argon2 hash; the plaintext is never stored.
verified flips to True exactly once, on successful email verification.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from schemas.models.base import MongoDocument


class UserDoc(MongoDocument):
    """Document model for the `users` collection."""

    name: str
    email: str
    password_hash: str
    verified: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def user_id(self) -> str:
        return self.id_str or ""
