"""
Credential store backed by the `users` collection.

Passwords are hashed with argon2 before they reach the database; callers
only ever hand plaintext to create() and set_password().
"""

from __future__ import annotations

from typing import Optional

from bson import ObjectId
from pymongo import ASCENDING
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import DuplicateKeyError

from errors import ConflictError, NotFoundError
from schemas.models.user import UserDoc
from shared.crypto import hash_password, verify_password
from shared.datetime_utils import utcnow
from shared.logging import get_logger
from shared.validators import validate_object_id

log = get_logger(__name__)


class UserRepository:
    def __init__(self, collection: AsyncCollection) -> None:
        self._col = collection

    async def ensure_indexes(self) -> None:
        await self._col.create_index([("email", ASCENDING)], unique=True)

    async def find_by_email(self, email: str) -> Optional[UserDoc]:
        doc = await self._col.find_one({"email": email})
        return UserDoc.from_mongo(doc)

    async def find_by_id(self, user_id: str | ObjectId) -> Optional[UserDoc]:
        """Return the user with *user_id*, or None if there is none.

        Raises:
            NotFoundError: *user_id* is not a well-formed ObjectId.
        """
        if not validate_object_id(user_id):
            raise NotFoundError("User not found!")
        doc = await self._col.find_one({"_id": ObjectId(user_id)})
        return UserDoc.from_mongo(doc)

    async def create(self, name: str, email: str, raw_password: str) -> UserDoc:
        """Insert a new unverified user.

        Raises:
            ConflictError: the email is already registered, either found by the
                pre-check or rejected by the unique index on insert.
        """
        if await self.find_by_email(email) is not None:
            raise ConflictError("This email already exists!")

        now = utcnow()
        user = UserDoc(
            name=name,
            email=email,
            password_hash=hash_password(raw_password),
            verified=False,
            created_at=now,
            updated_at=now,
        )
        try:
            result = await self._col.insert_one(user.to_mongo())
        except DuplicateKeyError:
            # Email was registered between our check and insert
            log.warning("user_create_failed", reason="race_condition_duplicate")
            raise ConflictError("This email already exists!")
        user.id = result.inserted_id
        return user

    def verify_password(self, user: UserDoc, candidate: str) -> bool:
        return verify_password(candidate, user.password_hash)

    def set_password(self, user: UserDoc, raw_password: str) -> None:
        user.password_hash = hash_password(raw_password)

    async def save(self, user: UserDoc) -> None:
        """Persist the mutable fields of *user* (name, verified, password hash)."""
        user.updated_at = utcnow()
        await self._col.update_one(
            {"_id": user.id},
            {
                "$set": {
                    "name": user.name,
                    "verified": user.verified,
                    "password_hash": user.password_hash,
                    "updated_at": user.updated_at,
                }
            },
        )
