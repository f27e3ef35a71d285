"""Store protocols: services depend on these, not the Mongo implementations."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from bson import ObjectId

from schemas.models.token import TokenDoc
from schemas.models.user import UserDoc


class UserStore(Protocol):
    async def find_by_email(self, email: str) -> Optional[UserDoc]: ...

    async def find_by_id(self, user_id: str | ObjectId) -> Optional[UserDoc]: ...

    async def create(self, name: str, email: str, raw_password: str) -> UserDoc: ...

    def verify_password(self, user: UserDoc, candidate: str) -> bool: ...

    def set_password(self, user: UserDoc, raw_password: str) -> None: ...

    async def save(self, user: UserDoc) -> None: ...


class TokenBackend(Protocol):
    async def insert(self, token: TokenDoc) -> TokenDoc: ...

    async def replace(self, token: TokenDoc) -> TokenDoc: ...

    async def find_live(
        self, owner_id: ObjectId, token_type: str, now: Optional[datetime] = None
    ) -> Optional[TokenDoc]: ...

    async def delete(self, token_id: ObjectId) -> bool: ...

    async def delete_expired(
        self,
        token_type: str,
        owner_id: Optional[ObjectId] = None,
        now: Optional[datetime] = None,
    ) -> int: ...
