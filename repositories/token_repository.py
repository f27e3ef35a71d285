"""
Token persistence backed by the `tokens` collection.

Both token kinds share the collection and are told apart by token_type.
Indexes:
- unique (owner_id, token_type): one record per owner per kind
- TTL on expires_at: MongoDB sweeps dead records in the background

The TTL monitor only runs about once a minute, so reads filter on
expires_at as well.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from bson import ObjectId
from pymongo import ASCENDING, ReturnDocument
from pymongo.asynchronous.collection import AsyncCollection

from schemas.models.token import TokenDoc
from shared.datetime_utils import utcnow


class TokenRepository:
    def __init__(self, collection: AsyncCollection) -> None:
        self._col = collection

    async def ensure_indexes(self) -> None:
        await self._col.create_index(
            [("owner_id", ASCENDING), ("token_type", ASCENDING)], unique=True
        )
        await self._col.create_index([("expires_at", ASCENDING)], expireAfterSeconds=0)

    async def insert(self, token: TokenDoc) -> TokenDoc:
        """Insert *token*; lets DuplicateKeyError propagate to the caller."""
        result = await self._col.insert_one(token.to_mongo())
        token.id = result.inserted_id
        return token

    async def replace(self, token: TokenDoc) -> TokenDoc:
        """Upsert *token* over any existing record for the same owner and kind."""
        data = token.to_mongo()
        doc = await self._col.find_one_and_replace(
            {"owner_id": token.owner_id, "token_type": token.token_type},
            data,
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        token.id = doc["_id"]
        return token

    async def find_live(
        self, owner_id: ObjectId, token_type: str, now: Optional[datetime] = None
    ) -> Optional[TokenDoc]:
        doc = await self._col.find_one(
            {
                "owner_id": owner_id,
                "token_type": token_type,
                "expires_at": {"$gt": now or utcnow()},
            }
        )
        return TokenDoc.from_mongo(doc)

    async def delete(self, token_id: ObjectId) -> bool:
        result = await self._col.delete_one({"_id": token_id})
        return result.deleted_count > 0

    async def delete_expired(
        self,
        token_type: str,
        owner_id: Optional[ObjectId] = None,
        now: Optional[datetime] = None,
    ) -> int:
        query: dict = {"token_type": token_type, "expires_at": {"$lte": now or utcnow()}}
        if owner_id is not None:
            query["owner_id"] = owner_id
        result = await self._col.delete_many(query)
        return result.deleted_count
