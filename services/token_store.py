"""
Per-kind token store: hashing, expiry and one-shot use of one-time tokens.

One TokenStore instance wraps the shared TokenRepository for a single
token_type (email verification OTPs or password reset tokens) with its TTL.
"""

from __future__ import annotations

from typing import Optional

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from errors import ConflictError
from repositories.protocol import TokenBackend
from schemas.models.token import TokenDoc
from shared.crypto import hash_token, token_matches
from shared.datetime_utils import expires_after, utcnow
from shared.logging import get_logger

log = get_logger(__name__)

ACTIVE_TOKEN_MESSAGE = "A token was already issued, please try again later!"


class TokenStore:
    def __init__(
        self,
        repository: TokenBackend,
        token_type: str,
        ttl_seconds: int,
        active_message: str = ACTIVE_TOKEN_MESSAGE,
    ) -> None:
        self._repo = repository
        self.token_type = token_type
        self.ttl_seconds = ttl_seconds
        self.active_message = active_message

    async def issue(
        self, owner_id: str | ObjectId, raw_token: str, *, reject_existing: bool = False
    ) -> TokenDoc:
        """Store a hash of *raw_token* for *owner_id*.

        With ``reject_existing`` a live token for the owner makes this fail;
        otherwise the new token replaces whatever the owner had.

        Raises:
            ConflictError: ``reject_existing`` is set and a live token exists
                (or a concurrent request inserted one first).
        """
        owner = ObjectId(owner_id)
        now = utcnow()
        token = TokenDoc(
            owner_id=owner,
            token_type=self.token_type,
            token_hash=hash_token(raw_token),
            created_at=now,
            expires_at=expires_after(self.ttl_seconds, now),
        )

        if not reject_existing:
            token = await self._repo.replace(token)
        else:
            if await self._repo.find_live(owner, self.token_type, now) is not None:
                log.warning("token_issue_rejected", token_type=self.token_type, owner_id=str(owner))
                raise ConflictError(self.active_message)
            # Dead-but-unswept records would otherwise trip the unique index
            await self._repo.delete_expired(self.token_type, owner_id=owner, now=now)
            try:
                token = await self._repo.insert(token)
            except DuplicateKeyError:
                log.warning(
                    "token_issue_rejected",
                    token_type=self.token_type,
                    owner_id=str(owner),
                    reason="race_condition_duplicate",
                )
                raise ConflictError(self.active_message)

        log.info(
            "token_issued",
            token_type=self.token_type,
            owner_id=str(owner),
            token_id=str(token.id),
        )
        return token

    async def find_by_owner(self, owner_id: str | ObjectId) -> Optional[TokenDoc]:
        """Return the owner's live token, or None if absent or expired."""
        return await self._repo.find_live(ObjectId(owner_id), self.token_type)

    def compare(self, record: Optional[TokenDoc], candidate: Optional[str]) -> bool:
        """Return True if *candidate* matches *record*. Never raises."""
        if record is None or not isinstance(candidate, str) or not candidate:
            return False
        if record.is_expired():
            return False
        return token_matches(candidate, record.token_hash)

    async def consume(self, record: TokenDoc) -> None:
        """Delete *record* so it cannot match again."""
        await self._repo.delete(record.id)
        log.info(
            "token_consumed",
            token_type=self.token_type,
            owner_id=str(record.owner_id),
            token_id=str(record.id),
        )

    async def purge_expired(self) -> int:
        """Remove every expired token of this kind; returns how many were removed."""
        removed = await self._repo.delete_expired(self.token_type)
        if removed:
            log.info("tokens_purged", token_type=self.token_type, count=removed)
        return removed
