"""EmailProvider protocol: the notifier depends on this, not a concrete provider."""

from typing import Protocol


class EmailProvider(Protocol):
    async def send(self, to_address: str, subject: str, html_body: str) -> bool: ...
