"""Development EmailProvider that writes messages to the log instead of sending them."""

from collections import deque

from shared.logging import get_logger

log = get_logger(__name__)


class LoggingEmailProvider:
    def __init__(self, keep_last: int = 50) -> None:
        # Recent messages, for poking at from a shell or a test
        self.outbox: deque[tuple[str, str, str]] = deque(maxlen=keep_last)

    async def send(self, to_address: str, subject: str, html_body: str) -> bool:
        self.outbox.append((to_address, subject, html_body))
        log.info("email_logged", to_email=to_address, subject=subject, size=len(html_body))
        return True

    async def aclose(self) -> None:
        return None
