"""
Fire-and-forget notifications.

Each notify_* call schedules a task on the running event loop that renders a
Jinja2 email template and hands it to the EmailProvider; the caller never
awaits it. Whatever goes wrong inside the task (template error, provider
returning False, raising, timing out) is logged and never reaches the
request that triggered it.
"""

from __future__ import annotations

import asyncio
import os
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from infrastructure.email.protocol import EmailProvider
from schemas.models.user import UserDoc
from shared.logging import get_logger

log = get_logger(__name__)

_DEFAULT_TEMPLATE_DIR = os.path.join(
    os.path.dirname(os.path.dirname(__file__)), "templates", "emails"
)


class Notifier:
    def __init__(
        self,
        provider: EmailProvider,
        app_name: str = "authkit",
        otp_ttl_seconds: int = 900,
        reset_ttl_seconds: int = 3600,
        template_dir: str = _DEFAULT_TEMPLATE_DIR,
    ) -> None:
        self._provider = provider
        self._app_name = app_name
        self._otp_ttl_seconds = otp_ttl_seconds
        self._reset_ttl_seconds = reset_ttl_seconds
        self._jinja = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(["html", "xml"]),
        )
        # The loop only keeps weak references to tasks
        self._pending: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._pending)

    def render(self, template_name: str, **context: Any) -> str:
        template = self._jinja.get_template(template_name)
        return template.render(app_name=self._app_name, **context)

    def dispatch(
        self, to_address: str, subject: str, template_name: str, **context: Any
    ) -> Optional[asyncio.Task]:
        """Schedule rendering and sending of one email and return immediately."""
        try:
            task = asyncio.get_running_loop().create_task(
                self._deliver(to_address, subject, template_name, context)
            )
        except RuntimeError as e:
            log.error(
                "notification_not_scheduled",
                to_email=to_address,
                subject=subject,
                error=str(e),
            )
            return None
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _deliver(
        self, to_address: str, subject: str, template_name: str, context: dict
    ) -> None:
        try:
            html_body = self.render(template_name, **context)
            sent = await self._provider.send(to_address, subject, html_body)
        except Exception as e:
            log.error(
                "notification_failed",
                to_email=to_address,
                subject=subject,
                error=str(e),
                error_type=type(e).__name__,
            )
            return
        if not sent:
            log.warning("notification_not_delivered", to_email=to_address, subject=subject)

    async def drain(self) -> None:
        """Wait for every in-flight send to finish (shutdown, tests)."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def notify_verification(self, user: UserDoc, otp_code: str) -> Optional[asyncio.Task]:
        return self.dispatch(
            user.email,
            "Verify your email account",
            "verification.html",
            user_name=user.name,
            otp_code=otp_code,
            expires_minutes=self._otp_ttl_seconds // 60,
        )

    def notify_welcome(self, user: UserDoc) -> Optional[asyncio.Task]:
        return self.dispatch(
            user.email, "Welcome email", "welcome.html", user_name=user.name
        )

    def notify_password_reset(self, user: UserDoc, reset_link: str) -> Optional[asyncio.Task]:
        return self.dispatch(
            user.email,
            "Password reset email",
            "password_reset.html",
            user_name=user.name,
            reset_link=reset_link,
            expires_minutes=self._reset_ttl_seconds // 60,
        )

    def notify_password_changed(self, user: UserDoc) -> Optional[asyncio.Task]:
        return self.dispatch(
            user.email,
            "Password reset successfully",
            "password_reset_done.html",
            user_name=user.name,
        )
