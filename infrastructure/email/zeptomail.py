"""ZeptoMail implementation of EmailProvider.

Delivery problems are logged and reported as False; send() only raises for
programming errors, and the notifier catches those too.
"""

from typing import Optional

import httpx

from config import EmailSettings
from shared.logging import get_logger

log = get_logger(__name__)

_ZEPTO_API_URL = "https://api.zeptomail.in/v1.1/email"


class ZeptoMailProvider:
    def __init__(
        self,
        settings: EmailSettings,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._settings = settings
        self._http = http_client or httpx.AsyncClient(
            timeout=settings.email_timeout_seconds
        )

    def _auth_header(self) -> str:
        token = self._settings.zepto_api_token
        if not token.startswith("Zoho-enczapikey "):
            token = f"Zoho-enczapikey {token}"
        return token

    async def send(self, to_address: str, subject: str, html_body: str) -> bool:
        if not self._settings.zepto_api_token:
            log.error("email_send_failed", reason="token_not_configured")
            return False

        payload = {
            "from": {
                "address": self._settings.zepto_from_email,
                "name": self._settings.zepto_from_name,
            },
            "to": [{"email_address": {"address": to_address, "name": to_address}}],
            "subject": subject,
            "htmlbody": html_body,
        }
        headers = {"Authorization": self._auth_header(), "Content-Type": "application/json"}

        try:
            response = await self._http.post(_ZEPTO_API_URL, json=payload, headers=headers)
        except httpx.HTTPError as e:
            log.error(
                "email_send_error",
                to_email=to_address,
                subject=subject,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

        if response.status_code in (200, 201, 202):
            log.info("email_sent_success", to_email=to_address, subject=subject)
            return True
        log.error(
            "email_send_failed",
            to_email=to_address,
            subject=subject,
            status_code=response.status_code,
            response=response.text[:200],
        )
        return False

    async def aclose(self) -> None:
        await self._http.aclose()
