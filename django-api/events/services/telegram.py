"""Telegram Bot API messaging channel."""

import logging

import httpx

from events.stores.interfaces import MessagingChannel

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.telegram.org"


class TelegramChannel(MessagingChannel):
    """Sends plain-text messages through a Telegram bot."""

    def __init__(
        self,
        token: str,
        api_base: str = DEFAULT_API_BASE,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._token = (token or "").strip()
        self._api_base = api_base.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self._token)

    async def call(self, method: str, payload: dict) -> tuple[bool, int, dict | None]:
        """POST a Bot API method; returns (ok, status_code, response body)."""
        if not self.is_configured:
            return False, 0, None

        url = f"{self._api_base}/bot{self._token}/{method}"
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(url, json=payload)
        except httpx.HTTPError as e:
            logger.error("Telegram %s request error: %s", method, e)
            return False, 0, None

        try:
            data = response.json()
        except ValueError:
            data = None

        if not response.is_success:
            logger.error("Telegram %s failed: %s %s", method, response.status_code, data)
            return False, response.status_code, data
        return True, response.status_code, data

    async def send(self, address: str, text: str) -> bool:
        if not address or not address.strip():
            return False

        ok, _, _ = await self.call(
            "sendMessage",
            {
                "chat_id": address,
                "text": text,
                "disable_web_page_preview": True,
            },
        )
        return ok
