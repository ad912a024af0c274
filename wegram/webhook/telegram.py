"""Telegram Bot API client.

Thin wrapper over the per-token Bot API endpoint. A call either returns the
decoded ``{ok, description, result}`` envelope or raises
``TelegramTransportError`` when no usable response came back, so callers can
tell a Telegram-side rejection from a network failure.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from wegram.config import DEFAULT_API_BASE

logger = logging.getLogger(__name__)

SECRET_TOKEN_HEADER = "x-telegram-bot-api-secret-token"


class TelegramTransportError(Exception):
    """Raised when the Bot API could not be reached or answered garbage."""


@dataclass
class TelegramResult:
    status_code: int
    ok: bool
    description: str | None = None
    result: Any = None


def to_chat_id(value: str | int) -> int | str:
    """Send decimal ids as integers; pass anything else (e.g. @channel) through."""
    if isinstance(value, int):
        return value
    digits = value[1:] if value.startswith("-") else value
    if digits.isascii() and digits.isdecimal():
        return int(value)
    return value


class TelegramClient:
    """Issues Bot API calls on behalf of one bot token."""

    def __init__(self, bot_token: str, api_base: str = DEFAULT_API_BASE) -> None:
        self._bot_token = bot_token
        self._api_base = api_base.rstrip("/")

    async def call(self, method: str, body: dict[str, Any]) -> TelegramResult:
        """POST a JSON body to ``<api_base>/bot<token>/<method>``.

        TLS certificate verification is always on.
        """
        url = f"{self._api_base}/bot{self._bot_token}/{method}"

        try:
            async with httpx.AsyncClient(verify=True) as client:
                resp = await client.post(url, json=body)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TelegramTransportError(str(exc) or type(exc).__name__) from exc

        try:
            data = resp.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            # Error statuses without a JSON envelope still count as a rejection.
            if resp.status_code >= 400:
                return TelegramResult(
                    status_code=resp.status_code,
                    ok=False,
                    description=f"HTTP {resp.status_code}",
                )
            raise TelegramTransportError(
                f"{method}: unexpected response (HTTP {resp.status_code})",
            )

        result = TelegramResult(
            status_code=resp.status_code,
            ok=data.get("ok") is True,
            description=data.get("description"),
            result=data.get("result"),
        )
        if not result.ok:
            logger.debug("%s rejected: %s", method, result.description)
        return result

    async def set_webhook(self, url: str, secret_token: str) -> TelegramResult:
        return await self.call("setWebhook", {
            "url": url,
            "allowed_updates": ["message"],
            "secret_token": secret_token,
        })

    async def delete_webhook(self) -> TelegramResult:
        return await self.call("deleteWebhook", {})

    async def copy_message(
        self,
        chat_id: int | str,
        from_chat_id: int | str,
        message_id: int,
        reply_markup: dict[str, Any] | None = None,
    ) -> TelegramResult:
        body: dict[str, Any] = {
            "chat_id": chat_id,
            "from_chat_id": from_chat_id,
            "message_id": message_id,
        }
        if reply_markup is not None:
            body["reply_markup"] = reply_markup
        return await self.call("copyMessage", body)
