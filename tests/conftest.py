"""Shared test fixtures for open-wegram-bot."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from wegram.config import RelayConfig
from wegram.webhook.telegram import TelegramClient, TelegramResult

OWNER_UID = "1000"
BOT_TOKEN = "123456:ABC-def"
SECRET = "Abcdefghijklmno1"


@pytest.fixture
def config() -> RelayConfig:
    return RelayConfig(prefix="public", secret_token=SECRET)


@pytest.fixture
def mock_client() -> AsyncMock:
    """TelegramClient double whose calls all succeed."""
    client = AsyncMock(spec=TelegramClient)
    client.copy_message.return_value = make_result()
    client.set_webhook.return_value = make_result(result=True)
    client.delete_webhook.return_value = make_result(result=True)
    return client


# --- Factory functions for test data ---


def make_result(ok: bool = True, **kwargs: Any) -> TelegramResult:
    defaults: dict[str, Any] = {
        "status_code": 200 if ok else 400,
        "ok": ok,
        "description": None if ok else "Bad Request: test failure",
        "result": {"message_id": 99} if ok else None,
    }
    defaults.update(kwargs)
    return TelegramResult(**defaults)


def make_chat(chat_id: int = 555, **kwargs: Any) -> dict[str, Any]:
    chat: dict[str, Any] = {"id": chat_id, "type": "private", "first_name": "Alice"}
    chat.update(kwargs)
    return chat


def make_message(
    chat_id: int = 555,
    text: str | None = "hello",
    message_id: int = 1,
    **kwargs: Any,
) -> dict[str, Any]:
    message: dict[str, Any] = {
        "message_id": message_id,
        "date": 1700000000,
        "chat": kwargs.pop("chat", None) or make_chat(chat_id),
    }
    if text is not None:
        message["text"] = text
    message.update(kwargs)
    return message


def make_marker_markup(
    callback_data: str | None = None,
    url: str | None = None,
) -> dict[str, Any]:
    button: dict[str, Any] = {"text": "🔓 来自: Alice (555)"}
    if callback_data is not None:
        button["callback_data"] = callback_data
    if url is not None:
        button["url"] = url
    return {"inline_keyboard": [[button]]}


def make_owner_reply(
    reply_markup: dict[str, Any] | None,
    text: str = "thanks!",
) -> dict[str, Any]:
    """Owner's reply inside their own chat to a previously forwarded copy."""
    replied = make_message(chat_id=int(OWNER_UID), text="hello", message_id=40)
    if reply_markup is not None:
        replied["reply_markup"] = reply_markup
    return make_message(
        chat_id=int(OWNER_UID),
        text=text,
        message_id=41,
        reply_to_message=replied,
    )


def make_update(message: dict[str, Any] | None = None, update_id: int = 1) -> bytes:
    update: dict[str, Any] = {"update_id": update_id}
    if message is not None:
        update["message"] = message
    return json.dumps(update).encode()


def mock_async_client(*responses: Any) -> AsyncMock:
    """httpx.AsyncClient double returning the given responses in order."""
    client = AsyncMock()
    if len(responses) == 1:
        client.post.return_value = responses[0]
    else:
        client.post.side_effect = list(responses)
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=False)
    return client


def mock_http_response(payload: Any, status_code: int = 200) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload
    return resp
