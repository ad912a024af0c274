"""Data models for the webhook relay."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

# --- Inbound Telegram payloads ---


class InlineKeyboardButton(BaseModel):
    model_config = ConfigDict(extra="ignore")

    text: str = ""
    callback_data: str | None = None
    url: str | None = None


class InlineKeyboardMarkup(BaseModel):
    model_config = ConfigDict(extra="ignore")

    inline_keyboard: list[list[InlineKeyboardButton]] = []

    def first_button(self) -> InlineKeyboardButton | None:
        if not self.inline_keyboard or not self.inline_keyboard[0]:
            return None
        return self.inline_keyboard[0][0]


class Chat(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None

    @property
    def display_name(self) -> str:
        """``@username`` when set, otherwise the non-empty name parts."""
        if self.username:
            return f"@{self.username}"
        return " ".join(part for part in (self.first_name, self.last_name) if part)


class Message(BaseModel):
    model_config = ConfigDict(extra="ignore")

    message_id: int
    chat: Chat
    text: str | None = None
    reply_to_message: Message | None = None
    reply_markup: InlineKeyboardMarkup | None = None


class Update(BaseModel):
    """Telegram update. Only ``message`` updates are relayed."""

    model_config = ConfigDict(extra="ignore")

    update_id: int | None = None
    message: Message | None = None


# --- Results ---


class RelayOutcome(str, Enum):
    DELIVERED = "delivered"
    DELIVERED_WITHOUT_LINK = "delivered_without_link"
    FAILED = "failed"


@dataclass
class WebhookResponse:
    """Plain-text response returned to Telegram for a webhook delivery."""

    text: str
    status_code: int


@dataclass
class ApiResult:
    """Outcome of an install/uninstall request."""

    success: bool
    message: str
    status_code: int = 200

    def body(self) -> dict[str, Any]:
        return {"success": self.success, "message": self.message}
