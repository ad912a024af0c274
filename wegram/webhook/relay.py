"""Relay engine: handles one Telegram webhook delivery.

Decision order for an authenticated ``message`` update:

1. Owner reply: the owner replied (in their own chat) to a forwarded copy.
   The original sender is recovered from the copy's marker and the reply is
   copied back to them without any markup.
2. ``/start``: swallowed, never forwarded.
3. Fresh inbound: copied to the owner with a marker identifying the sender.
   If Telegram rejects the copy with the deep-link button, it is retried once
   with a callback-only button.
"""

from __future__ import annotations

import hmac
import logging

from wegram.webhook.marker import RelayMarker
from wegram.webhook.models import Message, RelayOutcome, Update, WebhookResponse
from wegram.webhook.telegram import TelegramClient, to_chat_id

logger = logging.getLogger(__name__)

START_COMMAND = "/start"

ACCEPTED = "OK"
UNAUTHORIZED = "未授权"
INTERNAL_ERROR = "内部服务器错误"


def secret_matches(provided: str | None, configured: str) -> bool:
    """Constant-time equality; an empty configured secret never matches."""
    if not configured or provided is None:
        return False
    return hmac.compare_digest(provided.encode(), configured.encode())


def is_owner_reply(message: Message, owner_uid: str) -> bool:
    return message.reply_to_message is not None and str(message.chat.id) == owner_uid


class RelayEngine:
    """Relays messages between third parties and the bot owner."""

    def __init__(self, client: TelegramClient, owner_uid: str) -> None:
        self._client = client
        self._owner_uid = owner_uid

    async def deliver(
        self,
        secret_header: str | None,
        body: bytes,
        configured_secret: str,
    ) -> WebhookResponse:
        """Authenticate and process one webhook delivery."""
        if not secret_matches(secret_header, configured_secret):
            logger.info("Rejected webhook delivery for owner %s: bad secret", self._owner_uid)
            return WebhookResponse(text=UNAUTHORIZED, status_code=401)

        try:
            update = Update.model_validate_json(body)
            if update.message is None:
                return WebhookResponse(text=ACCEPTED, status_code=200)

            message = update.message
            if is_owner_reply(message, self._owner_uid):
                await self.relay_owner_reply(message)
                return WebhookResponse(text=ACCEPTED, status_code=200)

            if message.text == START_COMMAND:
                return WebhookResponse(text=ACCEPTED, status_code=200)

            outcome = await self.forward_to_owner(message)
            if outcome is RelayOutcome.FAILED:
                logger.warning(
                    "Could not forward message %s from %s to owner %s",
                    message.message_id, message.chat.id, self._owner_uid,
                )
            return WebhookResponse(text=ACCEPTED, status_code=200)
        except Exception:
            logger.exception("Error handling webhook for owner %s", self._owner_uid)
            return WebhookResponse(text=INTERNAL_ERROR, status_code=500)

    async def relay_owner_reply(self, message: Message) -> RelayOutcome | None:
        """Copy the owner's reply back to the sender named by the marker.

        Returns None when the replied-to message carries no usable marker.
        """
        replied = message.reply_to_message
        if replied is None:
            return None
        marker = RelayMarker.from_markup(replied.reply_markup)
        if marker is None:
            return None
        sender_id = marker.sender_id()
        if sender_id is None:
            logger.debug("Replied-to message %s has no sender marker", replied.message_id)
            return None

        result = await self._client.copy_message(
            chat_id=to_chat_id(sender_id),
            from_chat_id=message.chat.id,
            message_id=message.message_id,
        )
        if not result.ok:
            logger.warning("Reply to %s rejected: %s", sender_id, result.description)
            return RelayOutcome.FAILED
        return RelayOutcome.DELIVERED

    async def forward_to_owner(self, message: Message) -> RelayOutcome:
        """Copy an inbound message into the owner's chat, tagged with its sender."""
        sender = message.chat
        sender_id = str(sender.id)
        sender_name = sender.display_name

        linked = RelayMarker.for_sender(sender_id, with_link=True)
        if await self._copy_to_owner(message, linked, sender_name):
            return RelayOutcome.DELIVERED

        # tg://user buttons are refused for senders whose privacy settings hide them.
        logger.info("Link button rejected for sender %s, retrying without link", sender_id)
        unlinked = RelayMarker.for_sender(sender_id, with_link=False)
        if await self._copy_to_owner(message, unlinked, sender_name):
            return RelayOutcome.DELIVERED_WITHOUT_LINK
        return RelayOutcome.FAILED

    async def _copy_to_owner(
        self, message: Message, marker: RelayMarker, sender_name: str,
    ) -> bool:
        result = await self._client.copy_message(
            chat_id=to_chat_id(self._owner_uid),
            from_chat_id=message.chat.id,
            message_id=message.message_id,
            reply_markup=marker.to_reply_markup(sender_name),
        )
        return result.ok
