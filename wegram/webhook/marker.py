"""Relay marker: the sender id carried on a forwarded copy's inline button.

The marker is the only link between a copy in the owner's chat and the person
who sent the original. It is written in two encodings at once, the button's
``callback_data`` and a ``tg://user?id=`` deep link, because Telegram clients
may drop one of them. Reading tries the callback value first and falls back
to the URL suffix.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from wegram.webhook.models import InlineKeyboardMarkup

USER_LINK_PREFIX = "tg://user?id="

LINKED_GLYPH = "🔓"
UNLINKED_GLYPH = "🔏"


@dataclass(frozen=True)
class RelayMarker:
    callback_value: str | None = None
    url_value: str | None = None

    @classmethod
    def for_sender(cls, sender_id: str, with_link: bool = True) -> RelayMarker:
        return cls(
            callback_value=sender_id,
            url_value=f"{USER_LINK_PREFIX}{sender_id}" if with_link else None,
        )

    @classmethod
    def from_markup(cls, markup: InlineKeyboardMarkup | None) -> RelayMarker | None:
        """Read the marker off the first inline button, if there is one."""
        if markup is None:
            return None
        button = markup.first_button()
        if button is None:
            return None
        return cls(callback_value=button.callback_data, url_value=button.url)

    def sender_id(self) -> str | None:
        """Decode the sender id: callback value first, then the link suffix."""
        if self.callback_value:
            return self.callback_value
        if self.url_value and USER_LINK_PREFIX in self.url_value:
            suffix = self.url_value.split(USER_LINK_PREFIX, 1)[1]
            return suffix or None
        return None

    def to_reply_markup(self, sender_name: str) -> dict[str, Any]:
        """Build the ``inline_keyboard`` payload for ``copyMessage``."""
        sender_id = self.sender_id() or ""
        glyph = LINKED_GLYPH if self.url_value else UNLINKED_GLYPH
        button: dict[str, Any] = {
            "text": f"{glyph} 来自: {sender_name} ({sender_id})",
            "callback_data": self.callback_value,
        }
        if self.url_value:
            button["url"] = self.url_value
        return {"inline_keyboard": [[button]]}
