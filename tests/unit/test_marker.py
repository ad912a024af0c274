"""Tests for the relay marker encoding and its two-way decode."""

from __future__ import annotations

from wegram.webhook.marker import RelayMarker
from wegram.webhook.models import InlineKeyboardMarkup


def _markup(**button: str) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup.model_validate(
        {"inline_keyboard": [[{"text": "x", **button}]]},
    )


class TestMarkerDecode:
    def test_callback_value_wins(self) -> None:
        marker = RelayMarker(callback_value="12345", url_value="tg://user?id=999")
        assert marker.sender_id() == "12345"

    def test_url_suffix_fallback(self) -> None:
        marker = RelayMarker(url_value="tg://user?id=67890")
        assert marker.sender_id() == "67890"

    def test_empty_callback_falls_back_to_url(self) -> None:
        marker = RelayMarker(callback_value="", url_value="tg://user?id=67890")
        assert marker.sender_id() == "67890"

    def test_neither_encoding(self) -> None:
        assert RelayMarker().sender_id() is None

    def test_unrelated_url_is_ignored(self) -> None:
        marker = RelayMarker(url_value="https://example.com/?id=1")
        assert marker.sender_id() is None

    def test_link_without_id(self) -> None:
        assert RelayMarker(url_value="tg://user?id=").sender_id() is None


class TestMarkerFromMarkup:
    def test_reads_first_button(self) -> None:
        markup = InlineKeyboardMarkup.model_validate({
            "inline_keyboard": [
                [{"text": "a", "callback_data": "1"}, {"text": "b", "callback_data": "2"}],
                [{"text": "c", "callback_data": "3"}],
            ],
        })
        marker = RelayMarker.from_markup(markup)
        assert marker is not None
        assert marker.sender_id() == "1"

    def test_url_only_button(self) -> None:
        marker = RelayMarker.from_markup(_markup(url="tg://user?id=67890"))
        assert marker == RelayMarker(callback_value=None, url_value="tg://user?id=67890")

    def test_no_markup(self) -> None:
        assert RelayMarker.from_markup(None) is None

    def test_empty_keyboard(self) -> None:
        assert RelayMarker.from_markup(InlineKeyboardMarkup()) is None
        empty_row = InlineKeyboardMarkup.model_validate({"inline_keyboard": [[]]})
        assert RelayMarker.from_markup(empty_row) is None


class TestMarkerEncode:
    def test_linked_marker_carries_both_encodings(self) -> None:
        marker = RelayMarker.for_sender("555")
        markup = marker.to_reply_markup("@alice")
        button = markup["inline_keyboard"][0][0]
        assert button == {
            "text": "🔓 来自: @alice (555)",
            "callback_data": "555",
            "url": "tg://user?id=555",
        }

    def test_unlinked_marker_is_callback_only(self) -> None:
        marker = RelayMarker.for_sender("555", with_link=False)
        button = marker.to_reply_markup("Alice Smith")["inline_keyboard"][0][0]
        assert button == {"text": "🔏 来自: Alice Smith (555)", "callback_data": "555"}

    def test_encoded_marker_decodes_both_ways(self) -> None:
        button = RelayMarker.for_sender("-100200").to_reply_markup("g")["inline_keyboard"][0][0]
        by_callback = RelayMarker(callback_value=button["callback_data"])
        by_url = RelayMarker(url_value=button["url"])
        assert by_callback.sender_id() == by_url.sender_id() == "-100200"
