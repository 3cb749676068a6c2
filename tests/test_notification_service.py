"""
Tests for TelegramAlertDispatcher.

Tests the dispatcher in isolation without actual Telegram API calls.
"""

from unittest.mock import patch

import pytest

from feeder.interfaces.notification import AlertCategory, AlertEvent
from feeder.services.notification_service import (
    TelegramAlertDispatcher,
    format_alert,
)
from utils.telegram_notifier import get_chat_ids


@pytest.fixture
def event():
    return AlertEvent.create(
        AlertCategory.LOW_FOOD, "Food level at 12%. Time to refill."
    )


@pytest.fixture
def dispatcher():
    """Create an enabled dispatcher for testing."""
    with patch("feeder.services.notification_service.get_config") as mock_config:
        mock_config.return_value = {"TELEGRAM_ENABLED": True}
        yield TelegramAlertDispatcher()


class TestDispatcherBasics:
    def test_is_enabled_when_configured(self, dispatcher):
        assert dispatcher.is_enabled is True

    def test_is_disabled_when_not_configured(self):
        with patch("feeder.services.notification_service.get_config") as mock_config:
            mock_config.return_value = {}
            assert TelegramAlertDispatcher().is_enabled is False

    def test_format_has_title_and_message(self, event):
        text = format_alert(event)
        assert "Low food" in text.splitlines()[0]
        assert text.splitlines()[1] == "Food level at 12%. Time to refill."


class TestDispatch:
    def test_sends_formatted_alert(self, dispatcher, event):
        with patch(
            "feeder.services.notification_service.send_telegram_message",
            return_value=[{"ok": True}],
        ) as mock_send:
            assert dispatcher.dispatch(event) is True

        mock_send.assert_called_once_with(text=format_alert(event))

    def test_disabled_does_not_send(self, event):
        with patch("feeder.services.notification_service.get_config") as mock_config:
            mock_config.return_value = {"TELEGRAM_ENABLED": False}
            dispatcher = TelegramAlertDispatcher()

        with patch(
            "feeder.services.notification_service.send_telegram_message"
        ) as mock_send:
            assert dispatcher.dispatch(event) is False

        mock_send.assert_not_called()

    def test_send_failure_returns_false(self, dispatcher, event):
        with patch(
            "feeder.services.notification_service.send_telegram_message",
            side_effect=ConnectionError("offline"),
        ):
            assert dispatcher.dispatch(event) is False

    def test_unconfigured_bot_returns_false(self, dispatcher, event):
        with patch(
            "feeder.services.notification_service.send_telegram_message",
            return_value=None,
        ):
            assert dispatcher.dispatch(event) is False


class TestChatIds:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("", []),
            ("12345", [12345]),
            ("[1, 2]", [1, 2]),
            ("@feeder_channel", ["@feeder_channel"]),
        ],
    )
    def test_parsing(self, monkeypatch, raw, expected):
        monkeypatch.setenv("TELEGRAM_CHAT_ID", raw)
        assert get_chat_ids() == expected
