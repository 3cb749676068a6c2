"""
Notification Service - Telegram Alert Delivery.

Implements AlertDispatchInterface by sending each maintenance alert as a
Telegram message.
"""

from config import get_config
from feeder.interfaces.notification import (
    AlertCategory,
    AlertDispatchInterface,
    AlertEvent,
)
from logging_config import get_logger
from utils.telegram_notifier import send_telegram_message

logger = get_logger(__name__)

CATEGORY_EMOJI = {
    AlertCategory.LOW_FOOD: "🌾",
    AlertCategory.CLOGGED: "⚠️",
    AlertCategory.CLEANING_DUE: "🧽",
    AlertCategory.WEATHER_BASED: "🌧️",
    AlertCategory.HEAVY_USE: "📈",
}


def format_alert(event: AlertEvent) -> str:
    """Returns the Telegram text for an alert: title line, then the message."""
    emoji = CATEGORY_EMOJI.get(event.category, "🐦")
    return f"{emoji} {event.category.title}\n{event.message}"


class TelegramAlertDispatcher(AlertDispatchInterface):
    """
    Sends maintenance alerts to the configured Telegram chats.

    Failures are logged and reported through the return value; the alert
    stays in the event log either way.
    """

    def __init__(self):
        self._config = get_config()

    @property
    def is_enabled(self) -> bool:
        """Check if Telegram notifications are enabled."""
        return self._config.get("TELEGRAM_ENABLED", False)

    def dispatch(self, event: AlertEvent) -> bool:
        if not self.is_enabled:
            return False

        try:
            responses = send_telegram_message(text=format_alert(event))
        except Exception as e:
            logger.error(f"Telegram notification failed: {e}")
            return False

        if not responses:
            return False

        logger.info(f"Telegram notification sent: {event.category.value}")
        return True
