import json
import os

import requests

from logging_config import get_logger

logger = get_logger(__name__)

TELEGRAM_API_URL = "https://api.telegram.org"


def get_bot_token() -> str:
    return os.getenv("TELEGRAM_BOT_TOKEN", "").strip()


def get_chat_ids() -> list:
    """
    Parses TELEGRAM_CHAT_ID, which may be a single id or a JSON array of ids.
    """
    raw = os.getenv("TELEGRAM_CHAT_ID", "").strip()
    if not raw:
        return []  # No IDs provided
    try:
        chat_ids = json.loads(raw)  # Try parsing JSON array
    except json.JSONDecodeError:
        return [raw]  # Use as single string ID if JSON fails
    if not isinstance(chat_ids, list):
        chat_ids = [chat_ids]  # Convert single ID to list
    return chat_ids


def send_telegram_message(text, timeout=15):
    """
    Sends a text message to one or multiple Telegram chats.

    :param text: The message text.
    :param timeout: Request timeout in seconds.
    :return: List of Telegram API responses, or None if not configured.
    :raises requests.RequestException: If a request fails.
    """
    token = get_bot_token()
    if not token:
        logger.error("TELEGRAM_BOT_TOKEN is missing. Message cannot be sent.")
        return None

    chat_ids = get_chat_ids()
    if not chat_ids:
        logger.warning("No TELEGRAM_CHAT_ID provided. Message will not be sent.")
        return None

    url = f"{TELEGRAM_API_URL}/bot{token}/sendMessage"
    responses = []
    for chat_id in chat_ids:
        response = requests.post(
            url, data={"chat_id": chat_id, "text": text}, timeout=timeout
        )
        response.raise_for_status()
        responses.append(response.json())

    return responses
