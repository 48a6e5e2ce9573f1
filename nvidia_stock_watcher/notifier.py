"""Telegram notification helper."""

from __future__ import annotations

import logging

import requests

from .config import TELEGRAM_API_URL, Config

logger = logging.getLogger(__name__)


class TelegramNotifier:
    """Send one Markdown message per call to a fixed Telegram chat."""

    def __init__(self, config: Config, dry_run: bool = False) -> None:
        self.chat_id = config.telegram_chat_id
        self.timeout = config.request_timeout
        self.url = TELEGRAM_API_URL.format(token=config.telegram_bot_token)
        self.log_to_console = dry_run
        if not config.telegram_configured:
            logger.error("Telegram credentials are not set, notifications will only be printed.")
            self.log_to_console = True

    def send(self, message: str) -> bool:
        if self.log_to_console:
            print("\n" + "=" * 50)
            print("DRY RUN - Telegram Notification Preview:")
            print("=" * 50)
            print(message)
            print("=" * 50)
            return True

        logger.info("Sending Telegram notification...")
        payload = {"chat_id": self.chat_id, "text": message, "parse_mode": "Markdown"}
        try:
            response = requests.post(self.url, json=payload, timeout=self.timeout)
        except (requests.RequestException, ValueError) as exc:
            logger.error("Error sending Telegram notification: %s", exc)
            return False
        if response.status_code == 200:
            logger.info("Telegram notification sent successfully.")
            return True
        logger.error("Telegram API error %s: %s", response.status_code, response.text)
        return False
