"""
intake/services/telegram_notifier.py

Sends plain-text messages through the Telegram Bot API.

- sendMessage for registration notifications and command replies
- setWebhook to register the bot webhook at startup
"""

from typing import Any, Dict, Optional

import requests

from intake.core.exceptions import DeliveryError
from intake.core.logging import get_logger

logger = get_logger(__name__)


def format_registration_message(name: str, email: str) -> str:
    return f"New user registered:\nName: {name}\nEmail: {email}"


class TelegramNotifier:
    """Thin client for the Telegram Bot API."""

    def __init__(
        self,
        bot_token: str,
        api_base_url: str = "https://api.telegram.org",
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.bot_token = bot_token
        self.api_base_url = api_base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def is_configured(self) -> bool:
        return bool(self.bot_token)

    def _call(self, method: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        if not self.is_configured():
            raise DeliveryError("Telegram bot token is not configured")

        url = f"{self.api_base_url}/bot{self.bot_token}/{method}"
        try:
            r = self.session.post(url, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error("Telegram %s request failed: %s", method, exc)
            raise DeliveryError(f"Telegram API unreachable: {exc.__class__.__name__}") from exc

        try:
            body = r.json()
        except ValueError:
            body = {}

        if not r.ok or not body.get("ok", False):
            description = body.get("description") or r.reason or "unknown error"
            logger.error("Telegram %s rejected (%s): %s", method, r.status_code, description)
            raise DeliveryError(f"Telegram API error: {description}")

        return body

    def send(self, channel_id: str, text: str) -> Dict[str, Any]:
        """
        Delivers `text` to the chat `channel_id`.

        Returns:
            The Telegram Message object
        Raises:
            DeliveryError if the transport fails or Telegram rejects the call
        """
        if not channel_id:
            raise DeliveryError("Telegram chat id is not configured")

        body = self._call("sendMessage", {"chat_id": channel_id, "text": text})
        message = body.get("result") or {}
        logger.info("Telegram message sent: message_id=%s", message.get("message_id"))
        return message

    def set_webhook(self, url: str, secret_token: str = "") -> None:
        payload: Dict[str, Any] = {"url": url, "allowed_updates": ["message"]}
        if secret_token:
            payload["secret_token"] = secret_token
        self._call("setWebhook", payload)
        logger.info("Telegram webhook registered at %s", url)

    def close(self) -> None:
        self.session.close()
