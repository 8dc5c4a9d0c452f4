"""Telegram notification adapter."""

import logging
from typing import Any, Optional

import httpx

from hn_notifier.adapters.formatting import build_message_text, build_reply_markup
from hn_notifier.adapters.notifications.base import HttpNotifier
from hn_notifier.core import IgnorableRemoteError, LinkPreview, NotificationError, Story

logger = logging.getLogger(__name__)

TELEGRAM_API_BASE = "https://api.telegram.org/"


def is_ignorable_delete_error(body: dict[str, Any]) -> bool:
    """Check a deleteMessage answer for errors that count as success."""
    if body.get("ok") or body.get("error_code") != 400:
        return False
    description = str(body.get("description", ""))
    return (
        # Someone removed the message from the channel by hand.
        "message to delete not found" in description
        # Bots may only delete messages younger than 48 hours; such a story
        # stays in the channel.
        or "message can't be deleted" in description
    )


class TelegramNotifier(HttpNotifier):
    """Post story messages to a Telegram channel with the Bot API."""

    platform = "telegram"

    def __init__(
        self,
        token: str,
        timeout: float = 10.0,
        api_base: str = TELEGRAM_API_BASE,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        super().__init__(timeout=timeout, client=client)
        self.token = token
        self.api_base = api_base.rstrip("/")

    def build_payload(self, story: Story, preview: Optional[LinkPreview] = None) -> dict[str, Any]:
        # Telegram renders its own link preview.
        return {
            "text": build_message_text(story),
            "parse_mode": "HTML",
            "reply_markup": build_reply_markup(story),
        }

    async def send(self, channel: str, payload: dict[str, Any]) -> str:
        body = await self._call("sendMessage", {"chat_id": channel, **payload})
        try:
            return str(int(body["result"]["message_id"]))
        except (KeyError, TypeError, ValueError) as e:
            raise NotificationError(f"sendMessage: response has no message_id: {e}") from e

    async def edit(self, channel: str, message_id: str, payload: dict[str, Any]) -> None:
        await self._call("editMessageText", {
            "chat_id": channel,
            "message_id": self._message_id(message_id),
            **payload,
        })

    async def remove(self, channel: str, message_id: str) -> None:
        await self._call("deleteMessage", {
            "chat_id": channel,
            "message_id": self._message_id(message_id),
        })

    async def _call(self, method: str, request: dict[str, Any]) -> dict[str, Any]:
        body = await self._post(self._method_url(method), json=request)
        if body.get("ok"):
            return body

        description = body.get("description", "unknown error")
        if method == "deleteMessage" and is_ignorable_delete_error(body):
            raise IgnorableRemoteError(f"{method}: {description}")
        if method == "editMessageText" and "message is not modified" in str(description):
            logger.debug("%s: %s", method, description)
            return body
        raise NotificationError(f"{method}: {body.get('error_code')} {description}")

    def _method_url(self, method: str) -> str:
        return f"{self.api_base}/bot{self.token}/{method}"

    def _redact(self, url: str) -> str:
        return url.replace(self.token, "<token>") if self.token else url

    @staticmethod
    def _message_id(message_id: str) -> int:
        try:
            return int(message_id)
        except ValueError as e:
            raise NotificationError(f"invalid Telegram message id {message_id!r}") from e
