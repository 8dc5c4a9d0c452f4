"""Slack notification adapter."""

import logging
from typing import Any, Optional

import httpx

from hn_notifier.adapters.formatting import build_slack_attachments, encode_payload
from hn_notifier.adapters.notifications.base import HttpNotifier
from hn_notifier.core import IgnorableRemoteError, LinkPreview, NotificationError, Story

logger = logging.getLogger(__name__)

SLACK_API_BASE = "https://slack.com/api"

# chat.delete errors meaning the message is already gone or can never be removed.
IGNORABLE_DELETE_ERRORS = frozenset({"message_not_found", "cant_delete_message"})


class SlackNotifier(HttpNotifier):
    """Post story messages to a Slack channel with the Web API."""

    platform = "slack"

    def __init__(
        self,
        token: str,
        timeout: float = 10.0,
        unfurl_links: bool = True,
        api_base: str = SLACK_API_BASE,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Initialize Slack notifier.

        Args:
            token: Bot token with the ``chat:write`` scope
            timeout: Per-call timeout in seconds
            unfurl_links: Let Slack unfurl the story link itself
            api_base: Web API base URL
        """
        super().__init__(timeout=timeout, client=client)
        self.token = token
        self.unfurl_links = unfurl_links
        self.api_base = api_base.rstrip("/")

    def build_payload(self, story: Story, preview: Optional[LinkPreview] = None) -> dict[str, Any]:
        return {"attachments": build_slack_attachments(story, preview)}

    async def send(self, channel: str, payload: dict[str, Any]) -> str:
        """Post a new message and return its ``ts``."""
        body = await self._call("chat.postMessage", {
            "channel": channel,
            "attachments": encode_payload(payload["attachments"]),
            "unfurl_links": self._flag(self.unfurl_links),
        })
        timestamp = body.get("ts")
        if not timestamp:
            raise NotificationError("chat.postMessage: response has no ts")
        return str(timestamp)

    async def edit(self, channel: str, message_id: str, payload: dict[str, Any]) -> None:
        """Update the message posted at ``message_id``."""
        await self._call("chat.update", {
            "channel": channel,
            "ts": message_id,
            "attachments": encode_payload(payload["attachments"]),
        })

    async def remove(self, channel: str, message_id: str) -> None:
        """Delete the message posted at ``message_id``."""
        await self._call("chat.delete", {"channel": channel, "ts": message_id})

    @staticmethod
    def is_ignorable_delete_error(body: dict[str, Any]) -> bool:
        return not body.get("ok") and body.get("error") in IGNORABLE_DELETE_ERRORS

    async def _call(self, method: str, fields: dict[str, str]) -> dict[str, Any]:
        data = {"token": self.token, **fields}
        body = await self._post(f"{self.api_base}/{method}", data=data)

        if body.get("ok"):
            if body.get("warning"):
                logger.debug("%s warning: %s", method, body["warning"])
            return body

        error = body.get("error", "unknown_error")
        if method == "chat.delete" and self.is_ignorable_delete_error(body):
            raise IgnorableRemoteError(f"{method}: {error}")
        raise NotificationError(f"{method}: {error}")

    @staticmethod
    def _flag(value: bool) -> str:
        return "true" if value else "false"
