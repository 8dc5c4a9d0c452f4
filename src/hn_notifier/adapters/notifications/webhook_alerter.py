"""Operational alerts via an incoming webhook."""

import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


class WebhookAlerter:
    """Send plain-text alerts to a Slack-compatible incoming webhook."""

    def __init__(self, webhook_url: Optional[str] = None, timeout: float = 10.0) -> None:
        """Initialize alerter.

        Args:
            webhook_url: Incoming webhook URL. If None, alerts are only logged.
        """
        self.webhook_url = webhook_url
        self.timeout = timeout

    async def alert(self, text: str) -> None:
        """Post an alert; delivery problems are logged, never raised."""
        if not self.webhook_url:
            return

        payload = {
            "text": f"⚠️ *hn-notifier*: {text}",
            "mrkdwn": True,
        }

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                response = await client.post(self.webhook_url, json=payload)
                response.raise_for_status()
            except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
                logger.warning("could not deliver alert to webhook: %s", e)
