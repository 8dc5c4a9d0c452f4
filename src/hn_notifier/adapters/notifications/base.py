"""Shared HTTP plumbing for chat platform notifiers."""

from typing import Any, Optional

import httpx

from hn_notifier.core import Notifier, NotificationDecodeError, NotificationTransportError


class HttpNotifier(Notifier):
    """Notifier that talks to a JSON-answering HTTP API."""

    def __init__(self, timeout: float = 10.0, client: Optional[httpx.AsyncClient] = None) -> None:
        self.timeout = timeout
        self._client = client

    async def _post(
        self,
        url: str,
        *,
        data: Optional[dict[str, str]] = None,
        json: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """POST and decode the JSON answer.

        Non-2xx statuses are not raised here: both platforms report API
        errors in the body, and callers need to inspect it.
        """
        try:
            if self._client is not None:
                response = await self._client.post(url, data=data, json=json, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(url, data=data, json=json)
        except httpx.HTTPError as e:
            raise NotificationTransportError(f"POST {self._redact(url)}: {e}") from e

        try:
            body = response.json()
        except ValueError as e:
            raise NotificationDecodeError(
                f"POST {self._redact(url)}: HTTP {response.status_code}, invalid JSON: {e}"
            ) from e

        if not isinstance(body, dict):
            raise NotificationDecodeError(f"POST {self._redact(url)}: expected JSON object")
        return body

    def _redact(self, url: str) -> str:
        return url
