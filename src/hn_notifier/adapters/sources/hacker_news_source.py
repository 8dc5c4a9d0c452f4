"""Hacker News API source."""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from hn_notifier.core import FetchDecodeError, FetchTransportError, Story, StorySource

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://hacker-news.firebaseio.com/v0"


@dataclass
class HNItemPayload:
    """Item object as returned by the ``item/<id>.json`` endpoint."""

    id: int
    type: str = ""
    url: str = ""
    title: str = ""
    score: int = 0
    descendants: int = 0
    time: int = 0

    @classmethod
    def from_json(cls, data: Any) -> "HNItemPayload":
        if not isinstance(data, dict):
            raise ValueError(f"expected JSON object, got {type(data).__name__}")
        if "id" not in data:
            raise ValueError("item has no id")
        return cls(
            id=int(data["id"]),
            type=str(data.get("type") or ""),
            url=str(data.get("url") or ""),
            title=str(data.get("title") or ""),
            score=int(data.get("score") or 0),
            descendants=int(data.get("descendants") or 0),
            time=int(data.get("time") or 0),
        )

    def to_story(self, message_id: str = "") -> Story:
        return Story(
            id=self.id,
            url=self.url,
            title=self.title,
            descendants=self.descendants,
            score=self.score,
            type=self.type,
            message_id=message_id,
            details_loaded=True,
        )


class HackerNewsSource(StorySource):
    """Fetch top stories from the Hacker News Firebase API."""

    name = "Hacker News"

    def __init__(
        self,
        api_base: str = DEFAULT_API_BASE,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self._client = client

    def top_stories_url(self) -> str:
        return f"{self.api_base}/topstories.json"

    def item_url(self, story_id: int) -> str:
        return f"{self.api_base}/item/{story_id}.json"

    async def list_top_ids(self, limit: int) -> list[int]:
        """Fetch ids of the current top stories, best ranked first."""
        params = {"orderBy": '"$key"', "limitToFirst": limit}
        data = await self._get_json(self.top_stories_url(), params=params)

        if not isinstance(data, list):
            raise FetchDecodeError(f"top stories: expected JSON array, got {type(data).__name__}")
        try:
            ids = [int(story_id) for story_id in data]
        except (TypeError, ValueError) as e:
            raise FetchDecodeError(f"top stories: non-integer id: {e}") from e

        return ids[:limit]

    async def fetch_detail(self, story_id: int) -> Story:
        """Fetch a story and mark its details as loaded."""
        data = await self._get_json(self.item_url(story_id))
        try:
            payload = HNItemPayload.from_json(data)
        except (TypeError, ValueError) as e:
            raise FetchDecodeError(f"item {story_id}: {e}") from e
        return payload.to_story()

    async def _get_json(self, url: str, params: Optional[dict] = None) -> Any:
        try:
            if self._client is not None:
                response = await self._client.get(url, params=params, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise FetchTransportError(f"GET {url}: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise FetchDecodeError(f"GET {url}: invalid JSON: {e}") from e
