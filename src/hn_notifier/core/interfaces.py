"""Core interfaces for adapters."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional, Union

from hn_notifier.core.entities import LinkPreview, Story, StoryRecord


class StorySource(ABC):
    """Interface for the upstream ranking and item API."""

    @abstractmethod
    async def list_top_ids(self, limit: int) -> list[int]:
        """Fetch ids of the current top stories."""
        pass

    @abstractmethod
    async def fetch_detail(self, story_id: int) -> Story:
        """Fetch full details of a story."""
        pass

    async def fill_details(self, story: Story) -> Story:
        """Enrich a story in place, keeping its message id and save time."""
        if story.details_loaded:
            return story
        detail = await self.fetch_detail(story.id)
        story.url = detail.url
        story.title = detail.title
        story.descendants = detail.descendants
        story.score = detail.score
        story.type = detail.type
        story.details_loaded = True
        return story


class StoryStore(ABC):
    """Interface for the persistent per-story state."""

    @abstractmethod
    def get(self, story_id: int) -> StoryRecord:
        """Load a record, raising StoryNotFoundError if missing."""
        pass

    @abstractmethod
    def get_many(self, story_ids: list[int]) -> dict[int, Union[StoryRecord, Exception]]:
        """Batch lookup; missing ids map to StoryNotFoundError."""
        pass

    @abstractmethod
    def put(self, story: Union[Story, StoryRecord], now: Optional[datetime] = None) -> StoryRecord:
        """Save a record and stamp its last save time."""
        pass

    @abstractmethod
    def delete(self, story_id: int) -> None:
        """Remove a record."""
        pass

    @abstractmethod
    def list_stale(self, before: datetime) -> list[StoryRecord]:
        """Records not saved since `before`."""
        pass


class Notifier(ABC):
    """Interface for the chat platform message API."""

    platform: str = ""

    @abstractmethod
    def build_payload(self, story: Story, preview: Optional[LinkPreview] = None) -> dict[str, Any]:
        """Render a story into the platform message payload."""
        pass

    @abstractmethod
    async def send(self, channel: str, payload: dict[str, Any]) -> str:
        """Post a new message and return its platform-assigned id."""
        pass

    @abstractmethod
    async def edit(self, channel: str, message_id: str, payload: dict[str, Any]) -> None:
        """Replace the content of an existing message."""
        pass

    @abstractmethod
    async def remove(self, channel: str, message_id: str) -> None:
        """Delete a message, raising IgnorableRemoteError if it is already gone."""
        pass


class LinkPreviewer(ABC):
    """Interface for unfurling story links."""

    @abstractmethod
    async def preview(self, url: str) -> LinkPreview:
        """Build a preview, never raising."""
        pass
