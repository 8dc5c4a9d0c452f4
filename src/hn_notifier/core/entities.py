"""Core domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

# Stories below these thresholds are never posted.
SCORE_THRESHOLD = 50
NUM_COMMENTS_THRESHOLD = 5

STORY_TYPE = "story"
NEWS_URL = "https://news.ycombinator.com/item?id={id}"


@dataclass
class Story:
    """A Hacker News story as the service works with it at runtime."""

    id: int
    url: str = ""
    title: str = ""
    descendants: int = 0
    score: int = 0
    type: str = ""
    message_id: str = ""
    last_save: Optional[datetime] = None
    details_loaded: bool = field(default=False, compare=False)

    @property
    def news_url(self) -> str:
        """Link to the story's discussion page."""
        return NEWS_URL.format(id=self.id)

    def should_ignore(self) -> bool:
        """Check if the story fails the eligibility filter."""
        return (
            self.type != STORY_TYPE
            or self.score < SCORE_THRESHOLD
            or self.descendants < NUM_COMMENTS_THRESHOLD
            or not self.url
        )

    def to_record(self) -> "StoryRecord":
        return StoryRecord(id=self.id, message_id=self.message_id, last_save=self.last_save)


@dataclass
class StoryRecord:
    """Minimal per-story state kept in the store."""

    id: int
    message_id: str
    last_save: Optional[datetime] = None

    def to_story(self) -> Story:
        return Story(id=self.id, message_id=self.message_id, last_save=self.last_save)


@dataclass
class LinkPreview:
    """Unfurled metadata of the page a story links to."""

    site_name: str = ""
    site_icon: str = ""
    image_url: str = ""
    description: str = ""


class Outcome(str, Enum):
    """Result of a single per-story action."""

    SENT = "sent"
    EDITED = "edited"
    DELETED = "deleted"
    IGNORED = "ignored"
    SKIPPED = "skipped"
    FAILED = "failed"
    DIVERGED = "diverged"


@dataclass
class CycleReport:
    """Counters for a single poll, refresh or cleanup invocation."""

    sent: int = 0
    edited: int = 0
    deleted: int = 0
    ignored: int = 0
    skipped: int = 0
    failed: int = 0
    diverged: int = 0

    def record(self, outcome: Outcome) -> None:
        setattr(self, outcome.value, getattr(self, outcome.value) + 1)

    @property
    def total(self) -> int:
        return sum(getattr(self, outcome.value) for outcome in Outcome)

    def summary(self) -> str:
        return ", ".join(f"{outcome.value}={getattr(self, outcome.value)}" for outcome in Outcome)
