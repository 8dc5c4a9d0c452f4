"""Core domain layer."""

from hn_notifier.core.entities import CycleReport, LinkPreview, Outcome, Story, StoryRecord
from hn_notifier.core.errors import (
    ConfigError,
    DecodeError,
    FetchDecodeError,
    FetchError,
    FetchTransportError,
    HNNotifierError,
    IgnorableRemoteError,
    IgnoredItemError,
    NotificationDecodeError,
    NotificationError,
    NotificationTransportError,
    StorageError,
    StoryNotFoundError,
    TransportError,
)
from hn_notifier.core.interfaces import LinkPreviewer, Notifier, StorySource, StoryStore
from hn_notifier.core.story_store import YamlStoryStore

__all__ = [
    "Story",
    "StoryRecord",
    "LinkPreview",
    "CycleReport",
    "Outcome",
    "StorySource",
    "StoryStore",
    "Notifier",
    "LinkPreviewer",
    "YamlStoryStore",
    "HNNotifierError",
    "StoryNotFoundError",
    "StorageError",
    "IgnoredItemError",
    "TransportError",
    "DecodeError",
    "FetchError",
    "FetchTransportError",
    "FetchDecodeError",
    "NotificationError",
    "NotificationTransportError",
    "NotificationDecodeError",
    "IgnorableRemoteError",
    "ConfigError",
]
