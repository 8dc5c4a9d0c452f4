"""Error taxonomy shared by adapters and use cases."""


class HNNotifierError(Exception):
    """Base class for all service errors."""


class StoryNotFoundError(HNNotifierError):
    """Story has no record in the store."""

    def __init__(self, story_id: int) -> None:
        super().__init__(f"story {story_id} not found in store")
        self.story_id = story_id


class StorageError(HNNotifierError):
    """Store backend failure other than a missing key."""


class IgnoredItemError(HNNotifierError):
    """Story does not pass the eligibility filter."""

    def __init__(self, story_id: int) -> None:
        super().__init__(f"story {story_id} ignored")
        self.story_id = story_id


class TransportError(HNNotifierError):
    """HTTP or network failure on an outbound call."""


class DecodeError(HNNotifierError):
    """Malformed response body."""


class FetchError(HNNotifierError):
    """Hacker News API call failed."""


class FetchTransportError(FetchError, TransportError):
    pass


class FetchDecodeError(FetchError, DecodeError):
    pass


class NotificationError(HNNotifierError):
    """Chat platform API call failed or answered with an error."""


class NotificationTransportError(NotificationError, TransportError):
    pass


class NotificationDecodeError(NotificationError, DecodeError):
    pass


class IgnorableRemoteError(NotificationError):
    """Message to delete is already gone, for a reason that counts as success."""


class ConfigError(HNNotifierError):
    """Invalid or incomplete configuration."""
