"""Source adapters for fetching stories."""

from hn_notifier.adapters.sources.hacker_news_source import HackerNewsSource, HNItemPayload

__all__ = ["HackerNewsSource", "HNItemPayload"]
