"""Hacker News top stories to chat notifications."""

__version__ = "0.1.0"
