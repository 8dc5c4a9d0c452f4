"""Configuration management."""

import os
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Optional

import yaml

from hn_notifier.core import ConfigError

PLATFORMS = ("slack", "telegram")


@dataclass
class HackerNewsConfig:
    """Hacker News API settings."""
    api_base: str = "https://hacker-news.firebaseio.com/v0"
    batch_size: int = 30
    timeout: float = 10.0


@dataclass
class ChatConfig:
    """Chat platform settings."""
    platform: str = "telegram"
    channel: str = "@yahnc"
    unfurl: bool = True
    timeout: float = 10.0


@dataclass
class MonitoringConfig:
    """Reconciliation settings."""
    retention_hours: float = 24
    max_concurrency: int = 10
    in_flight_guard: bool = False
    poll_interval: float = 300
    cleanup_interval: float = 3600


@dataclass
class PathsConfig:
    """Path settings."""
    storage_dir: Path = Path("data")
    store_root: str = "top_stories"


@dataclass
class Settings:
    """Application settings."""

    # Secrets (from environment only)
    slack_token: str = ""
    telegram_bot_token: str = ""
    webhook_url: Optional[str] = None

    # Config sections
    hacker_news: HackerNewsConfig = field(default_factory=HackerNewsConfig)
    chat: ChatConfig = field(default_factory=ChatConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)

    @property
    def platform(self) -> str:
        return self.chat.platform

    @property
    def channel(self) -> str:
        return self.chat.channel

    @property
    def chat_token(self) -> str:
        """Token of the configured platform."""
        if self.chat.platform == "slack":
            return self.slack_token
        return self.telegram_bot_token

    @property
    def retention(self) -> timedelta:
        return timedelta(hours=self.monitoring.retention_hours)

    @property
    def storage_dir(self) -> Path:
        return self.paths.storage_dir

    def validate(self) -> None:
        """Check what is needed to talk to the chat platform."""
        if self.chat.platform not in PLATFORMS:
            raise ConfigError(
                f"unknown chat platform {self.chat.platform!r}, expected one of {', '.join(PLATFORMS)}"
            )
        if not self.chat_token:
            env_name = "SLACK_TOKEN" if self.chat.platform == "slack" else "TELEGRAM_BOT_TOKEN"
            raise ConfigError(f"{env_name} is required for platform {self.chat.platform}")
        if not self.chat.channel:
            raise ConfigError("chat channel is required (chat.channel or CHANNEL_ID)")


def load_config(config_path: Path = Path("config.yaml")) -> dict:
    """Load configuration from YAML file."""
    if not config_path.exists():
        return {}

    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _apply_section(section: object, values: dict, name: str) -> None:
    for key, value in values.items():
        if not hasattr(section, key):
            raise ConfigError(f"unknown setting {name}.{key}")
        setattr(section, key, value)


def get_settings(config_path: Path = Path("config.yaml")) -> Settings:
    """Get application settings from YAML config and environment."""
    try:
        config = load_config(config_path)
    except yaml.YAMLError as e:
        raise ConfigError(f"could not parse {config_path}: {e}") from e

    settings = Settings(
        slack_token=os.getenv("SLACK_TOKEN", ""),
        telegram_bot_token=os.getenv("TELEGRAM_BOT_TOKEN", ""),
        webhook_url=os.getenv("WEBHOOK_URL") or None,
    )

    if "hacker_news" in config:
        _apply_section(settings.hacker_news, config["hacker_news"], "hacker_news")

    if "chat" in config:
        _apply_section(settings.chat, config["chat"], "chat")

    if "monitoring" in config:
        _apply_section(settings.monitoring, config["monitoring"], "monitoring")

    if "paths" in config:
        paths = dict(config["paths"])
        if "storage_dir" in paths:
            paths["storage_dir"] = Path(paths["storage_dir"])
        _apply_section(settings.paths, paths, "paths")

    # The environment overrides the channel from the file.
    channel_id = os.getenv("CHANNEL_ID")
    if channel_id:
        settings.chat.channel = channel_id

    return settings
