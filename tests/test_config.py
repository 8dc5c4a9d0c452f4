"""Tests for configuration loading."""

from datetime import timedelta
from pathlib import Path

import pytest

from hn_notifier.config import Settings, get_settings
from hn_notifier.core import ConfigError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch) -> None:
    for name in ("SLACK_TOKEN", "TELEGRAM_BOT_TOKEN", "CHANNEL_ID", "WEBHOOK_URL"):
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_file(tmp_path) -> None:
    """Test defaults when config.yaml is missing."""
    settings = get_settings(tmp_path / "missing.yaml")

    assert settings.hacker_news.batch_size == 30
    assert settings.platform == "telegram"
    assert settings.retention == timedelta(hours=24)
    assert settings.webhook_url is None


def test_yaml_and_environment(tmp_path, monkeypatch) -> None:
    """Test YAML sections and environment secrets are combined."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "chat:\n"
        "  platform: slack\n"
        "  channel: hackernews\n"
        "monitoring:\n"
        "  retention_hours: 12\n"
        "paths:\n"
        "  storage_dir: /var/lib/hn\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("SLACK_TOKEN", "xoxb-1")
    monkeypatch.setenv("CHANNEL_ID", "C123")
    monkeypatch.setenv("WEBHOOK_URL", "https://hooks.example/x")

    settings = get_settings(config_path)

    assert settings.platform == "slack"
    assert settings.chat_token == "xoxb-1"
    assert settings.channel == "C123"
    assert settings.retention == timedelta(hours=12)
    assert settings.storage_dir == Path("/var/lib/hn")
    assert settings.webhook_url == "https://hooks.example/x"
    settings.validate()


def test_unknown_setting(tmp_path) -> None:
    """Test typos in the file are reported."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text("chat:\n  plaform: slack\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="chat.plaform"):
        get_settings(config_path)


def test_validate_requires_token() -> None:
    """Test a missing platform token is a config error."""
    with pytest.raises(ConfigError, match="TELEGRAM_BOT_TOKEN"):
        Settings().validate()


def test_validate_unknown_platform() -> None:
    """Test only supported platforms are accepted."""
    settings = Settings(telegram_bot_token="t")
    settings.chat.platform = "irc"

    with pytest.raises(ConfigError, match="unknown chat platform"):
        settings.validate()
