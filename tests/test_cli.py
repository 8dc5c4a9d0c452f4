"""Tests for CLI wiring."""

from datetime import datetime, timezone

from typer.testing import CliRunner

from hn_notifier.adapters.formatting import OpenGraphPreviewer
from hn_notifier.adapters.notifications import SlackNotifier, TelegramNotifier
from hn_notifier.cli import app, build_service
from hn_notifier.config import Settings
from hn_notifier.core import ConfigError, StoryRecord, YamlStoryStore

runner = CliRunner()


def test_build_service_telegram(tmp_path) -> None:
    """Test Telegram wiring skips the link previewer."""
    settings = Settings(telegram_bot_token="123:abc")
    settings.paths.storage_dir = tmp_path

    service = build_service(settings)

    assert isinstance(service.notifier, TelegramNotifier)
    assert service.previewer is None
    assert service.channel == "@yahnc"
    assert service.alerter is None


def test_build_service_slack(tmp_path) -> None:
    """Test Slack wiring unfurls links and alerts through the webhook."""
    settings = Settings(slack_token="xoxb-1", webhook_url="https://hooks.example/x")
    settings.chat.platform = "slack"
    settings.chat.channel = "C123"
    settings.paths.storage_dir = tmp_path

    service = build_service(settings)

    assert isinstance(service.notifier, SlackNotifier)
    assert isinstance(service.previewer, OpenGraphPreviewer)
    assert service.alerter is not None


def test_poll_without_token_exits(tmp_path, monkeypatch) -> None:
    """Test missing credentials stop the command before any call."""
    monkeypatch.delenv("TELEGRAM_BOT_TOKEN", raising=False)

    result = runner.invoke(app, ["poll", "--config", str(tmp_path / "none.yaml")])

    assert result.exit_code == 2


def test_stats(tmp_path) -> None:
    """Test store statistics output."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text(f"paths:\n  storage_dir: {tmp_path / 'data'}\n", encoding="utf-8")
    store = YamlStoryStore(tmp_path / "data")
    store.put(StoryRecord(id=8863, message_id="991"), now=datetime(2024, 5, 2, tzinfo=timezone.utc))

    result = runner.invoke(app, ["stats", "--config", str(config_path)])

    assert result.exit_code == 0
    assert "Stored stories: 1" in result.output
    assert "8863" in result.output


def test_stats_bad_config_exits(tmp_path) -> None:
    """Test an invalid config file is reported instead of raising."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text("paths:\n  storage: somewhere\n", encoding="utf-8")

    result = runner.invoke(app, ["stats", "--config", str(config_path)])

    assert result.exit_code == 2
    assert not isinstance(result.exception, ConfigError)
