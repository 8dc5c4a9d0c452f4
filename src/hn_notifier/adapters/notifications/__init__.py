"""Chat platform notification adapters."""

from hn_notifier.adapters.notifications.slack_notifier import SlackNotifier
from hn_notifier.adapters.notifications.telegram_notifier import TelegramNotifier
from hn_notifier.adapters.notifications.webhook_alerter import WebhookAlerter

__all__ = ["SlackNotifier", "TelegramNotifier", "WebhookAlerter"]
