"""Tests for webhook alerts."""

from unittest.mock import AsyncMock, Mock, patch

import httpx
import pytest

from hn_notifier.adapters.notifications import WebhookAlerter


@pytest.mark.asyncio
async def test_alert_success() -> None:
    """Test alert payload."""
    alerter = WebhookAlerter("https://hooks.slack.com/services/test")

    with patch("httpx.AsyncClient") as mock_client:
        mock_response = Mock()
        mock_response.raise_for_status = Mock()

        mock_post = AsyncMock(return_value=mock_response)
        mock_client.return_value.__aenter__.return_value.post = mock_post

        await alerter.alert("story 1 diverged")

        call_args = mock_post.call_args
        assert call_args.args[0] == "https://hooks.slack.com/services/test"
        payload = call_args.kwargs["json"]
        assert "story 1 diverged" in payload["text"]
        assert payload["mrkdwn"] is True


@pytest.mark.asyncio
async def test_alert_no_webhook() -> None:
    """Test that alerts are skipped when no webhook is configured."""
    alerter = WebhookAlerter(None)

    with patch("httpx.AsyncClient") as mock_client:
        await alerter.alert("ignored")
        mock_client.assert_not_called()


@pytest.mark.asyncio
async def test_alert_api_error() -> None:
    """Test delivery errors are swallowed."""
    alerter = WebhookAlerter("https://hooks.slack.com/services/test")

    with patch("httpx.AsyncClient") as mock_client:
        mock_response = Mock()
        mock_response.raise_for_status = Mock(side_effect=httpx.HTTPError("API Error"))

        mock_post = AsyncMock(return_value=mock_response)
        mock_client.return_value.__aenter__.return_value.post = mock_post

        await alerter.alert("story 1 diverged")


@pytest.mark.asyncio
async def test_alert_malformed_webhook_url() -> None:
    """Test a webhook URL httpx cannot parse is logged, not raised."""
    alerter = WebhookAlerter("http://hooks.example/\x00bad")

    await alerter.alert("story 1 diverged")
