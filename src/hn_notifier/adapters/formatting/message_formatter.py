"""Render stories into chat message payloads.

Everything here is pure: the same story and preview always produce the
same payload, byte for byte once encoded with ``encode_payload``.
"""

import html
import json
from typing import Any, Optional

from hn_notifier.core import LinkPreview, Story

# Marker for a story with a high score or a large discussion.
HOT = "🔥"
HOT_THRESHOLD = 100

ATTACHMENT_COLOR = "#ff6633"


def hot_suffix(value: int) -> str:
    return f" {HOT}" if value > HOT_THRESHOLD else ""


def count_text(value: int) -> str:
    return f"{value}{hot_suffix(value)}"


def score_text(story: Story) -> str:
    return f"Score: {count_text(story.score)}"


def comments_text(story: Story) -> str:
    return f"Comments: {count_text(story.descendants)}"


def build_slack_attachments(
    story: Story, preview: Optional[LinkPreview] = None
) -> list[dict[str, Any]]:
    """Build Slack message attachments for a story."""
    preview = preview or LinkPreview()
    return [
        {
            "fallback": story.title,
            "color": ATTACHMENT_COLOR,
            "title": story.title,
            "title_link": story.url,
            "author_name": preview.site_name,
            "author_icon": preview.site_icon,
            # Slack renders each field title above its value.
            "fields": [
                {
                    "title": "Score",
                    "value": count_text(story.score),
                    "short": True,
                },
                {
                    "title": "Comments",
                    "value": f"<{story.news_url}|{count_text(story.descendants)}>",
                    "short": True,
                },
            ],
            "thumb_url": preview.image_url,
            "text": preview.description,
        }
    ]


def build_reply_markup(story: Story) -> dict[str, Any]:
    """Build the Telegram inline keyboard for a story."""
    return {
        "inline_keyboard": [
            [
                {"text": score_text(story), "url": story.url},
                {"text": comments_text(story), "url": story.news_url},
            ]
        ]
    }


def build_message_text(story: Story) -> str:
    """Telegram HTML message body: bold title followed by the link."""
    return f'<b>{html.escape(story.title)}</b>\n{html.escape(story.url, quote=False)}'


def encode_payload(obj: Any) -> str:
    """Deterministic JSON encoding for form fields and comparisons."""
    return json.dumps(obj, ensure_ascii=False, sort_keys=True, separators=(",", ":"))
