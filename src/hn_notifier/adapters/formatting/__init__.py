"""Message formatting and link unfurling."""

from hn_notifier.adapters.formatting.link_preview import OpenGraphPreviewer
from hn_notifier.adapters.formatting.message_formatter import (
    build_message_text,
    build_reply_markup,
    build_slack_attachments,
    encode_payload,
    hot_suffix,
)

__all__ = [
    "OpenGraphPreviewer",
    "build_message_text",
    "build_reply_markup",
    "build_slack_attachments",
    "encode_payload",
    "hot_suffix",
]
