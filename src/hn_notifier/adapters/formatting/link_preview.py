"""OpenGraph link previews for story URLs."""

import logging
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

import httpx
from bs4 import BeautifulSoup

from hn_notifier.core import LinkPreview, LinkPreviewer

logger = logging.getLogger(__name__)

# Only the head of a page is needed for og:* tags; the rest is never downloaded.
MAX_HTML_BYTES = 512 * 1024


def favicon_url(url: str) -> str:
    """Site icon location derived from a page URL."""
    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc:
        return ""
    return urlunsplit((parts.scheme, parts.netloc, "/favicon.ico", "", ""))


def parse_open_graph(html_text: str) -> dict[str, str]:
    """Collect ``og:*`` meta properties, first occurrence wins."""
    soup = BeautifulSoup(html_text, "html.parser")
    properties: dict[str, str] = {}
    for meta in soup.find_all("meta"):
        key = meta.get("property") or meta.get("name") or ""
        if not key.startswith("og:"):
            continue
        content = meta.get("content")
        if content and key not in properties:
            properties[key] = content.strip()
    return properties


class OpenGraphPreviewer(LinkPreviewer):
    """Unfurl a link by reading the OpenGraph tags of the target page."""

    def __init__(self, timeout: float = 10.0, client: Optional[httpx.AsyncClient] = None) -> None:
        self.timeout = timeout
        self._client = client

    async def preview(self, url: str) -> LinkPreview:
        """Build a preview; failures only cost the decoration."""
        preview = LinkPreview()
        if not url:
            return preview

        try:
            preview.site_icon = favicon_url(url)
            html_text = await self._fetch(url)
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            logger.warning("could not fetch %r for preview: %s", url, e)
            return preview

        og = parse_open_graph(html_text)
        preview.site_name = og.get("og:site_name", "")
        preview.image_url = og.get("og:image", "")
        preview.description = og.get("og:description", "")
        return preview

    async def _fetch(self, url: str) -> str:
        if self._client is not None:
            return await self._read_head(self._client, url)
        async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
            return await self._read_head(client, url)

    async def _read_head(self, client: httpx.AsyncClient, url: str) -> str:
        """Read at most MAX_HTML_BYTES of an HTML page; other content reads as empty."""
        async with client.stream("GET", url, timeout=self.timeout, follow_redirects=True) as response:
            response.raise_for_status()
            content_type = response.headers.get("content-type", "")
            if content_type and "html" not in content_type.lower():
                logger.debug("not unfurling %s: %s", url, content_type)
                return ""

            chunks: list[bytes] = []
            size = 0
            async for chunk in response.aiter_bytes():
                chunk = chunk[:MAX_HTML_BYTES - size]
                chunks.append(chunk)
                size += len(chunk)
                if size >= MAX_HTML_BYTES:
                    break
            charset = response.charset_encoding or "utf-8"

        data = b"".join(chunks)
        try:
            return data.decode(charset, errors="replace")
        except LookupError:
            return data.decode("utf-8", errors="replace")
