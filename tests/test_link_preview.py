"""Tests for OpenGraph link previews."""

import httpx
import pytest

from hn_notifier.adapters.formatting import OpenGraphPreviewer
from hn_notifier.adapters.formatting.link_preview import MAX_HTML_BYTES, favicon_url, parse_open_graph

PAGE = """
<html><head>
  <title>Ignored</title>
  <meta property="og:site_name" content="Example Blog">
  <meta property="og:image" content="https://example.com/cover.png">
  <meta property="og:image" content="https://example.com/second.png">
  <meta property="og:description" content="  A post about things.  ">
  <meta name="description" content="plain description">
</head><body></body></html>
"""


def test_parse_open_graph() -> None:
    """Test og tags are collected, first one wins."""
    og = parse_open_graph(PAGE)

    assert og["og:site_name"] == "Example Blog"
    assert og["og:image"] == "https://example.com/cover.png"
    assert og["og:description"] == "A post about things."
    assert "description" not in og


def test_favicon_url() -> None:
    """Test the icon is looked up at the site root."""
    assert favicon_url("https://example.com/a/b?c=d") == "https://example.com/favicon.ico"
    assert favicon_url("not a url") == ""


@pytest.mark.asyncio
async def test_preview() -> None:
    """Test a fetched page becomes a preview."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(200, text=PAGE)))
    previewer = OpenGraphPreviewer(client=client)

    preview = await previewer.preview("https://example.com/post")

    assert preview.site_name == "Example Blog"
    assert preview.site_icon == "https://example.com/favicon.ico"
    assert preview.image_url == "https://example.com/cover.png"
    assert preview.description == "A post about things."


@pytest.mark.asyncio
async def test_preview_failure_is_empty() -> None:
    """Test fetch failures only lose the decoration."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(404)))
    previewer = OpenGraphPreviewer(client=client)

    preview = await previewer.preview("https://example.com/missing")

    assert preview.site_name == ""
    assert preview.image_url == ""
    assert preview.site_icon == "https://example.com/favicon.ico"


@pytest.mark.asyncio
@pytest.mark.parametrize("url", ["http://[::1/x", "http://example.com/\x00x"])
async def test_preview_malformed_url_is_empty(url) -> None:
    """Test URLs that cannot be parsed yield an empty preview instead of raising."""
    previewer = OpenGraphPreviewer()

    preview = await previewer.preview(url)

    assert preview.site_name == ""
    assert preview.image_url == ""
    assert preview.description == ""


@pytest.mark.asyncio
async def test_preview_reads_only_page_head() -> None:
    """Test a huge page is read up to the cap and no further."""
    chunk = b"<p>" + b"x" * (64 * 1024 - 3)
    consumed = []

    async def body():
        yield PAGE.encode()
        for _ in range(80):
            consumed.append(len(chunk))
            yield chunk

    def handler(request):
        return httpx.Response(200, headers={"content-type": "text/html; charset=utf-8"}, content=body())

    previewer = OpenGraphPreviewer(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))

    preview = await previewer.preview("https://example.com/huge")

    assert preview.site_name == "Example Blog"
    assert sum(consumed) <= MAX_HTML_BYTES + len(chunk)
    assert sum(consumed) < 80 * len(chunk)


@pytest.mark.asyncio
async def test_preview_skips_non_html() -> None:
    """Test binary links are not parsed."""
    def handler(request):
        return httpx.Response(200, headers={"content-type": "application/pdf"}, content=b"%PDF-1.7 " + PAGE.encode())

    previewer = OpenGraphPreviewer(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))

    preview = await previewer.preview("https://example.com/paper.pdf")

    assert preview.site_name == ""
    assert preview.site_icon == "https://example.com/favicon.ico"
