"""Shared test fixtures and helpers."""
from unittest.mock import MagicMock

import pytest

from feedscout.document import SoupDocument


def make_doc(head: str = "", body: str = "", url: str = "https://example.com/") -> SoupDocument:
    """A parsed page at *url* with the given <head> and <body> markup."""
    return SoupDocument(f"<html><head>{head}</head><body>{body}</body></html>", url=url)


def make_response(text: str = "", url: str = "https://example.com/",
                  content_type: str = "text/html; charset=utf-8") -> MagicMock:
    """A stand-in for requests.Response as returned by the session."""
    resp = MagicMock()
    resp.text = text
    resp.content = text.encode("utf-8")
    resp.url = url
    resp.headers = {"content-type": content_type}
    resp.raise_for_status = MagicMock()
    return resp


RSS_BODY = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Example Blog</title>
    <link>https://example.com/</link>
    <description>Posts</description>
    <item><title>Hello</title><link>https://example.com/hello</link></item>
  </channel>
</rss>
"""

ATOM_BODY = """<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Example Atom</title>
  <id>urn:uuid:60a76c80-d399-11d9-b93C-0003939e0af6</id>
  <updated>2024-01-01T00:00:00Z</updated>
  <entry>
    <title>Hello</title>
    <id>urn:uuid:1225c695-cfb8-4ebb-aaaa-80da344efa6a</id>
    <updated>2024-01-01T00:00:00Z</updated>
  </entry>
</feed>
"""


@pytest.fixture
def no_config(monkeypatch, tmp_path):
    """Isolate from user config files and FEEDSCOUT_* variables."""
    import os
    monkeypatch.setattr("feedscout.config.CONFIG_PATHS", ())
    for key in list(os.environ):
        if key.startswith("FEEDSCOUT_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    return tmp_path
