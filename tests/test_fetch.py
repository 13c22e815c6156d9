"""Tests for page fetching, feed sniffing and verification (network mocked)."""
from unittest.mock import MagicMock, patch

import requests

from conftest import ATOM_BODY, RSS_BODY, make_response
from feedscout.fetch import (
    COMMON_FEED_PATHS,
    COMMON_PATH_TIMEOUT,
    fetch_page,
    probe_common_paths,
    probe_feed,
    sniff_feed,
    verify_feeds,
)
from feedscout.models import DiscoveryOptions, Feed

RSS = "application/rss+xml"


def _session_returning(*responses):
    session = MagicMock()
    session.get.side_effect = list(responses)
    return session


class TestFetchPage:
    def test_passes_options(self):
        resp = make_response("<html></html>")
        session = _session_returning(resp)
        options = DiscoveryOptions(timeout=3, follow_redirects=False, user_agent="TestAgent/1.0")
        with patch("feedscout.fetch._get_session", return_value=session):
            assert fetch_page("https://example.com/", options) is resp
        _, kwargs = session.get.call_args
        assert kwargs["timeout"] == 3
        assert kwargs["allow_redirects"] is False
        assert kwargs["headers"]["User-Agent"] == "TestAgent/1.0"

    def test_request_failure_returns_none(self):
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError("boom")
        with patch("feedscout.fetch._get_session", return_value=session):
            assert fetch_page("https://example.com/", DiscoveryOptions()) is None

    def test_http_error_returns_none(self):
        resp = make_response("gone")
        resp.raise_for_status.side_effect = requests.HTTPError("404")
        with patch("feedscout.fetch._get_session", return_value=_session_returning(resp)):
            assert fetch_page("https://example.com/", DiscoveryOptions()) is None


class TestSniffFeed:
    def test_rss(self):
        feed = sniff_feed(RSS_BODY.encode(), "https://example.com/feed")
        assert feed == Feed("https://example.com/feed", "Example Blog", RSS)

    def test_atom(self):
        feed = sniff_feed(ATOM_BODY.encode(), "https://example.com/atom.xml")
        assert feed.title == "Example Atom"
        assert feed.type == "application/atom+xml"

    def test_declared_content_type_wins(self):
        feed = sniff_feed(RSS_BODY.encode(), "https://example.com/feed", "application/x-rss+xml; charset=utf-8")
        assert feed.type == "application/x-rss+xml"

    def test_html_is_not_a_feed(self):
        assert sniff_feed(b"<html><head><title>Hi</title></head><body>Hello</body></html>",
                          "https://example.com/") is None


class TestProbeFeed:
    def test_feed_body(self):
        resp = make_response(RSS_BODY, url="https://example.com/feed", content_type="application/rss+xml")
        with patch("feedscout.fetch._get_session", return_value=_session_returning(resp)):
            assert probe_feed("https://example.com/feed", DiscoveryOptions()).title == "Example Blog"

    def test_failure(self):
        session = MagicMock()
        session.get.side_effect = requests.Timeout("slow")
        with patch("feedscout.fetch._get_session", return_value=session):
            assert probe_feed("https://example.com/feed", DiscoveryOptions()) is None


class TestVerifyFeeds:
    def _probe(self, good):
        def probe(url, options):
            return Feed(url, "Real Title", RSS) if url in good else None
        return probe

    def test_drops_unverified_and_keeps_order(self):
        feeds = [Feed(f"https://example.com/{n}", "RSS Feed") for n in ("a", "b", "c", "d")]
        good = {"https://example.com/a", "https://example.com/c", "https://example.com/d"}
        with patch("feedscout.fetch.probe_feed", side_effect=self._probe(good)):
            result = verify_feeds(feeds, DiscoveryOptions())
        assert [f.url for f in result] == ["https://example.com/a", "https://example.com/c", "https://example.com/d"]

    def test_keep_unverified(self):
        feeds = [Feed("https://example.com/a", "A", RSS)]
        with patch("feedscout.fetch.probe_feed", return_value=None):
            assert verify_feeds(feeds, DiscoveryOptions(), keep_unverified=True) == feeds

    def test_generic_title_replaced_real_title_kept(self):
        feeds = [Feed("https://example.com/a", "RSS Feed"), Feed("https://example.com/b", "My Own Title")]
        good = {f.url for f in feeds}
        with patch("feedscout.fetch.probe_feed", side_effect=self._probe(good)):
            result = verify_feeds(feeds, DiscoveryOptions())
        assert [f.title for f in result] == ["Real Title", "My Own Title"]
        assert all(f.type == RSS for f in result)

    def test_probe_exception_counts_as_unverified(self):
        feeds = [Feed("https://example.com/a", "A")]
        with patch("feedscout.fetch.probe_feed", side_effect=ValueError("bad")):
            assert verify_feeds(feeds, DiscoveryOptions()) == []

    def test_empty(self):
        assert verify_feeds([], DiscoveryOptions()) == []


class TestProbeCommonPaths:
    def test_first_feed_wins_in_order(self):
        def probe(url, options):
            if url.endswith(("/rss.xml", "/atom.xml")):
                return Feed(url, "Site", RSS)
            return None

        with patch("feedscout.fetch.probe_feed", side_effect=probe) as mock_probe:
            feed = probe_common_paths("https://example.com/some/page?x=1", DiscoveryOptions())
        assert feed.url == "https://example.com/rss.xml"
        assert [c.args[0] for c in mock_probe.call_args_list] == [
            "https://example.com/feed",
            "https://example.com/rss",
            "https://example.com/rss.xml",
        ]

    def test_skip_compares_normalized(self):
        with patch("feedscout.fetch.probe_feed", return_value=None) as mock_probe:
            probe_common_paths("https://example.com/", DiscoveryOptions(),
                               paths=["/feed", "/feed/", "/rss"], skip=["https://EXAMPLE.com/feed/"])
        assert [c.args[0] for c in mock_probe.call_args_list] == ["https://example.com/rss"]

    def test_timeout_capped(self):
        with patch("feedscout.fetch.probe_feed", return_value=None) as mock_probe:
            probe_common_paths("https://example.com/", DiscoveryOptions(timeout=30), paths=["/feed"])
        assert mock_probe.call_args.args[1].timeout == COMMON_PATH_TIMEOUT

    def test_nothing_found(self):
        with patch("feedscout.fetch.probe_feed", return_value=None):
            assert probe_common_paths("https://example.com/", DiscoveryOptions()) is None

    def test_well_known_locations_listed(self):
        for path in ("/rss.xml", "/index.xml", "/feed.json", "/feeds/posts/default", "/?feed=rss2"):
            assert path in COMMON_FEED_PATHS
