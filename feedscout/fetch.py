"""HTTP side of feedscout: page fetching and feed verification.

Nothing here is needed to discover feeds in an already-parsed document. These
helpers back ``discover_feeds(url)`` and the optional verification pass, and
every request is bounded by ``DiscoveryOptions.timeout``.
"""
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Iterable, List, Optional, Sequence
from urllib.parse import urlsplit

import feedparser
import requests

from feedscout.extract import FEED_MIME_TYPES, mime_type
from feedscout.models import DiscoveryOptions, Feed, is_generic_title
from feedscout.utils import normalize_url

logger = logging.getLogger(__name__)

HTML_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
FEED_ACCEPT = "application/rss+xml,application/atom+xml,application/feed+json,application/xml,text/xml;q=0.9,*/*;q=0.5"

MAX_VERIFY_WORKERS = 6

# Shared session for connection pooling (TCP keep-alive, connection reuse)
_session: Optional[requests.Session] = None
_session_lock = threading.Lock()


def _get_session() -> requests.Session:
    """Return a shared requests.Session for connection pooling."""
    global _session
    if _session is None:
        with _session_lock:
            if _session is None:
                s = requests.Session()
                adapter = requests.adapters.HTTPAdapter(
                    pool_connections=MAX_VERIFY_WORKERS,
                    pool_maxsize=MAX_VERIFY_WORKERS,
                    max_retries=0,
                )
                s.mount("https://", adapter)
                s.mount("http://", adapter)
                _session = s
    return _session


def _get(url: str, options: DiscoveryOptions, accept: str) -> requests.Response:
    resp = _get_session().get(
        url,
        headers={**options.headers, "Accept": accept},
        timeout=options.timeout,
        allow_redirects=options.follow_redirects,
    )
    resp.raise_for_status()
    return resp


def fetch_page(url: str, options: DiscoveryOptions) -> Optional[requests.Response]:
    """GET a page for discovery. Returns None (and logs) on any request failure."""
    try:
        return _get(url, options, HTML_ACCEPT)
    except requests.RequestException as e:
        logger.warning(f"[Fetch] Failed to fetch {url}: {e}")
        return None


def _type_for(version: str, content_type: str) -> str:
    declared = mime_type(content_type)
    if declared in FEED_MIME_TYPES:
        return declared
    if version.startswith("atom"):
        return "application/atom+xml"
    if version.startswith("json"):
        return "application/feed+json"
    if version in ("rss090", "rss10"):
        return "application/rdf+xml"
    return "application/rss+xml"


def sniff_feed(content: bytes, url: str, content_type: str = "") -> Optional[Feed]:
    """Parse *content* with feedparser; a Feed if it is RSS/Atom/RDF/JSON Feed, else None."""
    parsed = feedparser.parse(content)
    version = parsed.get("version") or ""
    if not version:
        return None
    title = " ".join((parsed.feed.get("title") or "").split()) or url
    return Feed(url=url, title=title, type=_type_for(version, content_type))


def probe_feed(url: str, options: DiscoveryOptions) -> Optional[Feed]:
    """Fetch *url* and return it as a Feed if the body is a feed document."""
    try:
        resp = _get(url, options, FEED_ACCEPT)
    except requests.RequestException as e:
        logger.debug(f"[Fetch] Probe failed for {url}: {e}")
        return None
    return sniff_feed(resp.content, url, resp.headers.get("content-type", ""))


def _merge(candidate: Feed, probed: Feed) -> Feed:
    """Keep the candidate's URL; take the feed's own title only over a generated one."""
    title = probed.title if is_generic_title(candidate.title) else candidate.title
    return Feed(url=candidate.url, title=title, type=candidate.type or probed.type)


def _verify_one(feed: Feed, options: DiscoveryOptions) -> Optional[Feed]:
    try:
        probed = probe_feed(feed.url, options)
    except Exception as e:
        logger.warning(f"[Fetch] Verification of {feed.url} failed: {e}")
        return None
    return _merge(feed, probed) if probed is not None else None


def verify_feeds(feeds: List[Feed], options: DiscoveryOptions,
                 keep_unverified: bool = False) -> List[Feed]:
    """Probe candidates in parallel, preserving order.

    Feeds that do not verify are dropped, or kept as they were when
    *keep_unverified* is set.
    """
    if not feeds:
        return []
    workers = min(MAX_VERIFY_WORKERS, len(feeds))
    with ThreadPoolExecutor(max_workers=workers) as pool:
        results = list(pool.map(lambda f: _verify_one(f, options), feeds))

    verified: List[Feed] = []
    for candidate, result in zip(feeds, results):
        if result is not None:
            verified.append(result)
        elif keep_unverified:
            verified.append(candidate)
        else:
            logger.info(f"[Fetch] Dropping unverified candidate {candidate.url}")
    return verified


# Where sites commonly publish a feed without declaring it, tried in order
COMMON_FEED_PATHS = (
    "/feed",
    "/feed/",
    "/rss",
    "/rss/",
    "/rss.xml",
    "/feed.xml",
    "/atom.xml",
    "/index.xml",
    "/index.rss",
    "/index.atom",
    "/index.json",
    "/feed.json",
    "/rss/news.xml",
    "/articles/feed",
    "/rss/index.html",
    "/blog/feed/",
    "/blog/rss/",
    "/blog/rss.xml",
    "/feeds/posts/default",
    "/feed/posts/default",
    "/feeds/default",
    "/feed/default",
    "/data/rss",
    "/?feed=rss",
    "/?feed=atom",
    "/?feed=rss2",
    "/?feed=rdf",
    "/?format=feed",
    "/rss/featured",
)

# Per-path timeout cap (seconds) while walking COMMON_FEED_PATHS
COMMON_PATH_TIMEOUT = 5.0


def probe_common_paths(page_url: str, options: DiscoveryOptions,
                       paths: Sequence[str] = COMMON_FEED_PATHS,
                       skip: Iterable[str] = ()) -> Optional[Feed]:
    """Try conventional feed locations on the page's origin, one at a time.

    Returns the first that parses as a feed, or None. URLs in *skip* (compared
    normalized) have already been probed and are not fetched again.
    """
    parts = urlsplit(page_url)
    origin = f"{parts.scheme}://{parts.netloc}"
    seen = {normalize_url(u) for u in skip}
    capped = replace(options, timeout=min(options.timeout, COMMON_PATH_TIMEOUT))

    for path in paths:
        url = origin + path
        key = normalize_url(url)
        if key in seen:
            continue
        seen.add(key)
        feed = probe_feed(url, capped)
        if feed is not None:
            logger.info(f"[Fetch] Found undeclared feed at {url}")
            return feed
    return None
