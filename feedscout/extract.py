"""Feed extraction from a page.

Two strategies, both pure functions of the document:

* ``extract_feed_links`` reads what the page declares in
  ``<link rel="alternate" type="application/rss+xml">`` style tags.
* ``extract_heuristic_feeds`` guesses: anchors that look like feed links, or,
  failing those, a short list of conventional paths nobody has confirmed exist.

Neither deduplicates; see ``feedscout.dedup``.
"""
import logging
import re
from typing import Dict, List, Optional, Sequence, Tuple
from urllib.parse import urlsplit

from feedscout.document import Document, Element, attr, base_url_of, text
from feedscout.models import Feed
from feedscout.utils import resolve_feed_url, should_skip_url

logger = logging.getLogger(__name__)

RSS_TYPE = "application/rss+xml"
ATOM_TYPE = "application/atom+xml"

# MIME types that indicate a feed (lower-case, parameters stripped)
FEED_MIME_TYPES = frozenset({
    "application/rss+xml",
    "application/atom+xml",
    "application/rdf+xml",
    "application/rss",
    "application/atom",
    "application/rdf",
    "application/x-rss+xml",
    "application/x-atom+xml",
    "text/rss+xml",
    "text/atom+xml",
    "text/rdf+xml",
    "text/rss",
    "text/atom",
    "text/rdf",
    "application/feed+json",
})

# Conventional feed locations, tried relative to the site root without
# checking that they exist. (path, label)
GUESS_PATHS: Tuple[Tuple[str, str], ...] = (
    ("/feed", "RSS Feed"),
    ("/rss", "RSS Feed"),
    ("/feed.xml", "RSS Feed"),
    ("/atom.xml", "Atom Feed"),
)

_FEED_SEGMENT_RE = re.compile(r"^(?:feeds?|rss|atom)(?:\.(?:xml|rss|atom|rdf|json))?$", re.IGNORECASE)
_FEED_EXTENSION_RE = re.compile(r"\.(?:rss|atom|rdf)$", re.IGNORECASE)
_FEED_QUERY_RE = re.compile(
    r"(?:^|&)(?:feed=(?:rss2?|atom|rdf)|format=(?:feed|rss|atom))(?:&|$)", re.IGNORECASE
)
_FEED_WORD_RE = re.compile(r"\b(?:rss|atom|feeds?|syndication)\b", re.IGNORECASE)


def mime_type(raw: str) -> str:
    """'Application/RSS+XML; charset=utf-8' -> 'application/rss+xml'."""
    return raw.split(";", 1)[0].strip().lower()


def _label_for(mime: str) -> str:
    if "json" in mime:
        return "JSON Feed"
    if "atom" in mime:
        return "Atom Feed"
    if "rdf" in mime:
        return "RDF Feed"
    return "RSS Feed"


def _declared_feed(link: Element, base_url: str) -> Optional[Tuple[str, str, str]]:
    """(url, declared title, mime) for a feed <link>, or None if it is not one."""
    rels = attr(link, "rel").lower().split()
    if "alternate" not in rels:
        return None
    mime = mime_type(attr(link, "type"))
    if mime not in FEED_MIME_TYPES:
        return None
    url = resolve_feed_url(attr(link, "href"), base_url)
    if url is None or should_skip_url(url):
        return None
    return url, attr(link, "title").strip(), mime


def extract_feed_links(doc: Document, base_url: Optional[str] = None) -> List[Feed]:
    """Feeds declared with ``<link rel="alternate">`` tags, in document order.

    Untitled links get a generated label per MIME family ("RSS Feed",
    "Atom Feed (2)", ...) so that no two untitled feeds in one page share a title.
    """
    base = base_url or base_url_of(doc)
    feeds: List[Feed] = []
    untitled: Dict[str, int] = {}

    for link in doc.select("link"):
        try:
            declared = _declared_feed(link, base)
        except Exception as e:
            logger.debug(f"[Extract] Skipping malformed <link>: {e}")
            continue
        if declared is None:
            continue
        url, title, mime = declared
        if not title:
            label = _label_for(mime)
            untitled[label] = untitled.get(label, 0) + 1
            title = label if untitled[label] == 1 else f"{label} ({untitled[label]})"
        feeds.append(Feed(url=url, title=title, type=mime))

    logger.debug(f"[Extract] {len(feeds)} declared feed link(s) on {base}")
    return feeds


def looks_like_feed_href(href: str) -> bool:
    """True when the href's scheme, path or query says "feed"."""
    if href.strip().lower().startswith("feed:"):
        return True
    parts = urlsplit(href.strip())
    for segment in (s for s in parts.path.split("/") if s):
        if _FEED_SEGMENT_RE.match(segment) or _FEED_EXTENSION_RE.search(segment):
            return True
        if segment.lower().endswith(".xml") and "sitemap" not in segment.lower():
            return True
    return bool(_FEED_QUERY_RE.search(parts.query))


def _anchor_type(href: str, url: str) -> Optional[str]:
    if href.strip().lower().startswith("feed:"):
        return RSS_TYPE
    path = urlsplit(url).path.lower()
    if path.endswith(".atom"):
        return ATOM_TYPE
    if path.endswith(".rss"):
        return RSS_TYPE
    return None


def _anchor_feed(anchor: Element, base_url: str) -> Optional[Feed]:
    href = attr(anchor, "href")
    if not href.strip() or href.strip().startswith("#"):
        return None
    label = text(anchor)
    hint = " ".join((label, attr(anchor, "title"), attr(anchor, "class")))
    if not looks_like_feed_href(href) and not _FEED_WORD_RE.search(hint):
        return None
    url = resolve_feed_url(href, base_url)
    if url is None or should_skip_url(url):
        return None
    title = attr(anchor, "title").strip() or label or "RSS Feed"
    return Feed(url=url, title=title, type=_anchor_type(href, url))


def extract_heuristic_feeds(doc: Document, base_url: Optional[str] = None,
                            guess_paths: Sequence[Tuple[str, str]] = GUESS_PATHS,
                            include_guesses: bool = True) -> List[Feed]:
    """Lower-confidence candidates: feed-looking anchors, else conventional paths.

    Anchors come in document order. Conventional paths are a last resort: they
    are added only when no anchor qualifies and *include_guesses* is set (the
    orchestrator clears it once the page declares a feed). They carry generic
    titles and no type, which marks them as unverified guesses.
    """
    base = base_url or base_url_of(doc)
    feeds: List[Feed] = []

    for anchor in doc.select("a[href]"):
        try:
            feed = _anchor_feed(anchor, base)
        except Exception as e:
            logger.debug(f"[Extract] Skipping malformed <a>: {e}")
            continue
        if feed is not None:
            feeds.append(feed)

    if feeds or not include_guesses:
        logger.debug(f"[Extract] {len(feeds)} feed-like anchor(s) on {base}")
        return feeds

    for path, label in guess_paths:
        url = resolve_feed_url(path, base)
        if url is not None:
            feeds.append(Feed(url=url, title=label))

    logger.debug(f"[Extract] No feed-like anchors, {len(feeds)} guess(es) on {base}")
    return feeds
