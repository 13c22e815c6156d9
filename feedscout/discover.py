"""Feed autodiscovery — find the RSS/Atom feeds a web page publishes.

Strategy cascade, highest precedence first:

1. Protocol gate: only http(s) pages are considered.
2. Known services: platforms whose feed URLs follow from the page URL. A match
   is final, even with no feeds.
3. Declared ``<link rel="alternate">`` feeds, then feed-looking anchors,
   merged by URL. Conventional paths are guessed only when the page declares
   nothing and links to nothing feed-like.
4. With verification on, candidates that are not feeds are dropped. If none
   survive, the well-known feed locations on the site are probed in turn.
"""
import logging
from typing import List, Optional, Sequence

from feedscout.dedup import dedupe_feeds
from feedscout.document import Document, SoupDocument, base_url_of, location_of
from feedscout.extract import extract_feed_links, extract_heuristic_feeds
from feedscout.fetch import fetch_page, probe_common_paths, sniff_feed, verify_feeds
from feedscout.models import DiscoveryOptions, Feed
from feedscout.services import ServiceDescriptor, check_known_services
from feedscout.utils import is_supported_protocol

logger = logging.getLogger(__name__)


def _discover_in_document(doc: Document, services: Optional[Sequence[ServiceDescriptor]],
                          base_url: Optional[str]) -> List[Feed]:
    page_url = location_of(doc)
    if not is_supported_protocol(page_url):
        logger.debug(f"[Discover] Unsupported location {page_url!r}, skipping")
        return []

    known = check_known_services(page_url, services=services)
    if known is not None and known.match:
        return list(known.feeds)

    base = base_url or base_url_of(doc)
    link_feeds = extract_feed_links(doc, base_url=base)
    heuristic_feeds = extract_heuristic_feeds(doc, base_url=base, include_guesses=not link_feeds)
    return dedupe_feeds(link_feeds + heuristic_feeds)


def discover_feeds_from_document(doc: Document,
                                 services: Optional[Sequence[ServiceDescriptor]] = None,
                                 base_url: Optional[str] = None) -> List[Feed]:
    """Discover feeds in an already-loaded document. Never raises.

    Args:
        doc: Anything satisfying the Document protocol (see feedscout.document).
        services: Known-service registry to consult; defaults to SERVICES.
        base_url: Overrides the document's own base for resolving hrefs.
    """
    try:
        return _discover_in_document(doc, services, base_url)
    except Exception as e:
        logger.warning(f"[Discover] Discovery failed for {location_of(doc)!r}: {e}")
        return []


def discover_feeds(url: str, options: Optional[DiscoveryOptions] = None,
                   services: Optional[Sequence[ServiceDescriptor]] = None) -> List[Feed]:
    """Fetch *url* and discover its feeds.

    Returns a (possibly empty) list; unsupported URLs and fetch failures are
    logged, not raised. With ``options.verify`` every candidate is fetched:
    page candidates that are not feeds are dropped, while known-service feeds
    are kept even when the check fails. If no page candidate survives, the
    first of ``COMMON_FEED_PATHS`` that answers with a feed is returned instead.
    """
    options = options or DiscoveryOptions()

    if not is_supported_protocol(url):
        logger.warning(f"[Discover] Unsupported protocol: {url}")
        return []

    known = check_known_services(url, services=services)
    if known is not None and known.match:
        feeds = list(known.feeds)
        logger.info(f"[Discover] {url} is a known service ({len(feeds)} feed(s))")
        return verify_feeds(feeds, options, keep_unverified=True) if options.verify else feeds

    resp = fetch_page(url, options)
    if resp is None:
        return []

    final_url = resp.url or url
    content_type = resp.headers.get("content-type", "")
    if "html" not in content_type.lower():
        # The URL may already be a feed
        self_feed = sniff_feed(resp.content, final_url, content_type)
        if self_feed is not None:
            logger.info(f"[Discover] {final_url} is itself a feed")
            return [self_feed]

    doc = SoupDocument(resp.text, url=final_url)
    feeds = discover_feeds_from_document(doc, services=services, base_url=options.base_url)
    logger.info(f"[Discover] Found {len(feeds)} candidate(s) on {final_url}")
    if options.verify:
        candidates, feeds = feeds, verify_feeds(feeds, options)
        if not feeds:
            # Nothing on the page checked out; look where feeds usually live
            fallback = probe_common_paths(final_url, options, skip=[f.url for f in candidates])
            feeds = [fallback] if fallback is not None else []
    return feeds
