"""feedscout — find the RSS/Atom feeds a web page publishes."""
__version__ = "1.0.0"

from feedscout.dedup import dedupe_feeds
from feedscout.discover import discover_feeds, discover_feeds_from_document
from feedscout.document import SoupDocument
from feedscout.extract import extract_feed_links, extract_heuristic_feeds
from feedscout.models import DiscoveryOptions, Feed, ServiceResult
from feedscout.services import SERVICES, KnownServiceMatcher, ServiceDescriptor, check_known_services
from feedscout.utils import is_supported_protocol, normalize_url

__all__ = [
    "__version__",
    "DiscoveryOptions", "Feed", "ServiceResult",
    "SoupDocument",
    "SERVICES", "KnownServiceMatcher", "ServiceDescriptor", "check_known_services",
    "extract_feed_links", "extract_heuristic_feeds",
    "dedupe_feeds",
    "discover_feeds", "discover_feeds_from_document",
    "is_supported_protocol", "normalize_url",
]
