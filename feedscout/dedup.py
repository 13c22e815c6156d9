"""Deduplication of feed candidates for feedscout."""
from typing import Dict, List, Tuple

from feedscout.models import Feed, is_generic_title
from feedscout.utils import normalize_url


def _preference(feed: Feed) -> Tuple[bool, bool, int]:
    """Sort key for picking a group representative; higher wins.

    1. a declared MIME type beats none
    2. a real title beats a generated one, and a longer real title a shorter one
    """
    generic = is_generic_title(feed.title)
    return (feed.type is not None, not generic, 0 if generic else len(feed.title.strip()))


def dedupe_feeds(feeds: List[Feed]) -> List[Feed]:
    """Collapse feeds whose URLs normalize equal, keeping first-seen group order.

    On a tie in preference the first-seen feed is kept, so explicit metadata
    from ``<link>`` tags (which come first) survives over heuristic guesses
    pointing at the same URL.
    """
    index: Dict[str, int] = {}  # normalized url -> position in unique
    unique: List[Feed] = []

    for feed in feeds:
        key = normalize_url(feed.url)
        idx = index.get(key)
        if idx is None:
            index[key] = len(unique)
            unique.append(feed)
        elif _preference(feed) > _preference(unique[idx]):
            unique[idx] = feed

    return unique
