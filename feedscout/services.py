"""Known-service registry for feedscout.

Some platforms publish feeds at a conventional URL derived from the page
address (a channel id, a user name, a repository path) instead of declaring
them in the page. For those sites the feed URL is synthesized straight from the
page URL, without touching the network.

Adding a service only requires one ServiceDescriptor in SERVICES below.
Order is priority: the first descriptor whose matcher accepts a URL claims it,
and its answer is final. A claimed page with no usable identifier (a site's
homepage, say) yields ``ServiceResult(match=True, feeds=())`` and discovery
stops there. That suppresses whatever the page itself declares, so only
register hosts whose conventions are known to be authoritative.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, List, Optional, Sequence, Tuple
from urllib.parse import SplitResult, parse_qs, quote, urlsplit

from feedscout.models import Feed, ServiceResult
from feedscout.utils import is_supported_protocol

logger = logging.getLogger(__name__)

RSS = "application/rss+xml"
ATOM = "application/atom+xml"
RDF = "application/rdf+xml"

Matcher = Callable[[SplitResult], bool]
Synthesizer = Callable[[SplitResult], List[Feed]]


@dataclass(frozen=True)
class ServiceDescriptor:
    """A platform with a known feed URL convention."""
    key: str                    # short identifier, e.g. "youtube"
    display_name: str           # human-friendly name
    matches: Matcher            # does this service claim the page URL?
    synthesize: Synthesizer     # page URL -> feed list, no I/O

    def feeds_for(self, parts: SplitResult) -> Tuple[Feed, ...]:
        """Run the synthesizer, keeping only absolute http(s) feeds."""
        try:
            feeds = self.synthesize(parts)
        except Exception as e:
            logger.warning(f"[Services] {self.display_name} synthesizer failed for {parts.geturl()}: {e}")
            return ()
        return tuple(f for f in feeds if is_supported_protocol(f.url))


# ── helpers ───────────────────────────────────────────────────────────

def _host(parts: SplitResult) -> str:
    return (parts.hostname or "").lower()


def _segments(parts: SplitResult) -> List[str]:
    return [s for s in parts.path.split("/") if s]


def _origin(parts: SplitResult) -> str:
    return f"{parts.scheme.lower()}://{parts.netloc.lower()}"


def _hosts(*domains: str) -> FrozenSet[str]:
    """The bare domains plus their www. variants."""
    return frozenset(d for domain in domains for d in (domain, f"www.{domain}"))


def _on_hosts(hosts: FrozenSet[str], subdomains_of: Optional[str] = None) -> Matcher:
    def _matches(parts: SplitResult) -> bool:
        host = _host(parts)
        if host in hosts:
            return True
        return bool(subdomains_of) and host.endswith(f".{subdomains_of}")
    return _matches


_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


# ── YouTube ───────────────────────────────────────────────────────────

YOUTUBE_HOSTS = _hosts("youtube.com") | {"m.youtube.com"}
YOUTUBE_FEED_URL = "https://www.youtube.com/feeds/videos.xml"
_YOUTUBE_SECTIONS = {"channel", "c", "user", "playlist"}


def _youtube_matches(parts: SplitResult) -> bool:
    if _host(parts) not in YOUTUBE_HOSTS:
        return False
    segments = _segments(parts)
    # Watch pages and @handles are left to the page's own <link> tags
    return not segments or segments[0].lower() in _YOUTUBE_SECTIONS


def _youtube_feeds(parts: SplitResult) -> List[Feed]:
    segments = _segments(parts)
    if not segments:
        return []
    section = segments[0].lower()
    if section == "playlist":
        playlist_id = parse_qs(parts.query).get("list", [""])[0].strip()
        if not playlist_id:
            return []
        return [Feed(f"{YOUTUBE_FEED_URL}?playlist_id={quote(playlist_id)}", "YouTube Playlist", ATOM)]
    if len(segments) < 2:
        return []
    ident = segments[1]
    if section == "channel":
        return [Feed(f"{YOUTUBE_FEED_URL}?channel_id={ident}", ident, ATOM)]
    return [Feed(f"{YOUTUBE_FEED_URL}?user={ident}", ident, ATOM)]


# ── Reddit ────────────────────────────────────────────────────────────

REDDIT_HOSTS = _hosts("reddit.com") | {"old.reddit.com", "new.reddit.com"}
_REDDIT_SORTS = {"hot", "new", "top", "rising", "controversial"}


def _reddit_feeds(parts: SplitResult) -> List[Feed]:
    origin = _origin(parts)
    segments = _segments(parts)
    if not segments:
        return [Feed(f"{origin}/.rss", "Reddit Homepage", ATOM)]
    section = segments[0].lower()
    if section == "r" and len(segments) >= 2:
        sub = segments[1]
        if len(segments) >= 4 and segments[2].lower() == "comments":
            path = "/".join(segments[:5])
            return [Feed(f"{origin}/{path}.rss", f"r/{sub} comments", ATOM)]
        if len(segments) >= 3 and segments[2].lower() in _REDDIT_SORTS:
            return [Feed(f"{origin}/r/{sub}/{segments[2].lower()}.rss", f"r/{sub}", ATOM)]
        return [Feed(f"{origin}/r/{sub}.rss", f"r/{sub}", ATOM)]
    if section in ("user", "u") and len(segments) >= 2:
        user = segments[1]
        return [Feed(f"{origin}/user/{user}.rss", f"u/{user}", ATOM)]
    return []


# ── GitHub ────────────────────────────────────────────────────────────

GITHUB_HOSTS = _hosts("github.com")
GITHUB_RESERVED = {
    "about", "apps", "codespaces", "collections", "customer-stories", "enterprise",
    "events", "explore", "features", "issues", "join", "login", "marketplace", "new",
    "notifications", "organizations", "orgs", "pricing", "pulls", "search", "security",
    "settings", "site", "sponsors", "topics", "trending",
}


def _github_feeds(parts: SplitResult) -> List[Feed]:
    segments = _segments(parts)
    if not segments or segments[0].lower() in GITHUB_RESERVED or not _NAME_RE.match(segments[0]):
        return []
    owner = segments[0]
    if len(segments) == 1:
        return [Feed(f"https://github.com/{owner}.atom", f"{owner} activity", ATOM)]
    repo = re.sub(r"\.git$", "", segments[1])
    if not _NAME_RE.match(repo):
        return []
    base = f"https://github.com/{owner}/{repo}"
    return [
        Feed(f"{base}/releases.atom", f"{owner}/{repo} releases", ATOM),
        Feed(f"{base}/commits.atom", f"{owner}/{repo} commits", ATOM),
        Feed(f"{base}/tags.atom", f"{owner}/{repo} tags", ATOM),
    ]


# ── GitLab ────────────────────────────────────────────────────────────

GITLAB_HOSTS = _hosts("gitlab.com")
GITLAB_RESERVED = {"admin", "dashboard", "explore", "help", "search", "users"}


def _gitlab_feeds(parts: SplitResult) -> List[Feed]:
    segments = _segments(parts)
    # Everything after "/-/" is a sub-page of the project
    if "-" in segments:
        segments = segments[:segments.index("-")]
    if not segments or segments[0].lower() in GITLAB_RESERVED:
        return []
    path = "/".join(segments)
    return [Feed(f"https://gitlab.com/{path}.atom", f"{path} activity", ATOM)]


# ── Medium ────────────────────────────────────────────────────────────

MEDIUM_HOSTS = _hosts("medium.com")
MEDIUM_RESERVED = {"about", "creators", "m", "me", "membership", "p", "plans", "search"}


def _medium_feeds(parts: SplitResult) -> List[Feed]:
    host = _host(parts)
    if host not in MEDIUM_HOSTS:
        publication = host[:-len(".medium.com")]
        return [Feed(f"https://{host}/feed", publication, RSS)]
    segments = _segments(parts)
    if not segments:
        return []
    first = segments[0]
    if first.lower() == "tag" and len(segments) >= 2:
        return [Feed(f"https://medium.com/feed/tag/{segments[1]}", segments[1], RSS)]
    if first.startswith("@"):
        return [Feed(f"https://medium.com/feed/{first}", first, RSS)]
    if first.lower() in MEDIUM_RESERVED or first.lower() == "feed":
        return []
    return [Feed(f"https://medium.com/feed/{first}", first, RSS)]


# ── Substack ──────────────────────────────────────────────────────────

SUBSTACK_HOSTS = _hosts("substack.com")


def _substack_feeds(parts: SplitResult) -> List[Feed]:
    host = _host(parts)
    if host in SUBSTACK_HOSTS:
        return []
    return [Feed(f"https://{host}/feed", host[:-len(".substack.com")], RSS)]


# ── Vimeo ─────────────────────────────────────────────────────────────

VIMEO_HOSTS = _hosts("vimeo.com")
VIMEO_RESERVED = {
    "about", "blog", "categories", "features", "help", "home", "join", "log_in",
    "manage", "ondemand", "search", "settings", "upload", "watch",
}


def _vimeo_feeds(parts: SplitResult) -> List[Feed]:
    segments = _segments(parts)
    if not segments:
        return []
    first = segments[0].lower()
    if first == "channels":
        if len(segments) < 2:
            return []
        return [Feed(f"https://vimeo.com/channels/{segments[1]}/videos/rss", f"{segments[1]} channel", RSS)]
    if first.isdigit() or first in VIMEO_RESERVED:
        return []
    return [Feed(f"https://vimeo.com/{segments[0]}/videos/rss", segments[0], RSS)]


# ── Kickstarter ───────────────────────────────────────────────────────

KICKSTARTER_HOSTS = _hosts("kickstarter.com")


def _kickstarter_feeds(parts: SplitResult) -> List[Feed]:
    segments = _segments(parts)
    if len(segments) < 3 or segments[0].lower() != "projects":
        return []
    creator, slug = segments[1], segments[2]
    return [Feed(f"https://www.kickstarter.com/projects/{creator}/{slug}/posts.atom", f"{slug} updates", ATOM)]


# ── itch.io ───────────────────────────────────────────────────────────

ITCHIO_HOSTS = _hosts("itch.io")


def _itchio_feeds(parts: SplitResult) -> List[Feed]:
    segments = _segments(parts)
    if not segments:
        return []
    path = "/".join(segments)
    if path.lower().endswith(".xml"):
        path = path[:-4]
    return [Feed(f"https://itch.io/{path}.xml", path, RSS)]


# ── Mirror ────────────────────────────────────────────────────────────

MIRROR_HOSTS = _hosts("mirror.xyz")


def _mirror_feeds(parts: SplitResult) -> List[Feed]:
    host = _host(parts)
    if host in MIRROR_HOSTS:
        return []
    return [Feed(f"https://{host}/feed/atom", host[:-len(".mirror.xyz")], ATOM)]


# ── WordPress (opt-in) ────────────────────────────────────────────────

_WORDPRESS_PATH_MARKERS = ("/wp-content/", "/wp-includes/", "/wp/", "/xmlrpc.php")


def _wordpress_matches(parts: SplitResult) -> bool:
    path = parts.path.lower()
    if any(marker in path for marker in _WORDPRESS_PATH_MARKERS):
        return True
    return bool(re.search(r"(?:^|&)p=\d+(?:&|$)", parts.query))


def _wordpress_feeds(parts: SplitResult) -> List[Feed]:
    origin = _origin(parts)
    return [
        Feed(f"{origin}/?feed=rss2", "WordPress RSS", RSS),
        Feed(f"{origin}/?feed=atom", "WordPress Atom", ATOM),
        Feed(f"{origin}/?feed=rdf", "WordPress RDF", RDF),
    ]


# Not in SERVICES: URL fingerprints are weak evidence of WordPress, and a
# false claim would hide the feeds the page declares. Pass it explicitly:
#     KnownServiceMatcher(SERVICES + (WORDPRESS,))
WORDPRESS = ServiceDescriptor("wordpress", "WordPress", _wordpress_matches, _wordpress_feeds)


# ── Registry ──────────────────────────────────────────────────────────
# Order here is match priority.
SERVICES: Tuple[ServiceDescriptor, ...] = (
    ServiceDescriptor("youtube",     "YouTube",     _youtube_matches,                          _youtube_feeds),
    ServiceDescriptor("reddit",      "Reddit",      _on_hosts(REDDIT_HOSTS),                   _reddit_feeds),
    ServiceDescriptor("github",      "GitHub",      _on_hosts(GITHUB_HOSTS),                   _github_feeds),
    ServiceDescriptor("gitlab",      "GitLab",      _on_hosts(GITLAB_HOSTS),                   _gitlab_feeds),
    ServiceDescriptor("medium",      "Medium",      _on_hosts(MEDIUM_HOSTS, "medium.com"),     _medium_feeds),
    ServiceDescriptor("substack",    "Substack",    _on_hosts(SUBSTACK_HOSTS, "substack.com"), _substack_feeds),
    ServiceDescriptor("vimeo",       "Vimeo",       _on_hosts(VIMEO_HOSTS),                    _vimeo_feeds),
    ServiceDescriptor("kickstarter", "Kickstarter", _on_hosts(KICKSTARTER_HOSTS),              _kickstarter_feeds),
    ServiceDescriptor("itchio",      "itch.io",     _on_hosts(ITCHIO_HOSTS),                   _itchio_feeds),
    ServiceDescriptor("mirror",      "Mirror",      _on_hosts(MIRROR_HOSTS, "mirror.xyz"),     _mirror_feeds),
)

# Quick lookups
_BY_KEY: Dict[str, ServiceDescriptor] = {s.key: s for s in SERVICES}


def get_all_keys() -> List[str]:
    """Return all registered service keys, in priority order."""
    return [s.key for s in SERVICES]


def get_service(key: str) -> Optional[ServiceDescriptor]:
    """Look up a registered service by key."""
    return _BY_KEY.get(key)


class KnownServiceMatcher:
    """First-match-wins lookup over an ordered, immutable service registry."""

    def __init__(self, services: Optional[Sequence[ServiceDescriptor]] = None):
        self.services: Tuple[ServiceDescriptor, ...] = tuple(SERVICES if services is None else services)

    def match(self, page_url: str) -> Optional[ServiceDescriptor]:
        """Return the descriptor that claims *page_url*, if any."""
        if not is_supported_protocol(page_url):
            return None
        parts = urlsplit(page_url.strip())
        for service in self.services:
            try:
                if service.matches(parts):
                    return service
            except Exception as e:
                logger.warning(f"[Services] {service.display_name} matcher failed for {page_url}: {e}")
        return None

    def check(self, page_url: str) -> Optional[ServiceResult]:
        """Synthesize feeds for *page_url*; None when no service claims it."""
        service = self.match(page_url)
        if service is None:
            return None
        feeds = service.feeds_for(urlsplit(page_url.strip()))
        logger.debug(f"[Services] {service.display_name} claimed {page_url} with {len(feeds)} feed(s)")
        return ServiceResult(match=True, feeds=feeds)

    def __repr__(self) -> str:
        return f"KnownServiceMatcher({', '.join(s.key for s in self.services)})"


_default_matcher = KnownServiceMatcher()


def check_known_services(page_url: str,
                         services: Optional[Sequence[ServiceDescriptor]] = None) -> Optional[ServiceResult]:
    """Check *page_url* against the registry (``SERVICES`` unless *services* is given)."""
    matcher = _default_matcher if services is None else KnownServiceMatcher(services)
    return matcher.check(page_url)
