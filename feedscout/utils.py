"""Shared URL helpers: protocol gate, normalization for equality, href resolution."""
import re
from typing import Optional
from urllib.parse import urljoin, urlsplit

SUPPORTED_SCHEMES = ("http", "https")
_DEFAULT_PORTS = {"http": 80, "https": 443}

# Substrings that mark a URL as something other than a feed
INVALID_URL_PATTERNS = (
    "wp-includes",
    "wp-json",
    "xmlrpc",
    "wp-admin",
    "/amp/",
    "mailto:",
    "//fonts.",
    "//font.",
)

INVALID_EXTENSIONS = re.compile(
    r"\.(jpe?g|png|gif|bmp|webp|ico|mp4|mp3|mkv|css|js|pdf|woff2?|svg|ttf|zip)$", re.IGNORECASE
)


def is_supported_protocol(url) -> bool:
    """Return True only for absolute http(s) URLs with a host. Never raises."""
    if not isinstance(url, str) or not url.strip():
        return False
    try:
        parsed = urlsplit(url.strip())
    except ValueError:
        return False
    return parsed.scheme.lower() in SUPPORTED_SCHEMES and bool(parsed.hostname)


def normalize_url(url: str) -> str:
    """Canonical form of *url* used only to decide whether two feeds are the same.

    Lower-cases scheme and host, drops a default port and the fragment, and
    strips trailing slashes from the path (``/`` stays). The query string is
    kept verbatim and http/https stay distinct.
    """
    stripped = url.strip()
    try:
        parsed = urlsplit(stripped)
        port = parsed.port
    except ValueError:
        return stripped
    if not parsed.scheme or not parsed.netloc:
        return stripped

    scheme = parsed.scheme.lower()
    host = (parsed.hostname or "").lower()
    if ":" in host:
        host = f"[{host}]"
    userinfo = parsed.netloc.rpartition("@")[0]
    netloc = f"{userinfo}@{host}" if userinfo else host
    if port is not None and port != _DEFAULT_PORTS.get(scheme):
        netloc = f"{netloc}:{port}"

    path = parsed.path.rstrip("/") or "/"
    query = f"?{parsed.query}" if parsed.query else ""
    return f"{scheme}://{netloc}{path}{query}"


def resolve_feed_url(href: Optional[str], base_url: Optional[str]) -> Optional[str]:
    """Resolve an href found in a page to an absolute http(s) URL.

    Understands the ``feed:`` pseudo-scheme (``feed://host/x`` and
    ``feed:https://host/x``). Returns None when the reference cannot be
    resolved to a supported URL.
    """
    if not href or not href.strip():
        return None
    href = href.strip()
    lowered = href.lower()
    if lowered.startswith("feed://"):
        href = "https://" + href[len("feed://"):]
    elif lowered.startswith("feed:"):
        href = href[len("feed:"):]

    try:
        absolute = urljoin(base_url or "", href)
    except ValueError:
        return None
    if not is_supported_protocol(absolute):
        return None
    return absolute


def should_skip_url(url: str) -> bool:
    """True for URLs that are obviously not feeds (assets, WordPress internals, fonts)."""
    lowered = url.lower()
    if any(pattern in lowered for pattern in INVALID_URL_PATTERNS):
        return True
    try:
        path = urlsplit(url).path
    except ValueError:
        return True
    return bool(INVALID_EXTENSIONS.search(path))


def guess_site_name(url: str) -> str:
    """Extract a reasonable site name from a URL ("https://www.example.com" -> "Example")."""
    try:
        host = urlsplit(url).hostname or ""
    except ValueError:
        return url
    host = re.sub(r"^www\.", "", host)
    parts = host.split(".")
    if len(parts) >= 2:
        return parts[-2].capitalize()
    return host or url
