"""Data models for feedscout."""
import re
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

# Labels the extractors generate when a page gives no usable title
_GENERIC_TITLE_RE = re.compile(
    r"^(?:(?:rss|atom|rdf|json)(?: feed)?|feed)(?: \(\d+\))?$", re.IGNORECASE
)

DEFAULT_TIMEOUT = 10.0


def _default_user_agent() -> str:
    from feedscout import __version__
    return f"feedscout/{__version__} (+feed discovery)"


def is_generic_title(title: str) -> bool:
    """True for generated fallback labels like "RSS Feed" or "Atom Feed (2)"."""
    return not title.strip() or bool(_GENERIC_TITLE_RE.match(title.strip()))


@dataclass(frozen=True)
class Feed:
    url: str
    title: str
    type: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {"url": self.url, "title": self.title, "type": self.type}


@dataclass(frozen=True)
class ServiceResult:
    """Outcome of a known-service check.

    ``match=True`` with no feeds means the service was recognised but the page
    carries nothing to build a feed URL from. Callers must not fall back to
    scanning the document in that case.
    """
    match: bool
    feeds: Tuple[Feed, ...] = ()


@dataclass(frozen=True)
class DiscoveryOptions:
    base_url: Optional[str] = None       # overrides the document location for resolving hrefs
    timeout: float = DEFAULT_TIMEOUT     # seconds, per HTTP request
    follow_redirects: bool = True
    user_agent: str = field(default_factory=_default_user_agent)
    verify: bool = False                 # probe candidates over the network

    @property
    def headers(self) -> Dict[str, str]:
        return {"User-Agent": self.user_agent}
