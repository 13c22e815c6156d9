"""Document capability consumed by the extractors.

The extractors only need three things from a page: its location, a way to
select elements by CSS selector, and attribute/text access on those elements.
Anything exposing that surface satisfies :class:`Document`. A parsed HTML tree
goes through :class:`SoupDocument`; a live browser DOM only needs a thin
wrapper with the same two members. BeautifulSoup tags already satisfy
:class:`Element`.
"""
import logging
from typing import Any, Iterable, List, Optional, Protocol, Union
from urllib.parse import urljoin

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)


class Element(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...

    def get_text(self) -> str: ...


class Document(Protocol):
    @property
    def url(self) -> str: ...

    @property
    def base_url(self) -> Optional[str]: ...

    def select(self, selector: str) -> Iterable[Element]: ...


def attr(element: Element, name: str) -> str:
    """Attribute value as a string; multi-valued attributes (rel, class) are space-joined."""
    value = element.get(name)
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(str(v) for v in value)
    return str(value)


def text(element: Element) -> str:
    """Visible text with runs of whitespace collapsed."""
    return " ".join((element.get_text() or "").split())


def location_of(doc: Document) -> str:
    return getattr(doc, "url", None) or ""


def base_url_of(doc: Document) -> str:
    """The document's resolution base, falling back to its location."""
    return getattr(doc, "base_url", None) or location_of(doc)


class SoupDocument:
    """A page parsed with BeautifulSoup, located at *url*."""

    def __init__(self, markup: Union[str, bytes, BeautifulSoup], url: str = "",
                 parser: str = "html.parser"):
        if isinstance(markup, BeautifulSoup):
            self.soup = markup
        else:
            self.soup = BeautifulSoup(markup, parser)
        self.url = url

    @property
    def base_url(self) -> str:
        """Location used to resolve relative hrefs, honouring ``<base href>``."""
        base = self.soup.find("base", href=True)
        if base is not None:
            href = attr(base, "href").strip()
            if href:
                try:
                    return urljoin(self.url, href)
                except ValueError as e:
                    logger.debug(f"[Document] Ignoring malformed <base href={href!r}>: {e}")
        return self.url

    def select(self, selector: str) -> List[Any]:
        return self.soup.select(selector)

    def __repr__(self) -> str:
        return f"SoupDocument(url={self.url!r})"
