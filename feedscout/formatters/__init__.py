"""Output formatters."""
from .console import ConsoleFormatter
from .json_out import JSONFormatter
from .markdown import MarkdownFormatter
from .opml_out import OPMLFormatter

FORMATTERS = {
    "console": ConsoleFormatter,
    "json": JSONFormatter,
    "markdown": MarkdownFormatter,
    "opml": OPMLFormatter,
}

__all__ = ["ConsoleFormatter", "JSONFormatter", "MarkdownFormatter", "OPMLFormatter", "FORMATTERS"]
