"""Markdown output."""
from typing import List
from feedscout.models import Feed


class MarkdownFormatter:
    def __init__(self, page_url: str = ""):
        self.page_url = page_url

    def format(self, feeds: List[Feed]) -> str:
        heading = f"# Feeds on {self.page_url}" if self.page_url else "# Discovered feeds"
        lines = [f"{heading} — {len(feeds)} found\n"]
        for f in feeds:
            kind = f" ({f.type})" if f.type else ""
            lines.append(f"- [{f.title}]({f.url}){kind}")
        return "\n".join(lines) + "\n"
