"""OPML output."""
from typing import List
from feedscout.models import Feed
from feedscout.opml import export_opml
from feedscout.utils import guess_site_name


class OPMLFormatter:
    def __init__(self, page_url: str = ""):
        self.page_url = page_url

    def format(self, feeds: List[Feed]) -> str:
        title = f"{guess_site_name(self.page_url)} feeds" if self.page_url else "feedscout feeds"
        return export_opml(feeds, title=title)
