"""OPML export for discovered feeds, ready to import into a feed reader."""
import xml.etree.ElementTree as ET
from typing import List
from xml.dom.minidom import parseString

from feedscout.models import Feed


def _outline_type(feed: Feed) -> str:
    if feed.type and "atom" in feed.type:
        return "atom"
    return "rss"


def export_opml(feeds: List[Feed], title: str = "feedscout feeds") -> str:
    """Export a feed list to an OPML 2.0 XML string, one outline per feed."""
    opml = ET.Element("opml", version="2.0")
    head = ET.SubElement(opml, "head")
    ET.SubElement(head, "title").text = title
    body = ET.SubElement(opml, "body")

    for f in feeds:
        ET.SubElement(body, "outline",
                      type=_outline_type(f),
                      text=f.title,
                      title=f.title,
                      xmlUrl=f.url)

    raw = ET.tostring(opml, encoding="unicode", xml_declaration=True)
    return parseString(raw).toprettyxml(indent="  ")
