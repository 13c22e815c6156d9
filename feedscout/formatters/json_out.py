"""JSON output: the ``feeds`` array of a FEEDS_RESULT message."""
import json
from typing import List, Optional
from feedscout.models import Feed


class JSONFormatter:
    def __init__(self, indent: Optional[int] = 2):
        self.indent = indent

    def format(self, feeds: List[Feed]) -> str:
        return json.dumps([f.to_dict() for f in feeds], indent=self.indent, ensure_ascii=False)
