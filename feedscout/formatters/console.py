"""Rich console output."""
from typing import List
from rich.console import Console
from rich.panel import Panel
from rich.markup import escape
from feedscout.models import Feed


class ConsoleFormatter:
    def __init__(self, page_url: str = ""):
        self.page_url = page_url

    def format(self, feeds: List[Feed]) -> str:
        console = Console(record=True, width=120)
        where = f" on {escape(self.page_url)}" if self.page_url else ""
        console.print(Panel(f"[bold cyan]🔍 Found {len(feeds)} feed(s){where}[/]", expand=False))

        for i, f in enumerate(feeds, 1):
            console.print(f"\n[bold white]{i}. {escape(f.title)}[/]")
            console.print(f"   [blue underline]{escape(f.url)}[/]")
            console.print(f"   [dim]Type: {escape(f.type or 'unknown')}[/]")

        return console.export_text()
