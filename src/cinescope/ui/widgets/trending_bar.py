from loguru import logger
from rich.markup import escape
from textual import work
from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.widgets import Label, Static

from cinescope.models import TrendingEntry
from cinescope.ui.constants import TRENDING_LIMIT


class TrendingBar(Static):
    """Strip listing the most searched terms; hidden when empty or unavailable"""

    def __init__(self, trending=None, **kwargs):
        super().__init__(**kwargs)
        self.trending = trending
        self.entries: list[TrendingEntry] = []

    def compose(self) -> ComposeResult:
        with Horizontal(id="trending-container"):
            yield Label("Trending", id="trending-title")
            yield Static("", id="trending-entries")

    def on_mount(self) -> None:
        self.display = False
        if self.trending is not None:
            self.load_trending()

    @work(exclusive=True)
    async def load_trending(self) -> None:
        try:
            entries = await self.trending.top_searches(TRENDING_LIMIT)
        except Exception as e:
            # Trending is decoration; browsing works without it
            logger.warning(f"Error loading trending searches: {e}")
            return
        self.show_entries(entries)

    def show_entries(self, entries: list[TrendingEntry]) -> None:
        self.entries = entries
        text = "   ".join(
            f"[b]{index}.[/b] {escape(entry.title or entry.search_term)}" for index, entry in enumerate(entries, 1)
        )
        self.query_one("#trending-entries", Static).update(text)
        self.display = bool(entries)
