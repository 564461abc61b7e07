from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.reactive import reactive
from textual.widgets import Static

from cinescope.gateways.tmdb import TMDB


class TitleBar(Static):
    """Title bar with the catalog host and a connection indicator"""

    connection_error: bool = reactive(False)

    def compose(self) -> ComposeResult:
        with Horizontal(id="title-bar-container"):
            yield Static("CineScope", id="title")
            with Horizontal(id="status-container"):
                yield Static("●", id="connected-indicator")
                yield Static(f"api: {TMDB.base_url}", id="api-info")

    def watch_connection_error(self, connection_error: bool) -> None:
        """Turn the indicator red while the last catalog call failed."""
        try:
            indicator = self.query_one("#connected-indicator", Static)
            indicator.set_class(connection_error, "error")
        except Exception:
            # Indicator not mounted yet
            pass
