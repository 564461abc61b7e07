from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.screen import Screen
from textual.widgets import Footer, Input

from cinescope.services.debounce import DebouncedInput
from cinescope.services.orchestrator import FetchOrchestrator
from cinescope.services.results import ResultSnapshot
from cinescope.services.sentinel import ScrollSentinel
from cinescope.ui.constants import SCROLL_THRESHOLD_ROWS, SEARCH_DEBOUNCE_MS
from cinescope.ui.modals.movie_modal import MovieModal
from cinescope.ui.widgets.filter_panel import FilterPanel
from cinescope.ui.widgets.movie_list import MovieList
from cinescope.ui.widgets.search_bar import SearchBar
from cinescope.ui.widgets.title_bar import TitleBar
from cinescope.ui.widgets.trending_bar import TrendingBar


class MainScreen(Screen):
    """Main screen: search box, trending strip, filters and the movie list."""

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("slash", "focus_search", "Search"),
        Binding("f", "toggle_filters", "Filters"),
        Binding("c", "clear_filters", "Clear Filters"),
        Binding("r", "reload", "Reload"),
        Binding("escape", "focus_results", "Results", show=False),
    ]

    def __init__(self, catalog, trending=None, image_base_url: str | None = None):
        """Initialize the main screen.

        Args:
            catalog: Collaborator providing fetch_page, list_genres and get_movie_details.
            trending: Collaborator providing record_search and top_searches, or None.
            image_base_url: Image CDN prefix for poster links in the movie modal.
        """
        super().__init__()
        self.catalog = catalog
        self.trending = trending
        self.image_base_url = image_base_url

        self.orchestrator = FetchOrchestrator(catalog, trending)
        self.search_input = DebouncedInput(on_commit=self.orchestrator.set_term, delay=SEARCH_DEBOUNCE_MS / 1000)
        self.sentinel = ScrollSentinel(
            on_bottom=self.orchestrator.request_more,
            is_fetching=lambda: self.orchestrator.in_flight,
            threshold=SCROLL_THRESHOLD_ROWS,
        )
        self._unsubscribe = None

    def compose(self) -> ComposeResult:
        """Create the layout for the main screen."""
        with Container(id="main-container"):
            yield TitleBar(id="title-bar")
            yield SearchBar(id="search-bar")
            yield TrendingBar(self.trending, id="trending-bar")
            with Horizontal(id="content-container"):
                yield FilterPanel(self.catalog, id="filter-panel")
                yield MovieList(self.sentinel, id="movie-list")

            yield Footer(id="main-footer", show_command_palette=False)

    def on_mount(self) -> None:
        """Subscribe to result changes and run the initial load."""
        self.query_one("#filter-panel", FilterPanel).display = False
        self._unsubscribe = self.orchestrator.subscribe(self._on_results_changed)
        self.orchestrator.load()
        self.query_one("#search-bar", SearchBar).focus_input()

    def on_unmount(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
        self.search_input.cancel()
        self.orchestrator.close()

    # Producers

    def on_input_changed(self, event: Input.Changed) -> None:
        """Feed every keystroke to the debounce buffer"""
        if event.input.id == "search-input":
            self.search_input.set_raw(event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Enter commits the search term without waiting"""
        if event.input.id == "search-input":
            self.search_input.flush()
            self.action_focus_results()

    def on_filter_panel_filters_changed(self, message: FilterPanel.FiltersChanged) -> None:
        self.orchestrator.set_filters(message.filters)

    def on_filter_panel_filters_cleared(self, message: FilterPanel.FiltersCleared) -> None:
        self.orchestrator.clear_filters()

    def on_movie_list_movie_selected(self, message: MovieList.MovieSelected) -> None:
        self.app.push_screen(MovieModal(message.movie, self.catalog, self.image_base_url))

    # Rendering

    def _on_results_changed(self, snapshot: ResultSnapshot) -> None:
        movie_list = self.query_one("#movie-list", MovieList)
        movie_list.show_results(snapshot, self._heading())

        title_bar = self.query_one("#title-bar", TitleBar)
        title_bar.connection_error = bool(snapshot.error_message)

    def _heading(self) -> str:
        if self.orchestrator.term:
            return f"Results for '{self.orchestrator.term}'"
        if not self.orchestrator.filters.is_empty():
            return "Filtered Movies"
        return "Popular Movies"

    # Actions

    def action_focus_search(self) -> None:
        self.query_one("#search-bar", SearchBar).focus_input()

    def action_focus_results(self) -> None:
        self.query_one("#movie-list", MovieList).focus_list()

    def action_toggle_filters(self) -> None:
        filter_panel = self.query_one("#filter-panel", FilterPanel)
        filter_panel.display = not filter_panel.display
        if self.orchestrator.term and filter_panel.display:
            self.notify("Filters apply when the search box is empty", severity="information")

    def action_clear_filters(self) -> None:
        self.query_one("#filter-panel", FilterPanel).clear_filters()

    def action_reload(self) -> None:
        self.orchestrator.reload()
