from textual.app import ComposeResult
from textual.containers import Vertical
from textual.message import Message
from textual.reactive import reactive
from textual.widgets import Label, ListItem, ListView, LoadingIndicator, Static

from cinescope.models import Movie
from cinescope.services.results import ResultSnapshot
from cinescope.services.sentinel import ScrollSentinel
from cinescope.ui.utils import format_movie_meta, truncate_overview


class MovieItem(ListItem):
    """Individual movie card"""

    def __init__(self, movie: Movie):
        super().__init__()
        self.movie = movie

    def compose(self) -> ComposeResult:
        yield Label(self.movie.title, classes="movie-title", markup=False)
        yield Label(format_movie_meta(self.movie), classes="movie-meta", markup=False)
        yield Label(truncate_overview(self.movie.overview), classes="movie-overview", markup=False)


class MovieList(Static):
    """Result list that renders orchestrator snapshots and reports scroll position."""

    is_loading: bool = reactive(False)

    class MovieSelected(Message):
        """Message sent when a movie card is chosen"""

        def __init__(self, movie: Movie) -> None:
            super().__init__()
            self.movie = movie

    def __init__(self, sentinel: ScrollSentinel | None = None, **kwargs):
        super().__init__(**kwargs)
        self.sentinel = sentinel
        self._rendered_epoch = 0
        self._rendered_count = 0

    def compose(self) -> ComposeResult:
        with Vertical(id="movie-list-container"):
            yield Static("All Movies", id="movie-panel-title", markup=False)
            yield LoadingIndicator(id="movie-loading")
            yield ListView(id="movie-list-view")
            yield Static("", id="movie-status")

    def on_mount(self) -> None:
        list_view = self.query_one("#movie-list-view", ListView)
        self.watch(list_view, "scroll_y", self.check_scroll_position, init=False)
        # Short pages may not fill the viewport, so re-check whenever the laid out cards change size.
        # A failed fetch adds no cards, so it is only retried by the user scrolling.
        self.watch(list_view, "virtual_size", self.check_scroll_position, init=False)
        self._update_loading_state(self.is_loading)

    def watch_is_loading(self, is_loading: bool) -> None:
        self._update_loading_state(is_loading)

    def _update_loading_state(self, is_loading: bool) -> None:
        try:
            loading_indicator = self.query_one("#movie-loading", LoadingIndicator)
            list_view = self.query_one("#movie-list-view", ListView)
        except Exception:
            # Widgets not ready yet
            return
        loading_indicator.display = is_loading
        list_view.display = not is_loading

    # Rendering

    def show_results(self, snapshot: ResultSnapshot, heading: str = "All Movies") -> None:
        """Render a snapshot, appending only the movies not yet on screen."""
        list_view = self.query_one("#movie-list-view", ListView)

        # A new query or a shrunk list means the rendered cards are stale
        if snapshot.epoch != self._rendered_epoch or len(snapshot.items) < self._rendered_count:
            list_view.clear()
            self._rendered_epoch = snapshot.epoch
            self._rendered_count = 0

        for movie in snapshot.items[self._rendered_count :]:
            list_view.append(MovieItem(movie))
        self._rendered_count = len(snapshot.items)

        title = self.query_one("#movie-panel-title", Static)
        title.update(f"{heading} ({len(snapshot.items)})" if snapshot.items else heading)

        self.is_loading = snapshot.is_loading and snapshot.is_empty
        self.query_one("#movie-status", Static).update(self._status_text(snapshot))

    @staticmethod
    def _status_text(snapshot: ResultSnapshot) -> str:
        if snapshot.error_message:
            return f"[red]{snapshot.error_message}[/]"
        if snapshot.is_loading_more:
            return "Loading more movies..."
        if snapshot.is_loading:
            return "Loading movies..."
        if snapshot.is_end_of_results:
            return "You've reached the end! 🎬"
        if snapshot.is_empty and snapshot.current_page > 0:
            return "No movies found."
        return ""

    # Scrolling

    def check_scroll_position(self) -> None:
        """Report the list's scroll position to the sentinel."""
        if self.sentinel is None:
            return
        list_view = self.query_one("#movie-list-view", ListView)
        if not list_view.display or not len(list_view.children):
            return
        self.sentinel.observe(list_view.size.height, list_view.scroll_y, list_view.virtual_size.height)

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        if isinstance(event.item, MovieItem):
            self.post_message(self.MovieSelected(event.item.movie))

    def focus_list(self) -> None:
        list_view = self.query_one("#movie-list-view", ListView)
        list_view.focus()
        if list_view.index is None and len(list_view.children) > 0:
            list_view.index = 0
