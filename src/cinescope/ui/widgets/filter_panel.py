from datetime import date

from loguru import logger
from textual import work
from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.message import Message
from textual.widgets import Button, Label, Select, SelectionList, Static

from cinescope.services.query_builder import FilterSet, filters_from_values
from cinescope.ui.constants import RATING_OPTIONS, YEAR_OPTION_COUNT


def year_options(count: int = YEAR_OPTION_COUNT, current_year: int | None = None) -> list[tuple[str, int]]:
    """Release years offered in the year filter, newest first."""
    current_year = current_year or date.today().year
    return [(str(year), year) for year in range(current_year, current_year - count, -1)]


def _selected_int(select: Select) -> int | None:
    value = select.value
    return value if isinstance(value, int) else None


class FilterPanel(Static):
    """Genre, minimum rating and release year filters.

    Only applied while the search box is empty.
    """

    class FiltersChanged(Message):
        """Message sent when any filter widget changes"""

        def __init__(self, filters: FilterSet) -> None:
            super().__init__()
            self.filters = filters

    class FiltersCleared(Message):
        """Message sent when every filter is reset at once"""

    def __init__(self, catalog=None, **kwargs):
        super().__init__(**kwargs)
        self.catalog = catalog

    def compose(self) -> ComposeResult:
        with VerticalScroll(id="filter-container"):
            yield Static("Filters", id="filter-panel-title")
            yield Label("Genres", classes="filter-label")
            yield SelectionList[int](id="genre-selection")
            yield Label("Minimum Rating", classes="filter-label")
            yield Select(RATING_OPTIONS, prompt="Any Rating", id="rating-select")
            yield Label("Release Year", classes="filter-label")
            yield Select(year_options(), prompt="Any Year", id="year-select")
            yield Button("Clear All", id="clear-filters-btn", variant="default")

    def on_mount(self) -> None:
        if self.catalog is not None:
            self.load_genres()

    @work(exclusive=True)
    async def load_genres(self) -> None:
        """Fetch the genre list once for the selection list."""
        try:
            genres = await self.catalog.list_genres()
        except Exception as e:
            logger.error(f"Error loading genres: {e}")
            self.notify("Could not load genres", severity="error")
            return

        selection = self.query_one("#genre-selection", SelectionList)
        selection.clear_options()
        selection.add_options([(genre.name, genre.id) for genre in genres])

    def current_filters(self) -> FilterSet:
        selection = self.query_one("#genre-selection", SelectionList)
        return filters_from_values(
            genres=selection.selected,
            rating=_selected_int(self.query_one("#rating-select", Select)),
            year=_selected_int(self.query_one("#year-select", Select)),
        )

    def on_selection_list_selected_changed(self, event: SelectionList.SelectedChanged) -> None:
        event.stop()
        self._emit_filters()

    def on_select_changed(self, event: Select.Changed) -> None:
        event.stop()
        self._emit_filters()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "clear-filters-btn":
            event.stop()
            self.clear_filters()

    def clear_filters(self) -> None:
        """Reset every filter widget and announce a single clear."""
        with self.prevent(SelectionList.SelectedChanged, Select.Changed):
            self.query_one("#genre-selection", SelectionList).deselect_all()
            self.query_one("#rating-select", Select).clear()
            self.query_one("#year-select", Select).clear()
        self._update_title(FilterSet())
        self.post_message(self.FiltersCleared())

    def _emit_filters(self) -> None:
        filters = self.current_filters()
        self._update_title(filters)
        self.post_message(self.FiltersChanged(filters))

    def _update_title(self, filters: FilterSet) -> None:
        count = filters.active_count()
        title = self.query_one("#filter-panel-title", Static)
        title.update(f"Filters ({count})" if count else "Filters")
