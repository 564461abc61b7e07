from textual.app import ComposeResult
from textual.widgets import Input, Static


class SearchBar(Static):
    """Search input; the screen debounces its changes before querying"""

    def compose(self) -> ComposeResult:
        yield Input(placeholder="Search through thousands of movies... ( / to focus)", id="search-input")

    def focus_input(self) -> None:
        self.query_one("#search-input", Input).focus()
