"""Details modal for a single movie."""

from loguru import logger
from rich.markup import escape
from textual import work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, LoadingIndicator, Static

from cinescope.models import Movie, MovieDetails
from cinescope.ui.utils import (
    NOT_AVAILABLE,
    build_poster_url,
    format_currency,
    format_rating,
    format_runtime,
    release_year,
)


# UI Element IDs
class MovieModalIDs:
    """Constants for UI element IDs."""

    MOVIE_MODAL = "movie-modal"
    MODAL_TITLE = "modal-title"
    LOADING = "modal-loading"
    BODY = "modal-body"
    DETAILS = "modal-details"
    CLOSE_BUTTON = "close-btn"


def render_details(details: MovieDetails, image_base_url: str | None = None) -> str:
    """Render movie details as console markup."""
    lines = []
    if details.tagline:
        lines.append(f"[i]{escape(details.tagline)}[/i]")
        lines.append("")

    lines.append(f"[b]Rating:[/b] ★ {format_rating(details.vote_average)} ({details.vote_count:,} votes)")
    lines.append(f"[b]Released:[/b] {details.release_date or NOT_AVAILABLE}")
    lines.append(f"[b]Runtime:[/b] {format_runtime(details.runtime)}")
    lines.append(f"[b]Language:[/b] {details.original_language or NOT_AVAILABLE}")
    lines.append(f"[b]Genres:[/b] {escape(', '.join(details.genres)) or NOT_AVAILABLE}")
    lines.append(f"[b]Budget:[/b] {format_currency(details.budget)}")
    lines.append(f"[b]Revenue:[/b] {format_currency(details.revenue)}")
    lines.append("")
    lines.append(escape(details.overview) if details.overview else "No description available.")

    if details.cast:
        lines.append("")
        lines.append("[b]Cast[/b]")
        for member in details.cast:
            role = f" as {escape(member.character)}" if member.character else ""
            lines.append(f"  {escape(member.name)}{role}")

    poster_url = build_poster_url(details.poster_path, image_base_url)
    if poster_url or details.homepage:
        lines.append("")
    if poster_url:
        lines.append(f"[b]Poster:[/b] {poster_url}")
    if details.homepage:
        lines.append(f"[b]Homepage:[/b] {details.homepage}")

    return "\n".join(lines)


class MovieModal(ModalScreen):
    """Modal screen showing the full record of a movie."""

    BINDINGS = [
        Binding("escape", "dismiss", "Close"),
    ]

    def __init__(self, movie: Movie, catalog, image_base_url: str | None = None) -> None:
        """Initialize the movie modal.

        Args:
            movie: The list entry that was selected
            catalog: Collaborator providing get_movie_details
            image_base_url: Image CDN prefix for the poster link
        """
        super().__init__()
        self.movie = movie
        self.catalog = catalog
        self.image_base_url = image_base_url

    def compose(self) -> ComposeResult:
        with Vertical(id=MovieModalIDs.MOVIE_MODAL):
            yield Static(
                f"{self.movie.title} ({release_year(self.movie.release_date)})",
                id=MovieModalIDs.MODAL_TITLE,
                markup=False,
            )
            yield LoadingIndicator(id=MovieModalIDs.LOADING)
            with VerticalScroll(id=MovieModalIDs.BODY):
                yield Static("", id=MovieModalIDs.DETAILS)
            yield Button("Close", variant="default", id=MovieModalIDs.CLOSE_BUTTON)

    def on_mount(self) -> None:
        self.query_one(f"#{MovieModalIDs.BODY}").display = False
        self._load_details()

    def action_dismiss(self) -> None:
        """Dismiss the modal."""
        self.dismiss(None)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == MovieModalIDs.CLOSE_BUTTON:
            self.action_dismiss()

    @work(exclusive=True)
    async def _load_details(self) -> None:
        """Fetch details and credits for the movie."""
        try:
            details = await self.catalog.get_movie_details(self.movie.id)
            text = render_details(details, self.image_base_url)
        except Exception as e:
            logger.error(f"Error loading details for movie {self.movie.id}: {e}")
            self.notify("Could not load movie details", severity="error")
            text = "Could not load movie details."

        self.query_one(f"#{MovieModalIDs.DETAILS}", Static).update(text)
        self.query_one(f"#{MovieModalIDs.LOADING}", LoadingIndicator).display = False
        self.query_one(f"#{MovieModalIDs.BODY}").display = True
