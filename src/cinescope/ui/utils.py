from cinescope.models import Movie

DEFAULT_IMAGE_BASE_URL = "https://image.tmdb.org/t/p/w500"
OVERVIEW_PREVIEW_LENGTH = 150
NOT_AVAILABLE = "N/A"


def build_poster_url(poster_path: str | None, image_base_url: str | None = None) -> str | None:
    """Build the full poster URL from a TMDB poster path.

    Args:
        poster_path: Path as returned by the API (e.g., "/abc.jpg"), or None
        image_base_url: Image CDN prefix including the size segment

    Returns:
        The poster URL, or None when the movie has no poster
    """
    if not poster_path:
        return None
    base = (image_base_url or DEFAULT_IMAGE_BASE_URL).rstrip("/")
    return f"{base}/{poster_path.lstrip('/')}"


def format_rating(vote_average: float | None) -> str:
    """Format an average vote with one decimal, e.g. "7.3"."""
    if not vote_average:
        return NOT_AVAILABLE
    return f"{vote_average:.1f}"


def release_year(release_date: str | None) -> str:
    """Extract the year from a "YYYY-MM-DD" release date."""
    if not release_date:
        return NOT_AVAILABLE
    return release_date.split("-")[0]


def format_runtime(minutes: int | None) -> str:
    """Format a runtime in minutes.

    Args:
        minutes: Runtime in minutes

    Returns:
        Formatted runtime (e.g., "2h 28m")
    """
    if not minutes:
        return NOT_AVAILABLE
    hours, mins = divmod(minutes, 60)
    return f"{hours}h {mins}m"


def format_currency(amount: int | None) -> str:
    """Format a dollar amount without cents, e.g. "$160,000,000"."""
    if not amount:
        return NOT_AVAILABLE
    return f"${amount:,.0f}"


def truncate_overview(overview: str | None, limit: int = OVERVIEW_PREVIEW_LENGTH) -> str:
    if not overview:
        return "No description available."
    if len(overview) > limit:
        return overview[:limit] + "..."
    return overview


def format_movie_meta(movie: Movie) -> str:
    """Format the card line under a movie title: rating, language and year."""
    language = movie.original_language or NOT_AVAILABLE
    return f"★ {format_rating(movie.vote_average)} - {language} - {release_year(movie.release_date)}"
