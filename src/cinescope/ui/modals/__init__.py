"""Modal dialogs for CineScope."""

from .movie_modal import MovieModal

__all__ = ["MovieModal"]
