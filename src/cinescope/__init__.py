"""CineScope - browse and search a movie catalog from the terminal."""

__version__ = "0.1.0"
