"""Main CineScope application."""

from textual.app import App
from textual.binding import Binding

from cinescope.gateways.tmdb import TMDB
from cinescope.gateways.trending import TrendingCounter
from cinescope.services.catalog import CatalogService
from cinescope.services.trending import TrendingService
from cinescope.ui.screens.main_screen import MainScreen


class CineScope(App):
    """Movie catalog terminal UI."""

    TITLE = "CineScope"
    CSS_PATH = "app.tcss"

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit", priority=True),
    ]

    def __init__(
        self,
        api_base_url: str = None,
        api_token: str = None,
        image_base_url: str = None,
        trending_url: str = None,
        trending_api_key: str = None,
        request_timeout: float = None,
        theme_name: str = "textual-dark",
        catalog=None,
        trending=None,
        **kwargs,
    ):
        """Initialize the CineScope app.

        Args:
            api_base_url: Base URL of the TMDB-compatible catalog API.
            api_token: Bearer token sent to the catalog API.
            image_base_url: Image CDN prefix used to build poster URLs.
            trending_url: Base URL of the trending searches service; None disables trending.
            trending_api_key: API key for the trending searches service.
            request_timeout: Timeout in seconds for every remote call.
            theme_name: Name of the Textual theme to apply on mount.
            catalog: Catalog collaborator; defaults to CatalogService.
            trending: Trending collaborator; defaults to TrendingService when trending_url is set.
        """
        super().__init__(**kwargs)
        self.theme_name = theme_name
        self.image_base_url = image_base_url

        # Connection settings are shared by every gateway call
        TMDB.configure(base_url=api_base_url, api_token=api_token, timeout=request_timeout)
        TrendingCounter.configure(base_url=trending_url, api_key=trending_api_key, timeout=request_timeout)
        TrendingService.image_base_url = image_base_url

        self.catalog = catalog or CatalogService
        if trending is None and TrendingCounter.is_configured():
            trending = TrendingService
        self.trending = trending

    def on_mount(self) -> None:
        """Called when app starts."""
        self.theme = self.theme_name
        self.push_screen(MainScreen(self.catalog, self.trending, self.image_base_url))
