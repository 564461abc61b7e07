import asyncio

import httpx
import pytest

from cinescope.gateways.tmdb import TMDB
from cinescope.gateways.trending import TrendingCounter
from cinescope.models import CatalogPage, Genre, Movie, MovieDetails
from cinescope.services.catalog import CatalogService
from cinescope.services.query_builder import QueryDescriptor


def movie(movie_id: int, title: str = None, **kwargs) -> Movie:
    return Movie(id=movie_id, title=title or f"Movie {movie_id}", **kwargs)


async def pump(times: int = 5) -> None:
    """Let freshly spawned tasks run up to their next await."""
    for _ in range(times):
        await asyncio.sleep(0)


class ControlledCatalog:
    """Catalog whose responses are resolved by the test, in any order."""

    def __init__(self):
        self.calls: list[QueryDescriptor] = []
        self.futures: list[asyncio.Future] = []

    async def fetch_page(self, descriptor: QueryDescriptor) -> CatalogPage:
        future = asyncio.get_running_loop().create_future()
        self.calls.append(descriptor)
        self.futures.append(future)
        return await future

    def resolve(self, index: int, items: list[Movie], total_pages: int) -> None:
        page = self.calls[index].page
        self.futures[index].set_result(CatalogPage(items=list(items), total_pages=total_pages, page=page))

    def reject(self, index: int, error: Exception) -> None:
        self.futures[index].set_exception(error)


class StaticCatalog:
    """Catalog answering immediately from a page table."""

    def __init__(self, pages: dict[int, CatalogPage] = None, genres: list[Genre] = None, details: MovieDetails = None):
        self.pages = pages or {}
        self.genres = genres or []
        self.details = details
        self.calls: list[QueryDescriptor] = []

    async def fetch_page(self, descriptor: QueryDescriptor) -> CatalogPage:
        self.calls.append(descriptor)
        return self.pages.get(descriptor.page, CatalogPage(items=[], total_pages=0, page=descriptor.page))

    async def list_genres(self) -> list[Genre]:
        return self.genres

    async def get_movie_details(self, movie_id: int) -> MovieDetails:
        return self.details


class RecordingTrending:
    def __init__(self, error: Exception = None):
        self.error = error
        self.recorded: list[tuple[str, Movie]] = []

    async def record_search(self, term: str, movie: Movie) -> None:
        self.recorded.append((term, movie))
        if self.error:
            raise self.error


@pytest.fixture
def catalog():
    return ControlledCatalog()


@pytest.fixture
def mock_transport(monkeypatch):
    """Route every gateway client through an httpx.MockTransport handler."""
    state = {"handler": None, "requests": []}

    def handler(request: httpx.Request) -> httpx.Response:
        state["requests"].append(request)
        return state["handler"](request)

    def tmdb_client(cls):
        return httpx.AsyncClient(
            transport=httpx.MockTransport(handler), base_url="https://api.test/3", headers=TMDB.headers()
        )

    def trending_client(cls):
        return httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="https://trending.test")

    monkeypatch.setattr(TMDB, "new_client", classmethod(tmdb_client))
    monkeypatch.setattr(TrendingCounter, "new_client", classmethod(trending_client))
    return state


@pytest.fixture(autouse=True)
def reset_gateway_settings():
    """Gateways keep their settings on the class; restore them after each test."""
    tmdb_settings = (TMDB.base_url, TMDB.api_token, TMDB.timeout)
    trending_settings = (TrendingCounter.base_url, TrendingCounter.api_key, TrendingCounter.timeout)
    yield
    TMDB.base_url, TMDB.api_token, TMDB.timeout = tmdb_settings
    TrendingCounter.base_url, TrendingCounter.api_key, TrendingCounter.timeout = trending_settings
    CatalogService._genres = None
