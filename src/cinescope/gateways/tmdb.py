import httpx
from loguru import logger

from cinescope.gateways.http import request_json, with_client

DEFAULT_BASE_URL = "https://api.themoviedb.org/3"
DEFAULT_TIMEOUT = 10.0


class TMDB:
    """Thin async gateway over the TMDB v3 REST API."""

    base_url: str = DEFAULT_BASE_URL
    api_token: str | None = None
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def configure(cls, base_url: str = None, api_token: str = None, timeout: float = None) -> None:
        """Set the connection settings used by every gateway call."""
        if base_url:
            cls.base_url = base_url.rstrip("/")
        if api_token is not None:
            cls.api_token = api_token
        if timeout:
            cls.timeout = timeout

    @classmethod
    def headers(cls) -> dict[str, str]:
        headers = {"accept": "application/json"}
        if cls.api_token:
            headers["Authorization"] = f"Bearer {cls.api_token}"
        return headers

    @classmethod
    def new_client(cls) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=cls.base_url, headers=cls.headers(), timeout=cls.timeout)

    # -------------------------Catalog------------------------- #

    @classmethod
    @with_client
    async def search_movies(cls, params: dict[str, str], *, client: httpx.AsyncClient = None) -> dict:
        """Free-text search, one page at a time."""
        logger.info(f"Searching movies with params {params}")
        return await request_json(client, "GET", "/search/movie", params=params)

    @classmethod
    @with_client
    async def discover_movies(cls, params: dict[str, str], *, client: httpx.AsyncClient = None) -> dict:
        """Browse popular movies, optionally narrowed by genre, rating and year."""
        logger.info(f"Discovering movies with params {params}")
        return await request_json(client, "GET", "/discover/movie", params=params)

    # -------------------------Reference data------------------------- #

    @classmethod
    @with_client
    async def list_genres(cls, *, client: httpx.AsyncClient = None) -> list[dict]:
        logger.info("Listing movie genres")
        data = await request_json(client, "GET", "/genre/movie/list")
        return data.get("genres", []) if isinstance(data, dict) else []

    # -------------------------Details------------------------- #

    @classmethod
    @with_client
    async def get_movie(cls, movie_id: int, *, client: httpx.AsyncClient = None) -> dict:
        logger.info(f"Fetching details for movie {movie_id}")
        return await request_json(client, "GET", f"/movie/{movie_id}")

    @classmethod
    @with_client
    async def get_credits(cls, movie_id: int, *, client: httpx.AsyncClient = None) -> dict:
        logger.info(f"Fetching credits for movie {movie_id}")
        return await request_json(client, "GET", f"/movie/{movie_id}/credits")
