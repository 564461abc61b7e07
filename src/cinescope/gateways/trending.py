import httpx
from loguru import logger

from cinescope.gateways.http import request_json, with_client

DEFAULT_TIMEOUT = 5.0


class TrendingCounter:
    """Gateway to the remote service counting which searches led to which movie."""

    base_url: str | None = None
    api_key: str | None = None
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def configure(cls, base_url: str = None, api_key: str = None, timeout: float = None) -> None:
        cls.base_url = base_url.rstrip("/") if base_url else None
        cls.api_key = api_key
        if timeout:
            cls.timeout = timeout

    @classmethod
    def is_configured(cls) -> bool:
        return bool(cls.base_url)

    @classmethod
    def new_client(cls) -> httpx.AsyncClient:
        headers = {"accept": "application/json"}
        if cls.api_key:
            headers["X-Api-Key"] = cls.api_key
        return httpx.AsyncClient(base_url=cls.base_url or "", headers=headers, timeout=cls.timeout)

    @classmethod
    @with_client
    async def increment(
        cls,
        search_term: str,
        movie_id: int,
        title: str,
        poster_url: str | None,
        *,
        client: httpx.AsyncClient = None,
    ) -> None:
        """Bump the counter for a search term; the server creates the row on first use."""
        logger.info(f"Recording search '{search_term}' -> movie {movie_id}")
        await request_json(
            client,
            "POST",
            "/searches",
            json={"search_term": search_term, "movie_id": movie_id, "title": title, "poster_url": poster_url},
        )

    @classmethod
    @with_client
    async def top(cls, limit: int = 5, *, client: httpx.AsyncClient = None) -> list[dict]:
        """Most searched terms, highest count first."""
        logger.info(f"Fetching top {limit} searches")
        data = await request_json(client, "GET", "/searches/top", params={"limit": limit})
        if isinstance(data, dict):
            data = data.get("documents") or data.get("results") or []
        return [row for row in data if isinstance(row, dict)]
