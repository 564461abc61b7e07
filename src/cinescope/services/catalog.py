import asyncio

from cinescope.gateways.tmdb import TMDB
from cinescope.models import CatalogPage, Genre, MovieDetails
from cinescope.services.query_builder import QueryDescriptor, QueryMode

CAST_LIMIT = 10


class CatalogService:
    _genres: list[Genre] | None = None

    @classmethod
    async def fetch_page(cls, descriptor: QueryDescriptor) -> CatalogPage:
        """Fetch one page of results for a query descriptor."""
        if descriptor.mode is QueryMode.SEARCH:
            payload = await TMDB.search_movies(descriptor.params())
        else:
            payload = await TMDB.discover_movies(descriptor.params())

        return CatalogPage.from_payload(payload)

    @classmethod
    async def list_genres(cls) -> list[Genre]:
        """List the genre reference data, fetched once and then served from memory."""
        if cls._genres is None:
            raw_genres = await TMDB.list_genres()
            cls._genres = [Genre(id=genre["id"], name=genre.get("name", "")) for genre in raw_genres if "id" in genre]

        return cls._genres

    @classmethod
    async def get_movie_details(cls, movie_id: int) -> MovieDetails:
        """Fetch the details and the credits of a movie concurrently."""
        details, credits = await asyncio.gather(TMDB.get_movie(movie_id), TMDB.get_credits(movie_id))

        return MovieDetails.from_payloads(details, credits, cast_limit=CAST_LIMIT)
