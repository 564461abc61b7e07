from cinescope.gateways.trending import TrendingCounter
from cinescope.models import Movie, TrendingEntry
from cinescope.ui.constants import TRENDING_LIMIT
from cinescope.ui.utils import build_poster_url


class TrendingService:
    image_base_url: str | None = None

    @classmethod
    async def record_search(cls, term: str, movie: Movie) -> None:
        """Count a search term together with the top movie it produced."""
        await TrendingCounter.increment(
            term,
            movie.id,
            movie.title,
            build_poster_url(movie.poster_path, cls.image_base_url),
        )

    @classmethod
    async def top_searches(cls, limit: int = TRENDING_LIMIT) -> list[TrendingEntry]:
        """Most searched terms, highest count first."""
        rows = await TrendingCounter.top(limit)
        entries = [TrendingEntry.from_payload(row) for row in rows]

        return sorted(entries, key=lambda entry: entry.count, reverse=True)[:limit]
