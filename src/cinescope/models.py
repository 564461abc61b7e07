"""Data carried between the gateways, the services and the UI."""

from dataclasses import dataclass, field

from cinescope.exceptions import RemoteLogicalFailure


@dataclass(frozen=True)
class Movie:
    """A single catalog entry as returned by search and discover."""

    id: int
    title: str
    vote_average: float | None = None
    release_date: str = ""
    original_language: str = ""
    poster_path: str | None = None
    overview: str = ""

    @classmethod
    def from_payload(cls, payload: dict) -> "Movie":
        """Build a movie from one element of a TMDB ``results`` array."""
        if not isinstance(payload, dict) or "id" not in payload:
            raise RemoteLogicalFailure(f"Malformed movie entry: {payload!r}")

        return cls(
            id=payload["id"],
            title=payload.get("title") or payload.get("name") or "Untitled",
            vote_average=payload.get("vote_average"),
            release_date=payload.get("release_date") or "",
            original_language=payload.get("original_language") or "",
            poster_path=payload.get("poster_path"),
            overview=payload.get("overview") or "",
        )


@dataclass(frozen=True)
class CatalogPage:
    """One page of catalog results plus the total page count."""

    items: list[Movie]
    total_pages: int
    page: int = 1

    @classmethod
    def from_payload(cls, payload: dict) -> "CatalogPage":
        """Parse a search/discover response body.

        Raises:
            RemoteLogicalFailure: when the body is not a results page or reports an error.
        """
        if not isinstance(payload, dict):
            raise RemoteLogicalFailure("Catalog response is not a JSON object")

        # TMDB reports errors with success=false; some proxies use the OMDb style Response flag
        if payload.get("success") is False:
            raise RemoteLogicalFailure(payload.get("status_message") or "Catalog reported a failure")
        if payload.get("Response") == "False":
            raise RemoteLogicalFailure(payload.get("Error") or "Failed to fetch movies")

        results = payload.get("results") or []
        if not isinstance(results, list):
            raise RemoteLogicalFailure("Catalog response has no results list")

        try:
            total_pages = int(payload.get("total_pages") or 0)
            page = int(payload.get("page") or 1)
        except (TypeError, ValueError) as e:
            raise RemoteLogicalFailure(f"Invalid pagination in catalog response: {e}")

        return cls(items=[Movie.from_payload(item) for item in results], total_pages=total_pages, page=page)


@dataclass(frozen=True)
class Genre:
    id: int
    name: str


@dataclass(frozen=True)
class CastMember:
    name: str
    character: str = ""


@dataclass(frozen=True)
class MovieDetails:
    """Full record shown in the movie modal."""

    id: int
    title: str
    tagline: str = ""
    overview: str = ""
    release_date: str = ""
    runtime: int | None = None
    vote_average: float | None = None
    vote_count: int = 0
    original_language: str = ""
    genres: list[str] = field(default_factory=list)
    budget: int = 0
    revenue: int = 0
    homepage: str = ""
    poster_path: str | None = None
    cast: list[CastMember] = field(default_factory=list)

    @classmethod
    def from_payloads(cls, details: dict, credits: dict | None = None, cast_limit: int = 10) -> "MovieDetails":
        """Merge the ``/movie/{id}`` and ``/movie/{id}/credits`` bodies."""
        if not isinstance(details, dict) or "id" not in details:
            raise RemoteLogicalFailure("Movie details response is malformed")

        cast_payload = (credits or {}).get("cast") or []
        cast = [
            CastMember(name=member.get("name", ""), character=member.get("character") or "")
            for member in cast_payload[:cast_limit]
            if isinstance(member, dict)
        ]

        return cls(
            id=details["id"],
            title=details.get("title") or "Untitled",
            tagline=details.get("tagline") or "",
            overview=details.get("overview") or "",
            release_date=details.get("release_date") or "",
            runtime=details.get("runtime"),
            vote_average=details.get("vote_average"),
            vote_count=details.get("vote_count") or 0,
            original_language=details.get("original_language") or "",
            genres=[genre.get("name", "") for genre in details.get("genres") or []],
            budget=details.get("budget") or 0,
            revenue=details.get("revenue") or 0,
            homepage=details.get("homepage") or "",
            poster_path=details.get("poster_path"),
            cast=cast,
        )


@dataclass(frozen=True)
class TrendingEntry:
    """A search term together with how often it was searched."""

    search_term: str
    count: int
    movie_id: int | None = None
    title: str = ""
    poster_url: str | None = None

    @classmethod
    def from_payload(cls, payload: dict) -> "TrendingEntry":
        return cls(
            search_term=payload.get("search_term") or payload.get("searchTerm") or "",
            count=int(payload.get("count") or 0),
            movie_id=payload.get("movie_id"),
            title=payload.get("title") or "",
            poster_url=payload.get("poster_url"),
        )
