"""Mapping of (search term, filters, page) to a catalog query descriptor.

Search and filters are mutually exclusive: a non-empty term selects the
free-text search endpoint and every filter is dropped; an empty term selects
the discover endpoint, sorted by popularity, narrowed by whichever filters are set.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

RATING_THRESHOLDS = (5, 6, 7, 8, 9)
DEFAULT_SORT = "popularity.desc"


class QueryMode(Enum):
    SEARCH = "search"
    DISCOVER = "discover"


@dataclass(frozen=True)
class FilterSet:
    """Genre, minimum rating and release year filters for discover mode."""

    genres: frozenset[int] = field(default_factory=frozenset)
    rating: int | None = None
    year: int | None = None

    def __post_init__(self):
        # Accept any iterable of ids but always store a frozenset so the value stays hashable
        object.__setattr__(self, "genres", frozenset(self.genres))
        self._validate()

    def _validate(self):
        if self.rating is not None and self.rating not in RATING_THRESHOLDS:
            raise ValueError(
                f"Invalid rating '{self.rating}'. Allowed ratings: {', '.join(map(str, RATING_THRESHOLDS))}"
            )
        if self.year is not None and not (1000 <= self.year <= 9999):
            raise ValueError(f"Invalid year '{self.year}'. Expected a 4-digit year")

    def is_empty(self) -> bool:
        return not self.genres and self.rating is None and self.year is None

    def active_count(self) -> int:
        """Number of active filters, counting each genre separately."""
        return len(self.genres) + (self.rating is not None) + (self.year is not None)


@dataclass(frozen=True)
class QueryDescriptor:
    mode: QueryMode
    term: str
    filters: FilterSet
    page: int = 1

    @property
    def identity(self) -> tuple[str, FilterSet]:
        """The query without its page number."""
        return self.term, self.filters

    def params(self) -> dict[str, str]:
        """Query-string parameters for the endpoint selected by ``mode``."""
        if self.mode is QueryMode.SEARCH:
            return {"query": self.term, "page": str(self.page)}

        params = {"sort_by": DEFAULT_SORT, "page": str(self.page)}
        if self.filters.genres:
            params["with_genres"] = ",".join(str(genre_id) for genre_id in sorted(self.filters.genres))
        if self.filters.rating is not None:
            params["vote_average.gte"] = str(self.filters.rating)
        if self.filters.year is not None:
            params["year"] = str(self.filters.year)
        return params


def normalize_term(term: str | None) -> str:
    return (term or "").strip()


def build_query(term: str | None, filters: FilterSet | None = None, page: int = 1) -> QueryDescriptor:
    """Build the descriptor for one page of the (term, filters) query."""
    if page < 1:
        raise ValueError(f"Invalid page '{page}'. Pages start at 1")

    term = normalize_term(term)
    if term:
        return QueryDescriptor(mode=QueryMode.SEARCH, term=term, filters=FilterSet(), page=page)
    return QueryDescriptor(mode=QueryMode.DISCOVER, term="", filters=filters or FilterSet(), page=page)


def filters_from_values(genres: Iterable[int] = (), rating: int | None = None, year: int | None = None) -> FilterSet:
    """Build a FilterSet from raw widget values, treating blanks as unset."""
    return FilterSet(genres=frozenset(genres), rating=rating or None, year=year or None)
