from dataclasses import dataclass, field

from cinescope.models import Movie


@dataclass(frozen=True)
class ResultSnapshot:
    """Immutable view of the result list handed to the presentation layer."""

    items: tuple[Movie, ...]
    current_page: int
    total_pages: int
    is_loading: bool
    is_loading_more: bool
    error_message: str | None
    epoch: int = 0

    @property
    def has_more(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def is_end_of_results(self) -> bool:
        return not self.has_more and bool(self.items)


@dataclass
class ResultState:
    """Authoritative item list and pagination counters.

    Only the fetch orchestrator calls the mutating methods.
    """

    items: list[Movie] = field(default_factory=list)
    current_page: int = 0
    total_pages: int = 0
    is_loading: bool = False
    is_loading_more: bool = False
    error_message: str | None = None

    @property
    def has_more(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def is_end_of_results(self) -> bool:
        return not self.has_more and bool(self.items)

    def reset(self) -> None:
        self.items = []
        self.current_page = 0
        self.total_pages = 0
        self.is_loading = False
        self.is_loading_more = False
        self.error_message = None

    def begin_replace(self) -> None:
        self.reset()
        self.is_loading = True

    def begin_append(self) -> None:
        self.is_loading_more = True
        self.error_message = None

    def apply_page(self, page: int, items: list[Movie], total_pages: int, append: bool) -> None:
        """Store a successful page: replace the list for page 1, extend it otherwise."""
        self.items = self.items + list(items) if append else list(items)
        self.current_page = page
        self.total_pages = total_pages
        self.is_loading = False
        self.is_loading_more = False
        self.error_message = None

    def fail(self, message: str, append: bool) -> None:
        """Record a failed fetch. A failed append keeps what is already listed."""
        if not append:
            self.items = []
            self.current_page = 0
            self.total_pages = 0
        self.is_loading = False
        self.is_loading_more = False
        self.error_message = message

    def snapshot(self, epoch: int = 0) -> ResultSnapshot:
        return ResultSnapshot(
            items=tuple(self.items),
            current_page=self.current_page,
            total_pages=self.total_pages,
            is_loading=self.is_loading,
            is_loading_more=self.is_loading_more,
            error_message=self.error_message,
            epoch=epoch,
        )
