"""Fetch orchestration for the movie result list.

The orchestrator is the only writer of ``ResultState``. It turns four kinds
of trigger (initial load, committed search term, filter change and
scroll-bottom) into replace or append fetches, and tags every fetch with the
epoch of the query identity it was issued for. A response whose epoch is no
longer current is dropped without touching the state.
"""

import asyncio
from enum import Enum
from typing import Awaitable, Callable, Protocol

from loguru import logger

from cinescope.exceptions import CatalogError
from cinescope.models import CatalogPage, Movie
from cinescope.services.query_builder import FilterSet, QueryDescriptor, QueryMode, build_query, normalize_term
from cinescope.services.results import ResultSnapshot, ResultState

GENERIC_ERROR_MESSAGE = "Error fetching movies. Please try again later."


class CatalogSource(Protocol):
    def fetch_page(self, descriptor: QueryDescriptor) -> Awaitable[CatalogPage]: ...


class SearchRecorder(Protocol):
    def record_search(self, term: str, movie: Movie) -> Awaitable[None]: ...


class FetchState(Enum):
    IDLE = "idle"
    LOADING_REPLACE = "loading_replace"
    LOADING_APPEND = "loading_append"
    ERROR = "error"


class FetchKind(Enum):
    REPLACE = "replace"
    APPEND = "append"


class FetchOrchestrator:
    def __init__(self, catalog: CatalogSource, trending: SearchRecorder | None = None):
        self._catalog = catalog
        self._trending = trending
        self._term = ""
        self._filters = FilterSet()
        self._epoch = 0
        self._state = FetchState.IDLE
        self._results = ResultState()
        self._listeners: list[Callable[[ResultSnapshot], object]] = []
        self._tasks: set[asyncio.Task] = set()
        self._loaded = False

    # -------------------------Read-only views------------------------- #

    @property
    def term(self) -> str:
        return self._term

    @property
    def filters(self) -> FilterSet:
        return self._filters

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def state(self) -> FetchState:
        return self._state

    @property
    def results(self) -> ResultSnapshot:
        return self._results.snapshot(self._epoch)

    @property
    def in_flight(self) -> bool:
        """True while a fetch of the current epoch is running."""
        return self._state in (FetchState.LOADING_REPLACE, FetchState.LOADING_APPEND)

    @property
    def is_fetching_more(self) -> bool:
        return self._state is FetchState.LOADING_APPEND

    def subscribe(self, listener: Callable[[ResultSnapshot], object]) -> Callable[[], None]:
        """Call ``listener`` with a snapshot after every state transition."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -------------------------Triggers------------------------- #

    def load(self) -> asyncio.Task:
        """Initial load of the current query."""
        return self._change_identity(self._term, self._filters, force=True)

    def reload(self) -> asyncio.Task:
        """Fetch the current query again from page 1 under a new epoch."""
        return self._change_identity(self._term, self._filters, force=True)

    def set_term(self, term: str) -> asyncio.Task | None:
        return self._change_identity(term, self._filters)

    def set_filters(self, filters: FilterSet) -> asyncio.Task | None:
        return self._change_identity(self._term, filters)

    def clear_filters(self) -> asyncio.Task | None:
        return self._change_identity(self._term, FilterSet())

    def request_more(self) -> asyncio.Task | None:
        """Scroll-bottom signal: fetch the next page if one exists and nothing is running."""
        if self._state not in (FetchState.IDLE, FetchState.ERROR):
            return None
        if not self._results.has_more:
            return None

        descriptor = build_query(self._term, self._filters, page=self._results.current_page + 1)
        self._state = FetchState.LOADING_APPEND
        self._results.begin_append()
        logger.info(f"Loading page {descriptor.page} of {self._results.total_pages} (epoch {self._epoch})")
        self._notify()
        return self._spawn(self._run_fetch(self._epoch, descriptor, FetchKind.APPEND))

    # -------------------------Lifecycle------------------------- #

    async def drain(self) -> None:
        """Wait until every fetch and notification task has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def close(self) -> None:
        for task in list(self._tasks):
            task.cancel()
        self._listeners.clear()

    # -------------------------Internals------------------------- #

    def _change_identity(self, term: str, filters: FilterSet, force: bool = False) -> asyncio.Task | None:
        term = normalize_term(term)
        if self._loaded and not force and (term, filters) == (self._term, self._filters):
            return None

        self._loaded = True
        self._term = term
        self._filters = filters
        self._epoch += 1
        self._state = FetchState.LOADING_REPLACE
        self._results.begin_replace()

        descriptor = build_query(term, filters, page=1)
        logger.info(f"Query changed to {descriptor.mode.value} term='{term}' filters={filters} (epoch {self._epoch})")
        self._notify()
        return self._spawn(self._run_fetch(self._epoch, descriptor, FetchKind.REPLACE))

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run_fetch(self, epoch: int, descriptor: QueryDescriptor, kind: FetchKind) -> None:
        try:
            page = await self._catalog.fetch_page(descriptor)
        except Exception as e:
            if epoch != self._epoch:
                logger.debug(f"Dropping failed {kind.value} fetch from superseded epoch {epoch}: {e}")
                return
            if isinstance(e, CatalogError):
                logger.error(f"Error fetching movies for page {descriptor.page}: {e}")
            else:
                logger.exception(f"Unexpected error fetching movies for page {descriptor.page}")
            self._results.fail(GENERIC_ERROR_MESSAGE, append=kind is FetchKind.APPEND)
            self._state = FetchState.ERROR
            self._notify()
            return

        if epoch != self._epoch:
            logger.debug(f"Dropping {kind.value} response for page {descriptor.page} from superseded epoch {epoch}")
            return

        self._results.apply_page(descriptor.page, page.items, page.total_pages, append=kind is FetchKind.APPEND)
        self._state = FetchState.IDLE
        logger.info(
            f"Loaded page {descriptor.page}/{page.total_pages} with {len(page.items)} movies "
            f"({len(self._results.items)} listed)"
        )
        self._notify()

        if kind is FetchKind.REPLACE and descriptor.mode is QueryMode.SEARCH and page.items and self._trending:
            self._spawn(self._record_search(descriptor.term, page.items[0]))

    async def _record_search(self, term: str, movie: Movie) -> None:
        try:
            await self._trending.record_search(term, movie)
        except Exception as e:
            logger.warning(f"Could not record search '{term}' for trending: {e}")

    def _notify(self) -> None:
        snapshot = self._results.snapshot(self._epoch)
        for listener in list(self._listeners):
            listener(snapshot)
