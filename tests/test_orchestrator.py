import pytest

from cinescope.exceptions import RemoteLogicalFailure, TransportFailure
from cinescope.services.orchestrator import GENERIC_ERROR_MESSAGE, FetchOrchestrator, FetchState
from cinescope.services.query_builder import FilterSet, QueryMode
from tests.conftest import RecordingTrending, movie, pump

A, B, C, D, E = (movie(i, title) for i, title in enumerate("ABCDE", 1))


async def loaded(orchestrator, catalog, items, total_pages, index=None):
    """Run the initial load and answer it."""
    task = orchestrator.load()
    await pump()
    catalog.resolve(len(catalog.calls) - 1 if index is None else index, items, total_pages)
    await task


@pytest.mark.asyncio
async def test_initial_load_fetches_first_discover_page(catalog):
    orchestrator = FetchOrchestrator(catalog)

    task = orchestrator.load()
    await pump()

    assert orchestrator.state is FetchState.LOADING_REPLACE
    assert orchestrator.results.is_loading
    assert len(catalog.calls) == 1
    assert catalog.calls[0].mode is QueryMode.DISCOVER
    assert catalog.calls[0].page == 1

    catalog.resolve(0, [A, B], 5)
    await task

    results = orchestrator.results
    assert orchestrator.state is FetchState.IDLE
    assert results.items == (A, B)
    assert results.current_page == 1
    assert results.has_more
    assert not results.is_loading


@pytest.mark.asyncio
async def test_batman_scenario(catalog):
    orchestrator = FetchOrchestrator(catalog)

    task = orchestrator.set_term("batman")
    await pump()
    assert catalog.calls[0].mode is QueryMode.SEARCH
    assert catalog.calls[0].term == "batman"
    catalog.resolve(0, [A, B], 3)
    await task
    assert orchestrator.results.items == (A, B)
    assert orchestrator.results.has_more

    task = orchestrator.request_more()
    await pump()
    assert catalog.calls[1].page == 2
    assert catalog.calls[1].term == "batman"
    catalog.resolve(1, [C, D], 3)
    await task
    assert orchestrator.results.items == (A, B, C, D)
    assert orchestrator.results.has_more

    task = orchestrator.request_more()
    await pump()
    assert catalog.calls[2].page == 3
    catalog.resolve(2, [E], 3)
    await task

    results = orchestrator.results
    assert results.items == (A, B, C, D, E)
    assert not results.has_more
    assert results.is_end_of_results


@pytest.mark.asyncio
async def test_scroll_after_first_of_five_pages_fetches_page_two(catalog):
    orchestrator = FetchOrchestrator(catalog)
    await loaded(orchestrator, catalog, [A, B], 5)

    task = orchestrator.request_more()
    await pump()

    assert task is not None
    assert orchestrator.state is FetchState.LOADING_APPEND
    assert orchestrator.is_fetching_more
    assert orchestrator.results.is_loading_more
    assert catalog.calls[-1].page == 2
    catalog.resolve(1, [C], 5)
    await task
    assert orchestrator.results.current_page == 2


@pytest.mark.asyncio
async def test_filter_change_clears_results_before_fetch_resolves(catalog):
    orchestrator = FetchOrchestrator(catalog)
    await loaded(orchestrator, catalog, [A, B], 3)
    epoch = orchestrator.epoch

    task = orchestrator.set_filters(FilterSet(genres={28}, rating=7))

    results = orchestrator.results
    assert results.items == ()
    assert results.current_page == 0
    assert results.is_loading
    assert orchestrator.epoch == epoch + 1

    await pump()
    descriptor = catalog.calls[-1]
    assert descriptor.page == 1
    assert descriptor.params()["with_genres"] == "28"
    assert descriptor.params()["vote_average.gte"] == "7"
    catalog.resolve(1, [C], 1)
    await task
    assert orchestrator.results.items == (C,)


@pytest.mark.asyncio
async def test_failed_append_keeps_existing_items(catalog):
    orchestrator = FetchOrchestrator(catalog)
    await loaded(orchestrator, catalog, [A, B], 3)

    task = orchestrator.request_more()
    await pump()
    catalog.reject(1, TransportFailure("connection reset"))
    await task

    results = orchestrator.results
    assert orchestrator.state is FetchState.ERROR
    assert results.items == (A, B)
    assert results.current_page == 1
    assert results.error_message == GENERIC_ERROR_MESSAGE
    assert not results.is_loading_more


@pytest.mark.asyncio
async def test_failed_replace_clears_items(catalog):
    orchestrator = FetchOrchestrator(catalog)
    await loaded(orchestrator, catalog, [A, B], 3)

    task = orchestrator.set_term("nothing")
    await pump()
    catalog.reject(1, RemoteLogicalFailure("Invalid API key", 401))
    await task

    results = orchestrator.results
    assert orchestrator.state is FetchState.ERROR
    assert results.items == ()
    assert not results.has_more
    assert results.error_message == GENERIC_ERROR_MESSAGE


@pytest.mark.asyncio
async def test_unexpected_error_takes_failure_path(catalog):
    orchestrator = FetchOrchestrator(catalog)

    task = orchestrator.load()
    await pump()
    catalog.reject(0, KeyError("results"))
    await task

    assert orchestrator.state is FetchState.ERROR
    assert orchestrator.results.error_message == GENERIC_ERROR_MESSAGE


@pytest.mark.asyncio
async def test_scroll_retries_a_failed_append(catalog):
    orchestrator = FetchOrchestrator(catalog)
    await loaded(orchestrator, catalog, [A, B], 3)
    task = orchestrator.request_more()
    await pump()
    catalog.reject(1, TransportFailure("timeout"))
    await task

    task = orchestrator.request_more()
    await pump()

    assert catalog.calls[2].page == 2
    assert orchestrator.results.error_message is None
    catalog.resolve(2, [C, D], 3)
    await task
    assert orchestrator.results.items == (A, B, C, D)
    assert orchestrator.state is FetchState.IDLE


@pytest.mark.asyncio
async def test_append_in_flight_is_dropped_after_filter_change(catalog):
    orchestrator = FetchOrchestrator(catalog)
    await loaded(orchestrator, catalog, [A, B], 3)

    append_task = orchestrator.request_more()
    await pump()
    replace_task = orchestrator.set_filters(FilterSet(year=1999))
    await pump()

    # The new query answers first, the old append arrives afterwards
    catalog.resolve(2, [E], 1)
    await replace_task
    catalog.resolve(1, [C, D], 3)
    await append_task

    results = orchestrator.results
    assert results.items == (E,)
    assert results.current_page == 1
    assert results.total_pages == 1
    assert orchestrator.state is FetchState.IDLE


@pytest.mark.asyncio
async def test_superseded_replace_response_is_dropped(catalog):
    orchestrator = FetchOrchestrator(catalog)

    first = orchestrator.set_term("bat")
    await pump()
    second = orchestrator.set_term("batman")
    await pump()

    catalog.resolve(1, [C], 1)
    await second
    catalog.resolve(0, [A, B], 9)
    await first

    assert orchestrator.results.items == (C,)
    assert orchestrator.results.total_pages == 1


@pytest.mark.asyncio
async def test_superseded_failure_is_dropped(catalog):
    orchestrator = FetchOrchestrator(catalog)
    snapshots = []
    orchestrator.subscribe(snapshots.append)

    first = orchestrator.set_term("bat")
    await pump()
    second = orchestrator.set_term("batman")
    await pump()
    catalog.resolve(1, [C], 1)
    await second
    notified = len(snapshots)

    catalog.reject(0, TransportFailure("late"))
    await first

    assert orchestrator.state is FetchState.IDLE
    assert orchestrator.results.error_message is None
    assert len(snapshots) == notified


@pytest.mark.asyncio
async def test_no_fetch_past_the_last_page(catalog):
    orchestrator = FetchOrchestrator(catalog)
    await loaded(orchestrator, catalog, [A, B], 1)

    assert orchestrator.request_more() is None
    assert len(catalog.calls) == 1
    assert orchestrator.results.is_end_of_results


@pytest.mark.asyncio
async def test_scroll_is_ignored_while_a_fetch_runs(catalog):
    orchestrator = FetchOrchestrator(catalog)

    task = orchestrator.load()
    await pump()
    assert orchestrator.request_more() is None

    catalog.resolve(0, [A], 4)
    await task
    append = orchestrator.request_more()
    await pump()
    assert orchestrator.request_more() is None
    assert len(catalog.calls) == 2

    catalog.resolve(1, [B], 4)
    await append


@pytest.mark.asyncio
async def test_unchanged_identity_issues_nothing(catalog):
    orchestrator = FetchOrchestrator(catalog)
    await loaded(orchestrator, catalog, [A], 1)

    assert orchestrator.set_term("") is None
    assert orchestrator.set_term("   ") is None
    assert orchestrator.set_filters(FilterSet()) is None
    assert orchestrator.clear_filters() is None
    assert len(catalog.calls) == 1


@pytest.mark.asyncio
async def test_reload_refetches_same_query_under_new_epoch(catalog):
    orchestrator = FetchOrchestrator(catalog)
    await loaded(orchestrator, catalog, [A], 2)
    epoch = orchestrator.epoch

    task = orchestrator.reload()
    await pump()

    assert orchestrator.epoch == epoch + 1
    assert catalog.calls[-1].page == 1
    catalog.resolve(1, [B], 2)
    await task
    assert orchestrator.results.items == (B,)


@pytest.mark.asyncio
async def test_filters_are_ignored_while_searching(catalog):
    orchestrator = FetchOrchestrator(catalog)
    orchestrator.set_filters(FilterSet(genres={18}))
    task = orchestrator.set_term("heat")
    await pump()

    descriptor = catalog.calls[-1]
    assert descriptor.mode is QueryMode.SEARCH
    assert descriptor.params() == {"query": "heat", "page": "1"}

    for index in range(len(catalog.calls)):
        if not catalog.futures[index].done():
            catalog.resolve(index, [A], 1)
    await task


@pytest.mark.asyncio
async def test_search_results_are_recorded_for_trending(catalog):
    trending = RecordingTrending()
    orchestrator = FetchOrchestrator(catalog, trending)

    task = orchestrator.set_term("alien")
    await pump()
    catalog.resolve(0, [C, D], 2)
    await task
    await orchestrator.drain()
    assert trending.recorded == [("alien", C)]

    # Appends and discover results are not recorded
    task = orchestrator.request_more()
    await pump()
    catalog.resolve(1, [E], 2)
    await task
    task = orchestrator.set_term("")
    await pump()
    catalog.resolve(2, [A], 1)
    await task
    await orchestrator.drain()
    assert trending.recorded == [("alien", C)]


@pytest.mark.asyncio
async def test_empty_search_results_are_not_recorded(catalog):
    trending = RecordingTrending()
    orchestrator = FetchOrchestrator(catalog, trending)

    task = orchestrator.set_term("zzzz")
    await pump()
    catalog.resolve(0, [], 0)
    await task
    await orchestrator.drain()

    assert trending.recorded == []
    assert orchestrator.results.is_empty
    assert not orchestrator.results.is_end_of_results


@pytest.mark.asyncio
async def test_trending_failure_does_not_touch_results(catalog):
    trending = RecordingTrending(error=TransportFailure("counter down"))
    orchestrator = FetchOrchestrator(catalog, trending)

    task = orchestrator.set_term("alien")
    await pump()
    catalog.resolve(0, [C], 1)
    await task
    await orchestrator.drain()

    assert trending.recorded == [("alien", C)]
    assert orchestrator.state is FetchState.IDLE
    assert orchestrator.results.error_message is None
    assert orchestrator.results.items == (C,)


@pytest.mark.asyncio
async def test_listeners_see_each_transition_until_unsubscribed(catalog):
    orchestrator = FetchOrchestrator(catalog)
    snapshots = []
    unsubscribe = orchestrator.subscribe(snapshots.append)

    task = orchestrator.load()
    await pump()
    catalog.resolve(0, [A], 1)
    await task

    assert [snapshot.is_loading for snapshot in snapshots] == [True, False]
    assert snapshots[-1].items == (A,)
    assert snapshots[-1].epoch == orchestrator.epoch

    unsubscribe()
    task = orchestrator.reload()
    await pump()
    catalog.resolve(1, [B], 1)
    await task
    assert len(snapshots) == 2


@pytest.mark.asyncio
async def test_close_cancels_outstanding_fetches(catalog):
    orchestrator = FetchOrchestrator(catalog)
    task = orchestrator.load()
    await pump()

    orchestrator.close()
    await pump()

    assert task.cancelled()
