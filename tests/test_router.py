"""Tests for open-request routing in lens_viewer/windowing/router.py."""

from __future__ import annotations

import asyncio

import pytest

from lens_viewer.data_formats import Failure, LineDelimited, PlainJson
from lens_viewer.windowing import (
    AppReady,
    Bounds,
    CreateWindow,
    OpenBehavior,
    OpenFileRequested,
    OpenRequest,
    OpenRouter,
    OsOpenFile,
    QueueRequest,
    ReuseWindow,
    WindowClosed,
    WindowFocused,
    WindowRegistry,
    decide,
)
from lens_viewer.windowing.router import OPEN_FAILED_TITLE

from conftest import FakeHost, GatedIngester, write_jsonl


async def _ready_with_window(router: OpenRouter) -> int:
    """Bring the router to ready with one empty window and return its id."""
    await router.on_ready()
    return router.registry.ids()[0]


async def _wait_for(predicate, timeout: float = 5.0) -> None:
    """Yield to the loop until predicate() holds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.005)


class TestDecide:
    """The pure routing decision."""

    def test_queue_when_no_window_and_not_ready(self, registry):
        assert decide(OpenRequest("a.json"), registry, OpenBehavior.NEW_WINDOW, False) == QueueRequest()

    def test_create_when_no_window_and_ready(self, registry):
        decision = decide(OpenRequest("a.json"), registry, OpenBehavior.NEW_WINDOW, True)
        assert decision == CreateWindow(reference=None)

    def test_empty_target_is_reused_under_new_window_policy(self, registry):
        registry.register(1)
        decision = decide(OpenRequest("a.json", 1), registry, OpenBehavior.NEW_WINDOW, True)
        assert decision == ReuseWindow(1)

    def test_full_target_creates_under_new_window_policy(self, registry):
        registry.register(1)
        registry.set_has_content(1, True)
        registry.set_focused(1)
        decision = decide(OpenRequest("a.json", 1), registry, OpenBehavior.NEW_WINDOW, True)
        assert decision == CreateWindow(reference=1)

    def test_full_target_reused_under_reuse_policy(self, registry):
        registry.register(1)
        registry.set_has_content(1, True)
        decision = decide(OpenRequest("a.json", 1), registry, OpenBehavior.REUSE_WINDOW, True)
        assert decision == ReuseWindow(1)

    def test_reuse_if_empty_false_forces_new_window(self, registry):
        registry.register(1)
        request = OpenRequest("a.json", 1, reuse_if_empty=False)
        assert decide(request, registry, OpenBehavior.NEW_WINDOW, True) == CreateWindow(1)
        assert decide(request, registry, OpenBehavior.REUSE_WINDOW, True) == ReuseWindow(1)

    def test_closed_requester_falls_back_to_focused(self, registry):
        registry.register(1)
        registry.register(2)
        registry.set_focused(2)
        decision = decide(OpenRequest("a.json", 99), registry, OpenBehavior.NEW_WINDOW, True)
        assert decision == ReuseWindow(2)

    def test_new_window_cascades_from_focused_not_requester(self, registry):
        for window_id in (1, 2):
            registry.register(window_id)
            registry.set_has_content(window_id, True)
        registry.set_focused(2)
        decision = decide(OpenRequest("a.json", 1), registry, OpenBehavior.NEW_WINDOW, True)
        assert decision == CreateWindow(reference=2)


class TestRouteNewWindowPolicy:
    """OpenBehavior.NEW_WINDOW."""

    @pytest.mark.asyncio
    async def test_two_files_from_full_window_give_two_windows(self, router, host, sample_files):
        """A then B from a window with content end up in distinct windows."""
        first = await _ready_with_window(router)
        router.registry.set_has_content(first, True)

        outcome_a = await router.route(OpenRequest(sample_files["a"], first))
        outcome_b = await router.route(OpenRequest(sample_files["b"], first))

        assert outcome_a.created and outcome_b.created
        assert outcome_a.window_id != outcome_b.window_id
        assert first not in (outcome_a.window_id, outcome_b.window_id)
        assert router.registry.has_content(outcome_a.window_id) is True
        assert router.registry.has_content(outcome_b.window_id) is True
        assert host.delivered_paths(outcome_a.window_id) == [sample_files["a"]]
        assert host.delivered_paths(outcome_b.window_id) == [sample_files["b"]]
        assert len(router.registry) == 3

    @pytest.mark.asyncio
    async def test_first_file_fills_empty_window(self, router, host, sample_files):
        first = await _ready_with_window(router)

        outcome = await router.route(OpenRequest(sample_files["a"], first))

        assert outcome.window_id == first
        assert not outcome.created
        assert outcome.delivered
        assert isinstance(outcome.result, LineDelimited)
        assert router.registry.has_content(first) is True
        assert len(router.registry) == 1

    @pytest.mark.asyncio
    async def test_new_window_is_focused_and_cascaded(self, router, host, sample_files):
        first = await _ready_with_window(router)
        router.registry.set_has_content(first, True)

        outcome = await router.route(OpenRequest(sample_files["doc"], first))

        first_bounds = router.registry.bounds(first)
        new_bounds = router.registry.bounds(outcome.window_id)
        assert router.registry.focused() == outcome.window_id
        assert new_bounds == Bounds(first_bounds.x + 30, first_bounds.y + 30, 1200, 800)

    @pytest.mark.asyncio
    async def test_ready_with_no_windows_creates_one(self, router, host, sample_files):
        await router.on_ready()
        router.on_window_closed(router.registry.ids()[0])

        outcome = await router.route(OpenRequest(sample_files["doc"]))

        assert outcome.created
        assert not outcome.queued
        assert host.delivered_paths(outcome.window_id) == [sample_files["doc"]]


class TestRouteReusePolicy:
    """OpenBehavior.REUSE_WINDOW."""

    @pytest.mark.asyncio
    async def test_both_files_go_to_the_same_window(self, host, sample_files):
        router = OpenRouter(host, open_behavior=OpenBehavior.REUSE_WINDOW)
        first = await _ready_with_window(router)

        outcome_a = await router.route(OpenRequest(sample_files["a"], first))
        outcome_b = await router.route(OpenRequest(sample_files["b"], first))

        assert outcome_a.window_id == outcome_b.window_id == first
        assert not outcome_b.created
        assert host.created_ids == [first]
        assert host.delivered_paths(first) == [sample_files["a"], sample_files["b"]]
        assert router.registry.get(first).path == sample_files["b"]

    @pytest.mark.asyncio
    async def test_policy_change_applies_to_next_request(self, router, host, sample_files):
        first = await _ready_with_window(router)
        router.registry.set_has_content(first, True)
        router.set_open_behavior("reuse-window")

        outcome = await router.route(OpenRequest(sample_files["a"], first))

        assert outcome.window_id == first
        assert host.created_ids == [first]

    def test_set_open_behavior_rejects_unknown(self, router):
        with pytest.raises(ValueError):
            router.set_open_behavior("sideways")
        assert router.open_behavior is OpenBehavior.NEW_WINDOW


class TestPendingRequests:
    """Requests before readiness are queued and replayed in order."""

    @pytest.mark.asyncio
    async def test_two_queued_requests_become_two_windows_in_order(self, router, host, sample_files):
        outcome_a = await router.dispatch(OsOpenFile(sample_files["a"]))
        outcome_b = await router.dispatch(OsOpenFile(sample_files["doc"]))
        assert outcome_a.queued and outcome_b.queued
        assert host.created == []

        outcomes = await router.dispatch(AppReady())

        assert [o.window_id for o in outcomes] == host.created_ids == [1, 2]
        assert host.delivered_paths(1) == [sample_files["a"]]
        assert host.delivered_paths(2) == [sample_files["doc"]]
        assert isinstance(outcomes[1].result, PlainJson)
        assert all(o.created and o.delivered for o in outcomes)

    @pytest.mark.asyncio
    async def test_queued_window_order_is_arrival_order_even_if_reads_finish_reversed(
        self, host, tmp_path
    ):
        ingester = GatedIngester()
        router = OpenRouter(host, ingester)
        first = str(write_jsonl(tmp_path / "first.jsonl", [1]))
        second = str(write_jsonl(tmp_path / "second.jsonl", [2]))
        await router.route(OpenRequest(first))
        await router.route(OpenRequest(second))

        ready = asyncio.ensure_future(router.on_ready())
        await asyncio.sleep(0)
        ingester.release(second)
        await _wait_for(lambda: len(host.delivered) == 1)
        ingester.release(first)
        outcomes = await ready

        assert host.created_ids == [1, 2]
        assert [o.result.path for o in outcomes] == [first, second]
        assert [wid for wid, _ in host.delivered] == [2, 1]

    @pytest.mark.asyncio
    async def test_empty_queue_creates_one_default_window(self, router, host):
        outcomes = await router.on_ready()
        assert outcomes == []
        assert len(host.created) == 1
        assert router.registry.has_content(host.created_ids[0]) is False
        assert host.delivered == []

    @pytest.mark.asyncio
    async def test_ready_is_idempotent(self, router, host):
        await router.on_ready()
        await router.on_ready()
        assert len(host.created) == 1
        assert router.ready

    @pytest.mark.asyncio
    async def test_queue_unused_after_ready(self, router, host, sample_files):
        await router.route(OpenRequest(sample_files["a"]))
        await router.on_ready()
        assert router.pending.closed
        assert len(router.pending) == 0

        outcome = await router.dispatch(OsOpenFile(sample_files["b"]))

        assert not outcome.queued
        assert len(router.pending) == 0

    @pytest.mark.asyncio
    async def test_first_queued_window_is_centred(self, router, host, sample_files):
        await router.route(OpenRequest(sample_files["a"]))
        await router.route(OpenRequest(sample_files["b"]))
        await router.on_ready()

        (_, first_bounds), (_, second_bounds) = host.created
        assert first_bounds == Bounds(360, 140, 1200, 800)
        assert second_bounds == Bounds(390, 170, 1200, 800)


class TestFailures:
    """Failed reads are surfaced as errors, not content."""

    @pytest.mark.asyncio
    async def test_failure_leaves_content_flag_untouched(self, router, host, tmp_path):
        first = await _ready_with_window(router)
        missing = str(tmp_path / "missing.json")

        outcome = await router.route(OpenRequest(missing, first))

        assert not outcome.delivered
        assert isinstance(outcome.result, Failure)
        assert router.registry.has_content(first) is False
        assert host.delivered == []
        assert host.errors == [(first, OPEN_FAILED_TITLE, outcome.result.reason)]

    @pytest.mark.asyncio
    async def test_failure_in_full_window_keeps_it_full(self, router, host, sample_files, tmp_path):
        router.set_open_behavior(OpenBehavior.REUSE_WINDOW)
        first = await _ready_with_window(router)
        await router.route(OpenRequest(sample_files["a"], first))

        await router.route(OpenRequest(str(tmp_path / "missing.jsonl"), first))

        assert router.registry.has_content(first) is True
        assert router.registry.get(first).path == sample_files["a"]


class TestConcurrentLoads:
    """Reads suspend, so other requests can be routed meanwhile."""

    @pytest.mark.asyncio
    async def test_closing_window_mid_load_discards_result(self, host, sample_files):
        ingester = GatedIngester()
        router = OpenRouter(host, ingester)
        first = await _ready_with_window(router)

        task = asyncio.ensure_future(router.route(OpenRequest(sample_files["a"], first)))
        await asyncio.sleep(0)
        await router.dispatch(WindowClosed(first))
        ingester.release(sample_files["a"])
        outcome = await task

        assert not outcome.delivered
        assert host.delivered == []
        assert host.errors == []
        assert first not in router.registry

    @pytest.mark.asyncio
    async def test_content_flag_set_only_after_ingest_completes(self, host, sample_files):
        """A second request during the first read still sees an empty window."""
        ingester = GatedIngester()
        router = OpenRouter(host, ingester)
        first = await _ready_with_window(router)

        task_a = asyncio.ensure_future(router.route(OpenRequest(sample_files["a"], first)))
        await asyncio.sleep(0)
        assert router.registry.has_content(first) is False

        task_b = asyncio.ensure_future(router.route(OpenRequest(sample_files["b"], first)))
        await asyncio.sleep(0)
        assert host.created_ids == [first]

        ingester.release(sample_files["b"])
        outcome_b = await task_b
        ingester.release(sample_files["a"])
        outcome_a = await task_a

        # Latest request wins; the older read is dropped
        assert outcome_b.delivered
        assert not outcome_a.delivered
        assert host.delivered_paths(first) == [sample_files["b"]]
        assert router.registry.get(first).path == sample_files["b"]

    @pytest.mark.asyncio
    async def test_loading_started_reported_before_read(self, host, sample_files):
        ingester = GatedIngester()
        router = OpenRouter(host, ingester)
        first = await _ready_with_window(router)

        task = asyncio.ensure_future(router.route(OpenRequest(sample_files["doc"], first)))
        await asyncio.sleep(0)
        assert host.loading == [(first, sample_files["doc"])]
        ingester.release(sample_files["doc"])
        await task


class TestEvents:
    """dispatch() covers every router event."""

    @pytest.mark.asyncio
    async def test_focus_event(self, router):
        await router.on_ready()
        router.open_new_window()
        await router.dispatch(WindowFocused(1))
        assert router.registry.focused() == 1

    @pytest.mark.asyncio
    async def test_open_file_requested_event(self, router, host, sample_files):
        first = await _ready_with_window(router)
        outcome = await router.dispatch(OpenFileRequested(OpenRequest(sample_files["a"], first)))
        assert outcome.window_id == first

    @pytest.mark.asyncio
    async def test_unknown_event_raises(self, router):
        with pytest.raises(TypeError):
            await router.dispatch("open")

    @pytest.mark.asyncio
    async def test_open_new_window_is_empty(self, router, host):
        await router.on_ready()
        window_id = router.open_new_window()
        assert router.registry.has_content(window_id) is False
        assert router.registry.focused() == window_id
        assert host.created_ids == [1, 2]


class TestRegistryIsolation:
    def test_router_uses_supplied_registry(self):
        registry = WindowRegistry()
        router = OpenRouter(FakeHost(), registry=registry)
        assert router.registry is registry
