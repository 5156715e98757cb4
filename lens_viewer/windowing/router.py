"""
Open-request routing.

For every request to open a file the router decides whether to reuse an
existing window or create a new one, ingests the file, and delivers the
result. Requests that arrive before the application is ready are buffered
and replayed in arrival order on the ready transition.

The decision itself is the pure function ``decide()``; ``OpenRouter`` wraps
it with the side effects, all of which go through a ``WindowHost``.

Routing runs on a single event loop. ``route()`` makes its decision and any
registry change before its first ``await``, so requests started in order
are decided in order even though their file reads overlap.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Protocol, Union

from lens_viewer.data_formats import DEFAULT_CHUNK_SIZE, FileIngester
from lens_viewer.data_formats.results import (
    Failure,
    IngestResult,
    LineDelimited,
    PlainJson,
)
from lens_viewer.windowing.events import (
    AppReady,
    OpenFileRequested,
    OpenRequest,
    OsOpenFile,
    RouterEvent,
    WindowClosed,
    WindowFocused,
)
from lens_viewer.windowing.pending import PendingRequestQueue
from lens_viewer.windowing.placement import (
    DEFAULT_WINDOW_HEIGHT,
    DEFAULT_WINDOW_OFFSET,
    DEFAULT_WINDOW_WIDTH,
    Bounds,
    place_new_window,
)
from lens_viewer.windowing.policy import DEFAULT_OPEN_BEHAVIOR, OpenBehavior
from lens_viewer.windowing.registry import WindowId, WindowRegistry

LOGGER = logging.getLogger(__name__)

OPEN_FAILED_TITLE = "Open File Failed"


class WindowHost(Protocol):
    """Boundary between routing and the windowing toolkit."""

    def create_window(self, bounds: Bounds) -> WindowId:
        """Create and show an empty render window, returning its id."""
        ...

    async def wait_until_loaded(self, window_id: WindowId) -> None:
        """Wait until a newly created window can receive content."""
        ...

    def loading_started(self, window_id: WindowId, path: str) -> None:
        """Tell a window that a file is being read for it."""
        ...

    def deliver(self, window_id: WindowId, result: PlainJson | LineDelimited) -> None:
        """Show ingested content in a window, replacing what it showed."""
        ...

    def show_error(self, window_id: WindowId | None, title: str, message: str) -> None:
        """Show a dismissable error notice."""
        ...

    def work_area(self, reference: Bounds | None) -> Bounds:
        """Work area of the display containing ``reference`` (or the primary one)."""
        ...

    def close_window(self, window_id: WindowId) -> None:
        """Close a window; the host reports it back as WindowClosed."""
        ...

    def find_in_page(self, window_id: WindowId, query: str, options: Any) -> Any:
        ...

    def stop_find_in_page(self, window_id: WindowId, action: Any) -> Any:
        ...

    def set_title(self, window_id: WindowId, title: str) -> bool:
        ...

    async def select_file(self, parent: WindowId | None) -> str | None:
        """Run the file-selection dialog; None when cancelled."""
        ...

    def rebuild_menu(self, menu: Any) -> None:
        ...


@dataclass(frozen=True)
class ReuseWindow:
    """Deliver into an existing window."""

    window_id: WindowId


@dataclass(frozen=True)
class CreateWindow:
    """Create a window placed relative to ``reference`` (None: centred)."""

    reference: WindowId | None


@dataclass(frozen=True)
class QueueRequest:
    """Buffer the request until the application is ready."""


RouteDecision = Union[ReuseWindow, CreateWindow, QueueRequest]


@dataclass(frozen=True)
class RouteOutcome:
    """What happened to one open request.

    Attributes:
        window_id: Target window, or None if the request was queued.
        created: True if a new window was created for the request.
        queued: True if the request was buffered until ready.
        delivered: True if content reached the target window.
        result: The ingest result, when the file was read.
    """

    window_id: WindowId | None = None
    created: bool = False
    queued: bool = False
    delivered: bool = False
    result: IngestResult | None = None


def resolve_target(request: OpenRequest, registry: WindowRegistry) -> WindowId | None:
    """Return the requesting window if still registered, else focused-or-any."""
    if request.requesting_window is not None and request.requesting_window in registry:
        return request.requesting_window
    return registry.focused_or_any()


def decide(
    request: OpenRequest,
    registry: WindowRegistry,
    behavior: OpenBehavior,
    ready: bool,
) -> RouteDecision:
    """Decide where an open request goes.

    Rules, in order:
        1. Target is the requesting window if registered, else the focused
           window, else any window.
        2. No target and not ready: queue the request.
        3. Target exists: reuse it if it has no content yet (unless the
           request opted out with ``reuse_if_empty=False``) or if the policy
           is REUSE_WINDOW; otherwise create a new window.
        4. No target but ready: create a new window.

    Examples:
        >>> registry = WindowRegistry()
        >>> decide(OpenRequest("a.json"), registry, OpenBehavior.NEW_WINDOW, ready=False)
        QueueRequest()
        >>> registry.register(1)
        >>> decide(OpenRequest("a.json", 1), registry, OpenBehavior.NEW_WINDOW, ready=True)
        ReuseWindow(window_id=1)
    """
    target = resolve_target(request, registry)
    if target is None:
        if not ready:
            return QueueRequest()
        return CreateWindow(reference=None)

    target_is_empty = registry.has_content(target) is False
    if (target_is_empty and request.reuse_if_empty) or behavior is OpenBehavior.REUSE_WINDOW:
        return ReuseWindow(target)

    reference = registry.focused()
    return CreateWindow(reference=reference if reference is not None else target)


class OpenRouter:
    """Routes open requests to windows and tracks their content state.

    Attributes:
        registry: The window registry; mutated only by this router.
        open_behavior: Process-wide OpenBehavior policy.
    """

    def __init__(
        self,
        host: WindowHost,
        ingester: FileIngester | None = None,
        *,
        registry: WindowRegistry | None = None,
        open_behavior: OpenBehavior = DEFAULT_OPEN_BEHAVIOR,
        window_width: int = DEFAULT_WINDOW_WIDTH,
        window_height: int = DEFAULT_WINDOW_HEIGHT,
        window_offset: int = DEFAULT_WINDOW_OFFSET,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self._host = host
        self._ingester = ingester or FileIngester(chunk_size)
        self.registry = registry or WindowRegistry()
        self.open_behavior = open_behavior
        self._pending = PendingRequestQueue()
        self._ready = False
        self._window_width = window_width
        self._window_height = window_height
        self._window_offset = window_offset
        # Latest load started per window; older loads are superseded
        self._load_serials: dict[WindowId, int] = {}
        self._next_serial = 0

    @property
    def ready(self) -> bool:
        return self._ready

    @property
    def pending(self) -> PendingRequestQueue:
        return self._pending

    @property
    def ingester(self) -> FileIngester:
        return self._ingester

    def set_open_behavior(self, behavior: OpenBehavior | str) -> OpenBehavior:
        """Change the open policy.

        Raises:
            ValueError: If ``behavior`` is a string naming no policy.
        """
        self.open_behavior = OpenBehavior.parse(behavior)
        LOGGER.info("Open behavior set to %s", self.open_behavior.value)
        return self.open_behavior

    async def dispatch(self, event: RouterEvent) -> RouteOutcome | list[RouteOutcome] | None:
        """Apply one event to the routing state.

        Returns:
            The outcome(s) for open requests and the ready transition,
            None for focus and close notifications.
        """
        if isinstance(event, OpenFileRequested):
            return await self.route(event.request)
        if isinstance(event, OsOpenFile):
            return await self.route(OpenRequest(event.path))
        if isinstance(event, AppReady):
            return await self.on_ready()
        if isinstance(event, WindowFocused):
            self.on_window_focused(event.window_id)
            return None
        if isinstance(event, WindowClosed):
            self.on_window_closed(event.window_id)
            return None
        raise TypeError(f"Unknown router event: {event!r}")

    async def route(self, request: OpenRequest) -> RouteOutcome:
        """Route one open request and deliver its content.

        Args:
            request: The request to route.

        Returns:
            A RouteOutcome describing where the file went.
        """
        decision = decide(request, self.registry, self.open_behavior, self._ready)
        LOGGER.info("Routing %s: %s", request.path, decision)

        if isinstance(decision, QueueRequest):
            self._pending.enqueue(request)
            return RouteOutcome(queued=True)

        if isinstance(decision, ReuseWindow):
            return await self._load_into(decision.window_id, request.path, created=False)

        window_id = self._create_window(decision.reference)
        return await self._open_in_created(window_id, request.path)

    async def on_ready(self) -> list[RouteOutcome]:
        """Handle the ready transition.

        Creates one window per queued request in arrival order, or a single
        empty window when nothing was queued. Later calls do nothing.

        Returns:
            Outcomes for the queued requests, in arrival order.
        """
        if self._ready:
            return []
        self._ready = True

        requests = self._pending.drain()
        if not requests:
            self._create_window(None)
            return []

        LOGGER.info("Opening %d queued file(s)", len(requests))
        # Windows are created up front so their order matches arrival order
        window_ids = [self._create_window(self.registry.focused()) for _ in requests]
        return list(
            await asyncio.gather(
                *(
                    self._open_in_created(window_id, request.path)
                    for window_id, request in zip(window_ids, requests)
                )
            )
        )

    def open_new_window(self) -> WindowId:
        """Create an empty window cascaded from the focused one."""
        return self._create_window(self.registry.focused())

    def on_window_focused(self, window_id: WindowId) -> None:
        self.registry.set_focused(window_id)

    def on_window_closed(self, window_id: WindowId) -> None:
        """Forget a closed window; any load in flight for it is discarded."""
        self.registry.unregister(window_id)
        self._load_serials.pop(window_id, None)

    def record_direct_read(self, window_id: WindowId, result: IngestResult) -> None:
        """Note content a window read for itself without routing."""
        if isinstance(result, Failure):
            return
        self.registry.set_has_content(window_id, True, result.path)

    def _create_window(self, reference: WindowId | None) -> WindowId:
        """Create, place, register and focus a new window."""
        reference_bounds = self.registry.bounds(reference)
        bounds = place_new_window(
            reference_bounds,
            self._host.work_area(reference_bounds),
            self._window_width,
            self._window_height,
            self._window_offset,
        )
        window_id = self._host.create_window(bounds)
        self.registry.register(window_id, bounds)
        self.registry.set_focused(window_id)
        LOGGER.info("Created window %s at %s", window_id, bounds)
        return window_id

    async def _open_in_created(self, window_id: WindowId, path: str) -> RouteOutcome:
        """Wait for a new window's initial load, then load a file into it."""
        await self._host.wait_until_loaded(window_id)
        return await self._load_into(window_id, path, created=True)

    async def _load_into(self, window_id: WindowId, path: str, *, created: bool) -> RouteOutcome:
        """Ingest a file and deliver it to a window if the window still wants it."""
        self._next_serial += 1
        serial = self._next_serial
        if window_id in self.registry:
            self._load_serials[window_id] = serial
            self._host.loading_started(window_id, path)

        result = await self._ingester.ingest(path)

        if window_id not in self.registry:
            LOGGER.info("Window %s closed while loading %s; result discarded", window_id, path)
            return RouteOutcome(window_id, created, result=result)
        if self._load_serials.get(window_id) != serial:
            LOGGER.info("Load of %s into window %s superseded; result discarded", path, window_id)
            return RouteOutcome(window_id, created, result=result)

        if isinstance(result, Failure):
            self._host.show_error(window_id, OPEN_FAILED_TITLE, result.reason)
            return RouteOutcome(window_id, created, result=result)

        self._host.deliver(window_id, result)
        self.registry.set_has_content(window_id, True, path)
        return RouteOutcome(window_id, created, delivered=True, result=result)
