"""
Window routing for the viewer.

Usage:
    from lens_viewer.windowing import OpenRouter, OpenRequest

    router = OpenRouter(host)
    await router.route(OpenRequest("data.jsonl"))  # queued until ready
    await router.on_ready()                        # opens one window per queued file
"""

from lens_viewer.windowing.commands import (
    CommandSurface,
    FindOptions,
    FindResult,
    StopFindAction,
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
from lens_viewer.windowing.placement import Bounds, center_in, place_new_window
from lens_viewer.windowing.policy import DEFAULT_OPEN_BEHAVIOR, OpenBehavior
from lens_viewer.windowing.registry import WindowId, WindowRecord, WindowRegistry
from lens_viewer.windowing.router import (
    CreateWindow,
    OpenRouter,
    QueueRequest,
    ReuseWindow,
    RouteDecision,
    RouteOutcome,
    WindowHost,
    decide,
    resolve_target,
)

__all__ = [
    # Registry
    "WindowId",
    "WindowRecord",
    "WindowRegistry",
    # Placement
    "Bounds",
    "center_in",
    "place_new_window",
    # Policy
    "DEFAULT_OPEN_BEHAVIOR",
    "OpenBehavior",
    # Events
    "AppReady",
    "OpenFileRequested",
    "OpenRequest",
    "OsOpenFile",
    "RouterEvent",
    "WindowClosed",
    "WindowFocused",
    # Routing
    "CreateWindow",
    "OpenRouter",
    "PendingRequestQueue",
    "QueueRequest",
    "ReuseWindow",
    "RouteDecision",
    "RouteOutcome",
    "WindowHost",
    "decide",
    "resolve_target",
    # Commands
    "CommandSurface",
    "FindOptions",
    "FindResult",
    "StopFindAction",
]
