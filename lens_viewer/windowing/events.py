"""
Requests and events consumed by the open router.

Window lifecycle callbacks and OS notifications are turned into these
values so the routing logic can be driven without a real windowing toolkit.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from lens_viewer.windowing.registry import WindowId


@dataclass(frozen=True)
class OpenRequest:
    """A request to show a file.

    Attributes:
        path: File to open.
        requesting_window: Window the request came from, if any.
        reuse_if_empty: When False, an empty target window is not reused
            unless the open policy says so.
    """

    path: str
    requesting_window: WindowId | None = None
    reuse_if_empty: bool = True


@dataclass(frozen=True)
class OpenFileRequested:
    """A user action (menu, file picker, window command) named a file."""

    request: OpenRequest


@dataclass(frozen=True)
class OsOpenFile:
    """The operating system asked to open a file ("open with", file drop)."""

    path: str


@dataclass(frozen=True)
class AppReady:
    """The application can now show windows."""


@dataclass(frozen=True)
class WindowFocused:
    window_id: WindowId


@dataclass(frozen=True)
class WindowClosed:
    window_id: WindowId


RouterEvent = Union[OpenFileRequested, OsOpenFile, AppReady, WindowFocused, WindowClosed]
