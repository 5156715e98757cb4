"""
Registry of live render windows.

The registry is a plain value owned by the router: it records which windows
exist, which one has focus, and whether each has had content delivered. It
does not talk to any windowing toolkit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator

from lens_viewer.windowing.placement import Bounds

LOGGER = logging.getLogger(__name__)

WindowId = int


@dataclass
class WindowRecord:
    """Registry entry for one window.

    Attributes:
        window_id: Opaque identifier, unique for the process lifetime.
        bounds: Position and size, used for placing new windows.
        has_content: False until the first successful ingest is delivered.
        path: Path of the content currently shown, if any.
    """

    window_id: WindowId
    bounds: Bounds | None = None
    has_content: bool = False
    path: str | None = None


class WindowRegistry:
    """Tracks live windows, focus and per-window content state.

    Lookups for an id that was never registered, or has been unregistered,
    report absence (None / False) rather than raising.

    Examples:
        >>> registry = WindowRegistry()
        >>> registry.register(1, Bounds(0, 0, 1200, 800))
        >>> registry.has_content(1)
        False
        >>> registry.unregister(1)
        >>> registry.has_content(1) is None
        True
    """

    def __init__(self) -> None:
        # dicts preserve insertion order, so "any window" is the oldest one
        self._windows: dict[WindowId, WindowRecord] = {}
        self._focused: WindowId | None = None

    def register(self, window_id: WindowId, bounds: Bounds | None = None) -> None:
        """Add a newly created window. It starts without content.

        Raises:
            ValueError: If the id is already registered.
        """
        if window_id in self._windows:
            raise ValueError(f"Window {window_id} is already registered")
        self._windows[window_id] = WindowRecord(window_id, bounds)
        LOGGER.debug("Registered window %s", window_id)

    def unregister(self, window_id: WindowId) -> None:
        """Remove a closed window. Unknown ids are ignored."""
        if self._windows.pop(window_id, None) is None:
            return
        if self._focused == window_id:
            self._focused = None
        LOGGER.debug("Unregistered window %s", window_id)

    def set_has_content(
        self, window_id: WindowId, has_content: bool, path: str | None = None
    ) -> bool:
        """Update a window's content flag.

        Returns:
            False if the window is not registered, True otherwise.
        """
        record = self._windows.get(window_id)
        if record is None:
            return False
        record.has_content = has_content
        if path is not None:
            record.path = path
        return True

    def has_content(self, window_id: WindowId) -> bool | None:
        """Return the content flag, or None if the window is not registered."""
        record = self._windows.get(window_id)
        return record.has_content if record is not None else None

    def set_focused(self, window_id: WindowId) -> None:
        """Record that a window gained focus. Unknown ids are ignored."""
        if window_id in self._windows:
            self._focused = window_id

    def focused(self) -> WindowId | None:
        """Return the focused window id, if it is still registered."""
        return self._focused

    def focused_or_any(self) -> WindowId | None:
        """Return the focused window, else the oldest registered one, else None."""
        if self._focused is not None:
            return self._focused
        return next(iter(self._windows), None)

    def get(self, window_id: WindowId) -> WindowRecord | None:
        return self._windows.get(window_id)

    def bounds(self, window_id: WindowId | None) -> Bounds | None:
        """Return a window's bounds, or None if unknown."""
        if window_id is None:
            return None
        record = self._windows.get(window_id)
        return record.bounds if record is not None else None

    def set_bounds(self, window_id: WindowId, bounds: Bounds) -> None:
        record = self._windows.get(window_id)
        if record is not None:
            record.bounds = bounds

    def ids(self) -> list[WindowId]:
        """Registered ids in creation order."""
        return list(self._windows)

    def __contains__(self, window_id: object) -> bool:
        return window_id in self._windows

    def __len__(self) -> int:
        return len(self._windows)

    def __iter__(self) -> Iterator[WindowRecord]:
        return iter(list(self._windows.values()))
