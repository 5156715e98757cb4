"""Exception types shared across the viewer.

None of these are allowed to escape to the user as a crash: the ingest path
converts I/O problems to ``Failure`` results and the command surface converts
routing problems to neutral return values.
"""

from __future__ import annotations


class LensViewerError(Exception):
    """Base class for viewer errors."""


class UnsupportedFormat(LensViewerError, ValueError):
    """The file extension is neither ``.json`` nor ``.jsonl``."""

    def __init__(self, path: str, supported: list[str]) -> None:
        self.path = path
        self.supported = supported
        super().__init__(
            f"Unsupported file format for '{path}'. "
            f"Supported extensions: {', '.join(supported)}"
        )


class RoutingTargetMissing(LensViewerError, LookupError):
    """A command referenced a window that is no longer registered."""

    def __init__(self, window_id: int | None) -> None:
        self.window_id = window_id
        super().__init__(f"Window {window_id} is not registered")


class QueueClosed(LensViewerError, RuntimeError):
    """A request was queued after the application became ready."""
