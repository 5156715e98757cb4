"""Buffer for open requests that arrive before the first window exists."""

from __future__ import annotations

import logging
from collections import deque

from lens_viewer.errors import QueueClosed
from lens_viewer.windowing.events import OpenRequest

LOGGER = logging.getLogger(__name__)


class PendingRequestQueue:
    """FIFO of open requests received during startup.

    The queue accepts requests only until it is drained on the ready
    transition; after that it stays empty for the life of the process.
    """

    def __init__(self) -> None:
        self._requests: deque[OpenRequest] = deque()
        self._closed = False

    @property
    def closed(self) -> bool:
        """True once the queue has been drained."""
        return self._closed

    def enqueue(self, request: OpenRequest) -> None:
        """Buffer a request until the application is ready.

        Raises:
            QueueClosed: If the queue was already drained.
        """
        if self._closed:
            raise QueueClosed(f"Cannot queue {request.path!r} after startup")
        self._requests.append(request)
        LOGGER.info("Queued open request for %s until ready", request.path)

    def drain(self) -> list[OpenRequest]:
        """Return all buffered requests in arrival order and close the queue."""
        requests = list(self._requests)
        self._requests.clear()
        self._closed = True
        return requests

    def __len__(self) -> int:
        return len(self._requests)
