"""
Command surface exposed to render windows.

Each command is a coroutine that takes the id of the requesting window
first. Commands that need the requesting window return a neutral value
(None or False) when it has closed, instead of raising.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable

from lens_viewer.data_formats.results import Failure, IngestResult
from lens_viewer.errors import RoutingTargetMissing
from lens_viewer.windowing.events import OpenRequest
from lens_viewer.windowing.policy import OpenBehavior
from lens_viewer.windowing.registry import WindowId
from lens_viewer.windowing.router import OPEN_FAILED_TITLE, OpenRouter, WindowHost

if TYPE_CHECKING:
    from lens_viewer.i18n import LocaleStore
    from lens_viewer.menu import MenuPresenter

LOGGER = logging.getLogger(__name__)


class StopFindAction(str, Enum):
    """What to do with the current match when a search is closed."""

    CLEAR_SELECTION = "clear-selection"
    KEEP_SELECTION = "keep-selection"
    ACTIVATE_SELECTION = "activate-selection"


@dataclass(frozen=True)
class FindOptions:
    """Options for an in-window search.

    Attributes:
        forward: Search direction.
        match_case: Case-sensitive matching.
        find_next: True to move to the next match of the same query.
    """

    forward: bool = True
    match_case: bool = False
    find_next: bool = False


@dataclass(frozen=True)
class FindResult:
    """Outcome of an in-window search.

    Attributes:
        matches: Number of matches in the window.
        active_match_ordinal: 1-based index of the selected match, 0 if none.
    """

    matches: int
    active_match_ordinal: int


class CommandSurface:
    """Request/response commands available to every window.

    Args:
        router: The open router owning the window registry.
        host: The window host used for dialogs, find and titles.
        locale_store: Process-wide locale state.
        menu_presenter: Builds the menu description on locale changes.
        on_open: Menu callback for "Open…".
        on_find: Menu callback for "Find…".
    """

    def __init__(
        self,
        router: OpenRouter,
        host: WindowHost,
        locale_store: "LocaleStore",
        menu_presenter: "MenuPresenter",
        on_open: Callable[[], None] | None = None,
        on_find: Callable[[], None] | None = None,
    ) -> None:
        self._router = router
        self._host = host
        self._locale_store = locale_store
        self._menu_presenter = menu_presenter
        self._on_open = on_open or (lambda: None)
        self._on_find = on_find or (lambda: None)

    def _require_window(self, sender: WindowId | None) -> WindowId:
        if sender is None or sender not in self._router.registry:
            raise RoutingTargetMissing(sender)
        return sender

    def rebuild_menu(self) -> None:
        """Build the menu for the current locale and hand it to the host."""
        menu = self._menu_presenter.build(
            self._locale_store.locale, self._on_open, self._on_find
        )
        self._host.rebuild_menu(menu)

    async def read_json_file(self, sender: WindowId | None, path: str) -> IngestResult:
        """Ingest a file directly, without routing.

        The requesting window is marked as having content when the read
        succeeds and the window is still registered.
        """
        result = await self._router.ingester.ingest(path)
        if sender is not None and sender in self._router.registry:
            self._router.record_direct_read(sender, result)
        return result

    async def select_json_file(self, sender: WindowId | None) -> IngestResult | None:
        """Ask the user for a file and route it as if the sender opened it.

        Returns:
            The routed ingest result, or None if the dialog was cancelled,
            the sender has closed, or the request was queued.
        """
        if sender is not None:
            try:
                self._require_window(sender)
            except RoutingTargetMissing as e:
                LOGGER.info("select-json-file ignored: %s", e)
                return None

        parent = sender if sender is not None else self._router.registry.focused_or_any()
        path = await self._host.select_file(parent)
        if not path:
            return None

        outcome = await self._router.route(OpenRequest(path, sender))
        return outcome.result

    async def open_json_file(
        self,
        sender: WindowId | None,
        path: str,
        reuse_if_empty: bool | None = None,
    ) -> bool:
        """Route an explicit open request from a window.

        Args:
            sender: Requesting window.
            path: File to open.
            reuse_if_empty: False to stop an empty sender from being reused
                unless the policy is REUSE_WINDOW. None keeps the default.

        Returns:
            True if the file's content was delivered to a window.
        """
        request = OpenRequest(
            path,
            sender,
            reuse_if_empty=True if reuse_if_empty is None else reuse_if_empty,
        )
        outcome = await self._router.route(request)
        return outcome.delivered

    async def find_in_page(
        self,
        sender: WindowId | None,
        query: str,
        options: FindOptions | None = None,
    ) -> FindResult | None:
        """Search the sender's content; None if the sender has closed."""
        try:
            window_id = self._require_window(sender)
        except RoutingTargetMissing:
            return None
        return self._host.find_in_page(window_id, query, options or FindOptions())

    async def stop_find_in_page(
        self,
        sender: WindowId | None,
        action: StopFindAction | str = StopFindAction.CLEAR_SELECTION,
    ) -> bool | None:
        """End the sender's search; None if the sender has closed."""
        try:
            window_id = self._require_window(sender)
        except RoutingTargetMissing:
            return None
        try:
            stop_action = StopFindAction(action)
        except ValueError:
            LOGGER.warning("Unknown stop-find action %r; clearing selection", action)
            stop_action = StopFindAction.CLEAR_SELECTION
        self._host.stop_find_in_page(window_id, stop_action)
        return True

    async def set_locale(self, sender: WindowId | None, locale: str) -> bool:
        """Switch the process-wide locale and rebuild the menu."""
        self._locale_store.set_locale(locale)
        self.rebuild_menu()
        return True

    async def set_open_behavior(
        self, sender: WindowId | None, behavior: OpenBehavior | str
    ) -> bool:
        """Change the global open policy; False for an unknown value."""
        try:
            self._router.set_open_behavior(behavior)
        except ValueError as e:
            LOGGER.warning("set-open-behavior rejected: %s", e)
            return False
        return True

    async def set_window_title(self, sender: WindowId | None, title: str) -> bool:
        """Set the sender's title; False if the sender has closed."""
        try:
            window_id = self._require_window(sender)
        except RoutingTargetMissing:
            return False
        return self._host.set_title(window_id, title)

    async def close_window(self, sender: WindowId | None) -> bool:
        """Ask the host to close the sender; False if it has already closed."""
        try:
            window_id = self._require_window(sender)
        except RoutingTargetMissing:
            return False
        self._host.close_window(window_id)
        return True

    def report_failure(self, sender: WindowId | None, result: IngestResult) -> None:
        """Show a Failure from read_json_file to the user."""
        if isinstance(result, Failure):
            self._host.show_error(sender, OPEN_FAILED_TITLE, result.reason)
