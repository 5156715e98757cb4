"""
Viewer window.

Each render window of the application is one ``ViewerScreen``. It shows a
file as a collapsible JSON tree, a status line with the file name and any
malformed-line notice, and a find bar. Talking back to the application goes
through the app's ``CommandSurface`` with this window's id as the sender.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

from textual.app import ComposeResult
from textual.binding import Binding
from textual.screen import Screen
from textual.widgets import Footer, Header, Input, Static, TextArea

from lens_viewer.data_formats import (
    Failure,
    IngestResult,
    LineDelimited,
    PlainJson,
    strict_loads,
    summarize_line_errors,
)
from lens_viewer.i18n import LocaleStore
from lens_viewer.menu import Menu
from lens_viewer.tui.mixins import VimNavigationMixin
from lens_viewer.tui.widgets import JsonTreePanel, MenuBar
from lens_viewer.windowing import Bounds, FindOptions, FindResult, StopFindAction, WindowId

if TYPE_CHECKING:
    from lens_viewer.tui.app import LensViewerApp

LOGGER = logging.getLogger(__name__)


class ViewerScreen(VimNavigationMixin, Screen):
    """One render window."""

    app: "LensViewerApp"

    DEFAULT_CSS = """
    ViewerScreen {
        layout: vertical;
    }

    #status {
        height: auto;
        background: $primary-background;
        padding: 0 1;
    }

    #status.error {
        background: $error 30%;
    }

    #find-bar {
        dock: bottom;
        display: none;
    }

    #find-bar.visible {
        display: block;
    }

    #find-status {
        dock: bottom;
        height: 1;
        padding: 0 1;
        color: $text-muted;
    }

    #json-tree {
        height: 1fr;
    }

    #raw-text {
        height: 1fr;
        display: none;
    }
    """

    BINDINGS = VimNavigationMixin.VIM_BINDINGS + [
        Binding("m", "load_more", "More", show=False),
        Binding("escape", "close_find", "Close Find", show=False),
        Binding("f3", "find_next", "Next Match", show=False),
        Binding("shift+f3", "find_previous", "Previous Match", show=False),
    ]

    def __init__(
        self,
        window_id: WindowId,
        bounds: Bounds,
        locale_store: LocaleStore,
        menu: Menu | None = None,
    ) -> None:
        super().__init__(name=f"window-{window_id}")
        self.window_id = window_id
        self.bounds = bounds
        self._locale = locale_store
        self._menu = menu
        self.path: str | None = None
        # Content and error delivered before the screen was first shown
        self._pending: IngestResult | None = None
        self._pending_error: str | None = None
        self._loading_path: str | None = None
        self._last_query = ""
        self.status_text = ""

    def compose(self) -> ComposeResult:
        yield Header()
        yield MenuBar(self._menu, id="menu-bar")
        yield Static(self._locale.translate("titleHint"), id="status")
        yield JsonTreePanel(id="json-tree")
        yield TextArea("", read_only=True, id="raw-text")
        yield Static("", id="find-status")
        yield Input(placeholder=self._locale.translate("findPlaceholder"), id="find-bar")
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#json-tree", JsonTreePanel).focus()
        if self._loading_path is not None:
            self.show_loading(self._loading_path)
        if self._pending is not None:
            pending, self._pending = self._pending, None
            self.show_content(pending)
        if self._pending_error is not None:
            message, self._pending_error = self._pending_error, None
            self.show_error(message)

    def on_screen_resume(self) -> None:
        """Becoming the visible screen is this window gaining focus."""
        self.app.window_focused(self.window_id)

    # Content

    def show_loading(self, path: str) -> None:
        self._loading_path = path
        if not self.is_mounted:
            self._pending_error = None
            return
        self._set_status(self._locale.translate("loadingFile") + f" {os.path.basename(path)}")

    def show_content(self, result: IngestResult) -> None:
        """Replace the window's content with an ingest result."""
        if not self.is_mounted:
            self._pending = result
            self._pending_error = None
            self._loading_path = None
            return
        self._loading_path = None

        if isinstance(result, Failure):
            self.show_error(result.reason)
            return

        self.path = result.path
        name = os.path.basename(result.path)
        tree = self.query_one("#json-tree", JsonTreePanel)
        raw = self.query_one("#raw-text", TextArea)
        tree.stop_find()
        self.query_one("#find-status", Static).update("")

        if isinstance(result, PlainJson):
            try:
                data = strict_loads(result.raw_text)
            except ValueError as e:
                # Show the text as-is so the user can see what is wrong
                LOGGER.info("%s is not valid JSON: %s", result.path, e)
                tree.clear_content(name)
                tree.display = False
                raw.load_text(result.raw_text)
                raw.display = True
                self._set_status(
                    self._locale.translate("failedToParseJson", error=str(e)), error=True
                )
            else:
                raw.display = False
                tree.display = True
                tree.load_json(data, label=name)
                self._set_status(name)
        elif isinstance(result, LineDelimited):
            raw.display = False
            tree.display = True
            count = len(result.entries)
            tree.load_entries(
                result.entries,
                result.entry_line_numbers,
                label=f"{name} ({count:,} {self._locale.translate('items')})",
                entry_label=lambda line: self._locale.translate("lineLabel", line=line),
            )
            status = name
            if result.errors:
                status += "  " + summarize_line_errors(
                    result.errors, template=self._locale.translate("malformedLines")
                )
            self._set_status(status, error=bool(result.errors))

        self.run_worker(self.app.command_surface.set_window_title(self.window_id, name))

    def show_error(self, message: str) -> None:
        """Show a failure in the status line; the current content stays."""
        self._loading_path = None
        if not self.is_mounted:
            self._pending_error = message
            return
        self._set_status(message, error=True)

    def show_menu(self, menu: Menu) -> None:
        self._menu = menu
        if self.is_mounted:
            self.query_one("#menu-bar", MenuBar).show_menu(menu)
            self.query_one("#find-bar", Input).placeholder = self._locale.translate(
                "findPlaceholder"
            )

    def _set_status(self, text: str, error: bool = False) -> None:
        self.status_text = text
        status = self.query_one("#status", Static)
        status.update(text)
        status.set_class(error, "error")

    # Find in page

    def open_find(self) -> None:
        find_bar = self.query_one("#find-bar", Input)
        find_bar.add_class("visible")
        find_bar.focus()

    def find_in_page(self, query: str, options: FindOptions) -> FindResult:
        if not self.is_mounted:
            return FindResult(0, 0)
        matches, ordinal = self.query_one("#json-tree", JsonTreePanel).find(
            query,
            forward=options.forward,
            match_case=options.match_case,
            find_next=options.find_next,
        )
        self._last_query = query
        find_status = self.query_one("#find-status", Static)
        if matches:
            find_status.update(
                self._locale.translate("matchCount", current=ordinal, total=matches)
            )
        else:
            find_status.update(self._locale.translate("noMatches") if query else "")
        return FindResult(matches, ordinal)

    def stop_find_in_page(self, action: StopFindAction) -> None:
        if not self.is_mounted:
            return
        tree = self.query_one("#json-tree", JsonTreePanel)
        active = tree.stop_find(keep_selection=action is not StopFindAction.CLEAR_SELECTION)
        if action is StopFindAction.ACTIVATE_SELECTION and active is not None:
            active.toggle()
        self._last_query = ""
        self.query_one("#find-status", Static).update("")
        find_bar = self.query_one("#find-bar", Input)
        find_bar.remove_class("visible")
        tree.focus()

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id != "find-bar":
            return
        event.stop()
        query = event.value
        options = FindOptions(find_next=query == self._last_query)
        await self.app.command_surface.find_in_page(self.window_id, query, options)

    async def _step_find(self, forward: bool) -> None:
        if not self._last_query:
            return
        options = FindOptions(forward=forward, find_next=True)
        await self.app.command_surface.find_in_page(self.window_id, self._last_query, options)

    async def action_find_next(self) -> None:
        await self._step_find(forward=True)

    async def action_find_previous(self) -> None:
        await self._step_find(forward=False)

    async def action_close_find(self) -> None:
        if self.query_one("#find-bar", Input).has_class("visible"):
            await self.app.command_surface.stop_find_in_page(
                self.window_id, StopFindAction.KEEP_SELECTION
            )

    def action_load_more(self) -> None:
        tree = self.query_one("#json-tree", JsonTreePanel)
        if tree.remaining_entries > 0:
            tree.show_more_entries()
