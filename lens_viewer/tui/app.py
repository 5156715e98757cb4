"""
Main Textual application for the Lens JSON Viewer.

Every render window is an installed ``ViewerScreen``; switching screens is
switching windows. The app is the ``WindowHost`` for the open router, so all
routing decisions live in ``lens_viewer.windowing`` and this module only
carries them out.

Supported Formats:
    - JSON (.json): whole document shown as a tree
    - JSONL (.jsonl): one entry per line, malformed lines reported
"""

from __future__ import annotations

import argparse
import asyncio
import itertools
import logging
import os
from dataclasses import replace
from typing import Sequence

from textual.app import App
from textual.binding import Binding
from textual.screen import ModalScreen

from lens_viewer import __version__
from lens_viewer.config import ViewerSettings, configure_logging
from lens_viewer.data_formats import FileIngester, IngestResult, LineDelimited, PlainJson
from lens_viewer.i18n import SUPPORTED_LOCALES, LocaleStore
from lens_viewer.menu import Menu, MenuPresenter
from lens_viewer.tui.views.file_select import FileSelectScreen
from lens_viewer.tui.views.viewer_screen import ViewerScreen
from lens_viewer.windowing import (
    Bounds,
    CommandSurface,
    FindOptions,
    FindResult,
    OpenBehavior,
    OpenRouter,
    OsOpenFile,
    StopFindAction,
    WindowClosed,
    WindowFocused,
    WindowId,
)

LOGGER = logging.getLogger(__name__)

# All terminal windows share one virtual display
VIRTUAL_WORK_AREA = Bounds(0, 0, 1920, 1080)


class LensViewerApp(App):
    """Multi-window JSON / JSONL viewer."""

    TITLE = "Lens JSON Viewer"

    CSS = """
    Screen {
        background: $surface;
    }

    Header {
        dock: top;
        background: $primary;
        color: $text;
    }

    Footer {
        dock: bottom;
        height: 1;
        background: $primary-darken-2;
    }

    Tree {
        background: $surface;
        padding: 0 1;
    }

    Tree > .tree--cursor {
        background: $secondary;
    }

    Tree > .tree--guides {
        color: $text-muted;
    }

    DataTable > .datatable--header {
        background: $primary-darken-1;
        color: $text;
        text-style: bold;
    }

    DataTable > .datatable--cursor {
        background: $secondary;
        color: $text;
    }
    """

    BINDINGS = [
        Binding("ctrl+o", "open", "Open", show=True),
        Binding("ctrl+n", "new_window", "New Window", show=True),
        Binding("ctrl+w", "close_window", "Close", show=True),
        Binding("ctrl+right", "next_window", "Next Window", show=False),
        Binding("ctrl+f", "find", "Find", show=True),
        Binding("ctrl+r", "reload", "Reload", show=False),
        Binding("ctrl+l", "toggle_locale", "Language", show=False),
        Binding("ctrl+b", "toggle_open_behavior", "Open Behavior", show=False),
        Binding("q", "quit", "Quit", show=True),
    ]

    def __init__(
        self,
        paths: Sequence[str] = (),
        settings: ViewerSettings | None = None,
        start_directory: str | None = None,
    ) -> None:
        """Initialize the app.

        Args:
            paths: Files to open on startup, one window each.
            settings: Viewer settings; defaults when None.
            start_directory: Directory first shown by the file dialog.
        """
        super().__init__()
        self.settings = settings or ViewerSettings()
        self._startup_paths = list(paths)
        self._start_directory = start_directory or os.getcwd()
        self._window_ids = itertools.count(1)
        self._windows: dict[WindowId, ViewerScreen] = {}
        self._menu: Menu | None = None

        self.locale_store = LocaleStore(self.settings.locale)
        self.router = OpenRouter(
            self,
            FileIngester(self.settings.chunk_size),
            open_behavior=self.settings.open_behavior,
            window_width=self.settings.window_width,
            window_height=self.settings.window_height,
            window_offset=self.settings.window_offset,
        )
        self.command_surface = CommandSurface(
            self.router,
            self,
            self.locale_store,
            MenuPresenter(),
            on_open=self.action_open,
            on_find=self.action_find,
        )

    # Lifecycle

    async def on_load(self) -> None:
        """Files named on the command line arrive before the app is ready."""
        for path in self._startup_paths:
            await self.router.dispatch(OsOpenFile(path))

    def on_mount(self) -> None:
        self.title = self.locale_store.translate("appTitle")
        self.command_surface.rebuild_menu()
        self.run_worker(self.router.on_ready(), name="ready", group="routing")

    def window_focused(self, window_id: WindowId) -> None:
        """Called by a ViewerScreen when it becomes the visible window."""
        if window_id in self._windows:
            self.run_worker(self.router.dispatch(WindowFocused(window_id)), group="routing")

    def _screen_name(self, window_id: WindowId) -> str:
        return f"window-{window_id}"

    def _current_window(self) -> WindowId | None:
        if isinstance(self.screen, ViewerScreen):
            return self.screen.window_id
        return self.router.registry.focused_or_any()

    # WindowHost

    def create_window(self, bounds: Bounds) -> WindowId:
        window_id = next(self._window_ids)
        screen = ViewerScreen(window_id, bounds, self.locale_store, self._menu)
        self._windows[window_id] = screen
        name = self._screen_name(window_id)
        self.install_screen(screen, name)
        if isinstance(self.screen, ViewerScreen):
            self.switch_screen(name)
        else:
            self.push_screen(name)
        LOGGER.debug("Installed screen %s", name)
        return window_id

    async def wait_until_loaded(self, window_id: WindowId) -> None:
        # Screens buffer content until they are first shown
        await asyncio.sleep(0)

    def loading_started(self, window_id: WindowId, path: str) -> None:
        screen = self._windows.get(window_id)
        if screen is not None:
            screen.show_loading(path)

    def deliver(self, window_id: WindowId, result: PlainJson | LineDelimited) -> None:
        screen = self._windows.get(window_id)
        if screen is not None:
            screen.show_content(result)

    def show_error(self, window_id: WindowId | None, title: str, message: str) -> None:
        LOGGER.warning("%s: %s", title, message)
        screen = self._windows.get(window_id) if window_id is not None else None
        if screen is not None:
            screen.show_error(message)
        self.notify(
            message,
            title=self.locale_store.translate("openFailed"),
            severity="error",
            timeout=8,
        )

    def work_area(self, reference: Bounds | None) -> Bounds:
        return VIRTUAL_WORK_AREA

    def close_window(self, window_id: WindowId) -> None:
        self.run_worker(self._close_window(window_id), group="routing")

    def find_in_page(
        self, window_id: WindowId, query: str, options: FindOptions
    ) -> FindResult:
        screen = self._windows.get(window_id)
        if screen is None:
            return FindResult(0, 0)
        return screen.find_in_page(query, options)

    def stop_find_in_page(self, window_id: WindowId, action: StopFindAction) -> None:
        screen = self._windows.get(window_id)
        if screen is not None:
            screen.stop_find_in_page(action)

    def set_title(self, window_id: WindowId, title: str) -> bool:
        screen = self._windows.get(window_id)
        if screen is None:
            return False
        screen.title = f"{self.locale_store.translate('appTitle')} - {title}"
        return True

    async def select_file(self, parent: WindowId | None) -> str | None:
        directory = self._start_directory
        path = self.router.registry.get(parent).path if parent in self.router.registry else None
        if path:
            directory = os.path.dirname(os.path.abspath(path))

        future: asyncio.Future[str | None] = asyncio.get_running_loop().create_future()

        def on_dismiss(selected: str | None) -> None:
            if not future.done():
                future.set_result(selected)

        self.push_screen(FileSelectScreen(directory, self.locale_store), callback=on_dismiss)
        selected = await future
        if selected:
            self._start_directory = os.path.dirname(selected)
        return selected

    def rebuild_menu(self, menu: Menu) -> None:
        self._menu = menu
        self.title = self.locale_store.translate("appTitle")
        for screen in self._windows.values():
            screen.show_menu(menu)

    # Actions

    def action_open(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        self.run_worker(
            self.command_surface.select_json_file(self._current_window()), group="routing"
        )

    def action_find(self) -> None:
        if isinstance(self.screen, ViewerScreen):
            self.screen.open_find()

    def action_new_window(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        self.router.open_new_window()

    async def action_close_window(self) -> None:
        if not isinstance(self.screen, ViewerScreen):
            return
        await self.command_surface.close_window(self.screen.window_id)

    async def _close_window(self, window_id: WindowId) -> None:
        """Close a window; closing the last one quits."""
        screen = self._windows.pop(window_id, None)
        if screen is None:
            return
        await self.router.dispatch(WindowClosed(window_id))

        remaining = self.router.registry.ids()
        if not remaining:
            self.exit()
            return
        if self.screen is screen:
            await self.switch_screen(self._screen_name(remaining[-1]))
        if screen not in self.screen_stack:
            self.uninstall_screen(self._screen_name(window_id))

    def action_next_window(self) -> None:
        if not isinstance(self.screen, ViewerScreen):
            return
        ids = self.router.registry.ids()
        if len(ids) < 2:
            return
        index = ids.index(self.screen.window_id) if self.screen.window_id in ids else -1
        self.switch_screen(self._screen_name(ids[(index + 1) % len(ids)]))

    def action_reload(self) -> None:
        if not isinstance(self.screen, ViewerScreen) or not self.screen.path:
            return
        self.run_worker(self._reload(self.screen.window_id, self.screen.path), group="routing")

    async def _reload(self, window_id: WindowId, path: str) -> None:
        """Re-read a window's file directly, bypassing routing."""
        self.loading_started(window_id, path)
        result: IngestResult = await self.command_surface.read_json_file(window_id, path)
        if window_id not in self.router.registry:
            return
        if isinstance(result, (PlainJson, LineDelimited)):
            self.deliver(window_id, result)
        else:
            self.command_surface.report_failure(window_id, result)

    async def action_toggle_locale(self) -> None:
        locales = list(SUPPORTED_LOCALES)
        current = locales.index(self.locale_store.locale)
        await self.command_surface.set_locale(
            self._current_window(), locales[(current + 1) % len(locales)]
        )

    async def action_toggle_open_behavior(self) -> None:
        behavior = (
            OpenBehavior.REUSE_WINDOW
            if self.router.open_behavior is OpenBehavior.NEW_WINDOW
            else OpenBehavior.NEW_WINDOW
        )
        if await self.command_surface.set_open_behavior(self._current_window(), behavior):
            label_key = (
                "behaviorReuseWindow"
                if behavior is OpenBehavior.REUSE_WINDOW
                else "behaviorNewWindow"
            )
            self.notify(
                self.locale_store.translate(
                    "openBehaviorChanged", behavior=self.locale_store.translate(label_key)
                )
            )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lens-viewer",
        description="View JSON and JSONL files in a multi-window terminal UI.",
    )
    parser.add_argument(
        "paths",
        nargs="*",
        help="Files to open, one window each (JSON or JSONL)",
    )
    parser.add_argument(
        "--reuse-window",
        action="store_true",
        help="Open files in the current window instead of a new one",
    )
    parser.add_argument(
        "--locale",
        choices=SUPPORTED_LOCALES,
        default=None,
        help="User interface language (default: detected from the environment)",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Write logs to this file instead of the Textual console",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log at DEBUG level",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def settings_from_args(
    args: argparse.Namespace, base: ViewerSettings | None = None
) -> ViewerSettings:
    """Apply command-line flags over environment-derived settings."""
    settings = base or ViewerSettings.from_env()
    updates: dict[str, object] = {}
    if args.reuse_window:
        updates["open_behavior"] = OpenBehavior.REUSE_WINDOW
    if args.locale:
        updates["locale"] = args.locale
    if args.log_file:
        updates["log_file"] = args.log_file
    if args.debug:
        updates["debug_logging"] = True
    if not updates:
        return settings
    return replace(settings, **updates)


def main(argv: Sequence[str] | None = None) -> None:
    """Parse arguments and run the application."""
    args = build_parser().parse_args(argv)
    settings = settings_from_args(args)
    configure_logging(settings)
    LOGGER.info("Starting lens-viewer %s with %d file(s)", __version__, len(args.paths))

    app = LensViewerApp(paths=args.paths, settings=settings)
    app.run()


if __name__ == "__main__":
    main()
