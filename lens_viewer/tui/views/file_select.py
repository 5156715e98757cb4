"""
File selection dialog.

Lists subdirectories and viewable data files of one directory. Enter on a
directory moves into it; Enter on a file, or a path typed into the input,
closes the dialog with that path. Escape cancels.
"""

from __future__ import annotations

import os

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import DataTable, Input, Static

from lens_viewer.data_formats import (
    discover_data_files,
    discover_subdirectories,
    format_file_size,
)
from lens_viewer.i18n import LocaleStore
from lens_viewer.tui.mixins import VimNavigationMixin

_DIR_PREFIX = "dir:"
_FILE_PREFIX = "file:"


class FileSelectScreen(VimNavigationMixin, ModalScreen[str | None]):
    """Modal dialog returning the chosen file path, or None when cancelled."""

    DEFAULT_CSS = """
    FileSelectScreen {
        align: center middle;
    }

    #file-dialog {
        width: 90%;
        height: 80%;
        border: thick $primary;
        background: $surface;
    }

    #dialog-title {
        background: $primary;
        color: $text;
        text-align: center;
        text-style: bold;
    }

    #dir-header {
        color: $text-muted;
        padding: 0 1;
    }

    #file-table {
        height: 1fr;
    }
    """

    BINDINGS = VimNavigationMixin.VIM_BINDINGS + [
        Binding("escape", "cancel", "Cancel", show=True),
        Binding("backspace", "parent_directory", "Up", show=False),
    ]

    def __init__(self, directory: str, locale_store: LocaleStore) -> None:
        """Initialize the dialog.

        Args:
            directory: Directory to list first.
            locale_store: Source of the dialog's strings.
        """
        super().__init__()
        self._directory = os.path.abspath(directory)
        self._locale = locale_store

    def compose(self) -> ComposeResult:
        with Vertical(id="file-dialog"):
            yield Static(self._locale.translate("selectFileTitle"), id="dialog-title")
            yield Input(value=self._directory, id="path-input")
            yield Static("", id="dir-header")
            yield DataTable(id="file-table")

    def on_mount(self) -> None:
        table = self.query_one("#file-table", DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_column("NAME", width=50)
        table.add_column("FORMAT", width=10)
        table.add_column("SIZE", width=12)
        self._show_directory(self._directory)
        table.focus()

    def _show_directory(self, directory: str) -> None:
        self._directory = directory
        self.query_one("#path-input", Input).value = directory

        files = discover_data_files(directory)
        header = self._locale.translate("directoryLabel", path=directory)
        if not files:
            header = f"{header}  ({self._locale.translate('noFilesFound')})"
        self.query_one("#dir-header", Static).update(header)

        table = self.query_one("#file-table", DataTable)
        table.clear()
        parent = os.path.dirname(directory)
        if parent and parent != directory:
            table.add_row("..", "DIR", "", key=_DIR_PREFIX + parent)
        for subdirectory in discover_subdirectories(directory):
            table.add_row(
                os.path.basename(subdirectory) + "/", "DIR", "", key=_DIR_PREFIX + subdirectory
            )
        for file_info in files:
            table.add_row(
                file_info["name"],
                file_info["format"].upper(),
                format_file_size(file_info["size"]),
                key=_FILE_PREFIX + file_info["path"],
            )

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        """Enter a directory or choose a file."""
        if event.row_key is None or event.row_key.value is None:
            return
        key = str(event.row_key.value)
        if key.startswith(_DIR_PREFIX):
            self._show_directory(key[len(_DIR_PREFIX):])
        else:
            self.dismiss(key[len(_FILE_PREFIX):])

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Accept a typed path: directories are listed, anything else is returned."""
        path = os.path.abspath(os.path.expanduser(event.value.strip()))
        if os.path.isdir(path):
            self._show_directory(path)
            self.query_one("#file-table", DataTable).focus()
        elif event.value.strip():
            # Missing files are reported by the open itself
            self.dismiss(path)

    def action_parent_directory(self) -> None:
        if isinstance(self.focused, Input):
            return
        parent = os.path.dirname(self._directory)
        if parent and parent != self._directory:
            self._show_directory(parent)

    def action_cancel(self) -> None:
        self.dismiss(None)
