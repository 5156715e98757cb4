"""
Vim-style j/k/g/G navigation for viewer screens.

The keys act on whichever tree or table has focus, so a screen only needs
to mix this in and add ``VIM_BINDINGS`` to its own bindings.
"""

from __future__ import annotations

from textual.binding import Binding
from textual.widgets import DataTable, Tree


class VimNavigationMixin:
    """Mixin delegating vim keys to the focused DataTable or Tree.

    Usage:
        class MyScreen(VimNavigationMixin, Screen):
            BINDINGS = VimNavigationMixin.VIM_BINDINGS + [...]
    """

    VIM_BINDINGS = [
        Binding("j", "vim_down", "Down", show=False),
        Binding("k", "vim_up", "Up", show=False),
        Binding("g", "vim_top", "Top", show=False),
        Binding("G", "vim_bottom", "Bottom", show=False),
    ]

    def _navigable(self) -> DataTable | Tree | None:
        focused = self.focused
        if isinstance(focused, (DataTable, Tree)):
            return focused
        return None

    def action_vim_down(self) -> None:
        widget = self._navigable()
        if widget is not None:
            widget.action_cursor_down()

    def action_vim_up(self) -> None:
        widget = self._navigable()
        if widget is not None:
            widget.action_cursor_up()

    def action_vim_top(self) -> None:
        """Jump to the first row or the tree root."""
        widget = self._navigable()
        if isinstance(widget, DataTable):
            if widget.row_count > 0:
                widget.move_cursor(row=0)
        elif isinstance(widget, Tree):
            widget.select_node(widget.root)
            widget.scroll_home()

    def action_vim_bottom(self) -> None:
        """Jump to the last row, or scroll a tree to its end."""
        widget = self._navigable()
        if isinstance(widget, DataTable):
            if widget.row_count > 0:
                widget.move_cursor(row=widget.row_count - 1)
        elif isinstance(widget, Tree):
            widget.scroll_end()
