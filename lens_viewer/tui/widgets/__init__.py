"""Widgets for the viewer windows."""

from lens_viewer.tui.widgets.json_tree_panel import JsonTreePanel
from lens_viewer.tui.widgets.menu_bar import MenuBar, render_menu

__all__ = [
    "JsonTreePanel",
    "MenuBar",
    "render_menu",
]
