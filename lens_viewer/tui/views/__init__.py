"""Screens of the viewer."""

from lens_viewer.tui.views.file_select import FileSelectScreen
from lens_viewer.tui.views.viewer_screen import ViewerScreen

__all__ = ["FileSelectScreen", "ViewerScreen"]
