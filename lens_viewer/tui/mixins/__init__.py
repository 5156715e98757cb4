"""Mixins for the viewer screens."""

from lens_viewer.tui.mixins.vim_navigation import VimNavigationMixin

__all__ = ["VimNavigationMixin"]
