"""One-line menu strip rendered from a Menu description."""

from __future__ import annotations

from rich.text import Text
from textual.widgets import Static

from lens_viewer.menu import Menu


def _key_hint(key: str) -> str:
    return key.replace("ctrl+", "^").replace("right", "→")


def render_menu(menu: Menu | None) -> Text:
    """Render every section and its key hints as styled text."""
    text = Text(no_wrap=True, overflow="ellipsis")
    if menu is None:
        return text
    for index, section in enumerate(menu.sections):
        if not section.items:
            continue
        if index:
            text.append("  │  ", style="dim")
        text.append(section.label, style="bold")
        for item in section.items:
            text.append(" ")
            text.append(item.label)
            if item.key:
                text.append(f" {_key_hint(item.key)}", style="dim italic")
    return text


class MenuBar(Static):
    """Shows the application menu at the top of a window."""

    DEFAULT_CSS = """
    MenuBar {
        height: 1;
        background: $primary-darken-1;
        color: $text;
        padding: 0 1;
    }
    """

    def __init__(self, menu: Menu | None = None, *, id: str | None = None) -> None:
        super().__init__(render_menu(menu), id=id)

    def show_menu(self, menu: Menu | None) -> None:
        self.update(render_menu(menu))
