"""
Declarative application menu.

The menu is rebuilt from scratch whenever the locale changes. Only "Open…"
and "Find…" carry callbacks from the caller; every other item names a host
action by string.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from lens_viewer.i18n import translate


@dataclass(frozen=True)
class MenuItem:
    """One menu entry.

    Attributes:
        label: Localized text.
        key: Key binding shown beside the label, if any.
        action: Host action name, used when ``callback`` is None.
        callback: Function to call when the item is chosen.
    """

    label: str
    key: str | None = None
    action: str | None = None
    callback: Callable[[], None] | None = field(default=None, compare=False)


@dataclass(frozen=True)
class MenuSection:
    label: str
    items: tuple[MenuItem, ...]


@dataclass(frozen=True)
class Menu:
    locale: str
    sections: tuple[MenuSection, ...]

    def find(self, action: str) -> MenuItem | None:
        """Return the first item bound to a host action name."""
        for section in self.sections:
            for item in section.items:
                if item.action == action:
                    return item
        return None


class MenuPresenter:
    """Builds the menu description for a locale."""

    def build(
        self,
        locale: str,
        on_open: Callable[[], None],
        on_find: Callable[[], None],
    ) -> Menu:
        """Build the full menu.

        Args:
            locale: Locale key such as 'en' or 'zh'.
            on_open: Called for File > Open….
            on_find: Called for Edit > Find….

        Returns:
            The menu description.
        """

        def t(key: str) -> str:
            return translate(locale, key)

        return Menu(
            locale=locale,
            sections=(
                MenuSection(
                    t("menuFile"),
                    (
                        MenuItem(t("menuOpen"), "ctrl+o", "open", on_open),
                        MenuItem(t("menuClose"), "ctrl+w", "close_window"),
                    ),
                ),
                MenuSection(
                    t("menuEdit"),
                    (MenuItem(t("menuFind"), "ctrl+f", "find", on_find),),
                ),
                MenuSection(
                    t("menuView"),
                    (
                        MenuItem(t("menuReload"), "ctrl+r", "reload"),
                        MenuItem(t("menuLanguage"), "ctrl+l", "toggle_locale"),
                        MenuItem(t("menuOpenBehavior"), "ctrl+b", "toggle_open_behavior"),
                    ),
                ),
                MenuSection(
                    t("menuWindow"),
                    (
                        MenuItem(t("menuNewWindow"), "ctrl+n", "new_window"),
                        MenuItem(t("menuNextWindow"), "ctrl+right", "next_window"),
                    ),
                ),
                MenuSection(t("menuHelp"), ()),
            ),
        )
