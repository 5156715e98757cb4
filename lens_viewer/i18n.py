"""
Locale state and message tables.

Messages support simple ``{name}`` interpolation. A key missing from the
active locale falls back to English, then to the key itself.
"""

from __future__ import annotations

import logging
import os
import re
from typing import Callable

LOGGER = logging.getLogger(__name__)

DEFAULT_LOCALE = "en"

MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        # App header
        "appTitle": "Lens JSON Viewer",
        "titleHint": "Open a JSON or JSONL file from the menu to start.",
        # Menu
        "menuFile": "File",
        "menuOpen": "Open…",
        "menuClose": "Close Window",
        "menuEdit": "Edit",
        "menuFind": "Find…",
        "menuView": "View",
        "menuReload": "Reload",
        "menuWindow": "Window",
        "menuNewWindow": "New Window",
        "menuNextWindow": "Next Window",
        "menuHelp": "Help",
        "menuLanguage": "Language",
        "menuOpenBehavior": "Toggle Open Behavior",
        # File meta
        "items": "items",
        "lineLabel": "line {line}",
        # Loading
        "loadingFile": "Loading file…",
        "readingFile": "Reading {name}… {progress}",
        # Errors
        "openFailed": "Open File Failed",
        "unableToReadFile": "Unable to read file",
        "failedToParseJson": "Failed to parse JSON file: {error}",
        "malformedLines": "{count} malformed entries at lines: {lines}",
        # File dialog
        "selectFileTitle": "Open JSON File",
        "directoryLabel": "Directory: {path}",
        "noFilesFound": "No JSON or JSONL files in this directory",
        # Find in page
        "findPlaceholder": "Find in page… (Enter to search)",
        "noMatches": "No matches",
        "matchCount": "{current} / {total}",
        # Policy
        "openBehaviorChanged": "New files open in: {behavior}",
        "behaviorNewWindow": "a new window",
        "behaviorReuseWindow": "the current window",
    },
    "zh": {
        "appTitle": "Lens JSON 查看器",
        "titleHint": "从菜单打开 JSON 或 JSONL 文件开始使用。",
        "menuFile": "文件",
        "menuOpen": "打开…",
        "menuClose": "关闭窗口",
        "menuEdit": "编辑",
        "menuFind": "查找…",
        "menuView": "视图",
        "menuReload": "重新加载",
        "menuWindow": "窗口",
        "menuNewWindow": "新建窗口",
        "menuNextWindow": "下一个窗口",
        "menuHelp": "帮助",
        "menuLanguage": "语言",
        "menuOpenBehavior": "切换打开方式",
        "items": "项",
        "lineLabel": "第 {line} 行",
        "loadingFile": "正在加载文件…",
        "readingFile": "正在读取 {name}… {progress}",
        "openFailed": "打开文件失败",
        "unableToReadFile": "无法读取文件",
        "failedToParseJson": "解析 JSON 文件失败：{error}",
        "malformedLines": "{count} 条格式错误的记录，行号：{lines}",
        "selectFileTitle": "打开 JSON 文件",
        "directoryLabel": "目录：{path}",
        "noFilesFound": "此目录中没有 JSON 或 JSONL 文件",
        "findPlaceholder": "在页面中查找…（回车搜索）",
        "noMatches": "无匹配结果",
        "matchCount": "{current} / {total}",
        "openBehaviorChanged": "新文件将在{behavior}中打开",
        "behaviorNewWindow": "新窗口",
        "behaviorReuseWindow": "当前窗口",
    },
}

SUPPORTED_LOCALES = tuple(MESSAGES)

_PLACEHOLDER = re.compile(r"\{(\w+)\}")


def detect_system_locale() -> str:
    """Guess the locale from LANG / LC_ALL; Chinese variants map to 'zh'."""
    for variable in ("LC_ALL", "LC_MESSAGES", "LANG"):
        value = os.environ.get(variable, "").lower()
        if value:
            return "zh" if value.startswith("zh") else DEFAULT_LOCALE
    return DEFAULT_LOCALE


class LocaleStore:
    """Process-wide locale with change listeners.

    Examples:
        >>> store = LocaleStore("en")
        >>> store.translate("lineLabel", line=3)
        'line 3'
        >>> store.set_locale("zh")
        'zh'
    """

    def __init__(self, locale: str | None = None) -> None:
        self._locale = self._normalize(locale) if locale else detect_system_locale()
        self._listeners: list[Callable[[str], None]] = []

    @property
    def locale(self) -> str:
        return self._locale

    @staticmethod
    def _normalize(locale: str) -> str:
        key = locale.strip().lower().replace("_", "-").split("-")[0]
        if key not in MESSAGES:
            LOGGER.warning("Unsupported locale %r; using %s", locale, DEFAULT_LOCALE)
            return DEFAULT_LOCALE
        return key

    def set_locale(self, locale: str) -> str:
        """Switch locale and notify listeners. Returns the locale now in use."""
        self._locale = self._normalize(locale)
        for listener in list(self._listeners):
            listener(self._locale)
        return self._locale

    def subscribe(self, listener: Callable[[str], None]) -> None:
        self._listeners.append(listener)

    def translate(self, key: str, **params: object) -> str:
        """Look up a message in the current locale."""
        return translate(self._locale, key, **params)


def translate(locale: str, key: str, **params: object) -> str:
    """Look up a message for a locale and fill ``{name}`` placeholders.

    Unknown placeholders are left as-is.
    """
    table = MESSAGES.get(locale, MESSAGES[DEFAULT_LOCALE])
    message = table.get(key) or MESSAGES[DEFAULT_LOCALE].get(key) or key
    if not params:
        return message
    return _PLACEHOLDER.sub(
        lambda m: str(params.get(m.group(1), m.group(0))), message
    )
