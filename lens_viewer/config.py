"""Viewer settings, environment overrides and logging setup."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from typing import Mapping

from lens_viewer.data_formats.base import DEFAULT_CHUNK_SIZE
from lens_viewer.windowing.placement import (
    DEFAULT_WINDOW_HEIGHT,
    DEFAULT_WINDOW_OFFSET,
    DEFAULT_WINDOW_WIDTH,
)
from lens_viewer.windowing.policy import DEFAULT_OPEN_BEHAVIOR, OpenBehavior

LOGGER = logging.getLogger(__name__)

_ENV_OVERRIDES: Mapping[str, str] = {
    "LENS_VIEWER_LOCALE": "locale",
    "LENS_VIEWER_LOG_FILE": "log_file",
}
_INT_ENV_OVERRIDES: Mapping[str, str] = {
    "LENS_VIEWER_CHUNK_SIZE": "chunk_size",
}
_BOOL_ENV_OVERRIDES: Mapping[str, str] = {
    "LENS_VIEWER_DEBUG": "debug_logging",
}
_BEHAVIOR_ENV = "LENS_VIEWER_OPEN_BEHAVIOR"
_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class ViewerSettings:
    """User-tunable settings.

    Attributes:
        open_behavior: Whether files opened from a non-empty window get a new one.
        locale: Locale key; None detects it from the environment.
        chunk_size: Bytes per read when streaming JSONL files.
        window_width: Width of new windows.
        window_height: Height of new windows.
        window_offset: Cascade offset for new windows.
        log_file: Log destination; None routes logs to the Textual console.
        debug_logging: Log at DEBUG instead of INFO.
    """

    open_behavior: OpenBehavior = DEFAULT_OPEN_BEHAVIOR
    locale: str | None = None
    chunk_size: int = DEFAULT_CHUNK_SIZE
    window_width: int = DEFAULT_WINDOW_WIDTH
    window_height: int = DEFAULT_WINDOW_HEIGHT
    window_offset: int = DEFAULT_WINDOW_OFFSET
    log_file: str | None = None
    debug_logging: bool = False

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        base: "ViewerSettings | None" = None,
    ) -> "ViewerSettings":
        """Apply ``LENS_VIEWER_*`` environment overrides.

        Invalid values are logged and ignored.
        """
        env = os.environ if environ is None else environ
        settings = base or cls()
        updates: dict[str, object] = {}

        for env_key, attr in _ENV_OVERRIDES.items():
            value = env.get(env_key)
            if value:
                updates[attr] = value

        for env_key, attr in _INT_ENV_OVERRIDES.items():
            value = env.get(env_key)
            if not value:
                continue
            try:
                number = int(value)
            except ValueError:
                LOGGER.warning("Ignoring %s=%r: not an integer", env_key, value)
                continue
            if number <= 0:
                LOGGER.warning("Ignoring %s=%r: must be positive", env_key, value)
                continue
            updates[attr] = number

        for env_key, attr in _BOOL_ENV_OVERRIDES.items():
            value = env.get(env_key)
            if value is not None:
                updates[attr] = value.strip().lower() in _TRUE_VALUES

        behavior = env.get(_BEHAVIOR_ENV)
        if behavior:
            try:
                updates["open_behavior"] = OpenBehavior.parse(behavior)
            except ValueError as e:
                LOGGER.warning("Ignoring %s: %s", _BEHAVIOR_ENV, e)

        return replace(settings, **updates) if updates else settings


def configure_logging(settings: ViewerSettings) -> None:
    """Route log records to a file, or to the Textual console if no file is set.

    The terminal belongs to the UI while the app runs, so records never go
    to stderr.
    """
    level = logging.DEBUG if settings.debug_logging else logging.INFO
    if settings.log_file:
        handler: logging.Handler = logging.FileHandler(settings.log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    else:
        from textual.logging import TextualHandler

        handler = TextualHandler()

    root = logging.getLogger("lens_viewer")
    root.setLevel(level)
    root.handlers = [handler]
    root.propagate = False
