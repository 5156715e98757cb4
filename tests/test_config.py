"""Tests for settings, environment overrides, logging setup and the CLI."""

from __future__ import annotations

import logging

import pytest

from lens_viewer.config import ViewerSettings, configure_logging
from lens_viewer.data_formats import DEFAULT_CHUNK_SIZE
from lens_viewer.tui.app import build_parser, settings_from_args
from lens_viewer.windowing import OpenBehavior


@pytest.fixture
def restore_package_logger():
    """Undo configure_logging() so caplog keeps working in later tests."""
    logger = logging.getLogger("lens_viewer")
    saved = (logger.level, list(logger.handlers), logger.propagate)
    yield logger
    for handler in logger.handlers:
        if handler not in saved[1]:
            handler.close()
    logger.setLevel(saved[0])
    logger.handlers = saved[1]
    logger.propagate = saved[2]


class TestViewerSettings:
    def test_defaults(self):
        settings = ViewerSettings()
        assert settings.open_behavior is OpenBehavior.NEW_WINDOW
        assert settings.chunk_size == DEFAULT_CHUNK_SIZE
        assert (settings.window_width, settings.window_height, settings.window_offset) == (
            1200,
            800,
            30,
        )
        assert settings.locale is None
        assert not settings.debug_logging

    def test_no_environment_returns_same_settings(self):
        base = ViewerSettings()
        assert ViewerSettings.from_env({}, base) is base

    def test_environment_overrides(self):
        settings = ViewerSettings.from_env(
            {
                "LENS_VIEWER_LOCALE": "zh",
                "LENS_VIEWER_LOG_FILE": "/tmp/lens.log",
                "LENS_VIEWER_CHUNK_SIZE": "4096",
                "LENS_VIEWER_DEBUG": "yes",
                "LENS_VIEWER_OPEN_BEHAVIOR": "REUSE_WINDOW",
            }
        )
        assert settings.locale == "zh"
        assert settings.log_file == "/tmp/lens.log"
        assert settings.chunk_size == 4096
        assert settings.debug_logging is True
        assert settings.open_behavior is OpenBehavior.REUSE_WINDOW

    @pytest.mark.parametrize("value", ["abc", "0", "-5"])
    def test_bad_chunk_size_is_ignored(self, value, caplog):
        with caplog.at_level(logging.WARNING, logger="lens_viewer"):
            settings = ViewerSettings.from_env({"LENS_VIEWER_CHUNK_SIZE": value})
        assert settings.chunk_size == DEFAULT_CHUNK_SIZE
        assert "LENS_VIEWER_CHUNK_SIZE" in caplog.text

    def test_bad_open_behavior_is_ignored(self):
        settings = ViewerSettings.from_env({"LENS_VIEWER_OPEN_BEHAVIOR": "tabs"})
        assert settings.open_behavior is OpenBehavior.NEW_WINDOW

    def test_debug_false_values(self):
        assert ViewerSettings.from_env({"LENS_VIEWER_DEBUG": "0"}).debug_logging is False


class TestConfigureLogging:
    def test_file_handler(self, tmp_path, restore_package_logger):
        log_file = tmp_path / "viewer.log"
        configure_logging(ViewerSettings(log_file=str(log_file), debug_logging=True))

        logger = restore_package_logger
        assert logger.level == logging.DEBUG
        assert not logger.propagate
        assert isinstance(logger.handlers[0], logging.FileHandler)

        logging.getLogger("lens_viewer.windowing.router").info("routed %s", "a.json")
        logger.handlers[0].flush()
        assert "routed a.json" in log_file.read_text(encoding="utf-8")

    def test_textual_handler_without_file(self, restore_package_logger):
        from textual.logging import TextualHandler

        configure_logging(ViewerSettings())
        assert restore_package_logger.level == logging.INFO
        assert isinstance(restore_package_logger.handlers[0], TextualHandler)


class TestCommandLine:
    def test_paths_are_optional(self):
        args = build_parser().parse_args([])
        assert args.paths == []

    def test_flags_override_settings(self):
        args = build_parser().parse_args(
            ["a.json", "b.jsonl", "--reuse-window", "--locale", "zh", "--debug"]
        )
        settings = settings_from_args(args, ViewerSettings())
        assert args.paths == ["a.json", "b.jsonl"]
        assert settings.open_behavior is OpenBehavior.REUSE_WINDOW
        assert settings.locale == "zh"
        assert settings.debug_logging is True

    def test_no_flags_keep_base(self):
        base = ViewerSettings(chunk_size=1024)
        args = build_parser().parse_args(["a.json"])
        assert settings_from_args(args, base) is base

    def test_unknown_locale_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--locale", "fr"])
