"""Pytest configuration and shared fixtures for lens_viewer tests."""

from __future__ import annotations

import asyncio
import itertools
import json
from pathlib import Path
from typing import Any

import pytest

from lens_viewer.data_formats import Failure, FileIngester, IngestResult
from lens_viewer.windowing import Bounds, FindResult, OpenRouter, WindowRegistry

WORK_AREA = Bounds(0, 0, 1920, 1080)


def write_jsonl(path: Path, records: list[Any]) -> Path:
    """Helper to write records to a JSONL file."""
    with open(path, "w", encoding="utf-8") as f:
        for record in records:
            f.write(json.dumps(record, ensure_ascii=False) + "\n")
    return path


def write_json(path: Path, data: Any) -> Path:
    """Helper to write a JSON document."""
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


class FakeHost:
    """WindowHost that records every call instead of showing windows."""

    def __init__(self, selected_path: str | None = None) -> None:
        self._ids = itertools.count(1)
        self.created: list[tuple[int, Bounds]] = []
        self.loading: list[tuple[int, str]] = []
        self.delivered: list[tuple[int, IngestResult]] = []
        self.errors: list[tuple[int | None, str, str]] = []
        self.closed: list[int] = []
        self.titles: dict[int, str] = {}
        self.menus: list[Any] = []
        self.find_calls: list[tuple[int, str, Any]] = []
        self.stop_find_calls: list[tuple[int, Any]] = []
        self.dialog_parents: list[int | None] = []
        self.selected_path = selected_path
        self.find_result = FindResult(matches=2, active_match_ordinal=1)

    def create_window(self, bounds: Bounds) -> int:
        window_id = next(self._ids)
        self.created.append((window_id, bounds))
        return window_id

    async def wait_until_loaded(self, window_id: int) -> None:
        await asyncio.sleep(0)

    def loading_started(self, window_id: int, path: str) -> None:
        self.loading.append((window_id, path))

    def deliver(self, window_id: int, result: IngestResult) -> None:
        self.delivered.append((window_id, result))

    def show_error(self, window_id: int | None, title: str, message: str) -> None:
        self.errors.append((window_id, title, message))

    def work_area(self, reference: Bounds | None) -> Bounds:
        return WORK_AREA

    def close_window(self, window_id: int) -> None:
        self.closed.append(window_id)

    def find_in_page(self, window_id: int, query: str, options: Any) -> FindResult:
        self.find_calls.append((window_id, query, options))
        return self.find_result

    def stop_find_in_page(self, window_id: int, action: Any) -> None:
        self.stop_find_calls.append((window_id, action))

    def set_title(self, window_id: int, title: str) -> bool:
        self.titles[window_id] = title
        return True

    async def select_file(self, parent: int | None) -> str | None:
        self.dialog_parents.append(parent)
        return self.selected_path

    def rebuild_menu(self, menu: Any) -> None:
        self.menus.append(menu)

    @property
    def created_ids(self) -> list[int]:
        return [window_id for window_id, _ in self.created]

    def delivered_paths(self, window_id: int) -> list[str]:
        return [result.path for wid, result in self.delivered if wid == window_id]


class GatedIngester(FileIngester):
    """Ingester whose reads block until the test releases them."""

    def __init__(self) -> None:
        super().__init__()
        self._gates: dict[str, asyncio.Event] = {}
        self.failures: dict[str, str] = {}

    def gate(self, path: str) -> asyncio.Event:
        return self._gates.setdefault(path, asyncio.Event())

    def release(self, path: str) -> None:
        self.gate(path).set()

    async def ingest(self, path: str, progress_callback=None) -> IngestResult:
        await self.gate(path).wait()
        if path in self.failures:
            return Failure(path, self.failures[path])
        return await super().ingest(path, progress_callback)


@pytest.fixture
def host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def registry() -> WindowRegistry:
    return WindowRegistry()


@pytest.fixture
def router(host: FakeHost) -> OpenRouter:
    return OpenRouter(host)


@pytest.fixture
def sample_files(tmp_path: Path) -> dict[str, str]:
    """A JSON and two JSONL files on disk."""
    return {
        "a": str(write_jsonl(tmp_path / "a.jsonl", [{"n": 1}, {"n": 2}])),
        "b": str(write_jsonl(tmp_path / "b.jsonl", [{"n": 3}])),
        "doc": str(write_json(tmp_path / "doc.json", {"name": "lens", "tags": [1, 2]})),
    }
