"""
JSON format data loader.

This module provides the JSONLoader class, which reads a whole ``.json`` file
as text. Parsing and formatting are left to the renderer.
"""

from __future__ import annotations

import os
from typing import Callable

import aiofiles

from lens_viewer.data_formats.base import DataLoader
from lens_viewer.data_formats.results import PlainJson


class JSONLoader(DataLoader):
    """Data loader for plain JSON files.

    The file content is returned verbatim as ``PlainJson.raw_text``; no
    structural validation happens here. This loader is also the fallback for
    files whose extension is not recognised.

    Attributes:
        format_name: Returns 'json'.
        supported_extensions: Returns ['.json'].
    """

    @property
    def format_name(self) -> str:
        """Return the format name."""
        return "json"

    @property
    def supported_extensions(self) -> list[str]:
        """Return supported file extensions."""
        return [".json"]

    async def load(
        self,
        filename: str,
        progress_callback: Callable[[int, int | None], None] | None = None,
    ) -> PlainJson:
        """Read the whole file as UTF-8 text.

        Examples:
            >>> result = await JSONLoader().load("config.json")
            >>> result.raw_text[:1]
            '{'
        """
        async with aiofiles.open(filename, "r", encoding="utf-8", newline="") as f:
            raw_text = await f.read()

        if progress_callback is not None:
            size = os.path.getsize(filename)
            progress_callback(size, size)

        return PlainJson(path=filename, raw_text=raw_text)
