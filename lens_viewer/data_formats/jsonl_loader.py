"""
JSONL format data loader.

This module provides the JSONLLoader class for loading JSONL (JSON Lines)
files, where each non-blank line is one JSON value.
"""

from __future__ import annotations

import os
from typing import AsyncIterator, Callable

import aiofiles

from lens_viewer.data_formats.base import DataLoader
from lens_viewer.data_formats.line_decoder import decode_lines_async
from lens_viewer.data_formats.results import LineDelimited


class JSONLLoader(DataLoader):
    """Data loader for JSONL (JSON Lines) format.

    The file is read in binary chunks and streamed through the line decoder,
    so a malformed line is reported with its line number instead of aborting
    the read.

    Attributes:
        format_name: Returns 'jsonl'.
        supported_extensions: Returns ['.jsonl'].
    """

    @property
    def format_name(self) -> str:
        """Return the format name."""
        return "jsonl"

    @property
    def supported_extensions(self) -> list[str]:
        """Return supported file extensions."""
        return [".jsonl"]

    async def _read_chunks(
        self,
        filename: str,
        progress_callback: Callable[[int, int | None], None] | None,
    ) -> AsyncIterator[bytes]:
        """Yield the file's bytes in chunk_size pieces."""
        try:
            total: int | None = os.path.getsize(filename)
        except OSError:
            total = None

        bytes_read = 0
        async with aiofiles.open(filename, "rb") as f:
            while True:
                chunk = await f.read(self.chunk_size)
                if not chunk:
                    break
                bytes_read += len(chunk)
                if progress_callback is not None:
                    progress_callback(bytes_read, total)
                yield chunk

    async def load(
        self,
        filename: str,
        progress_callback: Callable[[int, int | None], None] | None = None,
    ) -> LineDelimited:
        """Stream a JSONL file through the line decoder.

        Args:
            filename: Path to the JSONL file.
            progress_callback: Optional callback(bytes_read, total_bytes).

        Returns:
            Parsed entries and per-line errors.

        Raises:
            FileNotFoundError: If the file does not exist.
            UnicodeDecodeError: If the file is not valid UTF-8.

        Examples:
            >>> result = await JSONLLoader().load("events.jsonl")
            >>> print(f"{len(result.entries)} entries, {len(result.errors)} errors")
        """
        decoded = await decode_lines_async(
            self._read_chunks(filename, progress_callback)
        )
        return LineDelimited(
            path=filename,
            entries=decoded.entries,
            errors=decoded.errors,
            entry_line_numbers=decoded.entry_line_numbers,
            total_lines=decoded.total_lines,
        )
