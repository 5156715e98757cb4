"""
Abstract base class for data loaders.

This module defines the DataLoader interface that the format-specific
loaders implement. Loaders raise on I/O problems; FileIngester converts
those into Failure results.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from lens_viewer.data_formats.results import LineDelimited, PlainJson

# Default read size for streaming loaders (64 KiB)
DEFAULT_CHUNK_SIZE = 64 * 1024


class DataLoader(ABC):
    """Abstract base class for loading viewer content.

    All format-specific loaders (JSONL, JSON) must inherit from this class
    and implement all abstract members.
    """

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        """Initialize the loader.

        Args:
            chunk_size: Number of bytes requested per read.

        Raises:
            ValueError: If chunk_size is not positive.
        """
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self.chunk_size = chunk_size

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Return the format name (e.g., 'jsonl', 'json')."""
        pass

    @property
    @abstractmethod
    def supported_extensions(self) -> list[str]:
        """Return supported file extensions (e.g., ['.jsonl'])."""
        pass

    @abstractmethod
    async def load(
        self,
        filename: str,
        progress_callback: Callable[[int, int | None], None] | None = None,
    ) -> PlainJson | LineDelimited:
        """Read a file into an ingest result.

        Args:
            filename: Path to the file.
            progress_callback: Optional callback(bytes_read, total_bytes) for
                              progress updates. total_bytes may be None if unknown.

        Returns:
            The decoded content.

        Raises:
            FileNotFoundError: If the file does not exist.
            PermissionError: If the file cannot be opened.
            UnicodeDecodeError: If the file is not valid UTF-8.
        """
        pass
