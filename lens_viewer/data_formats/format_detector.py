"""
Format detection utilities for viewer files.

Format selection is purely by case-insensitive file extension; file content
is never sniffed.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from lens_viewer.errors import UnsupportedFormat

if TYPE_CHECKING:
    from lens_viewer.data_formats.base import DataLoader

LOGGER = logging.getLogger(__name__)

# Mapping of file extensions to format names
EXTENSION_MAP: dict[str, str] = {
    ".jsonl": "jsonl",
    ".json": "json",
}

# Supported format names
SUPPORTED_FORMATS = frozenset(["jsonl", "json"])


def detect_format(filename: str) -> str:
    """Detect file format from its extension.

    Args:
        filename: Path to the file.

    Returns:
        Format name: "jsonl" or "json".

    Raises:
        UnsupportedFormat: If the extension is not recognised.

    Examples:
        >>> detect_format("data.jsonl")
        'jsonl'
        >>> detect_format("RECORDS.JSON")
        'json'
    """
    extension = Path(filename).suffix.lower()
    if extension in EXTENSION_MAP:
        return EXTENSION_MAP[extension]
    raise UnsupportedFormat(filename, sorted(EXTENSION_MAP.keys()))


def get_loader_for_format(format_name: str, chunk_size: int | None = None) -> "DataLoader":
    """Get a loader for a specific format name.

    Args:
        format_name: The format name ("jsonl" or "json").
        chunk_size: Optional read size passed to the loader.

    Returns:
        A DataLoader instance for the specified format.

    Raises:
        ValueError: If the format name is not supported.
    """
    # Import loaders here to avoid circular imports
    from lens_viewer.data_formats.base import DEFAULT_CHUNK_SIZE
    from lens_viewer.data_formats.json_loader import JSONLoader
    from lens_viewer.data_formats.jsonl_loader import JSONLLoader

    if format_name not in SUPPORTED_FORMATS:
        raise ValueError(
            f"Unsupported format '{format_name}'. "
            f"Supported formats: {', '.join(sorted(SUPPORTED_FORMATS))}"
        )

    size = chunk_size or DEFAULT_CHUNK_SIZE
    loaders: dict[str, DataLoader] = {
        "jsonl": JSONLLoader(size),
        "json": JSONLoader(size),
    }
    return loaders[format_name]


def get_loader(filename: str, chunk_size: int | None = None) -> "DataLoader":
    """Factory function to get the appropriate loader for a file.

    Files with an unrecognised extension should have been rejected by the
    file-selection filter; if one gets through anyway it is read as plain
    JSON text.

    Args:
        filename: Path to the file.
        chunk_size: Optional read size passed to the loader.

    Returns:
        A DataLoader instance appropriate for the file.

    Examples:
        >>> get_loader("data.jsonl").format_name
        'jsonl'
        >>> get_loader("notes.txt").format_name
        'json'
    """
    try:
        format_name = detect_format(filename)
    except UnsupportedFormat as e:
        LOGGER.warning("%s; reading as plain text", e)
        format_name = "json"
    return get_loader_for_format(format_name, chunk_size)
