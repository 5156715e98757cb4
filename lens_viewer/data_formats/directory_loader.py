"""
Directory listing for the file-selection dialog.

Only ``.json`` and ``.jsonl`` files are offered. Hidden entries are skipped
and entries that vanish or cannot be stat'ed while listing are left out.
"""

from __future__ import annotations

from pathlib import Path

from lens_viewer.data_formats.format_detector import EXTENSION_MAP

SUPPORTED_EXTENSIONS = frozenset(EXTENSION_MAP)

_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


def is_supported_file(path: str | Path) -> bool:
    """Return True when the path has a .json or .jsonl extension (any case)."""
    return Path(path).suffix.lower() in SUPPORTED_EXTENSIONS


def _visible_entries(directory: str) -> list[Path]:
    try:
        return [entry for entry in Path(directory).iterdir() if not entry.name.startswith(".")]
    except OSError:
        return []


def discover_data_files(directory: str) -> list[dict]:
    """List the viewable files directly inside ``directory``.

    Returns:
        Dicts with ``path`` (absolute), ``name``, ``format`` (``json`` or
        ``jsonl``) and ``size`` in bytes, sorted by name ignoring case.
        An unreadable directory gives an empty list.
    """
    files = []
    for entry in _visible_entries(directory):
        if not is_supported_file(entry):
            continue
        try:
            if not entry.is_file():
                continue
            size = entry.stat().st_size
        except OSError:
            continue
        files.append(
            {
                "path": str(entry.absolute()),
                "name": entry.name,
                "format": EXTENSION_MAP[entry.suffix.lower()],
                "size": size,
            }
        )
    files.sort(key=lambda info: info["name"].lower())
    return files


def discover_subdirectories(directory: str) -> list[str]:
    """List visible subdirectories of a directory, sorted by name."""
    return sorted(
        (str(entry.absolute()) for entry in _visible_entries(directory) if entry.is_dir()),
        key=str.lower,
    )


def format_file_size(size_bytes: float) -> str:
    """Render a byte count with one decimal, e.g. ``'1.2 MB'``."""
    size = float(size_bytes)
    unit = 0
    while size >= 1024 and unit < len(_SIZE_UNITS) - 1:
        size /= 1024
        unit += 1
    return f"{size:.1f} {_SIZE_UNITS[unit]}"
