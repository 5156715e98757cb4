"""
File ingestion for the viewer.

FileIngester picks a loader by extension and turns every I/O problem into a
``Failure`` result, so callers never see an exception from a bad file.
"""

from __future__ import annotations

import logging
from typing import Callable

from lens_viewer.data_formats.base import DEFAULT_CHUNK_SIZE
from lens_viewer.data_formats.format_detector import get_loader
from lens_viewer.data_formats.results import Failure, FailureKind, IngestResult

LOGGER = logging.getLogger(__name__)


def _failure_from_exception(path: str, error: Exception) -> Failure:
    """Classify a read error into a Failure."""
    if isinstance(error, FileNotFoundError):
        return Failure(path, f"File not found: {path}", FailureKind.NOT_FOUND)
    if isinstance(error, IsADirectoryError):
        return Failure(path, f"Is a directory: {path}", FailureKind.IS_A_DIRECTORY)
    if isinstance(error, PermissionError):
        return Failure(path, f"Permission denied: {path}", FailureKind.PERMISSION_DENIED)
    if isinstance(error, UnicodeDecodeError):
        return Failure(
            path,
            f"File is not valid UTF-8 text (byte {error.start}): {path}",
            FailureKind.DECODE_ERROR,
        )
    return Failure(path, f"Unable to read file: {error}", FailureKind.IO_ERROR)


class FileIngester:
    """Reads ``.json`` and ``.jsonl`` files into IngestResult values.

    Attributes:
        chunk_size: Bytes per read when streaming line-delimited files.
    """

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        self.chunk_size = chunk_size

    async def ingest(
        self,
        path: str,
        progress_callback: Callable[[int, int | None], None] | None = None,
    ) -> IngestResult:
        """Read a file, choosing the decoding path from its extension.

        Args:
            path: Path to the file.
            progress_callback: Optional callback(bytes_read, total_bytes).

        Returns:
            PlainJson for ``.json`` (and unrecognised extensions),
            LineDelimited for ``.jsonl``, or Failure if the file could not
            be read.
        """
        loader = get_loader(path, self.chunk_size)
        try:
            result = await loader.load(path, progress_callback)
        except (OSError, UnicodeDecodeError) as e:
            failure = _failure_from_exception(path, e)
            LOGGER.warning("Ingest failed for %s: %s", path, failure.reason)
            return failure

        LOGGER.debug("Ingested %s as %s", path, loader.format_name)
        return result
