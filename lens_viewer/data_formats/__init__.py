"""
Data formats module for viewer file ingestion.

This module reads ``.json`` files as verbatim text and streams ``.jsonl``
files through a line decoder that reports malformed lines individually.

Usage:
    from lens_viewer.data_formats import FileIngester, LineDelimited

    result = await FileIngester().ingest("events.jsonl")
    if isinstance(result, LineDelimited):
        print(len(result.entries), summarize_line_errors(result.errors))

    # Or decode an in-memory stream
    from lens_viewer.data_formats import decode_lines
    decode_lines(['{"a": 1}\\n'])
"""

from lens_viewer.data_formats.base import DEFAULT_CHUNK_SIZE, DataLoader
from lens_viewer.data_formats.directory_loader import (
    SUPPORTED_EXTENSIONS,
    discover_data_files,
    discover_subdirectories,
    format_file_size,
    is_supported_file,
)
from lens_viewer.data_formats.format_detector import (
    EXTENSION_MAP,
    SUPPORTED_FORMATS,
    detect_format,
    get_loader,
    get_loader_for_format,
)
from lens_viewer.data_formats.ingester import FileIngester
from lens_viewer.data_formats.json_loader import JSONLoader
from lens_viewer.data_formats.jsonl_loader import JSONLLoader
from lens_viewer.data_formats.line_decoder import (
    DecodeResult,
    LineDecoder,
    decode_lines,
    decode_lines_async,
    strict_loads,
)
from lens_viewer.data_formats.results import (
    Entry,
    Failure,
    FailureKind,
    IngestResult,
    LineDelimited,
    LineError,
    PlainJson,
    summarize_line_errors,
)

__all__ = [
    # Base class
    "DataLoader",
    "DEFAULT_CHUNK_SIZE",
    # Format detection
    "detect_format",
    "get_loader",
    "get_loader_for_format",
    "EXTENSION_MAP",
    "SUPPORTED_FORMATS",
    # Directory scanning
    "SUPPORTED_EXTENSIONS",
    "discover_data_files",
    "discover_subdirectories",
    "format_file_size",
    "is_supported_file",
    # Decoding
    "DecodeResult",
    "LineDecoder",
    "decode_lines",
    "decode_lines_async",
    "strict_loads",
    # Results
    "Entry",
    "Failure",
    "FailureKind",
    "IngestResult",
    "LineDelimited",
    "LineError",
    "PlainJson",
    "summarize_line_errors",
    # Loaders
    "FileIngester",
    "JSONLLoader",
    "JSONLoader",
]
