"""
Lens JSON Viewer.

A multi-window terminal viewer for large JSON and JSONL files.

Usage:
    lens-viewer data.jsonl other.json

Components:
    - data_formats: Streaming JSONL decoder and file ingestion
    - windowing: Window registry, open-request routing and pending queue
    - tui: Textual application hosting the render windows
"""

__version__ = "0.3.0"
