"""Textual user interface for the Lens JSON Viewer."""
