"""
Result types produced by file ingestion.

``IngestResult`` is a closed union of three frozen dataclasses. Consumers are
expected to branch on the concrete type with ``isinstance`` and handle every
case:

    - PlainJson: whole ``.json`` file as text, not parsed here
    - LineDelimited: parsed ``.jsonl`` entries plus per-line errors
    - Failure: the file could not be read at all
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


@dataclass(frozen=True)
class LineError:
    """A single line of a JSONL stream that failed to parse.

    Attributes:
        line_number: 1-based position of the line in the stream, blank
            lines included.
        raw_line: The line text without its line terminator.
        message: Parser message describing the failure.
    """

    line_number: int
    raw_line: str
    message: str


@dataclass(frozen=True)
class Entry:
    """A successfully parsed JSONL line."""

    line_number: int
    value: Any


class FailureKind(str, Enum):
    """Classification of ingest failures."""

    NOT_FOUND = "not-found"
    PERMISSION_DENIED = "permission-denied"
    IS_A_DIRECTORY = "is-a-directory"
    DECODE_ERROR = "decode-error"
    IO_ERROR = "io-error"


@dataclass(frozen=True)
class PlainJson:
    """Whole-file text of a ``.json`` file, returned verbatim."""

    path: str
    raw_text: str


@dataclass(frozen=True)
class LineDelimited:
    """Decoded content of a ``.jsonl`` file.

    ``entries`` and ``errors`` are each in original line order. Every
    non-blank line appears in exactly one of them.
    """

    path: str
    entries: list[Any] = field(default_factory=list)
    errors: list[LineError] = field(default_factory=list)
    entry_line_numbers: list[int] = field(default_factory=list)
    total_lines: int = 0


@dataclass(frozen=True)
class Failure:
    """The file could not be read."""

    path: str
    reason: str
    kind: FailureKind = FailureKind.IO_ERROR


IngestResult = Union[PlainJson, LineDelimited, Failure]


DEFAULT_LINE_ERRORS_TEMPLATE = "malformed entries at lines: {lines}"


def summarize_line_errors(
    errors: list[LineError],
    limit: int = 10,
    template: str = DEFAULT_LINE_ERRORS_TEMPLATE,
) -> str:
    """Render a short notice naming the malformed lines.

    Args:
        errors: Line errors in line order.
        limit: Maximum number of line numbers to list before eliding.
        template: Message with ``{lines}`` and optionally ``{count}``
            placeholders, e.g. a localized message.

    Returns:
        A message such as ``"malformed entries at lines: 3, 7"`` or an
        empty string when there are no errors.

    Examples:
        >>> summarize_line_errors([LineError(3, "{bad", "Expecting...")])
        'malformed entries at lines: 3'
    """
    if not errors:
        return ""
    numbers = [str(error.line_number) for error in errors[:limit]]
    remaining = len(errors) - limit
    if remaining > 0:
        numbers.append(f"... ({remaining} more)")
    return template.format(count=len(errors), lines=", ".join(numbers))
