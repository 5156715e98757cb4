"""
Streaming decoder for line-delimited JSON.

This module turns a stream of text or byte chunks into one outcome per line,
carrying unterminated text over chunk boundaries. A malformed line is recorded
as a ``LineError`` and decoding continues with the next line.

Usage:
    from lens_viewer.data_formats.line_decoder import decode_lines

    result = decode_lines(['{"a": 1}\\n{"a"', ': 2}\\n'])
    result.entries  # [{'a': 1}, {'a': 2}]

Note: ``decode_lines`` and ``decode_lines_async`` hold every parsed entry in
memory, so the largest decodable file is bounded by available memory. Drive
a ``LineDecoder`` with feed() and finish() to process entries without
collecting them.
"""

from __future__ import annotations

import codecs
import json
from dataclasses import dataclass, field
from typing import Any, AsyncIterable, Callable, Iterable, Union

from lens_viewer.data_formats.results import Entry, LineError

LineOutcome = Union[Entry, LineError]
Chunk = Union[str, bytes]

# Progress callback frequency (every N lines)
PROGRESS_UPDATE_FREQUENCY = 1000


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def strict_loads(text: str) -> Any:
    """Parse JSON text, rejecting the NaN and Infinity extensions."""
    return json.loads(text, parse_constant=_reject_constant)


@dataclass
class DecodeResult:
    """Collected output of a full decode.

    Attributes:
        entries: Parsed values in line order.
        errors: Line errors in line order.
        entry_line_numbers: Line number of each entry, parallel to entries.
        total_lines: Number of lines seen, blank lines included.
    """

    entries: list[Any] = field(default_factory=list)
    errors: list[LineError] = field(default_factory=list)
    entry_line_numbers: list[int] = field(default_factory=list)
    total_lines: int = 0

    def add(self, outcome: LineOutcome) -> None:
        """Append a per-line outcome to the matching sequence."""
        if isinstance(outcome, Entry):
            self.entries.append(outcome.value)
            self.entry_line_numbers.append(outcome.line_number)
        else:
            self.errors.append(outcome)


class LineDecoder:
    """Incremental JSONL decoder.

    Feed chunks with ``feed()`` and call ``finish()`` once the stream ends.
    Both return the outcomes for the lines completed by that call, in line
    order. Blank lines (after trimming) produce no outcome but still advance
    the line counter.

    Byte chunks are decoded as UTF-8 incrementally, so a chunk may end in
    the middle of a multi-byte character.

    Attributes:
        line_count: Number of complete lines seen so far.
    """

    def __init__(
        self,
        progress_callback: Callable[[int], None] | None = None,
    ) -> None:
        """Initialize the decoder.

        Args:
            progress_callback: Optional callback(lines_seen) invoked every
                PROGRESS_UPDATE_FREQUENCY lines.
        """
        self._carry = ""
        self._bytes_decoder = codecs.getincrementaldecoder("utf-8")()
        self._finished = False
        self._progress_callback = progress_callback
        self.line_count = 0

    def feed(self, chunk: Chunk) -> list[LineOutcome]:
        """Consume one chunk and return outcomes for every completed line.

        Args:
            chunk: Text or UTF-8 bytes.

        Returns:
            Outcomes for the lines terminated inside this chunk.

        Raises:
            UnicodeDecodeError: If a byte chunk is not valid UTF-8.
            RuntimeError: If called after finish().
        """
        if self._finished:
            raise RuntimeError("LineDecoder.feed() called after finish()")

        if isinstance(chunk, bytes):
            text = self._bytes_decoder.decode(chunk)
        else:
            text = chunk
        if not text:
            return []

        pieces = (self._carry + text).split("\n")
        # The last piece has no terminator yet
        self._carry = pieces.pop()
        return [
            outcome
            for outcome in (self._decode_line(piece) for piece in pieces)
            if outcome is not None
        ]

    def finish(self) -> list[LineOutcome]:
        """Flush the trailing unterminated fragment as a final line.

        Returns:
            The outcome for the final fragment, if it was non-blank.

        Raises:
            UnicodeDecodeError: If the byte stream ended mid-character.
        """
        if self._finished:
            return []
        self._finished = True

        tail = self._bytes_decoder.decode(b"", final=True)
        remainder = self._carry + tail
        self._carry = ""
        if not remainder:
            return []
        outcome = self._decode_line(remainder)
        return [outcome] if outcome is not None else []

    def _decode_line(self, line: str) -> LineOutcome | None:
        """Parse one complete line, counting it whether or not it is blank."""
        self.line_count += 1
        if (
            self._progress_callback is not None
            and self.line_count % PROGRESS_UPDATE_FREQUENCY == 0
        ):
            self._progress_callback(self.line_count)

        if line.endswith("\r"):
            line = line[:-1]
        if not line.strip():
            return None

        try:
            return Entry(self.line_count, strict_loads(line))
        except json.JSONDecodeError as e:
            return LineError(self.line_count, line, f"{e.msg} (column {e.colno})")
        except (ValueError, RecursionError) as e:
            # Non-finite constants, integer-size limits and deep nesting
            return LineError(self.line_count, line, str(e) or type(e).__name__)


def decode_lines(
    chunks: Iterable[Chunk],
    progress_callback: Callable[[int], None] | None = None,
) -> DecodeResult:
    """Decode a synchronous stream of chunks into a DecodeResult.

    Args:
        chunks: Text or byte chunks in stream order.
        progress_callback: Optional callback(lines_seen).

    Returns:
        Entries and errors, each in original line order.

    Examples:
        >>> result = decode_lines(['{"n": 1}\\n', '{bad\\n'])
        >>> result.entries, [e.line_number for e in result.errors]
        ([{'n': 1}], [2])
    """
    decoder = LineDecoder(progress_callback)
    result = DecodeResult()
    for chunk in chunks:
        for outcome in decoder.feed(chunk):
            result.add(outcome)
    for outcome in decoder.finish():
        result.add(outcome)
    result.total_lines = decoder.line_count
    return result


async def decode_lines_async(
    chunks: AsyncIterable[Chunk],
    progress_callback: Callable[[int], None] | None = None,
) -> DecodeResult:
    """Decode an asynchronous stream of chunks into a DecodeResult.

    The coroutine suspends between chunks while the source awaits I/O.

    Args:
        chunks: Async iterable of text or byte chunks.
        progress_callback: Optional callback(lines_seen).

    Returns:
        Entries and errors, each in original line order.
    """
    decoder = LineDecoder(progress_callback)
    result = DecodeResult()
    async for chunk in chunks:
        for outcome in decoder.feed(chunk):
            result.add(outcome)
    for outcome in decoder.finish():
        result.add(outcome)
    result.total_lines = decoder.line_count
    return result
