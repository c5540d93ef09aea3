"""Editable text container with line queries and word scanning."""

from typing import IO, Optional

from .coords import Coord, coord_for_index, index_for_coord, line_starts


class TextBuffer:
    """Ordered sequence of characters; lines are delimited by '\\n'.

    The content is held as an immutable string that is replaced on every
    mutation, so snapshot() can hand the current string to a save thread
    without copying. Line start offsets are cached and dropped whenever
    the content changes.
    """

    def __init__(self, text: str = ""):
        self._text = text
        self._line_starts: Optional[list[int]] = None

    @classmethod
    def from_file(cls, f: IO[str]) -> "TextBuffer":
        """Create a buffer from the full contents of an open text file."""
        return cls(f.read())

    def __str__(self) -> str:
        return self._text

    def __len__(self) -> int:
        return len(self._text)

    def _starts(self) -> list[int]:
        if self._line_starts is None:
            self._line_starts = line_starts(self._text)
        return self._line_starts

    def _replace(self, text: str):
        self._text = text
        self._line_starts = None

    # --- Mutation ---

    def insert(self, index: int, char: str):
        """Insert one character before position index.

        Args:
            index: Position in [0, size]; size appends at the end
            char: A single character
        """
        assert 0 <= index <= len(self._text), f"insert index {index} outside 0..{len(self._text)}"
        assert len(char) == 1, f"expected one character, got {char!r}"
        self._replace(self._text[:index] + char + self._text[index:])

    def delete(self, start: int, end: int) -> bool:
        """Remove the characters in [start, end).

        Empty, reversed and out-of-bounds ranges are ignored.

        Returns:
            True if anything was removed
        """
        if start < 0 or end > len(self._text) or start >= end:
            return False
        self._replace(self._text[:start] + self._text[end:])
        return True

    # --- Queries ---

    def size(self) -> int:
        """Number of characters in the buffer."""
        return len(self._text)

    def line_count(self) -> int:
        """Number of lines; a trailing newline starts an extra empty line."""
        return len(self._starts())

    def line_start(self, line: int) -> int:
        """Buffer index of the first character of a line."""
        starts = self._starts()
        assert 0 <= line < len(starts), f"line {line} outside 0..{len(starts) - 1}"
        return starts[line]

    def line_len(self, line: int) -> int:
        """Length of a line, excluding its terminating newline."""
        starts = self._starts()
        assert 0 <= line < len(starts), f"line {line} outside 0..{len(starts) - 1}"
        if line + 1 < len(starts):
            return starts[line + 1] - 1 - starts[line]
        return len(self._text) - starts[line]

    def lines(self) -> list[str]:
        """All lines without their terminators."""
        return self._text.split('\n')

    def snapshot(self) -> str:
        """Immutable copy of the content for persistence."""
        return self._text

    # --- Coordinates ---

    def cursor_coord(self, index: int) -> Coord:
        """Return (col, row) for a buffer index in [0, size]."""
        assert 0 <= index <= len(self._text), f"index {index} outside 0..{len(self._text)}"
        return coord_for_index(self._starts(), index)

    def index_of(self, coord: Coord) -> int:
        """Return the buffer index for a (col, row) coordinate."""
        return index_for_coord(self._starts(), len(self._text), coord)

    # --- Word scanning ---

    def start_of_word(self, index: int) -> int:
        """Index of the first character of the word ending at or before index.

        Skips the whitespace run immediately before index (if any), then the
        word before it. Returns 0 when the scan reaches the buffer start.
        """
        text = self._text
        pos = min(index, len(text))
        while pos > 0 and text[pos - 1].isspace():
            pos -= 1
        while pos > 0 and not text[pos - 1].isspace():
            pos -= 1
        return pos

    def end_of_word(self, index: int) -> int:
        """Index of the first whitespace after the word at or after index.

        Skips the whitespace run starting at index (if any), then the word.
        Returns size when the scan reaches the buffer end, and index itself
        when it is already at or past the end.
        """
        text = self._text
        size = len(text)
        if index >= size:
            return index
        pos = max(index, 0)
        while pos < size and text[pos].isspace():
            pos += 1
        while pos < size and not text[pos].isspace():
            pos += 1
        return pos
