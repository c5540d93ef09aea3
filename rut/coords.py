"""Translation between buffer indices and (col, row) coordinates."""

from bisect import bisect_right
from typing import NamedTuple


class Coord(NamedTuple):
    """Screen-relative position derived from a buffer index."""
    col: int
    row: int


def line_starts(text: str) -> list[int]:
    """Return the index of the first character of every line in text.

    A text ending in a newline has a final, empty line whose start is
    len(text).
    """
    starts = [0]
    pos = text.find('\n')
    while pos != -1:
        starts.append(pos + 1)
        pos = text.find('\n', pos + 1)
    return starts


def coord_for_index(starts: list[int], index: int) -> Coord:
    """Map a buffer index to its coordinate using precomputed line starts."""
    row = bisect_right(starts, index) - 1
    return Coord(index - starts[row], row)


def index_for_coord(starts: list[int], size: int, coord: Coord) -> int:
    """Map a coordinate back to a buffer index.

    The row must exist and the column must not run past the end of the line
    (the position just before its newline is allowed).
    """
    col, row = coord
    assert 0 <= row < len(starts), f"row {row} outside 0..{len(starts) - 1}"
    line_end = starts[row + 1] - 1 if row + 1 < len(starts) else size
    assert 0 <= col <= line_end - starts[row], f"column {col} past end of line {row}"
    return starts[row] + col
