"""Tests for the index/coordinate helpers."""

import pytest

from rut.coords import Coord, coord_for_index, index_for_coord, line_starts


def test_line_starts():
    """Line starts are 0 and every index after a newline."""
    assert line_starts("") == [0]
    assert line_starts("abc") == [0]
    assert line_starts("a\nbc\n") == [0, 2, 5]
    assert line_starts("\n\n") == [0, 1, 2]


def test_coord_for_index_on_newline_belongs_to_line_it_ends():
    """A newline is the last column of the line it ends."""
    starts = line_starts("ab\ncd")
    assert coord_for_index(starts, 2) == Coord(2, 0)
    assert coord_for_index(starts, 3) == Coord(0, 1)


def test_coord_fields():
    coord = Coord(4, 2)
    assert coord.col == 4
    assert coord.row == 2
    assert tuple(coord) == (4, 2)


def test_index_for_coord_last_line_runs_to_size():
    """The last line may be addressed up to the buffer size."""
    text = "ab\ncdef"
    starts = line_starts(text)
    assert index_for_coord(starts, len(text), Coord(4, 1)) == 7
    with pytest.raises(AssertionError):
        index_for_coord(starts, len(text), Coord(5, 1))
