"""Projection of the buffer onto terminal rows.

Lines are wrapped at a fixed width: every character takes one cell, and a
line of length L takes L // width + 1 screen rows. The extra row of a line
whose length is a multiple of the width holds the cursor when it sits at
the end of that line.
"""

from typing import Optional

from .buffer import TextBuffer
from .coords import Coord


def display_text(line: str) -> str:
    """Make a line safe to print: one visible cell per character."""
    return ''.join(' ' if (ch == '\t' or ord(ch) < 32 or ord(ch) == 127) else ch for ch in line)


class ScreenLayout:
    """Fixed-width wrap rule shared by rendering and cursor placement."""

    def __init__(self, width: int):
        assert width > 0, "screen width must be positive"
        self.width = width

    def rows_for_line(self, length: int) -> int:
        return length // self.width + 1

    def wrap(self, line: str) -> list[str]:
        """Split a line into the screen rows it occupies."""
        return [line[i:i + self.width] for i in range(0, self.rows_for_line(len(line)) * self.width, self.width)]

    def screen_position(self, line_lengths: list[int], coord: Coord) -> tuple[int, int]:
        """Return (y, x) of a coordinate, with y counted from the first line."""
        y = sum(self.rows_for_line(length) for length in line_lengths[:coord.row])
        return y + coord.col // self.width, coord.col % self.width


class TerminalTextView:
    """Visible window onto the buffer.

    top is the first screen row shown. render() scrolls just enough to keep
    the cursor visible and fills lines with the rows to draw; it never
    changes the buffer or the cursor.
    """

    def __init__(self, num_columns: int = 80, num_rows: int = 24):
        self.num_columns = num_columns
        self.num_rows = num_rows
        self.top = 0
        self.lines: list[str] = []
        self.visual_cursor_y = 0
        self.visual_cursor_x = 0
        self._layout: Optional[ScreenLayout] = None

    @property
    def layout(self) -> ScreenLayout:
        if self._layout is None or self._layout.width != self.num_columns:
            self._layout = ScreenLayout(self.num_columns)
        return self._layout

    def resize(self, num_columns: int, num_rows: int):
        self.num_columns = num_columns
        self.num_rows = num_rows

    def render(self, buffer: TextBuffer, coord: Coord):
        """Recompute the visible rows and the cursor's place among them."""
        layout = self.layout
        text_lines = buffer.lines()
        y, x = layout.screen_position([len(line) for line in text_lines], coord)

        if y < self.top:
            self.top = y
        elif y >= self.top + self.num_rows:
            self.top = y - self.num_rows + 1

        rows: list[str] = []
        screen_row = 0
        bottom = self.top + self.num_rows
        for line in text_lines:
            count = layout.rows_for_line(len(line))
            if screen_row + count > self.top:
                for i, part in enumerate(layout.wrap(display_text(line))):
                    if self.top <= screen_row + i < bottom:
                        rows.append(part)
            screen_row += count
            if screen_row >= bottom:
                break

        rows.extend([""] * (self.num_rows - len(rows)))
        self.lines = rows
        self.visual_cursor_y = y - self.top
        self.visual_cursor_x = x
