"""Cursor model keeping a buffer index and its (col, row) in step."""

from .buffer import TextBuffer
from .coords import Coord


class CursorModel:
    """Cursor over a TextBuffer.

    buffer_index is canonical; coord is recomputed from it after every
    change and is never set directly. Movement methods return True when
    the position changed, editing methods return True when the buffer did.
    """

    def __init__(self, buffer: TextBuffer, index: int = 0):
        self.buffer = buffer
        self.buffer_index = 0
        self.coord = Coord(0, 0)
        self.set_index(index)

    @property
    def col(self) -> int:
        return self.coord.col

    @property
    def row(self) -> int:
        return self.coord.row

    def _sync(self):
        self.coord = self.buffer.cursor_coord(self.buffer_index)

    def _move_to(self, index: int) -> bool:
        if index == self.buffer_index:
            return False
        self.buffer_index = index
        self._sync()
        return True

    def set_index(self, index: int) -> bool:
        """Jump to index, clamped to [0, size]."""
        index = max(0, min(index, self.buffer.size()))
        moved = index != self.buffer_index
        self.buffer_index = index
        self._sync()
        return moved

    # --- Character movement ---

    def move_left(self) -> bool:
        # Column 0 of a later line steps onto the previous line's newline,
        # which is that line's end.
        if self.buffer_index == 0:
            return False
        return self._move_to(self.buffer_index - 1)

    def move_right(self) -> bool:
        if self.buffer_index >= self.buffer.size():
            return False
        return self._move_to(self.buffer_index + 1)

    # --- Line movement ---

    def _move_to_line(self, line: int) -> bool:
        col = min(self.coord.col, self.buffer.line_len(line))
        return self._move_to(self.buffer.line_start(line) + col)

    def move_up(self) -> bool:
        """Move to the previous line, keeping the column where it fits."""
        if self.coord.row == 0:
            return False
        return self._move_to_line(self.coord.row - 1)

    def move_down(self) -> bool:
        """Move to the next line, keeping the column where it fits."""
        if self.coord.row >= self.buffer.line_count() - 1:
            return False
        return self._move_to_line(self.coord.row + 1)

    def move_line_start(self) -> bool:
        return self._move_to(self.buffer.line_start(self.coord.row))

    def move_line_end(self) -> bool:
        row = self.coord.row
        return self._move_to(self.buffer.line_start(row) + self.buffer.line_len(row))

    # --- Word movement ---

    def move_word_left(self) -> bool:
        if self.buffer_index == 0:
            return False
        return self._move_to(self.buffer.start_of_word(self.buffer_index))

    def move_word_right(self) -> bool:
        if self.buffer_index >= self.buffer.size():
            return False
        return self._move_to(self.buffer.end_of_word(self.buffer_index))

    # --- Editing ---

    def insert_char(self, char: str) -> bool:
        """Insert char at the cursor and step past it.

        After a newline the cursor lands on column 0 of the next row.
        """
        self.buffer.insert(self.buffer_index, char)
        self.buffer_index += 1
        self._sync()
        return True

    def backspace(self) -> bool:
        """Delete the character before the cursor."""
        if self.buffer_index == 0:
            return False
        self.buffer.delete(self.buffer_index - 1, self.buffer_index)
        self.buffer_index -= 1
        self._sync()
        return True

    def delete_forward(self) -> bool:
        """Delete the character at the cursor; the cursor stays put."""
        removed = self.buffer.delete(self.buffer_index, self.buffer_index + 1)
        self._sync()
        return removed
