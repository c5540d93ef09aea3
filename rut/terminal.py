"""Terminal interface using Blessed for display and Curtsies for input."""

import logging
from collections import deque
from typing import Optional

import blessed
from curtsies import Input
from curtsies.events import PasteEvent

from .constants import EditorConstants

logger = logging.getLogger(__name__)


class TerminalSizeError(RuntimeError):
    """The terminal size could not be determined or is too small to edit in."""


class TerminalInterface:
    """Handles terminal I/O using Blessed."""

    def __init__(self, terminal: Optional[blessed.Terminal] = None):
        """Initialize with a terminal instance (or create one)."""
        self.term = terminal or blessed.Terminal()
        self.is_fullscreen = False
        self._curtsies_input: Optional[Input] = None
        self._pending_keys: deque = deque()
        # Virtual screen state for minimal updates
        self._last_lines: Optional[list[str]] = None
        self._last_status: Optional[str] = None

    def check_size(self):
        """Raise TerminalSizeError unless there is room for text and a status line."""
        try:
            width, height = self.term.width, self.term.height
        except OSError as e:
            raise TerminalSizeError(f"Failed to retrieve terminal size: {e}") from e
        if (width is None or height is None
                or width < EditorConstants.MIN_TERMINAL_WIDTH
                or height < EditorConstants.MIN_TERMINAL_HEIGHT):
            raise TerminalSizeError(EditorConstants.TERMINAL_TOO_SMALL_MESSAGE.format(
                EditorConstants.MIN_TERMINAL_WIDTH, EditorConstants.MIN_TERMINAL_HEIGHT))

    def setup(self):
        """Enter fullscreen mode and raw input mode."""
        print(self.term.enter_fullscreen, end='')
        print(self.term.clear, end='', flush=True)
        self.is_fullscreen = True
        if self._curtsies_input is None:
            # Turn off XON/XOFF so Ctrl-S reaches us; Ctrl-C still raises SIGINT
            self._curtsies_input = Input(keynames='curtsies', disable_terminal_start_stop=True)
            self._curtsies_input.__enter__()

    def cleanup(self):
        """Exit fullscreen mode and restore terminal."""
        if self._curtsies_input is not None:
            try:
                self._curtsies_input.__exit__(None, None, None)
            except (OSError, ValueError) as e:
                # Teardown should never crash the app
                logger.warning("Could not restore terminal input mode: %s", e)
            finally:
                self._curtsies_input = None
        if self.is_fullscreen:
            print(self.term.exit_fullscreen, end='')
            print(self.term.normal_cursor, end='', flush=True)
            self.is_fullscreen = False
        self.invalidate_frame()

    def invalidate_frame(self) -> None:
        """Invalidate cached frame so next update does a full clear."""
        self._last_lines = None
        self._last_status = None

    def update_frame(self, lines: list[str], cursor_y: int, cursor_x: int,
                     status: Optional[str] = None) -> None:
        """Diff against last frame and write only changes.

        Falls back to a full clear on first paint or when the number of rows
        changes.
        """
        width = self.term.width
        if self._last_lines is None or len(self._last_lines) != len(lines):
            print(self.term.home + self.term.clear, end='')
            self._last_lines = ["" for _ in range(len(lines))]
            self._last_status = None

        for y, line in enumerate(lines):
            display_line = line[:width].ljust(width)
            if display_line != self._last_lines[y]:
                print(self.term.move(y, 0) + display_line, end='')
                self._last_lines[y] = display_line

        status_text = (status or "")[:width].ljust(width)
        if status_text != (self._last_status or ""):
            print(self.term.move(self.term.height - 1, 0) + self.term.reverse + status_text
                  + self.term.normal, end='')
            self._last_status = status_text

        print(self.term.move(cursor_y, cursor_x) + self.term.normal_cursor, end='', flush=True)

    def get_key(self, timeout=None):
        """Get a single keypress from the user.

        Args:
            timeout: Timeout in seconds (None for blocking, 0 for non-blocking)

        Returns:
            The curtsies key name, or None if no key arrived in time
        """
        if self._pending_keys:
            return self._pending_keys.popleft()
        if self._curtsies_input is None:
            return None
        # send() hands out keys curtsies has already buffered before waiting
        evt = self._curtsies_input.send(None if timeout is None else float(timeout))
        if evt is None:
            return None
        if isinstance(evt, PasteEvent):
            # A fast burst of input arrives as one event holding many keys
            self._pending_keys.extend(str(e) for e in evt.events)
            return self._pending_keys.popleft() if self._pending_keys else None
        return str(evt)

    @property
    def width(self):
        """Terminal width in columns."""
        return self.term.width

    @property
    def height(self):
        """Terminal height in rows (excluding status line)."""
        return self.term.height - 1  # Reserve one line for status
