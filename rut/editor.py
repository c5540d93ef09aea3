"""Main editor controller."""

import logging
import os
import select
import signal
from typing import Optional

from .buffer import TextBuffer
from .commands import CommandRegistry
from .constants import EditorConstants
from .cursor import CursorModel
from .keyboard import KeyboardHandler, KeyEvent
from .persistence import DocumentFile, SaveResult, SaveWorker
from .settings import Settings
from .terminal import TerminalInterface
from .view import TerminalTextView

logger = logging.getLogger(__name__)


class Editor:
    """Editing session for one document.

    Owns the buffer, the cursor, the open file and the save worker. Key
    input, terminal resizes, SIGINT and finished saves all wake the event
    loop; after each of them the view is redrawn.
    """

    def __init__(self, filename: str, terminal: Optional[TerminalInterface] = None,
                 settings: Optional[Settings] = None):
        """Open filename (creating it if needed) and load it.

        Raises:
            OSError: If the file cannot be opened or read
        """
        self.settings = settings or Settings()
        self.filename = filename
        self.document = DocumentFile(filename, atomic=self.settings.atomic_save)
        try:
            self.buffer = TextBuffer(self.document.read())
        except (OSError, ValueError):
            self.document.close()
            raise
        self.cursor = CursorModel(self.buffer)
        self.terminal = terminal or TerminalInterface()
        self.keyboard = KeyboardHandler(self.terminal)
        self.view = TerminalTextView()
        self.command_registry = CommandRegistry()
        self.running = False
        self.modified = False
        self.generation = 0  # Bumped on every change to the buffer
        self.status_message: Optional[str] = None
        # Self-pipe woken by signal handlers and the save thread
        self._pipe_r, self._pipe_w = os.pipe()
        self.saver = SaveWorker(self.document, notify=self._notify_saved)
        logger.info("Opened %s (%d characters)", filename, self.buffer.size())

    # --- Wakeups ---

    def _handle_resize(self, signum, frame):
        """Handle terminal resize signal."""
        del signum, frame  # Unused
        os.write(self._pipe_w, EditorConstants.RESIZE_PIPE_MARKER)

    def _handle_sigint(self, signum, frame):
        """Handle SIGINT (Ctrl-C) by quitting from the event loop."""
        del signum, frame  # Unused
        os.write(self._pipe_w, EditorConstants.QUIT_PIPE_MARKER)

    def _notify_saved(self):
        """Called on the save thread after each finished save."""
        os.write(self._pipe_w, EditorConstants.SAVE_PIPE_MARKER)

    def _handle_pipe(self, data: bytes):
        if EditorConstants.SAVE_PIPE_MARKER in data:
            self.collect_save_results()
        if EditorConstants.RESIZE_PIPE_MARKER in data:
            self.terminal.invalidate_frame()
        if EditorConstants.QUIT_PIPE_MARKER in data:
            self.quit()

    # --- Event loop ---

    def run(self) -> int:
        """Run the main editor loop until quit.

        Returns:
            Exit status

        Raises:
            TerminalSizeError: If the terminal is unusable at startup
        """
        self.terminal.check_size()
        self.terminal.setup()
        self.running = True

        original_winch_handler = signal.signal(signal.SIGWINCH, self._handle_resize)
        original_int_handler = signal.signal(signal.SIGINT, self._handle_sigint)
        try:
            need_draw = True
            while self.running:
                if need_draw:
                    self._draw()
                    need_draw = False

                # Use file descriptor 0 for stdin to work in all environments
                ready, _, _ = select.select([0, self._pipe_r], [], [])

                if self._pipe_r in ready:
                    self._handle_pipe(os.read(self._pipe_r, 1024))
                    need_draw = True
                if 0 in ready:
                    # Drain everything already read, e.g. a pasted burst
                    while self.running:
                        key_event = self.keyboard.get_key_event(timeout=EditorConstants.KEY_POLL_TIMEOUT)
                        if key_event is None:
                            break
                        self._handle_key_event(key_event)
                    need_draw = True
        finally:
            signal.signal(signal.SIGWINCH, original_winch_handler)
            signal.signal(signal.SIGINT, original_int_handler)
            self.terminal.cleanup()
            self.close()
        return 0

    def _draw(self):
        """Draw the current editor state to terminal."""
        width, height = self.terminal.width, self.terminal.height
        if width < EditorConstants.MIN_TERMINAL_WIDTH or height < 1:
            return
        self.view.resize(width, height)
        self.view.render(self.buffer, self.cursor.coord)
        self.terminal.update_frame(
            self.view.lines,
            self.view.visual_cursor_y,
            self.view.visual_cursor_x,
            status=self.status_line(),
        )

    def status_line(self) -> str:
        if self.status_message:
            return f" {self.status_message}"
        flag = " [modified]" if self.modified else ""
        return f" {self.filename}{flag}  {self.cursor.row + 1}:{self.cursor.col + 1}"

    def _handle_key_event(self, key_event: KeyEvent):
        """Handle a keyboard event.

        Args:
            key_event: KeyEvent object with parsed key information
        """
        # Clear status message on any keypress
        self.status_message = None
        if self.command_registry.execute(self, key_event):
            self.modified = True
            self.generation += 1

    # --- Commands ---

    def save(self):
        """Queue a snapshot of the buffer for the save thread."""
        snapshot = self.buffer.snapshot()
        self.saver.submit(snapshot, self.generation)
        self.status_message = EditorConstants.SAVING_MESSAGE

    def collect_save_results(self) -> list[SaveResult]:
        """Apply finished saves to the status line and the modified flag."""
        results = self.saver.poll_results()
        for result in results:
            self.status_message = result.message
            # An older snapshot finishing late does not cover newer edits
            if result.ok and result.generation == self.generation:
                self.modified = False
        return results

    def quit(self):
        self.running = False

    def close(self):
        """Wait for queued saves, then release the file and the pipe."""
        self.saver.stop()
        self.collect_save_results()
        self.document.close()
        if self._pipe_r is not None:
            os.close(self._pipe_r)
            os.close(self._pipe_w)
            self._pipe_r = self._pipe_w = None
        logger.info("Closed %s", self.filename)
