"""Document file access and background saving.

DocumentFile owns the open file handle; every read and write goes through
its lock, so at most one truncate-and-write runs at a time. SaveWorker is a
single writer thread fed from a FIFO queue of buffer snapshots; a save
requested while another is in flight waits in the queue.

Saving truncates the file before writing the new content unless the
document was opened with atomic=True. A crash between the truncate and the
end of the write loses the file's content; the atomic mode writes a
temporary file in the same directory and renames it over the original.
"""

from __future__ import annotations

import errno
import logging
import os
import queue
import tempfile
import threading
from dataclasses import dataclass
from typing import Callable, IO, Optional

from .constants import EditorConstants

logger = logging.getLogger(__name__)


def describe_save_error(error: Exception, path: str) -> str:
    """Turn a save failure into a status line message."""
    if isinstance(error, PermissionError):
        return EditorConstants.PERMISSION_DENIED_MESSAGE.format(path)
    if getattr(error, 'errno', None) == errno.ENOSPC:
        return EditorConstants.NO_SPACE_MESSAGE
    return EditorConstants.SAVE_FAILED_MESSAGE.format(path)


class DocumentFile:
    """The backing file of a document, opened read/write and created if absent."""

    def __init__(self, path: str, atomic: bool = False):
        self.path = path
        self.atomic = atomic
        self._lock = threading.Lock()
        self._file: Optional[IO[str]] = self._open()

    def _open(self) -> IO[str]:
        fd = os.open(self.path, os.O_RDWR | os.O_CREAT, 0o644)
        try:
            # newline='' keeps '\r\n' in the buffer so a save writes back what was read
            return os.fdopen(fd, 'r+', encoding=EditorConstants.FILE_ENCODING, newline='')
        except BaseException:
            os.close(fd)
            raise

    @property
    def closed(self) -> bool:
        return self._file is None

    def read(self) -> str:
        """Return the whole content of the file."""
        with self._lock:
            assert self._file is not None, "document file is closed"
            self._file.seek(0)
            return self._file.read()

    def write(self, snapshot: str) -> int:
        """Replace the file content with snapshot.

        Returns:
            Number of characters written

        Raises:
            OSError: If the file could not be written
        """
        with self._lock:
            assert self._file is not None, "document file is closed"
            if self.atomic:
                self._write_atomic(snapshot)
            else:
                self._file.seek(0)
                self._file.truncate()
                self._file.write(snapshot)
                self._file.flush()
                os.fsync(self._file.fileno())
        return len(snapshot)

    def _write_atomic(self, snapshot: str):
        dir_name = os.path.dirname(self.path) or '.'
        prefix = EditorConstants.ATOMIC_SAVE_PREFIX + os.path.basename(self.path)
        temp_filename = None
        try:
            with tempfile.NamedTemporaryFile(mode='w', encoding=EditorConstants.FILE_ENCODING,
                                             newline='', dir=dir_name, prefix=prefix,
                                             suffix=EditorConstants.ATOMIC_SAVE_SUFFIX,
                                             delete=False) as temp_file:
                temp_filename = temp_file.name
                temp_file.write(snapshot)
                temp_file.flush()
                os.fsync(temp_file.fileno())
            os.chmod(temp_filename, os.stat(self.path).st_mode & 0o7777)
            os.replace(temp_filename, self.path)
        except (OSError, ValueError):
            if temp_filename is not None and os.path.exists(temp_filename):
                try:
                    os.remove(temp_filename)
                except OSError:
                    logger.warning("Could not remove temporary file %s", temp_filename)
            raise
        # The old handle still points at the replaced inode
        self._file.close()
        self._file = self._open()

    def close(self):
        with self._lock:
            if self._file is not None:
                self._file.close()
                self._file = None


@dataclass
class SaveResult:
    """Outcome of one save job."""
    ok: bool
    message: str
    generation: int
    size: int = 0


class SaveWorker:
    """Single writer thread that saves buffer snapshots in FIFO order."""

    def __init__(self, document: DocumentFile, notify: Optional[Callable[[], None]] = None):
        self.document = document
        self._notify = notify
        self._jobs: queue.Queue = queue.Queue()
        self._results: queue.Queue = queue.Queue()
        self._idle = threading.Condition()
        self._pending = 0
        self._thread: Optional[threading.Thread] = None

    def _ensure_started(self):
        if self._thread is None:
            self._thread = threading.Thread(target=self._run, name="rut-save", daemon=True)
            self._thread.start()

    def submit(self, snapshot: str, generation: int = 0):
        """Queue a snapshot to be written after any save already in flight."""
        with self._idle:
            self._pending += 1
        self._ensure_started()
        self._jobs.put((snapshot, generation))
        logger.debug("Queued save of %d characters (generation %d)", len(snapshot), generation)

    def _run(self):
        while True:
            job = self._jobs.get()
            if job is None:
                break
            snapshot, generation = job
            result = self._save(snapshot, generation)
            self._results.put(result)
            if self._notify is not None:
                try:
                    self._notify()
                except OSError as e:
                    logger.warning("Could not signal finished save: %s", e)
            with self._idle:
                self._pending -= 1
                self._idle.notify_all()

    def _save(self, snapshot: str, generation: int) -> SaveResult:
        path = self.document.path
        try:
            size = self.document.write(snapshot)
        except (OSError, ValueError) as e:
            # ValueError: text the codec cannot encode, e.g. lone surrogates
            logger.error("Saving %s failed: %s", path, e)
            return SaveResult(ok=False, message=describe_save_error(e, path), generation=generation)
        logger.info("Saved %d characters to %s", size, path)
        return SaveResult(
            ok=True,
            message=EditorConstants.SAVED_MESSAGE.format(size, path),
            generation=generation,
            size=size,
        )

    def poll_results(self) -> list[SaveResult]:
        """Return the results of all saves finished since the last call."""
        results = []
        while True:
            try:
                results.append(self._results.get_nowait())
            except queue.Empty:
                return results

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until every queued save has finished.

        Returns:
            False if the timeout expired first
        """
        with self._idle:
            return self._idle.wait_for(lambda: self._pending == 0, timeout)

    def stop(self, timeout: Optional[float] = None):
        """Finish queued saves and stop the thread."""
        if self._thread is None:
            return
        self._jobs.put(None)
        self._thread.join(timeout)
        self._thread = None
