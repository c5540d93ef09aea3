"""Tests for the document file and the background save worker."""

import errno
import os
import threading
from unittest.mock import patch

import pytest

from rut.constants import EditorConstants
from rut.persistence import DocumentFile, SaveResult, SaveWorker, describe_save_error


@pytest.fixture
def doc_path(tmp_path):
    return str(tmp_path / "doc.txt")


def read(path):
    with open(path, encoding="utf-8", newline='') as f:
        return f.read()


class TestDocumentFile:

    def test_creates_missing_file(self, doc_path):
        """The file is created when it does not exist."""
        document = DocumentFile(doc_path)
        try:
            assert os.path.exists(doc_path)
            assert document.read() == ""
        finally:
            document.close()

    def test_write_truncates_and_rewrites(self, doc_path):
        """A write replaces all previous content."""
        with open(doc_path, "w", encoding="utf-8") as f:
            f.write("a much longer original text")
        document = DocumentFile(doc_path)
        try:
            assert document.write("short") == 5
            assert read(doc_path) == "short"
            assert document.read() == "short"
        finally:
            document.close()

    def test_writes_utf8(self, doc_path):
        """Text is written as UTF-8."""
        document = DocumentFile(doc_path)
        try:
            document.write("naïve 字\n")
        finally:
            document.close()
        with open(doc_path, "rb") as f:
            assert f.read() == "naïve 字\n".encode("utf-8")

    def test_atomic_write_replaces_file(self, doc_path, tmp_path):
        """Atomic saves rename over the file and leave no temp files."""
        with open(doc_path, "w", encoding="utf-8") as f:
            f.write("old")
        document = DocumentFile(doc_path, atomic=True)
        try:
            document.write("new content")
            document.write("newer")
            assert read(doc_path) == "newer"
            assert document.read() == "newer"
            # No temporary files left behind
            assert os.listdir(tmp_path) == ["doc.txt"]
        finally:
            document.close()

    def test_atomic_write_keeps_permissions(self, doc_path):
        """Atomic saves keep the original file mode."""
        document = DocumentFile(doc_path, atomic=True)
        os.chmod(doc_path, 0o640)
        try:
            document.write("text")
        finally:
            document.close()
        assert os.stat(doc_path).st_mode & 0o777 == 0o640

    def test_close_is_idempotent(self, doc_path):
        document = DocumentFile(doc_path)
        document.close()
        document.close()
        assert document.closed


class TestDescribeSaveError:

    def test_permission_denied(self):
        """Permission errors get their own message."""
        message = describe_save_error(PermissionError(errno.EACCES, "denied"), "f.txt")
        assert message == EditorConstants.PERMISSION_DENIED_MESSAGE.format("f.txt")

    def test_no_space(self):
        """A full disk gets its own message."""
        message = describe_save_error(OSError(errno.ENOSPC, "full"), "f.txt")
        assert message == EditorConstants.NO_SPACE_MESSAGE

    def test_other_errors(self):
        assert describe_save_error(OSError(errno.EIO, "io"), "f.txt") == \
            EditorConstants.SAVE_FAILED_MESSAGE.format("f.txt")
        assert describe_save_error(UnicodeEncodeError("utf-8", "\ud800", 0, 1, "surrogate"), "f.txt") == \
            EditorConstants.SAVE_FAILED_MESSAGE.format("f.txt")


class TestSaveWorker:

    def test_save_reports_result(self, doc_path):
        """A finished save is reported and notifies the editor."""
        document = DocumentFile(doc_path)
        notified = threading.Event()
        worker = SaveWorker(document, notify=notified.set)
        try:
            worker.submit("hello", generation=3)
            assert worker.wait_idle(5)
            assert notified.is_set()
            assert worker.poll_results() == [SaveResult(
                ok=True,
                message=EditorConstants.SAVED_MESSAGE.format(5, doc_path),
                generation=3,
                size=5,
            )]
            assert worker.poll_results() == []
            assert read(doc_path) == "hello"
        finally:
            worker.stop()
            document.close()

    def test_saves_run_in_submission_order(self, doc_path):
        """Saves are written in the order they were submitted."""
        document = DocumentFile(doc_path)
        worker = SaveWorker(document)
        written = []
        original_write = document.write

        def recording_write(snapshot):
            written.append(snapshot)
            return original_write(snapshot)

        try:
            with patch.object(document, 'write', side_effect=recording_write):
                for i in range(20):
                    worker.submit(f"version {i}", generation=i)
                assert worker.wait_idle(5)
            assert written == [f"version {i}" for i in range(20)]
            assert [r.generation for r in worker.poll_results()] == list(range(20))
            assert read(doc_path) == "version 19"
        finally:
            worker.stop()
            document.close()

    def test_second_save_waits_for_first(self, doc_path):
        """A save never starts while another is writing."""
        document = DocumentFile(doc_path)
        worker = SaveWorker(document)
        release = threading.Event()
        started = threading.Event()
        active = []
        overlaps = []
        original_write = document.write

        def slow_write(snapshot):
            if active:
                overlaps.append(snapshot)
            active.append(snapshot)
            started.set()
            if snapshot == "first":
                release.wait(5)
            result = original_write(snapshot)
            active.remove(snapshot)
            return result

        try:
            with patch.object(document, 'write', side_effect=slow_write):
                worker.submit("first")
                assert started.wait(5)
                worker.submit("second")
                assert worker.wait_idle(0.05) is False
                release.set()
                assert worker.wait_idle(5)
            assert overlaps == []
            assert read(doc_path) == "second"
        finally:
            worker.stop()
            document.close()

    def test_failed_save_does_not_stop_worker(self, doc_path):
        """The worker keeps going after a failed save."""
        document = DocumentFile(doc_path)
        worker = SaveWorker(document)
        original_write = document.write
        calls = []

        def flaky_write(snapshot):
            calls.append(snapshot)
            if len(calls) == 1:
                raise OSError(errno.ENOSPC, "No space left on device")
            return original_write(snapshot)

        try:
            with patch.object(document, 'write', side_effect=flaky_write):
                worker.submit("lost")
                worker.submit("kept")
                assert worker.wait_idle(5)
            results = worker.poll_results()
            assert [r.ok for r in results] == [False, True]
            assert results[0].message == EditorConstants.NO_SPACE_MESSAGE
            assert read(doc_path) == "kept"
        finally:
            worker.stop()
            document.close()

    def test_unencodable_text_is_reported(self, doc_path):
        """Text the codec rejects fails the save instead of the thread."""
        document = DocumentFile(doc_path)
        worker = SaveWorker(document)
        try:
            worker.submit("bad \ud800")
            assert worker.wait_idle(5)
            [result] = worker.poll_results()
            assert result.ok is False
        finally:
            worker.stop()
            document.close()

    def test_stop_without_saves(self, doc_path):
        document = DocumentFile(doc_path)
        worker = SaveWorker(document)
        worker.stop()
        assert worker.wait_idle(0)
        document.close()
