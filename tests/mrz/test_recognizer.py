"""Unit tests for recognizer adapters."""

import threading

import pytest

from src.mrz.recognizer import ExecutorRecognizer, RecognizerError


@pytest.fixture
def recognizer():
    recognizer = ExecutorRecognizer(lambda frame: f"text:{frame}")
    yield recognizer
    recognizer.close(wait=True)


class TestExecutorRecognizer:
    """Test the thread-pool recognizer adapter."""

    def test_recognize_returns_future(self, recognizer):
        """Test the future resolves to the extracted text."""
        future = recognizer.recognize("frame-1")
        assert future.result(timeout=2) == "text:frame-1"

    def test_runs_on_worker_thread(self):
        """Test extraction does not run on the caller's thread."""
        recognizer = ExecutorRecognizer(lambda frame: threading.current_thread().name)
        try:
            name = recognizer.recognize(None).result(timeout=2)
        finally:
            recognizer.close(wait=True)

        assert name.startswith("mrz-recognizer")

    def test_exception_in_future(self):
        """Test extraction errors are delivered through the future."""

        def fail(frame):
            raise RecognizerError("bad frame")

        recognizer = ExecutorRecognizer(fail)
        try:
            future = recognizer.recognize(None)
            with pytest.raises(RecognizerError, match="bad frame"):
                future.result(timeout=2)
        finally:
            recognizer.close(wait=True)

    def test_recognize_after_close(self, recognizer):
        """Test a closed recognizer raises RecognizerError."""
        recognizer.close(wait=True)

        with pytest.raises(RecognizerError):
            recognizer.recognize("frame-1")
