"""Asynchronous recognizer seam between frame source and scan session.

A recognizer turns one camera frame into OCR text without blocking the
caller: `recognize()` returns a `concurrent.futures.Future` that resolves to
the frame's text (lines joined with newlines) or fails with the engine's
exception. Completion may happen on another thread, and futures of different
frames may complete out of submission order.

Any engine with a synchronous `frame -> str` call can be adapted with
`ExecutorRecognizer`:

    >>> engine = TesseractEngine(EngineConfig())
    >>> recognizer = ExecutorRecognizer(engine.extract_text)
    >>> future = recognizer.recognize(frame)
    >>> future.result()
    'P<UTOERIKSSON<<ANNA<MARIA<<<<<<<<<<<<<<<<<<<\\n...'
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Protocol

logger = logging.getLogger(__name__)


class RecognizerError(RuntimeError):
    """The OCR engine rejected a frame or failed to run."""


class Recognizer(Protocol):
    """Anything that can start recognition of a frame."""

    def recognize(self, frame: Any) -> "Future[str]":
        ...


class ExecutorRecognizer:
    """Runs a synchronous text extraction callable on a thread pool.

    Args:
        extract_fn: Callable mapping a frame to its OCR text.
        max_workers: Number of worker threads.

    Example:
        >>> recognizer = ExecutorRecognizer(lambda frame: "P<UTO...", max_workers=1)
        >>> recognizer.recognize(None).result()
        'P<UTO...'
    """

    def __init__(self, extract_fn: Callable[[Any], str], max_workers: int = 1):
        self._extract_fn = extract_fn
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="mrz-recognizer"
        )
        logger.info(f"ExecutorRecognizer initialized: max_workers={max_workers}")

    def recognize(self, frame: Any) -> "Future[str]":
        """Submit a frame for recognition.

        Raises:
            RecognizerError: If the recognizer has been closed.
        """
        try:
            return self._executor.submit(self._extract_fn, frame)
        except RuntimeError as e:
            raise RecognizerError(f"Recognizer is closed: {e}") from e

    def close(self, wait: bool = False) -> None:
        """Stop accepting frames and release the worker threads."""
        self._executor.shutdown(wait=wait)
        logger.info("ExecutorRecognizer closed")
