"""Scan session coordination for live MRZ scanning.

A scan session sits between an asynchronous frame source and the listener
waiting for the MRZ. It owns all per-scan state:

- **Throttling**: at most one frame is being recognized at any time. Frames
  offered while a recognition is in flight are dropped, which caps the
  backlog when OCR is slower than the camera.
- **Single result**: recognition callbacks may run on other threads and
  complete out of order, so the commit of a validated MRZ is a
  compare-and-set under a lock. Only the winning frame notifies the listener;
  every later validated frame is discarded.
- **Delayed success**: the listener is notified after a short, non-blocking
  delay so the matched MRZ stays highlighted on screen.
- **Terminal errors**: a recognizer failure ends the session with exactly one
  `on_error` call. Retrying is left to the frame source.

State machine:

    IDLE ──submit──> FRAME_IN_FLIGHT ──text──> IDLE (no valid MRZ)
                                     ├──text──> COMPLETED (MRZ committed)
                                     └──error─> FAILED

A finished (or stopped) session ignores further frames; start a new session
for a new scan.

Example:
    >>> session = ScanSession(recognizer, listener)
    >>> for frame in camera_frames():
    ...     session.submit_frame(frame)
    >>> session.stop()
"""

import logging
import threading
from concurrent.futures import Future
from typing import Any, Optional, Protocol

from .config_loader import SessionConfig
from .processor import MRZProcessor
from .recognizer import Recognizer
from .types import ErrorKind, SessionState, ValidatedMRZ

logger = logging.getLogger(__name__)

TERMINAL_STATES = (SessionState.COMPLETED, SessionState.FAILED)


class ScanListener(Protocol):
    """Receives the outcome of a scan session."""

    def on_success(self, mrz: ValidatedMRZ) -> None:
        ...

    def on_error(self, kind: ErrorKind, message: str) -> None:
        ...


class ScanSession:
    """Coordinates frame submission, throttling and the single result.

    Args:
        recognizer: Asynchronous recognizer returning a future of frame text.
        listener: Receives exactly one success or at most one error.
        processor: Per-frame MRZ pipeline. A default MRZProcessor is created
            if None.
        config: Session configuration. Taken from the processor's
            configuration if None.

    Attributes:
        config: Session configuration instance.
        processor: Per-frame MRZ pipeline.
    """

    def __init__(
        self,
        recognizer: Recognizer,
        listener: ScanListener,
        processor: Optional[MRZProcessor] = None,
        config: Optional[SessionConfig] = None,
    ):
        self.processor = processor or MRZProcessor()
        self.config = config or self.processor.config.mrz.session

        self._recognizer = recognizer
        self._listener = listener

        self._lock = threading.Lock()
        self._state = SessionState.IDLE
        self._throttled = False
        self._result_committed = False
        self._stopped = False
        self._success_delivered = False
        self._timer: Optional[threading.Timer] = None

        self._frames_submitted = 0
        self._frames_dropped = 0

        logger.info(
            f"ScanSession started: success_delay={self.config.success_delay_seconds}s"
        )

    # ═══════════════════════════════════════════════════════════════════
    # STATE
    # ═══════════════════════════════════════════════════════════════════

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def throttled(self) -> bool:
        return self._throttled

    @property
    def result_committed(self) -> bool:
        return self._result_committed

    @property
    def stopped(self) -> bool:
        return self._stopped

    @property
    def is_active(self) -> bool:
        """Whether the session still accepts frames."""
        return not self._stopped and self._state not in TERMINAL_STATES

    # ═══════════════════════════════════════════════════════════════════
    # FRAME SUBMISSION
    # ═══════════════════════════════════════════════════════════════════

    def submit_frame(self, frame: Any) -> bool:
        """Offer a frame for recognition.

        Never blocks: the frame is handed to the recognizer and the outcome
        is handled in the recognizer's completion callback.

        Args:
            frame: Opaque frame passed through to the recognizer.

        Returns:
            True if the frame was submitted, False if it was dropped because
            another frame is in flight or the session has finished.
        """
        with self._lock:
            if self._throttled:
                self._frames_dropped += 1
                return False
            if self._stopped or self._state in TERMINAL_STATES:
                return False

            # Begin throttling until this frame's recognition completes
            self._throttled = True
            self._state = SessionState.FRAME_IN_FLIGHT
            self._frames_submitted += 1

        try:
            future = self._recognizer.recognize(frame)
        except Exception as e:
            logger.error(f"Recognizer rejected frame: {e}")
            with self._lock:
                self._throttled = False
            self._fail(_describe(e))
            return True

        future.add_done_callback(self._on_recognition_done)
        return True

    def stop(self) -> None:
        """Stop the session.

        Safe to call from any thread, any number of times. A pending delayed
        success is cancelled and no listener call happens afterwards.
        """
        with self._lock:
            if self._stopped:
                return
            self._stopped = True
            timer = self._timer

        if timer is not None:
            timer.cancel()

        logger.info(f"ScanSession stopped in state {self._state.value}")

    def get_session_stats(self) -> dict:
        """Get session counters.

        Returns:
            Dictionary with state and frame counters
        """
        return {
            "state": self._state.value,
            "frames_submitted": self._frames_submitted,
            "frames_dropped": self._frames_dropped,
            "result_committed": self._result_committed,
            "stopped": self._stopped,
        }

    # ═══════════════════════════════════════════════════════════════════
    # RECOGNITION CALLBACK
    # ═══════════════════════════════════════════════════════════════════

    def _on_recognition_done(self, future: "Future[str]") -> None:
        """Handle completion of one recognition call (any thread)."""
        with self._lock:
            self._throttled = False
            if self._state == SessionState.FRAME_IN_FLIGHT:
                self._state = SessionState.IDLE

        if future.cancelled():
            if not self._stopped:
                self._fail("Text recognition was cancelled")
            return

        error = future.exception()
        if error is not None:
            logger.error(f"Text recognition failed: {error}")
            self._fail(_describe(error))
            return

        if self._stopped or self._result_committed:
            logger.debug("Session finished, recognized frame discarded")
            return

        try:
            result = self.processor.process(future.result())
        except Exception:
            logger.exception("Unexpected error while processing frame, frame discarded")
            return

        if result.is_reject():
            reason = result.rejection_reason
            logger.debug(f"Frame rejected: {reason.constant if reason else 'unknown'}")
            return

        if self._try_commit():
            logger.info(
                f"MRZ committed ({result.mrz.document_format.value}), "
                f"notifying listener in {self.config.success_delay_seconds}s"
            )
            self._schedule_success(result.mrz)
        else:
            logger.warning("MRZ already committed, ignoring duplicate")

    def _try_commit(self) -> bool:
        """Atomically flip result_committed from False to True."""
        with self._lock:
            if self._result_committed or self._stopped or self._state == SessionState.FAILED:
                return False
            self._result_committed = True
            self._state = SessionState.COMPLETED
            return True

    def _schedule_success(self, mrz: ValidatedMRZ) -> None:
        timer = threading.Timer(
            self.config.success_delay_seconds, self._deliver_success, args=(mrz,)
        )
        timer.daemon = True

        with self._lock:
            if self._stopped:
                return
            self._timer = timer
            timer.start()

    def _deliver_success(self, mrz: ValidatedMRZ) -> None:
        with self._lock:
            if self._stopped or self._success_delivered:
                logger.debug("Session stopped before delivery, result dropped")
                return
            self._success_delivered = True

        try:
            self._listener.on_success(mrz)
        except Exception:
            logger.exception("Error calling success callback")

    def _fail(self, message: str) -> None:
        """Move to FAILED and report the error, at most once per session."""
        with self._lock:
            if self._stopped or self._state in TERMINAL_STATES:
                logger.debug(f"Session finished, error not reported: {message}")
                return
            self._state = SessionState.FAILED

        try:
            self._listener.on_error(ErrorKind.RECOGNIZER_FAILURE, message)
        except Exception:
            logger.exception("Error calling error callback")


def _describe(error: BaseException) -> str:
    return str(error) or type(error).__name__
