"""Tesseract OCR engine wrapper for MRZ frames.

This module provides a synchronous frame -> text interface to Tesseract OCR,
tuned for the MRZ character set. Wrap it in an `ExecutorRecognizer` to use it
from a scan session.

Example:
    >>> from src.mrz import EngineConfig
    >>> from src.mrz.engine_tesseract import TesseractEngine
    >>> engine = TesseractEngine(EngineConfig())
    >>> text = engine.extract_text(frame)
    >>> print(text)
    P<UTOERIKSSON<<ANNA<MARIA<<<<<<<<<<<<<<<<<<<
    L898902C36UTO7408122F1204159ZE184226B<<<<<10
"""

import logging
from typing import Optional

import cv2
import numpy as np
import pytesseract

from .config_loader import EngineConfig
from .recognizer import RecognizerError

logger = logging.getLogger(__name__)


class TesseractEngine:
    """Wrapper for Tesseract OCR with MRZ optimizations.

    Tesseract availability is checked on first use rather than at
    construction, so a session can be set up before the binary is needed.

    Args:
        config: Engine configuration.

    Attributes:
        config: Engine configuration instance.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        """Initialize Tesseract engine wrapper.

        Args:
            config: Engine configuration. Defaults are used if None.
        """
        self.config = config or EngineConfig()
        self._version: Optional[str] = None

        logger.info(
            f"TesseractEngine initialized: psm={self.config.psm}, "
            f"oem={self.config.oem}, lang={self.config.lang}"
        )

    @property
    def tesseract_config(self) -> str:
        """Command-line options passed to Tesseract."""
        return (
            f"--oem {self.config.oem} --psm {self.config.psm} "
            f"-c tessedit_char_whitelist={self.config.char_whitelist}"
        )

    def ensure_available(self) -> str:
        """Verify Tesseract is installed.

        Returns:
            Tesseract version string.

        Raises:
            RecognizerError: If Tesseract is not available.
        """
        if self._version is None:
            try:
                self._version = str(pytesseract.get_tesseract_version())
                logger.info(f"Tesseract engine available: version {self._version}")
            except Exception as e:
                logger.error(f"Tesseract not found or not properly configured: {e}")
                raise RecognizerError(
                    "Tesseract not available. Please install Tesseract OCR.\n"
                    "Linux: sudo apt-get install tesseract-ocr\n"
                    "MacOS: brew install tesseract"
                ) from e
        return self._version

    def extract_text(self, image: np.ndarray) -> str:
        """Extract MRZ text from a camera frame.

        This method:
        1. Validates the frame
        2. Converts colour frames to grayscale
        3. Runs Tesseract with the MRZ character whitelist
        4. Removes spaces inside lines (MRZ text has none)

        Args:
            image: Frame as numpy array, (H, W), (H, W, 1) or (H, W, 3) BGR.

        Returns:
            Recognized lines joined with newlines (may be empty).

        Raises:
            RecognizerError: If the frame is invalid or Tesseract fails.
        """
        if image is None or image.size == 0:
            raise RecognizerError("Invalid image: empty or None")

        if image.ndim == 3:
            if image.shape[2] == 3:
                image = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
            elif image.shape[2] == 1:
                image = image[:, :, 0]
            else:
                raise RecognizerError(f"Invalid image shape: {image.shape}")
        elif image.ndim != 2:
            raise RecognizerError(f"Invalid image shape: {image.shape}")

        self.ensure_available()

        try:
            raw_text = pytesseract.image_to_string(
                image, lang=self.config.lang, config=self.tesseract_config
            )
        except Exception as e:
            logger.error(f"Tesseract extraction failed: {e}")
            raise RecognizerError(f"Tesseract extraction failed: {e}") from e

        lines = [line.replace(" ", "") for line in raw_text.splitlines()]
        lines = [line for line in lines if line]

        logger.debug(f"Tesseract extracted {len(lines)} lines: {lines}")

        return "\n".join(lines)
