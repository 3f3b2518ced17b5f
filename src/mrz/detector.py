"""MRZ document type detection (passport TD3 vs ID card TD1/TD2).

This module classifies normalized frame text into an ordered list of
candidate document formats for the cascade matcher:

1. **Passport marker**: a line starting with "P<" -> TD3 only
2. **ID card marker**: a line starting with "I<" or "ID" -> TD1, then TD2
3. **Structural probe**: no readable marker, but a genuine TD1 or TD2
   line-2 structure (date/check/sex/date/check) is present -> TD1, then TD2
4. **Nothing**: the frame has no MRZ in view and is discarded silently

Explicit markers are authoritative and cheapest to test. The probe exists
because the one- or two-character document code is often misread; it only
uses real MRZ line grammars so arbitrary document text does not trigger it.

Example:
    >>> from src.mrz import DetectionConfig, DocumentTypeDetector
    >>> detector = DocumentTypeDetector(DetectionConfig())
    >>> detector.detect(("P<UT0ERIKSS0N<<ANNA", "L898902C36UT0..."))
    (<DocumentFormat.PASSPORT_TD3: 'TD3'>,)
"""

import logging
from typing import Optional, Sequence, Tuple

from .config_loader import DetectionConfig
from .grammars import TD1_LINE_2, TD2_LINE_2
from .types import DocumentFormat

logger = logging.getLogger(__name__)

PASSPORT_FORMATS: Tuple[DocumentFormat, ...] = (DocumentFormat.PASSPORT_TD3,)
ID_CARD_FORMATS: Tuple[DocumentFormat, ...] = (
    DocumentFormat.ID_CARD_TD1,
    DocumentFormat.ID_CARD_TD2,
)


class DocumentTypeDetector:
    """Detects candidate MRZ formats from normalized text lines.

    Args:
        config: Detection configuration with marker lists and probe switch.

    Attributes:
        config: Detection configuration instance.
        passport_markers: Tuple of passport line prefixes.
        id_card_markers: Tuple of ID card line prefixes.
    """

    def __init__(self, config: Optional[DetectionConfig] = None):
        """Initialize detector with configuration.

        Args:
            config: Detection configuration. Defaults are used if None.
        """
        self.config = config or DetectionConfig()

        self.passport_markers: Tuple[str, ...] = tuple(self.config.passport_markers)
        self.id_card_markers: Tuple[str, ...] = tuple(self.config.id_card_markers)

        logger.info(
            f"DocumentTypeDetector initialized: "
            f"passport_markers={self.passport_markers}, "
            f"id_card_markers={self.id_card_markers}, "
            f"structural_probe={self.config.structural_probe}"
        )

    def detect(self, lines: Sequence[str]) -> Optional[Tuple[DocumentFormat, ...]]:
        """Classify normalized text into a priority-ordered format list.

        Args:
            lines: Normalized text lines of one frame.

        Returns:
            Tuple of formats to try in order, or None if the frame holds
            no recognizable MRZ.

        Example:
            >>> detector.detect(("I<UT0D231458907<<<<<<<<<<<<<<<",))
            (<DocumentFormat.ID_CARD_TD1: 'TD1'>, <DocumentFormat.ID_CARD_TD2: 'TD2'>)
            >>> detector.detect(("HELLO WORLD",)) is None
            True
        """
        if self._has_marker(lines, self.passport_markers):
            logger.debug("Detected passport MRZ marker")
            return PASSPORT_FORMATS

        if self._has_marker(lines, self.id_card_markers):
            logger.debug("Detected ID card MRZ marker")
            return ID_CARD_FORMATS

        if self.config.structural_probe and self.probe_id_card_structure(lines):
            logger.debug("Detected ID card line structure without type marker")
            return ID_CARD_FORMATS

        logger.debug("No MRZ format detected in frame")
        return None

    def probe_id_card_structure(self, lines: Sequence[str]) -> bool:
        """Check whether a TD1 or TD2 line-2 structure occurs in the text.

        Args:
            lines: Normalized text lines of one frame.

        Returns:
            True if either line-2 grammar matches somewhere in the text.
        """
        text = "\n".join(lines)
        td1_found = TD1_LINE_2.search(text) is not None
        td2_found = TD2_LINE_2.search(text) is not None

        logger.debug(f"Structural probe: TD1={td1_found}, TD2={td2_found}")

        return td1_found or td2_found

    def is_passport(self, lines: Sequence[str]) -> bool:
        """Check if text is detected as a passport MRZ.

        Args:
            lines: Normalized text lines of one frame.

        Returns:
            True if the detector restricts the cascade to TD3.
        """
        return self.detect(lines) == PASSPORT_FORMATS

    def is_id_card(self, lines: Sequence[str]) -> bool:
        """Check if text is detected as an ID card MRZ.

        Args:
            lines: Normalized text lines of one frame.

        Returns:
            True if the detector restricts the cascade to TD1/TD2.
        """
        return self.detect(lines) == ID_CARD_FORMATS

    @staticmethod
    def _has_marker(lines: Sequence[str], markers: Tuple[str, ...]) -> bool:
        return any(line.lstrip().startswith(markers) for line in lines)
