"""Main MRZ processor with 4-stage per-frame pipeline.

This module orchestrates the extraction and validation of one frame of OCR
text:
    1. NORMALIZATION: Upper-casing, confusable repair, line splitting
    2. DOCUMENT TYPE DETECTION: Markers, then structural probe
    3. CASCADE MATCHING: Format grammars in priority order
    4. FIELD VALIDATION: Document number and date checks

Rejections are ordinary results, not exceptions: most camera frames have no
MRZ in view, or only a partially readable one.

Example:
    >>> from src.mrz import MRZProcessor
    >>> processor = MRZProcessor()
    >>> result = processor.process(ocr_text)
    >>> if result.is_pass():
    ...     print(f"Document number: {result.mrz.document_number}")
"""

import logging
import time
from pathlib import Path
from typing import Optional, Tuple

from .config_loader import Config, get_default_config, load_config
from .detector import DocumentTypeDetector
from .matcher import CascadeMatcher, ExtractionError
from .normalizer import normalize_text
from .types import (
    DecisionStatus,
    DocumentFormat,
    FrameResult,
    RejectionReason,
    ValidatedMRZ,
)
from .validator import FieldValidator

logger = logging.getLogger(__name__)


class MRZProcessor:
    """Main MRZ processing class with 4-stage pipeline.

    The processor accepts raw OCR text of one camera frame and performs:
        - Stage 1: Text normalization
        - Stage 2: Document type detection (TD3 vs TD1/TD2)
        - Stage 3: Cascade matching and field extraction
        - Stage 4: Field validation

    The processor holds no per-frame state and may be shared between threads.

    Args:
        config: Optional configuration object. Takes precedence over config_path.
        config_path: Optional path to config YAML file. If both are None, uses
            the bundled default config.

    Attributes:
        config: Full configuration object
        detector: Document type detector
        matcher: Cascade matcher over the format grammars
        validator: Field validator
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        config_path: Optional[Path] = None,
    ):
        """Initialize MRZ processor with configuration.

        Args:
            config: Optional configuration object.
            config_path: Optional path to config YAML.
        """
        if config is not None:
            self.config: Config = config
        elif config_path is not None:
            self.config = load_config(config_path)
        else:
            self.config = get_default_config()

        mrz_config = self.config.mrz
        self.detector = DocumentTypeDetector(config=mrz_config.detection)
        self.matcher = CascadeMatcher()
        self.validator = FieldValidator(
            validation_config=mrz_config.validation,
            check_digit_config=mrz_config.check_digit,
        )

        logger.info(
            f"MRZProcessor initialized: "
            f"check_digit={mrz_config.check_digit.enabled}, "
            f"structural_probe={mrz_config.detection.structural_probe}"
        )

    def process(self, raw_text: Optional[str]) -> FrameResult:
        """Process one frame of OCR text through the 4-stage pipeline.

        Args:
            raw_text: Raw OCR text of one frame, lines joined with newlines.

        Returns:
            FrameResult with decision, validated MRZ and rejection reason.
        """
        start_time = time.perf_counter()

        # ═══════════════════════════════════════════════════════════════
        # STAGE 1: NORMALIZATION
        # ═══════════════════════════════════════════════════════════════
        lines = normalize_text(raw_text, self.config.mrz.normalizer.confusables)

        if not any(line.strip() for line in lines):
            return self._create_rejection(
                lines=lines,
                reason=RejectionReason(
                    code="MRZ-E001",
                    constant="EMPTY_TEXT",
                    message="Frame contains no text",
                    stage="STAGE_1",
                    severity="INFO",
                ),
                start_time=start_time,
            )

        # ═══════════════════════════════════════════════════════════════
        # STAGE 2: DOCUMENT TYPE DETECTION
        # ═══════════════════════════════════════════════════════════════
        formats = self.detector.detect(lines)

        if formats is None:
            return self._create_rejection(
                lines=lines,
                reason=RejectionReason(
                    code="MRZ-E002",
                    constant="NO_CANDIDATE_FORMAT",
                    message="No MRZ marker or line structure found",
                    stage="STAGE_2",
                    severity="INFO",
                ),
                start_time=start_time,
            )

        # ═══════════════════════════════════════════════════════════════
        # STAGE 3: CASCADE MATCHING
        # ═══════════════════════════════════════════════════════════════
        try:
            candidate = self.matcher.match(lines, formats)
        except ExtractionError as e:
            logger.warning(f"MRZ extraction fault, frame discarded: {e}")
            return self._create_rejection(
                lines=lines,
                reason=RejectionReason(
                    code="MRZ-E004",
                    constant="EXTRACTION_FAULT",
                    message=f"Field extraction failed: {e}",
                    stage="STAGE_3",
                    severity="WARNING",
                ),
                start_time=start_time,
                candidate_formats=formats,
            )

        if candidate is None:
            return self._create_rejection(
                lines=lines,
                reason=RejectionReason(
                    code="MRZ-E003",
                    constant="NO_STRUCTURAL_MATCH",
                    message=f"No complete MRZ structure for "
                    f"{'/'.join(f.value for f in formats)}",
                    stage="STAGE_3",
                    severity="INFO",
                ),
                start_time=start_time,
                candidate_formats=formats,
            )

        # ═══════════════════════════════════════════════════════════════
        # STAGE 4: FIELD VALIDATION
        # ═══════════════════════════════════════════════════════════════
        mrz, reason = self.validator.validate(candidate)

        if mrz is None:
            logger.debug(f"Candidate rejected: {reason.constant if reason else 'unknown'}")
            return self._create_rejection(
                lines=lines,
                reason=reason,
                start_time=start_time,
                candidate_formats=formats,
                document_format=candidate.document_format,
            )

        # ═══════════════════════════════════════════════════════════════
        # FINAL RESULT: PASS
        # ═══════════════════════════════════════════════════════════════
        logger.debug(
            f"MRZ validated ({mrz.document_format.value}): doc={mrz.document_number}, "
            f"dob={mrz.date_of_birth}, exp={mrz.date_of_expiry}"
        )

        return FrameResult(
            decision=DecisionStatus.PASS,
            mrz=mrz,
            document_format=mrz.document_format,
            candidate_formats=formats,
            rejection_reason=RejectionReason(
                code="MRZ-S000",
                constant="SUCCESS",
                message="MRZ extracted and validated successfully",
                stage="STAGE_4",
                severity="INFO",
            ),
            normalized_lines=lines,
            processing_time_ms=(time.perf_counter() - start_time) * 1000,
        )

    def extract(self, raw_text: Optional[str]) -> Optional[ValidatedMRZ]:
        """Convenience wrapper returning only the validated record, if any."""
        return self.process(raw_text).mrz

    def _create_rejection(
        self,
        lines: Tuple[str, ...],
        reason: Optional[RejectionReason],
        start_time: float,
        candidate_formats: Tuple[DocumentFormat, ...] = (),
        document_format: Optional[DocumentFormat] = None,
    ) -> FrameResult:
        """Create a rejection FrameResult.

        Args:
            lines: Normalized text lines
            reason: Rejection reason with error details
            start_time: perf_counter value at the start of processing
            candidate_formats: Formats the detector allowed
            document_format: Format that produced a candidate, if any

        Returns:
            FrameResult with REJECT decision
        """
        return FrameResult(
            decision=DecisionStatus.REJECT,
            mrz=None,
            document_format=document_format,
            candidate_formats=candidate_formats,
            rejection_reason=reason,
            normalized_lines=lines,
            processing_time_ms=(time.perf_counter() - start_time) * 1000,
        )

    def get_processing_stats(self) -> dict:
        """Get processor statistics.

        Returns:
            Dictionary with processor configuration
        """
        mrz_config = self.config.mrz
        return {
            "passport_markers": list(mrz_config.detection.passport_markers),
            "id_card_markers": list(mrz_config.detection.id_card_markers),
            "structural_probe": mrz_config.detection.structural_probe,
            "check_digit_enabled": mrz_config.check_digit.enabled,
            "min_document_number_length": dict(
                mrz_config.validation.min_document_number_length
            ),
            "success_delay_seconds": mrz_config.session.success_delay_seconds,
        }
