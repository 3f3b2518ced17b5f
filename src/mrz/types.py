"""Type definitions for MRZ module.

This module defines the core data structures used throughout the MRZ pipeline,
including document formats, extracted records, frame results and session states
following ICAO 9303 machine-readable zone layouts.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple


class DocumentFormat(Enum):
    """ICAO 9303 MRZ layout of a travel document."""

    PASSPORT_TD3 = "TD3"  # 2 lines x 44 characters
    ID_CARD_TD1 = "TD1"  # 3 lines x 30 characters
    ID_CARD_TD2 = "TD2"  # 2 lines x 36 characters

    @property
    def line_count(self) -> int:
        """Number of MRZ lines for this format."""
        return _LAYOUTS[self][0]

    @property
    def line_width(self) -> int:
        """Number of characters per MRZ line for this format."""
        return _LAYOUTS[self][1]


_LAYOUTS: Dict[DocumentFormat, Tuple[int, int]] = {
    DocumentFormat.PASSPORT_TD3: (2, 44),
    DocumentFormat.ID_CARD_TD1: (3, 30),
    DocumentFormat.ID_CARD_TD2: (2, 36),
}


class DecisionStatus(Enum):
    """Decision status for a processed frame."""

    PASS = "pass"
    REJECT = "reject"


class SessionState(Enum):
    """Lifecycle state of a scan session."""

    IDLE = "idle"
    FRAME_IN_FLIGHT = "frame_in_flight"
    COMPLETED = "completed"
    FAILED = "failed"


class ErrorKind(Enum):
    """Terminal error categories reported to a scan listener."""

    RECOGNIZER_FAILURE = "recognizer_failure"


@dataclass
class RejectionReason:
    """Structured rejection reason with error code and context.

    Attributes:
        code: Error code (e.g., "MRZ-E002")
        constant: String constant for programmatic checking (e.g., "NO_CANDIDATE_FORMAT")
        message: Human-readable explanation
        stage: Pipeline stage where rejection occurred (e.g., "STAGE_2")
        severity: Severity level ("ERROR", "WARNING" or "INFO")
    """

    code: str
    constant: str
    message: str
    stage: str
    severity: str = "ERROR"


@dataclass(frozen=True)
class MRZCandidate:
    """Fields extracted from one structural match, not yet validated.

    Attributes:
        document_format: Format whose grammar produced the match
        document_number: Document number with fill characters stripped
        date_of_birth: Date of birth as YYMMDD
        date_of_expiry: Date of expiry as YYMMDD
        check_fields: Field name -> (raw field text, check character), used
            only when check digit validation is enabled
    """

    document_format: DocumentFormat
    document_number: str
    date_of_birth: str
    date_of_expiry: str
    check_fields: Dict[str, Tuple[str, str]] = field(
        default_factory=dict, compare=False, hash=False, repr=False
    )


@dataclass(frozen=True)
class ValidatedMRZ:
    """MRZ record that passed field validation.

    This is the value handed to the downstream chip reader, which only needs
    the document number and the two dates to derive its access keys.
    """

    document_format: DocumentFormat
    document_number: str
    date_of_birth: str
    date_of_expiry: str

    @classmethod
    def from_candidate(cls, candidate: MRZCandidate) -> "ValidatedMRZ":
        return cls(
            document_format=candidate.document_format,
            document_number=candidate.document_number,
            date_of_birth=candidate.date_of_birth,
            date_of_expiry=candidate.date_of_expiry,
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            "document_format": self.document_format.value,
            "document_number": self.document_number,
            "date_of_birth": self.date_of_birth,
            "date_of_expiry": self.date_of_expiry,
        }


@dataclass
class FrameResult:
    """Outcome of running one frame of OCR text through the pipeline.

    Attributes:
        decision: Final decision (PASS or REJECT)
        mrz: Validated record if PASS, None if REJECT
        document_format: Format that produced the structural match, if any
        candidate_formats: Formats the detector allowed the cascade to try
        rejection_reason: Structured reason (success code on PASS)
        normalized_lines: Normalized text lines the pipeline worked on
        processing_time_ms: Total processing time in milliseconds
    """

    decision: DecisionStatus
    mrz: Optional[ValidatedMRZ]
    document_format: Optional[DocumentFormat]
    candidate_formats: Tuple[DocumentFormat, ...]
    rejection_reason: Optional[RejectionReason]
    normalized_lines: Tuple[str, ...]
    processing_time_ms: float = 0.0

    def is_pass(self) -> bool:
        """Check if decision is PASS.

        Returns:
            True if decision is PASS, False otherwise.
        """
        return self.decision == DecisionStatus.PASS

    def is_reject(self) -> bool:
        """Check if decision is REJECT.

        Returns:
            True if decision is REJECT, False otherwise.
        """
        return self.decision == DecisionStatus.REJECT
