"""MRZ Live-Scan Extraction.

This module extracts a validated Machine Readable Zone (MRZ) record from noisy,
per-frame OCR text of a live camera feed, for ICAO 9303 passports (TD3) and
ID cards (TD1, TD2), and delivers exactly one result per scan session.

Core Components:
    - types: Data structures (DocumentFormat, ValidatedMRZ, FrameResult, etc.)
    - config_loader: Configuration loading with Pydantic validation
    - normalizer: Case folding, OCR confusable repair, line splitting
    - grammars: Fixed-column TD1/TD2/TD3 line grammars and field offsets
    - detector: Document type detection (markers + structural probe)
    - matcher: Cascade matching and field extraction
    - validator: Date and document number checks, ICAO check digits
    - processor: Per-frame 4-stage pipeline
    - session: Throttled, single-result scan session
    - recognizer / engine_tesseract: Asynchronous OCR seam and Tesseract adapter

Example:
    >>> from src.mrz import MRZProcessor
    >>> processor = MRZProcessor()
    >>> result = processor.process(ocr_text)
    >>> if result.is_pass():
    ...     print(f"Document number: {result.mrz.document_number}")
"""

from .config_loader import (
    CheckDigitConfig,
    Config,
    DetectionConfig,
    EngineConfig,
    MRZModuleConfig,
    NormalizerConfig,
    SessionConfig,
    ValidationConfig,
    get_default_config,
    load_config,
)
from .detector import DocumentTypeDetector
from .grammars import FieldSpec, FormatGrammar, LineGrammar, get_grammar
from .matcher import CascadeMatcher, ExtractionError
from .normalizer import normalize_text, repair_numeric, strip_fill
from .processor import MRZProcessor
from .recognizer import ExecutorRecognizer, Recognizer, RecognizerError
from .session import ScanListener, ScanSession
from .types import (
    DecisionStatus,
    DocumentFormat,
    ErrorKind,
    FrameResult,
    MRZCandidate,
    RejectionReason,
    SessionState,
    ValidatedMRZ,
)
from .validator import (
    FieldValidator,
    calculate_check_digit,
    is_valid_mrz_date,
    validate_check_digit,
    validate_document_number,
)

__all__ = [
    # Types
    "DecisionStatus",
    "DocumentFormat",
    "ErrorKind",
    "FrameResult",
    "MRZCandidate",
    "RejectionReason",
    "SessionState",
    "ValidatedMRZ",
    # Configuration
    "Config",
    "MRZModuleConfig",
    "NormalizerConfig",
    "DetectionConfig",
    "ValidationConfig",
    "CheckDigitConfig",
    "SessionConfig",
    "EngineConfig",
    "load_config",
    "get_default_config",
    # Normalization
    "normalize_text",
    "repair_numeric",
    "strip_fill",
    # Grammars
    "FieldSpec",
    "LineGrammar",
    "FormatGrammar",
    "get_grammar",
    # Detection & matching
    "DocumentTypeDetector",
    "CascadeMatcher",
    "ExtractionError",
    # Validation
    "FieldValidator",
    "calculate_check_digit",
    "validate_check_digit",
    "is_valid_mrz_date",
    "validate_document_number",
    # Pipeline & session
    "MRZProcessor",
    "Recognizer",
    "RecognizerError",
    "ExecutorRecognizer",
    "ScanListener",
    "ScanSession",
]
