"""MRZ field validation and ICAO 9303 check digit calculation.

Validation is deliberately permissive about dates: only the YYMMDD shape and
the month/day ranges are checked, a day of 31 is accepted for any month.

References:
    - ICAO Doc 9303 Part 3 - Specifications common to all MRTDs, section 4.9
      (check digits in the machine readable zone)
"""

import logging
import re
from typing import Optional, Tuple

from .config_loader import CheckDigitConfig, ValidationConfig
from .types import DocumentFormat, MRZCandidate, RejectionReason, ValidatedMRZ

logger = logging.getLogger(__name__)

CHECK_DIGIT_WEIGHTS = (7, 3, 1)


def calculate_check_digit(value: str) -> int:
    """Calculate ICAO 9303 check digit for an MRZ field.

    The check digit is calculated as follows:
    1. Map each character to a numeric value:
       - Digits (0-9): their numeric value
       - Letters (A-Z): A=10, B=11, ..., Z=35
       - Fill character '<': 0
    2. Multiply each value by the repeating weights 7, 3, 1
    3. Check digit = sum of products mod 10

    Args:
        value: Raw MRZ field, fill characters included

    Returns:
        Check digit (0-9)

    Raises:
        ValueError: If input contains characters outside [0-9A-Z<]

    Example:
        >>> calculate_check_digit("L898902C3")
        6
        >>> calculate_check_digit("740812")
        2
    """
    total = 0
    for pos, char in enumerate(value):
        if "0" <= char <= "9":
            char_value = int(char)
        elif "A" <= char <= "Z":
            char_value = ord(char) - ord("A") + 10
        elif char == "<":
            char_value = 0
        else:
            raise ValueError(f"Invalid character in MRZ field: {char!r}")
        total += char_value * CHECK_DIGIT_WEIGHTS[pos % 3]

    return total % 10


def validate_check_digit(value: str, check: str) -> Tuple[bool, int, Optional[int]]:
    """Validate an MRZ field against its check character.

    A fill character in the check position counts as 0.

    Args:
        value: Raw MRZ field
        check: Check character read from the MRZ

    Returns:
        Tuple of (is_valid, expected_check_digit, actual_check_digit).
        actual_check_digit is None when the check character is not a digit.

    Raises:
        ValueError: If value contains characters outside [0-9A-Z<]

    Example:
        >>> validate_check_digit("740812", "2")
        (True, 2, 2)
        >>> validate_check_digit("740812", "5")
        (False, 2, 5)
    """
    expected = calculate_check_digit(value)

    if check == "<":
        actual: Optional[int] = 0
    elif len(check) == 1 and "0" <= check <= "9":
        actual = int(check)
    else:
        actual = None

    return (expected == actual, expected, actual)


def is_valid_mrz_date(date: Optional[str]) -> bool:
    """Validate MRZ date format (YYMMDD).

    Checks:
    - Exactly 6 digits
    - Month in [1, 12]
    - Day in [1, 31] (not checked against the month's length)

    Args:
        date: Date string from the MRZ

    Returns:
        True if the date is plausible, False otherwise

    Example:
        >>> is_valid_mrz_date("900101")
        True
        >>> is_valid_mrz_date("991301")  # Month 13
        False
        >>> is_valid_mrz_date("900231")  # Day count not checked per month
        True
    """
    if date is None or not re.fullmatch(r"[0-9]{6}", date):
        return False

    month = int(date[2:4])
    day = int(date[4:6])

    if month < 1 or month > 12:
        logger.debug(f"Date validation failed - invalid month {month} in {date}")
        return False
    if day < 1 or day > 31:
        logger.debug(f"Date validation failed - invalid day {day} in {date}")
        return False

    return True


def validate_document_number(document_number: Optional[str], min_length: int = 1) -> bool:
    """Validate a cleaned document number.

    Args:
        document_number: Document number with fill characters stripped
        min_length: Minimum accepted length (at least 1)

    Returns:
        True if the document number is non-empty and long enough

    Example:
        >>> validate_document_number("AB1234567", min_length=8)
        True
        >>> validate_document_number("", min_length=1)
        False
    """
    if not document_number:
        return False
    return len(document_number) >= max(1, min_length)


class FieldValidator:
    """Structural and semantic validation of extracted MRZ fields.

    Rejection is a normal, frequent outcome of OCR noise, so it is reported
    as a value, never raised.

    Args:
        validation_config: Document number length requirements.
        check_digit_config: Optional ICAO check digit enforcement.

    Example:
        >>> validator = FieldValidator(ValidationConfig(), CheckDigitConfig())
        >>> mrz, reason = validator.validate(candidate)
        >>> if mrz is None:
        ...     print(reason.constant)
    """

    def __init__(
        self,
        validation_config: Optional[ValidationConfig] = None,
        check_digit_config: Optional[CheckDigitConfig] = None,
    ):
        self.validation_config = validation_config or ValidationConfig()
        self.check_digit_config = check_digit_config or CheckDigitConfig()

    def min_document_number_length(self, document_format: DocumentFormat) -> int:
        return self.validation_config.min_document_number_length.get(
            document_format.value, 1
        )

    def validate(
        self, candidate: MRZCandidate
    ) -> Tuple[Optional[ValidatedMRZ], Optional[RejectionReason]]:
        """Validate a candidate.

        Args:
            candidate: Fields extracted by the cascade matcher.

        Returns:
            Tuple of (ValidatedMRZ, None) on success or (None, RejectionReason).
        """
        min_length = self.min_document_number_length(candidate.document_format)
        if not validate_document_number(candidate.document_number, min_length):
            return None, RejectionReason(
                code="MRZ-E005",
                constant="INVALID_DOCUMENT_NUMBER",
                message=f"Document number '{candidate.document_number}' is shorter "
                f"than {min_length} characters for {candidate.document_format.value}",
                stage="STAGE_4",
            )

        if not is_valid_mrz_date(candidate.date_of_birth):
            return None, RejectionReason(
                code="MRZ-E006",
                constant="INVALID_DATE_OF_BIRTH",
                message=f"Date of birth '{candidate.date_of_birth}' is not a valid YYMMDD date",
                stage="STAGE_4",
            )

        if not is_valid_mrz_date(candidate.date_of_expiry):
            return None, RejectionReason(
                code="MRZ-E007",
                constant="INVALID_DATE_OF_EXPIRY",
                message=f"Date of expiry '{candidate.date_of_expiry}' is not a valid YYMMDD date",
                stage="STAGE_4",
            )

        if self.check_digit_config.enabled:
            reason = self._check_digits(candidate)
            if reason is not None:
                return None, reason

        return ValidatedMRZ.from_candidate(candidate), None

    def _check_digits(self, candidate: MRZCandidate) -> Optional[RejectionReason]:
        """Verify ICAO check digits of document number and both dates."""
        for name in ("document_number", "date_of_birth", "date_of_expiry"):
            value, check = candidate.check_fields.get(name, ("", ""))
            if not value or not check:
                return RejectionReason(
                    code="MRZ-E008",
                    constant="INVALID_CHECK_DIGIT",
                    message=f"Check digit for {name} is missing",
                    stage="STAGE_4",
                )

            try:
                is_valid, expected, actual = validate_check_digit(value, check)
            except ValueError as e:
                return RejectionReason(
                    code="MRZ-E008",
                    constant="INVALID_CHECK_DIGIT",
                    message=f"Cannot compute check digit for {name}: {e}",
                    stage="STAGE_4",
                )

            if not is_valid:
                return RejectionReason(
                    code="MRZ-E008",
                    constant="INVALID_CHECK_DIGIT",
                    message=f"Check digit mismatch for {name}: expected {expected}, "
                    f"got {actual}",
                    stage="STAGE_4",
                )

        return None
