"""Unit tests for MRZ field validator."""

import pytest

from src.mrz.config_loader import CheckDigitConfig, ValidationConfig
from src.mrz.types import DocumentFormat, MRZCandidate
from src.mrz.validator import (
    FieldValidator,
    calculate_check_digit,
    is_valid_mrz_date,
    validate_check_digit,
    validate_document_number,
)


def make_candidate(
    document_format=DocumentFormat.PASSPORT_TD3,
    document_number="L898902C3",
    date_of_birth="740812",
    date_of_expiry="120415",
    check_fields=None,
):
    if check_fields is None:
        check_fields = {
            "document_number": (document_number, "6"),
            "date_of_birth": (date_of_birth, "2"),
            "date_of_expiry": (date_of_expiry, "9"),
        }
    return MRZCandidate(
        document_format=document_format,
        document_number=document_number,
        date_of_birth=date_of_birth,
        date_of_expiry=date_of_expiry,
        check_fields=check_fields,
    )


class TestCheckDigit:
    """Test ICAO 9303 check digit calculation."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("L898902C3", 6),
            ("740812", 2),
            ("120415", 9),
            ("D23145890", 7),
            ("<<<<<<", 0),
        ],
    )
    def test_calculate(self, value, expected):
        """Test known check digits."""
        assert calculate_check_digit(value) == expected

    def test_invalid_character(self):
        """Test characters outside [0-9A-Z<] raise ValueError."""
        with pytest.raises(ValueError):
            calculate_check_digit("AB-12")

    def test_validate_match(self):
        """Test matching check digit."""
        assert validate_check_digit("740812", "2") == (True, 2, 2)

    def test_validate_mismatch(self):
        """Test mismatching check digit."""
        assert validate_check_digit("740812", "5") == (False, 2, 5)

    def test_fill_counts_as_zero(self):
        """Test '<' in the check position counts as 0."""
        assert validate_check_digit("<<<<<<", "<") == (True, 0, 0)

    def test_non_digit_check(self):
        """Test a letter in the check position never validates."""
        assert validate_check_digit("740812", "X") == (False, 2, None)

    def test_non_ascii_digit_check(self):
        """Test a superscript digit in the check position never validates."""
        assert validate_check_digit("740812", "\u00b2") == (False, 2, None)


class TestDateValidation:
    """Test YYMMDD date plausibility checks."""

    @pytest.mark.parametrize("date", ["900101", "740812", "001231", "900231", "991131"])
    def test_valid(self, date):
        """Test plausible dates, day 31 accepted for every month."""
        assert is_valid_mrz_date(date)

    @pytest.mark.parametrize(
        "date",
        ["991301", "990001", "990100", "990132", "9001", "9001011", "90A101", "90\u00b2101", "", None],
    )
    def test_invalid(self, date):
        """Test implausible or malformed dates."""
        assert not is_valid_mrz_date(date)


class TestDocumentNumberValidation:
    """Test document number length checks."""

    def test_long_enough(self):
        assert validate_document_number("AB1234567", min_length=8)

    def test_exact_minimum(self):
        assert validate_document_number("AB123456", min_length=8)

    def test_too_short(self):
        assert not validate_document_number("AB12345", min_length=8)

    def test_empty_never_valid(self):
        """Test empty number is rejected even with a zero minimum."""
        assert not validate_document_number("", min_length=0)
        assert not validate_document_number(None)


class TestFieldValidator:
    """Test candidate validation and rejection reasons."""

    @pytest.fixture
    def validator(self):
        return FieldValidator(ValidationConfig(), CheckDigitConfig())

    def test_valid_candidate(self, validator):
        """Test a valid candidate becomes a ValidatedMRZ."""
        mrz, reason = validator.validate(make_candidate())

        assert reason is None
        assert mrz.document_number == "L898902C3"
        assert mrz.document_format == DocumentFormat.PASSPORT_TD3

    def test_td3_short_document_number(self, validator):
        """Test TD3 requires at least 8 characters."""
        mrz, reason = validator.validate(make_candidate(document_number="AB12345"))

        assert mrz is None
        assert reason.code == "MRZ-E005"
        assert reason.constant == "INVALID_DOCUMENT_NUMBER"

    @pytest.mark.parametrize(
        "document_format", [DocumentFormat.ID_CARD_TD1, DocumentFormat.ID_CARD_TD2]
    )
    def test_id_card_short_document_number_accepted(self, validator, document_format):
        """Test ID card formats only require a non-empty number."""
        mrz, reason = validator.validate(
            make_candidate(document_format=document_format, document_number="A1")
        )
        assert reason is None
        assert mrz.document_number == "A1"

    def test_empty_document_number(self, validator):
        """Test empty number is rejected for every format."""
        _, reason = validator.validate(
            make_candidate(document_format=DocumentFormat.ID_CARD_TD1, document_number="")
        )
        assert reason.constant == "INVALID_DOCUMENT_NUMBER"

    def test_invalid_date_of_birth(self, validator):
        """Test month 13 in the birth date."""
        mrz, reason = validator.validate(make_candidate(date_of_birth="991301"))

        assert mrz is None
        assert reason.code == "MRZ-E006"
        assert reason.constant == "INVALID_DATE_OF_BIRTH"

    def test_invalid_date_of_expiry(self, validator):
        """Test day 0 in the expiry date."""
        _, reason = validator.validate(make_candidate(date_of_expiry="300100"))

        assert reason.code == "MRZ-E007"
        assert reason.constant == "INVALID_DATE_OF_EXPIRY"

    def test_custom_minimum_length(self):
        """Test minimum lengths come from configuration."""
        validator = FieldValidator(
            ValidationConfig(min_document_number_length={"TD1": 5})
        )
        _, reason = validator.validate(
            make_candidate(document_format=DocumentFormat.ID_CARD_TD1, document_number="A1")
        )
        assert reason.constant == "INVALID_DOCUMENT_NUMBER"
        # Formats missing from the map fall back to 1
        assert validator.min_document_number_length(DocumentFormat.ID_CARD_TD2) == 1

    def test_check_digits_ignored_by_default(self, validator):
        """Test wrong check digits pass while enforcement is disabled."""
        candidate = make_candidate(
            check_fields={
                "document_number": ("L898902C3", "0"),
                "date_of_birth": ("740812", "0"),
                "date_of_expiry": ("120415", "0"),
            }
        )
        mrz, reason = validator.validate(candidate)
        assert reason is None
        assert mrz is not None


class TestCheckDigitEnforcement:
    """Test optional check digit enforcement."""

    @pytest.fixture
    def validator(self):
        return FieldValidator(ValidationConfig(), CheckDigitConfig(enabled=True))

    def test_valid_check_digits(self, validator):
        """Test the specimen passes with enforcement enabled."""
        mrz, reason = validator.validate(make_candidate())
        assert reason is None
        assert mrz is not None

    def test_mismatch(self, validator):
        """Test wrong date of birth check digit is rejected."""
        candidate = make_candidate(
            check_fields={
                "document_number": ("L898902C3", "6"),
                "date_of_birth": ("740812", "5"),
                "date_of_expiry": ("120415", "9"),
            }
        )
        mrz, reason = validator.validate(candidate)

        assert mrz is None
        assert reason.code == "MRZ-E008"
        assert reason.constant == "INVALID_CHECK_DIGIT"
        assert "date_of_birth" in reason.message

    def test_missing_check_digit(self, validator):
        """Test a dropped check digit is rejected when enforcement is enabled."""
        candidate = make_candidate(
            check_fields={
                "document_number": ("L898902C3", ""),
                "date_of_birth": ("740812", "2"),
                "date_of_expiry": ("120415", "9"),
            }
        )
        _, reason = validator.validate(candidate)
        assert reason.constant == "INVALID_CHECK_DIGIT"

    def test_uncomputable_value(self, validator):
        """Test characters outside the MRZ alphabet are rejected, not raised."""
        candidate = make_candidate(
            check_fields={
                "document_number": ("L898902C3", "6"),
                "date_of_birth": ("74-812", "2"),
                "date_of_expiry": ("120415", "9"),
            }
        )
        _, reason = validator.validate(candidate)
        assert reason.constant == "INVALID_CHECK_DIGIT"
        assert "Cannot compute" in reason.message

    def test_non_ascii_digit_date_rejected(self, validator):
        """Test a superscript digit in a date is a rejection, never an exception."""
        mrz, reason = validator.validate(make_candidate(date_of_birth="90\u00b2101"))

        assert mrz is None
        assert reason.constant == "INVALID_DATE_OF_BIRTH"

    def test_field_semantics_checked_first(self, validator):
        """Test date rejection takes precedence over check digit rejection."""
        _, reason = validator.validate(make_candidate(date_of_birth="991301"))
        assert reason.constant == "INVALID_DATE_OF_BIRTH"
