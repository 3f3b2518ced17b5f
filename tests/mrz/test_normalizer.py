"""Unit tests for MRZ text normalizer."""

from src.mrz.normalizer import normalize_text, repair_numeric, strip_fill


class TestNormalizeText:
    """Test canonicalization of raw OCR text."""

    def test_uppercase(self):
        """Test text is upper-cased."""
        assert normalize_text("p<abc") == ("P<ABC",)

    def test_letter_o_replaced_with_zero(self):
        """Test the confusable 'O' becomes digit '0', including lower-case 'o'."""
        assert normalize_text("UTO oslo") == ("UT0 0SL0",)

    def test_fill_character_preserved(self):
        """Test '<' survives normalization for later stripping."""
        assert normalize_text("ERIKSSON<<ANNA<<<") == ("ERIKSS0N<<ANNA<<<",)

    def test_split_on_newlines_keeps_order(self):
        """Test lines are split on newline in their original order."""
        assert normalize_text("LINE1\nLINE2\nLINE3") == ("LINE1", "LINE2", "LINE3")

    def test_empty_lines_preserved(self):
        """Test empty lines are kept so line indexes stay meaningful."""
        assert normalize_text("A\n\nB\n") == ("A", "", "B", "")

    def test_carriage_returns_removed(self):
        """Test Windows line endings do not leave '\\r' in lines."""
        assert normalize_text("P<UT0\r\nL898") == ("P<UT0", "L898")

    def test_empty_input(self):
        """Test empty input yields a single empty line."""
        assert normalize_text("") == ("",)

    def test_none_input(self):
        """Test None input never fails."""
        assert normalize_text(None) == ("",)

    def test_custom_confusables(self):
        """Test custom confusable map is applied."""
        assert normalize_text("IO", confusables={"I": "1"}) == ("1O",)

    def test_fill_character_never_remapped(self):
        """Test a confusable rule targeting '<' is ignored."""
        assert normalize_text("A<B", confusables={"<": "K"}) == ("A<B",)

    def test_result_is_immutable_tuple(self):
        """Test normalized text is returned as a tuple."""
        assert isinstance(normalize_text("ABC\nDEF"), tuple)


class TestFieldHelpers:
    """Test per-field repair helpers."""

    def test_repair_numeric(self):
        """Test O -> 0 repair in numeric context."""
        assert repair_numeric("AB12O4567") == "AB1204567"

    def test_repair_numeric_no_change(self):
        """Test values without 'O' are unchanged."""
        assert repair_numeric("L898902C3") == "L898902C3"

    def test_strip_fill(self):
        """Test fill characters and whitespace are removed."""
        assert strip_fill(" D23145890<< ") == "D23145890"
        assert strip_fill("10000999<") == "10000999"

    def test_strip_fill_all_fill(self):
        """Test a field of only fill characters becomes empty."""
        assert strip_fill("<<<<<<<<<") == ""
