"""Fixed-column MRZ grammars for ICAO 9303 TD1, TD2 and TD3 layouts.

Each MRZ line is described as an ordered list of fixed-width fields. A field
only constrains its character *class* (digit, letter, fill...), so a garbled
character inside a field does not break the overall match as long as it stays
in class, while the surrounding fixed-width anchors keep the match precise:

    TD3 line 2 (44 columns)
    ┌─────────┬─┬───┬──────┬─┬─┬──────┬─┬──────────────┬─┬─┐
    │doc no.  │c│nat│birth │c│s│expiry│c│personal no.  │c│c│
    └─────────┴─┴───┴──────┴─┴─┴──────┴─┴──────────────┴─┴─┘
     0       9 10  13     19 20 21   27 28            42 43

Letter fields accept '0' as well because the normalizer folds every 'O' into
'0' before matching (e.g. the issuing state "UTO" arrives as "UT0").

Example:
    >>> grammar = get_grammar(DocumentFormat.PASSPORT_TD3)
    >>> grammar.lines[1].columns()["date_of_birth"]
    (13, 19)
"""

import re
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from .types import DocumentFormat

# Character classes (regex bracket contents)
DIGIT = "0-9"
LETTER = "A-Z0"
ALNUM_FILL = "A-Z0-9<"
CHECK_OR_FILL = "0-9<"
SEX = "MFX<"
NAME = "A-Z0<"
FILL = "<"


@dataclass(frozen=True)
class FieldSpec:
    """One fixed-width field of an MRZ line.

    Attributes:
        name: Field name, used as the regex group name
        width: Nominal width in columns
        charset: Regex character class contents allowed in the field
        min_width: Smallest width accepted; None means exactly `width`
    """

    name: str
    width: int
    charset: str
    min_width: Optional[int] = None

    @property
    def pattern(self) -> str:
        if self.min_width is None or self.min_width == self.width:
            quantifier = f"{{{self.width}}}"
        else:
            quantifier = f"{{{self.min_width},{self.width}}}"
        return f"(?P<{self.name}>[{self.charset}]{quantifier})"


@dataclass(frozen=True)
class LineGrammar:
    """Ordered fixed-width fields making up one MRZ line.

    Attributes:
        fields: Fields in column order
        required: Whether the line must be found for the format to match.
            Name lines of two-line formats are frequently mangled by OCR and
            carry nothing the extractor needs, so they are optional there.
    """

    fields: Tuple[FieldSpec, ...]
    required: bool = True

    @property
    def width(self) -> int:
        return sum(spec.width for spec in self.fields)

    @property
    def regex(self) -> str:
        return "".join(spec.pattern for spec in self.fields)

    @property
    def pattern(self) -> "re.Pattern[str]":
        # re keeps its own cache of compiled patterns
        return re.compile(self.regex)

    def columns(self) -> Dict[str, Tuple[int, int]]:
        """Nominal [start, end) column range of each field."""
        ranges: Dict[str, Tuple[int, int]] = {}
        start = 0
        for spec in self.fields:
            ranges[spec.name] = (start, start + spec.width)
            start += spec.width
        return ranges

    def search(self, line: str) -> Optional["re.Match[str]"]:
        """Find the grammar anywhere in a line, tolerating leading noise."""
        return self.pattern.search(line)


@dataclass(frozen=True)
class FieldRef:
    """Location of an extracted field: line index and field name."""

    line: int
    name: str


@dataclass(frozen=True)
class FormatGrammar:
    """Complete grammar and field-offset map of one document format.

    Attributes:
        document_format: Format described by this grammar
        lines: Line grammars in MRZ order
        offsets: Extracted field name -> location. Always names
            document_number, date_of_birth and date_of_expiry.
        check_digits: Extracted field name -> location of its check digit
        document_number_overflow: Field holding the tail of long document
            numbers (ICAO 9303 TD1 convention), if the format has one
    """

    document_format: DocumentFormat
    lines: Tuple[LineGrammar, ...]
    offsets: Dict[str, FieldRef]
    check_digits: Dict[str, FieldRef] = field(default_factory=dict)
    document_number_overflow: Optional[FieldRef] = None

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def column_range(self, name: str) -> Tuple[int, int, int]:
        """Return (line, start, end) of an extracted field."""
        ref = self.offsets[name]
        start, end = self.lines[ref.line].columns()[ref.name]
        return ref.line, start, end


# ═══════════════════════════════════════════════════════════════════════════
# TD3 - passport, 2 x 44
# ═══════════════════════════════════════════════════════════════════════════

TD3_LINE_1 = LineGrammar(
    fields=(
        FieldSpec("document_type", 1, "P"),
        FieldSpec("document_subtype", 1, ALNUM_FILL),
        FieldSpec("issuing_state", 3, LETTER),
        FieldSpec("names", 39, NAME),
    ),
    required=False,
)

TD3_LINE_2 = LineGrammar(
    fields=(
        FieldSpec("document_number", 9, ALNUM_FILL),
        # OCR regularly drops this digit; the anchors either side still hold
        FieldSpec("document_number_check", 1, CHECK_OR_FILL, min_width=0),
        FieldSpec("nationality", 3, LETTER),
        FieldSpec("date_of_birth", 6, DIGIT),
        FieldSpec("date_of_birth_check", 1, DIGIT),
        FieldSpec("sex", 1, SEX),
        FieldSpec("date_of_expiry", 6, DIGIT),
        FieldSpec("date_of_expiry_check", 1, DIGIT),
        FieldSpec("personal_number", 14, ALNUM_FILL),
        FieldSpec("personal_number_check", 1, CHECK_OR_FILL),
        FieldSpec("composite_check", 1, DIGIT),
    )
)

# ═══════════════════════════════════════════════════════════════════════════
# TD1 - ID card, 3 x 30
# ═══════════════════════════════════════════════════════════════════════════

TD1_LINE_1 = LineGrammar(
    fields=(
        FieldSpec("document_type", 1, "ACI"),
        FieldSpec("document_subtype", 1, ALNUM_FILL),
        FieldSpec("issuing_state", 3, LETTER),
        FieldSpec("document_number", 9, ALNUM_FILL),
        FieldSpec("document_number_check", 1, CHECK_OR_FILL),
        FieldSpec("optional_data", 15, ALNUM_FILL),
    )
)

TD1_LINE_2 = LineGrammar(
    fields=(
        FieldSpec("date_of_birth", 6, DIGIT),
        FieldSpec("date_of_birth_check", 1, DIGIT),
        FieldSpec("sex", 1, SEX),
        FieldSpec("date_of_expiry", 6, DIGIT),
        FieldSpec("date_of_expiry_check", 1, DIGIT),
        FieldSpec("nationality", 3, LETTER),
        FieldSpec("optional_data", 11, ALNUM_FILL),
        FieldSpec("composite_check", 1, DIGIT),
    )
)

TD1_LINE_3 = LineGrammar(
    fields=(
        FieldSpec("primary_initial", 1, LETTER),
        FieldSpec("primary_identifier", 26, NAME, min_width=0),
        FieldSpec("name_separator", 2, FILL),
        FieldSpec("secondary_identifier", 1, NAME),
    )
)

# ═══════════════════════════════════════════════════════════════════════════
# TD2 - ID card, 2 x 36
# ═══════════════════════════════════════════════════════════════════════════

TD2_LINE_1 = LineGrammar(
    fields=(
        FieldSpec("document_type", 1, "ACI"),
        FieldSpec("document_subtype", 1, ALNUM_FILL),
        FieldSpec("issuing_state", 3, LETTER),
        FieldSpec("names", 31, NAME),
    ),
    required=False,
)

TD2_LINE_2 = LineGrammar(
    fields=(
        FieldSpec("document_number", 9, ALNUM_FILL),
        FieldSpec("document_number_check", 1, CHECK_OR_FILL, min_width=0),
        FieldSpec("nationality", 3, LETTER),
        FieldSpec("date_of_birth", 6, DIGIT),
        FieldSpec("date_of_birth_check", 1, DIGIT),
        FieldSpec("sex", 1, SEX),
        FieldSpec("date_of_expiry", 6, DIGIT),
        FieldSpec("date_of_expiry_check", 1, DIGIT),
        FieldSpec("optional_data", 7, ALNUM_FILL),
        FieldSpec("composite_check", 1, DIGIT),
    )
)


_GRAMMARS: Dict[DocumentFormat, FormatGrammar] = {
    DocumentFormat.PASSPORT_TD3: FormatGrammar(
        document_format=DocumentFormat.PASSPORT_TD3,
        lines=(TD3_LINE_1, TD3_LINE_2),
        offsets={
            "document_number": FieldRef(1, "document_number"),
            "date_of_birth": FieldRef(1, "date_of_birth"),
            "date_of_expiry": FieldRef(1, "date_of_expiry"),
        },
        check_digits={
            "document_number": FieldRef(1, "document_number_check"),
            "date_of_birth": FieldRef(1, "date_of_birth_check"),
            "date_of_expiry": FieldRef(1, "date_of_expiry_check"),
        },
    ),
    DocumentFormat.ID_CARD_TD1: FormatGrammar(
        document_format=DocumentFormat.ID_CARD_TD1,
        lines=(TD1_LINE_1, TD1_LINE_2, TD1_LINE_3),
        offsets={
            "document_number": FieldRef(0, "document_number"),
            "date_of_birth": FieldRef(1, "date_of_birth"),
            "date_of_expiry": FieldRef(1, "date_of_expiry"),
        },
        check_digits={
            "document_number": FieldRef(0, "document_number_check"),
            "date_of_birth": FieldRef(1, "date_of_birth_check"),
            "date_of_expiry": FieldRef(1, "date_of_expiry_check"),
        },
        document_number_overflow=FieldRef(0, "optional_data"),
    ),
    DocumentFormat.ID_CARD_TD2: FormatGrammar(
        document_format=DocumentFormat.ID_CARD_TD2,
        lines=(TD2_LINE_1, TD2_LINE_2),
        offsets={
            "document_number": FieldRef(1, "document_number"),
            "date_of_birth": FieldRef(1, "date_of_birth"),
            "date_of_expiry": FieldRef(1, "date_of_expiry"),
        },
        check_digits={
            "document_number": FieldRef(1, "document_number_check"),
            "date_of_birth": FieldRef(1, "date_of_birth_check"),
            "date_of_expiry": FieldRef(1, "date_of_expiry_check"),
        },
    ),
}


def get_grammar(document_format: DocumentFormat) -> FormatGrammar:
    """Return the grammar of a document format."""
    return _GRAMMARS[document_format]
