"""Cascade matching of MRZ format grammars against normalized text.

The matcher tries candidate formats in priority order and extracts the
document number, date of birth and date of expiry from the first format whose
required lines are all found. It never falls through to a lower-priority
format once a structural match was extracted, even if that candidate later
fails validation: mixing formats within one frame can manufacture a
plausible-looking but wrong identity, and the next frame is only a few tens
of milliseconds away.

Example:
    >>> matcher = CascadeMatcher()
    >>> lines = normalize_text(text)
    >>> candidate = matcher.match(lines, (DocumentFormat.PASSPORT_TD3,))
    >>> candidate.document_number
    'L898902C3'
"""

import logging
import re
from typing import Dict, Mapping, Optional, Sequence, Tuple

from .grammars import FieldRef, FormatGrammar, get_grammar
from .normalizer import FILL_CHARACTER, repair_numeric, strip_fill
from .types import DocumentFormat, MRZCandidate

logger = logging.getLogger(__name__)


class ExtractionError(ValueError):
    """A structural match could not be turned into field values."""


class CascadeMatcher:
    """Tries format grammars in order and extracts the first complete match.

    Args:
        grammars: Optional format -> grammar override. Uses the built-in
            ICAO 9303 grammars if None.
    """

    def __init__(self, grammars: Optional[Mapping[DocumentFormat, FormatGrammar]] = None):
        self._grammars = grammars

    def grammar(self, document_format: DocumentFormat) -> FormatGrammar:
        if self._grammars is not None:
            return self._grammars[document_format]
        return get_grammar(document_format)

    def match(
        self,
        lines: Sequence[str],
        formats: Sequence[DocumentFormat],
    ) -> Optional[MRZCandidate]:
        """Run the cascade over normalized lines.

        Args:
            lines: Normalized text lines of one frame.
            formats: Formats to try, highest priority first.

        Returns:
            MRZCandidate from the first structurally complete format, or None.

        Raises:
            ExtractionError: If a structural match has unusable field data.
        """
        for document_format in formats:
            grammar = self.grammar(document_format)
            matches = self.match_lines(grammar, lines)

            if matches is None:
                logger.debug(f"{document_format.value}: no structural match")
                continue

            candidate = self.extract(grammar, matches)
            logger.debug(
                f"{document_format.value}: extracted doc='{candidate.document_number}', "
                f"dob='{candidate.date_of_birth}', exp='{candidate.date_of_expiry}'"
            )
            return candidate

        return None

    @staticmethod
    def match_lines(
        grammar: FormatGrammar, lines: Sequence[str]
    ) -> Optional[Dict[int, "re.Match[str]"]]:
        """Find every required line grammar, in MRZ line order.

        Each line grammar is searched independently and anywhere within a
        text line, so leading OCR noise is tolerated. A grammar must be found
        after the previous one, either on a later text line or further along
        the same one (OCR sometimes merges two MRZ lines).

        Args:
            grammar: Format grammar to match.
            lines: Normalized text lines.

        Returns:
            Grammar line index -> match, or None if a required line is missing.
        """
        matches: Dict[int, "re.Match[str]"] = {}
        line_no, pos = 0, 0

        for index, line_grammar in enumerate(grammar.lines):
            if not line_grammar.required:
                continue

            found = None
            while line_no < len(lines):
                found = line_grammar.pattern.search(lines[line_no], pos)
                if found is not None:
                    break
                line_no, pos = line_no + 1, 0

            if found is None:
                return None

            matches[index] = found
            pos = found.end()

        return matches

    def extract(
        self, grammar: FormatGrammar, matches: Mapping[int, "re.Match[str]"]
    ) -> MRZCandidate:
        """Extract and clean the identity fields of a structural match.

        Args:
            grammar: Grammar that produced the matches.
            matches: Grammar line index -> match.

        Returns:
            MRZCandidate with fill characters stripped.

        Raises:
            ExtractionError: If a field is missing from the matches.
        """
        number_raw, number_check = self._document_number(grammar, matches)
        date_of_birth_raw = _group(matches, grammar.offsets["date_of_birth"])
        date_of_expiry_raw = _group(matches, grammar.offsets["date_of_expiry"])

        check_fields: Dict[str, Tuple[str, str]] = {
            "document_number": (number_raw, number_check),
        }
        for name, raw in (
            ("date_of_birth", date_of_birth_raw),
            ("date_of_expiry", date_of_expiry_raw),
        ):
            ref = grammar.check_digits.get(name)
            check_fields[name] = (raw, _group(matches, ref) if ref else "")

        return MRZCandidate(
            document_format=grammar.document_format,
            document_number=strip_fill(repair_numeric(number_raw)),
            date_of_birth=repair_numeric(date_of_birth_raw).strip(),
            date_of_expiry=repair_numeric(date_of_expiry_raw).strip(),
            check_fields=check_fields,
        )

    @staticmethod
    def _document_number(
        grammar: FormatGrammar, matches: Mapping[int, "re.Match[str]"]
    ) -> Tuple[str, str]:
        """Return the raw document number and its check character.

        Long document numbers (ICAO 9303, TD1) fill all nine columns, put a
        fill character in the check position and continue in the optional
        data field up to the next fill character; the last character of that
        continuation is the check digit.
        """
        raw = _group(matches, grammar.offsets["document_number"])
        check_ref = grammar.check_digits.get("document_number")
        check = _group(matches, check_ref) if check_ref else ""

        overflow_ref = grammar.document_number_overflow
        if overflow_ref is not None and check == FILL_CHARACTER and FILL_CHARACTER not in raw:
            tail = _group(matches, overflow_ref).split(FILL_CHARACTER, 1)[0]
            if len(tail) > 1:
                logger.debug(f"Long document number continues in optional data: '{tail}'")
                return raw + tail[:-1], tail[-1]

        return raw, check


def _group(matches: Mapping[int, "re.Match[str]"], ref: FieldRef) -> str:
    """Read one named field from a line match."""
    try:
        value = matches[ref.line].group(ref.name)
    except (KeyError, IndexError) as e:
        raise ExtractionError(f"Field '{ref.name}' of line {ref.line} not matched") from e

    if value is None:
        raise ExtractionError(f"Field '{ref.name}' of line {ref.line} is empty")

    return value
