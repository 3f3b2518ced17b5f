"""Text normalization for raw per-frame OCR output.

OCR engines return mixed-case text in which the letter 'O' and the digit '0'
are routinely confused. MRZ text is upper-case only and the numeric fields
(dates, check digits) are far more valuable than the few letter fields, so
the whole frame is folded towards digits:

    >>> normalize_text("p<utoeriksson\\nL898902C36UTO7408122F")
    ('P<UT0ERIKSS0N', 'L898902C36UT07408122F')

The fill character '<' is preserved; it is stripped later, per field.
"""

from typing import Mapping, Optional, Tuple

DEFAULT_CONFUSABLES: Mapping[str, str] = {"O": "0"}

FILL_CHARACTER = "<"


def normalize_text(
    raw_text: Optional[str],
    confusables: Optional[Mapping[str, str]] = None,
) -> Tuple[str, ...]:
    """Canonicalize raw OCR text into an ordered tuple of lines.

    The method:
    1. Upper-cases the text
    2. Replaces OCR-confusable glyphs (O -> 0 by default)
    3. Splits on newlines, keeping empty lines so line positions stay meaningful

    Never fails: None or empty input yields a single empty line.

    Args:
        raw_text: Raw OCR text for one frame (may be multi-line, empty or None).
        confusables: Glyph replacements; defaults to DEFAULT_CONFUSABLES.

    Returns:
        Tuple of normalized lines.

    Example:
        >>> normalize_text("")
        ('',)
        >>> normalize_text("i<uto\\n\\n7408122f")
        ('I<UT0', '', '7408122F')
    """
    if not raw_text:
        return ("",)

    if confusables is None:
        confusables = DEFAULT_CONFUSABLES

    text = raw_text.upper()
    for glyph, replacement in confusables.items():
        if glyph == FILL_CHARACTER:
            continue
        text = text.replace(glyph, replacement)

    return tuple(line.rstrip("\r") for line in text.split("\n"))


def repair_numeric(value: str) -> str:
    """Repair letter/digit confusion in a field read in numeric context."""
    return value.replace("O", "0")


def strip_fill(value: str) -> str:
    """Remove fill characters and surrounding whitespace from a field.

    Example:
        >>> strip_fill("D23145890<")
        'D23145890'
    """
    return value.replace(FILL_CHARACTER, "").strip()
