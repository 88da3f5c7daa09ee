# coding: utf-8

"""Detect the battery history format version of a document.

Format 1 is the legacy numeric format (e.g., ``9,h,0,Bl=52``).
Format 2 is the human-readable format
(e.g., ``01-11 12:11:14.405 075 c4002820 status=discharging``).
"""

import io

from .preset import default_header_parser

FORMAT_LEGACY = 1
FORMAT_READABLE = 2

LEGACY_MARKER = "9,h,"

FORMAT2_PATTERN = default_header_parser().pattern


def classify(text, legacy_marker=LEGACY_MARKER, pattern=None):
    """Returns the format version (1 or 2) of a battery history document.
    See :func:`classify_lines`.

    Args:
        text (str): multi-line document.
    """
    return classify_lines(io.StringIO(text, newline="\n"),
                          legacy_marker=legacy_marker, pattern=pattern)


def classify_lines(lines, legacy_marker=LEGACY_MARKER, pattern=None):
    """Returns the format version (1 or 2) of a sequence of history lines.

    Lines are scanned in document order, and the first decisive line wins:
    a line starting with the legacy marker gives 1,
    a line matching the Format 2 grammar gives 2.
    Lines are compared without surrounding white spaces.
    If no line is decisive (including empty text), 1 is returned.

    Args:
        lines (iterable of str): lines of a document. Consumed lazily;
            no line after the first decisive one is read.
        legacy_marker (str, optional): prefix of Format 1 lines.
        pattern (re.Pattern, optional): Format 2 grammar.
            Defaults to the pattern of the default header parser.
    """
    if pattern is None:
        pattern = FORMAT2_PATTERN
    for line in lines:
        stripped = line.strip()
        if stripped.startswith(legacy_marker):
            return FORMAT_LEGACY
        if pattern.match(stripped):
            return FORMAT_READABLE
    return FORMAT_LEGACY
