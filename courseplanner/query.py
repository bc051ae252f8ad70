"""
Search query classification.

A raw search string is turned into exactly one ParsedQuery:

    "01:198:111"  -> CodeQuery
    "CS 111"      -> SubjectNumberQuery (subject resolved to "198")
    "111"         -> NumberQuery
    anything else -> GeneralQuery

Rules are tried in order on the trimmed, uppercased query and must match the
whole string. The first matching rule wins.
"""

from __future__ import annotations

import re
from typing import Callable, Optional

from courseplanner.model import (
    CodeQuery,
    GeneralQuery,
    NumberQuery,
    ParsedQuery,
    SubjectNumberQuery,
)
from courseplanner.tables import resolve_subject


# [0-9] instead of \d so unicode digits don't slip through
COURSE_CODE_PATTERN = re.compile(r"(?:([0-9]+):)?([0-9]+):([0-9]+)")
SUBJECT_NUMBER_PATTERN = re.compile(r"([A-Z]+)\s*([0-9]+)")
NUMBER_ONLY_PATTERN = re.compile(r"([0-9]{3,4})")


def _code(m: re.Match, raw: str) -> ParsedQuery:
    return CodeQuery(school=m.group(1) or None, subject=m.group(2), number=m.group(3), raw=raw)


def _subject_number(m: re.Match, raw: str) -> ParsedQuery:
    letters = m.group(1)
    return SubjectNumberQuery(
        subject=resolve_subject(letters) or letters,
        number=m.group(2),
        abbreviation=letters,
        raw=raw,
    )


def _number(m: re.Match, raw: str) -> ParsedQuery:
    return NumberQuery(number=m.group(1), raw=raw)


# Ordered (pattern, constructor) pairs
RULES: list[tuple[re.Pattern, Callable[[re.Match, str], ParsedQuery]]] = [
    (COURSE_CODE_PATTERN, _code),
    (SUBJECT_NUMBER_PATTERN, _subject_number),
    (NUMBER_ONLY_PATTERN, _number),
]


def classify(query: Optional[str]) -> ParsedQuery:
    """
    Classify a free-form search string. Never raises; blank or None input
    becomes an empty GeneralQuery.
    """
    raw = "" if query is None else str(query)
    trimmed = raw.strip()
    normalized = trimmed.upper()

    for pattern, build in RULES:
        m = pattern.fullmatch(normalized)
        if m:
            return build(m, raw)

    return GeneralQuery(text=trimmed, raw=raw)
