"""
Course search (tiered matching + ranking).

The query is classified first (see query.py), then scored by an ordered list
of tiers. The first tier that produces any match wins:

    CodeQuery           exact -> fuzzy
    SubjectNumberQuery  exact -> high -> fuzzy
    NumberQuery         number -> fuzzy
    GeneralQuery        fuzzy

So "CS 111" returns 198:111 only, and never 198:1110 next to it.

Ranking is a stable sort on score (descending), so ties keep input order.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Iterable, Sequence, Union

from courseplanner.model import (
    CodeQuery,
    CourseRecord,
    GeneralQuery,
    NumberQuery,
    ParsedQuery,
    ScoredMatch,
    SubjectNumberQuery,
    Tier,
)
from courseplanner.query import classify


TierFn = Callable[[Sequence[CourseRecord], ParsedQuery], list[ScoredMatch]]

QUERY_TYPES = (CodeQuery, SubjectNumberQuery, NumberQuery, GeneralQuery)


EXACT_SCORE = 100
SUBJECT_PARTIAL_SCORE = 95
ABBREVIATION_PARTIAL_SCORE = 90
NUMBER_SCORE = 85

# Fuzzy weights, per token
FIELD_EQUALS_WEIGHTS = (
    ("course_string", 80),
    ("course_number", 75),
    ("subject", 70),
)
FIELD_CONTAINS_WEIGHTS = (
    ("course_string", 50),
    ("title", 40),
    ("subject", 35),
    ("subject_description", 30),
    ("course_number", 25),
    ("description", 10),
)
WORD_BOUNDARY_WEIGHTS = (
    ("title", 20),
    ("subject_description", 15),
)


def _field(course: Any, name: str) -> str:
    value = getattr(course, name, "")
    return "" if value is None else str(value)


def _ranked(matches: Iterable[ScoredMatch]) -> list[ScoredMatch]:
    # sorted() is stable -> equal scores keep input order
    return sorted(matches, key=lambda m: -m.score)


def dedupe(courses: Iterable[CourseRecord]) -> list[CourseRecord]:
    """
    Collapse records sharing a course_string (one per ingested section).
    First occurrence wins.
    """
    seen: set[str] = set()
    out: list[CourseRecord] = []
    for course in courses:
        key = _field(course, "course_string")
        if key in seen:
            continue
        seen.add(key)
        out.append(course)
    return out


def query_text(parsed: ParsedQuery) -> str:
    """
    Text the fuzzy tier tokenizes. Falls back to a rebuilt query if the
    ParsedQuery was constructed by hand without raw text.
    """
    if parsed.raw.strip():
        return parsed.raw
    if isinstance(parsed, CodeQuery):
        return _identifier(parsed)
    if isinstance(parsed, SubjectNumberQuery):
        return f"{parsed.abbreviation or parsed.subject} {parsed.number}"
    if isinstance(parsed, NumberQuery):
        return parsed.number
    return parsed.text


def _identifier(parsed: Union[CodeQuery, SubjectNumberQuery]) -> str:
    school = getattr(parsed, "school", None)
    if school:
        return f"{school}:{parsed.subject}:{parsed.number}"
    return f"{parsed.subject}:{parsed.number}"


# ---------------------------------------------------------------------------
# Tiers
# ---------------------------------------------------------------------------


def exact_tier(courses: Sequence[CourseRecord], parsed: ParsedQuery) -> list[ScoredMatch]:
    """
    Score 100 when the rebuilt identifier equals course_string.
    For subject+number queries, an exact subject AND number match also counts.
    """
    if not isinstance(parsed, (CodeQuery, SubjectNumberQuery)):
        return []

    target = _identifier(parsed).upper()
    subject = parsed.subject.upper()
    number = parsed.number.upper()

    out: list[ScoredMatch] = []
    for course in courses:
        hit = _field(course, "course_string").upper() == target
        if not hit and isinstance(parsed, SubjectNumberQuery):
            hit = (
                _field(course, "subject").upper() == subject
                and _field(course, "course_number").upper() == number
            )
        if hit:
            out.append(ScoredMatch(course=course, score=EXACT_SCORE, tier=Tier.EXACT))
    return _ranked(out)


def high_tier(courses: Sequence[CourseRecord], parsed: ParsedQuery) -> list[ScoredMatch]:
    """
    Subject matches and the course number contains the typed number
    (e.g. "CS 11" -> 198:111). The literal letters count a bit less than the
    resolved subject code.
    """
    if not isinstance(parsed, SubjectNumberQuery):
        return []

    subject = parsed.subject.upper()
    literal = parsed.abbreviation.upper()
    number = parsed.number.upper()

    out: list[ScoredMatch] = []
    for course in courses:
        course_subject = _field(course, "subject").upper()
        if number not in _field(course, "course_number").upper():
            continue
        if course_subject == subject:
            out.append(ScoredMatch(course=course, score=SUBJECT_PARTIAL_SCORE, tier=Tier.HIGH))
        elif literal and course_subject == literal:
            out.append(ScoredMatch(course=course, score=ABBREVIATION_PARTIAL_SCORE, tier=Tier.HIGH))
    return _ranked(out)


def number_tier(courses: Sequence[CourseRecord], parsed: ParsedQuery) -> list[ScoredMatch]:
    if not isinstance(parsed, NumberQuery):
        return []

    number = parsed.number.upper()
    out = [
        ScoredMatch(course=course, score=NUMBER_SCORE, tier=Tier.HIGH)
        for course in courses
        if _field(course, "course_number").upper() == number
    ]
    return _ranked(out)


def fuzzy_score(course: CourseRecord, tokens: Sequence[str]) -> int:
    """
    Cumulative weighted score of a course over all tokens (lowercase).
    """
    fields = {
        name: _field(course, name).lower()
        for name in (
            "course_string",
            "title",
            "subject",
            "subject_description",
            "course_number",
            "description",
        )
    }

    score = 0
    for token in tokens:
        for name, weight in FIELD_EQUALS_WEIGHTS:
            if fields[name] == token:
                score += weight
        for name, weight in FIELD_CONTAINS_WEIGHTS:
            if token in fields[name]:
                score += weight
        word = re.compile(rf"\b{re.escape(token)}\b")
        for name, weight in WORD_BOUNDARY_WEIGHTS:
            if word.search(fields[name]):
                score += weight
    return score


def fuzzy_tier(courses: Sequence[CourseRecord], parsed: ParsedQuery) -> list[ScoredMatch]:
    tokens = query_text(parsed).lower().split()
    if not tokens:
        return []

    out: list[ScoredMatch] = []
    for course in courses:
        score = fuzzy_score(course, tokens)
        if score > 0:
            out.append(ScoredMatch(course=course, score=score, tier=Tier.FUZZY))
    return _ranked(out)


def tiers_for(parsed: ParsedQuery) -> list[TierFn]:
    if isinstance(parsed, CodeQuery):
        return [exact_tier, fuzzy_tier]
    if isinstance(parsed, SubjectNumberQuery):
        return [exact_tier, high_tier, fuzzy_tier]
    if isinstance(parsed, NumberQuery):
        return [number_tier, fuzzy_tier]
    return [fuzzy_tier]


def first_non_empty(
    tiers: Iterable[TierFn], courses: Sequence[CourseRecord], parsed: ParsedQuery
) -> list[ScoredMatch]:
    """
    Run tiers in order and return the output of the first non-empty one.
    """
    for tier in tiers:
        matches = tier(courses, parsed)
        if matches:
            return matches
    return []


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def rank(courses: Iterable[CourseRecord], query: Union[ParsedQuery, str, None]) -> list[ScoredMatch]:
    """
    Deduplicate courses and return scored matches, best first.
    """
    parsed = query if isinstance(query, QUERY_TYPES) else classify(query)
    unique = dedupe(courses or [])
    return first_non_empty(tiers_for(parsed), unique, parsed)


def match(courses: Iterable[CourseRecord], query: Union[ParsedQuery, str, None]) -> list[CourseRecord]:
    """
    Ranked, deduplicated list of courses matching the query.
    An empty query gives an empty list.
    """
    return [m.course for m in rank(courses, query)]


def include_all_sections(matched: Iterable[CourseRecord], all_courses: Iterable[CourseRecord]) -> list[CourseRecord]:
    """
    Expand matched courses back to every record sharing their course_string
    (in all_courses order).
    """
    wanted = {_field(c, "course_string") for c in matched}
    return [c for c in all_courses if _field(c, "course_string") in wanted]
