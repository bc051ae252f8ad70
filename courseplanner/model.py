"""
Central data model definitions used across the project.

This module defines the canonical structure of catalog records, parsed search
queries and schedule entries so that:
- the search, conflict and storage modules share the same field names
- records coming from the catalog (camelCase JSON) and from our own
  processed files (snake_case JSON) end up in the same shape
- missing fields never crash anything (they become "" / [])
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Tuple, Union


def _safe_str(x: Any) -> str:
    return "" if x is None else str(x)


def _pick(data: dict[str, Any], *keys: str) -> Any:
    """
    Return the first non-None value among the given keys.
    """
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def _as_list(x: Any) -> list:
    return list(x) if isinstance(x, (list, tuple)) else []


def _display_time(x: Any) -> str:
    # frontend shape: {"military": "1020", "formatted": "10:20 AM"}
    if isinstance(x, dict):
        x = x.get("formatted")
    return _safe_str(x) or "N/A"


# ---------------------------------------------------------------------------
# Catalog records
# ---------------------------------------------------------------------------


@dataclass
class MeetingTime:
    """
    One weekly meeting of a section, in display form.

    day is a full weekday name ("Monday") or "" for asynchronous online
    meetings. start_time / end_time look like "10:20 AM" or "N/A".
    """

    day: str = ""
    start_time: str = "N/A"
    end_time: str = "N/A"
    mode: str = ""
    building: str = ""
    room: str = ""
    campus: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "MeetingTime":
        if not isinstance(data, dict):
            return cls()
        return cls(
            day=_safe_str(data.get("day")),
            start_time=_display_time(_pick(data, "start_time", "startTime")),
            end_time=_display_time(_pick(data, "end_time", "endTime")),
            mode=_safe_str(data.get("mode")),
            building=_safe_str(data.get("building")),
            room=_safe_str(data.get("room")),
            campus=_safe_str(data.get("campus")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "day": self.day,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "mode": self.mode,
            "building": self.building,
            "room": self.room,
            "campus": self.campus,
        }


@dataclass
class Section:
    """
    One section (index number) of a course.
    """

    number: str = ""
    index: str = ""
    instructors: List[str] = field(default_factory=list)
    status: str = ""
    comments: str = ""
    meeting_times: List[MeetingTime] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "Section":
        if not isinstance(data, dict):
            return cls()
        return cls(
            number=_safe_str(data.get("number")),
            index=_safe_str(data.get("index")),
            instructors=[
                _safe_str(x.get("name") if isinstance(x, dict) else x) for x in _as_list(data.get("instructors"))
            ],
            status=_safe_str(data.get("status")),
            comments=_safe_str(data.get("comments")),
            meeting_times=[
                MeetingTime.from_dict(m) for m in _as_list(_pick(data, "meeting_times", "meetingTimes"))
            ],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "number": self.number,
            "index": self.index,
            "instructors": list(self.instructors),
            "status": self.status,
            "comments": self.comments,
            "meeting_times": [m.to_dict() for m in self.meeting_times],
        }


@dataclass
class CourseRecord:
    """
    Represents one catalog course.

    course_string is the unique identifier ("01:198:111"). Everything else is
    optional; the search engine treats missing values as empty strings.
    """

    course_string: str = ""
    title: str = ""
    subject: str = ""
    course_number: str = ""
    description: str = ""
    subject_description: str = ""
    credits: str = ""
    school: str = ""
    campus_locations: List[str] = field(default_factory=list)
    prerequisites: str = ""
    core_codes: List[dict] = field(default_factory=list)
    sections: List[Section] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "CourseRecord":
        """
        Build a record from either our processed JSON (snake_case) or a
        camelCase dict as used by the catalog frontend.
        """
        if not isinstance(data, dict):
            return cls()
        return cls(
            course_string=_safe_str(_pick(data, "course_string", "courseString")),
            title=_safe_str(data.get("title")),
            subject=_safe_str(data.get("subject")),
            course_number=_safe_str(_pick(data, "course_number", "courseNumber")),
            description=_safe_str(data.get("description")),
            subject_description=_safe_str(_pick(data, "subject_description", "subjectDescription")),
            credits=_safe_str(data.get("credits")),
            school=_safe_str(data.get("school")),
            campus_locations=[_safe_str(x) for x in _as_list(_pick(data, "campus_locations", "campusLocations"))],
            prerequisites=_safe_str(data.get("prerequisites")),
            core_codes=[c for c in _as_list(_pick(data, "core_codes", "coreCodes")) if isinstance(c, dict)],
            sections=[Section.from_dict(s) for s in _as_list(data.get("sections"))],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "course_string": self.course_string,
            "title": self.title,
            "subject": self.subject,
            "course_number": self.course_number,
            "description": self.description,
            "subject_description": self.subject_description,
            "credits": self.credits,
            "school": self.school,
            "campus_locations": list(self.campus_locations),
            "prerequisites": self.prerequisites,
            "core_codes": [dict(c) for c in self.core_codes],
            "sections": [s.to_dict() for s in self.sections],
        }

    def find_section(self, index: str) -> Optional[Section]:
        wanted = index.strip()
        for section in self.sections:
            if section.index == wanted:
                return section
        return None


# ---------------------------------------------------------------------------
# Parsed search queries
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CodeQuery:
    """Full catalog code, e.g. "01:198:111" or "198:111"."""

    school: Optional[str]
    subject: str
    number: str
    raw: str = ""


@dataclass(frozen=True)
class SubjectNumberQuery:
    """
    Department letters plus number, e.g. "CS 111".

    subject is the resolved catalog code ("198") or the literal letters when
    the abbreviation is unknown. abbreviation always keeps the typed letters.
    """

    subject: str
    number: str
    abbreviation: str = ""
    raw: str = ""


@dataclass(frozen=True)
class NumberQuery:
    """Bare 3-4 digit course number, e.g. "111"."""

    number: str
    raw: str = ""


@dataclass(frozen=True)
class GeneralQuery:
    """Free text."""

    text: str
    raw: str = ""


ParsedQuery = Union[CodeQuery, SubjectNumberQuery, NumberQuery, GeneralQuery]


class Tier(Enum):
    EXACT = "exact"
    HIGH = "high"
    FUZZY = "fuzzy"


@dataclass(frozen=True)
class ScoredMatch:
    course: CourseRecord
    score: int
    tier: Tier


# ---------------------------------------------------------------------------
# Schedule
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MeetingInterval:
    """
    One weekly recurring time block in minutes since midnight.

    start_minutes / end_minutes are None if the display time could not be
    parsed. Such intervals never take part in conflict checks.
    """

    day: str
    start_minutes: Optional[int]
    end_minutes: Optional[int]
    mode: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "day": self.day,
            "start_minutes": self.start_minutes,
            "end_minutes": self.end_minutes,
            "mode": self.mode,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "MeetingInterval":
        if not isinstance(data, dict):
            return cls(day="", start_minutes=None, end_minutes=None)
        start = data.get("start_minutes")
        end = data.get("end_minutes")
        return cls(
            day=_safe_str(data.get("day")),
            start_minutes=start if isinstance(start, int) and not isinstance(start, bool) else None,
            end_minutes=end if isinstance(end, int) and not isinstance(end, bool) else None,
            mode=_safe_str(data.get("mode")),
        )


@dataclass(frozen=True)
class ScheduledSelection:
    """
    A course paired with the one section the user committed to.

    Immutable: picking another section means remove + add.
    """

    course_string: str
    title: str
    section_index: str
    section_number: str = ""
    intervals: Tuple[MeetingInterval, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "course_string": self.course_string,
            "title": self.title,
            "section_index": self.section_index,
            "section_number": self.section_number,
            "intervals": [i.to_dict() for i in self.intervals],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScheduledSelection":
        return cls(
            course_string=_safe_str(data.get("course_string")).strip(),
            title=_safe_str(data.get("title")),
            section_index=_safe_str(data.get("section_index")),
            section_number=_safe_str(data.get("section_number")),
            intervals=tuple(MeetingInterval.from_dict(i) for i in _as_list(data.get("intervals"))),
        )
