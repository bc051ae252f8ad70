"""
Schedule state: the sections the user committed to, the "allow collisions"
toggle and named saved calendars.

The conflict check itself lives in conflicts.py; this module only decides
whether to run it.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from courseplanner.conflicts import has_conflict, intervals_for_section
from courseplanner.model import CourseRecord, ScheduledSelection


DEFAULT_CALENDAR = "default"


class TimeConflictError(ValueError):
    """Raised when a selection overlaps the current schedule."""


def select_section(course: CourseRecord, section_index: str) -> ScheduledSelection:
    """
    Build the schedule entry for one section of a course.
    Raises ValueError if the course has no section with that index.
    """
    section = course.find_section(section_index)
    if section is None:
        raise ValueError(f"Course {course.course_string} has no section with index {section_index!r}")
    return ScheduledSelection(
        course_string=course.course_string,
        title=course.title,
        section_index=section.index,
        section_number=section.number,
        intervals=intervals_for_section(section),
    )


def _check_name(name: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValueError("Calendar name must not be empty")
    return cleaned


@dataclass
class ScheduleState:
    selections: list[ScheduledSelection] = field(default_factory=list)
    allow_collisions: bool = False
    saved_calendars: dict[str, list[ScheduledSelection]] = field(default_factory=dict)
    current_calendar: str = DEFAULT_CALENDAR

    def is_in_schedule(self, course_string: str) -> bool:
        cid = course_string.strip()
        return any(s.course_string == cid for s in self.selections)

    def has_time_conflict(self, selection: ScheduledSelection) -> bool:
        if self.allow_collisions:
            return False
        return has_conflict(selection.intervals, [s.intervals for s in self.selections])

    def add(self, selection: ScheduledSelection) -> bool:
        """
        Add a selection. Returns False if the course is already scheduled.
        Raises TimeConflictError on overlap (unless collisions are allowed).
        """
        if self.is_in_schedule(selection.course_string):
            return False
        if self.has_time_conflict(selection):
            raise TimeConflictError(
                f"{selection.course_string} conflicts with another class in your schedule. "
                "Allow time collisions to add it anyway."
            )
        self.selections.append(selection)
        return True

    def remove(self, course_string: str) -> bool:
        cid = course_string.strip()
        before = len(self.selections)
        self.selections = [s for s in self.selections if s.course_string != cid]
        return len(self.selections) != before

    # -----------------------------------------------------------------------
    # Saved calendars
    # -----------------------------------------------------------------------

    def save_calendar(self, name: str) -> None:
        name = _check_name(name)
        self.saved_calendars[name] = list(self.selections)
        self.current_calendar = name

    def load_calendar(self, name: str) -> None:
        name = _check_name(name)
        if name not in self.saved_calendars:
            raise KeyError(name)
        self.selections = list(self.saved_calendars[name])
        self.current_calendar = name

    def delete_calendar(self, name: str) -> None:
        name = _check_name(name)
        if name not in self.saved_calendars:
            raise KeyError(name)
        del self.saved_calendars[name]

        # Deleting the open calendar resets to an empty default one
        if self.current_calendar == name:
            self.selections = []
            self.current_calendar = DEFAULT_CALENDAR

    def rename_calendar(self, old_name: str, new_name: str) -> None:
        old_name = _check_name(old_name)
        new_name = _check_name(new_name)
        if old_name == new_name:
            return
        if old_name not in self.saved_calendars:
            raise KeyError(old_name)

        self.saved_calendars[new_name] = self.saved_calendars.pop(old_name)
        if self.current_calendar == old_name:
            self.current_calendar = new_name
