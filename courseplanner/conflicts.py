"""
Conflict detection.

Given the weekly meeting intervals of a candidate section and of the sections
already on the schedule, detect overlaps on the same weekday.
Overlap rule (half-open, touching endpoints are fine):
    start < other_end AND end > other_start

Intervals that cannot be placed on the week (async online, no day, any
unparseable time) are dropped before comparing. They never conflict.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional

from courseplanner.model import MeetingInterval, MeetingTime, ScheduledSelection, Section


MINUTES_PER_DAY = 24 * 60

TIME_PATTERN = re.compile(r"([0-9]{1,2}):([0-9]{2})\s*(AM|PM)", re.IGNORECASE)


def parse_time_to_minutes(text: Optional[str]) -> Optional[int]:
    """
    Convert 'H:MM AM|PM' to minutes since midnight.
    Returns None for anything that is not a valid 12-hour time.
    """
    if not text:
        return None
    m = TIME_PATTERN.fullmatch(text.strip())
    if not m:
        return None

    hours = int(m.group(1))
    minutes = int(m.group(2))
    period = m.group(3).upper()
    if not (1 <= hours <= 12 and 0 <= minutes <= 59):
        return None

    if period == "PM" and hours != 12:
        hours += 12
    elif period == "AM" and hours == 12:
        hours = 0
    return hours * 60 + minutes


def make_interval(day: Optional[str], start: Optional[str], end: Optional[str], mode: str = "") -> MeetingInterval:
    return MeetingInterval(
        day=(day or "").strip(),
        start_minutes=parse_time_to_minutes(start),
        end_minutes=parse_time_to_minutes(end),
        mode=mode or "",
    )


def interval_from_meeting(meeting: MeetingTime) -> MeetingInterval:
    return make_interval(meeting.day, meeting.start_time, meeting.end_time, meeting.mode)


def intervals_for_section(section: Section) -> tuple[MeetingInterval, ...]:
    return tuple(interval_from_meeting(m) for m in section.meeting_times)


def is_schedulable(interval: MeetingInterval) -> bool:
    """
    True if the interval has a day and a valid time range on that day.
    A single bad endpoint rules out the whole interval.
    """
    if not isinstance(interval, MeetingInterval) or not interval.day:
        # async online sections (ONLINE_ASYNC_MODE) come without a day
        return False
    start, end = interval.start_minutes, interval.end_minutes
    if start is None or end is None:
        return False
    return 0 <= start < end <= MINUTES_PER_DAY


def overlaps(a: MeetingInterval, b: MeetingInterval) -> bool:
    if a.day != b.day:
        return False
    return a.start_minutes < b.end_minutes and a.end_minutes > b.start_minutes


def has_conflict(candidate: Iterable[MeetingInterval], scheduled: Iterable[Iterable[MeetingInterval]]) -> bool:
    """
    True if any candidate interval overlaps any interval of any scheduled set.
    Stops at the first overlap.
    """
    new = [i for i in candidate or () if is_schedulable(i)]
    if not new:
        return False

    for existing_set in scheduled or ():
        for existing in existing_set or ():
            if not is_schedulable(existing):
                continue
            for interval in new:
                if overlaps(interval, existing):
                    return True
    return False


def find_conflicts(
    selections: list[ScheduledSelection],
) -> list[tuple[ScheduledSelection, ScheduledSelection]]:
    """
    Find conflicting selection pairs (A,B), each pair appears once (i<j).
    Useful once collisions were allowed and the schedule already overlaps.
    """
    conflicts: list[tuple[ScheduledSelection, ScheduledSelection]] = []

    # O(n^2) is fine for a weekly schedule
    for i in range(len(selections)):
        for j in range(i + 1, len(selections)):
            if has_conflict(selections[i].intervals, [selections[j].intervals]):
                conflicts.append((selections[i], selections[j]))

    return conflicts
