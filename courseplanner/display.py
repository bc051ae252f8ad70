"""
Terminal rendering with rich.

Every function takes the Console to print on, so the CLI can use the real
terminal and tests can record output.
"""

from __future__ import annotations

from typing import Iterable, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from courseplanner.conflicts import is_schedulable
from courseplanner.model import CourseRecord, MeetingInterval, MeetingTime, ScheduledSelection
from courseplanner.schedule import ScheduleState


WEEK_DAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]


def format_minutes(minutes: Optional[int]) -> str:
    """
    Inverse of conflicts.parse_time_to_minutes (540 -> "9:00 AM").
    """
    if minutes is None:
        return "N/A"
    hours, mins = divmod(minutes, 60)
    period = "PM" if 12 <= hours < 24 else "AM"
    display_hours = hours % 12 or 12
    return f"{display_hours}:{mins:02d} {period}"


def interval_label(interval: MeetingInterval) -> str:
    if not is_schedulable(interval):
        return interval.mode or "Online / TBA"
    return f"{format_minutes(interval.start_minutes)}-{format_minutes(interval.end_minutes)}"


def meeting_label(meeting: MeetingTime) -> str:
    if not meeting.day:
        return meeting.mode or "TBA"

    bits = [meeting.day, f"{meeting.start_time}-{meeting.end_time}"]
    where = " ".join(x for x in [meeting.building, meeting.room] if x)
    if where:
        bits.append(where)
    if meeting.campus:
        bits.append(f"({meeting.campus})")
    return " ".join(bits)


def course_label(course: CourseRecord) -> str:
    title = course.title.strip() or "(no title)"
    bits = [course.course_string, title]
    if course.credits:
        bits.append(f"{course.credits} cr")
    bits.append(f"{len(course.sections)} sections")
    return " | ".join(bits)


def render_search_results(console: Console, courses: list[CourseRecord], limit: int = 20) -> None:
    shown = courses[:limit]
    table = Table(title=f"Search results (max {limit})", box=box.SIMPLE)
    table.add_column("#", justify="right")
    table.add_column("Course", style="bold cyan")
    table.add_column("Title")
    table.add_column("Subject")
    table.add_column("Sections", justify="right")

    for i, c in enumerate(shown, start=1):
        table.add_row(
            str(i),
            escape(c.course_string),
            escape(c.title.strip() or "(no title)"),
            escape(c.subject_description or c.subject),
            str(len(c.sections)),
        )
    console.print(table)

    if len(courses) > limit:
        console.print(f"... and {len(courses) - limit} more results")


def render_sections(console: Console, course: CourseRecord) -> None:
    table = Table(title=escape(course_label(course)), box=box.SIMPLE)
    table.add_column("Index", style="bold cyan")
    table.add_column("Sec")
    table.add_column("Status")
    table.add_column("Instructors", style="magenta")
    table.add_column("Meetings")

    for s in course.sections:
        meetings = "\n".join(meeting_label(m) for m in s.meeting_times) or "TBA"
        table.add_row(
            escape(s.index),
            escape(s.number),
            escape(s.status),
            escape("; ".join(s.instructors)),
            escape(meetings),
        )
    console.print(table)


def render_schedule(console: Console, state: ScheduleState) -> None:
    collisions = "allowed" if state.allow_collisions else "blocked"
    console.print(
        f"Calendar: [bold]{escape(state.current_calendar)}[/] | "
        f"Scheduled: {len(state.selections)} | Collisions: {collisions}"
    )
    if not state.selections:
        console.print("No courses scheduled.")
        return

    table = Table(title="Scheduled courses", box=box.SIMPLE)
    table.add_column("Course", style="bold cyan")
    table.add_column("Title")
    table.add_column("Index")
    table.add_column("Meetings")
    for s in state.selections:
        meetings = "\n".join(
            f"{i.day} {interval_label(i)}" if i.day else interval_label(i) for i in s.intervals
        )
        table.add_row(escape(s.course_string), escape(s.title), escape(s.section_index), escape(meetings or "TBA"))
    console.print(table)


def _week_buckets(selections: Iterable[ScheduledSelection]) -> dict[str, list[tuple[MeetingInterval, str]]]:
    buckets: dict[str, list[tuple[MeetingInterval, str]]] = {day: [] for day in WEEK_DAYS}
    for sel in selections:
        for interval in sel.intervals:
            if is_schedulable(interval) and interval.day in buckets:
                buckets[interval.day].append((interval, f"{interval_label(interval)} {sel.course_string}"))
    for day in buckets:
        buckets[day].sort(key=lambda item: item[0].start_minutes)
    return buckets


def render_week(console: Console, selections: list[ScheduledSelection]) -> None:
    buckets = _week_buckets(selections)
    table = Table(title="Week", box=box.SIMPLE)
    for day in WEEK_DAYS:
        table.add_column(day[:3])

    max_len = max(len(v) for v in buckets.values())
    for r in range(max_len):
        row = []
        for day in WEEK_DAYS:
            row.append(escape(buckets[day][r][1]) if r < len(buckets[day]) else "")
        table.add_row(*row)
    console.print(table)
