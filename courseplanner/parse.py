"""
Parsing (raw catalog JSON -> normalized JSON).

- Reads a cached Schedule of Classes download from data/raw/
- Normalizes every course, section and meeting time
  (military time -> "H:MM AM/PM", weekday codes -> names, campus codes -> names)
- Writes:
  - data/processed/courses.json
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from courseplanner.model import CourseRecord, MeetingTime, Section
from courseplanner.tables import ONLINE_ASYNC_MODE, campus_name, weekday_name


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

# PACKAGE_DIR always points to the folder where this file is located
PACKAGE_DIR = Path(__file__).resolve().parent


def _safe_str(x: Any) -> str:
    return "" if x is None else str(x)


def _items(x: Any) -> List[Any]:
    return list(x) if isinstance(x, list) else []


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------


def convert_to_am_pm(military_time: Optional[str]) -> str:
    """
    Convert catalog military time ("1340") to display form ("1:40 PM").
    Anything unusable becomes "N/A".
    """
    raw = _safe_str(military_time).strip()
    if not raw or raw == "N/A":
        return "N/A"
    if len(raw) != 4 or not raw.isdigit():
        return "N/A"

    hours = int(raw[:2])
    minutes = raw[2:]
    if hours > 23 or int(minutes) > 59:
        return "N/A"

    period = "PM" if hours >= 12 else "AM"
    display_hours = hours % 12 or 12
    return f"{display_hours}:{minutes} {period}"


def format_meeting_time(meeting: Dict) -> MeetingTime:
    """
    Normalize one raw meeting time entry.
    """
    day_code = _safe_str(meeting.get("meetingDay")).strip()
    start = _safe_str(meeting.get("startTimeMilitary")).strip()
    end = _safe_str(meeting.get("endTimeMilitary")).strip()
    mode = _safe_str(meeting.get("meetingModeDesc")).strip() or "N/A"
    campus = campus_name(_safe_str(meeting.get("campusLocation")).strip())

    # Asynchronous online sections have no day and no times
    if mode == ONLINE_ASYNC_MODE and not day_code:
        return MeetingTime(day="", start_time="N/A", end_time="N/A", mode=mode, campus=campus)

    return MeetingTime(
        day=weekday_name(day_code),
        start_time=convert_to_am_pm(start),
        end_time=convert_to_am_pm(end),
        mode=mode,
        building=_safe_str(meeting.get("buildingCode")),
        room=_safe_str(meeting.get("roomNumber")),
        campus=campus,
    )


def format_section(section: Dict) -> Section:
    instructors: List[str] = []
    for instr in _items(section.get("instructors")):
        name = _safe_str(instr.get("name") if isinstance(instr, dict) else instr).strip()
        if name:
            instructors.append(name)

    return Section(
        number=_safe_str(section.get("number")),
        index=_safe_str(section.get("index")),
        instructors=instructors,
        status=_safe_str(section.get("openStatusText")),
        comments=_safe_str(section.get("commentsText")),
        meeting_times=[format_meeting_time(m) for m in _items(section.get("meetingTimes")) if isinstance(m, dict)],
    )


def _description(x: Any) -> str:
    return _safe_str(x.get("description")) if isinstance(x, dict) else ""


# ---------------------------------------------------------------------------
# Course parsing (CORE LOGIC)
# ---------------------------------------------------------------------------


def process_course_data(course: Dict) -> CourseRecord:
    """
    Normalize one raw catalog course into a CourseRecord.
    """
    core_codes = [
        {
            "code": _safe_str(core.get("coreCode")),
            "description": _safe_str(core.get("coreCodeDescription")),
        }
        for core in _items(course.get("coreCodes"))
        if isinstance(core, dict)
    ]

    return CourseRecord(
        course_string=_safe_str(course.get("courseString")),
        title=_safe_str(course.get("title")),
        subject=_safe_str(course.get("subject")),
        course_number=_safe_str(course.get("courseNumber")),
        description=_safe_str(course.get("courseDescription")),
        subject_description=_safe_str(course.get("subjectDescription")),
        credits=_safe_str(course.get("credits")),
        school=_description(course.get("school")),
        campus_locations=[_description(loc) for loc in _items(course.get("campusLocations"))],
        prerequisites=_safe_str(course.get("preReqNotes")),
        core_codes=core_codes,
        sections=[format_section(s) for s in _items(course.get("sections")) if isinstance(s, dict)],
    )


def load_courses(path: Path) -> List[CourseRecord]:
    """
    Load normalized courses from courses.json.

    Never crashes if data is missing or broken; returns [] instead.
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError):
        return []
    if not isinstance(data, list):
        return []
    return [CourseRecord.from_dict(c) for c in data if isinstance(c, dict)]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_all(
    raw_file: Path,
    out_dir: Path = PACKAGE_DIR / "data" / "processed",
) -> int:
    """
    Parse one cached catalog download and write courses.json.
    Returns the number of courses written.
    """
    raw_path = Path(raw_file).resolve()
    out_path = Path(out_dir).resolve()

    # Make sure output directory exists
    out_path.mkdir(parents=True, exist_ok=True)

    print("RAW_FILE:", raw_path)

    data = json.loads(raw_path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON list of courses in {raw_path}")

    courses = [process_course_data(c) for c in data if isinstance(c, dict)]

    (out_path / "courses.json").write_text(
        json.dumps([c.to_dict() for c in courses], ensure_ascii=False, indent=2),
        encoding="utf-8",
    )
    return len(courses)


# ---------------------------------------------------------------------------
# CLI connection
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="courseplanner.parse",
        description="Normalize a cached catalog download into courses.json",
    )
    p.add_argument("raw_file", type=Path, help="Raw catalog JSON (from courseplanner.fetch)")
    p.add_argument(
        "--out-dir",
        type=Path,
        default=PACKAGE_DIR / "data" / "processed",
    )
    return p


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    n = parse_all(raw_file=args.raw_file, out_dir=args.out_dir)

    print(f"Parsing finished. {n} courses written to {args.out_dir.resolve()}")


if __name__ == "__main__":
    main()
