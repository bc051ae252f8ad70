"""
CLI (Command Line Interface).

This module provides terminal commands for building a schedule, e.g.:

    courseplanner search <text>
    courseplanner sections <course>
    courseplanner add <course> <section index>
    courseplanner remove <course>
    courseplanner show
    courseplanner conflicts
    courseplanner collisions on|off
    courseplanner calendar list|save|load|delete|rename
    courseplanner update --year 2026 --term 9

All data lives below --data-dir (default: the package's data/ folder):
raw/ holds catalog downloads, processed/ holds courses.json and schedule.json.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional

import requests
from rich.console import Console

from courseplanner.conflicts import find_conflicts
from courseplanner.display import render_schedule, render_search_results, render_sections, render_week
from courseplanner.fetch import fetch_courses, raw_file_path
from courseplanner.model import CourseRecord
from courseplanner.parse import load_courses, parse_all
from courseplanner.schedule import ScheduleState, TimeConflictError, select_section
from courseplanner.search import match
from courseplanner.storage import load_schedule_state, save_schedule_state


def _default_data_dir() -> Path:
    return Path(__file__).resolve().parent / "data"


class Paths:
    def __init__(self, data_dir: Path) -> None:
        self.raw = data_dir / "raw"
        self.processed = data_dir / "processed"
        self.courses = self.processed / "courses.json"
        self.schedule = self.processed / "schedule.json"


def _find_course(courses: list[CourseRecord], course_string: str) -> Optional[CourseRecord]:
    wanted = course_string.strip().upper()
    for c in courses:
        if c.course_string.upper() == wanted:
            return c
    return None


def _cmd_search(args: argparse.Namespace, paths: Paths, console: Console) -> int:
    """
    Search the catalog with tiered matching (code, subject+number, number, text).
    """
    query = (args.text or "").strip()
    if not query:
        print("Please provide a search text.")
        return 1

    results = match(load_courses(paths.courses), query)
    if not results:
        print("No results.")
        return 0

    render_search_results(console, results, limit=args.limit)
    return 0


def _cmd_sections(args: argparse.Namespace, paths: Paths, console: Console) -> int:
    course = _find_course(load_courses(paths.courses), args.course)
    if course is None:
        print(f"Unknown course: {args.course}")
        return 1
    render_sections(console, course)
    return 0


def _cmd_add(args: argparse.Namespace, paths: Paths) -> int:
    """
    Commit to one section of a course (checked for time conflicts).
    """
    course = _find_course(load_courses(paths.courses), args.course)
    if course is None:
        print(f"Unknown course: {args.course}")
        return 1

    try:
        selection = select_section(course, args.index)
    except ValueError as e:
        print(str(e))
        return 1

    state = load_schedule_state(paths.schedule)
    try:
        added = state.add(selection)
    except TimeConflictError as e:
        print(str(e))
        return 1

    if not added:
        print(f"Already scheduled: {course.course_string} (remove it first to switch sections)")
        return 0

    save_schedule_state(state, paths.schedule)
    print(f"Added: {course.course_string} section {selection.section_index} (scheduled: {len(state.selections)})")
    return 0


def _cmd_remove(args: argparse.Namespace, paths: Paths) -> int:
    state = load_schedule_state(paths.schedule)
    cid = args.course.strip()
    if not state.remove(cid):
        print(f"Not scheduled: {cid}")
        return 0

    save_schedule_state(state, paths.schedule)
    print(f"Removed: {cid} (scheduled: {len(state.selections)})")
    return 0


def _cmd_show(args: argparse.Namespace, paths: Paths, console: Console) -> int:
    state = load_schedule_state(paths.schedule)
    render_schedule(console, state)
    if state.selections:
        render_week(console, state.selections)
    return 0


def _cmd_conflicts(args: argparse.Namespace, paths: Paths) -> int:
    """
    Print all conflicting pairs among the scheduled sections.
    """
    state = load_schedule_state(paths.schedule)
    confs = find_conflicts(state.selections)
    if not confs:
        print("No conflicts found.")
        return 0

    print(f"Conflicts found: {len(confs)}")
    for a, b in confs:
        print(f"- {a.course_string} {a.title} [{a.section_index}]  <->  {b.course_string} {b.title} [{b.section_index}]")
    return 0


def _cmd_collisions(args: argparse.Namespace, paths: Paths) -> int:
    state = load_schedule_state(paths.schedule)
    state.allow_collisions = args.mode == "on"
    save_schedule_state(state, paths.schedule)
    print(f"Time collisions {'allowed' if state.allow_collisions else 'blocked'}.")
    return 0


def _cmd_calendar(args: argparse.Namespace, paths: Paths) -> int:
    state = load_schedule_state(paths.schedule)

    if args.action == "list":
        if not state.saved_calendars:
            print("No saved calendars.")
            return 0
        for name in sorted(state.saved_calendars):
            marker = "*" if name == state.current_calendar else " "
            print(f"{marker} {name} ({len(state.saved_calendars[name])} courses)")
        return 0

    try:
        if args.action == "save":
            state.save_calendar(args.name)
            msg = f"Saved calendar: {args.name}"
        elif args.action == "load":
            state.load_calendar(args.name)
            msg = f"Loaded calendar: {args.name}"
        elif args.action == "delete":
            state.delete_calendar(args.name)
            msg = f"Deleted calendar: {args.name}"
        else:
            if not args.new_name:
                print("Please provide the new calendar name.")
                return 1
            state.rename_calendar(args.name, args.new_name)
            msg = f"Renamed calendar: {args.name} -> {args.new_name}"
    except KeyError:
        print(f"Unknown calendar: {args.name}")
        return 1
    except ValueError as e:
        print(str(e))
        return 1

    save_schedule_state(state, paths.schedule)
    print(msg)
    return 0


def _cmd_update(args: argparse.Namespace, paths: Paths) -> int:
    """
    Fetch the catalog for one term and rebuild courses.json.
    If the download fails, the last cached download of that term is used.
    """
    try:
        raw_file = fetch_courses(args.year, args.term, campus=args.campus, refresh=args.refresh, raw_dir=paths.raw)
    except ValueError as e:
        print(str(e))
        return 1
    except requests.RequestException as e:
        raw_file = raw_file_path(args.year, args.term.strip(), args.campus, paths.raw)
        if not raw_file.exists():
            print(f"Fetch failed: {e}")
            return 1
        print(f"Fetch failed: {e}. Using cached {raw_file.name}")

    try:
        n = parse_all(raw_file, paths.processed)
    except ValueError as e:
        # also covers json.JSONDecodeError
        print(f"Could not read catalog: {e}")
        return 1

    print(f"Update done. courses={n}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="courseplanner", description="Course search + weekly schedule planner")
    parser.add_argument("--data-dir", type=Path, default=None, help="Data folder (default: package data/)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_search = sub.add_parser("search", help="Search for courses")
    p_search.add_argument("text", type=str, help="Code (01:198:111), subject+number (CS 111), number or text")
    p_search.add_argument("--limit", type=int, default=20, help="Max results to show")

    p_sections = sub.add_parser("sections", help="List sections and meeting times of a course")
    p_sections.add_argument("course", type=str, help="Course string (e.g. 01:198:111)")

    p_add = sub.add_parser("add", help="Add one section of a course to the schedule")
    p_add.add_argument("course", type=str, help="Course string (e.g. 01:198:111)")
    p_add.add_argument("index", type=str, help="Section index (e.g. 09214)")

    p_remove = sub.add_parser("remove", help="Remove a course from the schedule")
    p_remove.add_argument("course", type=str, help="Course string (e.g. 01:198:111)")

    sub.add_parser("show", help="Show the schedule and week grid")
    sub.add_parser("conflicts", help="Show time conflicts among scheduled courses")

    p_coll = sub.add_parser("collisions", help="Allow or block time collisions")
    p_coll.add_argument("mode", choices=["on", "off"])

    p_cal = sub.add_parser("calendar", help="Manage saved calendars")
    p_cal.add_argument("action", choices=["list", "save", "load", "delete", "rename"])
    p_cal.add_argument("name", nargs="?", default="", help="Calendar name")
    p_cal.add_argument("new_name", nargs="?", default="", help="New name (rename only)")

    p_update = sub.add_parser("update", help="Fetch the catalog and rebuild courses.json")
    p_update.add_argument("--year", type=str, required=True, help="Catalog year (e.g. 2026)")
    p_update.add_argument("--term", type=str, default="9", help="0=Winter, 1=Spring, 7=Summer, 9=Fall")
    p_update.add_argument("--campus", type=str, default="NB", help="Campus code (NB, NK, CM)")
    p_update.add_argument("--refresh", action="store_true", help="Re-fetch even if cached")

    return parser


def main(argv: list[str] | None = None, console: Console | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    paths = Paths(args.data_dir if args.data_dir is not None else _default_data_dir())
    console = console or Console()

    if args.command == "search":
        raise SystemExit(_cmd_search(args, paths, console))
    if args.command == "sections":
        raise SystemExit(_cmd_sections(args, paths, console))
    if args.command == "add":
        raise SystemExit(_cmd_add(args, paths))
    if args.command == "remove":
        raise SystemExit(_cmd_remove(args, paths))
    if args.command == "show":
        raise SystemExit(_cmd_show(args, paths, console))
    if args.command == "conflicts":
        raise SystemExit(_cmd_conflicts(args, paths))
    if args.command == "collisions":
        raise SystemExit(_cmd_collisions(args, paths))
    if args.command == "calendar":
        if args.action != "list" and not args.name.strip():
            print("Please provide a calendar name.")
            raise SystemExit(1)
        raise SystemExit(_cmd_calendar(args, paths))
    if args.command == "update":
        raise SystemExit(_cmd_update(args, paths))

    raise SystemExit(2)
