"""
Persistent storage for the user's schedule.

This module manages the file:

    data/processed/schedule.json

Design rationale:
- courses.json contains the complete normalized catalog
- schedule.json stores only the user's personal choices (scheduled sections,
  the collision toggle and saved calendars)

This separation ensures that user state is preserved independently
from repeated fetching and parsing operations.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from courseplanner.model import ScheduledSelection
from courseplanner.schedule import DEFAULT_CALENDAR, ScheduleState


def _default_schedule_path() -> Path:
    """
    Return the default path of schedule.json inside the package.

    Using a function instead of a constant makes testing easier,
    because tests can override the path.
    """
    base_dir = Path(__file__).resolve().parent
    return base_dir / "data" / "processed" / "schedule.json"


def _load_selections(items: Any) -> list[ScheduledSelection]:
    if not isinstance(items, list):
        return []
    out: list[ScheduledSelection] = []
    seen: set[str] = set()
    for item in items:
        if not isinstance(item, dict):
            continue
        sel = ScheduledSelection.from_dict(item)
        # skip nameless and duplicate entries
        if not sel.course_string or sel.course_string in seen:
            continue
        seen.add(sel.course_string)
        out.append(sel)
    return out


def load_schedule_state(path: str | Path | None = None) -> ScheduleState:
    """
    Load the schedule state from schedule.json.

    Returns an empty state if the file does not exist or is invalid.
    It never crashes the application if the file is missing or corrupted.
    """
    schedule_path = Path(path) if path is not None else _default_schedule_path()

    # First run: nothing scheduled yet
    if not schedule_path.exists():
        return ScheduleState()

    try:
        data = json.loads(schedule_path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            return ScheduleState()

        calendars_raw = data.get("saved_calendars", {})
        calendars: dict[str, list[ScheduledSelection]] = {}
        if isinstance(calendars_raw, dict):
            for name, items in calendars_raw.items():
                if isinstance(name, str) and name.strip():
                    calendars[name.strip()] = _load_selections(items)

        current = data.get("current_calendar")
        return ScheduleState(
            selections=_load_selections(data.get("scheduled", [])),
            allow_collisions=data.get("allow_time_collisions") is True,
            saved_calendars=calendars,
            current_calendar=current.strip() if isinstance(current, str) and current.strip() else DEFAULT_CALENDAR,
        )
    except (OSError, json.JSONDecodeError, UnicodeDecodeError, AttributeError):
        return ScheduleState()


def save_schedule_state(state: ScheduleState, path: str | Path | None = None) -> None:
    """
    Save the schedule state to schedule.json.

    Creates parent directories if needed.
    """
    schedule_path = Path(path) if path is not None else _default_schedule_path()
    schedule_path.parent.mkdir(parents=True, exist_ok=True)

    payload = {
        "scheduled": [s.to_dict() for s in state.selections],
        "allow_time_collisions": bool(state.allow_collisions),
        "saved_calendars": {
            name: [s.to_dict() for s in sels] for name, sels in sorted(state.saved_calendars.items())
        },
        "current_calendar": state.current_calendar,
    }

    schedule_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
