"""
Unit tests for local storage of the schedule state.

Storage contract:
- Missing/invalid file -> empty state
- JSON schema: {"scheduled": [...], "allow_time_collisions": bool,
                "saved_calendars": {...}, "current_calendar": str}
"""

import json
import tempfile
import unittest
from pathlib import Path

from courseplanner.conflicts import make_interval
from courseplanner.model import ScheduledSelection
from courseplanner.schedule import ScheduleState
from courseplanner.storage import load_schedule_state, save_schedule_state


class TestStorage(unittest.TestCase):
    def test_load_missing_file_returns_empty(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "missing.json"
            state = load_schedule_state(p)
            self.assertEqual(state.selections, [])
            self.assertFalse(state.allow_collisions)
            self.assertEqual(state.current_calendar, "default")

    def test_load_corrupt_file_returns_empty(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "schedule.json"
            p.write_text("{not json", encoding="utf-8")
            self.assertEqual(load_schedule_state(p).selections, [])
            p.write_text("[1, 2, 3]", encoding="utf-8")
            self.assertEqual(load_schedule_state(p).selections, [])

    def test_save_and_load_roundtrip(self) -> None:
        sel = ScheduledSelection(
            course_string="01:198:111",
            title="INTRO COMPUTER SCI",
            section_index="09214",
            section_number="01",
            intervals=(make_interval("Monday", "10:20 AM", "11:40 AM", "LEC"), make_interval("", "N/A", "N/A")),
        )
        state = ScheduleState(selections=[sel], allow_collisions=True)
        state.save_calendar("fall")

        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "nested" / "schedule.json"
            save_schedule_state(state, p)
            loaded = load_schedule_state(p)

            self.assertEqual(loaded.selections, [sel])
            self.assertTrue(loaded.allow_collisions)
            self.assertEqual(loaded.current_calendar, "fall")
            self.assertEqual(loaded.saved_calendars, {"fall": [sel]})

            data = json.loads(p.read_text(encoding="utf-8"))
            self.assertEqual(
                sorted(data), ["allow_time_collisions", "current_calendar", "saved_calendars", "scheduled"]
            )
            self.assertIsNone(data["scheduled"][0]["intervals"][1]["start_minutes"])

    def test_skips_bad_entries(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "schedule.json"
            payload = {
                "scheduled": [
                    {"course_string": "A", "section_index": "1"},
                    {"course_string": "A", "section_index": "2"},
                    {"course_string": ""},
                    "junk",
                ],
                "allow_time_collisions": "yes",
            }
            p.write_text(json.dumps(payload), encoding="utf-8")
            state = load_schedule_state(p)
            self.assertEqual([s.section_index for s in state.selections], ["1"])
            self.assertFalse(state.allow_collisions)


if __name__ == "__main__":
    unittest.main()
