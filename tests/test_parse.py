"""
Unit tests for catalog normalization (raw catalog JSON -> CourseRecord).
"""

import json
import tempfile
import unittest
from pathlib import Path

from courseplanner.parse import convert_to_am_pm, format_meeting_time, load_courses, parse_all, process_course_data
from courseplanner.tables import ONLINE_ASYNC_MODE


RAW_COURSE = {
    "courseString": "01:198:111",
    "title": "INTRO COMPUTER SCI",
    "subject": "198",
    "subjectDescription": "Computer Science",
    "courseNumber": "111",
    "courseDescription": "Intro to programming",
    "credits": 4,
    "school": {"code": "01", "description": "School of Arts and Sciences"},
    "campusLocations": [{"code": "2", "description": "Busch"}],
    "preReqNotes": "(01:640:111 )",
    "coreCodes": [{"coreCode": "QQ", "coreCodeDescription": "Quantitative"}],
    "sections": [
        {
            "number": "01",
            "index": "09214",
            "instructors": [{"name": "SMITH, JOHN"}, {"name": ""}],
            "openStatusText": "OPEN",
            "commentsText": "",
            "meetingTimes": [
                {
                    "meetingDay": "M",
                    "startTimeMilitary": "1020",
                    "endTimeMilitary": "1140",
                    "buildingCode": "HLL",
                    "roomNumber": "114",
                    "meetingModeDesc": "LEC",
                    "campusLocation": "BUS",
                },
                {
                    "meetingDay": "",
                    "startTimeMilitary": "",
                    "endTimeMilitary": "",
                    "meetingModeDesc": ONLINE_ASYNC_MODE,
                    "campusLocation": "ONL",
                },
            ],
        }
    ],
}


class TestConvertToAmPm(unittest.TestCase):
    def test_values(self) -> None:
        self.assertEqual(convert_to_am_pm("1020"), "10:20 AM")
        self.assertEqual(convert_to_am_pm("1340"), "1:40 PM")
        self.assertEqual(convert_to_am_pm("1200"), "12:00 PM")
        self.assertEqual(convert_to_am_pm("0005"), "12:05 AM")

    def test_invalid(self) -> None:
        for raw in [None, "", "N/A", "12", "ab00", "2500", "1290"]:
            self.assertEqual(convert_to_am_pm(raw), "N/A", raw)


class TestProcessCourse(unittest.TestCase):
    def test_full_course(self) -> None:
        c = process_course_data(RAW_COURSE)
        self.assertEqual(c.course_string, "01:198:111")
        self.assertEqual(c.description, "Intro to programming")
        self.assertEqual(c.credits, "4")
        self.assertEqual(c.school, "School of Arts and Sciences")
        self.assertEqual(c.campus_locations, ["Busch"])
        self.assertEqual(c.core_codes, [{"code": "QQ", "description": "Quantitative"}])

        section = c.sections[0]
        self.assertEqual(section.instructors, ["SMITH, JOHN"])
        self.assertEqual(section.status, "OPEN")

        lec, online = section.meeting_times
        self.assertEqual(lec.day, "Monday")
        self.assertEqual((lec.start_time, lec.end_time), ("10:20 AM", "11:40 AM"))
        self.assertEqual(lec.campus, "Busch")
        self.assertEqual(online.day, "")
        self.assertEqual(online.start_time, "N/A")
        self.assertEqual(online.campus, "Online")

    def test_missing_fields(self) -> None:
        c = process_course_data({})
        self.assertEqual(c.course_string, "")
        self.assertEqual(c.sections, [])

    def test_unknown_codes_pass_through(self) -> None:
        m = format_meeting_time({"meetingDay": "X", "campusLocation": "ZZZ"})
        self.assertEqual(m.day, "X")
        self.assertEqual(m.campus, "ZZZ")
        self.assertEqual(m.mode, "N/A")


class TestParseAll(unittest.TestCase):
    def test_parse_all_writes_courses_json(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            raw = Path(d) / "raw.json"
            raw.write_text(json.dumps([RAW_COURSE, "junk"]), encoding="utf-8")
            out = Path(d) / "processed"

            n = parse_all(raw, out)
            self.assertEqual(n, 1)

            courses = load_courses(out / "courses.json")
            self.assertEqual(len(courses), 1)
            self.assertEqual(courses[0], process_course_data(RAW_COURSE))

    def test_parse_all_rejects_non_list(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            raw = Path(d) / "raw.json"
            raw.write_text("{}", encoding="utf-8")
            with self.assertRaises(ValueError):
                parse_all(raw, Path(d))

    def test_load_courses_missing_file(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            self.assertEqual(load_courses(Path(d) / "nope.json"), [])


if __name__ == "__main__":
    unittest.main()
