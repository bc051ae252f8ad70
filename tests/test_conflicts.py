"""
Unit tests for conflict detection.

Definition used here:
- A conflict exists if two meeting intervals overlap on the same weekday.
- Touching endpoints (end == start) is NOT a conflict.
- Async online meetings and meetings with unparseable times never conflict.
"""

import unittest

from courseplanner.conflicts import (
    find_conflicts,
    has_conflict,
    interval_from_meeting,
    is_schedulable,
    make_interval,
    parse_time_to_minutes,
)
from courseplanner.model import MeetingInterval, MeetingTime, ScheduledSelection
from courseplanner.tables import ONLINE_ASYNC_MODE


class TestParseTime(unittest.TestCase):
    def test_valid_times(self) -> None:
        self.assertEqual(parse_time_to_minutes("10:00 AM"), 600)
        self.assertEqual(parse_time_to_minutes("1:40 PM"), 13 * 60 + 40)
        self.assertEqual(parse_time_to_minutes("12:00 PM"), 720)
        self.assertEqual(parse_time_to_minutes("12:15 AM"), 15)
        self.assertEqual(parse_time_to_minutes(" 9:05pm "), 21 * 60 + 5)

    def test_invalid_times_return_none(self) -> None:
        for text in ["", None, "N/A", "10:00", "13:00 PM", "0:30 AM", "10:75 AM", "ten AM", "10:00 AM extra"]:
            self.assertIsNone(parse_time_to_minutes(text), text)


class TestHasConflict(unittest.TestCase):
    def test_overlap_same_day(self) -> None:
        candidate = [make_interval("Monday", "10:00 AM", "11:20 AM")]
        scheduled = [[make_interval("Monday", "11:00 AM", "12:00 PM")]]
        self.assertTrue(has_conflict(candidate, scheduled))

    def test_containment_is_overlap(self) -> None:
        candidate = [make_interval("Monday", "9:00 AM", "1:00 PM")]
        scheduled = [[make_interval("Monday", "10:00 AM", "11:00 AM")]]
        self.assertTrue(has_conflict(candidate, scheduled))

    def test_no_overlap_touching_end(self) -> None:
        candidate = [make_interval("Monday", "10:00 AM", "11:00 AM")]
        scheduled = [[make_interval("Monday", "11:00 AM", "12:00 PM")]]
        self.assertFalse(has_conflict(candidate, scheduled))

    def test_different_day_no_conflict(self) -> None:
        candidate = [make_interval("Tuesday", "10:00 AM", "11:20 AM")]
        scheduled = [[make_interval("Wednesday", "10:00 AM", "11:20 AM")]]
        self.assertFalse(has_conflict(candidate, scheduled))

    def test_checks_every_scheduled_set(self) -> None:
        candidate = [
            make_interval("Monday", "8:00 AM", "9:00 AM"),
            make_interval("Thursday", "2:00 PM", "3:20 PM"),
        ]
        scheduled = [
            [make_interval("Monday", "10:00 AM", "11:00 AM")],
            [make_interval("Tuesday", "2:00 PM", "3:20 PM"), make_interval("Thursday", "3:00 PM", "4:00 PM")],
        ]
        self.assertTrue(has_conflict(candidate, scheduled))

    def test_async_online_never_conflicts(self) -> None:
        online = MeetingInterval(day="", start_minutes=0, end_minutes=1440, mode=ONLINE_ASYNC_MODE)
        busy = [[make_interval(d, "8:00 AM", "10:00 PM") for d in ["Monday", "Tuesday", "Wednesday"]]]
        self.assertFalse(has_conflict([online], busy))
        self.assertFalse(has_conflict(busy[0], [[online]]))

    def test_unparseable_interval_is_excluded(self) -> None:
        # one bad endpoint excludes the whole interval
        half_bad = make_interval("Monday", "12:00 AM", "N/A")
        self.assertIsNone(half_bad.end_minutes)
        scheduled = [[make_interval("Monday", "12:00 AM", "1:00 AM")]]
        self.assertFalse(has_conflict([half_bad], scheduled))
        self.assertFalse(has_conflict(scheduled[0], [[half_bad]]))

    def test_missing_inputs_never_raise(self) -> None:
        monday = make_interval("Monday", "10:00 AM", "11:00 AM")
        self.assertFalse(has_conflict(None, [[monday]]))
        self.assertFalse(has_conflict([monday], None))
        self.assertFalse(has_conflict([monday], [None, [None]]))
        self.assertTrue(has_conflict([None, monday], [None, [monday]]))

    def test_empty_inputs(self) -> None:
        self.assertFalse(has_conflict([], [[make_interval("Monday", "10:00 AM", "11:00 AM")]]))
        self.assertFalse(has_conflict([make_interval("Monday", "10:00 AM", "11:00 AM")], []))


class TestSchedulable(unittest.TestCase):
    def test_rules(self) -> None:
        self.assertTrue(is_schedulable(make_interval("Friday", "10:00 AM", "11:00 AM")))
        self.assertFalse(is_schedulable(make_interval("", "10:00 AM", "11:00 AM")))
        self.assertFalse(is_schedulable(make_interval("Friday", "11:00 AM", "10:00 AM")))
        self.assertFalse(is_schedulable(MeetingInterval(day="Friday", start_minutes=-5, end_minutes=30)))
        self.assertFalse(is_schedulable(MeetingInterval(day="Friday", start_minutes=60, end_minutes=1500)))

    def test_interval_from_meeting(self) -> None:
        meeting = MeetingTime(day="Wednesday", start_time="3:50 PM", end_time="5:10 PM", mode="LEC")
        interval = interval_from_meeting(meeting)
        self.assertEqual(interval, MeetingInterval(day="Wednesday", start_minutes=950, end_minutes=1030, mode="LEC"))


class TestFindConflicts(unittest.TestCase):
    def test_pairs_reported_once(self) -> None:
        a = ScheduledSelection("A", "A", "1", intervals=(make_interval("Monday", "10:00 AM", "11:00 AM"),))
        b = ScheduledSelection("B", "B", "2", intervals=(make_interval("Monday", "10:30 AM", "12:00 PM"),))
        c = ScheduledSelection("C", "C", "3", intervals=(make_interval("Monday", "12:00 PM", "1:00 PM"),))
        confs = find_conflicts([a, b, c])
        self.assertEqual(confs, [(a, b)])


if __name__ == "__main__":
    unittest.main()
