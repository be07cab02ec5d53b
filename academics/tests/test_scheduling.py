from django.test import SimpleTestCase

from academics.scheduling import (
    Meeting,
    build_weekly_schedule,
    detect_conflicts,
    detect_schedule_conflicts,
    format_minute,
    merge_consecutive,
    overlaps,
    parse_hhmm,
)


def meeting(day, start, end, group_id=None, label=""):
    return Meeting(day, parse_hhmm(start), parse_hhmm(end), group_id=group_id, label=label)


class ParseTimeTests(SimpleTestCase):
    def test_parse_and_format(self):
        self.assertEqual(parse_hhmm("08:30"), 510)
        self.assertEqual(parse_hhmm("24:00"), 1440)
        self.assertEqual(format_minute(510), "08:30")

    def test_parse_rejects_garbage(self):
        for value in ("8h30", "25:00", "10:60", "", None):
            with self.assertRaises(ValueError):
                parse_hhmm(value)

    def test_meeting_rejects_empty_interval(self):
        with self.assertRaises(ValueError):
            Meeting(1, 600, 600)
        with self.assertRaises(ValueError):
            Meeting(8, 480, 600)


class OverlapTests(SimpleTestCase):
    def test_partial_overlap_conflicts(self):
        self.assertTrue(overlaps(meeting(1, "08:00", "10:00"), meeting(1, "09:00", "11:00")))

    def test_back_to_back_does_not_conflict(self):
        self.assertFalse(overlaps(meeting(1, "08:00", "10:00"), meeting(1, "10:00", "12:00")))

    def test_other_day_never_conflicts(self):
        self.assertFalse(overlaps(meeting(1, "08:00", "10:00"), meeting(2, "08:00", "10:00")))

    def test_overlap_is_symmetric(self):
        a, b = meeting(3, "07:00", "12:00"), meeting(3, "09:00", "10:00")
        self.assertTrue(overlaps(a, b))
        self.assertTrue(overlaps(b, a))

    def test_conflicts_are_reported_per_pair(self):
        candidate = [meeting(1, "08:00", "12:00", label="NEW")]
        committed = [
            meeting(1, "08:00", "09:00", label="X"),
            meeting(1, "11:00", "13:00", label="Y"),
            meeting(2, "08:00", "12:00", label="Z"),
        ]
        pairs = detect_conflicts(candidate, committed)
        self.assertEqual([p.committed.label for p in pairs], ["X", "Y"])
        self.assertEqual(
            pairs[0].describe(),
            "Schedule conflict: NEW Monday 08:00-12:00 overlaps X Monday 08:00-09:00",
        )

    def test_no_conflicts_for_empty_inputs(self):
        self.assertEqual(detect_conflicts([], [meeting(1, "08:00", "09:00")]), [])
        self.assertEqual(detect_schedule_conflicts([]), [])


class WeeklyScheduleTests(SimpleTestCase):
    def test_back_to_back_blocks_of_one_group_are_merged(self):
        merged = merge_consecutive(
            [meeting(1, "10:00", "12:00", group_id=1), meeting(1, "08:00", "10:00", group_id=1)]
        )
        self.assertEqual(len(merged), 1)
        self.assertEqual((merged[0].start_minute, merged[0].end_minute), (480, 720))

    def test_different_groups_are_not_merged(self):
        merged = merge_consecutive(
            [meeting(1, "08:00", "10:00", group_id=1), meeting(1, "10:00", "12:00", group_id=2)]
        )
        self.assertEqual(len(merged), 2)

    def test_schedule_reports_conflicts_as_warnings(self):
        schedule = build_weekly_schedule(
            [
                meeting(1, "08:00", "10:00", group_id=1, label="MAT-A"),
                meeting(1, "09:00", "11:00", group_id=2, label="PHY-B"),
                meeting(3, "14:00", "16:00", group_id=1, label="MAT-A"),
            ]
        )
        self.assertTrue(schedule["has_conflicts"])
        self.assertEqual(
            schedule["conflicts"],
            ["Schedule conflict: MAT-A Monday 08:00-10:00 overlaps PHY-B Monday 09:00-11:00"],
        )
        self.assertEqual([d["day_name"] for d in schedule["days"]], ["Monday", "Wednesday"])
        self.assertEqual(schedule["days"][1]["classes"][0]["room"], "TBA")
