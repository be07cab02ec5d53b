from django.test import SimpleTestCase

from academics.risk import (
    GREEN,
    RED,
    REDUCE_LOAD,
    TUTORING,
    YELLOW,
    CourseRecord,
    calculate_risk,
    classify,
    course_color,
    find_anomalies,
)


class CalculateRiskTests(SimpleTestCase):
    def test_credit_weighted_gpa(self):
        report = calculate_risk(
            [
                CourseRecord("MAT101", 3, "PASSED", 4.0),
                CourseRecord("PHY101", 4, "PASSED", 3.5),
            ]
        )
        self.assertEqual(report.gpa, 3.71)
        self.assertEqual(report.completion_rate, 1.0)
        self.assertEqual(report.band, GREEN)
        self.assertEqual(report.risk_level, "low")

    def test_repeated_failures_are_red(self):
        records = [CourseRecord(f"F{i}", 2, "FAILED", 2.0) for i in range(3)]
        records += [CourseRecord(f"P{i}", 3, "PASSED", 3.6) for i in range(2)]
        report = calculate_risk(records, student_id=7)
        self.assertEqual(report.gpa, 2.8)
        self.assertEqual(report.completion_rate, 0.5)
        self.assertEqual(report.failed_course_count, 3)
        self.assertEqual(report.band, RED)
        self.assertIn(TUTORING, report.recommendations)
        self.assertIn(REDUCE_LOAD, report.recommendations)
        self.assertEqual(report.as_dict()["student_id"], 7)

    def test_single_failure_is_yellow(self):
        report = calculate_risk(
            [
                CourseRecord("A", 3, "PASSED", 4.5),
                CourseRecord("B", 3, "PASSED", 4.5),
                CourseRecord("C", 3, "PASSED", 4.5),
                CourseRecord("D", 3, "PASSED", 4.5),
                CourseRecord("E", 3, "PASSED", 4.5),
                CourseRecord("F", 1, "FAILED", 2.5),
            ]
        )
        self.assertEqual(report.band, YELLOW)

    def test_no_history_is_green_with_empty_metrics(self):
        report = calculate_risk([CourseRecord("NEW1", 3, "ENROLLED")])
        self.assertIsNone(report.gpa)
        self.assertIsNone(report.completion_rate)
        self.assertEqual(report.current_course_count, 1)
        self.assertEqual(report.band, GREEN)

    def test_cancelled_enrollments_are_ignored(self):
        report = calculate_risk([CourseRecord("X", 3, "CANCELLED")])
        self.assertEqual(report.total_credits, 0)


class ClassifyTests(SimpleTestCase):
    def test_thresholds(self):
        self.assertEqual(classify(2.99, 1.0, 0), RED)
        self.assertEqual(classify(4.0, 0.59, 0), RED)
        self.assertEqual(classify(3.49, 1.0, 0), YELLOW)
        self.assertEqual(classify(4.0, 0.79, 0), YELLOW)
        self.assertEqual(classify(3.5, 0.8, 0), GREEN)
        self.assertEqual(classify(None, None, 0), GREEN)


class AnomalyTests(SimpleTestCase):
    def test_inconsistent_records_are_flagged(self):
        warnings = find_anomalies(
            [
                CourseRecord("A", 3, "PASSED", 2.0),
                CourseRecord("B", 3, "FAILED", 4.0),
                CourseRecord("C", 3, "ENROLLED", 3.0),
                CourseRecord("D", 3, "PASSED", 7.0),
                CourseRecord("E", 3, "PASSED", 4.0),
                CourseRecord("E", 3, "PASSED", 4.2),
            ]
        )
        self.assertEqual(len(warnings), 5)
        self.assertTrue(any("outside" in w for w in warnings))
        self.assertIn("Duplicate passed courses: E", warnings)

    def test_clean_history_has_no_warnings(self):
        self.assertEqual(find_anomalies([CourseRecord("A", 3, "PASSED", 4.0)]), [])

    def test_course_colors(self):
        self.assertEqual(course_color("PASSED"), "green")
        self.assertEqual(course_color("ENROLLED"), "yellow")
        self.assertEqual(course_color("FAILED"), "red")
        self.assertIsNone(course_color("CANCELLED"))
