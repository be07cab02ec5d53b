from django.core.cache import cache
from django.test import TestCase
from django.urls import reverse

from academics.models import Enrollment
from .fixtures import enroll, make_course, make_group, make_student, make_term, make_user


class AcademicsViewTests(TestCase):
    def setUp(self):
        cache.clear()
        self.term = make_term()
        self.user = make_user("ana")
        self.student = make_student(user=self.user)
        math = make_course("MAT101")
        enroll(self.student, make_group(math, self.term, "A", slots=[(1, "08:00", "10:00")]))
        enroll(self.student, make_group(make_course("PHY101"), self.term, "A"), Enrollment.PASSED, grade=4.2)

    def test_own_schedule(self):
        self.client.force_login(self.user)
        data = self.client.get(reverse("academics:schedule")).json()
        self.assertEqual(data["student_id"], self.student.id)
        self.assertEqual(data["days"][0]["classes"][0]["label"], "MAT101-A")

    def test_own_risk(self):
        self.client.force_login(self.user)
        data = self.client.get(reverse("academics:risk")).json()
        self.assertEqual(data["band"], "GREEN")
        self.assertEqual(data["courses"]["passed"][0]["course_code"], "PHY101")

    def test_other_students_risk_is_forbidden(self):
        other = make_student("S002")
        self.client.force_login(self.user)
        response = self.client.get(reverse("academics:student_risk", args=[other.id]))
        self.assertEqual(response.status_code, 403)

    def test_reviewer_reads_any_student_and_statistics(self):
        self.client.force_login(make_user("staff", staff=True))
        response = self.client.get(reverse("academics:student_risk", args=[self.student.id]))
        self.assertEqual(response.json()["student_id"], self.student.id)
        self.assertEqual(self.client.get(reverse("academics:statistics")).json()["total_students"], 1)
        response = self.client.get(reverse("academics:student_risk", args=[99999]))
        self.assertEqual(response.status_code, 404)

    def test_statistics_are_for_reviewers_only(self):
        self.client.force_login(self.user)
        self.assertEqual(self.client.get(reverse("academics:statistics")).status_code, 403)

    def test_account_without_student_profile(self):
        self.client.force_login(make_user("nobody"))
        self.assertEqual(self.client.get(reverse("academics:schedule")).status_code, 403)
