from django.contrib.auth.models import AnonymousUser, Permission
from django.test import TestCase

from academics.tests.fixtures import make_student, make_user
from students.permissions import can_view_student, current_student, is_reviewer


class StudentPermissionTests(TestCase):
    def setUp(self):
        self.user = make_user("ana")
        self.student = make_student(user=self.user)
        self.other = make_student("S002")

    def test_current_student(self):
        self.assertEqual(current_student(self.user), self.student)
        self.assertIsNone(current_student(AnonymousUser()))
        self.assertIsNone(current_student(make_user("nobody")))

    def test_students_see_only_themselves(self):
        self.assertTrue(can_view_student(self.user, self.student.id))
        self.assertTrue(can_view_student(self.user, str(self.student.id)))
        self.assertFalse(can_view_student(self.user, self.other.id))
        self.assertFalse(can_view_student(AnonymousUser(), self.student.id))

    def test_reviewers_see_everyone(self):
        staff = make_user("staff", staff=True)
        reviewer = make_user("reviewer")
        reviewer.user_permissions.add(Permission.objects.get(codename="review_changerequest"))
        self.assertTrue(is_reviewer(staff))
        self.assertTrue(can_view_student(staff, self.other.id))
        self.assertTrue(can_view_student(reviewer, self.other.id))
        self.assertFalse(is_reviewer(self.user))
