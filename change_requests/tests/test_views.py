import json

from django.test import TestCase, override_settings
from django.urls import reverse

from academics.tests.fixtures import enroll, make_course, make_group, make_program, make_student, make_term, make_user
from change_requests.models import ChangeRequest


@override_settings(AUDIT_ASYNC=False)
class ChangeRequestViewTests(TestCase):
    def setUp(self):
        self.term = make_term()
        self.program = make_program("SYS")
        self.user = make_user("ana")
        self.student = make_student(program=self.program, user=self.user)
        self.reviewer = make_user("reviewer", staff=True)
        math = make_course("MAT101", program=self.program)
        self.source = make_group(math, self.term, "A", slots=[(1, "08:00", "10:00")])
        self.target = make_group(math, self.term, "B", slots=[(2, "08:00", "10:00")])
        enroll(self.student, self.source)

    def post(self, url, data):
        return self.client.post(url, data=json.dumps(data), content_type="application/json")

    def payload(self, **overrides):
        data = {"source_group_id": self.source.id, "target_group_id": self.target.id, "reason": "Work"}
        data.update(overrides)
        return data

    def file(self):
        self.client.force_login(self.user)
        response = self.post(reverse("change_requests:collection"), self.payload())
        self.assertEqual(response.status_code, 201)
        return response.json()

    def test_login_required(self):
        response = self.client.get(reverse("change_requests:collection"))
        self.assertEqual(response.status_code, 302)

    def test_validate_endpoint(self):
        self.client.force_login(self.user)
        response = self.post(reverse("change_requests:validate"), self.payload())
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"is_valid": True, "errors": [], "warnings": []})
        response = self.post(reverse("change_requests:validate"), self.payload(target_group_id=self.source.id))
        self.assertFalse(response.json()["is_valid"])

    def test_bad_input_is_a_400(self):
        self.client.force_login(self.user)
        response = self.post(reverse("change_requests:validate"), self.payload(target_group_id="abc"))
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["errors"], ["target_group_id must be an integer"])

    def test_create_list_and_detail(self):
        created = self.file()
        self.assertEqual(created["status"], ChangeRequest.PENDING)
        listing = self.client.get(reverse("change_requests:collection")).json()
        self.assertEqual([row["id"] for row in listing["results"]], [created["id"]])
        detail = self.client.get(reverse("change_requests:detail", args=[created["id"]])).json()
        self.assertEqual(len(detail["available_transitions"]), 2)
        self.assertEqual(detail["events"][0]["to_status"], ChangeRequest.PENDING)

    def test_create_validation_failure(self):
        self.client.force_login(self.user)
        response = self.post(reverse("change_requests:collection"), self.payload(reason=""))
        self.assertEqual(response.status_code, 400)
        self.assertFalse(ChangeRequest.objects.exists())

    def test_create_routing_failure(self):
        self.student.program = None
        self.student.save()
        art = make_course("ART100")
        source = make_group(art, self.term, "A")
        target = make_group(art, self.term, "B")
        enroll(self.student, source)
        self.client.force_login(self.user)
        response = self.post(
            reverse("change_requests:collection"),
            self.payload(source_group_id=source.id, target_group_id=target.id),
        )
        self.assertEqual(response.status_code, 422)

    def test_students_cannot_review(self):
        created = self.file()
        response = self.post(reverse("change_requests:approve", args=[created["id"]]), {})
        self.assertEqual(response.status_code, 403)

    def test_other_students_cannot_see_request(self):
        created = self.file()
        intruder = make_user("intruder")
        make_student("S777", user=intruder)
        self.client.force_login(intruder)
        response = self.client.get(reverse("change_requests:detail", args=[created["id"]]))
        self.assertEqual(response.status_code, 403)

    def test_reviewer_approves_once(self):
        created = self.file()
        self.client.force_login(self.reviewer)
        url = reverse("change_requests:approve", args=[created["id"]])
        response = self.post(url, {"observations": "fine"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], ChangeRequest.APPROVED)
        response = self.post(url, {})
        self.assertEqual(response.status_code, 409)

    def test_reviewer_queue(self):
        created = self.file()
        self.client.force_login(self.reviewer)
        response = self.client.get(reverse("change_requests:collection"), {"program_id": self.program.id})
        self.assertEqual([row["id"] for row in response.json()["results"]], [created["id"]])

    def test_reviewer_queue_rejects_non_numeric_filters(self):
        self.client.force_login(self.reviewer)
        url = reverse("change_requests:collection")
        for name in ("program_id", "student_id", "term_id"):
            response = self.client.get(url, {name: "abc"})
            self.assertEqual(response.status_code, 400)
            self.assertEqual(response.json()["errors"], [f"{name} must be an integer"])

    def test_reject_requires_reason(self):
        created = self.file()
        self.client.force_login(self.reviewer)
        url = reverse("change_requests:reject", args=[created["id"]])
        self.assertEqual(self.post(url, {}).status_code, 400)
        response = self.post(url, {"resolution_reason": "Lab is full"})
        self.assertEqual(response.json()["resolution_reason"], "Lab is full")

    def test_unknown_request(self):
        self.client.force_login(self.reviewer)
        self.assertEqual(self.client.get(reverse("change_requests:detail", args=[999])).status_code, 404)
        self.assertEqual(self.post(reverse("change_requests:approve", args=[999]), {}).status_code, 404)
