from datetime import date

from django.test import SimpleTestCase, override_settings

from academics.models import Term
from change_requests.models import ChangeRequest
from change_requests.priority import calculate_priority, is_add_drop_period


@override_settings(CHANGE_REQUEST_GRADUATING_SEMESTER=10, CHANGE_REQUEST_ADD_DROP_DAYS=14)
class PriorityTests(SimpleTestCase):
    def test_graduating_and_mandatory_is_urgent(self):
        self.assertEqual(calculate_priority(10, True, True), ChangeRequest.URGENT)

    def test_add_drop_period_lowers_priority(self):
        self.assertEqual(calculate_priority(10, False, True), ChangeRequest.LOW)
        self.assertEqual(calculate_priority(3, True, True), ChangeRequest.LOW)

    def test_graduating_or_mandatory_is_high(self):
        self.assertEqual(calculate_priority(11, False, False), ChangeRequest.HIGH)
        self.assertEqual(calculate_priority(2, True, False), ChangeRequest.HIGH)

    def test_default_is_normal(self):
        self.assertEqual(calculate_priority(4, False, False), ChangeRequest.NORMAL)

    def test_add_drop_period_covers_first_days_of_term(self):
        term = Term(code="2026-1", start_date=date(2026, 2, 2), end_date=date(2026, 6, 1))
        self.assertTrue(is_add_drop_period(term, date(2026, 2, 2)))
        self.assertTrue(is_add_drop_period(term, date(2026, 2, 15)))
        self.assertFalse(is_add_drop_period(term, date(2026, 2, 16)))
        self.assertFalse(is_add_drop_period(term, date(2026, 1, 30)))
