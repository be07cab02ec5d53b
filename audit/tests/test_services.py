from unittest.mock import patch

from django.test import TestCase, override_settings

from audit.models import AuditEvent
from audit.services import notify


class NotifyTests(TestCase):
    @override_settings(AUDIT_ASYNC=False)
    def test_records_event_inline(self):
        notify(AuditEvent.CREATE, 42, actor_id=7, details={"filing_number": "2026-000001"})
        event = AuditEvent.objects.get()
        self.assertEqual(event.change_request_id, 42)
        self.assertEqual(event.details["filing_number"], "2026-000001")

    @override_settings(AUDIT_ASYNC=True)
    @patch("audit.services.record_audit_event")
    def test_enqueues_when_async(self, task):
        notify(AuditEvent.APPROVE, 42)
        task.delay.assert_called_once_with(AuditEvent.APPROVE, 42, None, None)
        task.assert_not_called()

    @override_settings(AUDIT_ASYNC=True)
    @patch("audit.services.record_audit_event")
    def test_sink_failure_never_reaches_caller(self, task):
        task.delay.side_effect = ConnectionError("redis down")
        with self.assertLogs("audit.services", level="ERROR") as logs:
            notify(AuditEvent.REJECT, 42)
        self.assertIn("Audit notification failed", logs.output[0])
        self.assertFalse(AuditEvent.objects.exists())
