from django.db import models


class AuditEvent(models.Model):
    CREATE = "CREATE"
    APPROVE = "APPROVE"
    REJECT = "REJECT"
    EVENT_CHOICES = [(CREATE, "CREATE"), (APPROVE, "APPROVE"), (REJECT, "REJECT")]

    event_type = models.CharField(max_length=16, choices=EVENT_CHOICES)
    change_request_id = models.PositiveIntegerField(db_index=True)
    actor_id = models.PositiveIntegerField(null=True, blank=True)
    details = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]
