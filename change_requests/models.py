from django.conf import settings
from django.db import models
from django.utils import timezone


class ChangeWindow(models.Model):
    CREATION = "CREATION"
    APPROVAL = "APPROVAL"
    TYPE_CHOICES = [(CREATION, "CREATION"), (APPROVAL, "APPROVAL")]

    term = models.ForeignKey("academics.Term", on_delete=models.CASCADE, related_name="change_windows")
    window_type = models.CharField(max_length=16, choices=TYPE_CHOICES)
    starts_at = models.DateTimeField()
    ends_at = models.DateTimeField()
    active = models.BooleanField(default=True)

    def is_open(self, at=None):
        at = at or timezone.now()
        return self.active and self.starts_at <= at <= self.ends_at


class FilingCounter(models.Model):
    year = models.PositiveIntegerField(unique=True)
    sequence = models.PositiveIntegerField(default=0)


class ChangeRequest(models.Model):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    STATUS_CHOICES = [(PENDING, "PENDING"), (APPROVED, "APPROVED"), (REJECTED, "REJECTED")]
    TERMINAL_STATUSES = {APPROVED, REJECTED}

    LOW = "LOW"
    NORMAL = "NORMAL"
    HIGH = "HIGH"
    URGENT = "URGENT"
    PRIORITY_CHOICES = [(LOW, "LOW"), (NORMAL, "NORMAL"), (HIGH, "HIGH"), (URGENT, "URGENT")]

    filing_number = models.CharField(max_length=16, unique=True)
    student = models.ForeignKey("students.Student", on_delete=models.CASCADE, related_name="change_requests")
    term = models.ForeignKey("academics.Term", on_delete=models.PROTECT, related_name="change_requests")
    source_group = models.ForeignKey(
        "academics.CourseGroup", on_delete=models.PROTECT, related_name="outgoing_change_requests"
    )
    target_group = models.ForeignKey(
        "academics.CourseGroup", on_delete=models.PROTECT, related_name="incoming_change_requests"
    )
    assigned_program = models.ForeignKey(
        "academics.Program", on_delete=models.PROTECT, related_name="change_requests"
    )
    routing_rule = models.CharField(max_length=32)
    routing_reason = models.CharField(max_length=255, blank=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=PENDING)
    priority = models.CharField(max_length=16, choices=PRIORITY_CHOICES, default=NORMAL)
    reason = models.TextField()
    observations = models.TextField(blank=True)
    review_observations = models.TextField(blank=True)
    resolution_reason = models.TextField(blank=True)
    resolved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="resolved_change_requests",
    )
    created_at = models.DateTimeField(default=timezone.now)
    resolved_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        permissions = [("review_changerequest", "Can approve or reject change requests")]

    def __str__(self):
        return self.filing_number

    @property
    def is_terminal(self):
        return self.status in self.TERMINAL_STATUSES


class ChangeRequestEvent(models.Model):
    change_request = models.ForeignKey(ChangeRequest, on_delete=models.CASCADE, related_name="events")
    from_status = models.CharField(max_length=16, blank=True)
    to_status = models.CharField(max_length=16)
    actor = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL)
    reason = models.TextField(blank=True)
    observations = models.TextField(blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["created_at", "id"]
