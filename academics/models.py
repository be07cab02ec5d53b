from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F, Q
from django.utils import timezone

DAY_CHOICES = [
    (1, "Monday"),
    (2, "Tuesday"),
    (3, "Wednesday"),
    (4, "Thursday"),
    (5, "Friday"),
    (6, "Saturday"),
    (7, "Sunday"),
]


class Term(models.Model):
    code = models.CharField(max_length=32, unique=True)
    name = models.CharField(max_length=128)
    start_date = models.DateField()
    end_date = models.DateField()
    is_active = models.BooleanField(default=False)
    allows_change_requests = models.BooleanField(default=False)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["is_active"],
                condition=Q(is_active=True),
                name="academics_single_active_term",
            ),
        ]

    def __str__(self):
        return self.code

    @classmethod
    def active(cls):
        return cls.objects.filter(is_active=True).first()


class Program(models.Model):
    code = models.CharField(max_length=32, unique=True)
    name = models.CharField(max_length=200)
    faculty = models.CharField(max_length=128, blank=True)
    is_active = models.BooleanField(default=True)

    def __str__(self):
        return self.code


class Course(models.Model):
    code = models.CharField(max_length=32, unique=True)
    name = models.CharField(max_length=200)
    credits = models.PositiveSmallIntegerField(default=0)
    is_active = models.BooleanField(default=True)

    def __str__(self):
        return self.code


class ProgramCourse(models.Model):
    program = models.ForeignKey(Program, on_delete=models.CASCADE, related_name="course_links")
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name="program_links")
    is_mandatory = models.BooleanField(default=False)
    recommended_term = models.PositiveSmallIntegerField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = [("program", "course")]


class CourseGroup(models.Model):
    course = models.ForeignKey(Course, on_delete=models.PROTECT, related_name="groups")
    term = models.ForeignKey(Term, on_delete=models.PROTECT, related_name="groups")
    group_label = models.CharField(max_length=32)
    capacity = models.PositiveIntegerField()
    # Cached counter; the live ENROLLED count is authoritative.
    current_enrollment_count = models.PositiveIntegerField(default=0)
    classroom = models.CharField(max_length=64, blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        unique_together = [("course", "term", "group_label")]

    def __str__(self):
        return f"{self.course.code}-{self.group_label} ({self.term.code})"

    def live_enrollment_count(self):
        return self.enrollments.filter(status=Enrollment.ENROLLED).count()

    def refresh_enrollment_count(self):
        """Recompute the cached counter from live rows; returns True if it was stale."""
        live = self.live_enrollment_count()
        if live == self.current_enrollment_count:
            return False
        self.current_enrollment_count = live
        self.save(update_fields=["current_enrollment_count"])
        return True


class WeeklySlot(models.Model):
    group = models.ForeignKey(CourseGroup, on_delete=models.CASCADE, related_name="slots")
    day_of_week = models.PositiveSmallIntegerField(choices=DAY_CHOICES)
    start_minute = models.PositiveSmallIntegerField()
    end_minute = models.PositiveSmallIntegerField()
    room = models.CharField(max_length=64, blank=True)

    class Meta:
        ordering = ["day_of_week", "start_minute"]
        constraints = [
            models.CheckConstraint(
                condition=Q(start_minute__lt=F("end_minute")),
                name="academics_slot_starts_before_end",
            ),
            models.CheckConstraint(
                condition=Q(end_minute__lte=1440),
                name="academics_slot_ends_within_day",
            ),
            models.CheckConstraint(
                condition=Q(day_of_week__gte=1, day_of_week__lte=7),
                name="academics_slot_iso_weekday",
            ),
        ]

    def clean(self):
        if self.start_minute is not None and self.end_minute is not None:
            if self.start_minute >= self.end_minute:
                raise ValidationError("A class meeting must start before it ends.")


class Enrollment(models.Model):
    ENROLLED = "ENROLLED"
    CANCELLED = "CANCELLED"
    PASSED = "PASSED"
    FAILED = "FAILED"
    STATUS_CHOICES = [
        (ENROLLED, "ENROLLED"),
        (CANCELLED, "CANCELLED"),
        (PASSED, "PASSED"),
        (FAILED, "FAILED"),
    ]

    student = models.ForeignKey("students.Student", on_delete=models.CASCADE, related_name="enrollments")
    group = models.ForeignKey(CourseGroup, on_delete=models.PROTECT, related_name="enrollments")
    term = models.ForeignKey(Term, on_delete=models.PROTECT, related_name="enrollments")
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=ENROLLED)
    grade = models.DecimalField(max_digits=4, decimal_places=2, null=True, blank=True)
    enrolled_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["student", "group"],
                condition=Q(status__in=["ENROLLED", "PASSED"]),
                name="academics_single_open_enrollment_per_group",
            ),
        ]
