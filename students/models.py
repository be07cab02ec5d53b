from django.db import models
from django.conf import settings


class Student(models.Model):
    code = models.CharField(max_length=32, unique=True)
    first_name = models.CharField(max_length=64)
    last_name = models.CharField(max_length=64)
    program = models.ForeignKey(
        "academics.Program",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="students",
    )
    current_semester = models.PositiveSmallIntegerField(default=1)
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="student",
    )

    def __str__(self):
        return f"{self.full_name} ({self.code})"

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()
