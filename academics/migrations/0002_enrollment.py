import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("academics", "0001_initial"),
        ("students", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Enrollment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("ENROLLED", "ENROLLED"),
                            ("CANCELLED", "CANCELLED"),
                            ("PASSED", "PASSED"),
                            ("FAILED", "FAILED"),
                        ],
                        default="ENROLLED",
                        max_length=16,
                    ),
                ),
                ("grade", models.DecimalField(blank=True, decimal_places=2, max_digits=4, null=True)),
                ("enrolled_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "group",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="enrollments",
                        to="academics.coursegroup",
                    ),
                ),
                (
                    "student",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="enrollments",
                        to="students.student",
                    ),
                ),
                (
                    "term",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="enrollments",
                        to="academics.term",
                    ),
                ),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("status__in", ["ENROLLED", "PASSED"])),
                        fields=("student", "group"),
                        name="academics_single_open_enrollment_per_group",
                    )
                ],
            },
        ),
    ]
