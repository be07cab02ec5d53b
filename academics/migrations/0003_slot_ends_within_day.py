from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("academics", "0002_enrollment"),
    ]

    operations = [
        migrations.AddConstraint(
            model_name="weeklyslot",
            constraint=models.CheckConstraint(
                condition=models.Q(("end_minute__lte", 1440)),
                name="academics_slot_ends_within_day",
            ),
        ),
    ]
