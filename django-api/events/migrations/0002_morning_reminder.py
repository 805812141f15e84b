from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("events", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="person",
            name="morning_reminder_hour",
            field=models.PositiveSmallIntegerField(blank=True, null=True),
        ),
        migrations.AddField(
            model_name="guardianlink",
            name="receives_morning_reminder",
            field=models.BooleanField(default=True),
        ),
    ]
