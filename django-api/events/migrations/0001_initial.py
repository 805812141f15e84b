import uuid

import django.db.models.deletion
from django.db import migrations, models

ACTIVITY_TYPES = [
    ("INDIVIDUAL_LESSON", "Individual Lesson"),
    ("GROUP_LESSON", "Group Lesson"),
    ("LEISURE_GROUP", "Leisure Group"),
    ("OFFSITE_EVENT", "Offsite Event"),
    ("PEDAGOGICAL_CONSILIUM", "Pedagogical Consilium"),
    ("TEACHERS_GENERAL_MEETING", "Teachers General Meeting"),
    ("PSYCHOLOGIST_SESSION", "Psychologist Session"),
]
EVENT_STATUSES = [
    ("PLANNED", "Planned"),
    ("COMPLETED", "Completed"),
    ("CANCELED", "Canceled"),
]
PARTICIPANT_ROLES = [
    ("STUDENT", "Student"),
    ("TEACHER", "Teacher"),
    ("CURATOR", "Curator"),
    ("PSYCHOLOGIST", "Psychologist"),
    ("PARENT", "Parent"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="CancelReason",
            fields=[
                ("code", models.CharField(max_length=64, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("sort_order", models.PositiveIntegerField(default=0)),
                ("is_active", models.BooleanField(default=True)),
            ],
            options={"ordering": ["sort_order", "code"]},
        ),
        migrations.CreateModel(
            name="Person",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                ("full_name", models.CharField(max_length=255)),
                ("role", models.CharField(choices=PARTICIPANT_ROLES, max_length=32)),
                ("telegram_enabled", models.BooleanField(default=False)),
                ("telegram_chat_id", models.CharField(blank=True, max_length=64, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={"ordering": ["full_name"]},
        ),
        migrations.CreateModel(
            name="Subject",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                ("name", models.CharField(max_length=255, unique=True)),
                ("is_active", models.BooleanField(default=True)),
            ],
            options={"ordering": ["name"]},
        ),
        migrations.CreateModel(
            name="Event",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                ("title", models.CharField(max_length=255)),
                ("subject", models.CharField(blank=True, max_length=255, null=True)),
                ("activity_type", models.CharField(choices=ACTIVITY_TYPES, max_length=32)),
                (
                    "status",
                    models.CharField(choices=EVENT_STATUSES, default="PLANNED", max_length=16),
                ),
                ("planned_start_at", models.DateTimeField()),
                ("planned_end_at", models.DateTimeField()),
                ("fact_start_at", models.DateTimeField(blank=True, null=True)),
                ("fact_end_at", models.DateTimeField(blank=True, null=True)),
                ("planned_hours", models.PositiveIntegerField()),
                ("billable_hours", models.PositiveIntegerField(default=0)),
                ("cancel_comment", models.TextField(blank=True, null=True)),
                ("completion_comment", models.TextField(blank=True, null=True)),
                ("location", models.CharField(blank=True, max_length=255, null=True)),
                ("notes", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "cancel_reason",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="events",
                        to="events.cancelreason",
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="created_events",
                        to="events.person",
                    ),
                ),
            ],
            options={
                "ordering": ["planned_start_at"],
                "indexes": [
                    models.Index(fields=["planned_start_at"], name="event_planned_start_idx"),
                    models.Index(
                        fields=["status", "activity_type", "planned_start_at"],
                        name="event_occupancy_idx",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="EventParticipant",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                ("role", models.CharField(choices=PARTICIPANT_ROLES, max_length=32)),
                ("position", models.PositiveIntegerField(default=0)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="participants",
                        to="events.event",
                    ),
                ),
                (
                    "person",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="participations",
                        to="events.person",
                    ),
                ),
            ],
            options={
                "ordering": ["position"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("event", "person", "role"), name="unique_event_participant"
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="GuardianLink",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                (
                    "parent",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="student_links",
                        to="events.person",
                    ),
                ),
                (
                    "student",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="parent_links",
                        to="events.person",
                    ),
                ),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(
                        fields=("parent", "student"), name="unique_guardian_link"
                    )
                ],
            },
        ),
    ]
